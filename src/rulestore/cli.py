"""Command-line interface for RuleStore."""

import asyncio
import json
import sys
from pathlib import Path

import typer
from rich.console import Console
from rich.table import Table
from rich.tree import Tree

from .archive import RulesDownloader
from .config import CONFIG_FILE_NAME, DEFAULT_CONFIG, Config, configure_logging
from .controller import RulesController
from .errors import (
    RuleNotFoundError,
    RuleNotReadableError,
    RuleNotWritableError,
    RuleRequestError,
    RulesFolderNotFoundError,
)
from .models import DirectoryTree

# Exit codes
EXIT_OK = 0
EXIT_NOT_FOUND = 1
EXIT_BAD_USAGE = 2
EXIT_FORBIDDEN = 3
EXIT_IO_ERROR = 4

app = typer.Typer()
console = Console()


def get_config(path: Path | None) -> Config:
    """Load the project configuration or exit with EXIT_BAD_USAGE."""
    config_path = path / CONFIG_FILE_NAME if path else Path.cwd() / CONFIG_FILE_NAME
    if not config_path.exists():
        console.print(f"[red]RuleStore project not found at {config_path.parent}[/red]")
        raise typer.Exit(EXIT_BAD_USAGE)

    try:
        config = Config(config_path)
    except ValueError as e:
        console.print(f"[red]Configuration error: {e}[/red]")
        raise typer.Exit(EXIT_BAD_USAGE) from e

    configure_logging(config)
    return config


def get_controller(path: Path | None) -> RulesController:
    """Get controller instance from configuration."""
    return RulesController.from_config(get_config(path))


def exit_code_for(error: RuleRequestError) -> int:
    """Map a rule request error to a process exit code."""
    if isinstance(error, (RuleNotFoundError, RulesFolderNotFoundError)):
        return EXIT_NOT_FOUND
    if isinstance(error, (RuleNotReadableError, RuleNotWritableError)):
        return EXIT_FORBIDDEN
    return EXIT_IO_ERROR


def fail(action: str, error: Exception) -> typer.Exit:
    """Report a failure and build the matching exit."""
    console.print(f"[red]Failed to {action}: {error}[/red]")
    if isinstance(error, RuleRequestError):
        return typer.Exit(exit_code_for(error))
    return typer.Exit(EXIT_IO_ERROR)


def read_body(file: Path | None) -> bytes:
    """Read a rule body from a file, or stdin when no file is given."""
    if file is not None:
        return file.read_bytes()
    return sys.stdin.buffer.read()


def render_tree(tree: DirectoryTree, branch: Tree | None = None) -> Tree:
    """Build a rich tree from a recursive directory listing."""
    if branch is None:
        branch = Tree(f"[bold blue]{tree.name}/[/bold blue]")

    for folder in tree.folders:
        render_tree(folder, branch.add(f"[blue]{folder.name}/[/blue]"))
    for file_name in tree.files:
        branch.add(file_name)

    return branch


@app.command()
def init(
    path: Path | None = typer.Option(
        None, "--path", help="Path to initialize (default: current directory)"
    ),
    force: bool = typer.Option(
        False, "--force", help="Overwrite existing configuration"
    ),
) -> None:
    """Initialize RuleStore in the current directory."""
    try:
        target_path = path or Path.cwd()
        config_path = target_path / CONFIG_FILE_NAME

        if config_path.exists() and not force:
            console.print(
                "[red]RuleStore already initialized. Use --force to overwrite.[/red]"
            )
            raise typer.Exit(EXIT_BAD_USAGE)

        target_path.mkdir(parents=True, exist_ok=True)
        config_path.write_text(DEFAULT_CONFIG, encoding="utf-8")

        controller = RulesController.from_config(Config(config_path))
        asyncio.run(controller.get_rules())

        console.print(f"[green]RuleStore initialized in {target_path}[/green]")
        console.print(f"[blue]Configuration: {config_path}[/blue]")
        console.print(f"[blue]Rules folder: {controller.rules_folder}[/blue]")

    except typer.Exit:
        raise
    except (OSError, RuleRequestError) as e:
        raise fail("initialize", e) from e


@app.command()
def tree(
    path: Path | None = typer.Option(None, "--path", help="Path to RuleStore project"),
    json_output: bool = typer.Option(False, "--json", help="Output as JSON"),
) -> None:
    """Show every folder and file under the rules folder."""
    controller = get_controller(path)

    try:
        listing = asyncio.run(controller.get_rules_all())
    except RuleRequestError as e:
        raise fail("list rules", e) from e

    if json_output:
        console.print_json(listing.model_dump_json())
    else:
        console.print(render_tree(listing))
        console.print(f"\nTotal: {listing.rule_count()} rules")


@app.command("ls")
def list_folder(
    folder: str = typer.Argument("", help="Folder relative to the rules folder"),
    path: Path | None = typer.Option(None, "--path", help="Path to RuleStore project"),
    json_output: bool = typer.Option(False, "--json", help="Output as JSON"),
) -> None:
    """List the subfolders and rules of one folder."""
    controller = get_controller(path)

    try:
        index = asyncio.run(controller.get_rules(folder))
    except RuleRequestError as e:
        raise fail(f"list '{folder}'", e) from e

    if json_output:
        console.print_json(index.model_dump_json())
        return

    table = Table(title=f"Rules in /{folder}")
    table.add_column("Name", style="cyan")
    table.add_column("Type", style="green")

    for name in index.folders:
        table.add_row(f"{name}/", "folder")
    for rule_id in index.rules:
        table.add_row(rule_id, "rule")

    console.print(table)
    console.print(f"\nTotal: {len(index.folders)} folders, {len(index.rules)} rules")


@app.command()
def show(
    rule_id: str = typer.Argument(..., help="Rule ID"),
    path: Path | None = typer.Option(None, "--path", help="Path to RuleStore project"),
) -> None:
    """Print the content of a rule."""
    controller = get_controller(path)

    async def run() -> bytes:
        accessor = await controller.rule(rule_id)
        return await accessor.get()

    try:
        content = asyncio.run(run())
    except (OSError, RuleRequestError) as e:
        raise fail(f"read rule '{rule_id}'", e) from e

    typer.echo(content, nl=False)


@app.command()
def edit(
    rule_id: str = typer.Argument(..., help="Rule ID"),
    file: Path | None = typer.Option(
        None, "--file", help="Read the new content from a file instead of stdin"
    ),
    path: Path | None = typer.Option(None, "--path", help="Path to RuleStore project"),
) -> None:
    """Replace the content of an existing rule."""
    controller = get_controller(path)

    async def run(body: bytes) -> None:
        accessor = await controller.rule(rule_id)
        await accessor.edit(body)

    try:
        asyncio.run(run(read_body(file)))
    except (OSError, RuleRequestError) as e:
        raise fail(f"edit rule '{rule_id}'", e) from e

    console.print(f"[green]Rule '{rule_id}' updated[/green]")


@app.command()
def create(
    rule_id: str = typer.Argument(..., help="Rule ID"),
    file: Path | None = typer.Option(
        None, "--file", help="Read the content from a file instead of stdin"
    ),
    path: Path | None = typer.Option(None, "--path", help="Path to RuleStore project"),
) -> None:
    """Create a rule, replacing any rule with the same ID."""
    controller = get_controller(path)

    try:
        asyncio.run(controller.create_rule(rule_id, read_body(file)))
    except (OSError, RuleRequestError) as e:
        raise fail(f"create rule '{rule_id}'", e) from e

    console.print(f"[green]Rule '{rule_id}' created[/green]")


@app.command()
def delete(
    rule_id: str = typer.Argument(..., help="Rule ID"),
    path: Path | None = typer.Option(None, "--path", help="Path to RuleStore project"),
) -> None:
    """Delete a rule."""
    controller = get_controller(path)

    async def run() -> None:
        accessor = await controller.rule(rule_id)
        await accessor.delete()

    try:
        asyncio.run(run())
    except (OSError, RuleRequestError) as e:
        raise fail(f"delete rule '{rule_id}'", e) from e

    console.print(f"[green]Rule '{rule_id}' deleted[/green]")


@app.command()
def download(
    url: str = typer.Argument(..., help="URL of a tar archive of rules"),
    insecure: bool = typer.Option(
        False, "--insecure", help="Skip TLS certificate verification"
    ),
    path: Path | None = typer.Option(None, "--path", help="Path to RuleStore project"),
    json_output: bool = typer.Option(False, "--json", help="Output as JSON"),
) -> None:
    """Import rules from a remote tar archive."""
    config = get_config(path)
    downloader = RulesDownloader.from_config(config)
    if insecure:
        downloader = RulesDownloader(verify_tls=False, timeout=config.download_timeout)
    controller = RulesController.from_config(config, downloader=downloader)

    try:
        members = asyncio.run(controller.download_rules(url))
    except RuleRequestError as e:
        raise fail(f"download rules from {url}", e) from e

    if json_output:
        console.print_json(json.dumps({"url": url, "extracted": members}))
    else:
        console.print(
            f"[green]Imported {len(members)} entries into {controller.rules_folder}[/green]"
        )


def main() -> None:
    """Main entry point."""
    app()


if __name__ == "__main__":
    main()
