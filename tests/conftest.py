"""Shared fixtures for RuleStore tests."""

import io
import tarfile

import pytest


def make_tar(files: dict[str, str], mode: str = "w") -> bytes:
    """Build a tar archive in memory from a name -> content mapping."""
    buffer = io.BytesIO()
    with tarfile.open(fileobj=buffer, mode=mode) as tar:
        for name, content in files.items():
            data = content.encode("utf-8")
            info = tarfile.TarInfo(name)
            info.size = len(data)
            tar.addfile(info, io.BytesIO(data))
    return buffer.getvalue()


@pytest.fixture
def rules_folder(tmp_path):
    """Rules root folder that does not exist yet."""
    return tmp_path / "elastalert" / "rules"


@pytest.fixture
def rules_tar():
    """Gzipped archive holding two rules in the archive root and a nested one."""
    return make_tar(
        {
            "x.yaml": "name: x\ntype: any\n",
            "y.yaml": "name: y\ntype: frequency\n",
            "team/z.yaml": "name: z\n",
        },
        mode="w:gz",
    )


@pytest.fixture
def make_archive():
    """Factory building tar archives from a name -> content mapping."""
    return make_tar
