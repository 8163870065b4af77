"""Domain errors raised by the rules controller."""

from __future__ import annotations


class RuleRequestError(Exception):
    """Base class for every failure surfaced by a rule request.

    Each error carries the identifier (rule id or folder path) that
    triggered it, a stable machine-readable code and the HTTP status an
    API layer should answer with.
    """

    code = "ruleRequestError"
    status_code = 500
    message = "The rule request failed"

    def __init__(self, identifier: object = None):
        self.identifier = "" if identifier is None else str(identifier)
        detail = f"{self.message}: {self.identifier}" if self.identifier else self.message
        super().__init__(detail)

    def to_dict(self) -> dict[str, object]:
        """Serialize the error for API and CLI output."""
        return {
            "error": self.code,
            "message": str(self),
            "identifier": self.identifier,
            "statusCode": self.status_code,
        }


class RulesFolderNotFoundError(RuleRequestError):
    code = "rulesFolderNotFound"
    status_code = 404
    message = "The requested folder couldn't be found"


class RulesRootFolderNotCreatableError(RuleRequestError):
    code = "rulesRootFolderNotCreatable"
    status_code = 500
    message = "The rules root folder couldn't be found nor created"


class RuleNotFoundError(RuleRequestError):
    code = "ruleNotFound"
    status_code = 404
    message = "The requested rule couldn't be found"


class RuleNotReadableError(RuleRequestError):
    code = "ruleNotReadable"
    status_code = 403
    message = "The requested rule isn't readable"


class RuleNotWritableError(RuleRequestError):
    code = "ruleNotWritable"
    status_code = 403
    message = "The requested rule isn't writable"


class RulesDownloadError(RuleRequestError):
    """Fetching or extracting a rules archive failed."""

    code = "rulesDownloadFailed"
    status_code = 502
    message = "The rules archive couldn't be downloaded or extracted"


__all__ = [
    "RuleRequestError",
    "RulesFolderNotFoundError",
    "RulesRootFolderNotCreatableError",
    "RuleNotFoundError",
    "RuleNotReadableError",
    "RuleNotWritableError",
    "RulesDownloadError",
]
