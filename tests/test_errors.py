"""Tests for the rule request error taxonomy."""

import pytest

from rulestore.errors import (
    RuleNotFoundError,
    RuleNotReadableError,
    RuleNotWritableError,
    RuleRequestError,
    RulesDownloadError,
    RulesFolderNotFoundError,
    RulesRootFolderNotCreatableError,
)


@pytest.mark.parametrize(
    "error_class, code, status_code",
    [
        (RulesFolderNotFoundError, "rulesFolderNotFound", 404),
        (RulesRootFolderNotCreatableError, "rulesRootFolderNotCreatable", 500),
        (RuleNotFoundError, "ruleNotFound", 404),
        (RuleNotReadableError, "ruleNotReadable", 403),
        (RuleNotWritableError, "ruleNotWritable", 403),
        (RulesDownloadError, "rulesDownloadFailed", 502),
    ],
)
def test_error_codes(error_class, code, status_code):
    error = error_class("my-rule")

    assert isinstance(error, RuleRequestError)
    assert error.identifier == "my-rule"
    assert error.to_dict() == {
        "error": code,
        "message": str(error),
        "identifier": "my-rule",
        "statusCode": status_code,
    }


def test_message_includes_identifier():
    assert str(RuleNotFoundError("abc")).endswith(": abc")


def test_identifier_optional():
    error = RulesRootFolderNotCreatableError()

    assert error.identifier == ""
    assert str(error) == RulesRootFolderNotCreatableError.message
