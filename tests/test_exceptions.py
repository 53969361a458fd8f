"""Tests for the exception hierarchy: exit codes and error types."""

import pytest

from mataho_cli.exceptions import (
    AlreadyMemberError,
    AmbiguousMatchError,
    CliError,
    DuplicateNameError,
    NotFoundError,
    NotMemberError,
    PersistenceError,
    RemoteError,
    SetupError,
    UnsupportedActionError,
)


@pytest.mark.parametrize(
    "cls,error_type",
    [
        (NotFoundError, "not_found"),
        (AmbiguousMatchError, "ambiguous"),
        (DuplicateNameError, "duplicate_name"),
        (AlreadyMemberError, "already_member"),
        (NotMemberError, "not_member"),
        (UnsupportedActionError, "unsupported_action"),
        (PersistenceError, "persistence"),
        (RemoteError, "remote"),
    ],
)
def test_taxonomy(cls, error_type):
    err = cls("msg")
    assert isinstance(err, CliError)
    assert err.exit_code == 1
    assert err.error_type == error_type
    assert str(err) == "msg"


def test_setup_error_exit_code():
    assert SetupError("x").exit_code == 2
    assert issubclass(SetupError, CliError)


def test_ambiguous_carries_labels():
    assert AmbiguousMatchError("x", labels=("a", "b")).labels == ["a", "b"]


def test_unsupported_carries_action():
    err = UnsupportedActionError("x", action="close", labels=["Gate"])
    assert err.action == "close"
    assert err.labels == ["Gate"]


def test_remote_status():
    assert RemoteError("x", status=503).status == 503
    assert RemoteError("x").status is None
