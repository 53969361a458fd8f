"""
mataho-cli exception hierarchy.

All custom exceptions live here to avoid circular imports.
"""


class CliError(Exception):
    """Exit code 1 - validation, resolution, persistence, network errors."""

    exit_code = 1
    error_type = "error"


class SetupError(CliError):
    """Exit code 2 - no config, unreadable config."""

    exit_code = 2
    error_type = "setup_needed"


class HTTPError(Exception):
    """Raised by _http_request for HTTP errors that callers want to handle."""

    def __init__(self, code, reason, body, headers=None):
        self.code = code
        self.reason = reason
        self.body = body
        self.headers = headers or {}


# ---------------------------------------------------------------------------
# Resolution / group / dispatch taxonomy
# ---------------------------------------------------------------------------


class NotFoundError(CliError):
    """No device or group matches an identifier."""

    error_type = "not_found"


class AmbiguousMatchError(CliError):
    """Several fuzzy candidates tied at the top score."""

    error_type = "ambiguous"

    def __init__(self, message, labels=()):
        super().__init__(message)
        self.labels = list(labels)


class DuplicateNameError(CliError):
    error_type = "duplicate_name"


class AlreadyMemberError(CliError):
    error_type = "already_member"


class NotMemberError(CliError):
    error_type = "not_member"


class UnsupportedActionError(CliError):
    """Requested action missing from one or more target devices."""

    error_type = "unsupported_action"

    def __init__(self, message, action=None, labels=()):
        super().__init__(message)
        self.action = action
        self.labels = list(labels)


class PersistenceError(CliError):
    """Groups file could not be written."""

    error_type = "persistence"


class RemoteError(CliError):
    """Transport failure or non-success response from the gateway."""

    error_type = "remote"

    def __init__(self, message, status=None):
        super().__init__(message)
        self.status = status
