"""
Exit codes and error types for rangelog.

Every error the changelog engine raises is a CommandError carrying the
process exit code the CLI should end with, so commands never need to know
which layer an error came from.
"""
from typing import Optional

GENERAL_ERROR = 1
USAGE_ERROR = 2          # click reports bad arguments with this code

# 64-113 are free for application use
RANGE_UNRESOLVED = 64    # page bound hit before both range ends were seen
API_ERROR = 65           # the release feed failed (GitHub, fixture)
CONFIG_ERROR = 66
NETWORK_ERROR = 68
DATA_ERROR = 70          # bad version tag, unknown "from"
INTERRUPTED = 130        # Ctrl+C

# Fallbacks for exceptions that are not CommandErrors, looked up by name
EXCEPTION_EXIT_CODES = {
    'ConnectionError': NETWORK_ERROR,
    'TimeoutError': NETWORK_ERROR,
    'ValueError': DATA_ERROR,
    'JSONDecodeError': DATA_ERROR,
    'KeyboardInterrupt': INTERRUPTED,
}


def get_exit_code_for_exception(exc: BaseException) -> int:
    """Exit code for ``exc``: its own for CommandErrors, else by class name."""
    if isinstance(exc, CommandError):
        return exc.exit_code
    return EXCEPTION_EXIT_CODES.get(type(exc).__name__, GENERAL_ERROR)


class CommandError(Exception):
    """Base error carrying the exit code to end the command with."""
    def __init__(self, message: str, exit_code: int = GENERAL_ERROR):
        super().__init__(message)
        self.exit_code = exit_code


class InvalidVersionError(CommandError, ValueError):
    """
    Raised when a range endpoint is not a usable version.

    Covers both a tag that does not look like ``major.minor.patch[-pre]``
    and a ``from`` tag that is missing from the fetched releases.
    """
    def __init__(self, tag: str, message: Optional[str] = None):
        super().__init__(message or f"Invalid Version: {tag}", DATA_ERROR)
        self.tag = tag


class APIError(CommandError):
    """An external service call failed."""
    def __init__(self, message: str):
        super().__init__(message, API_ERROR)


class FetchFailure(APIError):
    """Raised when a release page cannot be retrieved from the feed."""
    def __init__(self, message: str, status_code: Optional[int] = None):
        super().__init__(message)
        self.status_code = status_code


class RangeUnresolvedError(CommandError):
    """Raised when the page bound is hit before both range endpoints show up."""
    def __init__(self, message: str, pages_fetched: int = 0):
        super().__init__(message, RANGE_UNRESOLVED)
        self.pages_fetched = pages_fetched


class ConfigError(CommandError):
    """A configuration file could not be read or written."""
    def __init__(self, message: str):
        super().__init__(message, CONFIG_ERROR)
