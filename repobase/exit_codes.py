"""
Standard exit codes and errors for repobase.

Following Unix/POSIX conventions for command-line tools.
"""
from typing import Optional

# Standard POSIX exit codes
SUCCESS = 0              # Successful termination
GENERAL_ERROR = 1        # General errors
USAGE_ERROR = 2          # Misuse of shell command (wrong arguments, etc.)

# Application-specific exit codes (64-113 are typically available)
NO_REMOTE_FOUND = 64     # No git remote matches / no remotes configured
API_ERROR = 65           # GitLab API call failed
CONFIG_ERROR = 66        # Configuration file error
PERSISTENCE_ERROR = 67   # Writing the resolution to git config failed
DATA_ERROR = 70          # Malformed repository name or URL
INTERRUPTED = 130        # Terminated by Ctrl+C (SIGINT) or cancelled prompt


class CommandError(Exception):
    """
    Exception that commands can raise to indicate specific exit codes.
    """
    def __init__(self, message: str, exit_code: int = GENERAL_ERROR):
        super().__init__(message)
        self.exit_code = exit_code


class MalformedReferenceError(CommandError):
    """Raised when a full name or URL cannot be split into host/owner/name."""
    def __init__(self, message: str):
        super().__init__(message, DATA_ERROR)


class RemoteNotFoundError(CommandError):
    """Raised when no configured git remote points at a repository."""
    def __init__(self, message: str = "not found"):
        super().__init__(message, NO_REMOTE_FOUND)


class NoRemotesError(CommandError):
    """Raised when the working copy has no usable git remotes."""
    def __init__(self, message: str = "no git remotes found"):
        super().__init__(message, NO_REMOTE_FOUND)


class PersistenceError(CommandError):
    """Raised when a resolution tag cannot be written to git config."""
    def __init__(self, message: str):
        super().__init__(message, PERSISTENCE_ERROR)


class PromptCancelledError(CommandError):
    """Raised when the user aborts the interactive selection."""
    def __init__(self, message: str = "selection cancelled"):
        super().__init__(message, INTERRUPTED)


class APIError(CommandError):
    """Raised when a GitLab API call fails."""
    def __init__(self, message: str, status_code: Optional[int] = None):
        super().__init__(message, API_ERROR)
        self.status_code = status_code


class ConfigError(CommandError):
    """Raised when there's a configuration error."""
    def __init__(self, message: str):
        super().__init__(message, CONFIG_ERROR)
