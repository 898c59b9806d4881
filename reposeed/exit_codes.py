"""
Standard exit codes and error types for reposeed.

Following Unix/POSIX conventions for command-line tools. Every pipeline
failure is one of the ScaffoldError subclasses below; each carries the exit
code the CLI terminates with.
"""
from typing import Optional

# Standard POSIX exit codes
SUCCESS = 0              # Successful termination
GENERAL_ERROR = 1        # General errors
USAGE_ERROR = 2          # Misuse of shell command (wrong arguments, etc.)

# Application-specific exit codes (64-113 are typically available)
UNKNOWN_TEMPLATE = 64            # Template identifier not in the table
MALFORMED_LOCATION = 65          # Repository location could not be parsed
WORKING_DIRECTORY_ERROR = 66     # Working directory unreadable or overlaps staging
FETCH_ERROR = 68                 # Clone failed (network, protocol, missing branch)
COPY_ERROR = 73                  # Copying the staged tree failed
RENAME_ERROR = 74                # Renaming the copied tree failed
METADATA_ERROR = 75              # Removing version-control metadata failed
INTERRUPTED = 130                # Terminated by Ctrl+C (SIGINT)


class CommandError(Exception):
    """
    Exception that commands can raise to indicate specific exit codes.
    """
    def __init__(self, message: str, exit_code: int = GENERAL_ERROR):
        super().__init__(message)
        self.exit_code = exit_code


class ScaffoldError(CommandError):
    """
    Base class for failures of the fetch-and-materialize pipeline.

    ``kind`` names the failure category; ``filesystem`` marks failures whose
    underlying diagnostic is printed before the process exits.
    """
    kind = "ScaffoldError"
    exit_code_default = GENERAL_ERROR
    filesystem = False

    def __init__(self, message: str, cause: Optional[BaseException] = None):
        super().__init__(message, self.exit_code_default)
        self.cause = cause


class UnknownTemplateError(ScaffoldError):
    """Raised when a template identifier is not in the table."""
    kind = "UnknownTemplate"
    exit_code_default = UNKNOWN_TEMPLATE

    def __init__(self, identifier: str, known: Optional[list] = None):
        message = f"Unknown template: {identifier}"
        if known:
            message += f" (available: {', '.join(known)})"
        super().__init__(message)
        self.identifier = identifier


class MalformedLocationError(ScaffoldError):
    """Raised when a repository location cannot be parsed."""
    kind = "MalformedLocation"
    exit_code_default = MALFORMED_LOCATION

    def __init__(self, location: str):
        super().__init__(f"Cannot parse repository location: {location}")
        self.location = location


class WorkingDirectoryUnavailableError(ScaffoldError):
    """Raised when the working directory cannot be used for this run."""
    kind = "WorkingDirectoryUnavailable"
    exit_code_default = WORKING_DIRECTORY_ERROR
    filesystem = True


class FetchError(ScaffoldError):
    """Raised when cloning the template repository fails."""
    kind = "FetchFailure"
    exit_code_default = FETCH_ERROR


class CopyFault(ScaffoldError):
    """Raised when copying the staged tree into the working directory fails."""
    kind = "CopyFault"
    exit_code_default = COPY_ERROR
    filesystem = True


class RenameFault(ScaffoldError):
    """Raised when the copied tree cannot be renamed to the destination."""
    kind = "RenameFault"
    exit_code_default = RENAME_ERROR
    filesystem = True


class MetadataRemovalFault(ScaffoldError):
    """Raised when the .git directory cannot be removed from the result."""
    kind = "MetadataRemovalFault"
    exit_code_default = METADATA_ERROR
    filesystem = True
