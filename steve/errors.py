"""Exceptions raised by steve actions and the dispatcher."""

from typing import Optional, Sequence


class SteveError(Exception):
    """Base class for all errors reported to the operator."""

    exit_status = 1


class UsageError(SteveError):
    """Missing or invalid arguments for an action."""

    def __init__(self, message: str, action: Optional[str] = None) -> None:
        super().__init__(message)
        self.action = action


class UnknownActionError(SteveError):
    """The requested action is not registered."""

    def __init__(self, name: str, known: Sequence[str] = ()) -> None:
        super().__init__(f"Unknown action: {name}")
        self.name = name
        self.known = list(known)


class DuplicateActionError(SteveError):
    """An action name was registered twice."""

    def __init__(self, name: str) -> None:
        super().__init__(f"Action already registered: {name}")
        self.name = name


class ReservedActionNameError(SteveError):
    """An action name is empty or uses the reserved private prefix."""

    def __init__(self, name: str) -> None:
        super().__init__(f"Invalid action name: {name!r}")
        self.name = name


class ExternalProcessError(SteveError):
    """An external command exited non-zero or could not be started."""

    def __init__(self, command: Sequence[str], returncode: int, output: str = "") -> None:
        self.command = list(command)
        self.returncode = returncode
        self.output = output
        super().__init__(f"Command failed with status {returncode}: {' '.join(self.command)}")


class FetchError(SteveError):
    """An HTTP download failed."""

    def __init__(self, url: str, reason: str) -> None:
        super().__init__(f"Failed to fetch {url}: {reason}")
        self.url = url
        self.reason = reason


class ClusterError(SteveError):
    """The Kubernetes API rejected a request or could not be reached."""


class LocalFileError(SteveError):
    """A local file or directory could not be written."""

    def __init__(self, path, reason: str) -> None:
        super().__init__(f"Cannot write {path}: {reason}")
        self.path = path
        self.reason = reason
