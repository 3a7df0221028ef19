"""Failure kinds a capability can hit. All are caught and turned into text."""


class CapabilityError(Exception):
    """Base class for capability failures."""


class CrawlError(CapabilityError):
    pass


class MissingWorkspaceError(CapabilityError):
    def __init__(self, message: str = "No workspace ID found in action context.") -> None:
        super().__init__(message)


class WorkspaceFileNotFoundError(CapabilityError):
    def __init__(self, path: str) -> None:
        super().__init__(f"File not found: {path}")
        self.path = path


class FileFetchError(CapabilityError):
    def __init__(self, status_code: int) -> None:
        super().__init__(f"Failed to fetch file: {status_code}")
        self.status_code = status_code


class PlatformError(CapabilityError):
    """Non-success response from the platform API."""

    def __init__(self, method: str, url: str, status_code: int, detail: str = "") -> None:
        message = f"{method} {url} failed with status {status_code}"
        if detail:
            message = f"{message}: {detail}"
        super().__init__(message)
        self.status_code = status_code
