"""Exception hierarchy for postman-publisher.

Every error the pipeline can surface derives from PublisherError, which
carries the process exit code the CLI reports.
"""

EXIT_FAILURE = 1


class PublisherError(Exception):
    """Base error; the CLI prints the message and exits with ``exit_code``."""

    exit_code: int = EXIT_FAILURE

    def __init__(self, message: str, exit_code: int | None = None):
        super().__init__(message)
        if exit_code is not None:
            self.exit_code = exit_code


class SpecNotFoundError(PublisherError):
    """Raised when a local spec path does not exist."""

    def __init__(self, path: str):
        super().__init__(f"Spec file not found at: {path}")
        self.path = path


class SpecFetchError(PublisherError):
    """Raised when a remote spec cannot be fetched."""

    def __init__(self, url: str, status_code: int | None, reason: str):
        if status_code is None:
            message = f"Failed to fetch spec from {url}: {reason}"
        else:
            message = f"Failed to fetch spec: {status_code} {reason}"
        super().__init__(message)
        self.url = url
        self.status_code = status_code
        self.reason = reason


class ConversionError(PublisherError):
    """Raised when the spec text cannot be turned into a collection."""

    def __init__(self, reason: str):
        super().__init__(f"OpenAPI conversion failed: {reason}")
        self.reason = reason


class UploadError(PublisherError):
    """Raised when the collection upload fails (network error or non-2xx)."""

    def __init__(self, status_code: int | None, body: str):
        if status_code is None:
            message = f"Upload error: {body}"
        else:
            message = f"Upload error: {status_code} {body}"
        super().__init__(message)
        self.status_code = status_code
        self.body = body


class OutputWriteError(PublisherError):
    """Raised when the collection file cannot be written or read back."""

    def __init__(self, path: str, reason: str):
        super().__init__(f"Cannot access output file {path}: {reason}")
        self.path = path
        self.reason = reason
