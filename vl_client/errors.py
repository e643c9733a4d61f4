"""Exception taxonomy for vision-language requests."""


class VLError(Exception):
    """Base exception for all client errors."""

    kind = "internal"


class RequestTimeoutError(VLError, TimeoutError):
    """Raised when response headers do not arrive before the deadline."""

    kind = "timeout"


class HttpError(VLError):
    """Raised when the service answers with a non-2xx status."""

    kind = "http"

    def __init__(self, message: str, status_code: int) -> None:
        super().__init__(message)
        self.status_code = status_code


class NetworkError(VLError):
    """Raised when the request could not be completed at the transport level."""

    kind = "network"


class StreamUnavailableError(VLError):
    """Raised when a streaming response has no readable body."""

    kind = "stream_unavailable"


class ResponseFormatError(VLError):
    """Raised when a successful response body is not the expected JSON shape."""

    kind = "response_format"


class ImageEncodingError(VLError):
    """Raised when an image input cannot be turned into base64."""

    kind = "image"


class TaskError(VLError):
    """Single failure shape for caption and query calls.

    ``kind`` carries the category of the underlying cause so callers can
    branch on it without parsing the message; the cause itself is chained.
    """

    def __init__(self, message: str, kind: str = VLError.kind) -> None:
        super().__init__(message)
        self.kind = kind
