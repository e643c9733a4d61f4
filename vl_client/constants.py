"""All magic values live here — no inline literals anywhere else."""

# Environment variables
ENV_MAX_TOKENS = "MOONDREAM_MAX_TOKENS"
ENV_BASE_URL = "MOONDREAM_BASE_URL"
ENV_LOG_LEVEL = "MOONDREAM_LOG_LEVEL"

# Client defaults
DEFAULT_MAX_TOKENS = 1024
DEFAULT_BASE_URL = "http://localhost:8080"
DEFAULT_LOG_LEVEL = "INFO"
# Seconds allowed for the headers, and for the body of an error response (30000 ms).
DEFAULT_TIMEOUT: float = 30.0

# Request shape
HTTP_METHOD = "POST"
CONTENT_TYPE_HEADER = "Content-Type"
CONTENT_TYPE_JSON = "application/json"
CAPTION_PATH = "/caption"
QUERY_PATH = "/query"
DEFAULT_CAPTION_LENGTH = "normal"

# Request and response fields
FIELD_IMAGE = "image"
FIELD_LENGTH = "length"
FIELD_QUESTION = "question"
FIELD_STREAM = "stream"
FIELD_MAX_TOKENS = "max_tokens"
RESULT_CAPTION = "caption"
RESULT_ANSWER = "answer"
ERROR_MESSAGE_FIELD = "message"

# Streaming
STREAM_ENCODING = "utf-8"

# Image encoding
DEFAULT_IMAGE_MIME = "image/jpeg"
DATA_URI_PREFIX = "data:"
DATA_URI_TEMPLATE = "data:%s;base64,%s"
PIL_SAVE_FORMAT = "JPEG"

# Preprocessing
IMAGE_PATCH_SIZE = 378
DEFAULT_MEAN = (0.5, 0.5, 0.5)
DEFAULT_STD = (0.5, 0.5, 0.5)

# Error messages
MSG_ABORTED = "The operation was aborted"
MSG_HTTP_ERROR = "HTTP error! status: %d"
MSG_BODY_NOT_READABLE = "Response body is not readable"
MSG_MISSING_FIELD = "Response body has no '%s' field"
MSG_BODY_NOT_JSON = "Response body is not valid JSON"
MSG_INVALID_MAX_TOKENS = (
    "Invalid MOONDREAM_MAX_TOKENS value. Using default value of %d."
)
MSG_CAPTION_FAILED = "Failed to generate caption"
MSG_QUERY_FAILED = "Failed to process query"
MSG_UNSUPPORTED_IMAGE = "Unsupported image type: %s"
MSG_UNREADABLE_IMAGE = "Could not read image: %s"

# Log messages
MSG_CLIENT_READY = "VL client ready (base_url=%s, timeout=%.1fs, max_tokens=%d)"
MSG_SENDING = "→ %s %s (timeout=%.1fs)"
MSG_RECEIVED = "← %d %s"
MSG_TIMED_OUT = "Request to %s aborted after %.1fs"
MSG_HTTP_FAILED = "Request to %s failed with status %d: %s"
MSG_NETWORK_FAILED = "Request to %s could not be completed: %s"
MSG_ERROR_BODY_ABORTED = "Error body from %s not received within %.1fs"
MSG_ERROR_BODY_UNREADABLE = "Error body from %s could not be read: %s"
MSG_STREAM_RELEASED = "Stream reader released (%d chunks)"
MSG_STREAM_ABANDONED = "Stream dropped before it was closed; releasing reader"
