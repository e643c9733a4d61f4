from vl_client.client import VL
from vl_client.config import Config, get_config
from vl_client.errors import (
    HttpError,
    ImageEncodingError,
    NetworkError,
    RequestTimeoutError,
    ResponseFormatError,
    StreamUnavailableError,
    TaskError,
    VLError,
)
from vl_client.transport.stream import TextStream
from vl_client.types import (
    CaptionOutput,
    ClientConfig,
    EncodedImage,
    QueryOutput,
    SamplingSettings,
)

__all__ = [
    "VL",
    "Config",
    "get_config",
    "TextStream",
    "CaptionOutput",
    "ClientConfig",
    "EncodedImage",
    "QueryOutput",
    "SamplingSettings",
    "VLError",
    "TaskError",
    "RequestTimeoutError",
    "HttpError",
    "NetworkError",
    "StreamUnavailableError",
    "ResponseFormatError",
    "ImageEncodingError",
]
