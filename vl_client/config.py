from dataclasses import dataclass
import logging
import os
from dotenv import load_dotenv

from vl_client.constants import (
    DEFAULT_BASE_URL,
    DEFAULT_LOG_LEVEL,
    DEFAULT_MAX_TOKENS,
    ENV_BASE_URL,
    ENV_LOG_LEVEL,
    ENV_MAX_TOKENS,
    MSG_INVALID_MAX_TOKENS,
)

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class Config:
    max_tokens: int
    base_url: str
    log_level: str

    @classmethod
    def from_env(cls) -> "Config":
        load_dotenv()

        raw_max_tokens = os.getenv(ENV_MAX_TOKENS)
        base_url = os.getenv(ENV_BASE_URL) or DEFAULT_BASE_URL
        log_level = os.getenv(ENV_LOG_LEVEL, DEFAULT_LOG_LEVEL)

        return cls(
            max_tokens=_parse_max_tokens(raw_max_tokens),
            base_url=base_url.rstrip("/"),
            log_level=log_level,
        )


def _parse_max_tokens(raw: str | None) -> int:
    """Positive integer from the environment, else the default with a warning."""
    match raw:
        case None | "":
            return DEFAULT_MAX_TOKENS
        case value:
            try:
                parsed = int(value.strip())
            except ValueError:
                parsed = 0
            match parsed > 0:
                case True:
                    return parsed
                case False:
                    logger.warning(MSG_INVALID_MAX_TOKENS, DEFAULT_MAX_TOKENS)
                    return DEFAULT_MAX_TOKENS


def get_config() -> Config:
    return Config.from_env()
