"""Build settings, read from the environment with sensible defaults."""

import os

from pydantic import BaseModel

DEFAULT_TITLE = "Chat API"
DEFAULT_VERSION = "0.5.0"
DEFAULT_OPENAPI_VERSION = "3.0.3"
DEFAULT_SESSION_HEADER = "x-session-token"

SESSION_SCHEME = "Session Token"

_TRUE = {"1", "true", "yes", "on"}
_FALSE = {"0", "false", "no", "off"}


class DocumentSettings(BaseModel):
    """Top-level document metadata and build switches."""

    title: str = DEFAULT_TITLE
    version: str = DEFAULT_VERSION
    description: str = "Chat server API: servers, members, bans, roles and permissions."
    openapi_version: str = DEFAULT_OPENAPI_VERSION
    server_url: str | None = None
    session_header: str = DEFAULT_SESSION_HEADER
    strict_fragments: bool = True
    validate_references: bool = True

    @classmethod
    def from_env(cls) -> "DocumentSettings":
        """Build settings, letting API_DOCS_* environment variables override defaults."""
        return cls(
            title=os.getenv("API_DOCS_TITLE", DEFAULT_TITLE),
            version=os.getenv("API_DOCS_VERSION", DEFAULT_VERSION),
            openapi_version=os.getenv("API_DOCS_OPENAPI_VERSION", DEFAULT_OPENAPI_VERSION),
            server_url=os.getenv("API_DOCS_SERVER_URL") or None,
            session_header=os.getenv("API_DOCS_SESSION_HEADER", DEFAULT_SESSION_HEADER),
            strict_fragments=_env_flag("API_DOCS_STRICT_FRAGMENTS", True),
            validate_references=_env_flag("API_DOCS_VALIDATE", True),
        )


def _env_flag(name: str, default: bool) -> bool:
    value = os.getenv(name)
    if value is None or not value.strip():
        return default
    value = value.strip().lower()
    if value in _TRUE:
        return True
    if value in _FALSE:
        return False
    raise ValueError(f"{name} must be a boolean flag, got {value!r}")
