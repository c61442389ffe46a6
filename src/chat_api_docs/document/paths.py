"""Route builders: turn a summary, a description and fragments into an Operation."""

from chat_api_docs.document.fragments import combine
from chat_api_docs.document.models import Operation


def route(summary: str, description: str, *fragments, strict: bool = True) -> Operation:
    """Build an operation that needs no session."""
    return _build(summary, description, False, fragments, strict)


def route_authenticated(summary: str, description: str, *fragments, strict: bool = True) -> Operation:
    """Build an operation that requires a session token."""
    return _build(summary, description, True, fragments, strict)


def _build(summary: str, description: str, authenticated: bool, fragments: tuple, strict: bool) -> Operation:
    merged = combine(*fragments, strict=strict)
    return Operation(
        summary=summary,
        description=description,
        authenticated=authenticated,
        parameters=merged.parameters.parameters if merged.parameters else [],
        request_body=merged.request_body.request_body if merged.request_body else None,
        responses=merged.responses.responses if merged.responses else {},
    )
