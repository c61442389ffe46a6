"""Accumulate groups, tags, resources and schemas for one build.

Route modules call the builder top to bottom; the finished state is
dumped once with :meth:`DocumentBuilder.to_openapi`.
"""

import logging
import re
from typing import Any

from chat_api_docs.config import SESSION_SCHEME, DocumentSettings
from chat_api_docs.document.fragments import SCHEMA_REF_PREFIX, ref
from chat_api_docs.document.models import HTTP_METHODS, Operation, Tag
from chat_api_docs.document.paths import route, route_authenticated
from chat_api_docs.errors import DuplicateSchemaError
from chat_api_docs.schema.parser import parse_schema

logger = logging.getLogger(__name__)

PLACEHOLDER_RE = re.compile(r":([A-Za-z_]\w*)")


def to_openapi_path(path: str) -> str:
    """Convert ``/servers/:server`` into ``/servers/{server}``."""
    return PLACEHOLDER_RE.sub(r"{\1}", path)


def path_placeholders(path: str) -> list[str]:
    return PLACEHOLDER_RE.findall(path)


class DocumentBuilder:
    """Mutable registry for one documentation build."""

    def __init__(self, settings: DocumentSettings | None = None):
        self.settings = settings or DocumentSettings()
        self.current_group: str | None = None
        self.current_tag: str | None = None
        self.groups: dict[str, list[str]] = {}
        self.tags: dict[str, Tag] = {}
        self.resources: dict[str, dict[str, Operation]] = {}
        self.schemas: dict[str, dict[str, Any]] = {}

    def group(self, name: str) -> None:
        """Make ``name`` the group for every tag declared after this call."""
        self.current_group = name
        self.groups.setdefault(name, [])
        logger.debug("Entering group %s", name)

    def tag(self, name: str, description: str) -> Tag:
        """Register a tag and make it the tag of subsequent resources.

        Re-registering a name replaces its description.
        """
        if name in self.tags:
            logger.debug("Tag %s re-registered, replacing description", name)
        tag = Tag(name=name, description=description)
        self.tags[name] = tag
        self.current_tag = name
        if self.current_group is not None and name not in self.groups[self.current_group]:
            self.groups[self.current_group].append(name)
        return tag

    def resource(self, path: str, methods: dict[str, Operation]) -> None:
        """Register operations for a ``:param`` path template.

        Nothing is registered when any method name is unsupported.
        """
        pending: dict[str, Operation] = {}
        for method, operation in methods.items():
            method = method.lower()
            if method not in HTTP_METHODS:
                raise ValueError(f"Unsupported HTTP method '{method}' on {path}")
            if not operation.tags and self.current_tag is not None:
                operation = operation.model_copy(update={"tags": [self.current_tag]})
            pending[method] = operation

        operations = self.resources.setdefault(path, {})
        for method in pending:
            if method in operations:
                logger.warning("%s %s declared twice, keeping the later declaration", method.upper(), path)
        operations.update(pending)
        logger.debug("Registered %s [%s]", path, ", ".join(m.upper() for m in pending))

    def route(self, summary: str, description: str, *fragments) -> Operation:
        return route(summary, description, *fragments, strict=self.settings.strict_fragments)

    def route_authenticated(self, summary: str, description: str, *fragments) -> Operation:
        return route_authenticated(summary, description, *fragments, strict=self.settings.strict_fragments)

    def schema(self, source: str) -> dict[str, str]:
        """Parse a schema template, register it and return a reference to it."""
        name, definition = parse_schema(source)
        existing = self.schemas.get(name)
        if existing is not None and existing != definition:
            raise DuplicateSchemaError(name)
        self.schemas[name] = definition
        logger.debug("Registered schema %s", name)
        return ref(name)

    def validate(self) -> list[str]:
        """Return cross-reference problems found in the registered state."""
        issues = []
        for path, operations in self.resources.items():
            placeholders = set(path_placeholders(path))
            for method, operation in operations.items():
                declared = {p.name for p in operation.parameters if p.location == "path"}
                for name in sorted(placeholders - declared):
                    issues.append(f"{method.upper()} {path}: no parameter declared for ':{name}'")
                for name in sorted(declared - placeholders):
                    issues.append(f"{method.upper()} {path}: parameter '{name}' is not in the path")
                if not operation.responses:
                    issues.append(f"{method.upper()} {path}: no responses declared")

        document = self.to_openapi()
        for name in sorted(_collect_refs(document) - set(self.schemas)):
            issues.append(f"Reference to unregistered schema '{name}'")
        return issues

    def to_openapi(self) -> dict[str, Any]:
        """Dump the accumulated state as an OpenAPI document."""
        settings = self.settings
        info = {"title": settings.title, "version": settings.version}
        if settings.description:
            info["description"] = settings.description

        document: dict[str, Any] = {"openapi": settings.openapi_version, "info": info}
        if settings.server_url:
            document["servers"] = [{"url": settings.server_url}]
        document["tags"] = [tag.model_dump() for tag in self.tags.values()]
        if self.groups:
            document["x-tagGroups"] = [{"name": name, "tags": list(tags)} for name, tags in self.groups.items()]

        security = [{SESSION_SCHEME: []}]
        document["paths"] = {
            to_openapi_path(path): {
                method: operation.to_openapi(security) for method, operation in operations.items()
            }
            for path, operations in self.resources.items()
        }
        document["components"] = {
            "schemas": dict(self.schemas),
            "securitySchemes": {
                SESSION_SCHEME: {"type": "apiKey", "in": "header", "name": settings.session_header},
            },
        }
        return document


def _collect_refs(node: Any) -> set[str]:
    found: set[str] = set()
    if isinstance(node, dict):
        target = node.get("$ref")
        if isinstance(target, str) and target.startswith(SCHEMA_REF_PREFIX):
            found.add(target[len(SCHEMA_REF_PREFIX):])
        for value in node.values():
            found |= _collect_refs(value)
    elif isinstance(node, list):
        for item in node:
            found |= _collect_refs(item)
    return found
