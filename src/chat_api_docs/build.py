"""Assemble the full API document from every route section."""

import logging

from chat_api_docs.config import DocumentSettings
from chat_api_docs.document.builder import DocumentBuilder
from chat_api_docs.errors import DocumentValidationError
from chat_api_docs.routes import components, servers

logger = logging.getLogger(__name__)

SECTIONS = [components, servers]


def build_builder(settings: DocumentSettings | None = None) -> DocumentBuilder:
    """Run every section's declarations against a fresh builder."""
    docs = DocumentBuilder(settings or DocumentSettings.from_env())
    for section in SECTIONS:
        section.register(docs)
    return docs


def build_document(settings: DocumentSettings | None = None) -> dict:
    """Build, validate and dump the OpenAPI document."""
    docs = build_builder(settings)
    if docs.settings.validate_references:
        issues = docs.validate()
        if issues:
            raise DocumentValidationError(issues)

    document = docs.to_openapi()
    logger.info(
        "Built %s %s: %d paths, %d schemas",
        docs.settings.title,
        docs.settings.version,
        len(document["paths"]),
        len(document["components"]["schemas"]),
    )
    return document
