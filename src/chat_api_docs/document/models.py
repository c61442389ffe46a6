"""Data models for the assembled API document.

Route declarations build these models; the document builder dumps them
with OpenAPI field names (``in``, ``schema``, ``requestBody``).
"""

from typing import Any

from pydantic import BaseModel, ConfigDict, Field

JSON_CONTENT = "application/json"
HTTP_METHODS = ("get", "post", "put", "patch", "delete")


class Tag(BaseModel):
    """A named group of operations with a human description."""

    name: str
    description: str = ""


class Parameter(BaseModel):
    """A single path parameter."""

    model_config = ConfigDict(populate_by_name=True)

    name: str
    location: str = Field(default="path", alias="in")
    description: str = ""
    required: bool = True
    schema_: dict[str, Any] = Field(alias="schema")


class MediaType(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    schema_: dict[str, Any] = Field(alias="schema")


class RequestBody(BaseModel):
    description: str
    content: dict[str, MediaType]
    required: bool = True


class Response(BaseModel):
    description: str
    content: dict[str, MediaType] | None = None


class Operation(BaseModel):
    """One HTTP method on a resource."""

    model_config = ConfigDict(populate_by_name=True)

    summary: str
    description: str
    authenticated: bool = False
    tags: list[str] = []
    parameters: list[Parameter] = []
    request_body: RequestBody | None = Field(default=None, alias="requestBody")
    responses: dict[str, Response] = {}

    def to_openapi(self, security: list[dict] | None = None) -> dict:
        """Dump as an OpenAPI operation object."""
        data = self.model_dump(by_alias=True, exclude_none=True, exclude={"authenticated"})
        if not data["parameters"]:
            del data["parameters"]
        if not data["tags"]:
            del data["tags"]
        if self.authenticated and security:
            data["security"] = security
        return data
