"""Fragment builders for operation descriptors.

Each fragment supplies exactly one operation key (``parameters``,
``requestBody`` or ``responses``). Fragments are merged by :func:`combine`,
which refuses to let two fragments supply the same key unless asked to.
"""

import logging
from typing import Annotated, Any, Literal

from pydantic import BaseModel, Field

from chat_api_docs.document.models import JSON_CONTENT, MediaType, Parameter, RequestBody, Response
from chat_api_docs.errors import FragmentCollisionError

logger = logging.getLogger(__name__)

SCHEMA_REF_PREFIX = "#/components/schemas/"


class ParameterFragment(BaseModel):
    kind: Literal["parameters"] = "parameters"
    parameters: list[Parameter]

    def as_dict(self) -> dict:
        return {"parameters": [p.model_dump(by_alias=True) for p in self.parameters]}


class BodyFragment(BaseModel):
    kind: Literal["requestBody"] = "requestBody"
    request_body: RequestBody

    def as_dict(self) -> dict:
        return {"requestBody": self.request_body.model_dump(by_alias=True, exclude_none=True)}


class ResponseFragment(BaseModel):
    kind: Literal["responses"] = "responses"
    responses: dict[str, Response]

    def as_dict(self) -> dict:
        return {
            "responses": {
                status: resp.model_dump(by_alias=True, exclude_none=True)
                for status, resp in self.responses.items()
            }
        }


Fragment = Annotated[ParameterFragment | BodyFragment | ResponseFragment, Field(discriminator="kind")]


class FragmentSet(BaseModel):
    """The merged result of several fragments, at most one per key."""

    parameters: ParameterFragment | None = None
    request_body: BodyFragment | None = None
    responses: ResponseFragment | None = None

    def fragments(self) -> list:
        return [f for f in (self.parameters, self.request_body, self.responses) if f is not None]

    def as_dict(self) -> dict:
        data: dict = {}
        for fragment in self.fragments():
            data.update(fragment.as_dict())
        return data


_SLOTS = {"parameters": "parameters", "requestBody": "request_body", "responses": "responses"}


def ref(name: str) -> dict[str, str]:
    """Pointer to a named component schema."""
    return {"$ref": SCHEMA_REF_PREFIX + name}


def parameter(name: str, description: str, schema: dict[str, Any]) -> Parameter:
    """A required path parameter."""
    return Parameter(name=name, location="path", description=description, schema=schema)


def parameters(*params: Parameter) -> ParameterFragment:
    return ParameterFragment(parameters=list(params))


def body(description: str, schema: dict[str, Any]) -> BodyFragment:
    """A JSON request body."""
    return BodyFragment(
        request_body=RequestBody(
            description=description,
            content={JSON_CONTENT: MediaType(schema=schema)},
        )
    )


def success(description: str, schema: dict[str, Any] | None = None, status: str = "200") -> ResponseFragment:
    """A successful response, with a JSON body only when a schema is given."""
    content = {JSON_CONTENT: MediaType(schema=schema)} if schema is not None else None
    return ResponseFragment(responses={status: Response(description=description, content=content)})


def combine(*fragments: Fragment | FragmentSet, strict: bool = True) -> FragmentSet:
    """Merge fragments into a single FragmentSet.

    With ``strict`` a key supplied twice raises FragmentCollisionError.
    Otherwise the later fragment replaces the earlier one.
    """
    merged: dict[str, Any] = {}
    for fragment in _expand(fragments):
        if fragment.kind in merged:
            if strict:
                raise FragmentCollisionError(fragment.kind)
            logger.warning("Fragment key '%s' overwritten by a later fragment", fragment.kind)
        merged[fragment.kind] = fragment
    return FragmentSet(**{_SLOTS[kind]: frag for kind, frag in merged.items()})


def _expand(fragments: tuple) -> list:
    result = []
    for item in fragments:
        if isinstance(item, FragmentSet):
            result.extend(item.fragments())
        elif isinstance(item, (ParameterFragment, BodyFragment, ResponseFragment)):
            result.append(item)
        else:
            raise TypeError(f"Expected a fragment, got {type(item).__name__}")
    return result
