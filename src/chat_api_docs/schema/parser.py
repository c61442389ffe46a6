"""Parser for TypeScript-flavoured schema templates.

A template holds optional ``import`` lines followed by exactly one
declaration::

    /** Optional description */
    interface EditServer {
        /**
         * Server name
         * @minLength 1
         * @maxLength 32
         */
        name: string;
        remove?: 'Icon' | 'Banner';
    }

or ``type Name = <type>;``. The result is the declared name and a
JSON-Schema object. Named types become ``$ref`` pointers to component
schemas; JSDoc comments supply descriptions and constraints.
"""

import json
import logging
import re
from typing import Any, NamedTuple

from chat_api_docs.document.fragments import SCHEMA_REF_PREFIX
from chat_api_docs.errors import SchemaParseError

logger = logging.getLogger(__name__)

_IMPORT_RE = re.compile(
    r"""^[ \t]*import\b[^;'"]*?\bfrom\s*(['"])[^'"]*\1[ \t]*;?"""
    r"""|^[ \t]*import\s*(['"])[^'"]*\2[ \t]*;?""",
    re.MULTILINE | re.DOTALL,
)

_TOKEN_RE = re.compile(
    r"""
    (?P<doc>/\*\*.*?\*/)
  | (?P<comment>/\*.*?\*/|//[^\n]*)
  | (?P<string>'(?:[^'\\\n]|\\.)*'|"(?:[^"\\\n]|\\.)*")
  | (?P<number>-?\d+(?:\.\d+)?)
  | (?P<name>[A-Za-z_$][\w$]*)
  | (?P<punct>[{}\[\]()<>:;,|&?=])
  | (?P<space>\s+)
    """,
    re.VERBOSE | re.DOTALL,
)

_DECLARATION_RE = re.compile(r"\b(?:interface|type)\s+([A-Za-z_$][\w$]*)")

NULL = {"type": "null"}

PRIMITIVES = {
    "string": {"type": "string"},
    "number": {"type": "number"},
    "integer": {"type": "integer"},
    "boolean": {"type": "boolean"},
    "null": NULL,
    "object": {"type": "object"},
    "any": {},
    "unknown": {},
}

NUMERIC_TAGS = {
    "minLength",
    "maxLength",
    "minimum",
    "maximum",
    "exclusiveMinimum",
    "exclusiveMaximum",
    "multipleOf",
    "minItems",
    "maxItems",
}
STRING_TAGS = {"pattern", "format"}
JSON_TAGS = {"default", "example"}


class Token(NamedTuple):
    kind: str
    value: str
    line: int


def parse_schema(source: str) -> tuple[str, dict[str, Any]]:
    """Parse a schema template into ``(name, json_schema)``.

    Raises SchemaParseError on any malformed input.
    """
    source = strip_imports(source)
    try:
        tokens = tokenize(source)
    except SchemaParseError as exc:
        match = _DECLARATION_RE.search(source)
        if match is None:
            raise
        raise SchemaParseError(exc.reason, name=match.group(1), line=exc.line, text=exc.text) from exc
    return _Parser(tokens).parse()


def strip_imports(source: str) -> str:
    """Blank out import statements, keeping line numbers intact."""
    return _IMPORT_RE.sub(lambda m: "\n" * m.group(0).count("\n"), source)


def tokenize(source: str) -> list[Token]:
    tokens = []
    pos = 0
    line = 1
    while pos < len(source):
        match = _TOKEN_RE.match(source, pos)
        if not match:
            raise SchemaParseError("Unexpected character", line=line, text=source[pos])
        kind = match.lastgroup
        value = match.group(0)
        if kind == "doc":
            tokens.append(Token("doc", value, line))
        elif kind not in ("space", "comment"):
            tokens.append(Token(kind, value, line))
        line += value.count("\n")
        pos = match.end()
    return tokens


def parse_doc(raw: str) -> dict[str, Any]:
    """Turn a ``/** ... */`` comment into description and constraint keywords."""
    text = raw[3:-2].rstrip("*")
    lines = [re.sub(r"^\s*\*+ ?", "", line).strip() for line in text.splitlines()]
    parts = re.split(r"(?:^|(?<=\s))@(\w+)", "\n".join(lines))

    result: dict[str, Any] = {}
    description = " ".join(part for part in parts[0].split() if part)
    if description:
        result["description"] = description

    for tag, value in zip(parts[1::2], parts[2::2]):
        value = " ".join(value.split())
        if tag in NUMERIC_TAGS:
            result[tag] = _number(tag, value)
        elif tag in STRING_TAGS:
            result[tag] = value
        elif tag in JSON_TAGS:
            result[tag] = _json_value(value)
        elif tag == "deprecated":
            result["deprecated"] = True
        else:
            logger.debug("Ignoring unknown doc tag @%s", tag)
    return result


def _number(tag: str, value: str) -> int | float:
    try:
        number = float(value)
    except ValueError:
        raise SchemaParseError(f"@{tag} expects a number", text=value) from None
    return int(number) if number.is_integer() and "." not in value else number


def _json_value(value: str) -> Any:
    try:
        return json.loads(value)
    except ValueError:
        return value


def annotate(schema: dict[str, Any], doc: str | None) -> dict[str, Any]:
    """Attach doc-comment keywords to a schema."""
    if not doc:
        return schema
    keywords = parse_doc(doc)
    if not keywords:
        return schema
    if "$ref" in schema:
        # Siblings of $ref are ignored by OpenAPI 3.0 readers.
        return {"allOf": [schema], **keywords}
    return {**schema, **keywords}


def merge_union(options: list[dict[str, Any]]) -> dict[str, Any]:
    """Collapse a union; literal unions of one type become a single enum.

    ``null`` members are expressed with the OpenAPI 3.0 ``nullable`` keyword.
    """
    rest = [opt for opt in options if opt != NULL]
    if len(rest) < len(options):
        if not rest:
            return {"enum": [None], "nullable": True}
        return _nullable(merge_union(rest))
    if len(options) == 1:
        return options[0]
    types = {opt.get("type") for opt in options}
    if len(types) == 1 and all(set(opt) == {"type", "enum"} for opt in options):
        values: list = []
        for opt in options:
            values.extend(v for v in opt["enum"] if v not in values)
        return {"type": types.pop(), "enum": values}
    return {"anyOf": options}


def _nullable(schema: dict[str, Any]) -> dict[str, Any]:
    if "$ref" in schema:
        return {"allOf": [schema], "nullable": True}
    schema = {**schema, "nullable": True}
    if "enum" in schema:
        schema["enum"] = [*schema["enum"], None]
    return schema


class _Parser:
    def __init__(self, tokens: list[Token]):
        self.tokens = tokens
        self.pos = 0
        self.name: str | None = None

    def parse(self) -> tuple[str, dict[str, Any]]:
        doc = self._take_doc()
        self._accept("export")
        keyword = self._next()
        if keyword.value == "interface":
            self.name = self._identifier()
            schema = self._interface()
        elif keyword.value == "type":
            self.name = self._identifier()
            self._expect("=")
            schema = self._type()
            self._accept(";")
        else:
            raise self._error("Expected an 'interface' or 'type' declaration", keyword)

        trailing = self._peek()
        if trailing is not None:
            raise self._error("Unexpected text after declaration", trailing)
        return self.name, self._annotate(schema, doc)

    # token helpers

    def _peek(self, offset: int = 0) -> Token | None:
        index = self.pos + offset
        return self.tokens[index] if index < len(self.tokens) else None

    def _next(self) -> Token:
        token = self._peek()
        if token is None:
            raise self._error("Unexpected end of template")
        self.pos += 1
        return token

    def _at(self, value: str, offset: int = 0) -> bool:
        token = self._peek(offset)
        return token is not None and token.kind in ("punct", "name") and token.value == value

    def _accept(self, value: str) -> bool:
        if self._at(value):
            self.pos += 1
            return True
        return False

    def _expect(self, value: str) -> Token:
        token = self._next()
        if token.value != value:
            raise self._error(f"Expected '{value}'", token)
        return token

    def _identifier(self) -> str:
        token = self._next()
        if token.kind != "name":
            raise self._error("Expected an identifier", token)
        return token.value

    def _take_doc(self) -> Token | None:
        doc = None
        while self._peek() is not None and self._peek().kind == "doc":
            doc = self._next()
        return doc

    def _annotate(self, schema: dict[str, Any], doc: Token | None) -> dict[str, Any]:
        if doc is None:
            return schema
        try:
            return annotate(schema, doc.value)
        except SchemaParseError as exc:
            offset = doc.value.find(exc.text) if exc.text else -1
            line = doc.line + doc.value[:offset].count("\n") if offset >= 0 else doc.line
            raise SchemaParseError(exc.reason, name=self.name, line=line, text=exc.text) from exc

    def _error(self, message: str, token: Token | None = None) -> SchemaParseError:
        if token is None and self.tokens:
            token = self.tokens[-1]
            return SchemaParseError(message, name=self.name, line=token.line)
        if token is None:
            return SchemaParseError(message, name=self.name)
        return SchemaParseError(message, name=self.name, line=token.line, text=token.value)

    # grammar

    def _interface(self) -> dict[str, Any]:
        bases = []
        if self._accept("extends"):
            bases.append({"$ref": SCHEMA_REF_PREFIX + self._identifier()})
            while self._accept(","):
                bases.append({"$ref": SCHEMA_REF_PREFIX + self._identifier()})
        body = self._object()
        return {"allOf": [*bases, body]} if bases else body

    def _object(self) -> dict[str, Any]:
        self._expect("{")
        properties: dict[str, Any] = {}
        required: list[str] = []
        while True:
            doc = self._take_doc()
            if self._accept("}"):
                break
            token = self._next()
            if token.kind == "name":
                key = token.value
            elif token.kind == "string":
                key = _unquote(token.value)
            else:
                raise self._error("Expected a property name", token)
            if key in properties:
                raise self._error("Duplicate property", token)

            optional = self._accept("?")
            self._expect(":")
            properties[key] = self._annotate(self._type(), doc)
            if not optional:
                required.append(key)
            if not self._accept(";"):
                self._accept(",")

        schema: dict[str, Any] = {"type": "object", "properties": properties}
        if required:
            schema["required"] = required
        return schema

    def _type(self) -> dict[str, Any]:
        self._accept("|")
        options = [self._intersection()]
        while self._accept("|"):
            options.append(self._intersection())
        return merge_union(options)

    def _intersection(self) -> dict[str, Any]:
        parts = [self._postfix()]
        while self._accept("&"):
            parts.append(self._postfix())
        return parts[0] if len(parts) == 1 else {"allOf": parts}

    def _postfix(self) -> dict[str, Any]:
        schema = self._primary()
        while self._at("[") and self._at("]", 1):
            self.pos += 2
            schema = {"type": "array", "items": schema}
        return schema

    def _primary(self) -> dict[str, Any]:
        token = self._peek()
        if token is None:
            raise self._error("Expected a type")
        if token.kind == "punct" and token.value == "{":
            return self._object()

        token = self._next()
        if token.kind == "string":
            return {"type": "string", "enum": [_unquote(token.value)]}
        if token.kind == "number":
            return {"type": "number", "enum": [json.loads(token.value)]}
        if token.kind == "punct" and token.value == "(":
            inner = self._type()
            self._expect(")")
            return inner
        if token.kind != "name":
            raise self._error("Expected a type", token)

        word = token.value
        if word in PRIMITIVES:
            return dict(PRIMITIVES[word])
        if word in ("true", "false"):
            return {"type": "boolean", "enum": [word == "true"]}
        if word == "Array":
            self._expect("<")
            items = self._type()
            self._expect(">")
            return {"type": "array", "items": items}
        if word == "Record":
            self._expect("<")
            key = self._type()
            if key.get("type") != "string":
                raise self._error("Record keys must be strings", token)
            self._expect(",")
            value = self._type()
            self._expect(">")
            return {"type": "object", "additionalProperties": value}
        if self._at("<"):
            raise self._error("Generic types are not supported", token)
        return {"$ref": SCHEMA_REF_PREFIX + word}


def _unquote(literal: str) -> str:
    quote = literal[0]
    return literal[1:-1].replace("\\" + quote, quote).replace("\\\\", "\\")
