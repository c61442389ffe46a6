"""Exceptions raised while assembling the API document.

Every error here aborts the documentation build. None of them are retried.
"""


class DocumentError(Exception):
    """Base documentation build error."""

    def __init__(self, message: str) -> None:
        self.message = message
        super().__init__(message)


class SchemaParseError(DocumentError):
    """A schema template could not be parsed."""

    def __init__(self, message: str, name: str | None = None, line: int | None = None, text: str = "") -> None:
        self.reason = message
        self.name = name
        self.line = line
        self.text = text
        where = f" in schema '{name}'" if name else ""
        if line is not None:
            where += f" (line {line})"
        detail = f": {text!r}" if text else ""
        super().__init__(f"{message}{where}{detail}")


class FragmentCollisionError(DocumentError):
    """Two fragments tried to supply the same operation key."""

    def __init__(self, key: str) -> None:
        self.key = key
        super().__init__(f"Fragments collide on key '{key}'")


class DuplicateSchemaError(DocumentError):
    """A schema name was registered twice with different definitions."""

    def __init__(self, name: str) -> None:
        self.name = name
        super().__init__(f"Schema '{name}' is already registered with a different definition")


class DocumentValidationError(DocumentError):
    """Cross-reference checks failed on the assembled document."""

    def __init__(self, issues: list[str]) -> None:
        self.issues = issues
        super().__init__(f"{len(issues)} document issue(s): " + "; ".join(issues))
