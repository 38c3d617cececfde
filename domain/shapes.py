"""Declarative descriptions of what a generation result must look like.

Shapes are plain data. They are checked against decoded model output with
`validate` and rendered with `ExpectedShape.json_schema` so the provider can
do the decoding itself.
"""

from dataclasses import dataclass, field
from typing import Any, Iterator, Mapping

from domain.errors import ShapeMismatch


class Kind:
    """Base for field kinds."""

    label = "value"

    def check(self, value: Any, path: str) -> None:
        raise NotImplementedError

    def json_schema(self) -> dict[str, Any]:
        raise NotImplementedError


class String(Kind):
    label = "string"

    def check(self, value: Any, path: str) -> None:
        if not isinstance(value, str):
            raise ShapeMismatch(path, f"should be a {self.label}", value)

    def json_schema(self) -> dict[str, Any]:
        return {"type": "string"}

    def __repr__(self) -> str:
        return "String()"


class Integer(Kind):
    label = "integer"

    def check(self, value: Any, path: str) -> None:
        # bool is an int subclass but never a count.
        if isinstance(value, bool) or not isinstance(value, int):
            raise ShapeMismatch(path, f"should be an {self.label}", value)

    def json_schema(self) -> dict[str, Any]:
        return {"type": "integer"}

    def __repr__(self) -> str:
        return "Integer()"


class Choice(Kind):
    """One of a fixed set of strings. Case-sensitive."""

    label = "choice"

    def __init__(self, *values: str) -> None:
        if not values:
            raise ValueError("Choice needs at least one allowed value.")
        self.values = tuple(values)

    def check(self, value: Any, path: str) -> None:
        if not isinstance(value, str) or value not in self.values:
            allowed = ", ".join(self.values)
            raise ShapeMismatch(path, f"should be one of: {allowed}", value)

    def json_schema(self) -> dict[str, Any]:
        return {"type": "string", "enum": list(self.values)}

    def __repr__(self) -> str:
        return f"Choice{self.values!r}"


class Nested(Kind):
    label = "object"

    def __init__(self, shape: "ExpectedShape") -> None:
        self.shape = shape

    def check(self, value: Any, path: str) -> None:
        check_shape(value, self.shape, path)

    def json_schema(self) -> dict[str, Any]:
        return self.shape.json_schema()

    def __repr__(self) -> str:
        return f"Nested({self.shape.name})"


class SequenceOf(Kind):
    """A list whose elements each match `item`, a shape or a scalar kind."""

    label = "list"

    def __init__(self, item: "ExpectedShape | Kind") -> None:
        self.item: Kind = Nested(item) if isinstance(item, ExpectedShape) else item

    def check(self, value: Any, path: str) -> None:
        if not isinstance(value, list):
            raise ShapeMismatch(path, f"should be a {self.label}", value)
        for i, element in enumerate(value):
            element_path = f"{path}[{i}]"
            if element is None:
                raise ShapeMismatch(element_path, "is missing")
            self.item.check(element, element_path)

    def json_schema(self) -> dict[str, Any]:
        return {"type": "array", "items": self.item.json_schema()}

    def __repr__(self) -> str:
        return f"SequenceOf({self.item!r})"


@dataclass(frozen=True)
class Field:
    name: str
    kind: Kind
    required: bool = True
    description: str = ""

    def json_schema(self) -> dict[str, Any]:
        schema = self.kind.json_schema()
        if self.description:
            schema = {**schema, "description": self.description}
        return schema


def optional(name: str, kind: Kind, description: str = "") -> Field:
    return Field(name, kind, required=False, description=description)


@dataclass(frozen=True)
class ExpectedShape:
    fields: tuple[Field, ...]
    name: str = "result"
    description: str = field(default="", compare=False)

    def __post_init__(self) -> None:
        names = [f.name for f in self.fields]
        if len(names) != len(set(names)):
            raise ValueError(f"Duplicate field names in shape {self.name}: {names}")

    def __iter__(self) -> Iterator[Field]:
        return iter(self.fields)

    @property
    def required(self) -> tuple[str, ...]:
        return tuple(f.name for f in self.fields if f.required)

    def json_schema(self) -> dict[str, Any]:
        schema: dict[str, Any] = {
            "type": "object",
            "properties": {f.name: f.json_schema() for f in self.fields},
            "required": list(self.required),
        }
        if self.description:
            schema["description"] = self.description
        return schema


def shape(name: str, *fields: Field, description: str = "") -> ExpectedShape:
    return ExpectedShape(fields=tuple(fields), name=name, description=description)


def _join(path: str, name: str) -> str:
    return f"{path}.{name}" if path else name


def check_shape(value: Any, expected: ExpectedShape, path: str = "") -> None:
    if not isinstance(value, Mapping):
        raise ShapeMismatch(path or expected.name, "should be an object", value)
    for f in expected.fields:
        field_path = _join(path, f.name)
        # Models send null for fields they chose to leave out.
        present = value.get(f.name) is not None
        if not present:
            if f.required:
                raise ShapeMismatch(field_path, "is missing")
            continue
        f.kind.check(value[f.name], field_path)


def validate(value: Any, expected: ExpectedShape) -> Any:
    """Check `value` against `expected` and hand it back unchanged.

    Fields are visited in declaration order and the first violation raises
    `ShapeMismatch` carrying its path, e.g. ``appetizers[2].price``.
    """
    check_shape(value, expected)
    return value
