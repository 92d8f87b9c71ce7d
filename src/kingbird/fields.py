"""Primitive field kinds, runtime type checks and field definitions."""

from enum import Enum
from typing import Any

import polars as pl

from .errors import FieldTypeError, SchemaDefinitionError

# Sentinel value to distinguish "no default provided" from "default is None"
_MISSING = object()


class FieldType(str, Enum):
    """The closed set of primitive kinds a schema field can declare."""

    BOOLEAN = "boolean"
    NUMBER = "number"
    STRING = "string"
    OBJECT = "object"

    @classmethod
    def parse(cls, tag: Any) -> "FieldType":
        """
        Normalise a type tag to a `FieldType`.

        Accepts a `FieldType`, one of the string tags ("boolean", "number",
        "string", "object") or a Python type used as shorthand (`bool`, `int`,
        `float`, `str`, `dict`, `list`).

        Raises
        ------
        FieldTypeError
            If the tag does not name a supported primitive kind.
        """
        if isinstance(tag, FieldType):
            return tag
        if isinstance(tag, str):
            try:
                return cls(tag)
            except ValueError:
                pass
        elif isinstance(tag, type) and tag in _PYTHON_TYPES:
            return _PYTHON_TYPES[tag]
        raise FieldTypeError(f"Unsupported field type: {tag!r}")


_PYTHON_TYPES: dict[type, FieldType] = {
    bool: FieldType.BOOLEAN,
    int: FieldType.NUMBER,
    float: FieldType.NUMBER,
    str: FieldType.STRING,
    dict: FieldType.OBJECT,
    list: FieldType.OBJECT,
}


def is_primitive_type(tag: Any) -> bool:
    """Return True if `tag` names one of the supported primitive kinds."""
    try:
        FieldType.parse(tag)
    except FieldTypeError:
        return False
    return True


def type_of(value: Any) -> FieldType:
    """
    Return the runtime kind of a value.

    `bool` is checked before numbers since it subclasses `int`. Anything that
    is not a boolean, number or string (mappings, lists, None) is an object.
    """
    if isinstance(value, bool):
        return FieldType.BOOLEAN
    if isinstance(value, (int, float)):
        return FieldType.NUMBER
    if isinstance(value, str):
        return FieldType.STRING
    return FieldType.OBJECT


def matches(value: Any, kind: Any) -> bool:
    """Return True if the runtime kind of `value` is `kind`."""
    return type_of(value) is FieldType.parse(kind)


def default_of_type(kind: Any) -> Any:
    """Return the default value for a primitive kind."""
    return _DEFAULTS[FieldType.parse(kind)]


_DEFAULTS: dict[FieldType, Any] = {
    FieldType.BOOLEAN: False,
    FieldType.NUMBER: 0,
    FieldType.STRING: "",
    FieldType.OBJECT: None,
}


class FieldBase:
    """
    Base field class for schema definitions.

    A field has a primitive kind and a default value. The default must
    conform to the kind; when omitted, the kind's default is used.

    Parameters
    ----------
    default : Any, optional
        Default value for this field.
    description : str, optional
        Human-readable description of this field.

    Examples
    --------
        >>> from kingbird.fields import String
        >>> field = String(default="anonymous")
        >>> field.to_dict()
        {'type': 'string', 'default': 'anonymous'}
    """

    field_type: FieldType

    def __init__(self, *, default: Any = _MISSING, description: str | None = None):
        if default is _MISSING:
            default = default_of_type(self.field_type)
        elif not matches(default, self.field_type):
            raise SchemaDefinitionError("Default value doesn't conform to type.")
        self.default = default
        self.description = description
        self.name: str | None = None  # Set by Schema.field

    @property
    def type(self) -> FieldType:
        return self.field_type

    def check(self, value: Any) -> bool:
        """Return True if `value` has this field's kind."""
        return type_of(value) is self.field_type

    def get_python_type(self) -> type:
        """Return the Python type for this field."""
        raise NotImplementedError

    def get_annotation(self) -> Any:
        """Return the annotation used when exporting to Pydantic."""
        return self.get_python_type()

    def get_polars_dtype(self):
        """Return the Polars dtype for this field."""
        raise NotImplementedError

    def to_dict(self) -> dict[str, Any]:
        return {"type": self.field_type.value, "default": self.default}

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, FieldBase):
            return NotImplemented
        return (
            self.field_type is other.field_type
            and self.default == other.default
            and self.name == other.name
        )

    def __hash__(self) -> int:
        return hash((self.field_type, self.name))

    def __repr__(self) -> str:
        return (
            f"{self.__class__.__name__}(name={self.name!r}, "
            f"default={self.default!r})"
        )


class Boolean(FieldBase):
    """Boolean field type."""

    field_type = FieldType.BOOLEAN

    def get_python_type(self):
        return bool

    def get_polars_dtype(self):
        return pl.Boolean


class Number(FieldBase):
    """
    Number field type.

    Integers and floats both have the number kind; booleans do not.
    """

    field_type = FieldType.NUMBER

    def get_python_type(self):
        return float

    def get_annotation(self):
        return int | float

    def get_polars_dtype(self):
        return pl.Float64


class String(FieldBase):
    """String field type."""

    field_type = FieldType.STRING

    def get_python_type(self):
        return str

    def get_polars_dtype(self):
        return pl.Utf8


class Object(FieldBase):
    """
    Object field type for mappings, lists and other structured values.

    `None` has the object kind, so it is also the default.
    """

    field_type = FieldType.OBJECT

    def get_python_type(self):
        return object

    def get_annotation(self):
        return Any

    def get_polars_dtype(self):
        return pl.Object


# Mapping from primitive kinds to Field classes
_TYPE_MAP: dict[FieldType, type[FieldBase]] = {
    FieldType.BOOLEAN: Boolean,
    FieldType.NUMBER: Number,
    FieldType.STRING: String,
    FieldType.OBJECT: Object,
}


def get_field_class_for_type(tag: Any) -> type[FieldBase]:
    """
    Get the Field class for a type tag.

    Parameters
    ----------
    tag : FieldType | str | type
        A primitive kind, its string tag, or a Python type shorthand.

    Returns
    -------
    type[FieldBase]
        The corresponding Field class.

    Raises
    ------
    FieldTypeError
        If the tag does not name a supported primitive kind.
    """
    return _TYPE_MAP[FieldType.parse(tag)]
