"""`Schema` registry of fields, virtuals, filters and shared methods."""

from collections.abc import Callable, Mapping
from typing import Any

from loguru import logger

from .errors import (
    ArgumentError,
    FieldTypeError,
    FilterReferenceError,
    SchemaDefinitionError,
)
from .fields import _MISSING, FieldBase, get_field_class_for_type, is_primitive_type

# Attribute names every Instance defines for itself
RESERVED_NAMES = frozenset({"save", "create", "remove", "to_dict", "_model", "_state"})

# Record identifier, implicitly accepted by every schema
ID_KEY = "id"


class Virtual:
    """
    A computed property backed by a getter and a setter.

    The getter is called with the instance and returns the value; the setter
    is called with the instance and the assigned value. Mirrors the
    `property` API so it can be filled in with decorators:

        >>> full_name = schema.virtual("full_name")
        >>> @full_name.getter
        ... def _(self):
        ...     return f"{self.first} {self.last}"
    """

    def __init__(
        self,
        name: str,
        fget: Callable[[Any], Any] | None = None,
        fset: Callable[[Any, Any], None] | None = None,
    ):
        self.name = name
        self.fget = fget
        self.fset = fset

    def getter(self, func: Callable[[Any], Any]) -> Callable[[Any], Any]:
        if not callable(func):
            raise SchemaDefinitionError("Invalid get function.")
        self.fget = func
        return func

    def setter(self, func: Callable[[Any, Any], None]) -> Callable[[Any, Any], None]:
        if not callable(func):
            raise SchemaDefinitionError("Invalid set function.")
        self.fset = func
        return func

    def __repr__(self) -> str:
        return f"Virtual({self.name!r})"


class Schema:
    """
    Declarative registry of field types, defaults, virtuals and filters for
    one entity kind.

    Fields are declared with a mapping whose values are primitive type tags
    ("boolean", "number", "string", "object" or the matching Python types),
    or mappings carrying an explicit `type` and an optional `default`.

    Examples
    --------
    Basic declaration:

        >>> from kingbird import Schema
        >>> schema = Schema({
        ...     "name": "string",
        ...     "age": {"type": "number", "default": 18},
        ...     "tags": dict,
        ... })
        >>> schema.field("age").to_dict()
        {'type': 'number', 'default': 18}

    Virtuals, filters and shared methods:

        >>> from datetime import datetime, timezone
        >>> schema = Schema({"first": str, "last": str, "published": float})
        >>> schema.virtual(
        ...     "full_name",
        ...     lambda self: f"{self.first} {self.last}",
        ...     lambda self, value: setattr(self, "first", value.split()[0]),
        ... )
        Virtual('full_name')
        >>> schema.filter(
        ...     "published",
        ...     lambda self: datetime.fromtimestamp(self.published, timezone.utc),
        ... )
        >>> @schema.method("greet")
        ... def greet(self):
        ...     return f"Hello {self.first}"
    """

    def __init__(self, declaration: Mapping[str, Any] | None = None):
        self._fields: dict[str, FieldBase] = {}
        self._virtuals: dict[str, Virtual] = {}
        self._filters: dict[str, Callable[[Any], Any]] = {}
        self._methods: dict[str, Callable] = {}
        # Bumped on every mutation so models can rebuild their instance class
        self.revision = 0

        if declaration:
            self.add(declaration)

    @property
    def fields(self) -> dict[str, FieldBase]:
        """Return a copy of the declared fields."""
        return self._fields.copy()

    @property
    def virtuals(self) -> dict[str, Virtual]:
        """Return a copy of the registered virtuals."""
        return self._virtuals.copy()

    @property
    def filters(self) -> dict[str, Callable[[Any], Any]]:
        """Return a copy of the registered filters."""
        return self._filters.copy()

    @property
    def methods(self) -> dict[str, Callable]:
        """Return a copy of the shared instance methods."""
        return self._methods.copy()

    def add(self, declaration: Mapping[str, Any]) -> None:
        """
        Register a field for each key of `declaration`.

        Parameters
        ----------
        declaration : Mapping[str, Any]
            Field names mapped to a type tag, or to a mapping with an
            explicit `type` and an optional `default`.

        Raises
        ------
        SchemaDefinitionError
            If a type is missing, an array type is given, a mapping lacks
            `type`, or a default does not conform to its type.
        FieldTypeError
            If a type tag is not a supported primitive kind.
        """
        for key, value in declaration.items():
            if value is None:
                raise SchemaDefinitionError(f"Invalid type for schema field `{key}`")

            if isinstance(value, list) and (
                len(value) == 0 or (len(value) == 1 and value[0] is None)
            ):
                raise SchemaDefinitionError(
                    f"Invalid Array type for schema field `{key}`"
                )

            if isinstance(value, Mapping):
                # Nested object literals are not supported, only {type, default}
                if "type" not in value:
                    raise SchemaDefinitionError(
                        f"No type specified for schema field `{key}`"
                    )
                spec = {"type": value["type"]}
                if "default" in value:
                    spec["default"] = value["default"]
                self.field(key, spec)
            else:
                self.field(key, value)

    def field(self, name: str, spec: Any = _MISSING) -> FieldBase | None:
        """
        Get or set a field definition.

        With one argument, return the registered field or None. With two,
        build the field from `spec` (a `FieldBase`, a type tag, or a mapping
        with `type` and optional `default`) and register it.

        Examples
        --------
            >>> schema.field("name")
            String(name='name', default='')
            >>> schema.field("profile", {"type": "object"})
        """
        if spec is _MISSING:
            return self._fields.get(name)

        self._check_name(name)
        if name in self._virtuals:
            raise SchemaDefinitionError(
                f"Field `{name}` collides with a defined virtual"
            )

        if isinstance(spec, FieldBase):
            field = spec
        elif isinstance(spec, Mapping):
            if not is_primitive_type(spec.get("type")):
                raise FieldTypeError(f"Invalid type for schema field `{name}`")
            field_class = get_field_class_for_type(spec["type"])
            field = field_class(default=spec.get("default", _MISSING))
        else:
            field = get_field_class_for_type(spec)()

        field.name = name
        self._fields[name] = field
        self.revision += 1
        return None

    def virtual(
        self,
        name: str,
        getter: Callable[[Any], Any] | None = None,
        setter: Callable[[Any, Any], None] | None = None,
    ) -> Virtual:
        """
        Register a virtual field.

        Parameters
        ----------
        name : str
            Name of the virtual. Must not be a declared field.
        getter : callable, optional
            Called with the instance; returns the virtual's value.
        setter : callable, optional
            Called with the instance and the assigned value.

        Returns
        -------
        Virtual
            The registered virtual; its `getter`/`setter` methods can be used
            as decorators to fill in missing functions.

        Examples
        --------
            >>> schema.virtual(
            ...     "profile",
            ...     lambda self: {"name": self.name, "email": self.email},
            ...     lambda self, profile: self.__dict__.update(profile),
            ... )
            Virtual('profile')
        """
        # virtuals can't override defined non-virtual fields
        if isinstance(name, str) and self.field(name) is not None:
            raise SchemaDefinitionError("Can't override defined non-virtual field")
        if not isinstance(name, str):
            raise SchemaDefinitionError("Invalid virtual name")
        self._check_name(name)

        if getter is not None and not callable(getter):
            raise SchemaDefinitionError("Invalid get function.")
        if setter is not None and not callable(setter):
            raise SchemaDefinitionError("Invalid set function.")

        virtual = Virtual(name, getter, setter)
        self._virtuals[name] = virtual
        self.revision += 1
        return virtual

    def filter(self, name: str, transform: Any = None) -> None:
        """
        Set a filter on a field.

        Filters run when records are loaded from the backend and replace the
        field's value with the transform's result. A callable is invoked with
        the instance; any other value is assigned as a constant. Every filter
        runs, including those on fields the loaded record does not carry.

        Raises
        ------
        ArgumentError
            If either argument is missing.
        FilterReferenceError
            If `name` is not a declared field.
        FieldTypeError
            If `transform` is a type tag rather than a value or function.

        Examples
        --------
        Turn a stored unix timestamp into a datetime after loading:

            >>> schema.filter(
            ...     "published",
            ...     lambda self: datetime.fromtimestamp(self.published),
            ... )

        Or a simple value:

            >>> schema.filter("seen", True)
        """
        if name is None or transform is None:
            raise ArgumentError("Insufficient arguments.")
        if self.field(name) is None:
            raise FilterReferenceError(f"Set filter on undefined field `{name}`.")

        # Python types are callable but are type tags, not transforms
        if is_primitive_type(transform):
            raise FieldTypeError("A value or function expected.")
        if callable(transform):
            self._filters[name] = transform
        else:
            self._filters[name] = lambda instance: transform
        self.revision += 1

    def method(self, name: str, func: Callable | None = None):
        """
        Register a method shared by every instance of this schema.

        Can be called directly or used as a decorator:

            >>> @schema.method("greet")
            ... def greet(self):
            ...     return f"Hello {self.name}"
        """
        if func is None:

            def decorator(f: Callable) -> Callable:
                self.method(name, f)
                return f

            return decorator

        if not callable(func):
            raise SchemaDefinitionError(f"Method `{name}` must be callable")
        self._check_name(name)
        if name in self._fields or name in self._virtuals:
            raise SchemaDefinitionError(
                f"Method `{name}` collides with a field or virtual"
            )
        self._methods[name] = func
        self.revision += 1
        return func

    def accepts(self, name: str) -> bool:
        """Return True if `name` may be populated on an instance."""
        return (
            name in self._fields
            or name in self._virtuals
            or (name == ID_KEY and ID_KEY not in self._fields)
        )

    def to_pydantic(self, name: str = "Record") -> type:
        """
        Generate a Pydantic BaseModel from this schema's fields.

        Parameters
        ----------
        name : str, default "Record"
            Name of the generated model class.

        Returns
        -------
        type
            A dynamically created Pydantic BaseModel class.

        Examples
        --------
            >>> UserModel = Schema({"name": "string"}).to_pydantic("User")
            >>> UserModel(name="Jon").model_dump()
            {'name': 'Jon'}
        """
        from .generators.pydantic import create_pydantic_model

        logger.info(f"Exporting schema with {len(self._fields)} field(s) as {name}")
        return create_pydantic_model(self, name)

    @staticmethod
    def _check_name(name: str) -> None:
        if name in RESERVED_NAMES:
            raise SchemaDefinitionError(f"`{name}` is reserved by instances")

    def __repr__(self) -> str:
        return (
            f"Schema(fields={list(self._fields)}, virtuals={list(self._virtuals)})"
        )
