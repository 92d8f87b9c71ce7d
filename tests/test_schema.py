"""Tests for Schema declaration, virtuals, filters and methods."""

import pytest
from pydantic import BaseModel, ValidationError

from kingbird import (
    ArgumentError,
    FieldType,
    FieldTypeError,
    FilterReferenceError,
    Schema,
    SchemaDefinitionError,
)
from kingbird.fields import Number, String


class TestSchemaAdd:
    """Test field declaration through add()."""

    def test_fields_collected_from_declaration(self):
        """Every key of the declaration becomes a field."""
        schema = Schema({"name": "string", "age": "number", "admin": bool})

        fields = schema.fields
        assert list(fields) == ["name", "age", "admin"]
        assert fields["name"].type is FieldType.STRING
        assert fields["age"].type is FieldType.NUMBER
        assert fields["admin"].type is FieldType.BOOLEAN

    def test_field_names_assigned(self):
        schema = Schema({"id": "string", "username": "string"})

        assert schema.field("id").name == "id"
        assert schema.field("username").name == "username"

    def test_object_form_with_default(self):
        """Mappings with an explicit type and default are accepted."""
        schema = Schema({"age": {"type": "number", "default": 18}})

        assert schema.field("age").to_dict() == {"type": "number", "default": 18}

    def test_object_form_without_default_uses_kind_default(self):
        schema = Schema({"active": {"type": "boolean"}})

        assert schema.field("active").default is False

    def test_missing_type_raises(self):
        with pytest.raises(SchemaDefinitionError, match="Invalid type"):
            Schema({"name": None})

    @pytest.mark.parametrize("declared", [[], [None]])
    def test_malformed_array_shorthand_raises(self, declared):
        with pytest.raises(SchemaDefinitionError, match="Invalid Array type"):
            Schema({"friends": declared})

    def test_array_literal_not_supported(self):
        """Non-empty array declarations are rejected at definition time."""
        with pytest.raises(FieldTypeError):
            Schema({"friends": ["string"]})

    def test_nested_object_literal_not_supported(self):
        """A nested mapping without an explicit type is rejected."""
        with pytest.raises(SchemaDefinitionError, match="No type specified"):
            Schema({"contact": {"phone": "number", "address": "string"}})

    def test_default_must_conform_to_type(self):
        with pytest.raises(SchemaDefinitionError, match="conform"):
            Schema({"age": {"type": "number", "default": "old"}})

    def test_unsupported_type_tag_raises(self):
        with pytest.raises(FieldTypeError):
            Schema({"born": "date"})

    def test_definition_errors_are_type_errors(self):
        """Callers catching TypeError keep working."""
        with pytest.raises(TypeError):
            Schema({"name": None})


class TestSchemaField:
    """Test the field() getter/setter."""

    def test_get_unknown_field_returns_none(self):
        assert Schema({"name": "string"}).field("email") is None

    def test_set_field_from_mapping(self):
        schema = Schema()
        schema.field("profile", {"type": "object"})

        assert schema.field("profile").type is FieldType.OBJECT

    def test_set_field_from_field_instance(self):
        schema = Schema()
        schema.field("score", Number(default=1.5))

        assert schema.field("score").default == 1.5
        assert schema.field("score").name == "score"

    def test_set_field_with_invalid_type_raises(self):
        with pytest.raises(FieldTypeError):
            Schema().field("name", {"type": "text"})

    def test_reserved_names_rejected(self):
        """Instance method names cannot be declared as fields."""
        with pytest.raises(SchemaDefinitionError, match="reserved"):
            Schema({"save": "string"})

    @pytest.mark.parametrize("name", ["_model", "_state"])
    def test_instance_internals_reserved(self, name):
        """Names holding an instance's model and state cannot be declared."""
        with pytest.raises(SchemaDefinitionError, match="reserved"):
            Schema({name: "string"})

    def test_fields_returns_copy(self):
        schema = Schema({"id": "string"})

        fields = schema.fields
        fields["test"] = String()
        assert "test" not in schema.fields

    def test_revision_bumped_on_mutation(self):
        schema = Schema()
        before = schema.revision
        schema.field("name", "string")
        assert schema.revision > before


class TestSchemaVirtual:
    """Test virtual registration."""

    def test_virtual_registered(self):
        schema = Schema({"first": "string"})

        def getter(self):
            return self.first

        virtual = schema.virtual("nickname", getter)

        assert schema.virtuals["nickname"] is virtual
        assert virtual.fget is getter
        assert virtual.fset is None

    def test_virtual_cannot_shadow_field(self):
        schema = Schema({"name": "string"})

        with pytest.raises(SchemaDefinitionError, match="non-virtual"):
            schema.virtual("name", lambda self: "x")

    def test_virtual_name_must_be_string(self):
        with pytest.raises(SchemaDefinitionError, match="Invalid virtual name"):
            Schema().virtual(42, lambda self: "x")

    def test_getter_must_be_callable(self):
        with pytest.raises(SchemaDefinitionError, match="get function"):
            Schema().virtual("nickname", "not callable")

    def test_setter_must_be_callable(self):
        with pytest.raises(SchemaDefinitionError, match="set function"):
            Schema().virtual("nickname", lambda self: "x", 5)

    def test_decorator_form(self):
        """Getter and setter can be attached with decorators."""
        schema = Schema({"first": "string"})
        nickname = schema.virtual("nickname")

        @nickname.getter
        def get_nickname(self):
            return self.first.lower()

        @nickname.setter
        def set_nickname(self, value):
            self.first = value.title()

        assert schema.virtuals["nickname"].fget is get_nickname
        assert schema.virtuals["nickname"].fset is set_nickname

    def test_field_cannot_shadow_virtual(self):
        schema = Schema()
        schema.virtual("nickname", lambda self: "x")

        with pytest.raises(SchemaDefinitionError, match="collides"):
            schema.field("nickname", "string")


class TestSchemaFilter:
    """Test filter registration."""

    def test_function_filter(self):
        schema = Schema({"published": "number"})

        def transform(self):
            return self.published * 1000

        schema.filter("published", transform)
        assert schema.filters["published"] is transform

    def test_constant_filter(self):
        """Non-callable values become constant filters."""
        schema = Schema({"seen": "boolean"})
        schema.filter("seen", True)

        assert schema.filters["seen"](object()) is True

    def test_missing_arguments_raise(self):
        schema = Schema({"seen": "boolean"})

        with pytest.raises(ArgumentError, match="Insufficient"):
            schema.filter("seen")
        with pytest.raises(ArgumentError):
            schema.filter(None, True)

    def test_filter_on_undeclared_field_raises(self):
        with pytest.raises(FilterReferenceError, match="undefined field"):
            Schema({"name": "string"}).filter("email", str.lower)

    def test_type_tag_is_not_a_filter_value(self):
        """A primitive type tag is refused so it is not mistaken for a value."""
        schema = Schema({"name": "string"})

        with pytest.raises(FieldTypeError, match="value or function"):
            schema.filter("name", "string")

    @pytest.mark.parametrize("tag", [int, float, str, bool, dict])
    def test_python_type_is_not_a_filter_function(self, tag):
        """Python types are callable but still count as type tags."""
        schema = Schema({"age": "number"})

        with pytest.raises(FieldTypeError, match="value or function"):
            schema.filter("age", tag)
        assert schema.filters == {}


class TestSchemaMethods:
    """Test shared instance methods."""

    def test_method_registered_directly(self):
        schema = Schema()

        def greet(self):
            return "hi"

        schema.method("greet", greet)
        assert schema.methods == {"greet": greet}

    def test_method_decorator(self):
        schema = Schema()

        @schema.method("greet")
        def greet(self):
            return "hi"

        assert schema.methods["greet"] is greet

    def test_method_must_be_callable(self):
        with pytest.raises(SchemaDefinitionError, match="callable"):
            Schema().method("greet", "hi")

    def test_method_cannot_shadow_field(self):
        with pytest.raises(SchemaDefinitionError, match="collides"):
            Schema({"greet": "string"}).method("greet", lambda self: "hi")

    def test_reserved_method_name_rejected(self):
        with pytest.raises(SchemaDefinitionError, match="reserved"):
            Schema().method("remove", lambda self: None)


class TestSchemaToPydantic:
    """Test schema export to Pydantic."""

    def test_generates_base_model(self):
        model = Schema({"name": "string"}).to_pydantic("User")

        assert issubclass(model, BaseModel)
        assert model.__name__ == "User"

    def test_defaults_exported(self):
        model = Schema(
            {"name": "string", "age": {"type": "number", "default": 18}}
        ).to_pydantic()

        assert model().model_dump() == {"name": "", "age": 18}

    def test_kinds_validated(self):
        model = Schema({"age": "number", "active": "boolean"}).to_pydantic()

        record = model(age=30, active=True)
        assert record.age == 30
        with pytest.raises(ValidationError):
            model(age="not a number")
