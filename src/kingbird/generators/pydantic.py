"""Pydantic model generator for schema fields."""

from typing import TYPE_CHECKING, Any

from pydantic import BaseModel, create_model
from pydantic import Field as PydanticField

if TYPE_CHECKING:  # pragma: no cover
    from ..schema import Schema


def create_pydantic_model(schema: "Schema", name: str = "Record") -> type[BaseModel]:
    """
    Generate a Pydantic BaseModel from a Schema.

    Every field becomes optional with its schema default, matching how
    instances only carry the keys a record actually has. Virtuals, filters
    and methods are not exported, nor are transient (underscore) fields.

    Parameters
    ----------
    schema : Schema
        The schema to export.
    name : str, default "Record"
        Name of the generated model class.

    Returns
    -------
    type[BaseModel]
        A dynamically created Pydantic BaseModel class.
    """
    pydantic_fields: dict[str, Any] = {}

    for field_name, field in schema.fields.items():
        if field_name.startswith("_"):
            continue
        field_kwargs: dict[str, Any] = {"default": field.default}
        if field.description:
            field_kwargs["description"] = field.description
        pydantic_fields[field_name] = (
            field.get_annotation(),
            PydanticField(**field_kwargs),
        )

    # Pydantic's create_model is dynamically typed - returns type[BaseModel] at runtime
    model: type[BaseModel] = create_model(name, **pydantic_fields)  # type: ignore[call-overload]
    return model
