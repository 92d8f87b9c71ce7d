"""
Kingbird: Schema-Typed Records over JSON/HTTP

Declare a schema once. Find, create, save and remove typed records.
"""

from .client import Client
from .config import ClientConfig
from .errors import (
    ArgumentError,
    CardinalityError,
    FieldTypeError,
    FilterReferenceError,
    KingbirdError,
    RemovalError,
    SchemaDefinitionError,
    StatusError,
)
from .fields import FieldBase, FieldType
from .instance import Instance, InstanceState
from .model import Model
from .query import Query
from .schema import Schema, Virtual

__version__ = "0.1.0"

__all__ = [
    # Core
    "Schema",
    "Model",
    "Query",
    "Instance",
    "Virtual",
    # Transport
    "Client",
    "ClientConfig",
    # Errors
    "KingbirdError",
    "SchemaDefinitionError",
    "FieldTypeError",
    "FilterReferenceError",
    "ArgumentError",
    "StatusError",
    "RemovalError",
    "CardinalityError",
    # Internal (for advanced use)
    "FieldBase",
    "FieldType",
    "InstanceState",
]
