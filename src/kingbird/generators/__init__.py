"""Generators for different frameworks."""

from .polars import create_frame
from .pydantic import create_pydantic_model

__all__ = [
    "create_frame",
    "create_pydantic_model",
]
