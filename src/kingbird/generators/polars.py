"""Polars DataFrame export for loaded instances."""

from collections.abc import Iterable
from typing import TYPE_CHECKING

import polars as pl
from loguru import logger

if TYPE_CHECKING:  # pragma: no cover
    from ..instance import Instance
    from ..schema import Schema


def create_frame(schema: "Schema", instances: "Iterable[Instance]") -> pl.DataFrame:
    """
    Build a DataFrame with one column per schema field.

    Column dtypes come from the field kinds (see `FieldBase.get_polars_dtype`).
    Fields missing from an instance become nulls.

    Parameters
    ----------
    schema : Schema
        Schema whose fields define the columns.
    instances : Iterable[Instance]
        Records to export, one row each.

    Returns
    -------
    pl.DataFrame
        The exported records.
    """
    rows = [instance.to_dict() for instance in instances]
    columns = []
    for field_name, field in schema.fields.items():
        values = [row.get(field_name) for row in rows]
        columns.append(
            pl.Series(field_name, values, dtype=field.get_polars_dtype(), strict=False)
        )

    logger.debug(f"Exported {len(rows)} row(s) across {len(columns)} column(s)")
    return pl.DataFrame(columns)
