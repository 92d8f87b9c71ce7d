"""Record values built by a `Model` from raw JSON."""

from enum import Enum
from typing import TYPE_CHECKING, Any

from loguru import logger

from .schema import ID_KEY

if TYPE_CHECKING:  # pragma: no cover
    from .model import Model


class InstanceState(str, Enum):
    """Construction stages of an instance, in order."""

    VIRTUALS_APPLIED = "virtuals_applied"
    POPULATED = "populated"
    FILTERED = "filtered"


def is_transient(key: str) -> bool:
    """Keys starting with an underscore are never sent to the backend."""
    return key.startswith("_")


def strip_transient(data: dict[str, Any]) -> dict[str, Any]:
    return {key: value for key, value in data.items() if not is_transient(key)}


def state_of(instance: "Instance") -> InstanceState:
    """Return how far construction of `instance` got."""
    return instance.__dict__["_state"]


class Instance:
    """
    A record built from raw JSON according to a model's schema.

    Each `Model` derives its own subclass once per schema revision, with
    virtuals installed as properties and shared methods as plain functions.
    Field values live in the instance `__dict__`.

    Instances are free-standing values: they keep a reference to their model
    only to provide the bound `save`, `create` and `remove` coroutines.
    """

    _model: "Model"

    def __init__(self):
        # Virtual accessors are class-level, so they exist before any data
        self.__dict__["_state"] = InstanceState.VIRTUALS_APPLIED

    def _populate(self, raw: dict[str, Any]) -> None:
        schema = self._model.schema
        virtuals = schema.virtuals
        for key, value in raw.items():
            if not schema.accepts(key):
                continue
            if key in virtuals and virtuals[key].fset is None:
                logger.debug(f"Skipping read-only virtual `{key}`")
                continue
            setattr(self, key, value)
        self.__dict__["_state"] = InstanceState.POPULATED

    def _apply_filters(self) -> None:
        for name, transform in self._model.schema.filters.items():
            setattr(self, name, transform(self))
        self.__dict__["_state"] = InstanceState.FILTERED

    def to_dict(self, transient: bool = True) -> dict[str, Any]:
        """
        Return the stored field values.

        Parameters
        ----------
        transient : bool, default True
            Include fields whose names start with an underscore.
        """
        schema = self._model.schema
        fields = schema.fields
        data = {
            key: value
            for key, value in self.__dict__.items()
            if key in fields or (key == ID_KEY and schema.accepts(key))
        }
        if not transient:
            data = strip_transient(data)
        return data

    async def save(self) -> "Instance | None":
        """Send this record to the backend with PUT."""
        return await self._model.query().save(self._payload())

    async def create(self) -> "Instance":
        """Send this record to the backend with POST."""
        return await self._model.query().create(self._payload())

    async def remove(self) -> None:
        """Delete this record from the backend."""
        return await self._model.query().remove(self.__dict__.get(ID_KEY))

    def _payload(self) -> dict[str, Any]:
        # Filtered values may no longer match their declared kind
        return self._model.validate(self.to_dict(transient=False))

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Instance):
            return NotImplemented
        return self._model is other._model and self.to_dict() == other.to_dict()

    __hash__ = None  # type: ignore[assignment]

    def __repr__(self) -> str:
        return f"{self.__class__.__name__}({self.to_dict()!r})"
