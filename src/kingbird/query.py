"""Single-use translation of one model operation into one HTTP request."""

import math
from collections.abc import Mapping
from typing import TYPE_CHECKING, Any

from loguru import logger

from .errors import ArgumentError, CardinalityError, RemovalError, StatusError
from .instance import strip_transient
from .schema import ID_KEY

if TYPE_CHECKING:  # pragma: no cover
    from .client import Client
    from .instance import Instance
    from .model import Model

# Options forwarded to the backend by `find`, in emission order
OPTION_KEYS = ("orderBy", "desc", "skip", "limit")


def render(value: Any) -> str:
    """Render a value for a path segment or query string, JSON style."""
    if value is None:
        return "null"
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, float):
        if math.isnan(value):
            return "NaN"
        if math.isinf(value):
            return "Infinity" if value > 0 else "-Infinity"
        if value.is_integer():
            return str(int(value))
    return str(value)


def build_query_string(options: Mapping[str, Any] | None) -> str:
    """
    Build the query string for `find` from whitelisted options.

    Keys are emitted in the fixed order of `OPTION_KEYS` as `key=value&`
    segments, without percent-encoding. Other keys are ignored.

    Examples
    --------
        >>> build_query_string({"skip": 10, "orderBy": "name", "page": 2})
        '?orderBy=name&skip=10&'
        >>> build_query_string({})
        ''
    """
    if not options:
        return ""
    segments = [
        f"{key}={render(options[key])}&" for key in OPTION_KEYS if key in options
    ]
    if not segments:
        return ""
    return "?" + "".join(segments)


def _records(data: Any) -> list[Any]:
    if data is None:
        return []
    if isinstance(data, list):
        return data
    # A single JSON object stands for a one-record array
    return [data]


class Query:
    """
    Executes exactly one request for a model and maps the response back.

    A fresh Query is built for every model call and discarded afterwards.

    Parameters
    ----------
    client : Client
        Transport and base url.
    route : str
        Resource path of the model, e.g. "/users".
    model : Model
        Model used to instantiate returned records.
    """

    def __init__(self, client: "Client", route: str, model: "Model"):
        self.client = client
        self.route = route
        self.model = model

    def _path(self, *segments: str) -> str:
        return "/".join([self.route.rstrip("/"), *segments])

    async def _send(self, method: str, path: str, body: Any = None, **kwargs):
        status, data = await self.client.send(method, path, body, **kwargs)
        if status != 200:
            logger.warning(f"{method} {path} answered {status}")
        return status, data

    def _instantiate(self, raw: Any) -> "Instance":
        return self.model.instantiate(raw, loaded=True)

    async def find(
        self,
        conditions: Mapping[str, Any] | None = None,
        options: Mapping[str, Any] | None = None,
    ) -> "list[Instance]":
        """POST the conditions to `{route}/query` and load every record."""
        if conditions is None:
            conditions = {}
        path = self._path("query") + build_query_string(options)

        status, data = await self._send("POST", path, dict(conditions))
        if status != 200:
            raise StatusError(status)
        records = _records(data)
        logger.debug(f"find on {self.route} returned {len(records)} record(s)")
        return [self._instantiate(record) for record in records]

    async def find_by_id(self, id: Any) -> "Instance | None":
        """GET `{route}/{id}`; the first record, or None when there is none."""
        status, data = await self._send("GET", self._path(render(id)))
        if status != 200:
            raise StatusError(status)
        records = _records(data)
        if records:
            return self._instantiate(records[0])
        return None

    async def find_one(
        self, conditions: Mapping[str, Any] | None = None
    ) -> "Instance | None":
        """
        POST the conditions to `{route}/query` and expect a single match.

        Empty and ambiguous results both yield None.
        """
        if conditions is None:
            conditions = {}
        status, data = await self._send("POST", self._path("query"), dict(conditions))
        if status != 200:
            raise StatusError(status)
        records = _records(data)
        # guarantee that only one record is returned
        if len(records) == 1:
            return self._instantiate(records[0])
        logger.debug(f"find_one on {self.route} matched {len(records)} record(s)")
        return None

    async def save(self, obj: Any) -> "Instance | None":
        """PUT the record to `{route}/{id}`."""
        if not isinstance(obj, Mapping) or obj.get(ID_KEY) is None:
            raise ArgumentError("Invalid param: save requires a record with an id.")

        body = strip_transient(dict(obj))
        status, data = await self._send("PUT", self._path(render(obj[ID_KEY])), body)
        if status != 200:
            raise StatusError(status)
        records = _records(data)
        if len(records) == 1:
            return self._instantiate(records[0])
        return None

    async def create(self, obj: Any) -> "Instance":
        """
        POST the record to `{route}`.

        The backend accepts client-supplied identifiers, so `id` is required.

        Raises
        ------
        CardinalityError
            If the response does not hold exactly one record.
        """
        if not isinstance(obj, Mapping) or obj.get(ID_KEY) is None:
            raise ArgumentError("Invalid param: create requires a record with an id.")

        body = strip_transient(dict(obj))
        status, data = await self._send("POST", self._path(), body)
        if status != 200:
            raise StatusError(status)
        records = _records(data)
        if len(records) != 1:
            logger.warning(
                f"create on {self.route} returned {len(records)} record(s)"
            )
            raise CardinalityError(len(records))
        return self._instantiate(records[0])

    async def remove(self, id: Any) -> None:
        """DELETE `{route}/{id}`."""
        # Catches callers that passed a callback in place of the id
        if id is None or callable(id):
            raise ArgumentError("Invalid param: remove requires an id.")

        path = self._path(render(id))
        status, _ = await self._send("DELETE", path)
        if status != 200:
            raise RemovalError(status, f"Failed to remove {path}: {status} error.")

    async def request(self, options: Any) -> tuple[int, Any]:
        """
        Perform an ad-hoc request relative to the route.

        Parameters
        ----------
        options : Mapping
            `method` (default "GET"), `path` appended to the route, and
            optional `body` and `params`.

        Returns
        -------
        tuple[int, Any]
            Status code and decoded body; the status is not interpreted.
        """
        if not isinstance(options, Mapping):
            raise ArgumentError("Request options must be a mapping.")

        method = str(options.get("method", "GET")).upper()
        sub_path = str(options.get("path", "")).strip("/")
        path = self._path(sub_path) if sub_path else self._path()
        return await self._send(
            method, path, options.get("body"), params=options.get("params")
        )
