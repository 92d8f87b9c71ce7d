"""`Model` binds a schema to a backend route and builds instances."""

from collections.abc import Iterable, Mapping
from typing import Any

from .client import Client
from .errors import ArgumentError
from .instance import Instance
from .query import Query
from .schema import ID_KEY, Schema


class Model:
    """
    Entry point for CRUD calls against one backend resource.

    A model owns no per-call state: every operation builds a fresh `Query`.
    All operations are coroutines, and every error (including invalid
    arguments) is raised when the call is awaited.

    Parameters
    ----------
    route : str
        Resource path on the backend, e.g. "/users".
    schema : Schema
        Field, virtual, filter and method definitions for the records.
    client : Client, optional
        Transport and base url. Built from the environment when omitted.
    options : Mapping, optional
        Opaque options kept for callers.

    Examples
    --------
        >>> from kingbird import Client, ClientConfig, Model, Schema
        >>> client = Client(ClientConfig(url="http://localhost:8888"))
        >>> User = Model("/users", Schema({"name": "string"}), client=client)
        >>> user = User.instantiate({"name": "Jon Snow"})
        >>> user.name
        'Jon Snow'
        >>> users = await User.find({"name": "Jon Snow"}, {"limit": 10})
    """

    def __init__(
        self,
        route: str,
        schema: Schema,
        client: Client | None = None,
        options: Mapping[str, Any] | None = None,
    ):
        self.route = route
        self.schema = schema
        self.client = client or Client()
        self.options = dict(options or {})
        self._instance_class: type[Instance] | None = None
        self._revision = -1

    @property
    def name(self) -> str:
        """Class-friendly name derived from the route, e.g. "Users"."""
        last = self.route.strip("/").rsplit("/", 1)[-1]
        return "".join(part.title() for part in last.replace("-", "_").split("_"))

    def query(self) -> Query:
        """Build the single-use query for one call."""
        return Query(self.client, self.route, self)

    def validate(self, raw: Any) -> dict[str, Any]:
        """
        Keep only the entries of `raw` that conform to the schema.

        A declared field is kept when its value has the declared kind. A
        virtual is always kept, since its setter defines what it accepts. An
        undeclared `id` is kept unless it is None.

        Raises
        ------
        ArgumentError
            If `raw` is neither None, a mapping nor an instance.
        """
        if raw is None:
            return {}
        if isinstance(raw, Instance):
            raw = raw.to_dict()
        elif not isinstance(raw, Mapping):
            raise ArgumentError(
                f"Expected a mapping or an instance, got {type(raw).__name__}."
            )

        virtuals = self.schema.virtuals
        valid: dict[str, Any] = {}
        for key, value in raw.items():
            field = self.schema.field(key)
            if field is not None:
                if field.check(value):
                    valid[key] = value
            elif key in virtuals:
                valid[key] = value
            elif key == ID_KEY and value is not None:
                valid[key] = value
        return valid

    def instantiate(self, raw: Mapping[str, Any] | None = None, loaded: bool = False):
        """
        Create an instance of this model.

        Virtual accessors exist before any data is copied in, so a
        virtual-named key goes through its setter. Only declared fields and
        virtuals are copied; values are not type checked here.

        Parameters
        ----------
        raw : Mapping, optional
            Source record.
        loaded : bool, default False
            True when `raw` came from the backend; filters only run then.

        Examples
        --------
            >>> User = Model("/users", Schema({"name": "string"}))
            >>> user = User.instantiate({"name": "Jon Snow", "admin": True})
            >>> user.to_dict()
            {'name': 'Jon Snow'}
        """
        instance = self._get_instance_class()()
        instance._populate(dict(raw or {}))
        if loaded:
            instance._apply_filters()
        return instance

    def _get_instance_class(self) -> type[Instance]:
        if self._instance_class is None or self._revision != self.schema.revision:
            namespace: dict[str, Any] = {"_model": self}
            namespace.update(self.schema.methods)
            for name, virtual in self.schema.virtuals.items():
                namespace[name] = property(virtual.fget, virtual.fset)
            self._instance_class = type(self.name or "Record", (Instance,), namespace)
            self._revision = self.schema.revision
        return self._instance_class

    async def find(
        self,
        conditions: Mapping[str, Any] | None = None,
        options: Mapping[str, Any] | None = None,
    ) -> list[Instance]:
        """
        Find every record matching `conditions`.

        Parameters
        ----------
        conditions : Mapping, optional
            Sent as the request body.
        options : Mapping, optional
            `orderBy`, `desc`, `skip` and `limit` are forwarded in the query
            string; other keys are ignored.
        """
        return await self.query().find(conditions, options)

    async def find_by_id(self, id: Any) -> Instance | None:
        return await self.query().find_by_id(id)

    async def find_one(self, conditions: Mapping[str, Any] | None = None):
        """Return the single matching record, or None for zero or many."""
        return await self.query().find_one(conditions)

    async def save(self, raw: Any) -> Instance | None:
        """Validate `raw` and update it on the backend."""
        instance = self.instantiate(self.validate(raw))
        return await instance.save()

    async def create(self, raw: Any) -> Instance:
        """Validate `raw` and create it on the backend."""
        instance = self.instantiate(self.validate(raw))
        return await instance.create()

    async def remove(self, id: Any) -> None:
        return await self.query().remove(id)

    async def request(self, options: Any) -> tuple[int, Any]:
        """Ad-hoc request relative to the route; see `Query.request`."""
        return await self.query().request(options)

    def to_frame(self, instances: Iterable[Instance]):
        """
        Export instances as a Polars DataFrame typed from the schema.

        Returns
        -------
        pl.DataFrame
            One column per declared field, one row per instance.
        """
        from .generators.polars import create_frame

        return create_frame(self.schema, instances)

    def __repr__(self) -> str:
        return f"Model({self.route!r}, {self.schema!r})"
