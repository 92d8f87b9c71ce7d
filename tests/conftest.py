"""Shared fixtures for kingbird tests."""

import json

import httpx
import pytest

from kingbird import Client, ClientConfig, Model, Schema

BASE_URL = "http://backend.test"


class FakeBackend:
    """Records every request and answers with queued responses."""

    def __init__(self):
        self.requests: list[httpx.Request] = []
        self._responses: list[httpx.Response] = []
        self.transport = httpx.MockTransport(self._handle)

    def respond(self, status_code: int = 200, json=None, text: str | None = None):
        if text is not None:
            self._responses.append(httpx.Response(status_code, text=text))
        else:
            self._responses.append(httpx.Response(status_code, json=json))

    def fail(self, message: str = "connection refused"):
        self._responses.append(httpx.ConnectError(message))

    def _handle(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        response = self._responses.pop(0) if self._responses else httpx.Response(200)
        if isinstance(response, Exception):
            raise response
        return response

    @property
    def last(self) -> httpx.Request:
        return self.requests[-1]

    def last_body(self):
        return json.loads(self.last.content)


@pytest.fixture
def backend():
    """Mock backend with no queued responses."""
    return FakeBackend()


@pytest.fixture
def client(backend):
    """Client wired to the mock backend."""
    return Client(ClientConfig(url=BASE_URL), transport=backend.transport)


@pytest.fixture
def user_schema():
    """Simple schema with a string and a number field."""
    return Schema({"name": "string", "age": "number"})


@pytest.fixture
def user_model(user_schema, client):
    """Model for /users bound to the mock backend."""
    return Model("/users", user_schema, client=client)


@pytest.fixture
def person_schema():
    """Schema with a virtual, a filter and a shared method."""
    schema = Schema(
        {
            "first": "string",
            "last": "string",
            "published": {"type": "number", "default": 0},
            "_token": "string",
        }
    )

    def get_full_name(self):
        return f"{self.first} {self.last}"

    def set_full_name(self, value):
        self.first, self.last = value.split(" ", 1)

    schema.virtual("full_name", get_full_name, set_full_name)
    schema.filter("published", lambda self: getattr(self, "published", 0) * 1000)

    @schema.method("greet")
    def greet(self):
        return f"Hello {self.first}"

    return schema


@pytest.fixture
def person_model(person_schema, client):
    """Model for /people bound to the mock backend."""
    return Model("/people", person_schema, client=client)
