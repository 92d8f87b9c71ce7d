"""
Basic Usage Example: Blog Posts over a JSON Backend

This example demonstrates the core Kingbird workflow:
1. Declare a schema with fields, a virtual, a filter and a shared method
2. Bind it to a backend route with a Model
3. Create, find, save and remove records
4. Export loaded records to Polars

The backend is simulated with an in-memory httpx transport so the example
runs without a server. Point `ClientConfig(url=...)` at a real service and
drop the transport to talk to it.
"""

import asyncio
import json
from datetime import datetime, timezone

import httpx

from kingbird import Client, ClientConfig, Model, Schema

# In-memory store standing in for the backend
POSTS: dict[str, dict] = {}


def handle(request: httpx.Request) -> httpx.Response:
    """Tiny backend implementing the route contract for /posts."""
    parts = request.url.path.strip("/").split("/")
    body = json.loads(request.content) if request.content else None

    if request.method == "POST" and parts == ["posts"]:
        POSTS[body["id"]] = body
        return httpx.Response(200, json=[body])
    if request.method == "POST" and parts == ["posts", "query"]:
        matches = [
            post
            for post in POSTS.values()
            if all(post.get(key) == value for key, value in body.items())
        ]
        return httpx.Response(200, json=matches)
    if request.method == "GET" and len(parts) == 2:
        post = POSTS.get(parts[1])
        return httpx.Response(200, json=[post] if post else [])
    if request.method == "PUT" and len(parts) == 2:
        POSTS[parts[1]] = body
        return httpx.Response(200, json=[body])
    if request.method == "DELETE" and len(parts) == 2:
        return httpx.Response(200 if POSTS.pop(parts[1], None) else 404)
    return httpx.Response(404)


# Define a schema for blog posts
PostSchema = Schema(
    {
        "title": "string",
        "author": "string",
        "views": {"type": "number", "default": 0},
        "published": "number",  # unix timestamp on the wire
        "draft": "boolean",
        "_etag": "string",  # transient, never sent
    }
)

PostSchema.virtual(
    "headline",
    lambda self: f"{self.title} by {self.author}",
    lambda self, value: setattr(self, "title", value.split(" by ")[0]),
)

# Turn stored timestamps into datetimes once loaded
PostSchema.filter(
    "published",
    lambda self: datetime.fromtimestamp(
        getattr(self, "published", 0), timezone.utc
    ),
)


@PostSchema.method("is_popular")
def is_popular(self) -> bool:
    return self.views > 100


async def main() -> None:
    """Walk through the CRUD operations."""
    client = Client(
        ClientConfig(url="http://blog.example.com"),
        transport=httpx.MockTransport(handle),
    )
    Post = Model("/posts", PostSchema, client=client)

    # 1. Create: values of the wrong kind are dropped before sending
    post = await Post.create(
        {
            "id": "p1",
            "title": "Hello",
            "author": "Jon",
            "views": 250,
            "published": 1700000000,
            "draft": "no",
        }
    )
    print(f"[OK] Created {post.headline!r}, published {post.published:%Y-%m-%d}")
    print(f"     draft sent? {'draft' in POSTS['p1']}")

    # 2. Find by id and by conditions
    same = await Post.find_by_id("p1")
    print(f"[OK] Found by id, popular: {same.is_popular()}")

    await Post.create({"id": "p2", "title": "Winter", "author": "Jon", "views": 3})
    by_jon = await Post.find({"author": "Jon"}, {"orderBy": "title", "limit": 10})
    print(f"[OK] Jon wrote {len(by_jon)} posts")

    only = await Post.find_one({"author": "Jon"})
    print(f"[OK] find_one with two matches returns {only}")

    # 3. Save through a virtual
    updated = await Post.save(
        {"id": "p2", "headline": "Winter is coming by Jon", "author": "Jon"}
    )
    print(f"[OK] Saved title {updated.title!r}")

    # 4. Export loaded records
    df = Post.to_frame(await Post.find())
    print(df.select("title", "views"))

    # 5. Remove
    await Post.remove("p1")
    print(f"[OK] Removed p1, left: {sorted(POSTS)}")


if __name__ == "__main__":
    asyncio.run(main())
