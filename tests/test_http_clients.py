"""Tests for HTTP-based adapters."""

import asyncio
import json

import httpx
import pytest

from backoffice.adapters.firebase_identity_client import HttpxIdentityClient
from backoffice.adapters.firebase_realtime_database import (
    HttpxRealtimeDatabase,
    SnapshotTree,
    iter_events,
)
from backoffice.errors import SubscriptionError

DATABASE_URL = "https://backoffice.example.firebaseio.com"


class _Tokens:
    def __init__(self, token: str | None = "id-token") -> None:
        self.token = token
        self.rejected = 0

    def reject_token(self) -> None:
        self.rejected += 1
        self.token = None


def _database(handler, tokens: _Tokens) -> HttpxRealtimeDatabase:  # type: ignore[no-untyped-def]
    transport = httpx.MockTransport(handler)
    return HttpxRealtimeDatabase(
        base_url=DATABASE_URL,
        http_client=httpx.AsyncClient(transport=transport),
        stream_client=httpx.AsyncClient(transport=transport),
        tokens=tokens,
    )


def test_identity_client_sign_in_and_lookup() -> None:
    seen: list[tuple[str, str | None, dict[str, object]]] = []

    def handler(request: httpx.Request) -> httpx.Response:
        payload = json.loads(request.content.decode())
        seen.append((request.url.path, request.url.params.get("key"), payload))
        if request.url.path.endswith("accounts:signInWithPassword"):
            return httpx.Response(200, json={"idToken": "tok", "email": "a@b.pt"})
        return httpx.Response(200, json={"users": [{"localId": "uid"}]})

    client = HttpxIdentityClient(
        api_key="api-key",
        base_url="https://identity.example/v1",
        http_client=httpx.AsyncClient(transport=httpx.MockTransport(handler)),
    )

    signed_in = asyncio.run(client.sign_in_with_password("a@b.pt", "pw"))
    looked_up = asyncio.run(client.lookup("tok"))

    assert signed_in["idToken"] == "tok"
    assert looked_up["users"][0]["localId"] == "uid"
    assert seen[0] == (
        "/v1/accounts:signInWithPassword",
        "api-key",
        {"email": "a@b.pt", "password": "pw", "returnSecureToken": True},
    )
    assert seen[1][0] == "/v1/accounts:lookup"
    assert seen[1][2] == {"idToken": "tok"}


def test_identity_client_raises_on_rejection() -> None:
    def handler(request: httpx.Request) -> httpx.Response:
        return httpx.Response(400, json={"error": {"message": "INVALID_PASSWORD"}})

    client = HttpxIdentityClient(
        api_key="api-key",
        base_url="https://identity.example/v1",
        http_client=httpx.AsyncClient(transport=httpx.MockTransport(handler)),
    )

    with pytest.raises(httpx.HTTPStatusError):
        asyncio.run(client.sign_in_with_password("a@b.pt", "bad"))


def test_database_writes_use_rest_verbs() -> None:
    seen: list[tuple[str, str, str | None, object]] = []

    def handler(request: httpx.Request) -> httpx.Response:
        body = json.loads(request.content.decode()) if request.content else None
        seen.append(
            (request.method, request.url.path, request.url.params.get("auth"), body)
        )
        if request.method == "POST":
            return httpx.Response(200, json={"name": "-new"})
        return httpx.Response(200, json=None)

    database = _database(handler, _Tokens())

    key = asyncio.run(database.push("/news", {"title": "Olá"}))
    asyncio.run(database.set("/news/-new", {"title": "Olá!"}))
    asyncio.run(database.update("/news/-new", {"title": "Adeus"}))
    asyncio.run(database.remove("/news/-new"))

    assert key == "-new"
    assert [(method, path) for method, path, _, _ in seen] == [
        ("POST", "/news.json"),
        ("PUT", "/news/-new.json"),
        ("PATCH", "/news/-new.json"),
        ("DELETE", "/news/-new.json"),
    ]
    assert {auth for _, _, auth, _ in seen} == {"id-token"}
    assert seen[0][3] == {"title": "Olá"}


def test_database_rejects_token_on_unauthorized() -> None:
    def handler(request: httpx.Request) -> httpx.Response:
        return httpx.Response(401, json={"error": "Permission denied"})

    tokens = _Tokens()
    database = _database(handler, tokens)

    with pytest.raises(httpx.HTTPStatusError):
        asyncio.run(database.update("/employees/-1", {"name": "X"}))

    assert tokens.rejected == 1


def _sse(*events: tuple[str, object]) -> bytes:
    chunks = [f"event: {name}\ndata: {json.dumps(data)}\n\n" for name, data in events]
    return "".join(chunks).encode()


def _listen(database: HttpxRealtimeDatabase, path: str):  # type: ignore[no-untyped-def]
    snapshots: list[dict[str, object]] = []
    errors: list[Exception] = []

    async def scenario() -> None:
        done = asyncio.Event()

        def on_error(exc: Exception) -> None:
            errors.append(exc)
            done.set()

        unsubscribe = database.subscribe(path, snapshots.append, on_error)
        await asyncio.wait_for(done.wait(), timeout=5)
        unsubscribe()

    asyncio.run(scenario())
    return snapshots, errors


def test_stream_replays_events_into_snapshots() -> None:
    def handler(request: httpx.Request) -> httpx.Response:
        assert request.headers["accept"] == "text/event-stream"
        assert request.url.params.get("auth") == "id-token"
        body = _sse(
            ("put", {"path": "/", "data": {"-a": {"title": "Olá"}}}),
            ("keep-alive", None),
            ("patch", {"path": "/-a", "data": {"title": "Novo"}}),
            ("put", {"path": "/-b", "data": {"title": "Outro"}}),
            ("put", {"path": "/-a", "data": None}),
        )
        return httpx.Response(200, content=body)

    snapshots, errors = _listen(_database(handler, _Tokens()), "/news")

    assert snapshots == [
        {"-a": {"title": "Olá"}},
        {"-a": {"title": "Novo"}},
        {"-a": {"title": "Novo"}, "-b": {"title": "Outro"}},
        {"-b": {"title": "Outro"}},
    ]
    assert len(errors) == 1
    assert isinstance(errors[0], SubscriptionError)


def test_stream_auth_revoked_rejects_token() -> None:
    def handler(request: httpx.Request) -> httpx.Response:
        return httpx.Response(
            200,
            content=_sse(
                ("put", {"path": "/", "data": None}),
                ("auth_revoked", "credential is no longer valid"),
            ),
        )

    tokens = _Tokens()
    snapshots, errors = _listen(_database(handler, tokens), "/employees")

    assert snapshots == [{}]
    assert tokens.rejected == 1
    assert "revoked" in str(errors[0])


def test_stream_unauthorized_is_subscription_error() -> None:
    def handler(request: httpx.Request) -> httpx.Response:
        return httpx.Response(401, json={"error": "Permission denied"})

    tokens = _Tokens()
    snapshots, errors = _listen(_database(handler, tokens), "/news")

    assert snapshots == []
    assert isinstance(errors[0], SubscriptionError)
    assert tokens.rejected == 1


def test_snapshot_tree_is_copy_on_write() -> None:
    tree = SnapshotTree()
    tree.apply("put", "/", {"-a": {"title": "A"}})
    first = tree.snapshot()

    tree.apply("put", "/-a/title", "B")
    tree.apply("patch", "/", {"-c": {"title": "C"}})

    assert first == {"-a": {"title": "A"}}
    assert tree.snapshot() == {"-a": {"title": "B"}, "-c": {"title": "C"}}

    tree.apply("put", "/", None)

    assert tree.snapshot() == {}


def test_iter_events_groups_lines() -> None:
    async def lines():  # type: ignore[no-untyped-def]
        for line in [
            "event: put",
            "data: {}",
            "",
            ": comment",
            "event: cancel",
            "data: null",
        ]:
            yield line

    async def collect() -> list[tuple[str, str]]:
        return [event async for event in iter_events(lines())]

    assert asyncio.run(collect()) == [("put", "{}"), ("cancel", "null")]
