"""Firebase Realtime Database client over the REST and streaming API."""

import asyncio
import json
import logging
from collections.abc import AsyncIterator, Callable
from dataclasses import dataclass
from typing import Protocol

import httpx

from backoffice.domain.paths import split_path
from backoffice.errors import SubscriptionError

_logger = logging.getLogger(__name__)

SnapshotCallback = Callable[[dict[str, object]], None]
ErrorCallback = Callable[[Exception], None]
Unsubscribe = Callable[[], None]


class TokenSource(Protocol):
    """Supplies the session token and hears about its rejection."""

    @property
    def token(self) -> str | None:
        """Return the current id token, if any."""

    def reject_token(self) -> None:
        """Signal that the backend refused the current token."""


class RealtimeDatabase(Protocol):
    """Interface for the tree-structured realtime data store."""

    def subscribe(
        self, path: str, on_snapshot: SnapshotCallback, on_error: ErrorCallback
    ) -> Unsubscribe:
        """Listen to a path; every change delivers the full subtree."""

    async def push(self, path: str, value: dict[str, object]) -> str:
        """Append a child with a backend-assigned key and return the key."""

    async def set(self, path: str, value: object) -> None:
        """Overwrite the node at path."""

    async def update(self, path: str, value: dict[str, object]) -> None:
        """Merge the given children into the node at path."""

    async def remove(self, path: str) -> None:
        """Delete the node at path."""


@dataclass
class HttpxRealtimeDatabase(RealtimeDatabase):
    """Realtime Database client implemented with httpx.

    Writes go through the REST endpoints. Subscriptions use the server-sent
    events stream, replaying ``put`` and ``patch`` events onto a local copy of
    the subtree so that each callback receives a complete snapshot.
    ``subscribe`` must be called from inside the running event loop.
    """

    base_url: str
    http_client: httpx.AsyncClient
    stream_client: httpx.AsyncClient
    tokens: TokenSource

    @classmethod
    def create(cls, base_url: str, tokens: TokenSource) -> "HttpxRealtimeDatabase":
        """Create a database client with managed httpx sessions."""
        return cls(
            base_url=base_url,
            http_client=httpx.AsyncClient(),
            stream_client=httpx.AsyncClient(timeout=httpx.Timeout(10, read=None)),
            tokens=tokens,
        )

    def subscribe(
        self, path: str, on_snapshot: SnapshotCallback, on_error: ErrorCallback
    ) -> Unsubscribe:
        """Open an event stream on path and return its release function."""
        task = asyncio.get_running_loop().create_task(
            self._stream(path, on_snapshot, on_error)
        )
        _logger.debug("Opened stream on %s", path)

        def unsubscribe() -> None:
            if not task.done():
                task.cancel()
                _logger.debug("Closed stream on %s", path)

        return unsubscribe

    async def push(self, path: str, value: dict[str, object]) -> str:
        """Create a child under path using POST."""
        response = await self._send("POST", path, value)
        return str(response.json()["name"])

    async def set(self, path: str, value: object) -> None:
        """Replace the node at path using PUT."""
        await self._send("PUT", path, value)

    async def update(self, path: str, value: dict[str, object]) -> None:
        """Patch the node at path using PATCH."""
        await self._send("PATCH", path, value)

    async def remove(self, path: str) -> None:
        """Delete the node at path."""
        await self._send("DELETE", path)

    async def close(self) -> None:
        """Close the underlying HTTP sessions."""
        await self.http_client.aclose()
        await self.stream_client.aclose()

    def _url(self, path: str) -> str:
        return f"{self.base_url.rstrip('/')}/{path.strip('/')}.json"

    def _params(self) -> dict[str, str]:
        token = self.tokens.token
        return {"auth": token} if token else {}

    async def _send(
        self, method: str, path: str, payload: object | None = None
    ) -> httpx.Response:
        response = await self.http_client.request(
            method,
            self._url(path),
            params=self._params(),
            json=payload,
            timeout=10,
        )
        if response.status_code == httpx.codes.UNAUTHORIZED:
            self.tokens.reject_token()
        response.raise_for_status()
        return response

    async def _stream(
        self, path: str, on_snapshot: SnapshotCallback, on_error: ErrorCallback
    ) -> None:
        tree = SnapshotTree()
        try:
            async with self.stream_client.stream(
                "GET",
                self._url(path),
                params=self._params(),
                headers={"Accept": "text/event-stream"},
            ) as response:
                if response.status_code == httpx.codes.UNAUTHORIZED:
                    self.tokens.reject_token()
                response.raise_for_status()
                async for event, data in iter_events(response.aiter_lines()):
                    if event == "keep-alive":
                        continue
                    if event in {"put", "patch"}:
                        message = json.loads(data)
                        tree.apply(event, str(message["path"]), message["data"])
                        on_snapshot(tree.snapshot())
                    elif event == "auth_revoked":
                        self.tokens.reject_token()
                        raise SubscriptionError(f"Credential revoked for {path}")
                    elif event == "cancel":
                        raise SubscriptionError(f"Listener on {path} was cancelled")
            raise SubscriptionError(f"Stream on {path} closed by the server")
        except SubscriptionError as exc:
            _logger.warning("Subscription on %s ended: %s", path, exc)
            on_error(exc)
        except (httpx.HTTPError, ValueError, KeyError) as exc:
            _logger.warning("Subscription on %s failed: %s", path, exc)
            error = SubscriptionError(f"Could not listen to {path}")
            error.__cause__ = exc
            on_error(error)


class SnapshotTree:
    """Local copy of a subtree, rebuilt copy-on-write on every event."""

    def __init__(self) -> None:
        self.value: object = None

    def apply(self, event: str, path: str, data: object) -> None:
        """Apply a ``put`` or ``patch`` event at a path relative to the root."""
        if event == "patch":
            if isinstance(data, dict):
                for key, child in data.items():
                    self.value = _set_in(self.value, [*split_path(path), key], child)
            return
        self.value = _set_in(self.value, split_path(path), data)

    def snapshot(self) -> dict[str, object]:
        """Return the subtree as a key to value mapping."""
        return self.value if isinstance(self.value, dict) else {}


def _set_in(node: object, segments: list[str], data: object) -> object:
    if not segments:
        return data
    head, rest = segments[0], segments[1:]
    children = dict(node) if isinstance(node, dict) else {}
    updated = _set_in(children.get(head), rest, data)
    if updated is None:
        children.pop(head, None)
    else:
        children[head] = updated
    return children or None


async def iter_events(lines: AsyncIterator[str]) -> AsyncIterator[tuple[str, str]]:
    """Group server-sent event lines into (event, data) pairs."""
    event = ""
    data: list[str] = []
    async for line in lines:
        if not line:
            if event:
                yield event, "\n".join(data)
            event, data = "", []
            continue
        field, _, value = line.partition(":")
        value = value.removeprefix(" ")
        if field == "event":
            event = value
        elif field == "data":
            data.append(value)
    if event:
        yield event, "\n".join(data)
