"""Firebase Identity Toolkit client adapter."""

from dataclasses import dataclass
from typing import Protocol

import httpx


class IdentityClient(Protocol):
    """Interface for identity backend interactions."""

    async def sign_in_with_password(
        self, email: str, password: str
    ) -> dict[str, object]:
        """Exchange email and password for an id token payload."""

    async def lookup(self, id_token: str) -> dict[str, object]:
        """Return the account data behind an id token."""


@dataclass
class HttpxIdentityClient(IdentityClient):
    """Identity Toolkit REST client implemented with httpx."""

    api_key: str
    base_url: str
    http_client: httpx.AsyncClient

    @classmethod
    def create(cls, api_key: str, base_url: str) -> "HttpxIdentityClient":
        """Create an identity client with a managed httpx session."""
        return cls(api_key=api_key, base_url=base_url, http_client=httpx.AsyncClient())

    async def sign_in_with_password(
        self, email: str, password: str
    ) -> dict[str, object]:
        """Sign in using the accounts:signInWithPassword endpoint."""
        url = f"{self.base_url}/accounts:signInWithPassword"
        response = await self.http_client.post(
            url,
            params={"key": self.api_key},
            json={"email": email, "password": password, "returnSecureToken": True},
            timeout=10,
        )
        response.raise_for_status()
        return response.json()

    async def lookup(self, id_token: str) -> dict[str, object]:
        """Look up the account for an id token."""
        url = f"{self.base_url}/accounts:lookup"
        response = await self.http_client.post(
            url,
            params={"key": self.api_key},
            json={"idToken": id_token},
            timeout=10,
        )
        response.raise_for_status()
        return response.json()

    async def close(self) -> None:
        """Close the underlying HTTP session."""
        await self.http_client.aclose()
