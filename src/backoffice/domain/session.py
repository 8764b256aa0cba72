"""Domain models for the operator session."""

from dataclasses import dataclass
from enum import StrEnum


class AuthState(StrEnum):
    """The two states of the auth context."""

    UNAUTHENTICATED = "unauthenticated"
    AUTHENTICATED = "authenticated"


@dataclass(frozen=True)
class Session:
    """Represents the authenticated operator and their identity token."""

    token: str | None
    email: str | None = None
    user_id: str | None = None
    refresh_token: str | None = None
    expires_in: int | None = None

    @property
    def authenticated(self) -> bool:
        """Return True when the session carries a token."""
        return bool(self.token)

    def to_payload(self) -> dict[str, object]:
        """Serialize the session for the device store."""
        return {
            "token": self.token,
            "email": self.email,
            "user_id": self.user_id,
            "refresh_token": self.refresh_token,
            "expires_in": self.expires_in,
        }

    @classmethod
    def from_payload(cls, payload: object) -> "Session | None":
        """Rebuild a session from persisted data, if it holds a token."""
        if isinstance(payload, str):
            return cls(token=payload) if payload else None
        if not isinstance(payload, dict):
            return None
        token = payload.get("token")
        if not isinstance(token, str) or not token:
            return None
        return cls(
            token=token,
            email=_optional_str(payload.get("email")),
            user_id=_optional_str(payload.get("user_id")),
            refresh_token=_optional_str(payload.get("refresh_token")),
            expires_in=parse_seconds(payload.get("expires_in")),
        )


def parse_seconds(value: object) -> int | None:
    """Parse a lifetime in seconds as returned by the identity backend."""
    if isinstance(value, bool):
        return None
    if isinstance(value, int):
        return value
    if isinstance(value, str) and value.strip().isdigit():
        return int(value.strip())
    return None


def _optional_str(value: object) -> str | None:
    return value if isinstance(value, str) and value else None
