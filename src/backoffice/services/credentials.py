"""Credential exchange against the identity backend."""

import logging
from dataclasses import dataclass

from backoffice.adapters.firebase_identity_client import IdentityClient
from backoffice.domain.session import Session, parse_seconds
from backoffice.errors import AuthenticationError, ValidationError

_logger = logging.getLogger(__name__)


@dataclass
class CredentialExchange:
    """Turns an email and password into a session, one attempt per call.

    The exchange never touches the auth context; callers feed the returned
    session into it.
    """

    identity: IdentityClient

    async def exchange(self, email: str, password: str) -> Session:
        """Sign in and return the resulting session."""
        cleaned_email = email.strip()
        if not cleaned_email or not password:
            raise ValidationError("Email and password are required")
        try:
            payload = await self.identity.sign_in_with_password(
                cleaned_email, password
            )
        except Exception as exc:
            _logger.info("Sign-in failed for %s: %s", cleaned_email, exc)
            raise AuthenticationError("Sign-in failed") from exc

        token = payload.get("idToken")
        if not isinstance(token, str) or not token:
            raise AuthenticationError("Identity backend returned no token")
        _logger.info("Signed in %s", cleaned_email)
        return Session(
            token=token,
            email=str(payload.get("email") or cleaned_email),
            user_id=_optional(payload.get("localId")),
            refresh_token=_optional(payload.get("refreshToken")),
            expires_in=parse_seconds(payload.get("expiresIn")),
        )

    async def verify(self, token: str) -> None:
        """Check that the identity backend still accepts a token."""
        try:
            payload = await self.identity.lookup(token)
        except Exception as exc:
            raise AuthenticationError("Session is no longer valid") from exc
        users = payload.get("users")
        if not isinstance(users, list) or not users:
            raise AuthenticationError("Session is no longer valid")


def _optional(value: object) -> str | None:
    return str(value) if value else None
