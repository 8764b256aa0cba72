"""Session persistence and the process-wide auth context."""

import logging
from collections.abc import Callable
from dataclasses import dataclass

from backoffice.adapters.json_file_store import KeyValueStore
from backoffice.domain.session import AuthState, Session
from backoffice.errors import AuthenticationError
from backoffice.services.credentials import CredentialExchange

_logger = logging.getLogger(__name__)

AuthListener = Callable[[AuthState], None]


@dataclass
class SessionStore:
    """Best-effort persistence of the session on the operator's device.

    Failures are logged and swallowed: a session that cannot be cached simply
    does not survive a restart.
    """

    store: KeyValueStore
    key: str = "token"

    def load(self) -> Session | None:
        """Return the persisted session, if one can be read."""
        try:
            payload = self.store.get(self.key)
        except (OSError, ValueError) as exc:
            _logger.warning("Could not read persisted session: %s", exc)
            return None
        return Session.from_payload(payload)

    def save(self, session: Session) -> bool:
        """Persist a session and report whether it was written."""
        try:
            self.store.set(self.key, session.to_payload())
        except (OSError, TypeError, ValueError) as exc:
            _logger.warning("Could not persist session: %s", exc)
            return False
        return True

    def clear(self) -> bool:
        """Forget the persisted session and report whether it was removed."""
        try:
            self.store.remove(self.key)
        except (OSError, ValueError) as exc:
            _logger.warning("Could not clear persisted session: %s", exc)
            return False
        return True


class AuthContext:
    """Single owner and writer of the operator session.

    One instance is created per process and handed to every screen and
    adapter that needs it. State is either unauthenticated or authenticated;
    ``is_authenticated`` is always ``token is not None``. Listeners are called
    synchronously with the new state after each transition.
    """

    def __init__(self, session_store: SessionStore) -> None:
        self._session_store = session_store
        self._session: Session | None = None
        self._listeners: list[AuthListener] = []

    @property
    def session(self) -> Session | None:
        return self._session

    @property
    def token(self) -> str | None:
        return self._session.token if self._session else None

    @property
    def is_authenticated(self) -> bool:
        return self.token is not None

    @property
    def state(self) -> AuthState:
        if self.is_authenticated:
            return AuthState.AUTHENTICATED
        return AuthState.UNAUTHENTICATED

    def subscribe(self, listener: AuthListener) -> Callable[[], None]:
        """Register a state listener and return its removal function."""
        self._listeners.append(listener)

        def unsubscribe() -> None:
            if listener in self._listeners:
                self._listeners.remove(listener)

        return unsubscribe

    def authenticate(self, session: Session) -> None:
        """Enter the authenticated state with a fresh session."""
        if not session.authenticated:
            raise ValueError("Cannot authenticate with an empty token")
        self._session = session
        self._session_store.save(session)
        _logger.info("Session started for %s", session.email or "operator")
        self._notify()

    def sign_out(self) -> None:
        """Drop the session and its persisted copy."""
        was_authenticated = self.is_authenticated
        self._session = None
        self._session_store.clear()
        if was_authenticated:
            _logger.info("Session ended")
            self._notify()

    def invalidate(self, reason: str) -> None:
        """Handle the backend telling us the session is no longer valid."""
        if self.is_authenticated:
            _logger.warning("Session invalidated: %s", reason)
        self.sign_out()

    def reject_token(self) -> None:
        """Token source hook for adapters that saw a 401."""
        self.invalidate("token rejected by backend")

    def restore(self) -> bool:
        """Adopt a persisted session at startup without contacting the backend."""
        session = self._session_store.load()
        if session is None or not session.authenticated:
            return False
        self._session = session
        _logger.info("Restored session for %s", session.email or "operator")
        self._notify()
        return True

    async def sign_in(
        self, exchange: CredentialExchange, email: str, password: str
    ) -> Session:
        """Run a credential exchange and adopt its session on success."""
        session = await exchange.exchange(email, password)
        self.authenticate(session)
        return session

    async def revalidate(self, exchange: CredentialExchange) -> None:
        """Confirm the current token with the identity backend."""
        token = self.token
        if token is None:
            raise AuthenticationError("Not signed in")
        try:
            await exchange.verify(token)
        except AuthenticationError:
            self.invalidate("restored token was rejected")
            raise

    def _notify(self) -> None:
        state = self.state
        for listener in list(self._listeners):
            try:
                listener(state)
            except Exception:
                _logger.exception("Auth listener failed on %s", state)
