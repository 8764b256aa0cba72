"""Root of the screen tree, gated by the auth context."""

import logging
from collections.abc import Callable
from dataclasses import dataclass
from typing import Literal

from backoffice.domain.session import AuthState
from backoffice.screens.employees import EmployeesScreen
from backoffice.screens.images import ImagesScreen
from backoffice.screens.login import LoginScreen
from backoffice.screens.news import NewsScreen
from backoffice.screens.newsletters import NewslettersScreen
from backoffice.services.auth import AuthContext

_logger = logging.getLogger(__name__)

View = Literal["login", "backoffice"]


@dataclass
class BackofficeScreens:
    """The screens shown to a signed-in operator."""

    employees: EmployeesScreen
    news: NewsScreen
    newsletters: NewslettersScreen
    images: ImagesScreen

    def mount(self) -> None:
        self.employees.mount()
        self.news.mount()
        self.newsletters.mount()
        self.images.mount()

    def unmount(self) -> None:
        self.employees.unmount()
        self.news.unmount()
        self.newsletters.unmount()
        self.images.unmount()


class BackofficeShell:
    """Mounts the backoffice on sign-in and tears it down on sign-out.

    The visible view is a pure function of the auth state. Screens are built
    fresh on every sign-in, so nothing from a previous session leaks into the
    next one.
    """

    def __init__(
        self,
        auth: AuthContext,
        login: LoginScreen,
        build_screens: Callable[[], BackofficeScreens],
    ) -> None:
        self.auth = auth
        self.login = login
        self._build_screens = build_screens
        self._screens: BackofficeScreens | None = None
        self._unsubscribe: Callable[[], None] | None = None

    @property
    def current_view(self) -> View:
        if self.auth.state is AuthState.AUTHENTICATED:
            return "backoffice"
        return "login"

    @property
    def screens(self) -> BackofficeScreens | None:
        return self._screens

    def start(self) -> None:
        """Follow the auth context and render its current state."""
        if self._unsubscribe is None:
            self._unsubscribe = self.auth.subscribe(self._on_auth_change)
        self._on_auth_change(self.auth.state)

    def stop(self) -> None:
        """Stop following the auth context and release every subscription."""
        if self._unsubscribe is not None:
            self._unsubscribe()
            self._unsubscribe = None
        self._unmount()

    def _on_auth_change(self, state: AuthState) -> None:
        if state is AuthState.AUTHENTICATED:
            if self._screens is None:
                screens = self._build_screens()
                screens.mount()
                self._screens = screens
                _logger.info("Backoffice mounted")
        else:
            self._unmount()

    def _unmount(self) -> None:
        screens, self._screens = self._screens, None
        if screens is not None:
            screens.unmount()
            _logger.info("Backoffice unmounted")
