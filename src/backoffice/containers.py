"""Dependency container wiring for the application."""

import time
from collections.abc import Awaitable, Callable
from dataclasses import dataclass

from supabase import create_client

from backoffice.adapters.firebase_identity_client import HttpxIdentityClient
from backoffice.adapters.firebase_realtime_database import (
    HttpxRealtimeDatabase,
    RealtimeDatabase,
)
from backoffice.adapters.json_file_store import JsonFileStore
from backoffice.adapters.supabase_object_storage import (
    ObjectStorage,
    SupabaseObjectStorage,
)
from backoffice.config import Settings, parse_allowed_image_types
from backoffice.screens.employees import EmployeesScreen
from backoffice.screens.images import ImagesScreen
from backoffice.screens.login import LoginScreen
from backoffice.screens.news import NewsScreen
from backoffice.screens.newsletters import NewslettersScreen
from backoffice.screens.shell import BackofficeScreens, BackofficeShell
from backoffice.services.auth import AuthContext, SessionStore
from backoffice.services.credentials import CredentialExchange
from backoffice.services.images import UploadPolicy


@dataclass
class AppContainer:
    """Holds application-wide dependencies."""

    settings: Settings
    auth: AuthContext
    exchange: CredentialExchange
    database: RealtimeDatabase
    storage: ObjectStorage
    shell: BackofficeShell
    close_resources: Callable[[], Awaitable[None]]


def build_shell(
    auth: AuthContext,
    exchange: CredentialExchange,
    database: RealtimeDatabase,
    storage: ObjectStorage,
    policy: UploadPolicy,
    clock: Callable[[], float] = time.time,
) -> BackofficeShell:
    """Assemble the screen tree on top of the shared backends."""

    def build_screens() -> BackofficeScreens:
        return BackofficeScreens(
            employees=EmployeesScreen(database),
            news=NewsScreen(database),
            newsletters=NewslettersScreen(database, storage, policy, clock=clock),
            images=ImagesScreen(database, storage, policy, clock=clock),
        )

    return BackofficeShell(auth, LoginScreen(auth, exchange), build_screens)


def build_container(settings: Settings | None = None) -> AppContainer:
    """Create the default dependency container."""
    resolved_settings = settings or Settings()
    session_store = SessionStore(JsonFileStore.create(resolved_settings.session_file))
    auth = AuthContext(session_store)
    identity_client = HttpxIdentityClient.create(
        api_key=resolved_settings.firebase_api_key,
        base_url=resolved_settings.identity_base_url,
    )
    exchange = CredentialExchange(identity_client)
    database = HttpxRealtimeDatabase.create(
        resolved_settings.firebase_database_url, tokens=auth
    )
    supabase_client = create_client(
        resolved_settings.supabase_url, resolved_settings.supabase_key
    )
    storage = SupabaseObjectStorage(supabase_client, resolved_settings.storage_bucket)
    policy = UploadPolicy(
        allowed_types=parse_allowed_image_types(resolved_settings.allowed_image_types),
        max_bytes=resolved_settings.max_upload_bytes,
    )
    shell = build_shell(auth, exchange, database, storage, policy)

    async def close_resources() -> None:
        shell.stop()
        await identity_client.close()
        await database.close()

    return AppContainer(
        settings=resolved_settings,
        auth=auth,
        exchange=exchange,
        database=database,
        storage=storage,
        shell=shell,
        close_resources=close_resources,
    )
