"""ASGI entrypoint for the backoffice API."""

from backoffice.api.app import create_app
from backoffice.containers import build_container

app = create_app(build_container())
