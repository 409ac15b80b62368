"""ASGI entrypoint for the fitcoach API."""

from fitcoach.api.app import create_app
from fitcoach.containers import build_container

app = create_app(build_container())
