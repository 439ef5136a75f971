"""ASGI entrypoint for the foodwise API."""

from foodwise.api.app import create_app
from foodwise.containers import build_container

app = create_app(build_container())
