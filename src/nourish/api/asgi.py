"""ASGI entrypoint for the nourish API."""

from nourish.api.app import create_app
from nourish.containers import build_container

app = create_app(build_container())
