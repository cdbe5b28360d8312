"""ASGI entrypoint for the SlimFit API."""

from slimfit.api.app import create_app
from slimfit.containers import build_container

app = create_app(build_container())
