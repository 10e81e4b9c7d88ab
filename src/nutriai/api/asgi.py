"""ASGI entrypoint for the NutriAI view-model API."""

from nutriai.api.app import create_app
from nutriai.containers import build_container

app = create_app(build_container())
