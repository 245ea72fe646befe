"""ASGI entrypoint for the Food Keeper front-end service."""

from food_keeper.api.app import create_app
from food_keeper.containers import build_container

app = create_app(build_container())
