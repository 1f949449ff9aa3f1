"""Production container and its FastAPI wiring."""

from dishka import AsyncContainer, make_async_container
from dishka.integrations.fastapi import FastapiProvider, setup_dishka
from fastapi import FastAPI

from rolo.util.di import build_providers


def create_container() -> AsyncContainer:
    """Container with every production implementation.

    Settings come from the environment when first resolved, so building the
    container touches neither the database nor the network.
    """
    return make_async_container(*build_providers(), FastapiProvider())


def setup_di(app: FastAPI, container: AsyncContainer) -> None:
    """Attach the container; routes use ``DishkaRoute`` and ``FromDishka``."""
    setup_dishka(container, app)
