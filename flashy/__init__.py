import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from flashy.config import settings
from flashy.db import init_all_databases
from flashy.errors import install_error_handlers

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    await init_all_databases(settings.data_dir)
    if settings.seed_starter_decks:
        from flashy.db.sqlite import open_db
        from flashy.services.starter_decks import seed_starter_decks

        async with open_db() as db:
            created = await seed_starter_decks(db)
        if created:
            logger.info("Seeded %d starter decks", created)
    yield


def create_app() -> FastAPI:
    application = FastAPI(title="Flashy", version="0.1.0", lifespan=lifespan)

    application.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )
    install_error_handlers(application)

    from flashy.routers import cards, decks, health

    application.include_router(health.router, tags=["health"])
    application.include_router(decks.router, prefix="/decks", tags=["decks"])
    application.include_router(cards.router, prefix="/decks", tags=["cards"])

    return application


app = create_app()
