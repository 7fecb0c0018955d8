# camper_api/main.py

import logging

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from camper_api.config import API_PREFIX, CORS_ORIGINS, LOG_LEVEL
from camper_api.database import init_db
from camper_api.merits.router import router as merit_router
from camper_api.users.router import router as user_router

logging.basicConfig(
    level=LOG_LEVEL,
    format="%(asctime)s %(levelname)s %(name)s - %(message)s",
    handlers=[logging.StreamHandler()],
)
logger = logging.getLogger(__name__)


def create_app() -> FastAPI:
    app = FastAPI(
        title="Camper API",
        description="Perfiles de campers y méritos",
        version="1.0.0",
    )

    # Permitir solicitudes desde el frontend
    app.add_middleware(
        CORSMiddleware,
        allow_origins=CORS_ORIGINS,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    app.include_router(user_router, prefix=API_PREFIX)
    app.include_router(merit_router, prefix=API_PREFIX)

    @app.on_event("startup")
    def startup_event():
        init_db()
        logger.info("Camper API lista en %s", API_PREFIX or "/")

    @app.get("/")
    async def read_root():
        return {"message": "Camper API funcionando"}

    return app


app = create_app()
