from contextlib import asynccontextmanager
from fastapi import FastAPI, Depends, HTTPException, Request, status
from fastapi.responses import JSONResponse
from loguru import logger
from sqlalchemy.orm import Session
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy import text
from starlette.exceptions import HTTPException as StarletteHTTPException

from src.api import api_router
from src.database.postgres.core import Base, engine, make_session
from src.database.postgres import models # noqa: F401 registers the tables on Base
from src.config import settings
from src.utils.logging import configure_logging

@asynccontextmanager
async def lifespan(app: FastAPI):
    # startup operations
    configure_logging()
    if settings.app_env != "production":
        # Production schema is owned by the alembic revisions
        Base.metadata.create_all(engine)
    logger.info("Roster service started ({})", settings.app_env)
    yield
    # on-shutdown operations
    engine.dispose()

if settings.app_env == "production":
    # In production: disable Swagger UI and /docs endpoints
    app = FastAPI(lifespan=lifespan, docs_url=None, redoc_url=None, openapi_url=None)
else:
    # In development: keep docs enabled
    app = FastAPI(lifespan=lifespan)

@app.exception_handler(StarletteHTTPException)
async def http_exception_handler(request: Request, exc: StarletteHTTPException):
    # Every error leaves the API as {"error": ...}
    return JSONResponse(
        status_code=exc.status_code,
        content={"error": exc.detail},
        headers=getattr(exc, "headers", None),
    )

if settings.app_env != "production":
    @app.get("/", tags=["Health"])
    def read_root():
        return {"message": "roster-service v1.0.0"}

    @app.get("/test-connection", tags=["Health"])
    def confirm_conn(db: Session = Depends(make_session)):
        try:
            result = db.execute(text("SELECT 1"))
            if result.scalar() == 1:
                return {"message": "Database connection succeeded"}
        except SQLAlchemyError:
            raise HTTPException(
                status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
                detail="Database inaccessible",
            )

app.include_router(api_router, prefix="/api")
