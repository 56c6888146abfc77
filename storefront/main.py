# storefront/main.py
from fastapi import FastAPI
from starlette.middleware.sessions import SessionMiddleware
import uvicorn

from storefront.api import ROUTERS
from storefront.api.errors import register_exception_handlers
from storefront.data.database import Base, engine
from storefront.utils.logging import get_logger
from storefront.utils.settings import COOKIE_SECURE, SECRET_KEY, SESSION_MAX_AGE_SECONDS

# all models must be registered on Base.metadata before create_all
import storefront.data.models  # noqa: F401

logger = get_logger(__name__)


def init_db() -> None:
    logger.info(f"Models registered in Base.metadata: {list(Base.metadata.tables.keys())}")
    try:
        Base.metadata.create_all(bind=engine)
    except Exception as e:
        logger.error(f"Failed to create tables: {e}")
        raise
    logger.info("Database tables ready")


def create_app() -> FastAPI:
    app = FastAPI(
        title="Storefront Service",
        version="1.0.0",
    )

    app.add_middleware(
        SessionMiddleware,
        secret_key=SECRET_KEY,
        session_cookie="storefront_session",
        max_age=SESSION_MAX_AGE_SECONDS,
        same_site="lax",
        https_only=COOKIE_SECURE,
    )
    register_exception_handlers(app)

    for router in ROUTERS:
        app.include_router(router)

    return app


init_db()
app = create_app()

if __name__ == "__main__":
    uvicorn.run(app, host="0.0.0.0", port=8000)
