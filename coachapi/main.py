import logging
from dotenv import load_dotenv
from fastapi import FastAPI
from mangum import Mangum
from starlette.middleware.cors import CORSMiddleware

from coachapi import containers
from coachapi.config import settings
from coachapi.core.exception_handlers import register_exception_handlers
from coachapi.core.logging_middleware import LoggingMiddleware
from coachapi.logging_config import setup_logging
from coachapi.routers import checkin_router, gamification_router, health_router

load_dotenv("coachapi/.env")
setup_logging(settings.LOG_LEVEL)
logger = logging.getLogger(__name__)


def create_app() -> FastAPI:
    """FastAPI 앱 생성 및 라우터/미들웨어 등록"""
    app = FastAPI(title=settings.PROJECT_NAME, debug=settings.DEBUG)
    app.container = containers.Container()  # type: ignore

    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )
    app.add_middleware(LoggingMiddleware)

    register_exception_handlers(app)

    app.include_router(health_router.router)
    app.include_router(checkin_router.router, prefix=settings.API_V1_STR)
    app.include_router(gamification_router.router, prefix=settings.API_V1_STR)

    logger.info("Application created (environment=%s)", settings.ENVIRONMENT)
    return app


app = create_app()

handler = Mangum(app)
