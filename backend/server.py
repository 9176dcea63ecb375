from fastapi import FastAPI, APIRouter
from starlette.middleware.cors import CORSMiddleware
import logging
from datetime import datetime, timezone

from config import (
    APP_NAME, APP_VERSION, API_PREFIX, CORS_ORIGINS, LOG_LEVEL, LOG_FORMAT
)
from fixed_income.router_bonds import router as bonds_router
from middleware import FieldAliasMiddleware, RequestLoggingMiddleware, register_exception_handlers

logging.basicConfig(
    level=getattr(logging, LOG_LEVEL, logging.INFO),
    format=LOG_FORMAT
)
logger = logging.getLogger(__name__)

# Create the main app
app = FastAPI(title=APP_NAME, version=APP_VERSION)
api_router = APIRouter(prefix=API_PREFIX)


@api_router.get("/health")
async def health_check():
    """Liveness probe"""
    return {
        "status": "ok",
        "service": APP_NAME,
        "version": APP_VERSION,
        "timestamp": datetime.now(timezone.utc).isoformat()
    }


api_router.include_router(bonds_router)
app.include_router(api_router)

register_exception_handlers(app)

# Alias rewriting must see the raw body before validation; logging wraps everything
app.add_middleware(FieldAliasMiddleware)
app.add_middleware(RequestLoggingMiddleware)
app.add_middleware(
    CORSMiddleware,
    allow_credentials=True,
    allow_origins=CORS_ORIGINS,
    allow_methods=["*"],
    allow_headers=["*"],
)

logger.info(f"{APP_NAME} {APP_VERSION} ready, routes under {API_PREFIX}")
