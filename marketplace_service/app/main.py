import logging
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from shared.core.config import settings
from shared.core.database import Base, engine
from shared.helpers.exception_handler import setup_exception_handlers
from shared.wrappers.response_wrapper import JsonResponseMiddleware
from . import models
from .router import group_orders_router, orders_router, products_router

logging.basicConfig(
    level=settings.LOG_LEVEL,
    format="%(asctime)s [%(levelname)s]: %(message)s"
)

app = FastAPI(title="BazaarBuddy Marketplace Service API")

# Create all tables
Base.metadata.create_all(bind=engine)

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.CORS_ORIGINS,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

app.add_middleware(JsonResponseMiddleware)

setup_exception_handlers(app)

# Include routers
app.include_router(products_router.router)
app.include_router(orders_router.router)
app.include_router(group_orders_router.router)


@app.get("/api/health")
def health():
    return {"status": "healthy", "service": "marketplace"}
