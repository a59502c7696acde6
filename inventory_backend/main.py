from contextlib import asynccontextmanager
from typing import Optional

import uvicorn
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from inventory_backend.core.config import Settings, get_settings
from inventory_backend.core.errors import register_error_handlers
from inventory_backend.core.log_config import setup_logging
from inventory_backend.db.database import create_db_and_tables, make_engine, make_session_maker
from inventory_backend.routers.products import router as products_router
from inventory_backend.routers.seed import router as seed_router


@asynccontextmanager
async def lifespan(app: FastAPI):
    await create_db_and_tables(app.state.engine)
    yield
    await app.state.engine.dispose()


def create_app(settings: Optional[Settings] = None) -> FastAPI:
    settings = settings or get_settings()
    setup_logging(settings.log_level)

    app = FastAPI(
        title="Product Inventory API",
        description="API for managing a product catalog with stock history",
        version="0.1.0",
        docs_url="/docs",
        redoc_url="/redoc",
        lifespan=lifespan,
    )

    app.state.settings = settings
    app.state.engine = make_engine(settings)
    app.state.session_maker = make_session_maker(app.state.engine)

    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    register_error_handlers(app)

    app.include_router(products_router, prefix="/api/products", tags=["products"])
    app.include_router(seed_router, prefix="/api", tags=["seed"])
    return app


if __name__ == "__main__":
    _settings = get_settings()
    uvicorn.run(
        "inventory_backend.main:create_app",
        factory=True,
        host="0.0.0.0",
        port=_settings.port,
        reload=True,
    )
