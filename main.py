#!/usr/bin/env python3
import logging
import os
import sys
from contextlib import asynccontextmanager
from datetime import datetime, timezone
from typing import Optional

from dotenv import load_dotenv
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from Admin.routes import router as admin_router
from Backups.routes import router as backups_router
from Conta.database import Store, StoreUnavailable
from Conta.provisioning import provision_bootstrap_admin
from Conta.routes import oauth_router, router as auth_router
from Vendas.routes import router as sales_router
from errors import register_handlers

load_dotenv()

# Configure logging to stdout
logging.basicConfig(
    level=logging.INFO,
    format="%(asctime)s %(levelname)s: %(message)s",
    handlers=[logging.StreamHandler(sys.stdout)]
)
logger = logging.getLogger()


@asynccontextmanager
async def lifespan(app: FastAPI):
    store: Store = app.state.store
    try:
        store.init_schema()
        provision_bootstrap_admin(store)
    except StoreUnavailable:
        logger.warning("Store not reachable at startup; requests will report it unavailable",
                       exc_info=True)
    yield
    store.dispose()


# ─── FASTAPI SETUP ─────────────────────────────────────────────────────────
def create_app(store: Optional[Store] = None) -> FastAPI:
    app = FastAPI(
        title="Joias",
        description="Controle de vendas e comissões de revendedores de joias",
        version="1.0.0",
        lifespan=lifespan,
    )
    app.state.store = store or Store(os.getenv("DATABASE_URL"))

    origins = [o.strip() for o in os.getenv("CORS_ORIGINS", "*").split(",") if o.strip()]
    app.add_middleware(
        CORSMiddleware,
        allow_origins=origins,
        allow_credentials=origins != ["*"],
        allow_methods=["*"],
        allow_headers=["*"],
    )
    register_handlers(app)

    # ─── ROOT & HEALTH ─────────────────────────────────────────────────────
    @app.get("/", include_in_schema=False)
    def root():
        return {"status": "ok"}

    @app.get("/health", tags=["Health"])
    def health_check():
        logger.info("Health check invoked")
        return {
            "status": "ok",
            "database": "configured" if app.state.store.configured else "missing",
            "time": datetime.now(timezone.utc).isoformat(),
        }

    app.include_router(auth_router)
    app.include_router(oauth_router)
    app.include_router(sales_router)
    app.include_router(backups_router)
    app.include_router(admin_router)
    return app


app = create_app()

# ─── Uvicorn LAUNCH (DEV ONLY) ─────────────────────────────────────────────
if __name__ == "__main__":
    import uvicorn
    uvicorn.run(
        "main:app",
        host="0.0.0.0",
        port=int(os.getenv("PORT", 8000)),
        reload=True
    )
