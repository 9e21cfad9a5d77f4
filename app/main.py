from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from app.cars.router import router as cars_router
from app.config import settings
from app.database import connect_db, disconnect_db, ensure_indexes
from app.logging_config import configure_logging
from app.negotiations.router import router as negotiations_router
from app.negotiations.store import session_store
from app.personas.router import router as personas_router

configure_logging()


@asynccontextmanager
async def lifespan(app: FastAPI):
    await connect_db()
    await ensure_indexes()
    yield
    session_store.clear()
    await disconnect_db()


app = FastAPI(
    title="Negotiation Legends",
    version="0.1.0",
    lifespan=lifespan,
    docs_url="/docs" if settings.DOCS_ENABLED else None,
    redoc_url="/redoc" if settings.DOCS_ENABLED else None,
    openapi_url="/openapi.json" if settings.DOCS_ENABLED else None,
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=[o.strip() for o in settings.CORS_ORIGINS.split(",")],
    allow_methods=["*"],
    allow_headers=["*"],
)

app.include_router(personas_router)
app.include_router(cars_router)
app.include_router(negotiations_router)


@app.get("/health")
async def health_check():
    return {"status": "ok"}
