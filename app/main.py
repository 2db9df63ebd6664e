# Run from project root: python -m app.main  (or uvicorn app.main:app --reload)

import logging
from contextlib import asynccontextmanager

import uvicorn
from fastapi import FastAPI

from app.api.routes import router
from app.core.app_state import close_state, init_state
from app.core.config import load_settings
from app.mcp.server import mcp_router

logging.basicConfig(level=logging.INFO)


@asynccontextmanager
async def lifespan(app: FastAPI):
    await init_state(app, load_settings())
    yield
    await close_state(app)


app = FastAPI(title="Kodabi RAG Gateway", lifespan=lifespan)
app.include_router(router)
app.include_router(mcp_router, prefix="/mcp")


if __name__ == "__main__":
    settings = load_settings()
    print(f"Kodabi RAG gateway listening on http://{settings.base_ip}:{settings.base_port}")
    uvicorn.run(app, host=settings.base_ip, port=int(settings.base_port))
