# chatrelay/main.py

from __future__ import annotations

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from chatrelay.core.config import settings
from chatrelay.core.logging import setup_logging, get_logger
from chatrelay.api.routes import root, health, rooms
from chatrelay.api import websocket as websocket_module

# Configure logging first
setup_logging()
logger = get_logger(__name__)

# FastAPI app
app = FastAPI(title="Chatrelay")

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.CORS_ORIGINS,
    allow_credentials=True,
    allow_methods=["GET", "POST"],
    allow_headers=["*"],
)

# REST routes
app.include_router(root.router)
app.include_router(health.router)
app.include_router(rooms.router)

# WebSocket routes
app.include_router(websocket_module.router)


@app.on_event("startup")
async def startup_event():
    logger.info(
        "🚀 Chatrelay starting on %s:%d (history limit %d)",
        settings.HOST, settings.PORT, settings.HISTORY_LIMIT,
    )


def run() -> None:
    import uvicorn
    uvicorn.run("chatrelay.main:app", host=settings.HOST, port=settings.PORT)


if __name__ == "__main__":
    run()
