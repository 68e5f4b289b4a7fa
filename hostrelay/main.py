import logging
from contextlib import asynccontextmanager

import uvicorn
from fastapi import FastAPI

from hostrelay.config import HOST, LOG_LEVEL, PORT, SSL_CERTFILE, SSL_KEYFILE
from hostrelay.middleware import add_cors_middleware, add_logging_middleware
from hostrelay.rooms import ConnectionRouter
from hostrelay.routers import rooms_router, websocket_router

log = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    app.state.relay = ConnectionRouter()
    log.info("Relay ready")
    yield
    app.state.relay.close()
    log.info("shutting down")


app = FastAPI(lifespan=lifespan)
app.add_middleware(add_cors_middleware)
app.add_middleware(add_logging_middleware)

app.include_router(rooms_router)
app.include_router(websocket_router)


def run() -> None:
    logging.basicConfig(
        level=LOG_LEVEL,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )

    ssl_options = {}
    if SSL_KEYFILE and SSL_CERTFILE:
        ssl_options = {"ssl_keyfile": SSL_KEYFILE, "ssl_certfile": SSL_CERTFILE}
    scheme = "wss" if ssl_options else "ws"
    log.info(f"WebSocket server is running on {scheme}://{HOST}:{PORT}/ws")

    uvicorn.run(app, host=HOST, port=PORT, log_level=LOG_LEVEL.lower(), **ssl_options)


if __name__ == "__main__":
    run()
