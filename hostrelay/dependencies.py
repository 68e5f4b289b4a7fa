from typing import Annotated
from fastapi import Depends
from fastapi.requests import HTTPConnection
from .rooms import ConnectionRouter


def get_relay(connection: HTTPConnection) -> ConnectionRouter:
    """Get the ConnectionRouter owned by the running app."""
    relay = getattr(connection.app.state, "relay", None)
    if relay is None:
        raise RuntimeError("Relay not initialized")
    return relay


# convenience type alias for dependency injection
RelayDep = Annotated[ConnectionRouter, Depends(get_relay)]
