from dotenv import load_dotenv

import os

load_dotenv()

HOST = os.getenv("HOST", "0.0.0.0")
PORT = int(os.getenv("PORT", "8080"))

# TLS is enabled only when both files are set
SSL_KEYFILE = os.getenv("SSL_KEYFILE")
SSL_CERTFILE = os.getenv("SSL_CERTFILE")

ROOM_ID_LENGTH = int(os.getenv("ROOM_ID_LENGTH", "4"))

# seconds a dropped mid-game client keeps its slot, 0 keeps it until the room dies
RECONNECT_TIMEOUT = float(os.getenv("RECONNECT_TIMEOUT", "0"))

LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO").upper()
CORS_ORIGINS = [o.strip() for o in os.getenv("CORS_ORIGINS", "*").split(",") if o.strip()]
