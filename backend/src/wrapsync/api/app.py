"""ASGI application: static client bundle plus the Socket.IO relay.

`socket_app` is the object uvicorn serves. Socket.IO traffic under
/socket.io/ goes to the relay; every other request is handled by FastAPI,
which serves the built client and falls back to index.html so client-side
routes survive a page reload.
"""

import logging
from pathlib import Path
from typing import Optional

from dotenv import load_dotenv
from fastapi import FastAPI, HTTPException
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import FileResponse

from wrapsync import __version__
from wrapsync.config.settings import ServerSettings
from wrapsync.connection.player_registry import PlayerRegistry
from wrapsync.connection.socketio_server import create_socketio_app, create_socketio_server
from wrapsync.logging_config import setup_logging

logger = logging.getLogger(__name__)


def _resolve_static_file(static_root: Path, request_path: str) -> Optional[Path]:
    """Map a URL path to a file inside static_root, refusing traversal."""
    if not request_path:
        return None
    candidate = (static_root / request_path).resolve()
    try:
        candidate.relative_to(static_root)
    except ValueError:
        return None
    return candidate if candidate.is_file() else None


def create_http_app(settings: ServerSettings) -> FastAPI:
    """FastAPI app serving the client bundle from settings.static_dir."""
    app = FastAPI(title="WrapSync Relay", version=__version__, docs_url=None, redoc_url=None, openapi_url=None)
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.allowed_origins or ["*"],
        allow_methods=["GET", "POST"],
        allow_headers=["*"],
    )

    static_root = Path(settings.static_dir).resolve()
    index_file = static_root / "index.html"
    if not index_file.is_file():
        logger.warning("[HTTP] No client bundle at %s, serving relay only", static_root)

    @app.get("/{full_path:path}", include_in_schema=False)
    async def serve_client(full_path: str):
        asset = _resolve_static_file(static_root, full_path)
        if asset is not None:
            return FileResponse(asset)
        if index_file.is_file():
            return FileResponse(index_file)
        raise HTTPException(status_code=404, detail="Client bundle not built")

    return app


def create_app(settings: Optional[ServerSettings] = None, registry: Optional[PlayerRegistry] = None):
    """Build the combined Socket.IO + FastAPI ASGI app.

    The relay's registry and dispatcher are reachable through
    `app.state` of the wrapped FastAPI app.
    """
    settings = settings or ServerSettings.from_env()
    http_app = create_http_app(settings)
    sio, dispatcher = create_socketio_server(settings, registry=registry)
    http_app.state.settings = settings
    http_app.state.sio = sio
    http_app.state.dispatcher = dispatcher
    return create_socketio_app(sio, http_app)


load_dotenv()
setup_logging()

socket_app = create_app()
