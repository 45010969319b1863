"""
Pinbox (PIN-protected file storage)
- Serves the prebuilt single-page UI from / when present
- /api/pin/* : create and verify PINs
- /api/upload, /api/files, /api/download, /api/delete, /api/download-all : per-PIN file ops
- /api/uploads/<digest>/<file> : direct file links handed out by /api/files

Run with:
    uvicorn pinbox.main:app --port 3000
"""

import logging
from pathlib import Path
from typing import Optional

from fastapi import FastAPI, HTTPException, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.staticfiles import StaticFiles
from fastapi.responses import FileResponse, JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from pinbox.api.routes.files import router as files_router
from pinbox.api.routes.pin import router as pin_router
from pinbox.api.routes.uploads import router as uploads_router
from pinbox.core.config import Settings, settings as default_settings
from pinbox.core.logging import configure_logging
from pinbox.services.filestore import Storage
from pinbox.services.registry import JsonPinStore, PinRegistry

def create_app(settings: Optional[Settings] = None) -> FastAPI:
    settings = settings or default_settings
    logger = logging.getLogger(__name__)
    configure_logging(settings.LOG_DIR)

    app = FastAPI(title="Pinbox", version="0.1.0")

    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"], allow_credentials=True,
        allow_methods=["*"], allow_headers=["*"],
    )

    # The UI reads failures from an "error" key.
    @app.exception_handler(StarletteHTTPException)
    async def http_error(request: Request, exc: StarletteHTTPException):
        return JSONResponse({"error": exc.detail}, status_code=exc.status_code, headers=getattr(exc, "headers", None))

    @app.exception_handler(RequestValidationError)
    async def validation_error(request: Request, exc: RequestValidationError):
        logger.info("Rejected malformed request to %s", request.url.path)
        return JSONResponse({"error": "Invalid request"}, status_code=400)

    app.state.settings = settings
    app.state.registry = PinRegistry(JsonPinStore(settings.PINS_FILE), min_length=settings.MIN_PIN_LENGTH)
    app.state.storage = Storage(settings.UPLOADS_DIR)

    # APIs
    app.include_router(pin_router, prefix="/api/pin", tags=["pin"])
    app.include_router(files_router, prefix="/api", tags=["files"])
    app.include_router(uploads_router, prefix="/api", tags=["uploads"])

    @app.get("/health")
    def health():
        return {"status": "ok"}

    # Single-page UI (optional build output)
    static_dir = Path(settings.STATIC_DIR)
    index_html = static_dir / "index.html"
    if (static_dir / "static").is_dir():
        app.mount("/static", StaticFiles(directory=static_dir / "static"), name="static")

    @app.get("/{full_path:path}", include_in_schema=False)
    def index(full_path: str):
        if full_path.startswith("api/"):
            raise HTTPException(status_code=404, detail="Not Found")
        asset = static_dir / full_path
        if full_path and asset.is_file() and static_dir.resolve() in asset.resolve().parents:
            return FileResponse(asset)
        if index_html.is_file():
            return FileResponse(index_html)
        raise HTTPException(status_code=404, detail="UI build not found")

    logger.info(
        "Pinbox ready: uploads=%s pins=%s", app.state.storage.uploads_root, settings.PINS_FILE
    )
    return app

app = create_app()
