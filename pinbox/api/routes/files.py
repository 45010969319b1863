import logging
from typing import List, Optional
from urllib.parse import quote

from fastapi import APIRouter, Depends, File, Form, HTTPException, Request, UploadFile
from starlette.responses import FileResponse, StreamingResponse

from pinbox.api.deps import get_registry, get_settings, get_storage, require_pin
from pinbox.core.config import Settings
from pinbox.core.errors import PinboxError, to_http
from pinbox.services.archive import stream_directory, stream_files
from pinbox.services.filestore import Storage
from pinbox.services.registry import PinRegistry

router = APIRouter()
logger = logging.getLogger(__name__)

def _zip_response(chunks, filename: str) -> StreamingResponse:
    headers = {"Content-Disposition": f'attachment; filename="{filename}"'}
    return StreamingResponse(chunks, media_type="application/zip", headers=headers)

@router.post("/upload")
async def upload(
    pin: Optional[str] = Form(None),
    files: Optional[List[UploadFile]] = File(None),
    registry: PinRegistry = Depends(get_registry),
    storage: Storage = Depends(get_storage),
):
    root = require_pin(pin, registry, storage)
    if not files:
        raise HTTPException(status_code=400, detail="No files uploaded")
    try:
        for f in files:
            data = await f.read()
            storage.save_file(root, f.filename, data)
    except PinboxError as e:
        raise to_http(e)
    except Exception:
        logger.exception("Upload failed")
        raise HTTPException(status_code=500, detail="Upload failed")
    return {"ok": True, "files": len(files)}

@router.get("/files")
def list_files(
    request: Request,
    pin: Optional[str] = None,
    registry: PinRegistry = Depends(get_registry),
    storage: Storage = Depends(get_storage),
):
    root = require_pin(pin, registry, storage)
    try:
        names = storage.list_files(root)
    except Exception:
        logger.exception("Listing failed")
        raise HTTPException(status_code=500, detail="Failed to list files")
    base = str(request.base_url)
    items = [{"path": p, "url": f"{base}api/uploads/{root.name}/{quote(p)}"} for p in names]
    return {"ok": True, "files": items}

@router.get("/download")
def download(
    pin: Optional[str] = None,
    path: Optional[str] = None,
    registry: PinRegistry = Depends(get_registry),
    storage: Storage = Depends(get_storage),
    settings: Settings = Depends(get_settings),
):
    root = require_pin(pin, registry, storage)
    if not path:
        raise HTTPException(status_code=400, detail="Missing path query")
    try:
        target = storage.open_target(root, path)
        # flat storage never creates directories, but one may still be present
        if target.is_dir():
            return _zip_response(stream_directory(target, settings.CHUNK_SIZE), f"{target.name}.zip")
    except PinboxError as e:
        raise to_http(e)
    except Exception:
        logger.exception("Download failed")
        raise HTTPException(status_code=500, detail="Download failed")
    return FileResponse(target, filename=target.name)

@router.delete("/delete")
def delete(
    pin: Optional[str] = None,
    path: Optional[str] = None,
    registry: PinRegistry = Depends(get_registry),
    storage: Storage = Depends(get_storage),
):
    root = require_pin(pin, registry, storage)
    if not path:
        raise HTTPException(status_code=400, detail="Missing path query")
    try:
        storage.delete(root, path)
    except PinboxError as e:
        raise to_http(e)
    except Exception:
        logger.exception("Delete failed")
        raise HTTPException(status_code=500, detail="Delete failed")
    return {"ok": True, "message": "Deleted successfully"}

@router.get("/download-all")
def download_all(
    pin: Optional[str] = None,
    registry: PinRegistry = Depends(get_registry),
    storage: Storage = Depends(get_storage),
    settings: Settings = Depends(get_settings),
):
    root = require_pin(pin, registry, storage)
    try:
        chunks = stream_files(root, settings.CHUNK_SIZE)
    except PinboxError as e:
        raise to_http(e)
    except Exception:
        logger.exception("Download failed")
        raise HTTPException(status_code=500, detail="Download failed")
    return _zip_response(chunks, "all-files.zip")
