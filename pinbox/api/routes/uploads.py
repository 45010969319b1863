import logging

from fastapi import APIRouter, Depends, HTTPException
from starlette.responses import FileResponse

from pinbox.api.deps import get_registry, get_storage
from pinbox.core.errors import PinboxError, to_http
from pinbox.services.filestore import Storage
from pinbox.services.registry import PinRegistry

router = APIRouter()
logger = logging.getLogger(__name__)

# Anyone holding the digest URL can fetch; the digest is the capability.
@router.get("/uploads/{digest}/{file_path:path}")
def serve_upload(
    digest: str,
    file_path: str,
    registry: PinRegistry = Depends(get_registry),
    storage: Storage = Depends(get_storage),
):
    if not registry.contains_digest(digest):
        raise HTTPException(status_code=404, detail="File not found")
    try:
        root = storage.root_for_digest(digest)
        target = storage.open_target(root, file_path)
    except PinboxError as e:
        raise to_http(e)
    if not target.is_file():
        raise HTTPException(status_code=404, detail="File not found")
    return FileResponse(target)
