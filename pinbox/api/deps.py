from pathlib import Path
from typing import Optional

from fastapi import HTTPException, Request

from pinbox.core.config import Settings
from pinbox.core.errors import PinboxError, to_http
from pinbox.services.filestore import Storage
from pinbox.services.registry import PinRegistry


def get_settings(request: Request) -> Settings:
    return request.app.state.settings


def get_registry(request: Request) -> PinRegistry:
    return request.app.state.registry


def get_storage(request: Request) -> Storage:
    return request.app.state.storage


def require_pin(pin: Optional[str], registry: PinRegistry, storage: Storage) -> Path:
    """Verify a raw PIN and return its user root (not created here)."""
    if not pin:
        raise HTTPException(status_code=400, detail="PIN is required")
    try:
        registry.verify(pin)
    except PinboxError as e:
        raise to_http(e)
    return storage.root_for(pin)
