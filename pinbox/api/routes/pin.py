import logging
from typing import Optional

from fastapi import APIRouter, Depends, HTTPException
from pydantic import BaseModel, field_validator

from pinbox.api.deps import get_registry, get_storage
from pinbox.core.errors import InvalidInput, Unauthorized, to_http
from pinbox.services.filestore import Storage
from pinbox.services.registry import PinRegistry

router = APIRouter()
logger = logging.getLogger(__name__)

class PinRequest(BaseModel):
    pin: Optional[str] = None

    # numeric keypads post the PIN as a JSON number
    @field_validator("pin", mode="before")
    @classmethod
    def _pin_as_text(cls, v):
        if isinstance(v, int) and not isinstance(v, bool):
            return str(v)
        return v

def _pin_of(body: Optional[PinRequest]) -> Optional[str]:
    return body.pin if body else None

class PinResponse(BaseModel):
    ok: bool = True
    message: str

@router.post("/create", response_model=PinResponse)
def create_pin(
    body: Optional[PinRequest] = None,
    registry: PinRegistry = Depends(get_registry),
    storage: Storage = Depends(get_storage),
):
    try:
        pin = _pin_of(body)
        registry.create(pin)
        storage.ensure_root(pin)
    except InvalidInput as e:
        raise to_http(e)
    except Exception:
        logger.exception("PIN creation failed")
        raise HTTPException(status_code=500, detail="Failed to create PIN")
    return PinResponse(message="PIN created successfully")

@router.post("/verify", response_model=PinResponse)
def verify_pin(
    body: Optional[PinRequest] = None,
    registry: PinRegistry = Depends(get_registry),
    storage: Storage = Depends(get_storage),
):
    try:
        pin = _pin_of(body)
        registry.verify(pin)
        storage.ensure_root(pin)
    except (InvalidInput, Unauthorized) as e:
        raise to_http(e)
    except Exception:
        logger.exception("PIN verification failed")
        raise HTTPException(status_code=500, detail="Failed to verify PIN")
    return PinResponse(message="PIN verified")
