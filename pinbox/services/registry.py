"""
pinbox/services/registry.py

PIN registry: maps hash_pin(pin) -> {"createdAt": iso-timestamp}.

- PinStore: load/save of the whole mapping (JSON file or in-memory)
- PinRegistry: create/verify on top of a store, with mutations serialized
"""

from __future__ import annotations

import json
import logging
import threading
from datetime import datetime, timezone
from pathlib import Path
from typing import Dict, Protocol

from pinbox.core.errors import AlreadyExists, InvalidInput, PinboxError, Unauthorized
from pinbox.services.hashing import hash_pin

logger = logging.getLogger(__name__)

PinRecords = Dict[str, Dict[str, str]]


def _timestamp() -> str:
    # same shape as JS Date.toISOString(): 2024-01-31T09:15:00.123Z
    return datetime.now(timezone.utc).isoformat(timespec="milliseconds").replace("+00:00", "Z")


class PinStore(Protocol):
    def load(self) -> PinRecords: ...

    def save(self, pins: PinRecords) -> bool: ...


class JsonPinStore:
    """Whole-file JSON store. Read and rewritten on every operation."""

    def __init__(self, path):
        self.path = Path(path)

    def load(self) -> PinRecords:
        if not self.path.exists():
            return {}
        try:
            data = json.loads(self.path.read_text(encoding="utf-8"))
        except (OSError, ValueError):
            logger.exception("Error loading PINs from %s", self.path)
            return {}
        if not isinstance(data, dict):
            logger.error("PIN file %s does not hold an object; ignoring it", self.path)
            return {}
        return data

    def save(self, pins: PinRecords) -> bool:
        try:
            self.path.parent.mkdir(parents=True, exist_ok=True)
            self.path.write_text(json.dumps(pins, indent=2), encoding="utf-8")
            return True
        except OSError:
            logger.exception("Error saving PINs to %s", self.path)
            return False


class MemoryPinStore:
    def __init__(self, pins: PinRecords = None):
        self._pins: PinRecords = dict(pins or {})

    def load(self) -> PinRecords:
        return {k: dict(v) for k, v in self._pins.items()}

    def save(self, pins: PinRecords) -> bool:
        self._pins = {k: dict(v) for k, v in pins.items()}
        return True


class PinRegistry:
    def __init__(self, store: PinStore, min_length: int = 4):
        self.store = store
        self.min_length = min_length
        self._lock = threading.Lock()

    def _check_length(self, pin: str, detail: str) -> None:
        if not pin or len(pin) < self.min_length:
            raise InvalidInput(detail)

    def create(self, pin: str) -> str:
        self._check_length(pin, f"PIN must be at least {self.min_length} characters")
        digest = hash_pin(pin)
        with self._lock:
            pins = self.store.load()
            if digest in pins:
                raise AlreadyExists()
            pins[digest] = {"createdAt": _timestamp()}
            if not self.store.save(pins):
                raise PinboxError("Failed to create PIN")
        logger.info("Created PIN %s...", digest[:8])
        return digest

    def verify(self, pin: str) -> str:
        self._check_length(pin, "Invalid PIN")
        digest = hash_pin(pin)
        if not self.contains_digest(digest):
            raise Unauthorized()
        return digest

    def contains_digest(self, digest: str) -> bool:
        return digest in self.store.load()
