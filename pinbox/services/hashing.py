# pinbox/services/hashing.py
import hashlib
import re

_DIGEST_RE = re.compile(r"^[0-9a-f]{64}$")

def hash_pin(pin: str) -> str:
    """
    Unsalted SHA-256 of the PIN, hex encoded. Used as both the registry key
    and the name of the PIN's upload directory.
    """
    return hashlib.sha256(pin.encode("utf-8")).hexdigest()

def is_digest(value: str) -> bool:
    return bool(_DIGEST_RE.match(value or ""))
