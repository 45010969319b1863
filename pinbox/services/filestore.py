# pinbox/services/filestore.py
import logging
import shutil
import time
from pathlib import Path
from typing import List

from pinbox.core.errors import InvalidInput, NotFound, PathTraversal
from pinbox.services.hashing import hash_pin, is_digest

logger = logging.getLogger(__name__)


class Storage:
    """
    Per-PIN flat file storage under a single uploads root.

    Every user-supplied path goes through resolve_safe before it is read,
    written or deleted.
    """

    def __init__(self, uploads_root):
        self.uploads_root = Path(uploads_root).resolve()
        self.uploads_root.mkdir(parents=True, exist_ok=True)

    # ---- roots ----

    def root_for(self, pin: str) -> Path:
        return self.uploads_root / hash_pin(pin)

    def root_for_digest(self, digest: str) -> Path:
        if not is_digest(digest):
            raise InvalidInput("Invalid path")
        return self.uploads_root / digest

    def ensure_root(self, pin: str) -> Path:
        root = self.root_for(pin)
        root.mkdir(parents=True, exist_ok=True)
        return root

    def resolve_safe(self, root: Path, rel: str) -> Path:
        if not rel or not rel.strip():
            raise InvalidInput("Missing path query")
        cleaned = rel.replace("\\", "/").strip("/")
        base = Path(root).resolve()
        try:
            target = (base / cleaned).resolve()
        except (OSError, ValueError):
            raise PathTraversal()
        # the root itself is not addressable, only entries inside it
        if base not in target.parents:
            logger.warning("Rejected path outside user root: %r", rel)
            raise PathTraversal()
        return target

    # ---- operations ----

    def list_files(self, root: Path) -> List[str]:
        root = Path(root)
        if not root.is_dir():
            return []
        return sorted(p.name for p in root.iterdir() if p.is_file() and not p.is_symlink())

    def save_file(self, root: Path, filename: str, content: bytes) -> str:
        name = (filename or "").replace("\\", "/").rsplit("/", 1)[-1]
        if name in ("", ".", ".."):
            raise InvalidInput("Invalid file name")
        root = Path(root)
        root.mkdir(parents=True, exist_ok=True)
        dest = root / name
        if dest.exists():
            stem, ext = Path(name).stem, Path(name).suffix
            dest = root / f"{stem}-{int(time.time() * 1000)}{ext}"
        dest.write_bytes(content)
        logger.info("Stored %s (%d bytes)", dest.name, len(content))
        return dest.name

    def open_target(self, root: Path, rel: str) -> Path:
        target = self.resolve_safe(root, rel)
        if not target.exists():
            raise NotFound()
        return target

    def delete(self, root: Path, rel: str) -> None:
        target = self.open_target(root, rel)
        if target.is_dir():
            shutil.rmtree(target)
        else:
            target.unlink()
        logger.info("Deleted %s", target.name)
