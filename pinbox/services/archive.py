
import io
import logging
import zipfile
from pathlib import Path
from typing import Iterable, Iterator, List, Tuple

from pinbox.core.errors import NotFound

logger = logging.getLogger(__name__)

class _ChunkSink(io.RawIOBase):
    """
    Write-only, non-seekable buffer. zipfile falls back to data descriptors
    for unseekable outputs, so entries can be drained as they are written.
    """

    def __init__(self):
        self._chunks: List[bytes] = []

    def writable(self):
        return True

    def write(self, b):
        self._chunks.append(bytes(b))
        return len(b)

    def drain(self) -> bytes:
        data = b"".join(self._chunks)
        self._chunks.clear()
        return data

def _inside(p: Path, base: Path) -> bool:
    # symlinks may point anywhere; only archive what really lives under base
    return base in p.resolve().parents

def _zip_entries(entries: Iterable[Tuple[str, Path]], chunk_size: int) -> Iterator[bytes]:
    sink = _ChunkSink()
    with zipfile.ZipFile(sink, "w", compression=zipfile.ZIP_DEFLATED, compresslevel=9) as zf:
        for arcname, path in entries:
            size = path.stat().st_size
            with open(path, "rb") as src, zf.open(arcname, "w", force_zip64=size > zipfile.ZIP64_LIMIT) as dest:
                while True:
                    block = src.read(chunk_size)
                    if not block:
                        break
                    dest.write(block)
                    data = sink.drain()
                    if data:
                        yield data
            data = sink.drain()
            if data:
                yield data
    # central directory is written on close
    data = sink.drain()
    if data:
        yield data

def stream_directory(path: Path, chunk_size: int = 65536) -> Iterator[bytes]:
    """Zip every file below `path`, nested under the directory's own name."""
    path = Path(path)
    base = path.resolve()
    entries = [
        (f"{path.name}/{p.relative_to(path).as_posix()}", p)
        for p in sorted(path.rglob("*")) if p.is_file() and _inside(p, base)
    ]
    logger.info("Archiving directory %s (%d files)", path.name, len(entries))
    return _zip_entries(entries, chunk_size)

def stream_files(root: Path, chunk_size: int = 65536) -> Iterator[bytes]:
    """Zip the top-level files of a user root. Raises NotFound when there are none."""
    root = Path(root)
    if not root.is_dir():
        raise NotFound("No files found")
    entries = [(p.name, p) for p in sorted(root.iterdir()) if p.is_file() and not p.is_symlink()]
    if not entries:
        raise NotFound("No files to download")
    logger.info("Archiving %d files", len(entries))
    return _zip_entries(entries, chunk_size)
