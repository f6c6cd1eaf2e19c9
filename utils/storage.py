"""Local file storage utility.

Saves uploaded files under UPLOAD_DIR and returns URL paths.
Nginx serves files from /uploads/* mapped to this directory.
"""

import asyncio
from pathlib import Path

from core.config import settings

URL_PREFIX = "/uploads/"


def _root() -> Path:
    return Path(settings.UPLOAD_DIR)


def _resolve(path: str) -> Path:
    """Resolve an object path inside UPLOAD_DIR.

    Raises:
        ValueError: If the path escapes UPLOAD_DIR (path traversal).
    """
    root = _root().resolve()
    file_path = (root / path).resolve()
    if not file_path.is_relative_to(root):
        raise ValueError(f"invalid storage path: {path}")
    return file_path


def build_url(path: str) -> str:
    return f"{URL_PREFIX}{path}"


def _write(path: str, content: bytes) -> None:
    file_path = _resolve(path)
    file_path.parent.mkdir(parents=True, exist_ok=True)
    file_path.write_bytes(content)


async def put_object(path: str, content: bytes, content_type: str) -> None:
    """Write file content to local storage."""
    await asyncio.to_thread(_write, path, content)


async def list_objects(prefix: str) -> list[dict]:
    """List files whose object path starts with the prefix."""
    root = _root()
    if not root.exists():
        return []
    resolved_root = root.resolve()
    objects = []
    for file_path in sorted(resolved_root.rglob("*")):
        if not file_path.is_file():
            continue
        relative = file_path.relative_to(resolved_root).as_posix()
        if relative.startswith(prefix):
            objects.append({"path": relative, "size": file_path.stat().st_size})
    return objects


async def delete_objects(paths: list[str]) -> int:
    """Delete files by object path and return how many were removed."""
    deleted = 0
    for path in paths:
        try:
            file_path = _resolve(path)
        except ValueError:
            continue
        if file_path.exists():
            file_path.unlink()
            deleted += 1
    return deleted


async def presigned_url(path: str, expires_in: int) -> str:
    # Local files are served publicly by nginx
    return build_url(path)
