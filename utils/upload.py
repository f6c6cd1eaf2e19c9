"""스토리지 디스패처.

STORAGE_TYPE 설정에 따라 로컬 파일시스템 또는 S3로 파일 업로드/조회/삭제를 라우팅합니다.
검증(형식, 크기, 빈 파일, 시그니처)은 네트워크 호출 전에 공통으로 수행합니다.
"""

import logging
import os
import uuid
from typing import Any, Iterable

from fastapi import HTTPException, UploadFile, status

from core.config import settings
from utils import s3_utils, storage

logger = logging.getLogger(__name__)

# 폴더(버킷) 이름
CORPORATE_DOCUMENTS_FOLDER = "corporate-documents"
PROFILE_IMAGES_FOLDER = "profile-images"

DOCUMENT_MIME_TYPES = ("image/jpeg", "image/png", "application/pdf")
CORPORATE_DOCUMENT_MAX_MB = 10

CHUNK_SIZE = 1024 * 64  # 64KB

# MIME 타입별 저장 확장자
MIME_EXTENSIONS = {
    "image/jpeg": ".jpg",
    "image/png": ".png",
    "image/webp": ".webp",
    "image/gif": ".gif",
    "application/pdf": ".pdf",
}

# MIME 타입별로 허용하는 업로드 파일명 확장자
ALLOWED_EXTENSIONS = {
    "image/jpeg": (".jpg", ".jpeg"),
    "image/png": (".png",),
    "image/webp": (".webp",),
    "image/gif": (".gif",),
    "application/pdf": (".pdf",),
}

# MIME 타입별 매직 넘버 (파일 시그니처)
MAGIC_NUMBERS = {
    "image/jpeg": [b"\xFF\xD8\xFF"],
    "image/png": [b"\x89\x50\x4E\x47\x0D\x0A\x1A\x0A"],
    "image/gif": [b"\x47\x49\x46\x38\x37\x61", b"\x47\x49\x46\x38\x39\x61"],
    "image/webp": [b"\x52\x49\x46\x46"],
    "application/pdf": [b"%PDF"],
}


def _bad_request(error: str, message: str) -> HTTPException:
    return HTTPException(
        status_code=status.HTTP_400_BAD_REQUEST,
        detail={"error": error, "message": message},
    )


def validate_signature(mime_type: str, first_chunk: bytes) -> bool:
    """첫 청크가 선언된 MIME 타입의 시그니처와 일치하는지 확인합니다.

    시그니처를 모르는 타입은 통과시킵니다.
    """
    signatures = MAGIC_NUMBERS.get(mime_type)
    if not signatures:
        return True
    return any(first_chunk.startswith(sig) for sig in signatures)


async def read_validated(
    file: UploadFile, max_size_mb: int, allowed_types: Iterable[str]
) -> bytes:
    """파일을 청크 단위로 읽으며 형식과 크기를 검증합니다.

    Raises:
        HTTPException 400: 허용되지 않은 형식, 형식과 맞지 않는 확장자, 크기 초과,
            빈 파일, 시그니처 불일치.
    """
    allowed = tuple(allowed_types)
    if file.content_type not in allowed:
        raise _bad_request(
            "invalid_content_type",
            f"허용된 파일 형식: {', '.join(allowed)}",
        )

    ext = os.path.splitext(file.filename or "")[1].lower()
    if ext and ext not in ALLOWED_EXTENSIONS.get(file.content_type, ()):
        raise _bad_request(
            "invalid_file_extension", "파일 확장자가 선언된 형식과 일치하지 않습니다."
        )

    max_bytes = max_size_mb * 1024 * 1024
    chunks: list[bytes] = []
    total_size = 0
    while chunk := await file.read(CHUNK_SIZE):
        if not chunks and not validate_signature(file.content_type, chunk):
            raise _bad_request(
                "invalid_file_content", "파일 내용이 선언된 형식과 일치하지 않습니다."
            )
        total_size += len(chunk)
        if total_size > max_bytes:
            raise _bad_request(
                "file_too_large", f"파일 크기는 {max_size_mb}MB를 초과할 수 없습니다."
            )
        chunks.append(chunk)

    if total_size == 0:
        raise _bad_request("empty_file", "파일이 비어 있습니다.")
    return b"".join(chunks)


def build_object_path(folder: str, entity_id: str, mime_type: str) -> str:
    """<folder>/<entity_id>/<무작위 hex><확장자> 형식의 객체 경로를 만듭니다.

    확장자는 클라이언트 파일명이 아니라 검증된 MIME 타입에서 정합니다.
    """
    ext = MIME_EXTENSIONS.get(mime_type, "")
    return f"{folder}/{entity_id}/{uuid.uuid4().hex}{ext}"


def _backend():
    return s3_utils if settings.STORAGE_TYPE == "s3" else storage


async def upload_file(
    file: UploadFile,
    folder: str,
    entity_id: str,
    max_size_mb: int,
    allowed_types: Iterable[str],
) -> dict[str, Any]:
    """파일을 검증 후 업로드하고 메타데이터를 반환합니다.

    기존 파일을 교체하더라도 이전 객체는 삭제하지 않습니다.

    Returns:
        {"url", "path", "file_name", "file_size", "mime_type"}

    Raises:
        HTTPException: 400 검증 실패, 502 스토리지 오류.
    """
    content = await read_validated(file, max_size_mb, allowed_types)
    path = build_object_path(folder, entity_id, file.content_type)

    try:
        await _backend().put_object(path, content, file.content_type)
    except Exception:
        logger.exception(f"파일 업로드 실패: {path}")
        raise HTTPException(
            status_code=status.HTTP_502_BAD_GATEWAY,
            detail={"error": "upload_failed", "message": "파일을 업로드하지 못했습니다."},
        )

    return {
        "url": public_url(path),
        "path": path,
        "file_name": file.filename or os.path.basename(path),
        "file_size": len(content),
        "mime_type": file.content_type,
    }


async def list_files(prefix: str) -> list[dict[str, Any]]:
    """접두사 아래의 파일 목록을 반환합니다 ({"path", "size", "url"})."""
    objects = await _backend().list_objects(prefix)
    return [{**obj, "url": public_url(obj["path"])} for obj in objects]


async def delete_files(paths: list[str]) -> int:
    """파일들을 삭제하고 삭제한 개수를 반환합니다."""
    if not paths:
        return 0
    return await _backend().delete_objects(paths)


def public_url(path: str) -> str:
    return _backend().build_url(path)


async def signed_url(path: str, expires_in: int | None = None) -> str:
    """비공개 파일에 대한 만료 URL을 생성합니다 (로컬 저장소는 공개 URL)."""
    return await _backend().presigned_url(path, expires_in or settings.SIGNED_URL_EXPIRES)


async def delete_folder(prefix: str) -> int:
    """접두사 아래의 모든 파일을 삭제합니다."""
    files = await list_files(prefix)
    return await delete_files([f["path"] for f in files])
