"""S3 파일 저장소 유틸리티.

AWS S3에 파일을 저장/조회/삭제하고 URL을 만듭니다.
CLOUDFRONT_DOMAIN이 설정된 경우 CloudFront CDN URL을 반환하고,
그렇지 않으면 직접 S3 URL을 반환합니다.
boto3 호출은 동기 I/O이므로 asyncio.to_thread로 실행합니다.
"""

import asyncio
import logging

import boto3
from botocore.exceptions import ClientError

from core.config import settings

logger = logging.getLogger(__name__)


def get_s3_client():
    """S3 클라이언트를 생성합니다."""
    kwargs: dict[str, str] = {"region_name": settings.AWS_REGION}
    if settings.AWS_ACCESS_KEY_ID and settings.AWS_SECRET_ACCESS_KEY:
        kwargs["aws_access_key_id"] = settings.AWS_ACCESS_KEY_ID
        kwargs["aws_secret_access_key"] = settings.AWS_SECRET_ACCESS_KEY
    return boto3.client("s3", **kwargs)


def build_url(s3_key: str) -> str:
    """S3 키로부터 공개 접근 URL을 생성합니다.

    Args:
        s3_key: S3 객체 키 (예: "car-images/<listing_id>/<hex>.jpg")

    Returns:
        CloudFront URL 또는 S3 직접 URL.
    """
    if settings.CLOUDFRONT_DOMAIN:
        domain = settings.CLOUDFRONT_DOMAIN.rstrip("/")
        return f"https://{domain}/{s3_key}"
    return f"https://{settings.AWS_S3_BUCKET_NAME}.s3.{settings.AWS_REGION}.amazonaws.com/{s3_key}"


def _put(s3_key: str, content: bytes, content_type: str) -> None:
    get_s3_client().put_object(
        Bucket=settings.AWS_S3_BUCKET_NAME,
        Key=s3_key,
        Body=content,
        ContentType=content_type,
    )


async def put_object(s3_key: str, content: bytes, content_type: str) -> None:
    """객체를 업로드합니다.

    Raises:
        ClientError: S3 오류.
    """
    await asyncio.to_thread(_put, s3_key, content, content_type)


def _list(prefix: str) -> list[dict]:
    paginator = get_s3_client().get_paginator("list_objects_v2")
    objects: list[dict] = []
    for page in paginator.paginate(Bucket=settings.AWS_S3_BUCKET_NAME, Prefix=prefix):
        for item in page.get("Contents", []):
            objects.append({"path": item["Key"], "size": item["Size"]})
    return objects


async def list_objects(prefix: str) -> list[dict]:
    return await asyncio.to_thread(_list, prefix)


def _delete(keys: list[str]) -> int:
    response = get_s3_client().delete_objects(
        Bucket=settings.AWS_S3_BUCKET_NAME,
        Delete={"Objects": [{"Key": key} for key in keys], "Quiet": False},
    )
    for error in response.get("Errors", []):
        logger.warning(f"S3 객체 삭제 실패: {error.get('Key')} ({error.get('Code')})")
    return len(response.get("Deleted", []))


async def delete_objects(keys: list[str]) -> int:
    """객체들을 삭제하고 삭제된 개수를 반환합니다."""
    try:
        return await asyncio.to_thread(_delete, keys)
    except ClientError:
        logger.exception("S3 객체 일괄 삭제 실패")
        return 0


def _presign(s3_key: str, expires_in: int) -> str:
    return get_s3_client().generate_presigned_url(
        "get_object",
        Params={"Bucket": settings.AWS_S3_BUCKET_NAME, "Key": s3_key},
        ExpiresIn=expires_in,
    )


async def presigned_url(s3_key: str, expires_in: int) -> str:
    return await asyncio.to_thread(_presign, s3_key, expires_in)
