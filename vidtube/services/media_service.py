"""
미디어 저장소(S3 호환) 서비스

로컬에 임시 저장된 업로드 파일을 버킷에 올리고 공개 URL을 돌려준다.
오브젝트 키는 새 hex id + 확장자이므로 URL 마지막 경로 조각에서
확장자를 뗀 값이 곧 public id가 된다. (public_id_from_url)
"""
import asyncio
import logging
import mimetypes
import uuid
from abc import ABC, abstractmethod
from dataclasses import dataclass
from functools import lru_cache
from pathlib import Path
from typing import List, Optional
from urllib.parse import urlparse

import boto3
from botocore.client import Config
from botocore.exceptions import BotoCoreError, ClientError

from vidtube.core.config import Settings, get_settings
from vidtube.utils.exceptions import InternalServerError
from vidtube.utils.uploads import discard_local_file, save_upload

logger = logging.getLogger(__name__)


class MediaStorageError(InternalServerError):
    """미디어 저장소 업로드/삭제 실패"""
    pass


@dataclass(frozen=True)
class MediaAsset:
    """업로드 결과"""
    url: str
    public_id: str
    duration: float = 0.0


def public_id_from_url(url: Optional[str]) -> Optional[str]:
    """
    저장된 URL에서 public id 추출
    - 마지막 경로 조각의 첫 '.' 앞부분
    """
    if not url:
        return None
    segment = urlparse(url).path.rstrip("/").split("/")[-1]
    public_id = segment.split(".")[0]
    return public_id or None


class MediaService(ABC):
    """미디어 업로드/삭제 계약"""

    @abstractmethod
    async def upload(self, local_path: Path, content_type: Optional[str] = None) -> MediaAsset:
        ...

    @abstractmethod
    async def delete(self, public_id: str) -> None:
        ...


class S3MediaService(MediaService):
    """
    boto3 기반 S3/MinIO 구현
    - boto3 호출은 블로킹이므로 asyncio.to_thread로 실행
    """

    def __init__(self, settings: Settings):
        self.bucket = settings.MEDIA_BUCKET
        self.public_base_url = settings.media_public_base_url
        self._s3 = boto3.client(
            "s3",
            endpoint_url=settings.MEDIA_ENDPOINT_URL,
            aws_access_key_id=settings.MEDIA_ACCESS_KEY or None,
            aws_secret_access_key=settings.MEDIA_SECRET_KEY or None,
            config=Config(signature_version="s3v4"),
            region_name=settings.MEDIA_REGION,
        )

    def ensure_bucket(self) -> None:
        """버킷이 없으면 생성 (앱 시작 시 호출)"""
        existing = [b["Name"] for b in self._s3.list_buckets().get("Buckets", [])]
        if self.bucket not in existing:
            self._s3.create_bucket(Bucket=self.bucket)
            logger.info("미디어 버킷 생성: %s", self.bucket)
        else:
            logger.info("미디어 버킷 확인: %s", self.bucket)

    def _find_key(self, public_id: str) -> Optional[str]:
        response = self._s3.list_objects_v2(Bucket=self.bucket, Prefix=public_id, MaxKeys=1)
        contents = response.get("Contents", [])
        return contents[0]["Key"] if contents else None

    async def upload(self, local_path: Path, content_type: Optional[str] = None) -> MediaAsset:
        path = Path(local_path)
        public_id = uuid.uuid4().hex
        key = f"{public_id}{path.suffix.lower()}"
        content_type = content_type or mimetypes.guess_type(path.name)[0] or "application/octet-stream"

        try:
            await asyncio.to_thread(
                self._s3.upload_file,
                str(path),
                self.bucket,
                key,
                ExtraArgs={"ContentType": content_type},
            )
        except (BotoCoreError, ClientError) as e:
            logger.error("미디어 업로드 실패 (%s): %s", path.name, e)
            raise MediaStorageError("something went wrong while uploading media!")

        logger.debug("미디어 업로드 완료: %s", key)
        return MediaAsset(url=f"{self.public_base_url}/{key}", public_id=public_id)

    async def delete(self, public_id: str) -> None:
        try:
            key = await asyncio.to_thread(self._find_key, public_id)
            if key is None:
                logger.warning("삭제할 미디어 없음: %s", public_id)
                return
            await asyncio.to_thread(self._s3.delete_object, Bucket=self.bucket, Key=key)
        except (BotoCoreError, ClientError) as e:
            logger.error("미디어 삭제 실패 (%s): %s", public_id, e)
            raise MediaStorageError("something went wrong while removing media!")

        logger.debug("미디어 삭제 완료: %s", key)


@lru_cache()
def build_media_service() -> S3MediaService:
    """프로세스 단위 미디어 서비스 (설정에서 한 번 생성)"""
    return S3MediaService(get_settings())


def get_media_service() -> MediaService:
    """FastAPI 종속성: 미디어 서비스 주입 (테스트에서 override)"""
    return build_media_service()


async def ingest_upload(media: MediaService, upload, temp_dir: str) -> Optional[MediaAsset]:
    """
    multipart 파일을 임시 저장 → 저장소 업로드 → 임시 파일 삭제
    - 파일이 없으면 None
    - 업로드 성공 여부와 관계없이 임시 파일은 항상 삭제
    """
    local_path = await save_upload(upload, temp_dir)
    if local_path is None:
        return None
    try:
        return await media.upload(local_path, getattr(upload, "content_type", None))
    finally:
        discard_local_file(local_path)


async def remove_media(media: MediaService, *urls: Optional[str]) -> List[str]:
    """
    저장된 URL들의 미디어 삭제 (best-effort)
    - 실패한 public id 목록 반환, 예외는 올리지 않음
    """
    failed = []
    for url in urls:
        public_id = public_id_from_url(url)
        if public_id is None:
            continue
        try:
            await media.delete(public_id)
        except MediaStorageError as e:
            logger.warning("미디어 삭제 실패 (public_id=%s): %s", public_id, e.message)
            failed.append(public_id)
    return failed
