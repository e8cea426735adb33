import logging
import uuid
from pathlib import Path
from typing import Optional

import aiofiles
from fastapi import UploadFile

logger = logging.getLogger(__name__)

CHUNK_SIZE = 1024 * 1024


async def save_upload(upload: Optional[UploadFile], temp_dir: str) -> Optional[Path]:
    """
    multipart 업로드 파일을 임시 디렉토리에 저장하고 경로 반환
    - 파일이 없거나 파일명이 비어 있으면 None
    - 저장 파일명은 충돌 방지를 위해 새 hex id + 원본 확장자
    """
    if upload is None or not upload.filename:
        return None

    directory = Path(temp_dir)
    directory.mkdir(parents=True, exist_ok=True)
    destination = directory / f"{uuid.uuid4().hex}{Path(upload.filename).suffix}"

    async with aiofiles.open(destination, "wb") as out:
        while chunk := await upload.read(CHUNK_SIZE):
            await out.write(chunk)
    await upload.close()

    logger.debug("업로드 임시 저장: %s -> %s", upload.filename, destination)
    return destination


def discard_local_file(path: Optional[Path]) -> None:
    """임시 파일 삭제 (이미 없으면 무시)"""
    if path is None:
        return
    try:
        Path(path).unlink(missing_ok=True)
    except OSError as e:
        logger.warning("임시 파일 삭제 실패 (%s): %s", path, e)
