import io
import os
import tempfile
import uuid
from pathlib import Path
from types import SimpleNamespace

# 앱 import 전에 테스트 환경 변수 설정
os.environ.setdefault("ACCESS_TOKEN_SECRET", "test-access-secret")
os.environ.setdefault("REFRESH_TOKEN_SECRET", "test-refresh-secret")
os.environ["DATABASE_URL"] = "sqlite+aiosqlite://"
os.environ["DB_AUTO_CREATE"] = "false"
os.environ["BCRYPT_ROUNDS"] = "4"
os.environ["UPLOAD_TEMP_DIR"] = tempfile.mkdtemp(prefix="vidtube-uploads-")

import pytest  # noqa: E402
from httpx import ASGITransport, AsyncClient  # noqa: E402
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine  # noqa: E402
from sqlalchemy.pool import StaticPool  # noqa: E402

from vidtube.core.database import Base, get_db_session, import_models  # noqa: E402
from vidtube.main import app  # noqa: E402
from vidtube.services.media_service import (  # noqa: E402
    MediaAsset, MediaService, MediaStorageError, get_media_service
)

API = "/api/v1"


class FakeMediaService(MediaService):
    """
    메모리 기반 미디어 저장소
    - 업로드 파일명과 삭제된 public id를 기록
    """

    def __init__(self):
        self.uploaded = []
        self.deleted = []
        self.fail_deletes = False

    async def upload(self, local_path, content_type=None) -> MediaAsset:
        path = Path(local_path)
        assert path.exists(), "업로드 시점에 임시 파일이 존재해야 함"
        public_id = uuid.uuid4().hex
        self.uploaded.append(public_id)
        return MediaAsset(
            url=f"https://media.test/vidtube/{public_id}{path.suffix}",
            public_id=public_id,
            duration=12.5,
        )

    async def delete(self, public_id: str) -> None:
        if self.fail_deletes:
            raise MediaStorageError("media store unavailable")
        self.deleted.append(public_id)


def upload_file(name: str = "avatar.png", content: bytes = b"\x89PNG fake image", content_type: str = "image/png"):
    return name, io.BytesIO(content), content_type


@pytest.fixture
async def engine():
    engine = create_async_engine(
        "sqlite+aiosqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    import_models()
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    yield engine
    await engine.dispose()


@pytest.fixture
def session_factory(engine):
    return async_sessionmaker(bind=engine, class_=AsyncSession, expire_on_commit=False)


@pytest.fixture
def media():
    return FakeMediaService()


@pytest.fixture
async def client(session_factory, media):
    async def override_db_session():
        async with session_factory() as session:
            yield session

    app.dependency_overrides[get_db_session] = override_db_session
    app.dependency_overrides[get_media_service] = lambda: media
    async with AsyncClient(transport=ASGITransport(app=app), base_url="http://test") as ac:
        yield ac
    app.dependency_overrides.clear()


@pytest.fixture
def create_user(client):
    """회원가입 + 로그인 후 토큰/헤더를 묶어 반환"""
    async def _create(username: str = "alice", password: str = "secret123", email: str = None):
        email = email or f"{username}@example.com"
        response = await client.post(
            f"{API}/users/register",
            data={"fullname": username.title(), "email": email, "username": username, "password": password},
            files={"avatar": upload_file()},
        )
        assert response.status_code == 201, response.text

        login = await client.post(f"{API}/users/login", json={"username": username, "password": password})
        assert login.status_code == 200, login.text
        data = login.json()["data"]
        return SimpleNamespace(
            id=data["user"]["id"],
            username=username,
            email=email,
            password=password,
            access_token=data["accessToken"],
            refresh_token=data["refreshToken"],
            headers={"Authorization": f"Bearer {data['accessToken']}"},
        )
    return _create


@pytest.fixture
def create_video(client):
    """multipart 영상 게시 후 응답 data 반환"""
    async def _create(user, title: str = "My first video", description: str = "hello world", **form):
        response = await client.post(
            f"{API}/videos",
            data={"title": title, "description": description, **form},
            files={
                "videoFile": upload_file("clip.mp4", b"fake video bytes", "video/mp4"),
                "thumbnail": upload_file("thumb.jpg", b"fake jpeg", "image/jpeg"),
            },
            headers=user.headers,
        )
        assert response.status_code == 201, response.text
        return response.json()["data"]
    return _create
