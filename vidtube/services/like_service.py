"""
좋아요 토글 서비스

토글 대상은 영상/댓글/트윗 세 가지로 닫혀 있다. 각 대상은 자신의 모델과
Like 테이블의 대상 컬럼을 명시적으로 제공하고, 토글 로직은 하나만 둔다.
"""
import logging
from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import Any, List, Optional

from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from vidtube.core.config import Settings
from vidtube.models.comment import Comment
from vidtube.models.like import Like
from vidtube.models.tweet import Tweet
from vidtube.models.video import Video
from vidtube.repositories.like_repository import LikeRepository
from vidtube.repositories.query_builder import Pagination
from vidtube.schemas.like_schema import LikeResponse, LikeToggleResponse
from vidtube.schemas.user_schema import Identity
from vidtube.schemas.video_schema import LikedVideoResponse
from vidtube.utils.exceptions import NotFoundError
from vidtube.utils.validators import check_id, ensure

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class LikeTarget(ABC):
    """좋아요 대상 종류"""
    name: str
    model: Any

    @property
    def id_field(self) -> str:
        return f"{self.name}Id"

    @abstractmethod
    def like_column(self):
        """Like 테이블의 대상 컬럼"""

    @abstractmethod
    def new_like(self, target_id: str, user_id: str) -> Like:
        ...


class VideoLikeTarget(LikeTarget):
    def like_column(self):
        return Like.video_id

    def new_like(self, target_id: str, user_id: str) -> Like:
        return Like(video_id=target_id, liked_by_id=user_id)


class CommentLikeTarget(LikeTarget):
    def like_column(self):
        return Like.comment_id

    def new_like(self, target_id: str, user_id: str) -> Like:
        return Like(comment_id=target_id, liked_by_id=user_id)


class TweetLikeTarget(LikeTarget):
    def like_column(self):
        return Like.tweet_id

    def new_like(self, target_id: str, user_id: str) -> Like:
        return Like(tweet_id=target_id, liked_by_id=user_id)


VIDEO_TARGET = VideoLikeTarget(name="video", model=Video)
COMMENT_TARGET = CommentLikeTarget(name="comment", model=Comment)
TWEET_TARGET = TweetLikeTarget(name="tweet", model=Tweet)


class LikeService:
    """
    좋아요 서비스
    - 대상별 토글, 좋아요한 영상 목록
    """

    def __init__(self, db: AsyncSession, settings: Settings):
        self.db = db
        self.settings = settings
        self.like_repo = LikeRepository(db)

    async def toggle(self, target: LikeTarget, target_id: str, user: Identity) -> LikeToggleResponse:
        """
        있으면 삭제(liked=False), 없으면 생성(liked=True)
        - 동시 생성으로 유니크 제약에 걸리면 이미 존재하는 좋아요를 반환(liked=True)
        """
        ensure(check_id(target_id, target.id_field))
        if not await self.like_repo.get(target.model, target_id):
            raise NotFoundError(f"{target.name} not found!")

        column = target.like_column()
        existing = await self.like_repo.find_like(column, target_id, user.id)
        if existing:
            snapshot = LikeResponse.model_validate(existing)
            await self.like_repo.remove_like(existing)
            logger.info("좋아요 취소: %s=%s, user_id=%s", target.name, target_id, user.id)
            return LikeToggleResponse(liked=False, like=snapshot)

        try:
            like = await self.like_repo.create_like(target.new_like(target_id, user.id))
        except IntegrityError:
            logger.warning("좋아요 동시 생성 감지: %s=%s, user_id=%s", target.name, target_id, user.id)
            like = await self.like_repo.find_like(column, target_id, user.id)
            if like is None:
                raise
        else:
            logger.info("좋아요: %s=%s, user_id=%s", target.name, target_id, user.id)
        return LikeToggleResponse(liked=True, like=LikeResponse.model_validate(like))

    async def toggle_video_like(self, video_id: str, user: Identity) -> LikeToggleResponse:
        return await self.toggle(VIDEO_TARGET, video_id, user)

    async def toggle_comment_like(self, comment_id: str, user: Identity) -> LikeToggleResponse:
        return await self.toggle(COMMENT_TARGET, comment_id, user)

    async def toggle_tweet_like(self, tweet_id: str, user: Identity) -> LikeToggleResponse:
        return await self.toggle(TWEET_TARGET, tweet_id, user)

    async def list_liked_videos(
        self,
        user: Identity,
        page: Optional[str],
        limit: Optional[str],
    ) -> List[LikedVideoResponse]:
        pagination = Pagination.from_params(page, limit, self.settings.MAX_PAGE_LIMIT)
        rows = await self.like_repo.list_liked_videos(user.id, pagination)
        return [LikedVideoResponse.model_validate(row) for row in rows]
