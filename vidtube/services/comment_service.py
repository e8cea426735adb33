import logging
from typing import Optional

from sqlalchemy.ext.asyncio import AsyncSession

from vidtube.core.config import Settings
from vidtube.models.comment import Comment
from vidtube.repositories.comment_repository import CommentRepository
from vidtube.repositories.query_builder import Pagination
from vidtube.repositories.video_repository import VideoRepository
from vidtube.schemas.comment_schema import CommentDetailResponse, CommentPageResponse, CommentResponse
from vidtube.schemas.user_schema import Identity
from vidtube.utils.exceptions import ForbiddenError, NotFoundError
from vidtube.utils.validators import check_id, check_text, clean_text, ensure

logger = logging.getLogger(__name__)


class CommentService:
    """
    댓글 서비스
    - 영상별 댓글 목록, 작성, 수정, 삭제
    """

    def __init__(self, db: AsyncSession, settings: Settings):
        self.db = db
        self.settings = settings
        self.comment_repo = CommentRepository(db)
        self.video_repo = VideoRepository(db)

    async def list_comments(
        self,
        video_id: str,
        page: Optional[str],
        limit: Optional[str],
    ) -> CommentPageResponse:
        """영상 댓글 페이지 (댓글이 없으면 빈 목록)"""
        ensure(check_id(video_id, "videoId"))
        pagination = Pagination.from_params(page, limit, self.settings.MAX_PAGE_LIMIT)

        rows, total = await self.comment_repo.list_video_comments(video_id, pagination)
        return CommentPageResponse(
            comments=[CommentDetailResponse.model_validate(row) for row in rows],
            total_comments=total,
            page=pagination.page,
            limit=pagination.limit,
        )

    async def add_comment(self, owner: Identity, video_id: str, content: Optional[str]) -> CommentResponse:
        ensure(
            check_id(video_id, "videoId"),
            check_text(content, "content"),
        )
        if not await self.video_repo.find_by_id(video_id):
            raise NotFoundError("video not found!")

        comment = Comment(content=clean_text(content), video_id=video_id, owner_id=owner.id)
        self.comment_repo.add_comment(comment)
        await self.comment_repo.commit()

        logger.info("댓글 작성: comment_id=%s, video_id=%s", comment.id, video_id)
        return CommentResponse.model_validate(comment)

    async def update_comment(self, owner: Identity, comment_id: str, content: Optional[str]) -> CommentResponse:
        ensure(
            check_id(comment_id, "commentId"),
            check_text(content, "content"),
        )
        comment = await self._get_owned_comment(comment_id, owner)
        comment.content = clean_text(content)
        await self.comment_repo.commit()

        logger.info("댓글 수정: comment_id=%s", comment.id)
        return CommentResponse.model_validate(comment)

    async def delete_comment(self, owner: Identity, comment_id: str) -> CommentResponse:
        """댓글 삭제 (댓글 좋아요 포함)"""
        ensure(check_id(comment_id, "commentId"))
        comment = await self._get_owned_comment(comment_id, owner)
        snapshot = CommentResponse.model_validate(comment)

        await self.comment_repo.delete_comment(comment)
        await self.comment_repo.commit()

        logger.info("댓글 삭제: comment_id=%s", snapshot.id)
        return snapshot

    async def _get_owned_comment(self, comment_id: str, owner: Identity) -> Comment:
        comment = await self.comment_repo.find_by_id(comment_id)
        if not comment:
            raise NotFoundError("comment not found!")
        if comment.owner_id != owner.id:
            raise ForbiddenError("only the owner can modify this comment!")
        return comment
