import logging
from typing import Any, Dict, List, Optional, Tuple

from sqlalchemy import delete

from vidtube.models.comment import Comment
from vidtube.models.like import Like
from vidtube.repositories.base_repository import BaseRepository
from vidtube.repositories.query_builder import Pagination, ShapedQuery, SortSpec

logger = logging.getLogger(__name__)

COMMENT_SORT_COLUMNS = {
    "createdAt": Comment.created_at,
    "updatedAt": Comment.updated_at,
}

COMMENT_FIELDS = ("id", "content", "video_id", "created_at", "updated_at")


class CommentRepository(BaseRepository):
    """
    댓글 데이터 액세스 객체
    """

    async def find_by_id(self, comment_id: str) -> Optional[Comment]:
        return await self.get(Comment, comment_id)

    async def list_video_comments(
            self,
            video_id: str,
            pagination: Pagination,
    ) -> Tuple[List[Dict[str, Any]], int]:
        """
        영상 댓글 페이지와 전체 댓글 수
        - 작성자 요약은 commented_by, 좋아요 수는 likes_count
        """
        shaped = (
            ShapedQuery(Comment, fields=COMMENT_FIELDS)
            .match(Comment.video_id == video_id)
            .join_owner(Comment.owner_id, label="commented_by")
            .count_related("likes_count", Like, Like.comment_id)
            .sort(SortSpec(field="createdAt"), COMMENT_SORT_COLUMNS)
        )
        rows = await self.run(shaped, pagination)
        total = await self.run_count(shaped)
        return rows, total

    def add_comment(self, comment: Comment) -> None:
        self.add(comment)

    async def delete_comment(self, comment: Comment) -> int:
        """
        댓글과 댓글에 달린 좋아요 삭제 (커밋은 호출 측)
        - 삭제된 좋아요 수 반환
        """
        likes = await self.execute(
            delete(Like)
            .where(Like.comment_id == comment.id)
            .execution_options(synchronize_session=False),
            "comment likes cascade",
        )
        await self.delete(comment)
        await self.session.flush()
        return likes.rowcount or 0
