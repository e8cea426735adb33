from typing import Any, Dict, List, Optional

from sqlalchemy import delete

from vidtube.models.like import Like
from vidtube.models.tweet import Tweet
from vidtube.repositories.base_repository import BaseRepository
from vidtube.repositories.query_builder import Pagination, ShapedQuery, SortSpec

TWEET_SORT_COLUMNS = {
    "createdAt": Tweet.created_at,
    "updatedAt": Tweet.updated_at,
}


class TweetRepository(BaseRepository):
    """
    트윗 관련 데이터 액세스 담당 Repository 클래스
    - 트윗 조회, 목록, 삭제
    """

    async def find_by_id(self, tweet_id: str) -> Optional[Tweet]:
        """
        주어진 ID와 일치하는 Tweet 반환
        """
        return await self.get(Tweet, tweet_id)

    async def list_user_tweets(
            self,
            owner_id: str,
            pagination: Pagination,
    ) -> List[Dict[str, Any]]:
        """
        사용자의 트윗 목록 (작성자 요약 + 좋아요 수, 작성 시각 오름차순)
        """
        shaped = (
            ShapedQuery(Tweet, fields=("id", "content", "created_at", "updated_at"))
            .match(Tweet.owner_id == owner_id)
            .join_owner(Tweet.owner_id)
            .count_related("likes_count", Like, Like.tweet_id)
            .sort(SortSpec(field="createdAt"), TWEET_SORT_COLUMNS)
        )
        return await self.run(shaped, pagination)

    def add_tweet(self, tweet: Tweet) -> None:
        self.add(tweet)

    async def delete_tweet(self, tweet: Tweet) -> None:
        """
        트윗과 트윗 좋아요 삭제 (커밋은 호출 측)
        """
        await self.execute(
            delete(Like)
            .where(Like.tweet_id == tweet.id)
            .execution_options(synchronize_session=False),
            "tweet likes cascade",
        )
        await self.delete(tweet)
        await self.session.flush()
