import logging
from typing import List, Optional

from sqlalchemy.ext.asyncio import AsyncSession

from vidtube.core.config import Settings
from vidtube.models.tweet import Tweet
from vidtube.repositories.query_builder import Pagination
from vidtube.repositories.tweet_repository import TweetRepository
from vidtube.repositories.user_repository import UserRepository
from vidtube.schemas.tweet_schema import TweetDetailResponse, TweetResponse
from vidtube.schemas.user_schema import Identity
from vidtube.utils.exceptions import ForbiddenError, NotFoundError
from vidtube.utils.validators import check_id, check_text, clean_text, ensure

logger = logging.getLogger(__name__)


class TweetService:
    """
    트윗 서비스
    """

    def __init__(self, db: AsyncSession, settings: Settings):
        self.db = db
        self.settings = settings
        self.tweet_repo = TweetRepository(db)
        self.user_repo = UserRepository(db)

    async def create_tweet(self, owner: Identity, content: Optional[str]) -> TweetResponse:
        ensure(check_text(content, "content"))

        tweet = Tweet(content=clean_text(content), owner_id=owner.id)
        self.tweet_repo.add_tweet(tweet)
        await self.tweet_repo.commit()

        logger.info("트윗 작성: tweet_id=%s", tweet.id)
        return TweetResponse.model_validate(tweet)

    async def list_user_tweets(
        self,
        user_id: str,
        page: Optional[str],
        limit: Optional[str],
    ) -> List[TweetDetailResponse]:
        ensure(check_id(user_id, "userId"))
        if not await self.user_repo.find_by_id(user_id):
            raise NotFoundError("user not found!")

        pagination = Pagination.from_params(page, limit, self.settings.MAX_PAGE_LIMIT)
        rows = await self.tweet_repo.list_user_tweets(user_id, pagination)
        return [TweetDetailResponse.model_validate(row) for row in rows]

    async def update_tweet(self, owner: Identity, tweet_id: str, content: Optional[str]) -> TweetResponse:
        ensure(
            check_id(tweet_id, "tweetId"),
            check_text(content, "content"),
        )
        tweet = await self._get_owned_tweet(tweet_id, owner)
        tweet.content = clean_text(content)
        await self.tweet_repo.commit()

        logger.info("트윗 수정: tweet_id=%s", tweet.id)
        return TweetResponse.model_validate(tweet)

    async def delete_tweet(self, owner: Identity, tweet_id: str) -> TweetResponse:
        ensure(check_id(tweet_id, "tweetId"))
        tweet = await self._get_owned_tweet(tweet_id, owner)
        snapshot = TweetResponse.model_validate(tweet)

        await self.tweet_repo.delete_tweet(tweet)
        await self.tweet_repo.commit()

        logger.info("트윗 삭제: tweet_id=%s", snapshot.id)
        return snapshot

    async def _get_owned_tweet(self, tweet_id: str, owner: Identity) -> Tweet:
        tweet = await self.tweet_repo.find_by_id(tweet_id)
        if not tweet:
            raise NotFoundError("tweet not found!")
        if tweet.owner_id != owner.id:
            raise ForbiddenError("only the owner can modify this tweet!")
        return tweet
