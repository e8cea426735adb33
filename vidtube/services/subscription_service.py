import logging
from typing import List, Optional

from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from vidtube.core.config import Settings
from vidtube.models.subscription import Subscription
from vidtube.repositories.query_builder import Pagination
from vidtube.repositories.subscription_repository import SubscriptionRepository
from vidtube.repositories.user_repository import UserRepository
from vidtube.schemas.subscription_schema import (
    SubscribedChannelItem, SubscriberItem, SubscriptionResponse, SubscriptionToggleResponse
)
from vidtube.schemas.user_schema import Identity
from vidtube.utils.exceptions import BadRequestError, NotFoundError
from vidtube.utils.validators import check_id, ensure

logger = logging.getLogger(__name__)


class SubscriptionService:
    """
    구독 서비스
    - 채널 구독 토글, 채널 구독자 목록, 구독 채널 목록
    """

    def __init__(self, db: AsyncSession, settings: Settings):
        self.db = db
        self.settings = settings
        self.subscription_repo = SubscriptionRepository(db)
        self.user_repo = UserRepository(db)

    async def toggle_subscription(self, subscriber: Identity, channel_id: str) -> SubscriptionToggleResponse:
        """
        구독 중이면 해지(subscribed=False), 아니면 구독(subscribed=True)
        - 자기 자신 구독은 BadRequest
        """
        ensure(check_id(channel_id, "channelId"))
        if channel_id == subscriber.id:
            raise BadRequestError("you cannot subscribe to your own channel!")
        if not await self.user_repo.find_by_id(channel_id):
            raise NotFoundError("channel not found!")

        existing = await self.subscription_repo.find_subscription(subscriber.id, channel_id)
        if existing:
            snapshot = SubscriptionResponse.model_validate(existing)
            await self.subscription_repo.remove_subscription(existing)
            logger.info("구독 해지: subscriber_id=%s, channel_id=%s", subscriber.id, channel_id)
            return SubscriptionToggleResponse(subscribed=False, subscription=snapshot)

        try:
            subscription = await self.subscription_repo.create_subscription(
                Subscription(subscriber_id=subscriber.id, channel_id=channel_id)
            )
        except IntegrityError:
            logger.warning("구독 동시 생성 감지: subscriber_id=%s, channel_id=%s", subscriber.id, channel_id)
            subscription = await self.subscription_repo.find_subscription(subscriber.id, channel_id)
            if subscription is None:
                raise
        else:
            logger.info("구독: subscriber_id=%s, channel_id=%s", subscriber.id, channel_id)
        return SubscriptionToggleResponse(
            subscribed=True,
            subscription=SubscriptionResponse.model_validate(subscription),
        )

    async def list_subscribers(
        self,
        channel_id: str,
        page: Optional[str],
        limit: Optional[str],
    ) -> List[SubscriberItem]:
        """채널 구독자 목록 (없으면 빈 목록)"""
        ensure(check_id(channel_id, "channelId"))
        pagination = Pagination.from_params(page, limit, self.settings.MAX_PAGE_LIMIT)
        rows = await self.subscription_repo.list_subscribers(channel_id, pagination)
        return [SubscriberItem.model_validate(row) for row in rows]

    async def list_subscribed_channels(
        self,
        subscriber_id: str,
        page: Optional[str],
        limit: Optional[str],
    ) -> List[SubscribedChannelItem]:
        """사용자가 구독한 채널 목록 (없으면 빈 목록)"""
        ensure(check_id(subscriber_id, "subscriberId"))
        pagination = Pagination.from_params(page, limit, self.settings.MAX_PAGE_LIMIT)
        rows = await self.subscription_repo.list_subscribed_channels(subscriber_id, pagination)
        return [SubscribedChannelItem.model_validate(row) for row in rows]
