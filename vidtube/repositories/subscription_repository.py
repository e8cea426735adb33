from typing import Any, Dict, List, Optional

from sqlalchemy import select
from sqlalchemy.orm import aliased

from vidtube.models.subscription import Subscription
from vidtube.repositories.base_repository import BaseRepository
from vidtube.repositories.query_builder import Pagination, ShapedQuery, SortSpec

SUBSCRIPTION_SORT_COLUMNS = {"createdAt": Subscription.created_at}


class SubscriptionRepository(BaseRepository):
    """
    구독 데이터 액세스 객체
    """

    async def find_subscription(self, subscriber_id: str, channel_id: str) -> Optional[Subscription]:
        query = select(Subscription).where(
            Subscription.subscriber_id == subscriber_id,
            Subscription.channel_id == channel_id,
        )
        result = await self.execute(query, "subscription lookup")
        return result.scalars().first()

    async def create_subscription(self, subscription: Subscription) -> Subscription:
        """구독 저장 후 커밋 (유니크 제약 위반은 IntegrityError로 전달)"""
        self.add(subscription)
        await self.commit()
        return subscription

    async def remove_subscription(self, subscription: Subscription) -> None:
        await self.delete(subscription)
        await self.commit()

    async def list_subscribers(self, channel_id: str, pagination: Pagination) -> List[Dict[str, Any]]:
        """채널 구독자 목록 (구독자 요약 + 구독 시각)"""
        shaped = (
            ShapedQuery(Subscription, fields=("id",))
            .match(Subscription.channel_id == channel_id)
            .join_owner(Subscription.subscriber_id, label="subscriber")
            .add_scalar("subscribed_at", Subscription.created_at)
            .sort(SortSpec(field="createdAt"), SUBSCRIPTION_SORT_COLUMNS)
        )
        return await self.run(shaped, pagination)

    async def list_subscribed_channels(self, subscriber_id: str, pagination: Pagination) -> List[Dict[str, Any]]:
        """사용자가 구독한 채널 목록 (채널 요약 + 채널 구독자 수 + 구독 시각)"""
        channel_subscription = aliased(Subscription)
        shaped = (
            ShapedQuery(Subscription, fields=("id",))
            .match(Subscription.subscriber_id == subscriber_id)
            .join_owner(Subscription.channel_id, label="channel")
            .count_related(
                "subscribers_count",
                channel_subscription,
                channel_subscription.channel_id,
                key_column=Subscription.channel_id,
            )
            .add_scalar("subscribed_at", Subscription.created_at)
            .sort(SortSpec(field="createdAt"), SUBSCRIPTION_SORT_COLUMNS)
        )
        return await self.run(shaped, pagination)
