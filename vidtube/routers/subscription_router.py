from typing import List, Optional

from fastapi import APIRouter, Depends, Query
from sqlalchemy.ext.asyncio import AsyncSession

from vidtube.core.config import Settings, get_settings
from vidtube.core.database import get_db_session
from vidtube.dependencies import get_current_user
from vidtube.schemas.common_schema import ApiResponse
from vidtube.schemas.subscription_schema import (
    SubscribedChannelItem, SubscriberItem, SubscriptionToggleResponse
)
from vidtube.schemas.user_schema import Identity
from vidtube.services.subscription_service import SubscriptionService

router = APIRouter(prefix="/subscriptions", tags=["Subscription"])


@router.get("/c/{channel_id}", response_model=ApiResponse[List[SubscriberItem]])
async def channel_subscribers(
    channel_id: str,
    page: Optional[str] = Query(None),
    limit: Optional[str] = Query(None),
    db: AsyncSession = Depends(get_db_session),
    settings: Settings = Depends(get_settings),
) -> ApiResponse[List[SubscriberItem]]:
    subscribers = await SubscriptionService(db, settings).list_subscribers(channel_id, page, limit)
    return ApiResponse(data=subscribers, message="subscribers fetched successfully.")


@router.post("/c/{channel_id}", response_model=ApiResponse[SubscriptionToggleResponse])
async def toggle_subscription(
    channel_id: str,
    current_user: Identity = Depends(get_current_user),
    db: AsyncSession = Depends(get_db_session),
    settings: Settings = Depends(get_settings),
) -> ApiResponse[SubscriptionToggleResponse]:
    result = await SubscriptionService(db, settings).toggle_subscription(current_user, channel_id)
    message = "channel subscribed successfully." if result.subscribed else "channel unsubscribed successfully."
    return ApiResponse(data=result, message=message)


@router.get("/u/{subscriber_id}", response_model=ApiResponse[List[SubscribedChannelItem]])
async def subscribed_channels(
    subscriber_id: str,
    page: Optional[str] = Query(None),
    limit: Optional[str] = Query(None),
    db: AsyncSession = Depends(get_db_session),
    settings: Settings = Depends(get_settings),
) -> ApiResponse[List[SubscribedChannelItem]]:
    channels = await SubscriptionService(db, settings).list_subscribed_channels(subscriber_id, page, limit)
    return ApiResponse(data=channels, message="subscribed channels fetched successfully.")
