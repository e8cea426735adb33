import logging
from typing import List, Optional

from fastapi import APIRouter, Depends, Query, status
from sqlalchemy.ext.asyncio import AsyncSession

from vidtube.core.config import Settings, get_settings
from vidtube.core.database import get_db_session
from vidtube.dependencies import get_current_user
from vidtube.schemas.common_schema import ApiResponse
from vidtube.schemas.tweet_schema import TweetContentRequest, TweetDetailResponse, TweetResponse
from vidtube.schemas.user_schema import Identity
from vidtube.services.tweet_service import TweetService

logger = logging.getLogger(__name__)
router = APIRouter(prefix="/tweets", tags=["Tweet"])


@router.post("", response_model=ApiResponse[TweetResponse], status_code=status.HTTP_201_CREATED)
async def create_tweet(
    req: TweetContentRequest,
    current_user: Identity = Depends(get_current_user),
    db: AsyncSession = Depends(get_db_session),
    settings: Settings = Depends(get_settings),
) -> ApiResponse[TweetResponse]:
    tweet = await TweetService(db, settings).create_tweet(current_user, req.content)
    return ApiResponse(status_code=201, data=tweet, message="tweet created successfully.")


@router.get("/{user_id}", response_model=ApiResponse[List[TweetDetailResponse]])
async def list_user_tweets(
    user_id: str,
    page: Optional[str] = Query(None),
    limit: Optional[str] = Query(None),
    db: AsyncSession = Depends(get_db_session),
    settings: Settings = Depends(get_settings),
) -> ApiResponse[List[TweetDetailResponse]]:
    """
    사용자의 트윗 목록 (작성자 요약 + 좋아요 수)
    """
    tweets = await TweetService(db, settings).list_user_tweets(user_id, page, limit)
    return ApiResponse(data=tweets, message="user tweets fetched successfully.")


@router.patch("/{tweet_id}", response_model=ApiResponse[TweetResponse])
async def update_tweet(
    tweet_id: str,
    req: TweetContentRequest,
    current_user: Identity = Depends(get_current_user),
    db: AsyncSession = Depends(get_db_session),
    settings: Settings = Depends(get_settings),
) -> ApiResponse[TweetResponse]:
    tweet = await TweetService(db, settings).update_tweet(current_user, tweet_id, req.content)
    return ApiResponse(data=tweet, message="tweet updated successfully.")


@router.delete("/{tweet_id}", response_model=ApiResponse[TweetResponse])
async def delete_tweet(
    tweet_id: str,
    current_user: Identity = Depends(get_current_user),
    db: AsyncSession = Depends(get_db_session),
    settings: Settings = Depends(get_settings),
) -> ApiResponse[TweetResponse]:
    tweet = await TweetService(db, settings).delete_tweet(current_user, tweet_id)
    return ApiResponse(data=tweet, message="tweet deleted successfully.")
