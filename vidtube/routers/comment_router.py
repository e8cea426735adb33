from typing import Optional

from fastapi import APIRouter, Depends, Query, status
from sqlalchemy.ext.asyncio import AsyncSession

from vidtube.core.config import Settings, get_settings
from vidtube.core.database import get_db_session
from vidtube.dependencies import get_current_user
from vidtube.schemas.comment_schema import CommentContentRequest, CommentPageResponse, CommentResponse
from vidtube.schemas.common_schema import ApiResponse
from vidtube.schemas.user_schema import Identity
from vidtube.services.comment_service import CommentService

router = APIRouter(prefix="/comments", tags=["Comment"])


@router.get("/{video_id}", response_model=ApiResponse[CommentPageResponse])
async def list_comments(
    video_id: str,
    page: Optional[str] = Query(None),
    limit: Optional[str] = Query(None),
    db: AsyncSession = Depends(get_db_session),
    settings: Settings = Depends(get_settings),
) -> ApiResponse[CommentPageResponse]:
    comments = await CommentService(db, settings).list_comments(video_id, page, limit)
    return ApiResponse(data=comments, message="comments fetched successfully.")


@router.post("/{video_id}", response_model=ApiResponse[CommentResponse], status_code=status.HTTP_201_CREATED)
async def add_comment(
    video_id: str,
    req: CommentContentRequest,
    current_user: Identity = Depends(get_current_user),
    db: AsyncSession = Depends(get_db_session),
    settings: Settings = Depends(get_settings),
) -> ApiResponse[CommentResponse]:
    comment = await CommentService(db, settings).add_comment(current_user, video_id, req.content)
    return ApiResponse(status_code=201, data=comment, message="comment added successfully.")


@router.patch("/{comment_id}", response_model=ApiResponse[CommentResponse])
async def update_comment(
    comment_id: str,
    req: CommentContentRequest,
    current_user: Identity = Depends(get_current_user),
    db: AsyncSession = Depends(get_db_session),
    settings: Settings = Depends(get_settings),
) -> ApiResponse[CommentResponse]:
    comment = await CommentService(db, settings).update_comment(current_user, comment_id, req.content)
    return ApiResponse(data=comment, message="comment updated successfully.")


@router.delete("/{comment_id}", response_model=ApiResponse[CommentResponse])
async def delete_comment(
    comment_id: str,
    current_user: Identity = Depends(get_current_user),
    db: AsyncSession = Depends(get_db_session),
    settings: Settings = Depends(get_settings),
) -> ApiResponse[CommentResponse]:
    comment = await CommentService(db, settings).delete_comment(current_user, comment_id)
    return ApiResponse(data=comment, message="comment deleted successfully.")
