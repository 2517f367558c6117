"""Like and comment endpoints for the Pulse API.

Handlers only translate HTTP to ledger calls; validation, authorization and
atomicity live in :class:`pulse_stage.services.engagement.EngagementLedger`.
"""

from fastapi import APIRouter, status

from pulse_stage.schemas.engagement import (
    CommentAddedResponse,
    CommentCreate,
    CommentRemovedResponse,
    EngagementResponse,
    LikeToggleResponse,
)

from ..dependencies import CurrentUserDep, LedgerDep, OptionalUserDep

router = APIRouter(prefix="/posts", tags=["engagement"])


@router.patch("/{post_id}/like", response_model=LikeToggleResponse)
async def toggle_like(
    post_id: str,
    current_user: CurrentUserDep,
    ledger: LedgerDep,
) -> LikeToggleResponse:
    """Like the post, or remove the caller's like if already present."""
    result = ledger.toggle_like(post_id, current_user.id)
    return LikeToggleResponse.model_validate(result)


@router.post(
    "/{post_id}/comments",
    response_model=CommentAddedResponse,
    status_code=status.HTTP_201_CREATED,
)
async def add_comment(
    post_id: str,
    payload: CommentCreate,
    current_user: CurrentUserDep,
    ledger: LedgerDep,
) -> CommentAddedResponse:
    """Append a comment to the post."""
    result = ledger.add_comment(post_id, current_user.id, payload.content)
    return CommentAddedResponse.model_validate(result)


@router.delete("/{post_id}/comments/{comment_id}", response_model=CommentRemovedResponse)
async def delete_comment(
    post_id: str,
    comment_id: str,
    current_user: CurrentUserDep,
    ledger: LedgerDep,
) -> CommentRemovedResponse:
    """Delete a comment; allowed for the comment's author and the post's author."""
    result = ledger.delete_comment(post_id, comment_id, current_user.id)
    return CommentRemovedResponse.model_validate(result)


@router.get("/{post_id}/engagement", response_model=EngagementResponse)
async def get_engagement(
    post_id: str,
    ledger: LedgerDep,
    current_user: OptionalUserDep,
) -> EngagementResponse:
    """Return like and comment data for a post."""
    state = ledger.get_engagement_state(post_id, current_user.id if current_user else None)
    return EngagementResponse.model_validate(state)
