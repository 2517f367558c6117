"""Post-related endpoints for the Pulse API."""

from typing import Annotated

from fastapi import APIRouter, File, Form, Query, UploadFile, status

from pulse_stage.core.errors import InvalidInputError, PulseError
from pulse_stage.core.settings import settings
from pulse_stage.models import Post
from pulse_stage.schemas.engagement import EngagementResponse
from pulse_stage.schemas.post import PaginationInfo, PostListResponse, PostResponse
from pulse_stage.services import post_service
from pulse_stage.services.engagement import EngagementState
from pulse_stage.services.storage import ObjectStorage

from ..dependencies import (
    CurrentUserDep,
    LedgerDep,
    OptionalUserDep,
    SessionDep,
    StorageDep,
)


router = APIRouter(prefix="/posts", tags=["posts"])


def to_post_response(post: Post, state: EngagementState | None = None) -> PostResponse:
    """Merge a post row with its engagement projection."""
    return PostResponse(
        id=post.id,
        author_id=post.author_id,
        author_email=post.author.email if post.author is not None else None,
        content=post.content,
        image_urls=post.image_urls,
        created_at=post.created_at,
        updated_at=post.updated_at,
        engagement=(
            EngagementResponse.model_validate(state) if state else EngagementResponse()
        ),
    )


@router.get("/", response_model=PostListResponse)
async def list_posts(
    db: SessionDep,
    ledger: LedgerDep,
    current_user: OptionalUserDep,
    page: int = Query(1, description="1-based page number"),
    limit: int = Query(
        settings.posts_page_size_default,
        description="Maximum number of posts to return",
    ),
) -> PostListResponse:
    """List visible posts newest first, each with its engagement projection."""
    result = post_service.list_posts(db, page=page, limit=limit)
    states = ledger.get_engagement_states(
        [post.id for post in result.posts],
        current_user.id if current_user else None,
    )
    return PostListResponse(
        posts=[to_post_response(post, states.get(post.id)) for post in result.posts],
        pagination=PaginationInfo(
            current_page=page,
            limit=limit,
            total=result.total,
            total_pages=result.pages,
        ),
    )


@router.get("/{post_id}", response_model=PostResponse)
async def get_post(
    post_id: str,
    db: SessionDep,
    ledger: LedgerDep,
    current_user: OptionalUserDep,
) -> PostResponse:
    """Get a specific post by ID."""
    post = post_service.get_post(db, post_id)
    state = ledger.get_engagement_state(post.id, current_user.id if current_user else None)
    return to_post_response(post, state)


def _accepted_uploads(images: list[UploadFile] | None) -> list[UploadFile]:
    uploads = [image for image in images or [] if image.filename]
    if len(uploads) > settings.post_images_max:
        raise InvalidInputError(f"A post can have at most {settings.post_images_max} images")
    return uploads


async def _upload_images(storage: ObjectStorage, uploads: list[UploadFile], urls: list[str]) -> None:
    """Upload each file, appending its URL to ``urls`` as soon as it is stored."""
    for image in uploads:
        data = await image.read()
        urls.append(
            storage.upload(
                data,
                image.filename or "upload",
                image.content_type or "application/octet-stream",
            )
        )


@router.post("/", response_model=PostResponse, status_code=status.HTTP_201_CREATED)
async def create_post(
    content: Annotated[str, Form()],
    current_user: CurrentUserDep,
    db: SessionDep,
    storage: StorageDep,
    images: Annotated[list[UploadFile] | None, File()] = None,
) -> PostResponse:
    """Create a post, uploading any attached images to object storage first.

    Uploaded objects are removed again if the post cannot be stored.
    """
    uploads = _accepted_uploads(images)
    post_service.normalize_post_content(content)

    image_urls: list[str] = []
    try:
        await _upload_images(storage, uploads, image_urls)
        post = post_service.create_post(db, current_user.id, content, image_urls)
    except PulseError:
        for url in image_urls:
            storage.delete(url)
        raise

    return to_post_response(post)


@router.put("/{post_id}", response_model=PostResponse)
async def update_post(
    post_id: str,
    content: Annotated[str, Form()],
    current_user: CurrentUserDep,
    db: SessionDep,
    storage: StorageDep,
    ledger: LedgerDep,
    images: Annotated[list[UploadFile] | None, File()] = None,
) -> PostResponse:
    """Edit a post owned by the caller.

    Attached images replace the current ones; the replaced objects are
    deleted from storage once the edit is saved. Without images the post
    keeps what it has.
    """
    uploads = _accepted_uploads(images)
    post_service.normalize_post_content(content)
    editable = post_service.get_editable_post(db, post_id, current_user.id)
    previous_urls = list(editable.image_urls)

    if not uploads:
        post = post_service.update_post(db, post_id, current_user.id, content)
    else:
        image_urls: list[str] = []
        try:
            await _upload_images(storage, uploads, image_urls)
            post = post_service.update_post(db, post_id, current_user.id, content, image_urls)
        except PulseError:
            for url in image_urls:
                storage.delete(url)
            raise
        for url in previous_urls:
            storage.delete(url)

    state = ledger.get_engagement_state(post.id, current_user.id)
    return to_post_response(post, state)


@router.delete("/{post_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_post(
    post_id: str,
    current_user: CurrentUserDep,
    db: SessionDep,
) -> None:
    """Soft-delete a post owned by the caller."""
    post_service.delete_post(db, post_id, current_user.id)
