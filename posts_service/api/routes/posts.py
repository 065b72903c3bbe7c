"""
Post routes
"""
from fastapi import APIRouter, Depends, Query, status
from typing import List, Optional

from ...schemas import PostCreate, PostUpdate, PostResponse, LikeResponse, PopularityResponse
from ...domain.models import User
from ...application.services import PostService
from ..dependencies import get_post_service, get_current_user


router = APIRouter(prefix="/api/v1", tags=["Posts"])


@router.post("/posts", response_model=PostResponse, status_code=status.HTTP_201_CREATED)
async def create_post(
    post_data: PostCreate,
    current_user: User = Depends(get_current_user),
    post_service: PostService = Depends(get_post_service)
):
    """
    Create a new post

    - **title**: Post title
    - **content**: Optional post body
    - **author_name**: Display name of the author
    - Requires authentication
    """
    post = await post_service.create_post(
        title=post_data.title,
        content=post_data.content,
        author_name=post_data.author_name,
        author=current_user
    )
    return PostResponse.model_validate(post)


@router.get("/posts", response_model=List[PostResponse])
async def list_posts(
    order: Optional[str] = Query(
        None,
        description="nombre-asc, nombre-desc, popularidad-asc or popularidad-desc; "
                    "anything else sorts by date, most recent first"
    ),
    q: Optional[str] = Query(None, description="Case-insensitive search in title and content"),
    current_user: User = Depends(get_current_user),
    post_service: PostService = Depends(get_post_service)
):
    """
    List posts

    - **order**: Sort key, defaults to most recent first
    - **q**: Optional search string
    - Requires authentication
    """
    posts = await post_service.list_posts(order=order, search=q)
    return [PostResponse.model_validate(post) for post in posts]


@router.get("/posts/{post_id}", response_model=PostResponse)
async def get_post(
    post_id: int,
    current_user: User = Depends(get_current_user),
    post_service: PostService = Depends(get_post_service)
):
    """Get post by ID"""
    post = await post_service.get_post(post_id)
    return PostResponse.model_validate(post)


@router.put("/posts/{post_id}", response_model=PostResponse)
async def update_post(
    post_id: int,
    post_data: PostUpdate,
    current_user: User = Depends(get_current_user),
    post_service: PostService = Depends(get_post_service)
):
    """
    Update a post

    Only the author of the post can update it.
    """
    updates = post_data.model_dump(exclude_unset=True)
    post = await post_service.update_post(post_id, updates, current_user)
    return PostResponse.model_validate(post)


@router.delete("/posts/{post_id}", response_model=PostResponse)
async def delete_post(
    post_id: int,
    delete_type: Optional[str] = Query(None, alias="type", description="soft or hard"),
    current_user: User = Depends(get_current_user),
    post_service: PostService = Depends(get_post_service)
):
    """
    Delete or restore a post

    - **type=soft**: toggles the deleted mark (author or admin)
    - **type=hard**: removes the post permanently (admin only)
    """
    post = await post_service.delete_post(post_id, delete_type, current_user)
    return PostResponse.model_validate(post)


@router.post("/posts/{post_id}/likes", response_model=LikeResponse, status_code=status.HTTP_201_CREATED)
async def like_post(
    post_id: int,
    current_user: User = Depends(get_current_user),
    post_service: PostService = Depends(get_post_service)
):
    """Like a post as the current user"""
    like = await post_service.like_post(post_id, current_user)
    return LikeResponse.model_validate(like)


@router.get("/popularity", response_model=List[PopularityResponse])
async def get_popularity(
    current_user: User = Depends(get_current_user),
    post_service: PostService = Depends(get_post_service)
):
    """
    Popularity of every post

    Likes of the post divided by the number of users minus one.
    """
    scores = await post_service.popularity()
    return [PopularityResponse.model_validate(score) for score in scores]
