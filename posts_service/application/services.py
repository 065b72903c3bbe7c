"""
Application services - Business logic layer
"""
import asyncio
import logging
from typing import Optional, Dict, Any, List

from fastapi import HTTPException, status

from ..domain.models import Post, Like, User, PopularityScore
from ..domain.repositories import IPostRepository, IUserRepository
from .listing import PostOrder, filter_by_search, order_posts
from .popularity import compute_popularity

logger = logging.getLogger(__name__)


class DeleteType:
    """Delete type constants"""
    SOFT = "soft"
    HARD = "hard"


class PostService:
    """Post service - handles post listing, ranking and editing"""

    def __init__(
        self,
        post_repository: IPostRepository,
        user_repository: IUserRepository
    ):
        self.post_repo = post_repository
        self.user_repo = user_repository

    async def create_post(
        self,
        title: str,
        content: Optional[str],
        author_name: str,
        author: User
    ) -> Post:
        """Create a new post written by ``author``"""
        post = await self.post_repo.create(
            title=title,
            content=content,
            author_name=author_name,
            author_id=author.id
        )
        logger.info(f"Post {post.id} created by user {author.id}")
        return post

    async def get_post(self, post_id: int) -> Post:
        """Get post by ID"""
        post = await self.post_repo.read_by_id(post_id)
        if not post:
            raise HTTPException(
                status_code=status.HTTP_404_NOT_FOUND,
                detail="Post not found"
            )
        return post

    async def popularity(self) -> List[PopularityScore]:
        """Popularity of every post, computed from fresh snapshots"""
        posts, users = await asyncio.gather(
            self.post_repo.read_all(),
            self.user_repo.read_all()
        )
        return compute_popularity(posts, users)

    async def list_posts(
        self,
        order: Optional[str] = None,
        search: Optional[str] = None
    ) -> List[Post]:
        """
        List posts filtered by ``search`` and sorted by ``order``

        Popularity is computed over every post and every user, before the
        search filter is applied. Unknown or missing order keys sort by
        date, most recent first.
        """
        posts = await self.post_repo.read_all()
        matching = filter_by_search(posts, search)

        order_key = PostOrder.parse(order)
        popularity = None
        if order_key is not None and order_key.by_popularity:
            users = await self.user_repo.read_all()
            popularity = {score.id: score.popularity for score in compute_popularity(posts, users)}

        return order_posts(matching, order_key, popularity)

    async def update_post(self, post_id: int, updates: Dict[str, Any], user: User) -> Post:
        """Update title/content of a post; only its author may do so"""
        if not updates:
            raise HTTPException(
                status_code=status.HTTP_400_BAD_REQUEST,
                detail="No fields to update"
            )

        post = await self.get_post(post_id)
        if not post.is_author(user.id):
            raise HTTPException(
                status_code=status.HTTP_403_FORBIDDEN,
                detail="Not authorized to update this post"
            )

        return await self.post_repo.update(post_id, updates)

    async def delete_post(self, post_id: int, delete_type: Optional[str], user: User) -> Post:
        """
        Delete a post

        - **soft**: toggles the deleted mark, so a second soft delete
          restores the post. Allowed for the author and for admins.
        - **hard**: removes the post from storage. Admins only.
        """
        post = await self.get_post(post_id)

        if delete_type == DeleteType.HARD:
            if not user.is_admin:
                raise HTTPException(
                    status_code=status.HTTP_403_FORBIDDEN,
                    detail="Forbidden"
                )
            deleted_post = await self.post_repo.delete(post_id)
            logger.info(f"Post {post_id} hard deleted by user {user.id}")
            return deleted_post

        if delete_type == DeleteType.SOFT:
            if not (post.is_author(user.id) or user.is_admin):
                raise HTTPException(
                    status_code=status.HTTP_403_FORBIDDEN,
                    detail="Forbidden"
                )
            updated_post = await self.post_repo.update(post_id, {"deleted": not post.deleted})
            logger.info(f"Post {post_id} soft delete toggled to {updated_post.deleted} by user {user.id}")
            return updated_post

        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="Invalid delete type"
        )

    async def like_post(self, post_id: int, user: User) -> Like:
        """Record a like of a post by ``user``"""
        await self.get_post(post_id)
        return await self.post_repo.add_like(post_id, user.id)


class UserService:
    """User service - handles user administration"""

    def __init__(self, user_repository: IUserRepository):
        self.user_repo = user_repository

    async def list_users(self) -> List[User]:
        """List every user"""
        return await self.user_repo.read_all()

    async def count_users(self) -> int:
        """Count users"""
        return await self.user_repo.count()

    async def toggle_banned(self, user_id: int) -> User:
        """Flip the banned flag of a user"""
        user = await self.user_repo.find_by_id(user_id)
        if not user:
            raise HTTPException(
                status_code=status.HTTP_404_NOT_FOUND,
                detail="User not found"
            )

        updated_user = await self.user_repo.update_banned(user_id, not user.banned)
        logger.info(f"User {user_id} banned set to {updated_user.banned}")
        return updated_user

    async def get_user(self, user_id: int) -> User:
        """Get a user by ID"""
        user = await self.user_repo.find_by_id(user_id)
        if not user:
            raise HTTPException(
                status_code=status.HTTP_404_NOT_FOUND,
                detail="User not found"
            )
        return user

    async def update_user(self, user_id: int, updates: Dict[str, Any], current_user: User) -> User:
        """
        Update a user's profile

        Users may update themselves; admins may update anyone.
        """
        if not updates:
            raise HTTPException(
                status_code=status.HTTP_400_BAD_REQUEST,
                detail="No fields to update"
            )

        await self.get_user(user_id)

        if current_user.id != user_id and not current_user.is_admin:
            raise HTTPException(
                status_code=status.HTTP_403_FORBIDDEN,
                detail="Not authorized to update this user"
            )

        updated_user = await self.user_repo.update(user_id, updates)
        logger.info(f"User {user_id} updated by user {current_user.id}: {sorted(updates)}")
        return updated_user
