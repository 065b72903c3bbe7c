"""
Pytest configuration and shared fixtures.

Repositories are replaced by in-memory implementations of the domain
interfaces, so no database is needed.
"""
import dataclasses
from datetime import datetime, timedelta, timezone
from typing import Any, Dict, List, Optional

import pytest
import pytest_asyncio
from httpx import ASGITransport, AsyncClient

from posts_service.api.dependencies import get_post_repository, get_user_repository
from posts_service.domain.models import Like, Post, Role, User
from posts_service.domain.repositories import IPostRepository, IUserRepository
from posts_service.infrastructure.auth import create_access_token
from posts_service.main import app

BASE_DATE = datetime(2024, 5, 1, 12, 0, tzinfo=timezone.utc)


class InMemoryPostRepository(IPostRepository):
    """Post repository backed by a dict"""

    def __init__(self, posts: Optional[List[Post]] = None):
        self.posts: Dict[int, Post] = {post.id: post for post in posts or []}
        self.read_all_calls = 0

    async def create(self, title: str, content: Optional[str], author_name: str, author_id: int) -> Post:
        post = Post(
            id=max(self.posts, default=0) + 1,
            title=title,
            content=content,
            author_id=author_id,
            author_name=author_name,
            date=datetime.now(timezone.utc),
            likes=[],
        )
        self.posts[post.id] = post
        return post

    async def read_all(self) -> List[Post]:
        self.read_all_calls += 1
        return list(self.posts.values())

    async def read_by_id(self, post_id: int) -> Optional[Post]:
        return self.posts.get(post_id)

    async def update(self, post_id: int, updates: Dict[str, Any]) -> Post:
        self.posts[post_id] = dataclasses.replace(self.posts[post_id], **updates)
        return self.posts[post_id]

    async def delete(self, post_id: int) -> Post:
        return self.posts.pop(post_id)

    async def add_like(self, post_id: int, user_id: int) -> Like:
        post = self.posts[post_id]
        likes = list(post.likes or [])
        like = Like(
            id=sum(p.like_count for p in self.posts.values()) + 1,
            user_id=user_id,
            post_id=post_id,
            created_at=datetime.now(timezone.utc),
        )
        likes.append(like)
        self.posts[post_id] = dataclasses.replace(post, likes=likes)
        return like


class InMemoryUserRepository(IUserRepository):
    """User repository backed by a dict"""

    def __init__(self, users: Optional[List[User]] = None):
        self.users: Dict[int, User] = {user.id: user for user in users or []}
        self.read_all_calls = 0

    async def read_all(self) -> List[User]:
        self.read_all_calls += 1
        return list(self.users.values())

    async def find_by_id(self, user_id: int) -> Optional[User]:
        return self.users.get(user_id)

    async def count(self) -> int:
        return len(self.users)

    async def update_banned(self, user_id: int, banned: bool) -> User:
        self.users[user_id] = dataclasses.replace(self.users[user_id], banned=banned)
        return self.users[user_id]

    async def update(self, user_id: int, updates: Dict[str, Any]) -> Optional[User]:
        if user_id not in self.users:
            return None
        self.users[user_id] = dataclasses.replace(self.users[user_id], **updates)
        return self.users[user_id]


def make_likes(post_id: int, count: int) -> List[Like]:
    """Build ``count`` likes of a post, one per user starting at user 1"""
    return [
        Like(id=post_id * 100 + n, user_id=n + 1, post_id=post_id, created_at=BASE_DATE)
        for n in range(count)
    ]


def make_post(
    post_id: int,
    title: str = "",
    content: Optional[str] = "",
    likes: Optional[int] = None,
    days_ago: int = 0,
    author_id: int = 2,
) -> Post:
    """Build a post; ``likes=None`` leaves the likes unloaded"""
    return Post(
        id=post_id,
        title=title or f"Post {post_id}",
        content=content,
        author_id=author_id,
        author_name=f"Author {author_id}",
        date=BASE_DATE - timedelta(days=days_ago),
        likes=make_likes(post_id, likes) if likes is not None else None,
    )


def make_users(count: int) -> List[User]:
    """Build ``count`` regular users with ids 1..count"""
    return [
        User(id=n, name=f"User {n}", email=f"user{n}@example.com")
        for n in range(1, count + 1)
    ]


def auth_headers(user: User) -> Dict[str, str]:
    token = create_access_token(data={"sub": str(user.id)})
    return {"Authorization": f"Bearer {token}"}


@pytest.fixture
def admin() -> User:
    return User(id=1, name="Admin", email="admin@example.com", role=Role.ADMIN)


@pytest.fixture
def alice() -> User:
    return User(id=2, name="Alice", email="alice@example.com")


@pytest.fixture
def bob() -> User:
    return User(id=3, name="Bob", email="bob@example.com")


@pytest.fixture
def carol() -> User:
    """A banned user"""
    return User(id=4, name="Carol", email="carol@example.com", banned=True)


@pytest.fixture
def user_repo(admin, alice, bob, carol) -> InMemoryUserRepository:
    return InMemoryUserRepository([admin, alice, bob, carol])


@pytest.fixture
def post_repo() -> InMemoryPostRepository:
    return InMemoryPostRepository([
        make_post(1, title="Zebra crossing", content="Stripes everywhere", likes=3, days_ago=2, author_id=2),
        make_post(2, title="apple pie", content=None, likes=1, days_ago=0, author_id=3),
        make_post(3, title="Mango season", content="Sweet FOOD", likes=0, days_ago=5, author_id=2),
    ])


@pytest_asyncio.fixture
async def client(post_repo, user_repo):
    """HTTP client for the app with in-memory repositories"""
    app.dependency_overrides[get_post_repository] = lambda: post_repo
    app.dependency_overrides[get_user_repository] = lambda: user_repo
    async with AsyncClient(transport=ASGITransport(app=app), base_url="http://test") as ac:
        yield ac
    app.dependency_overrides.clear()
