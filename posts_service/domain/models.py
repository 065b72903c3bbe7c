"""
Domain models - Core business entities
"""
from dataclasses import dataclass
from datetime import datetime
from enum import Enum
from typing import List, Optional


class Role(str, Enum):
    """User role enumeration"""
    USER = "user"
    ADMIN = "admin"


@dataclass
class Like:
    """Like domain model"""
    id: int
    user_id: int
    post_id: int
    created_at: Optional[datetime] = None


@dataclass
class Post:
    """Post domain model

    ``deleted`` is a soft-delete mark; a deleted post stays in storage.
    ``likes`` is None when the source did not load the post's likes.
    """
    id: int
    title: str
    content: Optional[str]
    author_id: int
    date: datetime
    author_name: str
    deleted: bool = False
    likes: Optional[List[Like]] = None

    @property
    def like_count(self) -> int:
        """Number of likes attached to the post, 0 if none were loaded"""
        return len(self.likes) if self.likes else 0

    def is_author(self, user_id: int) -> bool:
        """Check if the given user_id wrote this post"""
        return self.author_id == user_id


@dataclass
class User:
    """User domain model"""
    id: int
    name: str
    email: str
    role: Role = Role.USER
    banned: bool = False
    password_hash: Optional[str] = None

    @property
    def is_admin(self) -> bool:
        return self.role == Role.ADMIN


@dataclass(frozen=True)
class PopularityScore:
    """Popularity of a single post, derived on every request"""
    id: int
    popularity: float
