"""
Repository interfaces - Define contracts for data access
"""
from abc import ABC, abstractmethod
from typing import Optional, List, Dict, Any
from .models import Post, Like, User


class IPostRepository(ABC):
    """Post repository interface"""

    @abstractmethod
    async def create(self, title: str, content: Optional[str], author_name: str, author_id: int) -> Post:
        """Create a new post"""
        pass

    @abstractmethod
    async def read_all(self) -> List[Post]:
        """Read every post, each with its likes attached"""
        pass

    @abstractmethod
    async def read_by_id(self, post_id: int) -> Optional[Post]:
        """Find post by ID"""
        pass

    @abstractmethod
    async def update(self, post_id: int, updates: Dict[str, Any]) -> Post:
        """Update post fields"""
        pass

    @abstractmethod
    async def delete(self, post_id: int) -> Post:
        """Remove a post from storage and return it"""
        pass

    @abstractmethod
    async def add_like(self, post_id: int, user_id: int) -> Like:
        """Record a like of a post by a user"""
        pass


class IUserRepository(ABC):
    """User repository interface"""

    @abstractmethod
    async def read_all(self) -> List[User]:
        """Read every user"""
        pass

    @abstractmethod
    async def find_by_id(self, user_id: int) -> Optional[User]:
        """Find user by ID"""
        pass

    @abstractmethod
    async def count(self) -> int:
        """Count users"""
        pass

    @abstractmethod
    async def update_banned(self, user_id: int, banned: bool) -> User:
        """Set user's banned flag"""
        pass

    @abstractmethod
    async def update(self, user_id: int, updates: Dict[str, Any]) -> Optional[User]:
        """Update profile fields"""
        pass
