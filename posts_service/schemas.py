"""
Pydantic schemas for request/response validation
"""
import math
from pydantic import BaseModel, ConfigDict, Field, field_serializer, field_validator
from typing import Optional, List
from datetime import datetime

from .domain.models import Role


class PostCreate(BaseModel):
    """Post creation request"""
    title: str = Field(..., min_length=1, max_length=255)
    content: Optional[str] = None
    author_name: str = Field(..., min_length=1, max_length=100)


class PostUpdate(BaseModel):
    """Post update request"""
    title: Optional[str] = Field(None, min_length=1, max_length=255)
    content: Optional[str] = None

    @field_validator("title")
    @classmethod
    def title_not_null(cls, v: Optional[str]) -> str:
        """Title may be omitted but never cleared"""
        if v is None:
            raise ValueError("title cannot be null")
        return v


class UserUpdate(BaseModel):
    """User update request"""
    name: Optional[str] = Field(None, min_length=1, max_length=100)
    email: Optional[str] = Field(None, min_length=3, max_length=255)

    @field_validator("name", "email")
    @classmethod
    def not_null(cls, v: Optional[str]) -> str:
        if v is None:
            raise ValueError("value cannot be null")
        return v


class LikeResponse(BaseModel):
    """Like response"""
    model_config = ConfigDict(from_attributes=True)

    id: int
    user_id: int
    post_id: int
    created_at: Optional[datetime] = None


class PostResponse(BaseModel):
    """Post response"""
    model_config = ConfigDict(from_attributes=True)

    id: int
    title: str
    content: Optional[str] = None
    deleted: bool = False
    author_id: int
    author_name: str
    date: datetime
    like_count: int = 0
    likes: Optional[List[LikeResponse]] = None


class PopularityResponse(BaseModel):
    """Popularity of a post"""
    model_config = ConfigDict(from_attributes=True)

    id: int
    popularity: float

    @field_serializer("popularity", when_used="json")
    def serialize_popularity(self, v: float) -> Optional[float]:
        """Non-finite scores have no JSON number, render them as null"""
        if math.isinf(v) or math.isnan(v):
            return None
        return v


class UserResponse(BaseModel):
    """User response, credentials excluded"""
    model_config = ConfigDict(from_attributes=True)

    id: int
    name: str
    email: str
    role: Role
    banned: bool = False


class TotalResponse(BaseModel):
    """User count response"""
    total: int


class ErrorResponse(BaseModel):
    """Error response"""
    error: str
    detail: Optional[str] = None
    success: bool = False
