"""
FastAPI dependencies
"""
from fastapi import Depends, HTTPException, status
from fastapi.security import HTTPBearer, HTTPAuthorizationCredentials
from typing import Optional

from ..domain.models import User
from ..domain.repositories import IPostRepository, IUserRepository
from ..infrastructure.database.connection import db_connection, DatabaseConnection
from ..infrastructure.database.repositories import PostRepository, UserRepository
from ..application.services import PostService, UserService
from ..infrastructure.auth import decode_token


# Security scheme
security = HTTPBearer(auto_error=False)


async def get_db_connection_dep() -> DatabaseConnection:
    """Get database connection dependency"""
    return db_connection


async def get_post_repository(db: DatabaseConnection = Depends(get_db_connection_dep)) -> IPostRepository:
    """Get post repository dependency"""
    return PostRepository(db)


async def get_user_repository(db: DatabaseConnection = Depends(get_db_connection_dep)) -> IUserRepository:
    """Get user repository dependency"""
    return UserRepository(db)


async def get_post_service(
    post_repo: IPostRepository = Depends(get_post_repository),
    user_repo: IUserRepository = Depends(get_user_repository)
) -> PostService:
    """Get post service dependency"""
    return PostService(post_repo, user_repo)


async def get_user_service(
    user_repo: IUserRepository = Depends(get_user_repository)
) -> UserService:
    """Get user service dependency"""
    return UserService(user_repo)


async def get_current_user(
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(security),
    user_repo: IUserRepository = Depends(get_user_repository)
) -> User:
    """
    Get current authenticated user from JWT token

    Raises:
        HTTPException: 401 if the token is invalid or the user is unknown,
            403 if the user is banned
    """
    if not credentials:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Not authenticated",
            headers={"WWW-Authenticate": "Bearer"},
        )

    # Decode token
    payload = decode_token(credentials.credentials)
    if not payload or payload.get("type") != "access":
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Invalid or expired token",
            headers={"WWW-Authenticate": "Bearer"},
        )

    # Get user ID from token
    user_id = payload.get("sub")
    if not user_id or not str(user_id).isdigit():
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Invalid token payload",
            headers={"WWW-Authenticate": "Bearer"},
        )

    user = await user_repo.find_by_id(int(user_id))
    if not user:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="User not found",
            headers={"WWW-Authenticate": "Bearer"},
        )

    if user.banned:
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail="User is banned"
        )

    return user


async def get_current_admin(current_user: User = Depends(get_current_user)) -> User:
    """Get current user, requiring the admin role"""
    if not current_user.is_admin:
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail="Admin role required"
        )
    return current_user
