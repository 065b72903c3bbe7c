"""
User routes
"""
from fastapi import APIRouter, Depends
from typing import List

from ...schemas import UserResponse, UserUpdate, TotalResponse
from ...domain.models import User
from ...application.services import UserService
from ..dependencies import get_user_service, get_current_user, get_current_admin


router = APIRouter(prefix="/api/v1", tags=["Users"])


@router.get("/total", response_model=TotalResponse)
async def count_users(user_service: UserService = Depends(get_user_service)):
    """
    Total number of users

    Public endpoint.
    """
    return TotalResponse(total=await user_service.count_users())


@router.get("/admins/users", response_model=List[UserResponse])
async def list_users(
    current_admin: User = Depends(get_current_admin),
    user_service: UserService = Depends(get_user_service)
):
    """
    List every user

    Requires the admin role.
    """
    users = await user_service.list_users()
    return [UserResponse.model_validate(user) for user in users]


@router.patch("/admins/banned/{user_id}", response_model=UserResponse)
async def toggle_banned(
    user_id: int,
    current_admin: User = Depends(get_current_admin),
    user_service: UserService = Depends(get_user_service)
):
    """
    Ban or unban a user

    Flips the user's banned flag. Requires the admin role.
    """
    user = await user_service.toggle_banned(user_id)
    return UserResponse.model_validate(user)


@router.get("/users/me", response_model=UserResponse)
async def get_me(current_user: User = Depends(get_current_user)):
    """Get the authenticated user"""
    return UserResponse.model_validate(current_user)


@router.get("/users/{user_id}", response_model=UserResponse)
async def get_user(
    user_id: int,
    current_user: User = Depends(get_current_user),
    user_service: UserService = Depends(get_user_service)
):
    """Get a user by ID"""
    user = await user_service.get_user(user_id)
    return UserResponse.model_validate(user)


@router.put("/users/{user_id}", response_model=UserResponse)
async def update_user(
    user_id: int,
    user_data: UserUpdate,
    current_user: User = Depends(get_current_user),
    user_service: UserService = Depends(get_user_service)
):
    """
    Update a user's name or email

    Users may update their own profile; admins may update any profile.
    """
    updates = user_data.model_dump(exclude_unset=True)
    user = await user_service.update_user(user_id, updates, current_user)
    return UserResponse.model_validate(user)
