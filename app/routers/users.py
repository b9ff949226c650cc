"""
Users Router

Listener registration.
"""

from typing import Annotated, List

from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.database import get_db
from app.schemas.users import UserCreate, UserResponse
from app.services.users import create_user, recent_users

router = APIRouter(prefix="/api/users", tags=["users"])


@router.post("", response_model=UserResponse)
async def register_user(
    data: UserCreate,
    db: Annotated[AsyncSession, Depends(get_db)],
) -> UserResponse:
    """Register a user. Returns 400 on missing fields or duplicate email."""
    user = await create_user(db, data.name, data.email)
    return UserResponse.model_validate(user)


@router.get("", response_model=List[UserResponse])
async def list_users(db: Annotated[AsyncSession, Depends(get_db)]) -> List[UserResponse]:
    """Most recent users, newest first."""
    users = await recent_users(db)
    return [UserResponse.model_validate(u) for u in users]
