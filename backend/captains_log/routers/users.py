from fastapi import APIRouter, Depends, HTTPException
from sqlalchemy.ext.asyncio import AsyncSession

from captains_log.database import get_db
from captains_log.dependencies import get_current_user
from captains_log.models.user import User
from captains_log.schemas.auth import UpdateUserRequest, UserResponse
from captains_log.utils.timezone import get_zone

router = APIRouter()


@router.get("/me", response_model=UserResponse)
async def get_current_user_profile(user: User = Depends(get_current_user)):
    return UserResponse.model_validate(user)


@router.patch("/me", response_model=UserResponse)
async def update_current_user_profile(
    req: UpdateUserRequest,
    db: AsyncSession = Depends(get_db),
    user: User = Depends(get_current_user),
):
    """Update username and/or default timezone."""
    if req.timezone is not None and get_zone(req.timezone) is None:
        raise HTTPException(status_code=400, detail=f"Unknown timezone: {req.timezone}")

    if req.username is not None:
        user.username = req.username
    if req.timezone is not None:
        user.timezone = req.timezone
    await db.commit()
    await db.refresh(user)
    return UserResponse.model_validate(user)
