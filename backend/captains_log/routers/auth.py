import logging
from datetime import datetime, timedelta, timezone

from fastapi import APIRouter, Depends, HTTPException
from jose import jwt
from passlib.context import CryptContext
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from captains_log.config import settings
from captains_log.database import get_db
from captains_log.models.user import User
from captains_log.schemas.auth import AuthResponse, LoginRequest, RegisterRequest, UserResponse
from captains_log.services.companion_service import companion_service
from captains_log.utils.timezone import get_zone

logger = logging.getLogger(__name__)

router = APIRouter()
pwd_context = CryptContext(schemes=["bcrypt"], deprecated="auto")


def create_access_token(user_id: str) -> str:
    expire = datetime.now(timezone.utc) + timedelta(minutes=settings.access_token_expire_minutes)
    payload = {"sub": user_id, "exp": expire}
    return jwt.encode(payload, settings.secret_key, algorithm=settings.algorithm)


@router.post("/register", status_code=201, response_model=AuthResponse)
async def register(req: RegisterRequest, db: AsyncSession = Depends(get_db)):
    result = await db.execute(select(User).where(User.email == req.email))
    if result.scalar_one_or_none():
        raise HTTPException(status_code=400, detail="Email already registered")

    if get_zone(req.timezone) is None:
        raise HTTPException(status_code=400, detail=f"Unknown timezone: {req.timezone}")

    user = User(
        email=req.email,
        username=req.username,
        password_hash=pwd_context.hash(req.password),
        timezone=req.timezone,
    )
    db.add(user)
    await db.flush()

    # Every account starts with a companion profile representing its owner
    await companion_service.create_myself(db, user)
    await db.commit()
    await db.refresh(user)
    logger.info(f"User registered: {user.id}")

    token = create_access_token(str(user.id))
    return AuthResponse(token=token, user=UserResponse.model_validate(user))


@router.post("/login", response_model=AuthResponse)
async def login(req: LoginRequest, db: AsyncSession = Depends(get_db)):
    result = await db.execute(select(User).where(User.email == req.email))
    user = result.scalar_one_or_none()

    if not user or not pwd_context.verify(req.password, user.password_hash):
        raise HTTPException(status_code=401, detail="Invalid email or password")

    if not user.is_active:
        raise HTTPException(status_code=403, detail="Account is disabled")

    token = create_access_token(str(user.id))
    return AuthResponse(token=token, user=UserResponse.model_validate(user))
