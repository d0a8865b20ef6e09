from typing import List
from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy.ext.asyncio import AsyncSession
from marine_ops.accounts import UserManager
from marine_ops.api.auth.models import (
    UserLogin, UserCreate, UserUpdate, UserResponse, ProfileResponse, Token
)
from marine_ops.api.auth.permissions import permission_map
from marine_ops.api.deps import jwt_handler, get_current_user, require_permission
from marine_ops.db import get_db_session
from marine_ops.models import User

router = APIRouter()


@router.post("/login", response_model=Token)
async def login(user_data: UserLogin, db: AsyncSession = Depends(get_db_session)):
    """Authenticate a user and return a JWT"""
    user = await UserManager(db, jwt_handler).authenticate(user_data.email, user_data.password)
    if user is None:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Invalid email or password",
            headers={"WWW-Authenticate": "Bearer"},
        )
    if not user.is_active:
        raise HTTPException(status_code=status.HTTP_403_FORBIDDEN, detail="Account is disabled")

    access_token = jwt_handler.create_access_token({
        "sub": user.id,
        "email": user.email,
        "role": user.role,
    })
    return {
        "access_token": access_token,
        "token_type": "bearer",
        "expires_in": jwt_handler.access_token_expire_minutes * 60,
        "user": user,
    }


@router.get("/profile", response_model=ProfileResponse)
async def get_profile(user: User = Depends(get_current_user)):
    """Current user with resolved permissions"""
    profile = UserResponse.model_validate(user).model_dump()
    return ProfileResponse(**profile, permissions=permission_map(user.role))


@router.get("/users", response_model=List[UserResponse])
async def list_users(
    _: User = Depends(require_permission("users", "view")),
    db: AsyncSession = Depends(get_db_session)
):
    return await UserManager(db, jwt_handler).list_users()


@router.post("/users", response_model=UserResponse, status_code=status.HTTP_201_CREATED)
async def create_user(
    user_data: UserCreate,
    _: User = Depends(require_permission("users", "create")),
    db: AsyncSession = Depends(get_db_session)
):
    return await UserManager(db, jwt_handler).create_user(
        email=user_data.email,
        password=user_data.password,
        full_name=user_data.full_name,
        role=user_data.role,
        phone=user_data.phone,
    )


@router.put("/users/{user_id}", response_model=UserResponse)
async def update_user(
    user_id: int,
    user_data: UserUpdate,
    _: User = Depends(require_permission("users", "edit")),
    db: AsyncSession = Depends(get_db_session)
):
    changes = user_data.model_dump(exclude_unset=True)
    return await UserManager(db, jwt_handler).update_user(user_id, changes)
