"""
Authentication endpoints: register, login and the current user's profile.
"""

from fastapi import APIRouter, Depends, Response, status
from sqlalchemy.ext.asyncio import AsyncSession

from app.api.deps import get_credential_store, get_current_user, get_token_service
from app.core.security import CredentialStore, TokenService
from app.db.session import get_db
from app.schemas.user import UserCreate, UserResponse, UserLogin, UserUpdate, Token
from app.services.auth_service import register_user, authenticate_user
from app.services.authorization import AuthenticatedUser
from app.services.user_service import delete_account, get_user, update_profile

router = APIRouter(prefix="/auth", tags=["Authentication"])


@router.post("/register", response_model=UserResponse, status_code=status.HTTP_201_CREATED)
async def register(
    user_data: UserCreate,
    db: AsyncSession = Depends(get_db),
    credentials: CredentialStore = Depends(get_credential_store),
):
    """Register a new user account."""
    return await register_user(db, credentials, user_data)


@router.post("/login", response_model=Token)
async def login(
    login_data: UserLogin,
    db: AsyncSession = Depends(get_db),
    credentials: CredentialStore = Depends(get_credential_store),
    tokens: TokenService = Depends(get_token_service),
):
    """Authenticate and receive a JWT access token."""
    token = await authenticate_user(db, credentials, tokens, login_data)
    return Token(access_token=token)


@router.get("/me", response_model=UserResponse)
async def read_current_user(
    actor: AuthenticatedUser = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
):
    return await get_user(db, actor.id)


@router.put("/me", response_model=UserResponse)
async def update_current_user(
    changes: UserUpdate,
    actor: AuthenticatedUser = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
    credentials: CredentialStore = Depends(get_credential_store),
):
    """Change name, email, password or profile picture. Omitted fields are kept."""
    return await update_profile(db, credentials, actor, changes)


@router.delete("/me", status_code=status.HTTP_204_NO_CONTENT, response_class=Response)
async def delete_current_user(
    actor: AuthenticatedUser = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
):
    """Delete the account, its events and every attendee row referencing either."""
    await delete_account(db, actor)
    return Response(status_code=status.HTTP_204_NO_CONTENT)
