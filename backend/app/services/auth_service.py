"""
Authentication service handling user registration and login.
"""

from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.errors import Conflict, Unauthenticated
from app.core.logging import get_logger
from app.core.metrics import record_auth_attempt
from app.core.security import CredentialStore, TokenService
from app.db.session import atomic
from app.models.user import User
from app.repositories.users import UserRepository
from app.schemas.user import UserCreate, UserLogin

logger = get_logger(__name__)

INVALID_CREDENTIALS = "Invalid email or password"


async def register_user(
    db: AsyncSession,
    credentials: CredentialStore,
    user_data: UserCreate,
) -> User:
    """
    Register a new user with hashed password.
    Raises 409 if the email is already registered.
    """
    users = UserRepository(db)
    if await users.get_by_email(user_data.email):
        logger.warning("registration_failed", reason="email_exists")
        raise Conflict("Email already registered")

    password_hash = credentials.hash(user_data.password)

    async with atomic(db):
        try:
            user = await users.create(
                email=user_data.email,
                name=user_data.name,
                password_hash=password_hash,
            )
        except IntegrityError as e:
            # Lost a race with a concurrent registration of the same email
            raise Conflict("Email already registered") from e

    logger.info("user_registered", user_id=user.id)
    return user


async def authenticate_user(
    db: AsyncSession,
    credentials: CredentialStore,
    tokens: TokenService,
    login_data: UserLogin,
) -> str:
    """
    Authenticate user and return JWT access token.
    Unknown email and wrong password fail with the same 401.
    """
    user = await UserRepository(db).get_by_email(login_data.email)

    if not user or not credentials.verify(login_data.password, user.password):
        record_auth_attempt("login_failed")
        logger.warning("login_failed")
        raise Unauthenticated(INVALID_CREDENTIALS)

    token = tokens.issue(user.id)
    record_auth_attempt("login_success")
    logger.info("user_logged_in", user_id=user.id)
    return token
