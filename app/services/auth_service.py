import logging
from datetime import timedelta
from typing import List, Optional

from sqlalchemy import or_, select
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.config import settings
from app.core.exceptions import AuthenticationError, ConflictError, InactiveUserError
from app.core.security import (
    REFRESH_TOKEN_TYPE,
    create_access_token,
    create_refresh_token,
    decode_token,
    get_password_hash,
    verify_password,
)
from app.models.base import utcnow
from app.models.user import User, UserSession
from app.schemas.user import LoginRequest, TokenPair, UserCreate

logger = logging.getLogger(__name__)


class AuthService:
    def __init__(self, db: AsyncSession):
        self.db = db

    async def authenticate_user(self, username: str, password: str) -> Optional[User]:
        stmt = select(User).where(User.username == username)
        result = await self.db.execute(stmt)
        user = result.scalar_one_or_none()

        if not user:
            return None
        if not verify_password(password, user.hashed_password):
            return None
        return user

    async def _issue_tokens(self, user: User, user_agent: Optional[str]) -> TokenPair:
        access_token_expires = timedelta(minutes=settings.ACCESS_TOKEN_EXPIRE_MINUTES)
        access_token = create_access_token(
            data={"sub": user.username}, expires_delta=access_token_expires
        )
        refresh_token, jti, expires_at = create_refresh_token(user.username)

        self.db.add(
            UserSession(
                user_id=user.id,
                jti=jti,
                user_agent=(user_agent or "")[:255] or None,
                expires_at=expires_at,
            )
        )
        return TokenPair(
            access_token=access_token,
            refresh_token=refresh_token,
            expires_in=int(access_token_expires.total_seconds()),
        )

    async def login(
        self, login_data: LoginRequest, user_agent: Optional[str] = None
    ) -> TokenPair:
        user = await self.authenticate_user(login_data.username, login_data.password)
        if not user:
            logger.info(f"Failed login for {login_data.username!r}")
            raise AuthenticationError("Incorrect username or password")

        if not user.is_active:
            raise InactiveUserError()

        tokens = await self._issue_tokens(user, user_agent)
        await self.db.commit()
        return tokens

    async def _get_session(self, jti: str) -> Optional[UserSession]:
        result = await self.db.execute(select(UserSession).where(UserSession.jti == jti))
        return result.scalar_one_or_none()

    async def refresh(
        self, refresh_token: str, user_agent: Optional[str] = None
    ) -> TokenPair:
        """Exchange a refresh token for a new pair, revoking the old session."""
        payload = decode_token(refresh_token, REFRESH_TOKEN_TYPE)
        session = await self._get_session(payload.get("jti", ""))
        if session is None or not session.is_active:
            raise AuthenticationError("Session expired or revoked")

        user = await self.db.get(User, session.user_id)
        if user is None or user.username != payload["sub"]:
            raise AuthenticationError()
        if not user.is_active:
            raise InactiveUserError()

        session.revoked_at = utcnow()
        tokens = await self._issue_tokens(user, user_agent or session.user_agent)
        await self.db.commit()
        return tokens

    async def logout(self, refresh_token: str) -> None:
        payload = decode_token(refresh_token, REFRESH_TOKEN_TYPE)
        session = await self._get_session(payload.get("jti", ""))
        if session is not None and session.revoked_at is None:
            session.revoked_at = utcnow()
            await self.db.commit()

    async def list_sessions(self, user: User) -> List[UserSession]:
        result = await self.db.execute(
            select(UserSession)
            .where(
                UserSession.user_id == user.id,
                UserSession.revoked_at.is_(None),
                UserSession.expires_at > utcnow(),
            )
            .order_by(UserSession.created_at.desc())
        )
        return list(result.scalars().all())

    async def create_user(self, user_data: UserCreate) -> User:
        stmt = select(User).where(
            or_(User.username == user_data.username, User.email == user_data.email)
        )
        result = await self.db.execute(stmt)
        existing_user = result.scalar_one_or_none()

        if existing_user:
            raise ConflictError("Username or email already registered", "User")

        db_user = User(
            username=user_data.username,
            email=user_data.email,
            full_name=user_data.full_name,
            hashed_password=get_password_hash(user_data.password),
            role=user_data.role,
            is_active=user_data.is_active,
        )

        self.db.add(db_user)
        await self.db.commit()
        await self.db.refresh(db_user)
        return db_user
