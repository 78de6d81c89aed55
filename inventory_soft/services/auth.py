"""
Authentication Service

Sign-up, sign-in and sign-out for store owners. Session presence gates
access to every record operation.

- Passwords hashed with bcrypt (cost factor from settings)
- Session tokens are 32 random bytes, hex encoded; only their SHA-256 is
  stored
- Sessions expire after an absolute TTL and are revoked on sign-out
"""

import asyncio
import hashlib
import secrets
from dataclasses import dataclass
from datetime import datetime, timedelta
from typing import Optional

import bcrypt
import structlog
from sqlalchemy import select
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from inventory_soft.config import get_settings
from inventory_soft.config.settings import SecuritySettings
from inventory_soft.database.models import Account, AuthSessionRecord, ProfileRecord, utcnow
from inventory_soft.domain.models import Profile
from inventory_soft.errors import AuthenticationError, InventoryValidationError, RecordStoreError
from inventory_soft.store.record_store import profile_from_row

logger = structlog.get_logger(__name__)


@dataclass(frozen=True)
class AuthSession:
    """An issued session. ``token`` is the plaintext handed to the client."""
    token: str
    owner_id: str
    expires_at: datetime


def hash_password(password: str, rounds: int) -> str:
    salt = bcrypt.gensalt(rounds=rounds)
    return bcrypt.hashpw(password.encode("utf-8"), salt).decode("utf-8")


def verify_password(password: str, password_hash: str) -> bool:
    """Timing-safe bcrypt check; malformed hashes never verify"""
    try:
        return bcrypt.checkpw(password.encode("utf-8"), password_hash.encode("utf-8"))
    except ValueError:
        return False


def generate_token() -> str:
    return secrets.token_hex(32)


def hash_token(token: str) -> str:
    return hashlib.sha256(token.encode("utf-8")).hexdigest()


def normalize_email(email: str) -> str:
    return email.strip().lower()


class AuthService:
    """
    Account and session management.

    Example:
        auth = AuthService(get_session_factory())
        await auth.sign_up("ana@shop.test", "secret1", "Ana")
        session = await auth.sign_in("ana@shop.test", "secret1")
        owner_id = await auth.resolve(session.token)
    """

    def __init__(
        self,
        session_factory: async_sessionmaker[AsyncSession],
        security: Optional[SecuritySettings] = None,
    ):
        self._session_factory = session_factory
        self._security = security or get_settings().security

    async def sign_up(self, email: str, password: str, name: str) -> Profile:
        """
        Create an account and its profile.

        Raises:
            InventoryValidationError: Malformed email, short password or empty name
            AuthenticationError: An account with that email already exists
        """
        email = normalize_email(email)
        name = name.strip()
        if "@" not in email or email.startswith("@") or email.endswith("@"):
            raise InventoryValidationError("A valid email address is required")
        if len(password) < self._security.min_password_length:
            raise InventoryValidationError(
                f"Password must be at least {self._security.min_password_length} characters long"
            )
        if not name:
            raise InventoryValidationError("Name is required")

        # bcrypt hashing runs off the event loop
        password_hash = await asyncio.to_thread(
            hash_password, password, self._security.bcrypt_rounds
        )

        async with self._session_factory() as db:
            try:
                account = Account(email=email, password_hash=password_hash)
                db.add(account)
                await db.flush()
                profile = ProfileRecord(id=account.id, name=name, email=email)
                db.add(profile)
                await db.commit()
            except IntegrityError as e:
                await db.rollback()
                logger.info("Sign-up rejected, email taken", email=email)
                raise AuthenticationError("An account with this email already exists") from e
            except SQLAlchemyError as e:
                await db.rollback()
                logger.error("Sign-up failed", email=email, error=str(e))
                raise RecordStoreError(f"sign_up failed: {e}") from e

        logger.info("Account created", owner_id=account.id)
        return profile_from_row(profile)

    async def sign_in(self, email: str, password: str) -> AuthSession:
        """
        Verify credentials and issue a session.

        Raises:
            AuthenticationError: Unknown email or wrong password
        """
        email = normalize_email(email)
        async with self._session_factory() as db:
            account = await db.scalar(select(Account).where(Account.email == email))
            if account is None or not await asyncio.to_thread(
                verify_password, password, account.password_hash
            ):
                logger.info("Sign-in rejected", email=email)
                raise AuthenticationError("Invalid email or password")

            token = generate_token()
            expires_at = utcnow() + timedelta(hours=self._security.session_ttl_hours)
            db.add(AuthSessionRecord(
                token_hash=hash_token(token),
                account_id=account.id,
                expires_at=expires_at,
            ))
            await db.commit()

        logger.info("Signed in", owner_id=account.id)
        return AuthSession(token=token, owner_id=account.id, expires_at=expires_at)

    async def session_for(self, token: str) -> AuthSession:
        """
        Live session behind a token.

        Raises:
            AuthenticationError: Unknown, revoked or expired token
        """
        async with self._session_factory() as db:
            record = await db.scalar(
                select(AuthSessionRecord).where(AuthSessionRecord.token_hash == hash_token(token))
            )
        if record is None or record.revoked_at is not None:
            raise AuthenticationError("Not signed in")
        if record.expires_at <= utcnow():
            raise AuthenticationError("Session expired")
        return AuthSession(token=token, owner_id=record.account_id, expires_at=record.expires_at)

    async def resolve(self, token: str) -> str:
        """Owner id for a live session token"""
        return (await self.session_for(token)).owner_id

    async def sign_out(self, token: str) -> None:
        """Revoke the session; unknown tokens are ignored"""
        async with self._session_factory() as db:
            record = await db.scalar(
                select(AuthSessionRecord).where(AuthSessionRecord.token_hash == hash_token(token))
            )
            if record is not None and record.revoked_at is None:
                record.revoked_at = utcnow()
                await db.commit()
                logger.info("Signed out", owner_id=record.account_id)
