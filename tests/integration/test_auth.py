"""
Integration Tests - Authentication
"""
from datetime import datetime, timedelta, timezone

import pytest
from sqlalchemy import update

from inventory_soft.database.models import AuthSessionRecord, utcnow
from inventory_soft.errors import AuthenticationError, InventoryValidationError
from inventory_soft.services.auth import hash_password, hash_token, verify_password


class TestPasswords:
    def test_hash_and_verify(self):
        hashed = hash_password("secret123", rounds=4)
        assert hashed != "secret123"
        assert verify_password("secret123", hashed)
        assert not verify_password("wrong", hashed)

    def test_token_hash_is_stable(self):
        assert hash_token("abc") == hash_token("abc")
        assert len(hash_token("abc")) == 64


class TestAuthService:
    """Tests for the sign-up / sign-in round trip"""

    async def test_round_trip(self, auth):
        profile = await auth.sign_up("Ana@Shop.Test ", "secret123", "Ana")
        assert profile.email == "ana@shop.test"
        assert profile.name == "Ana"

        session = await auth.sign_in("ana@shop.test", "secret123")
        assert session.owner_id == profile.id
        assert await auth.resolve(session.token) == profile.id

        await auth.sign_out(session.token)
        with pytest.raises(AuthenticationError):
            await auth.resolve(session.token)

    async def test_duplicate_email(self, auth):
        await auth.sign_up("ana@shop.test", "secret123", "Ana")
        with pytest.raises(AuthenticationError):
            await auth.sign_up("ANA@shop.test", "other-secret", "Ana Again")

    async def test_wrong_password(self, auth):
        await auth.sign_up("ana@shop.test", "secret123", "Ana")
        with pytest.raises(AuthenticationError):
            await auth.sign_in("ana@shop.test", "nope")

    async def test_unknown_email(self, auth):
        with pytest.raises(AuthenticationError):
            await auth.sign_in("nobody@shop.test", "secret123")

    @pytest.mark.parametrize(
        "email,password,name",
        [
            ("not-an-email", "secret123", "Ana"),
            ("ana@shop.test", "123", "Ana"),
            ("ana@shop.test", "secret123", "  "),
        ],
    )
    async def test_sign_up_validation(self, auth, email, password, name):
        with pytest.raises(InventoryValidationError):
            await auth.sign_up(email, password, name)

    async def test_unknown_token(self, auth):
        with pytest.raises(AuthenticationError):
            await auth.resolve("not-a-token")

    async def test_expired_session(self, auth, session_factory):
        await auth.sign_up("ana@shop.test", "secret123", "Ana")
        session = await auth.sign_in("ana@shop.test", "secret123")

        async with session_factory() as db:
            await db.execute(
                update(AuthSessionRecord)
                .where(AuthSessionRecord.token_hash == hash_token(session.token))
                .values(expires_at=utcnow() - timedelta(minutes=1))
            )
            await db.commit()

        with pytest.raises(AuthenticationError, match="expired"):
            await auth.resolve(session.token)

    async def test_profile_created_with_account(self, auth, store):
        profile = await auth.sign_up("ana@shop.test", "secret123", "Ana")

        stored = await store.get_profile(profile.id)

        assert stored == profile


class TestTimestamps:
    def test_utcnow_is_naive_utc(self):
        now = utcnow()

        assert now.tzinfo is None
        assert abs(now - datetime.now(timezone.utc).replace(tzinfo=None)) < timedelta(seconds=5)
