from datetime import timedelta
from typing import Any
from uuid import UUID

import structlog
from pymongo.asynchronous.collection import AsyncCollection

from eduregistry.core.core import Service
from eduregistry.core.modules.admin.models import AdminStatus
from eduregistry.core.modules.auth.models import USER_COLLECTIONS, Principal, TokenPair, TokenType, UserType
from eduregistry.core.modules.auth.security import decode_token, encode_token, verify_password
from eduregistry.errors import AuthenticationError
from eduregistry.utils import normalize_email, now

logger = structlog.get_logger(__name__)


class AuthService(Service):
    """Issues and verifies JWT access/refresh pairs for every actor type."""

    def _collection(self, user_type: UserType) -> AsyncCollection[dict[str, Any]]:
        return self.database.get_collection(USER_COLLECTIONS[user_type])

    async def login(self, user_type: UserType, email: str, password: str) -> TokenPair:
        """Check credentials against the actor's collection and issue a token pair."""
        doc = await self._collection(user_type).find_one({"email": normalize_email(email)})
        if doc is None or not verify_password(password, doc["password_hash"]):
            raise AuthenticationError("Invalid email or password")
        self._ensure_active(user_type, doc)
        logger.debug("login", user_type=user_type, account_id=doc["_id"])
        return await self.issue_tokens(user_type, doc)

    async def issue_tokens(self, user_type: UserType, doc: dict[str, Any]) -> TokenPair:
        """Create a token pair for an account document and remember its refresh token."""
        principal = Principal(
            id=doc["_id"],
            user_type=user_type,
            email=doc["email"],
            registration_number=doc.get("registration_number"),
        )
        pair = self.create_token_pair(principal)
        await self._collection(user_type).update_one({"_id": principal.id}, {"$set": {"refresh_token": pair.refresh_token}})
        return pair

    def create_token_pair(self, principal: Principal) -> TokenPair:
        config = self.core.config
        issued_at = now()
        access_token = encode_token(
            {
                "sub": str(principal.id),
                "user_type": principal.user_type.value,
                "email": principal.email,
                "registration_number": principal.registration_number,
            },
            TokenType.ACCESS,
            config.access_token_secret,
            issued_at,
            timedelta(minutes=config.access_token_expiry_minutes),
        )
        refresh_token = encode_token(
            {"sub": str(principal.id), "user_type": principal.user_type.value},
            TokenType.REFRESH,
            config.refresh_token_secret,
            issued_at,
            timedelta(days=config.refresh_token_expiry_days),
        )
        return TokenPair(access_token=access_token, refresh_token=refresh_token)

    def get_principal(self, access_token: str) -> Principal:
        payload = decode_token(access_token, TokenType.ACCESS, self.core.config.access_token_secret)
        try:
            return Principal(
                id=UUID(payload["sub"]),
                user_type=UserType(payload["user_type"]),
                email=payload.get("email", ""),
                registration_number=payload.get("registration_number"),
            )
        except ValueError as exc:
            raise AuthenticationError("Invalid token payload") from exc

    async def refresh(self, refresh_token: str) -> TokenPair:
        """Exchange a refresh token for a new pair; only the last issued refresh token is accepted."""
        payload = decode_token(refresh_token, TokenType.REFRESH, self.core.config.refresh_token_secret)
        try:
            user_type = UserType(payload["user_type"])
            account_id = UUID(payload["sub"])
        except ValueError as exc:
            raise AuthenticationError("Invalid token payload") from exc

        doc = await self._collection(user_type).find_one({"_id": account_id})
        if doc is None or doc.get("refresh_token") != refresh_token:
            raise AuthenticationError("Refresh token is expired or used")
        self._ensure_active(user_type, doc)
        return await self.issue_tokens(user_type, doc)

    async def logout(self, principal: Principal) -> None:
        await self._collection(principal.user_type).update_one({"_id": principal.id}, {"$set": {"refresh_token": None}})

    @staticmethod
    def _ensure_active(user_type: UserType, doc: dict[str, Any]) -> None:
        # Only admin accounts can be deactivated or suspended
        if user_type == UserType.ADMIN and doc.get("status", AdminStatus.ACTIVE) != AdminStatus.ACTIVE:
            raise AuthenticationError("Account is not active")
