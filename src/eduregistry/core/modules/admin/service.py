from typing import Any
from uuid import UUID

import structlog
from pymongo.asynchronous.database import AsyncDatabase

from eduregistry.core.core import Service
from eduregistry.core.db import insert_document
from eduregistry.core.modules.admin.models import ADMIN_LEVEL_PERMISSIONS, Admin, AdminLevel, AdminPermission, AdminStatus
from eduregistry.core.modules.auth.security import hash_password
from eduregistry.core.modules.auth.validators import validate_email, validate_password
from eduregistry.errors import AccessDeniedError, NotFoundError, ValidationError
from eduregistry.utils import normalize_email

logger = structlog.get_logger(__name__)


class AdminService(Service):
    """Manages administrator accounts."""

    def __init__(self, database: AsyncDatabase[dict[str, Any]]) -> None:
        super().__init__(database)
        self._collection = database.get_collection("admins")

    async def get_admin(self, admin_id: UUID) -> Admin:
        doc = await self._collection.find_one({"_id": admin_id})
        if doc is None:
            raise NotFoundError(f"Admin '{admin_id}' not found")
        return Admin.model_validate(doc)

    async def create_admin(
        self,
        first_name: str,
        last_name: str,
        email: str,
        password: str,
        admin_level: AdminLevel,
        created_by: UUID,
        country_id: UUID | None = None,
        phone: str = "",
    ) -> Admin:
        """Create an administrator with the permissions of its level."""
        email = normalize_email(email)
        validate_email(email)
        validate_password(password)

        if await self._collection.find_one({"email": email}) is not None:
            raise ValidationError("Admin with this email already exists")
        if admin_level != AdminLevel.SUPER_ADMIN:
            if country_id is None:
                raise ValidationError("Country is required for main and minor admins")
            await self._ensure_country(country_id)

        admin = Admin(
            first_name=first_name.strip(),
            last_name=last_name.strip(),
            email=email,
            password_hash=hash_password(password),
            phone=phone.strip(),
            admin_level=admin_level,
            country_id=country_id,
            permissions=ADMIN_LEVEL_PERMISSIONS[admin_level],
            created_by=created_by,
            is_verified=True,
        )
        await insert_document(self._collection, admin, "Admin with this email already exists")
        logger.info("admin_created", admin_id=admin.id, admin_level=admin_level, created_by=created_by)
        return admin

    async def list_admins(self, requesting_admin_id: UUID, country_id: UUID | None = None) -> list[Admin]:
        """List admins, newest first; only super admins see beyond their own country."""
        requester = await self.get_admin(requesting_admin_id)
        query: dict[str, Any] = {}
        if requester.admin_level == AdminLevel.SUPER_ADMIN:
            if country_id is not None:
                query["country_id"] = country_id
        else:
            query["country_id"] = requester.country_id
        return await Admin.list_cursor(self._collection.find(query).sort("created_at", -1))

    async def update_admin(
        self,
        admin_id: UUID,
        requesting_admin_id: UUID,
        *,
        first_name: str | None = None,
        last_name: str | None = None,
        phone: str | None = None,
        status: AdminStatus | None = None,
        country_id: UUID | None = None,
        permissions: list[AdminPermission] | None = None,
    ) -> Admin:
        """Update another admin's profile, status, country or permissions (super admins only)."""
        requester = await self.get_admin(requesting_admin_id)
        if requester.admin_level != AdminLevel.SUPER_ADMIN:
            raise AccessDeniedError("Insufficient permissions to update admin")
        await self.get_admin(admin_id)
        if country_id is not None:
            await self._ensure_country(country_id)

        changes: dict[str, Any] = {
            "first_name": first_name.strip() if first_name is not None else None,
            "last_name": last_name.strip() if last_name is not None else None,
            "phone": phone.strip() if phone is not None else None,
            "status": status,
            "country_id": country_id,
            "permissions": permissions,
        }
        update = {field: value for field, value in changes.items() if value is not None}
        if update:
            await self._collection.update_one({"_id": admin_id}, {"$set": update})
            logger.info("admin_updated", admin_id=admin_id, fields=sorted(update), updated_by=requesting_admin_id)
        return await self.get_admin(admin_id)

    async def ensure_admin_exists(self) -> None:
        """Create the bootstrap super admin from config if no account uses its email."""
        email = normalize_email(self.core.config.admin_email)
        if await self._collection.find_one({"email": email}) is not None:
            return
        admin = Admin(email=email, password_hash=hash_password(self.core.config.admin_password), is_verified=True)
        await self._collection.insert_one(admin.to_mongo())
        logger.info("admin_created", admin_id=admin.id, admin_level=admin.admin_level)

    async def _ensure_country(self, country_id: UUID) -> None:
        try:
            await self.core.services.country.get_country(country_id)
        except NotFoundError as e:
            raise ValidationError("Invalid country selected") from e

    async def on_start(self) -> None:
        """Initialize indexes and bootstrap admin."""
        await self._collection.create_index([("email", 1)], unique=True)
        await self._collection.create_index([("country_id", 1)])
        await self.ensure_admin_exists()
