from datetime import datetime
from enum import StrEnum
from uuid import UUID

from pydantic import BaseModel, Field

from eduregistry.core.modules.auth.models import Account


class AdminLevel(StrEnum):
    """Administrator tiers; everything below super admin is bound to one country."""

    SUPER_ADMIN = "super_admin"
    MAIN_ADMIN = "main_admin"
    MINOR_ADMIN = "minor_admin"


class AdminStatus(StrEnum):
    ACTIVE = "active"
    INACTIVE = "inactive"
    SUSPENDED = "suspended"


class AdminPermission(StrEnum):
    MANAGE_PARENTS = "manage_parents"
    MANAGE_CHILDREN = "manage_children"
    VIEW_USERS = "view_users"
    CREATE_ADMINS = "create_admins"
    MANAGE_ADMINS = "manage_admins"
    VIEW_ADMINS = "view_admins"
    MANAGE_COUNTRIES = "manage_countries"
    VIEW_ANALYTICS = "view_analytics"
    SYSTEM_SETTINGS = "system_settings"
    MODERATE_CONTENT = "moderate_content"
    MANAGE_NOTIFICATIONS = "manage_notifications"


ADMIN_LEVEL_PERMISSIONS: dict[AdminLevel, list[AdminPermission]] = {
    AdminLevel.SUPER_ADMIN: list(AdminPermission),
    AdminLevel.MAIN_ADMIN: [
        AdminPermission.MANAGE_PARENTS,
        AdminPermission.MANAGE_CHILDREN,
        AdminPermission.VIEW_USERS,
        AdminPermission.VIEW_ANALYTICS,
        AdminPermission.MODERATE_CONTENT,
        AdminPermission.MANAGE_NOTIFICATIONS,
    ],
    AdminLevel.MINOR_ADMIN: [
        AdminPermission.VIEW_USERS,
        AdminPermission.MODERATE_CONTENT,
    ],
}


class Admin(Account):
    """Platform administrator.

    Indexed on email - unique; country_id.
    """

    first_name: str = "System"
    last_name: str = "Administrator"
    phone: str = ""
    admin_level: AdminLevel = AdminLevel.SUPER_ADMIN
    status: AdminStatus = AdminStatus.ACTIVE
    country_id: UUID | None = None  # Required below super admin
    permissions: list[AdminPermission] = Field(default_factory=lambda: list(AdminPermission))
    created_by: UUID | None = None  # None for the bootstrap admin

    def has_permission(self, permission: AdminPermission) -> bool:
        return self.status == AdminStatus.ACTIVE and permission in self.permissions

    def can_access_country(self, country_id: UUID) -> bool:
        if self.admin_level == AdminLevel.SUPER_ADMIN:
            return True
        return self.country_id == country_id


class AdminView(BaseModel):
    """Administrator account information (API representation)."""

    id: UUID = Field(..., description="Admin ID")
    first_name: str = Field(..., description="First name")
    last_name: str = Field(..., description="Last name")
    email: str = Field(..., description="Login email")
    phone: str = Field(..., description="Phone number")
    admin_level: AdminLevel = Field(..., description="Administrator tier")
    status: AdminStatus = Field(..., description="Account status")
    country_id: UUID | None = Field(None, description="Country the admin is bound to")
    permissions: list[AdminPermission] = Field(..., description="Granted permissions")
    created_by: UUID | None = Field(None, description="Admin who created this account")
    created_at: datetime = Field(..., description="Creation time")

    @classmethod
    def from_domain(cls, admin: Admin) -> "AdminView":
        """Create view model from domain model."""
        return cls(
            id=admin.id,
            first_name=admin.first_name,
            last_name=admin.last_name,
            email=admin.email,
            phone=admin.phone,
            admin_level=admin.admin_level,
            status=admin.status,
            country_id=admin.country_id,
            permissions=admin.permissions,
            created_by=admin.created_by,
            created_at=admin.created_at,
        )
