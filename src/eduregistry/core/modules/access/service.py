from eduregistry.core.core import Service
from eduregistry.core.modules.admin.models import Admin, AdminPermission
from eduregistry.core.modules.auth.models import AccessToken, Principal, UserType
from eduregistry.errors import AccessDeniedError


class AccessService(Service):
    def ensure_authenticated(self, access_token: AccessToken) -> Principal:
        """Ensure the access token is valid and return its principal."""
        return self.core.services.auth.get_principal(access_token)

    def ensure_user_type(self, access_token: AccessToken, *user_types: UserType) -> Principal:
        """Ensure the caller is one of the given actor types; admins always pass."""
        principal = self.ensure_authenticated(access_token)
        if principal.user_type != UserType.ADMIN and principal.user_type not in user_types:
            raise AccessDeniedError(f"Access denied for {principal.user_type} accounts")
        return principal

    def ensure_admin(self, access_token: AccessToken) -> Principal:
        """Ensure the authenticated caller is an admin, raise AccessDeniedError if not."""
        principal = self.ensure_authenticated(access_token)
        if principal.user_type != UserType.ADMIN:
            raise AccessDeniedError("Admin privileges required")
        return principal

    async def ensure_admin_permission(self, access_token: AccessToken, permission: AdminPermission) -> Admin:
        """Ensure the caller is an active admin holding the permission and return the admin."""
        principal = self.ensure_admin(access_token)
        admin = await self.core.services.admin.get_admin(principal.id)
        if not admin.has_permission(permission):
            raise AccessDeniedError(f"Permission '{permission}' required")
        return admin
