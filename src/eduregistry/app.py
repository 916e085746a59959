from collections.abc import AsyncGenerator
from contextlib import asynccontextmanager
from datetime import date
from uuid import UUID

from eduregistry.config import Config
from eduregistry.core.core import Core
from eduregistry.core.modules.admin.models import AdminLevel, AdminPermission, AdminStatus, AdminView
from eduregistry.core.modules.auth.models import AccessToken, Principal, TokenPair, UserType
from eduregistry.core.modules.counter.models import CounterHealth, CounterType
from eduregistry.core.modules.country.models import CountryView
from eduregistry.core.modules.individual.models import IndividualView
from eduregistry.core.modules.parent.models import Child, ParentView
from eduregistry.core.modules.school.models import SchoolLevel, SchoolView, SubscriptionType
from eduregistry.core.modules.student.models import Gender, StudentView
from eduregistry.core.pagination import PaginationResult
from eduregistry.errors import AccessDeniedError, AuthenticationError


class App:
    """Facade for all application operations, validates permissions before delegating to Core."""

    def __init__(self, config: Config) -> None:
        self._core = Core(config)

    @asynccontextmanager
    async def lifespan(self) -> AsyncGenerator[None]:
        """Application lifespan management - delegates to Core."""
        async with self._core.lifespan():
            yield

    # === Authentication ===
    def is_access_token_valid(self, access_token: AccessToken) -> bool:
        """Check if access token is valid."""
        try:
            self._core.services.access.ensure_authenticated(access_token)
        except AuthenticationError:
            return False
        return True

    async def login(self, user_type: UserType, email: str, password: str) -> TokenPair:
        """Authenticate an account of the given type and issue tokens."""
        return await self._core.services.auth.login(user_type, email, password)

    async def refresh_tokens(self, refresh_token: str) -> TokenPair:
        """Exchange a refresh token for a new token pair."""
        return await self._core.services.auth.refresh(refresh_token)

    async def logout(self, access_token: AccessToken) -> None:
        """Invalidate the caller's refresh token."""
        principal = self._core.services.access.ensure_authenticated(access_token)
        await self._core.services.auth.logout(principal)

    def get_current_principal(self, access_token: AccessToken) -> Principal:
        """Get the authenticated caller."""
        return self._core.services.access.ensure_authenticated(access_token)

    # === Countries ===
    async def register_country(self, name: str, country_code: str, email: str, password: str) -> CountryView:
        """Register a new country (public)."""
        country = await self._core.services.country.register_country(name, country_code, email, password)
        return CountryView.from_domain(country)

    async def list_countries(self) -> list[CountryView]:
        """List registered countries (public)."""
        countries = await self._core.services.country.list_countries()
        return [CountryView.from_domain(country) for country in countries]

    async def get_country(self, access_token: AccessToken, country_id: UUID) -> CountryView:
        """Get country details (authenticated)."""
        self._core.services.access.ensure_authenticated(access_token)
        return CountryView.from_domain(await self._core.services.country.get_country(country_id))

    async def get_country_by_code(self, access_token: AccessToken, country_code: str) -> CountryView:
        """Get country details by ISO 3166-1 alpha-3 code (authenticated)."""
        self._core.services.access.ensure_authenticated(access_token)
        return CountryView.from_domain(await self._core.services.country.get_country_by_code(country_code))

    async def set_country_verified(self, access_token: AccessToken, country_id: UUID, verified: bool) -> CountryView:
        """Verify or unverify a country (admin only)."""
        self._core.services.access.ensure_admin(access_token)
        return CountryView.from_domain(await self._core.services.country.set_verified(country_id, verified))

    # === Schools ===
    async def register_school(
        self,
        country_id: UUID,
        name: str,
        email: str,
        password: str,
        address: str,
        phone: str,
        school_levels: list[SchoolLevel],
        subscription_type: SubscriptionType,
    ) -> SchoolView:
        """Register a new school under a verified country (public)."""
        school = await self._core.services.school.register_school(
            country_id, name, email, password, address, phone, school_levels, subscription_type
        )
        return SchoolView.from_domain(school)

    async def get_school(self, access_token: AccessToken, school_id: UUID) -> SchoolView:
        """Get school details (authenticated)."""
        self._core.services.access.ensure_authenticated(access_token)
        return SchoolView.from_domain(await self._core.services.school.get_school(school_id))

    async def list_schools_by_country(
        self, access_token: AccessToken, country_id: UUID, limit: int = 10, offset: int = 0
    ) -> PaginationResult[SchoolView]:
        """Get paginated schools of a country (authenticated)."""
        self._core.services.access.ensure_authenticated(access_token)
        result = await self._core.services.school.list_schools_by_country(country_id, limit, offset)
        return PaginationResult(
            items=[SchoolView.from_domain(school) for school in result.items],
            total=result.total,
            limit=result.limit,
            offset=result.offset,
        )

    async def update_school_subscription(
        self, access_token: AccessToken, school_id: UUID, subscription_type: SubscriptionType
    ) -> SchoolView:
        """Change a school's subscription (the school itself or admin)."""
        principal = self._core.services.access.ensure_user_type(access_token, UserType.SCHOOL)
        self._ensure_owner(principal, school_id)
        school = await self._core.services.school.update_subscription(school_id, subscription_type)
        return SchoolView.from_domain(school)

    async def set_school_verified(self, access_token: AccessToken, school_id: UUID, verified: bool) -> SchoolView:
        """Verify or unverify a school (its country or admin)."""
        principal = self._core.services.access.ensure_user_type(access_token, UserType.COUNTRY)
        school = await self._core.services.school.get_school(school_id)
        self._ensure_owner(principal, school.country_id)
        return SchoolView.from_domain(await self._core.services.school.set_verified(school_id, verified))

    # === Students ===
    async def register_student(
        self,
        school_id: UUID,
        first_name: str,
        last_name: str,
        email: str,
        password: str,
        gender: Gender,
        date_of_birth: date,
        level: SchoolLevel,
        address: str = "",
        phone: str = "",
    ) -> StudentView:
        """Register a new student in a school (public)."""
        student = await self._core.services.student.register_student(
            school_id, first_name, last_name, email, password, gender, date_of_birth, level, address, phone
        )
        return StudentView.from_domain(student)

    async def get_student(self, access_token: AccessToken, student_id: UUID) -> StudentView:
        """Get student details (the student, their school, or admin)."""
        principal = self._core.services.access.ensure_user_type(access_token, UserType.STUDENT, UserType.SCHOOL)
        student = await self._core.services.student.get_student(student_id)
        self._ensure_owner(principal, student.school_id if principal.user_type == UserType.SCHOOL else student.id)
        return StudentView.from_domain(student)

    # === Individuals ===
    async def register_individual(
        self,
        country_id: UUID,
        first_name: str,
        last_name: str,
        email: str,
        password: str,
        gender: Gender,
        date_of_birth: date,
        address: str = "",
        phone: str = "",
    ) -> IndividualView:
        """Register a new individual learner (public)."""
        individual = await self._core.services.individual.register_individual(
            country_id, first_name, last_name, email, password, gender, date_of_birth, address, phone
        )
        return IndividualView.from_domain(individual)

    async def get_individual(self, access_token: AccessToken, individual_id: UUID) -> IndividualView:
        """Get individual learner details (the individual or admin)."""
        principal = self._core.services.access.ensure_user_type(access_token, UserType.INDIVIDUAL)
        self._ensure_owner(principal, individual_id)
        return IndividualView.from_domain(await self._core.services.individual.get_individual(individual_id))

    async def find_individual_by_registration_number(
        self, access_token: AccessToken, registration_number: str
    ) -> IndividualView:
        """Look up an individual learner by registration number (admin only)."""
        self._core.services.access.ensure_admin(access_token)
        individual = await self._core.services.individual.get_by_registration_number(registration_number)
        return IndividualView.from_domain(individual)

    # === Parents and children ===
    async def register_parent(
        self, country_id: UUID, first_name: str, last_name: str, email: str, password: str, phone_number: str = ""
    ) -> ParentView:
        """Register a new parent account (public)."""
        parent = await self._core.services.parent.register_parent(
            country_id, first_name, last_name, email, password, phone_number
        )
        return ParentView.from_domain(parent)

    async def get_current_parent(self, access_token: AccessToken) -> ParentView:
        """Get the calling parent's account with children."""
        principal = self._ensure_parent(access_token)
        return ParentView.from_domain(await self._core.services.parent.get_parent(principal.id))

    async def add_child(
        self,
        access_token: AccessToken,
        first_name: str,
        last_name: str,
        date_of_birth: date,
        gender: Gender,
        level: SchoolLevel,
    ) -> Child:
        """Register a child under the calling parent."""
        principal = self._ensure_parent(access_token)
        return await self._core.services.parent.add_child(principal.id, first_name, last_name, date_of_birth, gender, level)

    async def list_children(self, access_token: AccessToken) -> list[Child]:
        """List the calling parent's children."""
        principal = self._ensure_parent(access_token)
        return await self._core.services.parent.list_children(principal.id)

    async def remove_child(self, access_token: AccessToken, child_id: UUID) -> Child:
        """Remove a child from the calling parent's account."""
        principal = self._ensure_parent(access_token)
        return await self._core.services.parent.remove_child(principal.id, child_id)

    # === Admins ===
    async def get_current_admin(self, access_token: AccessToken) -> AdminView:
        """Get the calling admin's account."""
        principal = self._core.services.access.ensure_admin(access_token)
        return AdminView.from_domain(await self._core.services.admin.get_admin(principal.id))

    async def create_admin(
        self,
        access_token: AccessToken,
        first_name: str,
        last_name: str,
        email: str,
        password: str,
        admin_level: AdminLevel,
        country_id: UUID | None = None,
        phone: str = "",
    ) -> AdminView:
        """Create an administrator (admins with the create_admins permission)."""
        creator = await self._core.services.access.ensure_admin_permission(access_token, AdminPermission.CREATE_ADMINS)
        admin = await self._core.services.admin.create_admin(
            first_name, last_name, email, password, admin_level, creator.id, country_id, phone
        )
        return AdminView.from_domain(admin)

    async def list_admins(self, access_token: AccessToken, country_id: UUID | None = None) -> list[AdminView]:
        """List admins visible to the caller (admin only; scoped to its country below super admin)."""
        principal = self._core.services.access.ensure_admin(access_token)
        admins = await self._core.services.admin.list_admins(principal.id, country_id)
        return [AdminView.from_domain(admin) for admin in admins]

    async def update_admin(
        self,
        access_token: AccessToken,
        admin_id: UUID,
        first_name: str | None = None,
        last_name: str | None = None,
        phone: str | None = None,
        status: AdminStatus | None = None,
        country_id: UUID | None = None,
        permissions: list[AdminPermission] | None = None,
    ) -> AdminView:
        """Update an administrator (super admins with the manage_admins permission)."""
        requester = await self._core.services.access.ensure_admin_permission(access_token, AdminPermission.MANAGE_ADMINS)
        admin = await self._core.services.admin.update_admin(
            admin_id,
            requester.id,
            first_name=first_name,
            last_name=last_name,
            phone=phone,
            status=status,
            country_id=country_id,
            permissions=permissions,
        )
        return AdminView.from_domain(admin)

    # === Diagnostics ===
    async def get_counter_health(self, access_token: AccessToken) -> dict[CounterType, CounterHealth]:
        """Report the state of every registration counter (admin only)."""
        self._core.services.access.ensure_admin(access_token)
        return await self._core.services.counter.check_all_health()

    # === Private helpers ===
    def _ensure_parent(self, access_token: AccessToken) -> Principal:
        principal = self._core.services.access.ensure_authenticated(access_token)
        if principal.user_type != UserType.PARENT:
            raise AccessDeniedError("Parent account required")
        return principal

    @staticmethod
    def _ensure_owner(principal: Principal, owner_id: UUID) -> None:
        """Admins pass; anyone else must be the owning account."""
        if principal.user_type != UserType.ADMIN and principal.id != owner_id:
            raise AccessDeniedError("Access denied")
