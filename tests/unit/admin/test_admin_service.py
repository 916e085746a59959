"""Tests for administrator management."""

from types import SimpleNamespace
from unittest.mock import AsyncMock, MagicMock, patch
from uuid import uuid4

import pytest

from eduregistry.core.modules.access.service import AccessService
from eduregistry.core.modules.admin.models import (
    ADMIN_LEVEL_PERMISSIONS,
    Admin,
    AdminLevel,
    AdminPermission,
    AdminStatus,
)
from eduregistry.core.modules.admin.service import AdminService
from eduregistry.core.modules.auth.models import Principal, UserType
from eduregistry.errors import AccessDeniedError, NotFoundError, ValidationError

COUNTRY_ID = uuid4()


class FakeCursor:
    """Async iterator over fixed documents, standing in for AsyncCursor."""

    def __init__(self, docs):
        self._docs = list(docs)

    def __aiter__(self):
        return self

    async def __anext__(self):
        if not self._docs:
            raise StopAsyncIteration
        return self._docs.pop(0)


def admin_doc(**kwargs):
    admin = Admin(email=f"{uuid4().hex[:8]}@example.com", password_hash="hash", **kwargs)
    return admin.to_mongo()


@pytest.fixture
def super_admin():
    return admin_doc()


@pytest.fixture
def main_admin():
    return admin_doc(
        admin_level=AdminLevel.MAIN_ADMIN,
        country_id=COUNTRY_ID,
        permissions=ADMIN_LEVEL_PERMISSIONS[AdminLevel.MAIN_ADMIN],
    )


@pytest.fixture
def docs(super_admin, main_admin):
    return {doc["_id"]: doc for doc in (super_admin, main_admin)}


@pytest.fixture
def collection(docs):
    async def find_one(query, *args, **kwargs):
        if "_id" in query:
            return docs.get(query["_id"])
        return next((doc for doc in docs.values() if doc["email"] == query.get("email")), None)

    collection = MagicMock()
    collection.find_one = AsyncMock(side_effect=find_one)
    collection.insert_one = AsyncMock()
    collection.update_one = AsyncMock()
    return collection


@pytest.fixture
def country_service():
    country_service = MagicMock()
    country_service.get_country = AsyncMock()
    return country_service


@pytest.fixture
def service(collection, country_service):
    database = MagicMock()
    database.get_collection.return_value = collection
    instance = AdminService(database)
    instance.set_core(SimpleNamespace(services=SimpleNamespace(country=country_service)))
    return instance


class TestCreateAdmin:
    """Tests for AdminService.create_admin."""

    @pytest.mark.asyncio
    async def test_main_admin_gets_level_permissions(self, service, collection, country_service, super_admin):
        """Test that a country-bound admin is created with its level's permissions."""
        admin = await service.create_admin(
            " Ada ", "Obi", " Ada@Example.com ", "secret1", AdminLevel.MAIN_ADMIN, super_admin["_id"], COUNTRY_ID
        )

        country_service.get_country.assert_awaited_once_with(COUNTRY_ID)
        assert admin.email == "ada@example.com"
        assert admin.first_name == "Ada"
        assert admin.permissions == ADMIN_LEVEL_PERMISSIONS[AdminLevel.MAIN_ADMIN]
        assert admin.created_by == super_admin["_id"]
        assert admin.status == AdminStatus.ACTIVE

        doc = collection.insert_one.await_args.args[0]
        assert doc["_id"] == admin.id
        assert doc["country_id"] == COUNTRY_ID
        assert doc["password_hash"] != "secret1"

    @pytest.mark.asyncio
    async def test_super_admin_needs_no_country(self, service, country_service, super_admin):
        """Test that super admins are not bound to a country."""
        admin = await service.create_admin(
            "Root", "Admin", "root@example.com", "secret1", AdminLevel.SUPER_ADMIN, super_admin["_id"]
        )
        assert admin.country_id is None
        country_service.get_country.assert_not_awaited()

    @pytest.mark.asyncio
    async def test_country_required_below_super_admin(self, service, collection, super_admin):
        with pytest.raises(ValidationError, match="Country is required"):
            await service.create_admin(
                "Ada", "Obi", "ada@example.com", "secret1", AdminLevel.MINOR_ADMIN, super_admin["_id"]
            )
        collection.insert_one.assert_not_awaited()

    @pytest.mark.asyncio
    async def test_unknown_country_rejected(self, service, country_service, super_admin):
        country_service.get_country = AsyncMock(side_effect=NotFoundError("Country not found"))
        with pytest.raises(ValidationError, match="Invalid country selected"):
            await service.create_admin(
                "Ada", "Obi", "ada@example.com", "secret1", AdminLevel.MINOR_ADMIN, super_admin["_id"], uuid4()
            )

    @pytest.mark.asyncio
    async def test_duplicate_email_rejected(self, service, collection, super_admin, main_admin):
        with pytest.raises(ValidationError, match="already exists"):
            await service.create_admin(
                "Ada", "Obi", main_admin["email"], "secret1", AdminLevel.SUPER_ADMIN, super_admin["_id"]
            )
        collection.insert_one.assert_not_awaited()


class TestListAdmins:
    """Tests for AdminService.list_admins."""

    @pytest.mark.asyncio
    async def test_super_admin_filters_by_country(self, service, collection, super_admin, main_admin):
        """Test that super admins may filter by any country."""
        cursor = MagicMock()
        cursor.sort.return_value = FakeCursor([main_admin])
        collection.find = MagicMock(return_value=cursor)

        admins = await service.list_admins(super_admin["_id"], COUNTRY_ID)

        collection.find.assert_called_once_with({"country_id": COUNTRY_ID})
        cursor.sort.assert_called_once_with("created_at", -1)
        assert [admin.id for admin in admins] == [main_admin["_id"]]

    @pytest.mark.asyncio
    async def test_super_admin_sees_everyone(self, service, collection, super_admin):
        cursor = MagicMock()
        cursor.sort.return_value = FakeCursor([])
        collection.find = MagicMock(return_value=cursor)

        await service.list_admins(super_admin["_id"])
        collection.find.assert_called_once_with({})

    @pytest.mark.asyncio
    async def test_country_admin_limited_to_own_country(self, service, collection, main_admin):
        """Test that a requested country filter is ignored below super admin."""
        cursor = MagicMock()
        cursor.sort.return_value = FakeCursor([])
        collection.find = MagicMock(return_value=cursor)

        await service.list_admins(main_admin["_id"], uuid4())
        collection.find.assert_called_once_with({"country_id": COUNTRY_ID})

    @pytest.mark.asyncio
    async def test_unknown_requester(self, service):
        with pytest.raises(NotFoundError):
            await service.list_admins(uuid4())


class TestUpdateAdmin:
    """Tests for AdminService.update_admin."""

    @pytest.mark.asyncio
    async def test_super_admin_updates_given_fields(self, service, collection, super_admin, main_admin):
        """Test that only supplied fields are written."""
        await service.update_admin(
            main_admin["_id"], super_admin["_id"], last_name=" Okafor ", status=AdminStatus.SUSPENDED
        )
        collection.update_one.assert_awaited_once_with(
            {"_id": main_admin["_id"]}, {"$set": {"last_name": "Okafor", "status": AdminStatus.SUSPENDED}}
        )

    @pytest.mark.asyncio
    async def test_no_changes(self, service, collection, super_admin, main_admin):
        admin = await service.update_admin(main_admin["_id"], super_admin["_id"])
        assert admin.id == main_admin["_id"]
        collection.update_one.assert_not_awaited()

    @pytest.mark.asyncio
    async def test_only_super_admin_may_update(self, service, collection, super_admin, main_admin):
        with pytest.raises(AccessDeniedError, match="Insufficient permissions"):
            await service.update_admin(super_admin["_id"], main_admin["_id"], first_name="Eve")
        collection.update_one.assert_not_awaited()

    @pytest.mark.asyncio
    async def test_unknown_target(self, service, super_admin):
        with pytest.raises(NotFoundError):
            await service.update_admin(uuid4(), super_admin["_id"], first_name="Eve")

    @pytest.mark.asyncio
    async def test_unknown_country_rejected(self, service, collection, country_service, super_admin, main_admin):
        country_service.get_country = AsyncMock(side_effect=NotFoundError("Country not found"))
        with pytest.raises(ValidationError, match="Invalid country selected"):
            await service.update_admin(main_admin["_id"], super_admin["_id"], country_id=uuid4())
        collection.update_one.assert_not_awaited()


class TestEnsureAdminPermission:
    """Tests for AccessService.ensure_admin_permission."""

    @pytest.fixture
    def access(self, service):
        instance = AccessService(MagicMock())
        instance.set_core(SimpleNamespace(services=SimpleNamespace(admin=service)))
        return instance

    def principal_for(self, doc):
        return Principal(id=doc["_id"], user_type=UserType.ADMIN, email=doc["email"])

    @pytest.mark.asyncio
    async def test_permission_granted(self, access, super_admin):
        with patch.object(access, "ensure_admin", return_value=self.principal_for(super_admin)):
            admin = await access.ensure_admin_permission("token", AdminPermission.CREATE_ADMINS)
        assert admin.id == super_admin["_id"]

    @pytest.mark.asyncio
    async def test_missing_permission_denied(self, access, main_admin):
        """Test that a main admin cannot create admins."""
        with patch.object(access, "ensure_admin", return_value=self.principal_for(main_admin)):
            with pytest.raises(AccessDeniedError, match="create_admins"):
                await access.ensure_admin_permission("token", AdminPermission.CREATE_ADMINS)

    @pytest.mark.asyncio
    async def test_suspended_admin_denied(self, access, super_admin):
        super_admin["status"] = AdminStatus.SUSPENDED
        with patch.object(access, "ensure_admin", return_value=self.principal_for(super_admin)):
            with pytest.raises(AccessDeniedError):
                await access.ensure_admin_permission("token", AdminPermission.VIEW_USERS)


class TestBootstrapAdmin:
    """Tests for AdminService.ensure_admin_exists."""

    @pytest.mark.asyncio
    async def test_creates_super_admin_once(self, service, collection):
        """Test that the configured account is created as a super admin when missing."""
        service.set_core(SimpleNamespace(config=SimpleNamespace(admin_email="Root@Example.com", admin_password="secret1")))

        await service.ensure_admin_exists()

        doc = collection.insert_one.await_args.args[0]
        assert doc["email"] == "root@example.com"
        assert doc["admin_level"] == AdminLevel.SUPER_ADMIN
        assert set(doc["permissions"]) == set(AdminPermission)

    @pytest.mark.asyncio
    async def test_existing_account_left_alone(self, service, collection, super_admin):
        service.set_core(SimpleNamespace(config=SimpleNamespace(admin_email=super_admin["email"], admin_password="x")))
        await service.ensure_admin_exists()
        collection.insert_one.assert_not_awaited()
