# tests/test_accounts.py
import pytest

from storefront.domain.errors import (
    AccountBlocked,
    DuplicateUsername,
    IncorrectPassword,
    InvalidCredentials,
    MissingFields,
    NotAuthenticated,
    ValidationError,
)

from tests.conftest import register_payload


@pytest.mark.anyio
async def test_register_creates_session(users):
    user = await users.register(register_payload("alice", full_name="  Alice  "))

    assert user.full_name == "Alice"
    assert user.history == []
    assert user.blocked is False
    assert await users.current_username() == "alice"


@pytest.mark.anyio
async def test_register_duplicate_leaves_users_unchanged(users):
    await users.register(register_payload("bob"))

    with pytest.raises(DuplicateUsername):
        await users.register(register_payload("bob", full_name="Other Bob"))

    names = [u.username for u in await users.list_users()]
    assert names == ["bob"]
    assert (await users.list_users())[0].full_name == "Alice Example"


@pytest.mark.anyio
async def test_register_missing_fields(users):
    with pytest.raises(MissingFields) as exc:
        await users.register(register_payload("dave", email="  ", phone=""))

    assert exc.value.fields == ["email", "phone"]
    assert await users.list_users() == []
    assert await users.current_username() is None


@pytest.mark.anyio
async def test_login_and_logout(users):
    await users.create_user(register_payload("alice", password="secret"))
    assert await users.current_username() is None

    assert await users.login("alice", "secret") == "alice"
    assert await users.current_username() == "alice"

    await users.logout()
    assert await users.current_user() is None


@pytest.mark.anyio
async def test_login_bad_credentials(users):
    await users.create_user(register_payload("alice", password="secret"))

    with pytest.raises(InvalidCredentials):
        await users.login("alice", "wrong")
    with pytest.raises(InvalidCredentials):
        await users.login("nobody", "secret")


@pytest.mark.anyio
async def test_blocked_user_cannot_log_in(users):
    await users.create_user(register_payload("carol", password="pw"))
    await users.block_user("carol")

    with pytest.raises(AccountBlocked):
        await users.login("carol", "pw")
    assert await users.current_username() is None

    await users.unblock_user("carol")
    assert await users.login("carol", "pw") == "carol"


@pytest.mark.anyio
async def test_admin_user_management(users):
    await users.create_user(register_payload("alice"))

    assert await users.block_user("ghost") is None
    assert await users.delete_user("ghost") is False
    assert await users.delete_user("alice") is True
    assert await users.list_users() == []


@pytest.mark.anyio
async def test_admin_is_provisioned_from_defaults(admin, store):
    with pytest.raises(NotAuthenticated):
        await admin.require_admin()

    assert store.read("adminUser") == {"username": "admin", "password": "admin123"}


@pytest.mark.anyio
async def test_admin_login_logout(admin):
    with pytest.raises(InvalidCredentials):
        await admin.login("admin", "nope")

    await admin.login("admin", "admin123")
    assert await admin.is_logged_in() is True
    await admin.require_admin()

    await admin.logout()
    assert await admin.is_logged_in() is False


@pytest.mark.anyio
async def test_admin_change_password(admin):
    with pytest.raises(IncorrectPassword):
        await admin.change_password("wrong", "new")
    with pytest.raises(ValidationError):
        await admin.change_password("admin123", "")

    await admin.change_password("admin123", "s3cret")

    with pytest.raises(InvalidCredentials):
        await admin.login("admin", "admin123")
    await admin.login("admin", "s3cret")
