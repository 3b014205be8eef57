# tests/conftest.py
from unittest.mock import Mock

import pytest
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

from storefront.data.database import init_db
from storefront.data.store import LocalStore
from storefront.domain.errors import PersistenceError
from storefront.domain.schemas import RegisterIn
from storefront.services.admin_service import AdminService
from storefront.services.banner_service import BannerService
from storefront.services.cart_service import CartService
from storefront.services.catalog_service import CatalogService
from storefront.services.order_service import OrderIdAllocator, OrderService
from storefront.services.user_service import UserService


@pytest.fixture
def anyio_backend():
    return "asyncio"


@pytest.fixture
def engine():
    engine = create_engine(
        "sqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    init_db(bind=engine)
    yield engine
    engine.dispose()


@pytest.fixture
def store(engine):
    return LocalStore(sessionmaker(bind=engine, autoflush=False, autocommit=False))


class FlakyStore(LocalStore):
    """LocalStore whose reads of the given keys fail like an unreachable backend."""

    def __init__(self, session_factory, failing=()):
        super().__init__(session_factory)
        self.failing = set(failing)

    def fetch(self, key):
        if key in self.failing:
            raise PersistenceError(f"Read of '{key}' failed: connection lost")
        return super().fetch(key)


@pytest.fixture
def flaky_store(store):
    """Same database as `store`; set `.failing` to break reads of some keys."""
    return FlakyStore(store.session_factory)


@pytest.fixture
def catalog(store):
    return CatalogService(store)


@pytest.fixture
def cart(store):
    return CartService(store)


@pytest.fixture
def users(store):
    return UserService(store)


@pytest.fixture
def admin(store):
    return AdminService(store, default_username="admin", default_password="admin123")


@pytest.fixture
def banners(store):
    return BannerService(store, limit=10)


@pytest.fixture
def notifier():
    return Mock()


@pytest.fixture
def orders(store, notifier):
    clock = iter(range(1_700_000_000_000_000_000, 1_800_000_000_000_000_000, 1_000_000))
    return OrderService(
        store,
        notification_service=notifier,
        id_allocator=OrderIdAllocator(clock=lambda: next(clock)),
        allow_terminal_change=False,
    )


def register_payload(username="alice", password="pw", **overrides) -> RegisterIn:
    data = {
        "full_name": "Alice Example",
        "username": username,
        "email": f"{username}@example.com",
        "phone": "555-0100",
        "address": "1 Main St",
        "password": password,
    }
    data.update(overrides)
    return RegisterIn(**data)
