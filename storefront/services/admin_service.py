# storefront/services/admin_service.py
from storefront.data.store import StoreAdapter
from storefront.domain.errors import (
    IncorrectPassword,
    InvalidCredentials,
    NotAuthenticated,
    ValidationError,
)
from storefront.domain.schemas import AdminAccount
from storefront.repos.admin_repo import AdminRepo
from storefront.repos.session_repo import SessionRepo
from storefront.utils.settings import ADMIN_DEFAULT_PASSWORD, ADMIN_DEFAULT_USERNAME
from storefront.utils.logging import get_logger

logger = get_logger(__name__)


class AdminService:
    """Singleton admin account and the admin session flag."""

    def __init__(
        self,
        store: StoreAdapter,
        default_username: str | None = None,
        default_password: str | None = None,
    ):
        self.repo = AdminRepo(store)
        self.sessions = SessionRepo(store)
        self.default_username = default_username or ADMIN_DEFAULT_USERNAME
        self.default_password = default_password or ADMIN_DEFAULT_PASSWORD

    async def ensure_admin(self) -> AdminAccount:
        """Provision the admin record from configured defaults when missing."""
        admin = await self.repo.get_admin()
        if admin is None:
            admin = AdminAccount(username=self.default_username, password=self.default_password)
            await self.repo.save_admin(admin)
            logger.info(f"Provisioned admin account '{admin.username}'")
        return admin

    async def login(self, username: str, password: str) -> None:
        admin = await self.ensure_admin()
        if admin.username != (username or "").strip() or admin.password != password:
            raise InvalidCredentials("Invalid admin credentials")

        await self.sessions.set_admin_logged_in(True)
        logger.info("Admin logged in")

    async def logout(self) -> None:
        await self.sessions.set_admin_logged_in(False)

    async def is_logged_in(self) -> bool:
        return await self.sessions.is_admin_logged_in()

    async def require_admin(self) -> None:
        await self.ensure_admin()
        if not await self.sessions.is_admin_logged_in():
            raise NotAuthenticated("Admin login required")

    async def change_password(self, old_password: str, new_password: str) -> None:
        admin = await self.ensure_admin()
        if admin.password != old_password:
            raise IncorrectPassword()
        if not new_password:
            raise ValidationError("New password required")

        admin.password = new_password
        await self.repo.save_admin(admin)
        logger.info("Admin password updated")
