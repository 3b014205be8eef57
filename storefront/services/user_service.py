# storefront/services/user_service.py
from typing import List

from storefront.data.store import StoreAdapter
from storefront.domain.errors import (
    AccountBlocked,
    DuplicateUsername,
    InvalidCredentials,
    MissingFields,
)
from storefront.domain.schemas import RegisterIn, User
from storefront.repos.session_repo import SessionRepo
from storefront.repos.user_repo import UserRepo
from storefront.utils.logging import get_logger

logger = get_logger(__name__)

REQUIRED_FIELDS = ("full_name", "username", "email", "phone", "address", "password")


class UserService:
    """
    Konta klientow: rejestracja, logowanie, blokady.

    Hasla sa trzymane i porownywane jawnym tekstem - swiadome ograniczenie
    wersji demo, nie do uzycia produkcyjnie.
    """

    def __init__(self, store: StoreAdapter):
        self.repo = UserRepo(store)
        self.sessions = SessionRepo(store)

    @staticmethod
    def _build_user(payload: RegisterIn) -> User:
        data = payload.model_dump()
        # haslo bez strip - spacje sa jego czescia
        cleaned = {k: (v if k == "password" else (v or "").strip()) for k, v in data.items()}

        missing = [field for field in REQUIRED_FIELDS if not cleaned.get(field)]
        if missing:
            raise MissingFields(missing)

        return User(**cleaned, history=[], blocked=False)

    async def create_user(self, payload: RegisterIn) -> User:
        """Create an account without touching the session (admin "add user")."""
        user = self._build_user(payload)

        users = await self.repo.list_users()
        if any(u.username == user.username for u in users):
            raise DuplicateUsername(user.username)

        users.append(user)
        await self.repo.save_users(users)

        logger.info(f"Created user {user.username}")
        return user

    async def register(self, payload: RegisterIn) -> User:
        user = await self.create_user(payload)
        await self.sessions.set_logged_in_user(user.username)
        return user

    async def login(self, username: str, password: str) -> str:
        username = (username or "").strip()
        user = await self.repo.get_user(username)

        if user is None or user.password != password:
            logger.info(f"Failed login for '{username}'")
            raise InvalidCredentials()

        if user.blocked:
            logger.info(f"Blocked user {username} tried to log in")
            raise AccountBlocked()

        await self.sessions.set_logged_in_user(username)
        logger.info(f"User {username} logged in")
        return username

    async def logout(self) -> None:
        await self.sessions.set_logged_in_user(None)

    async def current_username(self) -> str | None:
        return await self.sessions.get_logged_in_user()

    async def current_user(self) -> User | None:
        username = await self.current_username()
        if not username:
            return None
        return await self.repo.get_user(username)

    # =====================================================
    # ADMIN
    # =====================================================
    async def list_users(self) -> List[User]:
        return await self.repo.list_users()

    async def _set_blocked(self, username: str, blocked: bool) -> User | None:
        users = await self.repo.list_users()
        user = next((u for u in users if u.username == username), None)
        if user is None:
            return None

        user.blocked = blocked
        await self.repo.save_users(users)

        logger.info(f"User {username} {'blocked' if blocked else 'unblocked'}")
        return user

    async def block_user(self, username: str) -> User | None:
        return await self._set_blocked(username, True)

    async def unblock_user(self, username: str) -> User | None:
        return await self._set_blocked(username, False)

    async def delete_user(self, username: str) -> bool:
        users = await self.repo.list_users()
        remaining = [u for u in users if u.username != username]
        if len(remaining) == len(users):
            return False

        await self.repo.save_users(remaining)
        logger.info(f"Deleted user {username}")
        return True
