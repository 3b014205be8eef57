# storefront/repos/user_repo.py
from typing import List

from storefront.data.store import USERS, StoreAdapter, resolve
from storefront.domain.schemas import User


class UserRepo:
    def __init__(self, store: StoreAdapter):
        self.store = store

    @staticmethod
    def dump(users: List[User]) -> list:
        return [u.to_json() for u in users]

    async def list_users(self) -> List[User]:
        raw = await resolve(self.store.read(USERS))
        return [User.model_validate(u) for u in raw or []]

    async def fetch_users(self) -> List[User]:
        """Like list_users, but PersistenceError propagates instead of reading as []."""
        raw = await resolve(self.store.fetch(USERS))
        return [User.model_validate(u) for u in raw or []]

    async def get_user(self, username: str) -> User | None:
        users = await self.list_users()
        return next((u for u in users if u.username == username), None)

    async def save_users(self, users: List[User]) -> None:
        await resolve(self.store.write(USERS, self.dump(users)))

    async def save_user(self, user: User) -> None:
        """Replace the user with the same username, or append a new one."""
        users = await self.list_users()
        for idx, existing in enumerate(users):
            if existing.username == user.username:
                users[idx] = user
                break
        else:
            users.append(user)
        await self.save_users(users)
