# storefront/repos/session_repo.py
from storefront.data.store import ADMIN_LOGGED_IN, LOGGED_IN_USER, StoreAdapter, resolve


class SessionRepo:
    """
    Stan sesji na poziomie procesu: zalogowany uzytkownik i flaga admina.
    Bez wygasania.
    """

    def __init__(self, store: StoreAdapter):
        self.store = store

    async def get_logged_in_user(self) -> str | None:
        username = await resolve(self.store.read(LOGGED_IN_USER))
        return username or None

    async def set_logged_in_user(self, username: str | None) -> None:
        # None usuwa rekord
        await resolve(self.store.write(LOGGED_IN_USER, username or None))

    async def is_admin_logged_in(self) -> bool:
        return await resolve(self.store.read(ADMIN_LOGGED_IN)) == "true"

    async def set_admin_logged_in(self, flag: bool) -> None:
        await resolve(self.store.write(ADMIN_LOGGED_IN, "true" if flag else "false"))
