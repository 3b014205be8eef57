# storefront/repos/admin_repo.py
from storefront.data.store import ADMIN_USER, StoreAdapter, resolve
from storefront.domain.schemas import AdminAccount


class AdminRepo:
    def __init__(self, store: StoreAdapter):
        self.store = store

    async def get_admin(self) -> AdminAccount | None:
        raw = await resolve(self.store.read(ADMIN_USER))
        if not raw:
            return None
        return AdminAccount.model_validate(raw)

    async def save_admin(self, admin: AdminAccount) -> None:
        await resolve(self.store.write(ADMIN_USER, admin.to_json()))
