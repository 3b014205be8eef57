# storefront/data/store.py
"""
Adapter persystencji: nazwane rekordy JSON (users, categories, cart, ...).

Dwa warianty z tym samym kontraktem:
- LocalStore  - synchroniczny, tabela `records` przez SQLAlchemy
- RemoteStore - asynchroniczny, klient zdalnego API key-value (httpx)

Oba sa "fail soft": blad transportu konczy sie logiem, odczyt zwraca
wartosc domyslna, zapis przepada. Nic nie jest ponawiane.

fetch(key) to scisla wersja odczytu dla sciezek read-modify-write:
brak rekordu -> None, blad storage -> PersistenceError.
"""
import copy
import inspect
import json
from typing import Any, Dict

import httpx
from sqlalchemy.exc import SQLAlchemyError

from storefront.data.database import SessionLocal, init_db
from storefront.data.models.record import RecordModel
from storefront.domain.errors import PersistenceError
from storefront.utils.settings import REMOTE_API_URL, REMOTE_TIMEOUT, STORE_BACKEND
from storefront.utils.logging import get_logger

logger = get_logger(__name__)

USERS = "users"
CATEGORIES = "categories"
CART = "cart"
ORDERS = "orders"
BANNERS = "banners"
ADMIN_USER = "adminUser"
ADMIN_LOGGED_IN = "adminLoggedIn"
LOGGED_IN_USER = "loggedInUser"

DEFAULTS: Dict[str, Any] = {
    USERS: [],
    CATEGORIES: None,
    CART: [],
    ORDERS: [],
    BANNERS: [],
    ADMIN_USER: None,
    ADMIN_LOGGED_IN: "false",
    LOGGED_IN_USER: None,
}


def default_for(key: str) -> Any:
    # kopia, zeby nikt nie zmodyfikowal wspoldzielonej listy
    return copy.deepcopy(DEFAULTS.get(key))


async def resolve(result: Any) -> Any:
    """Await the adapter result when it came from the async variant."""
    if inspect.isawaitable(result):
        return await result
    return result


class StoreAdapter:
    """
    fetch(key)           -> wartosc, None gdy brak rekordu, PersistenceError przy bledzie
    read(key)            -> wartosc albo domyslna dla klucza (fail soft)
    write(key, value)    -> nadpisuje caly rekord, None usuwa rekord
    write_many(records)  -> kilka rekordow naraz
    """

    def fetch(self, key: str):
        raise NotImplementedError

    def read(self, key: str):
        raise NotImplementedError

    def write(self, key: str, value: Any):
        raise NotImplementedError

    def write_many(self, records: Dict[str, Any]):
        raise NotImplementedError


class LocalStore(StoreAdapter):
    def __init__(self, session_factory=None):
        self.session_factory = session_factory or SessionLocal

    def fetch(self, key: str) -> Any:
        db = self.session_factory()
        try:
            row = db.get(RecordModel, key)
            return None if row is None else row.value
        except SQLAlchemyError as e:
            raise PersistenceError(f"Read of '{key}' failed: {e}") from e
        finally:
            db.close()

    def _commit(self, records: Dict[str, Any]) -> None:
        db = self.session_factory()
        try:
            for key, value in records.items():
                row = db.get(RecordModel, key)
                if value is None:
                    if row is not None:
                        db.delete(row)
                elif row is not None:
                    row.value = value
                else:
                    db.add(RecordModel(key=key, value=value))
            # jedna transakcja na wszystkie rekordy
            db.commit()
        except SQLAlchemyError as e:
            db.rollback()
            raise PersistenceError(f"Write of {list(records)} failed: {e}") from e
        finally:
            db.close()

    def read(self, key: str) -> Any:
        try:
            value = self.fetch(key)
        except PersistenceError as e:
            logger.error(f"{e} - returning default")
            return default_for(key)
        return default_for(key) if value is None else value

    def write(self, key: str, value: Any) -> None:
        self.write_many({key: value})

    def write_many(self, records: Dict[str, Any]) -> None:
        try:
            self._commit(records)
        except PersistenceError as e:
            logger.error(f"{e} - write dropped")
            return
        logger.debug(f"Persisted {list(records)}")


class RemoteStore(StoreAdapter):
    """
    Client of the remote key-value API:
      GET  /api/data?type=<key>  -> JSON (or [] on miss)
      POST /api/data?type=<key>  -> {"success": true}

    The API cannot tell a missing key from a stored []. For keys whose
    default is not a list, [] therefore reads back as a miss: an emptied
    `categories` record is indistinguishable from a never-seeded one and
    the catalog gets seeded again.
    """

    def __init__(
        self,
        base_url: str | None = None,
        timeout: float | None = None,
        transport: httpx.AsyncBaseTransport | None = None,
    ):
        self.base_url = (base_url or REMOTE_API_URL).rstrip("/")
        self.timeout = timeout if timeout is not None else REMOTE_TIMEOUT
        self.transport = transport

    def _client(self) -> httpx.AsyncClient:
        return httpx.AsyncClient(
            base_url=self.base_url,
            timeout=self.timeout,
            transport=self.transport,
        )

    async def fetch(self, key: str) -> Any:
        try:
            async with self._client() as client:
                resp = await client.get("/api/data", params={"type": key})
                resp.raise_for_status()
                value = resp.json()
        except (httpx.HTTPError, ValueError) as e:
            raise PersistenceError(f"GET {key} failed: {e}") from e

        # API zwraca [] gdy rekordu nie ma
        if value == [] and not isinstance(DEFAULTS.get(key), list):
            return None
        return value

    async def _send(self, key: str, value: Any) -> None:
        try:
            async with self._client() as client:
                resp = await client.post(
                    "/api/data",
                    params={"type": key},
                    content=json.dumps(value),
                    headers={"Content-Type": "application/json"},
                )
                resp.raise_for_status()
        except httpx.HTTPError as e:
            raise PersistenceError(f"POST {key} failed: {e}") from e

    async def read(self, key: str) -> Any:
        try:
            value = await self.fetch(key)
        except PersistenceError as e:
            logger.error(f"{e} - returning default")
            return default_for(key)
        return default_for(key) if value is None else value

    async def write(self, key: str, value: Any) -> None:
        try:
            await self._send(key, value)
        except PersistenceError as e:
            logger.error(f"{e} - write dropped")

    async def write_many(self, records: Dict[str, Any]) -> None:
        # API nie ma zapisu wsadowego - kolejne POSTy, rozjazd naprawia reconcile
        failed = []
        for key, value in records.items():
            try:
                await self._send(key, value)
            except PersistenceError as e:
                logger.error(f"{e} - write dropped")
                failed.append(key)

        if failed and len(failed) < len(records):
            logger.warning(
                f"Partial write: {failed} not persisted, records may diverge until reconciliation"
            )


def build_store(backend: str | None = None) -> StoreAdapter:
    backend = (backend or STORE_BACKEND).lower()

    if backend == "remote":
        logger.info(f"Using remote store at {REMOTE_API_URL}")
        return RemoteStore()

    if backend == "local":
        init_db()
        logger.info("Using local store")
        return LocalStore()

    raise ValueError(f"Unknown store backend: {backend}")
