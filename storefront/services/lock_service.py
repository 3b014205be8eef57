# storefront/services/lock_service.py
import math
import uuid
from contextlib import asynccontextmanager

import redis.asyncio as redis

from storefront.domain.errors import ConcurrentUpdate
from storefront.utils.settings import (
    LOCK_TTL_MARGIN_SECONDS,
    ORDERS_LOCK_TTL_SECONDS,
    REDIS_URL,
    REMOTE_TIMEOUT,
)
from storefront.utils.logging import get_logger

logger = get_logger(__name__)

#LUA porownaj i usun, atomicity
_RELEASE_LUA = """
if redis.call('GET', KEYS[1]) == ARGV[1] then
    return redis.call('DEL', KEYS[1])
else
    return 0
end
"""

#LUA porownaj i przedluz - przedluza tylko wlasciciel
_EXTEND_LUA = """
if redis.call('GET', KEYS[1]) == ARGV[1] then
    return redis.call('PEXPIRE', KEYS[1], ARGV[2])
else
    return 0
end
"""

#redis wykonuje skrypt lua atomowo, nie da sie wcisnac miedzy GET a DEL
#wiec lock zdejmie tylko ten kto go zalozyl

# sekcja krytyczna zamowien: 2x GET (users, orders) + 2x POST
ORDERS_SECTION_REQUESTS = 4


def orders_lock_ttl(timeout: float = REMOTE_TIMEOUT) -> int:
    """Seconds the `orders` lock must outlive the slowest critical section."""
    if ORDERS_LOCK_TTL_SECONDS:
        return ORDERS_LOCK_TTL_SECONDS
    return math.ceil(ORDERS_SECTION_REQUESTS * timeout) + LOCK_TTL_MARGIN_SECONDS


class HeldLock:
    """Handle of an acquired record lock."""

    def __init__(self, service: "LockService", record: str, owner: str, ttl: int):
        self.service = service
        self.record = record
        self.owner = owner
        self.ttl = ttl

    async def refresh(self) -> None:
        """
        Przedluza TTL przed zapisem. Jesli lock wygasl i przejal go ktos inny,
        zapis nie moze pojsc - ConcurrentUpdate.
        """
        if not await self.service.extend_record_lock(self.record, self.owner, self.ttl):
            raise ConcurrentUpdate(
                f"Lock on '{self.record}' expired before the write, operation aborted"
            )


class NoLock:
    """Stand-in handle when no Redis is configured."""

    async def refresh(self) -> None:
        return None


class LockService:
    """
    Blokada pojedynczego pisarza na rekord storage (np. `orders`).
    Bez Redisa (pusty REDIS_URL) serwisy dzialaja bez blokad - last write wins.
    """

    def __init__(self, url: str | None = None, client: redis.Redis | None = None):
        self.redis = client or redis.Redis.from_url(
            url or REDIS_URL,
            decode_responses=True,
        )

    async def acquire_record_lock(self, record: str, owner: str, ttl: int) -> bool:
        key = f"record:{record}:lock"
        logger.info(f"Acquire lock {key} for {owner} (ttl {ttl}s)")
        #SET record:orders:lock "<owner>" NX EX <ttl>
        return bool(
            await self.redis.set(
                name=key,
                value=owner,
                nx=True, #tylko jesli klucz nie istnieje
                ex=ttl, #wygasa sam gdyby proces padl w trakcie
            )
        )

    async def extend_record_lock(self, record: str, owner: str, ttl: int) -> bool:
        key = f"record:{record}:lock"
        res = await self.redis.eval(_EXTEND_LUA, 1, key, owner, ttl * 1000)
        return bool(res)

    async def release_record_lock(self, record: str, owner: str) -> bool:
        key = f"record:{record}:lock"
        logger.info(f"Release lock {key} for {owner}")
        res = await self.redis.eval(_RELEASE_LUA, 1, key, owner)
        return bool(res)

    @asynccontextmanager
    async def record_lock(self, record: str, ttl: int | None = None):
        ttl = ttl or orders_lock_ttl()
        owner = uuid.uuid4().hex
        if not await self.acquire_record_lock(record, owner, ttl):
            raise ConcurrentUpdate(
                f"Record '{record}' is being modified by another operation, try again"
            )
        try:
            yield HeldLock(self, record, owner, ttl)
        finally:
            await self.release_record_lock(record, owner)


def build_lock_service() -> LockService | None:
    if not REDIS_URL:
        return None
    return LockService(REDIS_URL)
