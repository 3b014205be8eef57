# storefront/services/order_service.py
import threading
import time
from contextlib import nullcontext
from datetime import datetime
from decimal import Decimal
from typing import List

from storefront.data.store import ORDERS, USERS, StoreAdapter, resolve
from storefront.domain.errors import (
    InvalidTransition,
    NotAuthenticated,
    UserNotFound,
    ValidationError,
)
from storefront.domain.money import format_money
from storefront.domain.schemas import Order, OrderLine, OrderStatus
from storefront.repos.cart_repo import CartRepo
from storefront.repos.order_repo import OrderRepo
from storefront.repos.session_repo import SessionRepo
from storefront.repos.user_repo import UserRepo
from storefront.services.catalog_service import CatalogService, find_item
from storefront.services.lock_service import LockService, NoLock
from storefront.services.notification_service import NotificationService
from storefront.utils.settings import ALLOW_TERMINAL_STATUS_CHANGE
from storefront.utils.logging import get_logger

logger = get_logger(__name__)


class OrderIdAllocator:
    """Millisecond timestamps, strictly increasing within the process."""

    def __init__(self, clock=time.time_ns):
        self._clock = clock
        self._last = 0
        self._lock = threading.Lock()

    def next_id(self) -> int:
        with self._lock:
            candidate = self._clock() // 1_000_000
            self._last = max(candidate, self._last + 1)
            return self._last


_order_ids = OrderIdAllocator()


def format_order_date(moment: datetime) -> str:
    # np. 10/19/2026, 2:05:09 PM
    hour = moment.hour % 12 or 12
    suffix = "AM" if moment.hour < 12 else "PM"
    return (
        f"{moment.month}/{moment.day}/{moment.year}, "
        f"{hour}:{moment.minute:02d}:{moment.second:02d} {suffix}"
    )


def parse_status(value) -> OrderStatus:
    try:
        return OrderStatus(value)
    except ValueError:
        raise ValidationError(f"Unknown order status: {value}")


class OrderService:
    """
    Checkout (koszyk -> zamowienie) i cykl zycia statusu zamowienia.

    Zamowienie istnieje w dwoch miejscach: w historii uzytkownika i w globalnym
    ledgerze. Oba zapisy ida jednym write_many (na LocalStore = jedna transakcja),
    a przy skonfigurowanym Redisie pod blokada rekordu `orders`.
    Odczyty w sekcji krytycznej sa scisle (fetch): nieczytelny storage przerywa
    operacje PersistenceError zamiast nadpisac rekordy pustymi danymi.
    """

    def __init__(
        self,
        store: StoreAdapter,
        notification_service: NotificationService | None = None,
        lock_service: LockService | None = None,
        id_allocator: OrderIdAllocator | None = None,
        allow_terminal_change: bool | None = None,
    ):
        self.store = store
        self.users = UserRepo(store)
        self.orders = OrderRepo(store)
        self.cart = CartRepo(store)
        self.sessions = SessionRepo(store)
        self.catalog = CatalogService(store)
        self.notification_service = notification_service or NotificationService()
        self.lock_service = lock_service
        self.id_allocator = id_allocator or _order_ids
        self.allow_terminal_change = (
            ALLOW_TERMINAL_STATUS_CHANGE if allow_terminal_change is None else allow_terminal_change
        )

    def _orders_lock(self):
        if self.lock_service is None:
            return nullcontext(NoLock())
        return self.lock_service.record_lock(ORDERS)

    # =====================================================
    # CHECKOUT
    # =====================================================
    async def checkout(self) -> Order | None:
        """
        1. wymaga zalogowanego uzytkownika (NotAuthenticated)
        2. pusty koszyk -> nic sie nie dzieje
        3. snapshot nazwy/ceny kazdej linii, total
        4. dopisanie do historii i ledgera, czyszczenie koszyka
        """
        username = await self.sessions.get_logged_in_user()
        if not username:
            raise NotAuthenticated("Please log in to complete your purchase.")

        lines = await self.cart.get_lines()
        if not lines:
            logger.info(f"Checkout for {username} skipped, cart is empty")
            return None

        # scisly odczyt: zamowienie nie moze wycenic sie z katalogu demo
        categories = await self.catalog.load_for_update()

        async with self._orders_lock() as lock:
            users = await self.users.fetch_users()
            user = next((u for u in users if u.username == username), None)
            if user is None:
                raise UserNotFound(f"User {username} not found")

            order_lines = []
            for line in lines:
                item = find_item(categories, line.category_id, line.item_id)
                if item is None:
                    logger.warning(
                        f"Cart line {line.category_id}.{line.item_id} no longer in catalog, skipped"
                    )
                    continue
                # cena kopiowana w momencie zakupu, nie referencja do katalogu
                order_lines.append(
                    OrderLine(name=item.name, quantity=line.quantity, price=item.price)
                )

            if not order_lines:
                logger.info(f"Checkout for {username} skipped, no cart line resolves")
                return None

            total = sum((l.subtotal for l in order_lines), Decimal("0.00"))
            order = Order(
                id=self.id_allocator.next_id(),
                date=format_order_date(datetime.now()),
                user=username,
                items=order_lines,
                total=format_money(total),
                status=OrderStatus.PENDING,
            )

            user.history.append(order)
            ledger = await self.orders.fetch_orders()
            ledger.append(order.model_copy(deep=True))

            await lock.refresh()
            await resolve(
                self.store.write_many(
                    {
                        USERS: self.users.dump(users),
                        ORDERS: self.orders.dump(ledger),
                    }
                )
            )

        await self.cart.clear()

        logger.info(f"Order {order.id} placed by {username}, total {order.total}")
        self.notification_service.send_order_notification(username, order.id)

        return order

    # =====================================================
    # QUERY
    # =====================================================
    async def history(self, username: str) -> List[Order]:
        """User's orders, newest first."""
        user = await self.users.get_user(username)
        if user is None:
            raise UserNotFound(f"User {username} not found")
        return sorted(user.history, key=lambda o: o.id, reverse=True)

    async def list_orders(self, status: str | None = None) -> List[Order]:
        orders = await self.orders.list_orders()
        if status:
            wanted = parse_status(status)
            orders = [o for o in orders if o.status == wanted]
        return orders

    # =====================================================
    # STATUS
    # =====================================================
    def _check_transition(self, current: OrderStatus, new: OrderStatus) -> None:
        if self.allow_terminal_change or current == new:
            return
        if current != OrderStatus.PENDING:
            raise InvalidTransition(current.value, new.value)

    async def set_status(self, order_id: int, new_status) -> Order | None:
        """
        Ustawia status w ledgerze i w kazdej kopii w historiach uzytkownikow.
        Nieznane id -> None (no-op).
        """
        status = parse_status(new_status)

        async with self._orders_lock() as lock:
            ledger = await self.orders.fetch_orders()
            order = next((o for o in ledger if o.id == order_id), None)
            if order is None:
                logger.info(f"Status change skipped, order {order_id} not in ledger")
                return None

            self._check_transition(order.status, status)
            order.status = status

            users = await self.users.fetch_users()
            touched = False
            for user in users:
                for entry in user.history:
                    if entry.id == order_id:
                        entry.status = status
                        touched = True

            records = {ORDERS: self.orders.dump(ledger)}
            if touched:
                records[USERS] = self.users.dump(users)
            else:
                logger.warning(f"Order {order_id} has no copy in any user history")

            await lock.refresh()
            await resolve(self.store.write_many(records))

        logger.info(f"Order {order_id} status -> {status.value}")
        return order

    async def reconcile_statuses(self) -> int:
        """
        Naprawa rozjazdu ledger <-> historie. Ledger jest zrodlem prawdy dla
        statusu; zamowienia obecne tylko po jednej stronie sa dopisywane do drugiej.
        Zwraca liczbe poprawek.
        """
        async with self._orders_lock() as lock:
            ledger = await self.orders.fetch_orders()
            users = await self.users.fetch_users()
            by_id = {o.id: o for o in ledger}
            fixed = 0
            ledger_changed = users_changed = False

            for user in users:
                for entry in user.history:
                    ledger_entry = by_id.get(entry.id)
                    if ledger_entry is None:
                        copy = entry.model_copy(deep=True)
                        if copy.user is None:
                            copy.user = user.username
                        ledger.append(copy)
                        by_id[copy.id] = copy
                        ledger_changed = True
                        fixed += 1
                    elif entry.status != ledger_entry.status:
                        entry.status = ledger_entry.status
                        users_changed = True
                        fixed += 1

            users_by_name = {u.username: u for u in users}
            for order in ledger:
                owner = users_by_name.get(order.user) if order.user else None
                if owner is not None and all(h.id != order.id for h in owner.history):
                    owner.history.append(order.model_copy(deep=True))
                    users_changed = True
                    fixed += 1

            records = {}
            if ledger_changed:
                records[ORDERS] = self.orders.dump(ledger)
            if users_changed:
                records[USERS] = self.users.dump(users)
            if records:
                await lock.refresh()
                await resolve(self.store.write_many(records))

        if fixed:
            logger.info(f"Reconciliation fixed {fixed} order record(s)")
        return fixed
