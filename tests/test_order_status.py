# tests/test_order_status.py
from unittest.mock import AsyncMock, MagicMock

import pytest

from storefront.domain.errors import ConcurrentUpdate, InvalidTransition, PersistenceError, ValidationError
from storefront.domain.schemas import Order, OrderStatus
from storefront.repos.order_repo import OrderRepo
from storefront.repos.user_repo import UserRepo
from storefront.services import lock_service as lock_module
from storefront.services.lock_service import ORDERS_SECTION_REQUESTS, LockService, orders_lock_ttl
from storefront.services.order_service import OrderService

from tests.conftest import register_payload


async def place_order(cart, users, orders, username="alice"):
    await users.register(register_payload(username))
    await cart.add_to_cart(1, 1)
    return await orders.checkout()


@pytest.mark.anyio
async def test_status_propagates_to_ledger_and_history(cart, users, orders):
    order = await place_order(cart, users, orders)

    updated = await orders.set_status(order.id, "shipped")

    assert updated.status == OrderStatus.SHIPPED
    assert (await orders.list_orders())[0].status == OrderStatus.SHIPPED
    assert (await orders.history("alice"))[0].status == OrderStatus.SHIPPED


@pytest.mark.anyio
async def test_unknown_order_is_noop(orders):
    assert await orders.set_status(12345, "shipped") is None


@pytest.mark.anyio
async def test_unknown_status_rejected(cart, users, orders):
    order = await place_order(cart, users, orders)

    with pytest.raises(ValidationError):
        await orders.set_status(order.id, "lost")


@pytest.mark.anyio
async def test_terminal_status_is_final(cart, users, orders):
    order = await place_order(cart, users, orders)
    await orders.set_status(order.id, "cancelled")

    # ten sam status jeszcze raz jest dozwolony
    await orders.set_status(order.id, "cancelled")
    with pytest.raises(InvalidTransition):
        await orders.set_status(order.id, "shipped")

    assert (await orders.history("alice"))[0].status == OrderStatus.CANCELLED


@pytest.mark.anyio
async def test_terminal_change_allowed_when_configured(store, cart, users, orders, notifier):
    order = await place_order(cart, users, orders)
    await orders.set_status(order.id, "shipped")

    relaxed = OrderService(store, notification_service=notifier, allow_terminal_change=True)
    await relaxed.set_status(order.id, "cancelled")

    assert (await orders.history("alice"))[0].status == OrderStatus.CANCELLED


@pytest.mark.anyio
async def test_list_orders_filters_by_status(cart, users, orders):
    first = await place_order(cart, users, orders, "alice")
    await place_order(cart, users, orders, "bob")
    await orders.set_status(first.id, "shipped")

    shipped = await orders.list_orders("shipped")
    assert [o.id for o in shipped] == [first.id]
    assert len(await orders.list_orders()) == 2


@pytest.mark.anyio
async def test_reconcile_repairs_diverged_records(store, cart, users, orders):
    order = await place_order(cart, users, orders)
    order_repo, user_repo = OrderRepo(store), UserRepo(store)

    # rozjazd: ledger shipped, historia pending
    ledger = await order_repo.list_orders()
    ledger[0].status = OrderStatus.SHIPPED
    await order_repo.save_orders(ledger)

    # zamowienie tylko w historii
    alice = await user_repo.get_user("alice")
    orphan = Order(id=1, date="1/1/2026, 9:00:00 AM", items=[], total="0", status="pending")
    alice.history.append(orphan)
    await user_repo.save_user(alice)

    fixed = await orders.reconcile_statuses()

    assert fixed == 2
    ledger = {o.id: o for o in await order_repo.list_orders()}
    assert ledger[1].user == "alice"
    history = {o.id: o for o in await orders.history("alice")}
    assert history[order.id].status == OrderStatus.SHIPPED
    assert await orders.reconcile_statuses() == 0


@pytest.mark.anyio
async def test_reconcile_adds_ledger_only_orders_to_history(store, cart, users, orders):
    await users.register(register_payload("alice"))
    order_repo = OrderRepo(store)
    await order_repo.save_orders(
        [Order(id=5, date="1/1/2026, 9:00:00 AM", user="alice", total="1", status="shipped")]
    )

    assert await orders.reconcile_statuses() == 1
    assert [o.id for o in await orders.history("alice")] == [5]


def make_lock_service(acquired=True, still_owner=True):
    client = MagicMock()
    client.set = AsyncMock(return_value=acquired)

    async def run_script(script, numkeys, key, owner, *args):
        if "PEXPIRE" in script:
            return 1 if still_owner else 0
        return 1

    client.eval = AsyncMock(side_effect=run_script)
    return LockService(client=client), client


@pytest.mark.anyio
async def test_set_status_runs_under_record_lock(store, cart, users, orders, notifier):
    order = await place_order(cart, users, orders)
    lock_service, client = make_lock_service()
    locked = OrderService(store, notification_service=notifier, lock_service=lock_service)

    await locked.set_status(order.id, "shipped")

    args = client.set.call_args.kwargs
    assert args["name"] == "record:orders:lock"
    assert args["nx"] is True
    assert args["ex"] == orders_lock_ttl()

    extend, release = client.eval.call_args_list
    assert "PEXPIRE" in extend.args[0]
    assert extend.args[2:4] == ("record:orders:lock", args["value"])
    assert extend.args[4] == args["ex"] * 1000
    assert "DEL" in release.args[0]
    assert release.args[2] == "record:orders:lock"


@pytest.mark.anyio
async def test_held_lock_raises_concurrent_update(store, cart, users, orders, notifier):
    order = await place_order(cart, users, orders)
    lock_service, client = make_lock_service(acquired=False)
    locked = OrderService(store, notification_service=notifier, lock_service=lock_service)

    with pytest.raises(ConcurrentUpdate):
        await locked.set_status(order.id, "shipped")

    client.eval.assert_not_called()
    assert (await orders.list_orders())[0].status == OrderStatus.PENDING


@pytest.mark.anyio
async def test_expired_lock_aborts_the_write(store, cart, users, orders, notifier):
    order = await place_order(cart, users, orders)
    lock_service, _ = make_lock_service(still_owner=False)
    locked = OrderService(store, notification_service=notifier, lock_service=lock_service)

    with pytest.raises(ConcurrentUpdate):
        await locked.set_status(order.id, "shipped")

    assert (await orders.list_orders())[0].status == OrderStatus.PENDING
    assert (await orders.history("alice"))[0].status == OrderStatus.PENDING


def test_lock_ttl_outlives_slowest_critical_section(monkeypatch):
    monkeypatch.setattr(lock_module, "ORDERS_LOCK_TTL_SECONDS", 0)

    for timeout in (0.5, 5, 12.5):
        assert orders_lock_ttl(timeout) > ORDERS_SECTION_REQUESTS * timeout

    monkeypatch.setattr(lock_module, "ORDERS_LOCK_TTL_SECONDS", 90)
    assert orders_lock_ttl(5) == 90


@pytest.mark.anyio
async def test_checkout_aborts_when_ledger_unreadable(flaky_store, cart, users, notifier):
    await users.register(register_payload("alice"))
    await cart.add_to_cart(1, 1)
    flaky_store.failing = {"orders"}
    service = OrderService(flaky_store, notification_service=notifier)

    with pytest.raises(PersistenceError):
        await service.checkout()

    assert (await users.current_user()).history == []
    assert len(await cart.get_lines()) == 1
    notifier.send_order_notification.assert_not_called()


@pytest.mark.anyio
async def test_status_change_aborts_when_users_unreadable(flaky_store, cart, users, orders, notifier):
    order = await place_order(cart, users, orders)
    flaky_store.failing = {"users"}
    service = OrderService(flaky_store, notification_service=notifier)

    with pytest.raises(PersistenceError):
        await service.set_status(order.id, "shipped")

    assert (await orders.list_orders())[0].status == OrderStatus.PENDING


@pytest.mark.anyio
async def test_reconcile_aborts_when_ledger_unreadable(flaky_store, cart, users, orders, notifier):
    order = await place_order(cart, users, orders)
    flaky_store.failing = {"orders"}
    service = OrderService(flaky_store, notification_service=notifier)

    with pytest.raises(PersistenceError):
        await service.reconcile_statuses()

    assert [o.id for o in await orders.list_orders()] == [order.id]
