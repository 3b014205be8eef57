# storefront/tasks/reconcile.py
import asyncio

from storefront.celery_worker import celery_app
from storefront.data.store import build_store
from storefront.services.lock_service import build_lock_service
from storefront.services.order_service import OrderService
from storefront.utils.logging import get_logger

logger = get_logger(__name__)


@celery_app.task(name="storefront.tasks.reconcile.reconcile_orders_task")
def reconcile_orders_task():
    logger.info("Reconcile orders task started")

    service = OrderService(build_store(), lock_service=build_lock_service())
    fixed = asyncio.run(service.reconcile_statuses())

    logger.info(f"Reconcile orders task finished, {fixed} fix(es)")
    return {"fixed": fixed}
