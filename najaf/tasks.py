"""
Celery Tasks
Background tasks for exporting the order ledger.
"""

import logging
import time
from datetime import datetime

from pydantic import TypeAdapter

from najaf.celery_worker import celery_app
from najaf.schemas import Order
from najaf.services.excel_manager import ExcelManager

logger = logging.getLogger(__name__)

_orders_adapter = TypeAdapter(list[Order])


@celery_app.task(
    bind=True,
    max_retries=3,
    default_retry_delay=5,
    autoretry_for=(OSError,),
    retry_backoff=True
)
def export_orders_ledger(self, orders_data: list) -> dict:
    """
    Export the order list to the Excel ledger.

    Args:
        orders_data: Orders in their stored (camelCase JSON) form

    Returns:
        dict: Result of the export operation
    """
    task_id = self.request.id
    orders = _orders_adapter.validate_python(orders_data)

    logger.info(f"📋 Task {task_id}: Exporting {len(orders)} orders")
    start_time = time.time()

    result = ExcelManager().export_orders(orders)

    elapsed = round(time.time() - start_time, 3)
    result['task_id'] = task_id
    result['processing_time_seconds'] = elapsed

    if result['success']:
        logger.info(f"✅ Task {task_id}: Ledger written in {elapsed}s")
    else:
        logger.warning(f"⚠️ Task {task_id}: Ledger export failed - {result['message']}")

    return result


@celery_app.task
def health_check() -> dict:
    """
    Simple health check task to verify Celery is working.
    """
    return {
        'status': 'healthy',
        'worker': 'celery',
        'timestamp': datetime.now().isoformat()
    }
