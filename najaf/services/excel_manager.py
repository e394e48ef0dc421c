"""
Excel Order Ledger with Concurrency Control

Thread-safe export of the shared order list to an Excel workbook, so the
restaurant keeps a spreadsheet copy of every order for bookkeeping.

The export rewrites the whole ledger from the current order list; it runs
in the Celery worker (see najaf.tasks) or inline from scripts.

Author: Khalil_Bannouri
Version: 1.0.0
"""

import logging
from datetime import datetime
from pathlib import Path
from typing import Any, Iterable, Optional

import pandas as pd
from filelock import FileLock, Timeout

from najaf.core.config import get_settings
from najaf.models import PAYMENT_LABELS, STATUS_LABELS
from najaf.schemas import Order

logger = logging.getLogger(__name__)

LEDGER_FILENAME = "orders_ledger.xlsx"


class ExcelManager:
    """Thread-safe Excel ledger writer."""

    LEDGER_COLUMNS = [
        "order_id",
        "order_number",
        "created_at",
        "customer_name",
        "customer_phone",
        "customer_address",
        "payment_method",
        "status",
        "items",
        "total_amount",
        "exported_at",
    ]

    def __init__(self, data_dir: Optional[Path] = None, lock_timeout: Optional[float] = None):
        settings = get_settings()
        self.data_dir = Path(data_dir) if data_dir is not None else settings.data_path
        self.lock_timeout = lock_timeout if lock_timeout is not None else settings.storage_lock_timeout

    @property
    def ledger_path(self) -> Path:
        return self.data_dir / LEDGER_FILENAME

    @property
    def lock_path(self) -> Path:
        return self.data_dir / f"{LEDGER_FILENAME}.lock"

    def _ensure_data_dir(self) -> None:
        """Create data directory if needed."""
        if not self.data_dir.exists():
            self.data_dir.mkdir(parents=True, exist_ok=True)
            logger.info(f"Created data directory: {self.data_dir}")

    @staticmethod
    def _items_text(order: Order) -> str:
        parts = []
        for item in order.items:
            text = f"{item.name} x{item.quantity}"
            if item.notes:
                text += f" ({item.notes})"
            parts.append(text)
        return "، ".join(parts)

    def _row(self, order: Order, export_time: str) -> dict[str, Any]:
        return {
            "order_id": order.id,
            "order_number": order.short_number,
            "created_at": datetime.fromtimestamp(order.created_at / 1000).isoformat(),
            "customer_name": order.customer_name,
            "customer_phone": order.customer_phone,
            "customer_address": order.customer_address,
            "payment_method": PAYMENT_LABELS[order.payment_method],
            "status": STATUS_LABELS[order.status],
            "items": self._items_text(order),
            "total_amount": order.total_amount,
            "exported_at": export_time,
        }

    def export_orders(self, orders: Iterable[Order]) -> dict[str, Any]:
        """
        Write all orders to the ledger with file locking.

        Raises:
            OSError: If the ledger or its lock cannot be written (the Celery
                task retries on it)
        """
        self._ensure_data_dir()

        orders = list(orders)
        result = {
            "success": False,
            "message": "",
            "rows": 0,
            "exported_at": None,
        }

        try:
            lock = FileLock(str(self.lock_path), timeout=self.lock_timeout)

            with lock:
                logger.debug(f"Lock acquired for ledger ({len(orders)} orders)")

                export_time = datetime.now().isoformat()
                df = pd.DataFrame(
                    [self._row(order, export_time) for order in orders],
                    columns=self.LEDGER_COLUMNS,
                )
                df.to_excel(str(self.ledger_path), index=False, engine="openpyxl")

                logger.info(f"📊 Ledger exported: {len(df)} orders → {self.ledger_path}")

                result["success"] = True
                result["message"] = f"{len(df)} orders exported"
                result["rows"] = len(df)
                result["exported_at"] = export_time

            logger.debug("Lock released for ledger")

        except Timeout:
            result["message"] = f"Lock timeout ({self.lock_timeout}s)"
            logger.error("Lock timeout exporting ledger")

        except OSError:
            logger.exception("I/O error exporting ledger")
            raise

        except Exception as e:
            result["message"] = str(e)
            logger.exception("Error exporting ledger")

        return result

    def read_ledger(self) -> list[dict[str, Any]]:
        """Get all ledger rows."""
        if not self.ledger_path.exists():
            return []

        try:
            df = pd.read_excel(self.ledger_path, engine="openpyxl", dtype={"order_id": str, "order_number": str, "customer_phone": str})
            return df.to_dict("records")
        except Exception as e:
            logger.error(f"Error reading ledger: {e}")
            return []

    def clear(self) -> bool:
        """Delete the ledger and its lock file."""
        try:
            for f in [self.ledger_path, self.lock_path]:
                if f.exists():
                    f.unlink()
            logger.info("Ledger cleared")
            return True
        except OSError as e:
            logger.error(f"Error clearing ledger: {e}")
            return False
