"""
Order Data Verification Script

Verifies integrity of the persisted order list and, when present, the
Excel ledger exported from it.
Run from project root: python scripts/verify.py

Author: Khalil_Bannouri
Version: 1.0.0
"""

import json
import os
import sys
from datetime import datetime

# Add parent directory to path
sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

import pandas as pd

from najaf.core.config import get_settings

settings = get_settings()
ORDERS_FILE = settings.data_path / "orders.json"
LEDGER_FILE = settings.data_path / "orders_ledger.xlsx"


def load_orders_frame() -> pd.DataFrame:
    """One row per persisted order, with the sum recomputed from its items."""
    records = json.loads(ORDERS_FILE.read_text(encoding="utf-8"))
    rows = []
    for order in records:
        items = order.get("items", [])
        rows.append({
            "id": order.get("id"),
            "status": order.get("status"),
            "customer_name": order.get("customerName"),
            "total_amount": order.get("totalAmount"),
            "items_total": sum(i.get("price", 0) * i.get("quantity", 0) for i in items),
            "item_count": sum(i.get("quantity", 0) for i in items),
            "is_new": order.get("isNew", False),
        })
    return pd.DataFrame(rows)


def verify_orders() -> bool:
    """Verify the persisted order list."""

    print("=" * 60)
    print("🔍 ORDER VERIFICATION REPORT")
    print("=" * 60)
    print(f"⏰ Timestamp: {datetime.now().strftime('%Y-%m-%d %H:%M:%S')}")
    print(f"📄 File: {ORDERS_FILE}")
    print("=" * 60)

    if not ORDERS_FILE.exists():
        print("\n❌ Orders file not found!")
        print("   Start the server with STORAGE_BACKEND=file and place some orders")
        return False

    try:
        df = load_orders_frame()
        print(f"\n✅ File loaded successfully!")
    except (ValueError, OSError) as e:
        print(f"\n❌ Could not read orders file: {e}")
        return False

    ok = True

    print(f"\n📊 STATISTICS:")
    print(f"   Total Orders: {len(df)}")
    if len(df) == 0:
        return True
    for status, count in df["status"].value_counts().items():
        print(f"   {status}: {count}")

    # Check duplicates
    duplicates = df["id"].duplicated().sum()
    if duplicates > 0:
        print(f"\n⚠️ {duplicates} duplicate order IDs found!")
        ok = False
    else:
        print(f"\n✅ No duplicate order IDs")

    # Check totals
    mismatched = df[(df["total_amount"] - df["items_total"]).abs() > 0.005]
    if len(mismatched) > 0:
        print(f"⚠️ {len(mismatched)} orders whose total does not match their items")
        ok = False
    else:
        print(f"✅ All order totals match their items")

    empty = (df["item_count"] == 0).sum()
    if empty > 0:
        print(f"⚠️ {empty} orders without items")

    print(f"\n💰 REVENUE:")
    print(f"   Total: {df['total_amount'].sum():.2f}")
    print(f"   Average: {df['total_amount'].mean():.2f}")

    print(f"\n📋 RECENT ORDERS:")
    print("-" * 60)
    print(df[["id", "customer_name", "total_amount", "status"]].head(5).to_string(index=False))

    # Ledger
    if LEDGER_FILE.exists():
        ledger = pd.read_excel(LEDGER_FILE, engine="openpyxl", dtype={"order_id": str})
        missing = set(df["id"]) - set(ledger["order_id"])
        print(f"\n📒 Ledger: {len(ledger)} rows")
        if missing:
            print(f"⚠️ {len(missing)} orders not yet in the ledger (export again)")
        else:
            print(f"✅ Ledger covers every order")

    print("\n" + "=" * 60)
    print("✅ VERIFICATION COMPLETE" if ok else "⚠️ VERIFICATION FOUND PROBLEMS")
    print("=" * 60)

    return ok


if __name__ == "__main__":
    sys.exit(0 if verify_orders() else 1)
