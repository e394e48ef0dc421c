"""
Chaos Simulation Script

Opens many concurrent customer sessions against a running server, has each
one fill a cart and check out, then opens a kitchen session to see how many
of those orders actually reached the shared store.

Every session rewrites the whole order list, so under concurrency some
orders can be overwritten by another session's write. The report shows how
many were lost.

Run from project root: python scripts/simulate.py

Author: Khalil_Bannouri
Version: 1.0.0
"""

import asyncio
import sys
import random
import time
import argparse
from datetime import datetime
from typing import Any

import httpx

# Windows event loop fix
if sys.platform == "win32":
    asyncio.set_event_loop_policy(asyncio.WindowsSelectorEventLoopPolicy())

# Configuration
API_BASE_URL = "http://localhost:8001"
TOTAL_ORDERS = 20

# Sample data for random customers
FIRST_NAMES = ["علي", "محمد", "فاطمة", "سارة", "أحمد", "نورة", "خالد", "ريم", "عمر", "هند"]
DISTRICTS = ["حي النخيل", "حي الروضة", "حي العليا", "حي الملقا", "حي الصحافة"]
NOTES = [None, "بدون بصل", "حار", "صوص إضافي", None, None]


def generate_random_customer() -> dict[str, str]:
    """Generate random checkout details."""
    return {
        "name": random.choice(FIRST_NAMES),
        "phone": f"05{random.randint(10000000, 99999999)}",
        "address": f"{random.choice(DISTRICTS)}، شارع {random.randint(1, 60)}",
        "payment": random.choice(["CASH", "CARD"]),
    }


async def open_session(client: httpx.AsyncClient, role: str) -> dict[str, str]:
    """Pick a role and return headers carrying the session id."""
    response = await client.post(f"{API_BASE_URL}/api/session", json={"role": role})
    response.raise_for_status()
    return {"X-Session-Id": response.json()["session_id"]}


async def close_session(client: httpx.AsyncClient, headers: dict[str, str]) -> None:
    await client.delete(f"{API_BASE_URL}/api/session", headers=headers)


# =============================================================================
# CUSTOMER FLOW
# =============================================================================

async def place_random_order(
    client: httpx.AsyncClient,
    order_num: int,
) -> dict[str, Any]:
    """One customer session: browse, fill the cart, check out, log out."""
    start_time = time.time()

    try:
        headers = await open_session(client, "CUSTOMER")

        menu = (await client.get(f"{API_BASE_URL}/api/menu", headers=headers)).json()
        for product in random.sample(menu, k=random.randint(1, min(3, len(menu)))):
            for _ in range(random.randint(1, 3)):
                await client.post(
                    f"{API_BASE_URL}/api/cart/items",
                    json={"product_id": product["id"]},
                    headers=headers,
                )
            note = random.choice(NOTES)
            if note:
                await client.patch(
                    f"{API_BASE_URL}/api/cart/items/{product['id']}",
                    json={"notes": note},
                    headers=headers,
                )

        response = await client.post(
            f"{API_BASE_URL}/api/checkout",
            json=generate_random_customer(),
            headers=headers,
            timeout=30.0,
        )
        elapsed = round(time.time() - start_time, 3)
        await close_session(client, headers)

        if response.status_code == 201:
            order = response.json()["order"]
            return {
                "order_num": order_num,
                "success": True,
                "order_id": order["id"],
                "total": order["totalAmount"],
                "time": elapsed,
            }
        return {
            "order_num": order_num,
            "success": False,
            "error": response.text[:100],
            "time": elapsed,
        }
    except Exception as e:
        elapsed = round(time.time() - start_time, 3)
        return {
            "order_num": order_num,
            "success": False,
            "error": str(e)[:100],
            "time": elapsed,
        }


# =============================================================================
# MAIN SIMULATION RUNNER
# =============================================================================

async def run_simulation(num_orders: int = TOTAL_ORDERS) -> dict[str, Any]:
    """
    Run the chaos simulation.

    Args:
        num_orders: Number of concurrent customer sessions
    """
    print("=" * 70)
    print("🔥 CHAOS SIMULATION - CONCURRENT CUSTOMERS")
    print("=" * 70)
    print(f"📋 Customer sessions: {num_orders}")
    print(f"🎯 Target: {API_BASE_URL}")
    print(f"⏰ Started: {datetime.now().strftime('%H:%M:%S')}")
    print("=" * 70)

    start_time = time.time()

    async with httpx.AsyncClient(timeout=30.0) as client:
        kitchen = await open_session(client, "KITCHEN")
        before = (await client.get(f"{API_BASE_URL}/api/orders", headers=kitchen)).json()["total"]

        print("\n🚀 Firing customer sessions...\n")
        results = await asyncio.gather(
            *(place_random_order(client, i + 1) for i in range(num_orders))
        )

        sync = (await client.post(f"{API_BASE_URL}/api/orders/sync", headers=kitchen)).json()
        board = (await client.get(f"{API_BASE_URL}/api/orders", headers=kitchen)).json()
        chimes = (await client.get(f"{API_BASE_URL}/api/session/notifications", headers=kitchen)).json()
        await close_session(client, kitchen)

    total_time = round(time.time() - start_time, 2)

    successful = [r for r in results if r["success"]]
    failed = [r for r in results if not r["success"]]
    on_board = {entry["order"]["id"] for entry in board["orders"]}
    lost = [r for r in successful if r["order_id"] not in on_board]

    print("\n" + "=" * 70)
    print("📊 SIMULATION RESULTS")
    print("=" * 70)

    print(f"\n✅ Successful checkouts: {len(successful)}/{num_orders}")
    print(f"❌ Failed checkouts: {len(failed)}/{num_orders}")
    print(f"⏱️  Total Time: {total_time}s")

    print(f"\n🍳 Kitchen board: {before} → {board['total']} orders (sync replaced: {sync['replaced']})")
    print(f"   Unseen pending: {board['unseen_pending']}")
    print(f"   Chimes queued: {len(chimes['events'])}")
    print(f"   Orders overwritten by concurrent writes: {len(lost)}")

    if successful:
        avg_time = round(sum(r["time"] for r in successful) / len(successful), 3)
        total_revenue = sum(r.get("total", 0) for r in successful)

        print(f"\n📈 Performance Metrics:")
        print(f"   Average Session: {avg_time}s")
        print(f"   Fastest: {min(r['time'] for r in successful)}s")
        print(f"   Slowest: {max(r['time'] for r in successful)}s")
        print(f"   💰 Total Revenue: {total_revenue:.2f}")

    if failed:
        print(f"\n⚠️  Failed Checkout Details (showing first 5):")
        for f in failed[:5]:
            print(f"   Session #{f['order_num']}: {f.get('error', 'Unknown error')}")

    print("\n" + "=" * 70)
    print("🔍 VERIFICATION STEPS")
    print("=" * 70)
    print("1. POST /api/dashboard/export as ADMIN and check the Celery terminal")
    print("2. Run: python scripts/verify.py")
    print("=" * 70)

    return {
        "total": num_orders,
        "successful": len(successful),
        "failed": len(failed),
        "lost": len(lost),
        "total_time": total_time,
        "results": results,
    }


async def test_single_flows() -> bool:
    """Check the server answers before the chaos run."""
    print("\n" + "=" * 70)
    print("🧪 TESTING INDIVIDUAL FLOWS")
    print("=" * 70)

    async with httpx.AsyncClient(timeout=10.0) as client:
        print("\n1️⃣ Health Check...")
        response = await client.get(f"{API_BASE_URL}/health")
        if response.status_code != 200:
            print(f"   ❌ Failed: {response.text}")
            return False
        data = response.json()
        print(f"   ✅ Status: {data.get('status')}")
        print(f"   Storage: {data.get('storage')}")
        print(f"   Redis: {data.get('redis')}")

        print("\n2️⃣ Single Customer Order...")
        result = await place_random_order(client, 0)
        if result["success"]:
            print(f"   ✅ Order {result['order_id'][-4:]} placed, total {result['total']}")
        else:
            print(f"   ❌ Failed: {result['error']}")
            return False

    print("\n" + "=" * 70)
    return True


if __name__ == "__main__":
    parser = argparse.ArgumentParser(description="Chaos Simulation Script")
    parser.add_argument("--orders", type=int, default=TOTAL_ORDERS, help="Number of customer sessions")
    parser.add_argument("--skip-tests", action="store_true", help="Skip individual tests")
    parser.add_argument("--url", default=API_BASE_URL, help="Server base URL")
    args = parser.parse_args()

    API_BASE_URL = args.url

    if not args.skip_tests:
        if not asyncio.run(test_single_flows()):
            print("\n❌ Pre-flight tests failed. Fix issues before running simulation.")
            sys.exit(1)
        print("\n✅ Pre-flight tests passed!")

    asyncio.run(run_simulation(num_orders=args.orders))
