import pytest

from najaf.models import OrderStatus, PaymentMethod
from najaf.schemas import CartItem, Product
from najaf.services.excel_manager import ExcelManager
from tests.conftest import make_order


def test_export_and_read_back(tmp_path):
    manager = ExcelManager(data_dir=tmp_path / "ledger")
    item = CartItem.from_product(Product(id="1", name="برجر", price=85), 2).model_copy(
        update={"notes": "بدون بصل"}
    )
    orders = [
        make_order("abc0012", items=[item], payment_method=PaymentMethod.CARD),
        make_order("abc0034", status=OrderStatus.DELIVERED),
    ]

    result = manager.export_orders(orders)

    assert result["success"] is True
    assert result["rows"] == 2
    assert manager.ledger_path.exists()

    rows = manager.read_ledger()
    assert [r["order_id"] for r in rows] == ["abc0012", "abc0034"]
    assert rows[0]["order_number"] == "0012"
    assert rows[0]["payment_method"] == "شبكة"
    assert rows[0]["items"] == "برجر x2 (بدون بصل)"
    assert rows[0]["total_amount"] == 170
    assert rows[1]["status"] == "تم التسليم"


def test_export_replaces_previous_ledger(tmp_path):
    manager = ExcelManager(data_dir=tmp_path)
    manager.export_orders([make_order("a0001"), make_order("a0002")])
    manager.export_orders([make_order("a0003")])
    assert [r["order_id"] for r in manager.read_ledger()] == ["a0003"]


def test_read_missing_ledger(tmp_path):
    assert ExcelManager(data_dir=tmp_path).read_ledger() == []


def test_clear(tmp_path):
    manager = ExcelManager(data_dir=tmp_path)
    manager.export_orders([make_order()])
    assert manager.clear() is True
    assert not manager.ledger_path.exists()


def test_unwritable_data_dir_raises(tmp_path):
    blocker = tmp_path / "blocker"
    blocker.write_text("not a directory")

    with pytest.raises(OSError):
        ExcelManager(data_dir=blocker).export_orders([make_order()])
