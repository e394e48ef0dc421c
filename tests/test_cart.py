from najaf.schemas import Product
from najaf.services.ordering import Cart, DEFAULT_PRODUCTS

burger, pizza = DEFAULT_PRODUCTS[0], DEFAULT_PRODUCTS[1]


def test_add_new_product_appends_with_quantity_one():
    cart = Cart()
    item = cart.add(burger)
    assert item.quantity == 1
    assert [i.id for i in cart.items] == ["1"]


def test_repeated_adds_keep_one_entry_per_product():
    cart = Cart()
    for product in [burger, pizza, burger, burger, pizza]:
        cart.add(product)

    assert [(i.id, i.quantity) for i in cart.items] == [("1", 3), ("2", 2)]
    assert cart.count == 5


def test_set_quantity_never_goes_below_one():
    cart = Cart()
    cart.add(burger)

    cart.set_quantity("1", -1)
    assert cart.get("1").quantity == 1

    cart.set_quantity("1", 2)
    cart.set_quantity("1", -5)
    assert cart.get("1").quantity == 3


def test_set_quantity_unknown_product_is_noop():
    cart = Cart()
    cart.add(burger)
    assert cart.set_quantity("missing", 1) is None
    assert len(cart) == 1


def test_remove_and_clear():
    cart = Cart()
    cart.add(burger)
    cart.add(pizza)

    cart.remove("1")
    assert [i.id for i in cart] == ["2"]

    cart.clear()
    assert cart.is_empty


def test_total_is_price_times_quantity():
    cart = Cart()
    cart.add(burger)
    cart.add(burger)
    cart.add(pizza)
    assert cart.total == 85 * 2 + 120


def test_notes_are_kept_per_entry():
    cart = Cart()
    cart.add(burger)
    cart.set_notes("1", "بدون بصل")
    cart.add(burger)

    item = cart.get("1")
    assert item.notes == "بدون بصل"
    assert item.quantity == 2

    cart.set_notes("1", "")
    assert cart.get("1").notes is None


def test_items_returns_copies():
    cart = Cart()
    cart.add(Product(id="x", name="Tea", price=5))
    snapshot = cart.items
    cart.set_quantity("x", 4)
    assert snapshot[0].quantity == 1
