import threading
import uuid
from decimal import Decimal

import pytest
from sqlalchemy.exc import OperationalError

from crud import invoice as invoices
from crud import inventory
from exceptions import InsufficientStockError, InternalError, NotFoundError, ValidationError
from models import Invoice, InvoiceItem, InvoiceStatus, PaymentStatus, Product
from schemas.invoice import InvoiceCreate, InvoiceItemCreate, InvoiceUpdate
from schemas.inventory import ProductUpdate


def _payload(customer, *lines, **extra):
    return InvoiceCreate(
        customer_id=customer.id,
        items=[
            InvoiceItemCreate(product_id=product_id, quantity=qty, current_exchange_rate=Decimal(str(rate)))
            for product_id, qty, rate in lines
        ],
        **extra,
    )


def _invoice_count(session_factory) -> int:
    session = session_factory()
    try:
        return session.query(Invoice).count()
    finally:
        session.close()


def test_invoice_totals_and_stock_decrement(db, owner, customer, make_product, remaining_of):
    product = make_product(remaining=5, price_usd="10.00", price_sdg="5500.00")

    created = invoices.create_invoice(db, owner.id, _payload(customer, (product.id, 3, 600)))

    assert remaining_of(product.id) == 2
    assert created.total_usd == Decimal("30.00")
    assert created.total_original_sdg == Decimal("16500.00")
    assert created.total_current_sdg == Decimal("18000.00")
    assert created.profit_loss == Decimal("1500.00")
    assert created.status == InvoiceStatus.ISSUED
    assert created.payment_status == PaymentStatus.UNPAID
    assert created.notes == ""


def test_items_snapshot_unit_prices_and_line_totals(db, owner, customer, make_product):
    product = make_product(remaining=5, price_usd="10.00", price_sdg="5500.00", exchange_rate="550.00")

    created = invoices.create_invoice(db, owner.id, _payload(customer, (product.id, 3, 600)))
    item = created.items[0]

    assert item.name == "Widget"
    assert item.quantity == 3
    assert item.price_usd == Decimal("10.00")
    assert item.original_price_sdg == Decimal("5500.00")
    assert item.current_price_sdg == Decimal("6000.00")
    assert item.total_usd == Decimal("30.00")
    assert item.total_original_sdg == Decimal("16500.00")
    assert item.total_current_sdg == Decimal("18000.00")
    assert item.exchange_rate_at_purchase == Decimal("550.00")
    assert item.current_exchange_rate == Decimal("600.00")


def test_snapshot_survives_product_edits(db, owner, customer, make_product):
    product = make_product(remaining=5)
    created = invoices.create_invoice(db, owner.id, _payload(customer, (product.id, 1, 600)))

    inventory.update_product(db, owner.id, product.id, ProductUpdate(price_usd=Decimal("99.00"), name="Renamed"))
    fetched = invoices.get_invoice(db, owner.id, created.id)

    assert fetched.items[0].price_usd == Decimal("10.00")
    assert fetched.items[0].name == "Widget"


def test_insufficient_stock_leaves_everything_untouched(db, owner, customer, make_product, remaining_of, session_factory):
    product = make_product(quantity=5, remaining=2)

    with pytest.raises(InsufficientStockError) as exc_info:
        invoices.create_invoice(db, owner.id, _payload(customer, (product.id, 5, 600)))

    assert exc_info.value.requested == 5
    assert exc_info.value.available == 2
    assert remaining_of(product.id) == 2
    assert _invoice_count(session_factory) == 0


def test_later_item_failure_reverses_earlier_reservations(db, owner, customer, make_product, remaining_of, session_factory):
    first = make_product(name="First", remaining=5)
    second = make_product(name="Second", remaining=1)

    with pytest.raises(InsufficientStockError):
        invoices.create_invoice(db, owner.id, _payload(customer, (first.id, 4, 600), (second.id, 2, 600)))

    assert remaining_of(first.id) == 5
    assert remaining_of(second.id) == 1
    assert _invoice_count(session_factory) == 0


def test_missing_product_aborts_whole_invoice(db, owner, customer, make_product, remaining_of, session_factory):
    product = make_product(remaining=5)

    with pytest.raises(NotFoundError):
        invoices.create_invoice(db, owner.id, _payload(customer, (product.id, 2, 600), (uuid.uuid4(), 1, 600)))

    assert remaining_of(product.id) == 5
    assert _invoice_count(session_factory) == 0


def test_foreign_product_is_not_found(db, owner, other_user, customer, make_product, remaining_of):
    theirs = make_product(remaining=5, user=other_user)

    with pytest.raises(NotFoundError):
        invoices.create_invoice(db, owner.id, _payload(customer, (theirs.id, 1, 600)))

    assert remaining_of(theirs.id) == 5


def test_foreign_customer_is_not_found(db, other_user, customer, make_product):
    product = make_product(remaining=5, user=other_user)

    with pytest.raises(NotFoundError, match="Customer not found"):
        invoices.create_invoice(db, other_user.id, _payload(customer, (product.id, 1, 600)))


@pytest.mark.parametrize(
    "payload",
    [
        InvoiceCreate(items=[InvoiceItemCreate(product_id=uuid.uuid4(), quantity=1, current_exchange_rate=Decimal("600"))]),
        InvoiceCreate(customer_id=uuid.uuid4(), items=[]),
        InvoiceCreate(customer_id=uuid.uuid4()),
        InvoiceCreate(customer_id=uuid.uuid4(), items=[InvoiceItemCreate(quantity=1, current_exchange_rate=Decimal("600"))]),
        InvoiceCreate(customer_id=uuid.uuid4(), items=[InvoiceItemCreate(product_id=uuid.uuid4(), quantity=0, current_exchange_rate=Decimal("600"))]),
        InvoiceCreate(customer_id=uuid.uuid4(), items=[InvoiceItemCreate(product_id=uuid.uuid4(), quantity=1)]),
    ],
)
def test_malformed_requests_are_validation_errors(db, owner, payload, session_factory):
    with pytest.raises(ValidationError):
        invoices.create_invoice(db, owner.id, payload)

    assert _invoice_count(session_factory) == 0


def test_repeated_product_lines_reserve_cumulatively(db, owner, customer, make_product, remaining_of):
    product = make_product(remaining=5)

    with pytest.raises(InsufficientStockError) as exc_info:
        invoices.create_invoice(db, owner.id, _payload(customer, (product.id, 3, 600), (product.id, 3, 600)))
    assert exc_info.value.available == 2
    assert remaining_of(product.id) == 5

    created = invoices.create_invoice(db, owner.id, _payload(customer, (product.id, 3, 600), (product.id, 2, 600)))
    assert remaining_of(product.id) == 0
    assert [item.quantity for item in created.items] == [3, 2]


def test_commit_failure_rolls_back(db, owner, customer, make_product, remaining_of, session_factory, monkeypatch):
    product = make_product(remaining=5)

    def failing_commit():
        raise OperationalError("COMMIT", {}, Exception("disk I/O error"))

    monkeypatch.setattr(db, "commit", failing_commit)
    with pytest.raises(InternalError):
        invoices.create_invoice(db, owner.id, _payload(customer, (product.id, 3, 600)))
    monkeypatch.undo()

    assert remaining_of(product.id) == 5
    assert _invoice_count(session_factory) == 0


def test_stale_read_cannot_oversell(db, owner, customer, make_product, remaining_of, session_factory):
    product = make_product(quantity=4, remaining=4)

    second = session_factory()
    try:
        # The second request saw remaining=4 before the first one committed
        assert second.get(Product, product.id).remaining == 4

        invoices.create_invoice(db, owner.id, _payload(customer, (product.id, 3, 600)))

        with pytest.raises(InsufficientStockError) as exc_info:
            invoices.create_invoice(second, owner.id, _payload(customer, (product.id, 3, 600)))
    finally:
        second.close()

    assert exc_info.value.requested == 3
    assert exc_info.value.available == 1
    assert remaining_of(product.id) == 1
    assert _invoice_count(session_factory) == 1


def test_refetch_returns_creation_totals(db, owner, customer, make_product, session_factory):
    product = make_product(remaining=5, price_usd="12.35", price_sdg="6790.00")
    created = invoices.create_invoice(db, owner.id, _payload(customer, (product.id, 2, "601.5")))
    expected = (created.total_usd, created.total_original_sdg, created.total_current_sdg, created.profit_loss)

    session = session_factory()
    try:
        fetched = invoices.get_invoice(session, owner.id, created.id)
        assert (fetched.total_usd, fetched.total_original_sdg, fetched.total_current_sdg, fetched.profit_loss) == expected
    finally:
        session.close()

    assert expected == (Decimal("24.70"), Decimal("13580.00"), Decimal("14857.05"), Decimal("1277.05"))


def test_update_touches_only_status_fields(db, owner, customer, make_product):
    product = make_product(remaining=5)
    created = invoices.create_invoice(db, owner.id, _payload(customer, (product.id, 3, 600)))

    updated = invoices.update_invoice(
        db, owner.id, created.id,
        InvoiceUpdate(status=InvoiceStatus.DELIVERED, payment_status=PaymentStatus.PAID, notes="settled"),
    )

    assert updated.status == InvoiceStatus.DELIVERED
    assert updated.payment_status == PaymentStatus.PAID
    assert updated.notes == "settled"
    assert updated.total_current_sdg == Decimal("18000.00")


def test_delete_restores_stock(db, owner, customer, make_product, remaining_of, session_factory):
    product = make_product(remaining=5)
    created = invoices.create_invoice(db, owner.id, _payload(customer, (product.id, 3, 600)))
    assert remaining_of(product.id) == 2

    assert invoices.delete_invoice(db, owner.id, created.id) is True

    assert remaining_of(product.id) == 5
    assert _invoice_count(session_factory) == 0
    session = session_factory()
    try:
        assert session.query(InvoiceItem).count() == 0
    finally:
        session.close()


def test_delete_of_foreign_invoice_is_not_found(db, owner, other_user, customer, make_product, remaining_of):
    product = make_product(remaining=5)
    created = invoices.create_invoice(db, owner.id, _payload(customer, (product.id, 3, 600)))

    with pytest.raises(NotFoundError):
        invoices.delete_invoice(db, other_user.id, created.id)

    assert remaining_of(product.id) == 2


def test_giveback_is_clamped_to_lifetime_quantity(db, owner, customer, make_product, remaining_of):
    product = make_product(quantity=5, remaining=5)
    created = invoices.create_invoice(db, owner.id, _payload(customer, (product.id, 3, 600)))

    db.query(Product).filter(Product.id == product.id).update({Product.remaining: 4})
    db.commit()

    invoices.delete_invoice(db, owner.id, created.id)

    assert remaining_of(product.id) == 5


def test_delete_after_product_removed(db, owner, customer, make_product, session_factory):
    product = make_product(remaining=5)
    created = invoices.create_invoice(db, owner.id, _payload(customer, (product.id, 3, 600)))

    assert inventory.delete_product(db, owner.id, product.id) is True
    assert invoices.delete_invoice(db, owner.id, created.id) is True

    assert _invoice_count(session_factory) == 0


def test_list_is_scoped_and_newest_first(db, owner, other_user, customer, make_product):
    product = make_product(remaining=10)
    older = invoices.create_invoice(db, owner.id, _payload(customer, (product.id, 1, 600), notes="older"))
    newer = invoices.create_invoice(db, owner.id, _payload(customer, (product.id, 1, 600), notes="newer"))
    newer.date = older.date.replace(year=older.date.year + 1)
    db.commit()

    listed = invoices.get_invoices(db, owner.id)

    assert [inv.notes for inv in listed] == ["newer", "older"]
    assert invoices.get_invoices(db, other_user.id) == []


def test_concurrent_invoices_cannot_oversell(owner, customer, make_product, remaining_of, session_factory):
    product = make_product(quantity=4, remaining=4)
    owner_id = owner.id
    payload = _payload(customer, (product.id, 3, 600))
    barrier = threading.Barrier(2)
    outcomes = []

    def place_order():
        session = session_factory()
        try:
            barrier.wait()
            invoices.create_invoice(session, owner_id, payload)
            outcomes.append("ok")
        except InsufficientStockError as exc:
            outcomes.append(("insufficient", exc.available))
        finally:
            session.close()

    threads = [threading.Thread(target=place_order) for _ in range(2)]
    for thread in threads:
        thread.start()
    for thread in threads:
        thread.join(timeout=30)

    assert sorted(outcomes, key=str) == [("insufficient", 1), "ok"]
    assert remaining_of(product.id) == 1
    assert _invoice_count(session_factory) == 1


def test_stored_rate_reproduces_stored_prices(db, owner, customer, make_product, session_factory):
    product = make_product(remaining=5, price_usd="10.00")
    created = invoices.create_invoice(db, owner.id, _payload(customer, (product.id, 1, "600.55")))

    session = session_factory()
    try:
        item = invoices.get_invoice(session, owner.id, created.id).items[0]
        assert item.current_exchange_rate == Decimal("600.55")
        assert item.current_price_sdg == item.price_usd * item.current_exchange_rate == Decimal("6005.50")
    finally:
        session.close()


@pytest.mark.parametrize("rate", ["600.555", "100000000"])
def test_unstorable_rates_are_rejected(db, owner, customer, make_product, remaining_of, session_factory, rate):
    product = make_product(remaining=5)

    with pytest.raises(ValidationError, match="Item 1: currentExchangeRate"):
        invoices.create_invoice(db, owner.id, _payload(customer, (product.id, 1, rate)))

    assert remaining_of(product.id) == 5
    assert _invoice_count(session_factory) == 0
