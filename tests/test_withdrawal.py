from decimal import Decimal

import pytest

from crud import inventory
from exceptions import InsufficientStockError, NotFoundError, ValidationError
from models import Invoice


def test_withdraw_prices_at_current_rate(db, owner, make_product, remaining_of):
    product = make_product(quantity=10, price_usd="10.00", price_sdg="6000.00", exchange_rate="600.00")

    result = inventory.withdraw_product(db, owner.id, product.id, 4, Decimal("650"))

    assert result.withdrawn_quantity == 4
    assert result.original_price_sdg == Decimal("6000.00")
    assert result.current_price_sdg == Decimal("6500.00")
    assert result.total_original_sdg == Decimal("24000.00")
    assert result.total_current_sdg == Decimal("26000.00")
    assert result.price_difference == Decimal("2000.00")
    assert result.exchange_rate_at_purchase == Decimal("600.00")
    assert result.product.remaining == 6
    assert remaining_of(product.id) == 6


def test_withdraw_creates_no_invoice(db, owner, make_product):
    product = make_product(quantity=10)

    inventory.withdraw_product(db, owner.id, product.id, 2, 600)

    assert db.query(Invoice).count() == 0


def test_withdraw_more_than_remaining(db, owner, make_product, remaining_of):
    product = make_product(quantity=10, remaining=3)

    with pytest.raises(InsufficientStockError) as exc_info:
        inventory.withdraw_product(db, owner.id, product.id, 4, 650)

    assert exc_info.value.requested == 4
    assert exc_info.value.available == 3
    assert remaining_of(product.id) == 3


@pytest.mark.parametrize(
    "quantity, rate",
    [(None, 650), (4, None), (0, 650), (-2, 650), (4, -1)],
)
def test_withdraw_rejects_bad_input(db, owner, make_product, remaining_of, quantity, rate):
    product = make_product(quantity=10)

    with pytest.raises(ValidationError):
        inventory.withdraw_product(db, owner.id, product.id, quantity, rate)

    assert remaining_of(product.id) == 10


def test_withdraw_from_someone_elses_product(db, owner, other_user, make_product, remaining_of):
    theirs = make_product(quantity=10, user=other_user)

    with pytest.raises(NotFoundError):
        inventory.withdraw_product(db, owner.id, theirs.id, 1, 650)

    assert remaining_of(theirs.id) == 10


def test_withdraw_whole_stock_then_nothing_left(db, owner, make_product, remaining_of):
    product = make_product(quantity=2)

    inventory.withdraw_product(db, owner.id, product.id, 2, 600)

    with pytest.raises(InsufficientStockError) as exc_info:
        inventory.withdraw_product(db, owner.id, product.id, 1, 600)
    assert exc_info.value.available == 0
    assert remaining_of(product.id) == 0


@pytest.mark.parametrize("quantity", [2.7, "2", True])
def test_withdraw_rejects_fractional_or_non_numeric_quantity(db, owner, make_product, remaining_of, quantity):
    product = make_product(quantity=10)

    with pytest.raises(ValidationError, match="whole number"):
        inventory.withdraw_product(db, owner.id, product.id, quantity, 650)

    assert remaining_of(product.id) == 10


def test_withdraw_accepts_integral_decimal_quantity(db, owner, make_product):
    product = make_product(quantity=10)

    result = inventory.withdraw_product(db, owner.id, product.id, Decimal("2"), 650)

    assert result.withdrawn_quantity == 2
    assert result.product.remaining == 8


@pytest.mark.parametrize("rate", [Decimal("650.125"), Decimal("123456789")])
def test_withdraw_rejects_rates_the_snapshot_cannot_hold(db, owner, make_product, remaining_of, rate):
    product = make_product(quantity=10)

    with pytest.raises(ValidationError, match="Current exchange rate"):
        inventory.withdraw_product(db, owner.id, product.id, 1, rate)

    assert remaining_of(product.id) == 10


def test_withdraw_rate_is_reported_as_used(db, owner, make_product):
    product = make_product(quantity=10, price_usd="10.00", price_sdg="6000.00")

    result = inventory.withdraw_product(db, owner.id, product.id, 1, 650.5)

    assert result.current_exchange_rate == Decimal("650.50")
    assert result.current_price_sdg == Decimal("6505.00")
