import logging
from dataclasses import dataclass
from datetime import datetime, timezone
from decimal import Decimal
from typing import List, Optional
from uuid import UUID
from sqlalchemy import case, update
from sqlalchemy.orm import Session
from crud.transaction import atomic
from exceptions import InsufficientStockError, NotFoundError, ValidationError
from models.inventory import Product
from schemas.inventory import ProductCreate, ProductUpdate
from utils.pricing import CENT, MAX_EXCHANGE_RATE, compute_line, to_decimal

log = logging.getLogger("ledger.inventory")


@dataclass(frozen=True)
class StockReservation:
    product_id: UUID
    name: str
    quantity: int
    remaining: int
    price_usd: Decimal
    price_sdg: Decimal
    exchange_rate: Decimal


@dataclass(frozen=True)
class Withdrawal:
    product: Product
    withdrawn_quantity: int
    original_price_sdg: Decimal
    current_price_sdg: Decimal
    total_original_sdg: Decimal
    total_current_sdg: Decimal
    price_difference: Decimal
    exchange_rate_at_purchase: Decimal
    current_exchange_rate: Decimal


def create_product(db: Session, user_id: UUID, item: ProductCreate) -> Product:
    data = item.model_dump(exclude_none=True)
    db_item = Product(
        **data,
        remaining=item.quantity,
        user_id=user_id,
    )
    if db_item.purchase_date is None:
        db_item.purchase_date = datetime.now(timezone.utc)
    db.add(db_item)
    db.commit()
    db.refresh(db_item)
    log.info("product_created product_id=%s user_id=%s quantity=%s", db_item.id, user_id, db_item.quantity)
    return db_item

def get_product(db: Session, user_id: UUID, product_id: UUID) -> Optional[Product]:
    return db.query(Product).filter(Product.id == product_id, Product.user_id == user_id).first()

def get_products(db: Session, user_id: UUID, skip: int = 0, limit: int = 100, search: Optional[str] = None) -> List[Product]:
    query = db.query(Product).filter(Product.user_id == user_id)

    if search:
        query = query.filter(Product.name.ilike(f'%{search}%'))

    return query.order_by(Product.created_at.desc()).offset(skip).limit(limit).all()

def update_product(db: Session, user_id: UUID, product_id: UUID, item_update: ProductUpdate) -> Optional[Product]:
    db_item = get_product(db, user_id, product_id)
    if not db_item:
        return None

    update_data = item_update.model_dump(exclude_unset=True, exclude_none=True)
    new_quantity = update_data.pop("quantity", None)
    for key, value in update_data.items():
        setattr(db_item, key, value)

    if new_quantity is not None and new_quantity != db_item.quantity:
        # Stocking more (or less) shifts the available amount by the same delta,
        # computed in SQL so it composes with concurrent reservations.
        delta = new_quantity - db_item.quantity
        shifted = Product.remaining + delta
        db_item.remaining = case((shifted < 0, 0), else_=shifted)
        db_item.quantity = new_quantity

    db.commit()
    db.refresh(db_item)
    log.info("product_updated product_id=%s user_id=%s remaining=%s", db_item.id, user_id, db_item.remaining)
    return db_item

def delete_product(db: Session, user_id: UUID, product_id: UUID) -> bool:
    db_item = get_product(db, user_id, product_id)

    if db_item:
        db.delete(db_item)
        db.commit()
        log.info("product_deleted product_id=%s user_id=%s", product_id, user_id)
        return True
    return False


def reserve_product(db: Session, user_id: UUID, product_id: UUID, quantity: int) -> StockReservation:
    """Take ``quantity`` units of a product out of ``remaining``.

    The decrement is a single guarded UPDATE, so two transactions racing for
    the last units cannot both succeed: the loser matches zero rows and gets
    InsufficientStockError with the amount actually left. Does not commit.
    """
    product = get_product(db, user_id, product_id)
    if not product:
        raise NotFoundError(f"Product {product_id} not found")

    if product.remaining < quantity:
        raise InsufficientStockError(
            requested=quantity,
            available=product.remaining,
            product_id=product.id,
            product_name=product.name,
        )

    result = db.execute(
        update(Product)
        .where(
            Product.id == product.id,
            Product.user_id == user_id,
            Product.remaining >= quantity,
        )
        .values(remaining=Product.remaining - quantity)
        .execution_options(synchronize_session=False)
    )
    db.refresh(product)

    if result.rowcount == 0:
        raise InsufficientStockError(
            requested=quantity,
            available=product.remaining,
            product_id=product.id,
            product_name=product.name,
        )

    log.info(
        "stock_reserved product_id=%s quantity=%s remaining=%s",
        product.id, quantity, product.remaining,
    )
    return StockReservation(
        product_id=product.id,
        name=product.name,
        quantity=quantity,
        remaining=product.remaining,
        price_usd=to_decimal(product.price_usd),
        price_sdg=to_decimal(product.price_sdg),
        exchange_rate=to_decimal(product.exchange_rate),
    )

def release_product(db: Session, product_id: Optional[UUID], quantity: int) -> Optional[Product]:
    """Give ``quantity`` units back to a product, never beyond its lifetime quantity.

    Products deleted since the stock was taken are skipped. Does not commit.
    """
    if product_id is None:
        log.warning("stock_release_skipped reason=product_unlinked quantity=%s", quantity)
        return None

    product = db.query(Product).filter(Product.id == product_id).populate_existing().first()
    if not product:
        log.warning("stock_release_skipped reason=product_missing product_id=%s quantity=%s", product_id, quantity)
        return None

    expected = product.remaining + quantity
    restored = Product.remaining + quantity
    db.execute(
        update(Product)
        .where(Product.id == product_id)
        .values(remaining=case((restored > Product.quantity, Product.quantity), else_=restored))
        .execution_options(synchronize_session=False)
    )
    db.refresh(product)

    if product.remaining < expected:
        log.warning(
            "stock_release_clamped product_id=%s quantity=%s remaining=%s lifetime_quantity=%s",
            product_id, quantity, product.remaining, product.quantity,
        )
    else:
        log.info("stock_released product_id=%s quantity=%s remaining=%s", product_id, quantity, product.remaining)
    return product


def validate_exchange_rate(value, label: str = "Current exchange rate") -> Decimal:
    """Return the caller's rate exactly as it will be stored on the snapshot.

    Rates the snapshot columns cannot hold unchanged are rejected, so the
    stored rate always reproduces the stored prices.
    """
    rate = to_decimal(value)
    if not rate.is_finite() or rate <= 0:
        raise ValidationError(f"{label} must be positive")
    if rate > MAX_EXCHANGE_RATE:
        raise ValidationError(f"{label} must not exceed {MAX_EXCHANGE_RATE}")
    if rate != rate.quantize(CENT):
        raise ValidationError(f"{label} must have at most 2 decimal places")
    return rate.quantize(CENT)

def validate_quantity(value, label: str = "Quantity") -> int:
    if isinstance(value, bool):
        raise ValidationError(f"{label} must be a whole number")
    try:
        quantity = int(value)
    except (TypeError, ValueError):
        raise ValidationError(f"{label} must be a whole number")
    if quantity != value:
        raise ValidationError(f"{label} must be a whole number")
    if quantity < 1:
        raise ValidationError(f"{label} must be at least 1")
    return quantity


def withdraw_product(db: Session, user_id: UUID, product_id: UUID, quantity, current_exchange_rate) -> Withdrawal:
    if not quantity or not current_exchange_rate:
        raise ValidationError("Please provide quantity and current exchange rate")
    quantity = validate_quantity(quantity)
    rate = validate_exchange_rate(current_exchange_rate)

    with atomic(db, "product_withdrawal", product_id=product_id, user_id=user_id, quantity=quantity):
        reservation = reserve_product(db, user_id, product_id, quantity)
        line = compute_line(
            reservation.price_usd,
            reservation.price_sdg,
            quantity,
            rate,
        )

    product = get_product(db, user_id, product_id)
    log.info(
        "product_withdrawn product_id=%s user_id=%s quantity=%s remaining=%s",
        product_id, user_id, quantity, product.remaining,
    )
    return Withdrawal(
        product=product,
        withdrawn_quantity=quantity,
        original_price_sdg=line.unit_original_sdg,
        current_price_sdg=line.unit_current_sdg,
        total_original_sdg=line.total_original_sdg,
        total_current_sdg=line.total_current_sdg,
        price_difference=line.difference_sdg,
        exchange_rate_at_purchase=reservation.exchange_rate,
        current_exchange_rate=rate,
    )
