import logging
from datetime import datetime, timezone
from typing import List, Optional
from uuid import UUID
from sqlalchemy.orm import Session
from models.exchange_rate import ExchangeRate
from schemas.exchange_rate import ExchangeRateCreate, ExchangeRateUpdate

log = logging.getLogger("ledger.exchange_rate")


def create_exchange_rate(db: Session, user_id: UUID, rate: ExchangeRateCreate) -> ExchangeRate:
    db_rate = ExchangeRate(
        user_id=user_id,
        rate=rate.rate,
        date=rate.date or datetime.now(timezone.utc),
    )
    db.add(db_rate)
    db.commit()
    db.refresh(db_rate)
    log.info("exchange_rate_recorded exchange_rate_id=%s user_id=%s rate=%s", db_rate.id, user_id, db_rate.rate)
    return db_rate

def get_exchange_rate(db: Session, user_id: UUID, rate_id: UUID) -> Optional[ExchangeRate]:
    return db.query(ExchangeRate).filter(ExchangeRate.id == rate_id, ExchangeRate.user_id == user_id).first()

def get_exchange_rates(db: Session, user_id: UUID, skip: int = 0, limit: int = 100) -> List[ExchangeRate]:
    return (
        db.query(ExchangeRate)
        .filter(ExchangeRate.user_id == user_id)
        .order_by(ExchangeRate.date.desc(), ExchangeRate.created_at.desc())
        .offset(skip)
        .limit(limit)
        .all()
    )

def get_latest_exchange_rate(db: Session, user_id: UUID) -> Optional[ExchangeRate]:
    return (
        db.query(ExchangeRate)
        .filter(ExchangeRate.user_id == user_id)
        .order_by(ExchangeRate.date.desc(), ExchangeRate.created_at.desc())
        .first()
    )

def update_exchange_rate(db: Session, user_id: UUID, rate_id: UUID, rate_update: ExchangeRateUpdate) -> Optional[ExchangeRate]:
    db_rate = get_exchange_rate(db, user_id, rate_id)
    if db_rate:
        update_data = rate_update.model_dump(exclude_unset=True, exclude_none=True)
        for field, value in update_data.items():
            setattr(db_rate, field, value)
        db.commit()
        db.refresh(db_rate)
        log.info("exchange_rate_updated exchange_rate_id=%s user_id=%s", rate_id, user_id)
    return db_rate

def delete_exchange_rate(db: Session, user_id: UUID, rate_id: UUID) -> bool:
    db_rate = get_exchange_rate(db, user_id, rate_id)
    if db_rate:
        db.delete(db_rate)
        db.commit()
        log.info("exchange_rate_deleted exchange_rate_id=%s user_id=%s", rate_id, user_id)
        return True
    return False
