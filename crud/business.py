import logging
from uuid import UUID
from sqlalchemy.orm import Session
from models.business import BusinessInfo, UserSettings
from schemas.business import BusinessInfoUpdate, SettingsUpdate

log = logging.getLogger("ledger.business")

DEFAULT_BUSINESS_INFO = {
    "name": "My Business",
    "address": "Business Address",
    "phone": "+123456789",
    "email": "business@example.com",
    "website": "",
    "tax_number": "",
    "logo": None,
}


def get_business_info(db: Session, user_id: UUID) -> BusinessInfo:
    info = db.query(BusinessInfo).filter(BusinessInfo.user_id == user_id).first()
    if not info:
        info = BusinessInfo(**DEFAULT_BUSINESS_INFO, additional_info={}, user_id=user_id)
        db.add(info)
        db.commit()
        db.refresh(info)
        log.info("business_info_defaulted user_id=%s business_info_id=%s", user_id, info.id)
    return info

def update_business_info(db: Session, user_id: UUID, info_update: BusinessInfoUpdate) -> BusinessInfo:
    info = get_business_info(db, user_id)
    update_data = info_update.model_dump(exclude_unset=True)
    for field, value in update_data.items():
        # Required columns keep their value when cleared
        if value is None and field in ("name", "address", "phone", "email", "additional_info"):
            continue
        setattr(info, field, value)
    db.commit()
    db.refresh(info)
    log.info("business_info_updated user_id=%s business_info_id=%s", user_id, info.id)
    return info


def get_settings(db: Session, user_id: UUID) -> UserSettings:
    settings = db.query(UserSettings).filter(UserSettings.user_id == user_id).first()
    if not settings:
        settings = UserSettings(
            user_id=user_id,
            language="en",
            dark_mode=False,
            onboarding_complete=False,
            preferences={},
        )
        db.add(settings)
        db.commit()
        db.refresh(settings)
        log.info("settings_defaulted user_id=%s settings_id=%s", user_id, settings.id)
    return settings

def update_settings(db: Session, user_id: UUID, settings_update: SettingsUpdate) -> UserSettings:
    settings = get_settings(db, user_id)
    update_data = settings_update.model_dump(exclude_unset=True, exclude_none=True)

    preferences = update_data.pop("preferences", None)
    if preferences is not None:
        # New dict so the JSON column is flagged dirty
        settings.preferences = {**(settings.preferences or {}), **preferences}

    for field, value in update_data.items():
        setattr(settings, field, value)
    db.commit()
    db.refresh(settings)
    log.info("settings_updated user_id=%s settings_id=%s", user_id, settings.id)
    return settings
