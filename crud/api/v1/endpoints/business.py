from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session
from database import get_db
from crud.api.deps import get_current_user
from models.user import User
from schemas.business import BusinessInfo, BusinessInfoUpdate, Settings, SettingsUpdate
from crud import business

router = APIRouter()

@router.get("/business-info", response_model=BusinessInfo)
def get_business_info(db: Session = Depends(get_db), user: User = Depends(get_current_user)):
    return business.get_business_info(db, user.id)

@router.put("/business-info", response_model=BusinessInfo)
def update_business_info(payload: BusinessInfoUpdate, db: Session = Depends(get_db), user: User = Depends(get_current_user)):
    return business.update_business_info(db, user.id, payload)

@router.get("/settings", response_model=Settings)
def get_settings(db: Session = Depends(get_db), user: User = Depends(get_current_user)):
    return business.get_settings(db, user.id)

@router.put("/settings", response_model=Settings)
def update_settings(payload: SettingsUpdate, db: Session = Depends(get_db), user: User = Depends(get_current_user)):
    return business.update_settings(db, user.id, payload)
