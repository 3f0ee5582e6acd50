from pydantic import BaseModel, EmailStr
from typing import Any, Dict, Optional
from datetime import datetime
from uuid import UUID

class BusinessInfoUpdate(BaseModel):
    name: Optional[str] = None
    address: Optional[str] = None
    phone: Optional[str] = None
    email: Optional[EmailStr] = None
    website: Optional[str] = None
    tax_number: Optional[str] = None
    logo: Optional[str] = None
    additional_info: Optional[Dict[str, Any]] = None

class BusinessInfo(BaseModel):
    id: UUID
    name: str
    address: str
    phone: str
    email: str
    website: Optional[str] = None
    tax_number: Optional[str] = None
    logo: Optional[str] = None
    additional_info: Optional[Dict[str, Any]] = None
    updated_at: Optional[datetime] = None

    class Config:
        from_attributes = True

class SettingsUpdate(BaseModel):
    language: Optional[str] = None
    dark_mode: Optional[bool] = None
    onboarding_complete: Optional[bool] = None
    preferences: Optional[Dict[str, Any]] = None

class Settings(BaseModel):
    id: UUID
    language: str
    dark_mode: bool
    onboarding_complete: bool
    preferences: Optional[Dict[str, Any]] = None

    class Config:
        from_attributes = True
