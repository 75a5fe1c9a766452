"""
Client schemas
"""
from datetime import date
from typing import Optional
from pydantic import BaseModel, EmailStr, Field, field_validator

from app.schemas.common import clean_phone


class ClientCreate(BaseModel):
    name: str = Field(..., min_length=2, max_length=255)
    email: Optional[EmailStr] = None
    phone: Optional[str] = None
    birthDate: Optional[date] = None
    notes: Optional[str] = None

    @field_validator('phone')
    @classmethod
    def validate_phone(cls, v: Optional[str]) -> Optional[str]:
        return clean_phone(v)


class ClientUpdate(BaseModel):
    name: Optional[str] = Field(None, min_length=2, max_length=255)
    email: Optional[EmailStr] = None
    phone: Optional[str] = None
    birthDate: Optional[date] = None
    notes: Optional[str] = None

    @field_validator('phone')
    @classmethod
    def validate_phone(cls, v: Optional[str]) -> Optional[str]:
        return clean_phone(v)


class ClientResponse(BaseModel):
    id: int
    name: str
    email: Optional[str]
    phone: Optional[str]
    phoneFormatted: Optional[str]
    birthDate: Optional[date]
    notes: Optional[str]
    isActive: bool
