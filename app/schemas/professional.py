"""
Professional schemas
"""
import re
from typing import Optional, List
from pydantic import BaseModel, EmailStr, Field, field_validator

from app.schemas.common import clean_phone

_TIME = re.compile(r"^([01]\d|2[0-3]):[0-5]\d$")


def _check_time(v: Optional[str]) -> Optional[str]:
    if v is not None and not _TIME.match(v):
        raise ValueError('Horário deve estar no formato HH:MM')
    return v


class ProfessionalCreate(BaseModel):
    name: str = Field(..., min_length=2, max_length=255)
    email: Optional[EmailStr] = None
    phone: Optional[str] = None
    specialties: List[str] = []
    workDays: List[int] = []  # 0 = domingo ... 6 = sábado
    workStartTime: Optional[str] = None
    workEndTime: Optional[str] = None

    @field_validator('phone')
    @classmethod
    def validate_phone(cls, v: Optional[str]) -> Optional[str]:
        return clean_phone(v)

    @field_validator('workStartTime', 'workEndTime')
    @classmethod
    def validate_time(cls, v: Optional[str]) -> Optional[str]:
        return _check_time(v)

    @field_validator('workDays')
    @classmethod
    def validate_work_days(cls, v: List[int]) -> List[int]:
        if any(day < 0 or day > 6 for day in v):
            raise ValueError('Dias de trabalho devem estar entre 0 e 6')
        return sorted(set(v))


class ProfessionalUpdate(BaseModel):
    name: Optional[str] = Field(None, min_length=2, max_length=255)
    email: Optional[EmailStr] = None
    phone: Optional[str] = None
    specialties: Optional[List[str]] = None
    workDays: Optional[List[int]] = None
    workStartTime: Optional[str] = None
    workEndTime: Optional[str] = None

    @field_validator('phone')
    @classmethod
    def validate_phone(cls, v: Optional[str]) -> Optional[str]:
        return clean_phone(v)

    @field_validator('workStartTime', 'workEndTime')
    @classmethod
    def validate_time(cls, v: Optional[str]) -> Optional[str]:
        return _check_time(v)


class ProfessionalResponse(BaseModel):
    id: int
    name: str
    email: Optional[str]
    phone: Optional[str]
    specialties: List[str]
    workDays: List[int]
    workStartTime: Optional[str]
    workEndTime: Optional[str]
    isActive: bool


class ProfessionalsLimitResponse(BaseModel):
    limit: int
    current: int
    canAdd: bool
    remaining: int
