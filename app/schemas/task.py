"""
Task schemas
"""
from datetime import date
from typing import Optional, Literal
from pydantic import BaseModel, Field, field_validator

from app.schemas.common import clean_phone

Recurrence = Literal["none", "daily", "weekly", "monthly"]


class TaskCreate(BaseModel):
    name: str = Field(..., min_length=2, max_length=255)
    description: Optional[str] = None
    dueDate: date
    recurrence: Recurrence = "none"
    whatsappNumber: Optional[str] = None
    color: str = Field("#3b82f6", pattern=r"^#[0-9A-Fa-f]{6}$")

    @field_validator('whatsappNumber')
    @classmethod
    def validate_whatsapp(cls, v: Optional[str]) -> Optional[str]:
        return clean_phone(v)


class TaskUpdate(BaseModel):
    name: Optional[str] = Field(None, min_length=2, max_length=255)
    description: Optional[str] = None
    dueDate: Optional[date] = None
    recurrence: Optional[Recurrence] = None
    whatsappNumber: Optional[str] = None
    color: Optional[str] = Field(None, pattern=r"^#[0-9A-Fa-f]{6}$")

    @field_validator('whatsappNumber')
    @classmethod
    def validate_whatsapp(cls, v: Optional[str]) -> Optional[str]:
        return clean_phone(v)


class TaskResponse(BaseModel):
    id: int
    name: str
    description: Optional[str]
    dueDate: date
    recurrence: str
    whatsappNumber: Optional[str]
    color: str
    isActive: bool
