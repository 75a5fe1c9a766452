"""
Service schemas
"""
from decimal import Decimal
from typing import Optional
from pydantic import BaseModel, Field


class ServiceCreate(BaseModel):
    name: str = Field(..., min_length=2, max_length=255)
    description: Optional[str] = None
    price: Decimal = Field(..., ge=0)
    duration: int = Field(..., ge=5, le=24 * 60)
    color: str = Field("#3B82F6", pattern=r"^#[0-9A-Fa-f]{6}$")
    points: int = Field(0, ge=0)


class ServiceUpdate(BaseModel):
    name: Optional[str] = Field(None, min_length=2, max_length=255)
    description: Optional[str] = None
    price: Optional[Decimal] = Field(None, ge=0)
    duration: Optional[int] = Field(None, ge=5, le=24 * 60)
    color: Optional[str] = Field(None, pattern=r"^#[0-9A-Fa-f]{6}$")
    points: Optional[int] = Field(None, ge=0)


class ServiceResponse(BaseModel):
    id: int
    name: str
    description: Optional[str]
    price: str
    duration: int
    color: str
    points: int
    isActive: bool
