"""
Plan request and response schemas
"""
from decimal import Decimal
from typing import Optional, Dict
from pydantic import BaseModel, Field, field_validator

from app.services.permissions import FeatureKey


def _known_permissions(v: Optional[Dict[str, bool]]) -> Optional[Dict[str, bool]]:
    """Keep only known feature keys"""
    if v is None:
        return None
    known = {key.value for key in FeatureKey}
    return {key: bool(value) for key, value in v.items() if key in known}


class PlanCreate(BaseModel):
    name: str = Field(..., min_length=2, max_length=255)
    price: Decimal = Field(..., ge=0)
    annualPrice: Optional[Decimal] = Field(None, ge=0)
    freeDays: int = Field(0, ge=0)
    maxProfessionals: int = Field(1, ge=1)
    isActive: bool = True
    permissions: Optional[Dict[str, bool]] = None

    @field_validator('permissions')
    @classmethod
    def validate_permissions(cls, v):
        return _known_permissions(v)

    class Config:
        json_schema_extra = {
            "example": {
                "name": "Profissional",
                "price": "79.90",
                "annualPrice": "799.00",
                "freeDays": 7,
                "maxProfessionals": 5,
                "permissions": {"dashboard": True, "clients": True, "financial": False}
            }
        }


class PlanUpdate(BaseModel):
    name: Optional[str] = Field(None, min_length=2, max_length=255)
    price: Optional[Decimal] = Field(None, ge=0)
    annualPrice: Optional[Decimal] = Field(None, ge=0)
    freeDays: Optional[int] = Field(None, ge=0)
    maxProfessionals: Optional[int] = Field(None, ge=1)
    isActive: Optional[bool] = None
    permissions: Optional[Dict[str, bool]] = None

    @field_validator('permissions')
    @classmethod
    def validate_permissions(cls, v):
        return _known_permissions(v)


class PlanResponse(BaseModel):
    id: int
    name: str
    price: str
    annualPrice: Optional[str]
    freeDays: int
    maxProfessionals: int
    isActive: bool
    permissions: Dict[str, bool]
