"""
Coupon schemas
"""
from datetime import date
from decimal import Decimal
from typing import Optional, Literal
from pydantic import BaseModel, Field, field_validator, model_validator


class CouponCreate(BaseModel):
    name: str = Field(..., min_length=2, max_length=255)
    code: str = Field(..., min_length=3, max_length=50)
    description: Optional[str] = None
    discountType: Literal["percentage", "fixed"]
    discountValue: Decimal = Field(..., gt=0)
    minOrderValue: Optional[Decimal] = Field(None, ge=0)
    maxDiscount: Optional[Decimal] = Field(None, gt=0)
    usageLimit: Optional[int] = Field(None, ge=1)
    validUntil: date
    isActive: bool = True

    @field_validator('code')
    @classmethod
    def normalize_code(cls, v: str) -> str:
        """Codes are stored upper-case without spaces"""
        code = v.strip().upper()
        if not code.replace("-", "").replace("_", "").isalnum():
            raise ValueError('Código deve conter apenas letras, números, "-" ou "_"')
        return code

    @model_validator(mode='after')
    def check_percentage(self):
        if self.discountType == "percentage" and self.discountValue > 100:
            raise ValueError('Desconto percentual não pode ser maior que 100%')
        return self

    class Config:
        json_schema_extra = {
            "example": {
                "name": "Black Friday",
                "code": "BLACK50",
                "discountType": "percentage",
                "discountValue": "50",
                "maxDiscount": "20.00",
                "usageLimit": 100,
                "validUntil": "2026-11-30"
            }
        }


class CouponUpdate(BaseModel):
    name: Optional[str] = Field(None, min_length=2, max_length=255)
    description: Optional[str] = None
    discountValue: Optional[Decimal] = Field(None, gt=0)
    minOrderValue: Optional[Decimal] = Field(None, ge=0)
    maxDiscount: Optional[Decimal] = Field(None, gt=0)
    usageLimit: Optional[int] = Field(None, ge=1)
    validUntil: Optional[date] = None
    isActive: Optional[bool] = None


class CouponResponse(BaseModel):
    id: int
    name: str
    code: str
    description: Optional[str]
    discountType: str
    discountValue: str
    minOrderValue: Optional[str]
    maxDiscount: Optional[str]
    usageLimit: Optional[int]
    usedCount: int
    validUntil: date
    isActive: bool
    status: str
    statusLabel: str


class CouponValidateRequest(BaseModel):
    code: str = Field(..., min_length=1, max_length=50)
    subtotal: Optional[Decimal] = Field(None, ge=0)

    @field_validator('code')
    @classmethod
    def normalize_code(cls, v: str) -> str:
        return v.strip().upper()


class CouponValidateResponse(BaseModel):
    code: str
    status: str
    valid: bool
    discount: Optional[str] = None
    total: Optional[str] = None
    message: Optional[str] = None
