# app/schemas/auth.py
"""
Authentication request and response schemas
"""
from typing import Optional
from pydantic import BaseModel, EmailStr, Field, field_validator

from app.schemas.common import clean_phone


class LoginRequest(BaseModel):
    """Request schema for admin or company login"""
    email: EmailStr
    password: str = Field(..., min_length=1)


class TokenResponse(BaseModel):
    accessToken: str
    tokenType: str = "bearer"
    role: str


class CompanyRegisterRequest(BaseModel):
    """Self-registration of a new company (starts on trial)"""
    fantasyName: str = Field(..., min_length=2, max_length=255)
    document: str = Field(..., min_length=11, max_length=20)
    email: EmailStr
    password: str = Field(..., min_length=6)
    phone: Optional[str] = None
    address: Optional[str] = None
    city: Optional[str] = Field(None, max_length=255)
    state: Optional[str] = Field(None, min_length=2, max_length=2)
    planId: Optional[int] = None

    @field_validator('document')
    @classmethod
    def validate_document(cls, v: str) -> str:
        """CPF (11) or CNPJ (14) digits, formatting stripped"""
        digits = "".join(ch for ch in v if ch.isdigit())
        if len(digits) not in (11, 14):
            raise ValueError('Documento deve ser um CPF ou CNPJ válido')
        return digits

    @field_validator('phone')
    @classmethod
    def validate_phone(cls, v: Optional[str]) -> Optional[str]:
        return clean_phone(v)

    @field_validator('state')
    @classmethod
    def validate_state(cls, v: Optional[str]) -> Optional[str]:
        return v.upper() if v else None

    class Config:
        json_schema_extra = {
            "example": {
                "fantasyName": "Salão Bela Vista",
                "document": "12.345.678/0001-90",
                "email": "contato@belavista.com.br",
                "password": "segredo123",
                "phone": "(49) 99921-4230",
                "city": "Chapecó",
                "state": "SC",
                "planId": 1
            }
        }
