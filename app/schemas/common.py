"""
Shared schema helpers
"""
from typing import Optional, List, Any
from pydantic import BaseModel

from app.utils.phone import normalize_phone, validate_brazilian_phone


def clean_phone(value: Optional[str]) -> Optional[str]:
    """Normalize a phone field; blank becomes None, invalid numbers raise"""
    if value is None or not value.strip():
        return None
    if not validate_brazilian_phone(value):
        raise ValueError("Telefone inválido. Use DDD + número, ex: (11) 98765-4321")
    return normalize_phone(value)


class Pagination(BaseModel):
    total: int
    page: int
    limit: int
    totalPages: int
    hasMore: bool


class ListResponse(BaseModel):
    data: List[Any]
    pagination: Pagination
