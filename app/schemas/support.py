"""
Support ticket schemas
"""
from datetime import datetime
from typing import Optional, Literal
from pydantic import BaseModel, Field

Priority = Literal["low", "medium", "high", "urgent"]
Category = Literal["general", "technical", "billing", "feature_request"]


class SupportTicketCreate(BaseModel):
    title: str = Field(..., min_length=3, max_length=255)
    description: str = Field(..., min_length=5)
    typeId: Optional[int] = None
    priority: Priority = "medium"
    category: Category = "general"


class SupportTicketAdminUpdate(BaseModel):
    statusId: Optional[int] = None
    adminResponse: Optional[str] = None
    resolved: Optional[bool] = None


class SupportTicketResponse(BaseModel):
    id: int
    companyId: int
    title: str
    description: str
    typeId: Optional[int]
    typeName: Optional[str]
    statusId: Optional[int]
    statusName: Optional[str]
    priority: str
    category: str
    adminResponse: Optional[str]
    createdAt: Optional[datetime]
    resolvedAt: Optional[datetime]
