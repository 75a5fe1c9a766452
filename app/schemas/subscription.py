"""
Subscription status schemas
"""
from typing import Optional
from pydantic import BaseModel


class BillingData(BaseModel):
    status: Optional[str]
    value: Optional[str]
    cycle: Optional[str]
    nextDueDate: Optional[str]


class SubscriptionStatusResponse(BaseModel):
    """GET /api/company/subscription-status"""
    isActive: bool
    isBlocked: bool
    status: Optional[str]
    paymentStatus: Optional[str]
    planId: Optional[int]
    planName: Optional[str]
    planPrice: Optional[str]
    asaasData: Optional[BillingData] = None
    isOnTrial: bool
    trialEndsAt: Optional[str] = None
    trialDaysRemaining: int = 0
