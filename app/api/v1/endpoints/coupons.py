import logging
from datetime import datetime
from decimal import Decimal
from typing import List, Optional

from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy.orm import Session

from app.core.database import get_db
from app.core.dependencies import require_permission
from app.models.company import Company
from app.models.coupon import Coupon
from app.schemas.coupon import (
    CouponCreate,
    CouponUpdate,
    CouponResponse,
    CouponValidateRequest,
    CouponValidateResponse,
)
from app.services.coupons import STATUS_LABELS, coupon_status, evaluate_coupon
from app.services.permissions import FeatureKey

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/company/coupons", tags=["Coupons"])

can_use_coupons = require_permission(FeatureKey.COUPONS)


def _money_str(value) -> Optional[str]:
    return None if value is None else str(value)


def _to_response(coupon: Coupon, now: Optional[datetime] = None) -> CouponResponse:
    current = coupon_status(coupon, now or datetime.utcnow())
    return CouponResponse(
        id=coupon.id,
        name=coupon.name,
        code=coupon.code,
        description=coupon.description,
        discountType=coupon.discount_type,
        discountValue=str(coupon.discount_value),
        minOrderValue=_money_str(coupon.min_order_value),
        maxDiscount=_money_str(coupon.max_discount),
        usageLimit=coupon.usage_limit,
        usedCount=coupon.used_count or 0,
        validUntil=coupon.valid_until,
        isActive=coupon.is_active,
        status=current.value,
        statusLabel=STATUS_LABELS[current],
    )


def _get_coupon_or_404(db: Session, company_id: int, coupon_id: int) -> Coupon:
    coupon = db.query(Coupon).filter(
        Coupon.id == coupon_id,
        Coupon.company_id == company_id
    ).first()
    if not coupon:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="Coupon not found"
        )
    return coupon


def _get_coupon_by_code(db: Session, company_id: int, code: str, lock: bool = False) -> Coupon:
    query = db.query(Coupon).filter(
        Coupon.company_id == company_id,
        Coupon.code == code
    )
    if lock:
        query = query.with_for_update()
    coupon = query.first()
    if not coupon:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail={"code": "Cupom não encontrado"}
        )
    return coupon


def _validation_response(coupon: Coupon, subtotal: Optional[Decimal], now: datetime) -> CouponValidateResponse:
    result = evaluate_coupon(coupon, now, subtotal)
    total = None
    if result.discount is not None and subtotal is not None:
        total = str(subtotal - result.discount)
    return CouponValidateResponse(
        code=coupon.code,
        status=result.status.value,
        valid=result.is_valid,
        discount=_money_str(result.discount),
        total=total,
        message=result.message,
    )


@router.get("", response_model=List[CouponResponse])
def list_coupons(
    company: Company = Depends(can_use_coupons),
    db: Session = Depends(get_db)
):
    coupons = db.query(Coupon).filter(
        Coupon.company_id == company.id
    ).order_by(Coupon.created_at.desc(), Coupon.id.desc()).all()
    now = datetime.utcnow()
    return [_to_response(coupon, now) for coupon in coupons]


@router.post("", response_model=CouponResponse, status_code=status.HTTP_201_CREATED)
def create_coupon(
    payload: CouponCreate,
    company: Company = Depends(can_use_coupons),
    db: Session = Depends(get_db)
):
    """Create a coupon; codes are unique per company"""
    existing = db.query(Coupon).filter(
        Coupon.company_id == company.id,
        Coupon.code == payload.code
    ).first()
    if existing:
        raise HTTPException(
            status_code=status.HTTP_409_CONFLICT,
            detail={"code": "Já existe um cupom com este código"}
        )

    coupon = Coupon(
        company_id=company.id,
        name=payload.name,
        code=payload.code,
        description=payload.description,
        discount_type=payload.discountType,
        discount_value=payload.discountValue,
        min_order_value=payload.minOrderValue,
        max_discount=payload.maxDiscount,
        usage_limit=payload.usageLimit,
        used_count=0,
        valid_until=payload.validUntil,
        is_active=payload.isActive,
    )
    db.add(coupon)
    db.commit()
    db.refresh(coupon)
    return _to_response(coupon)


@router.post("/validate", response_model=CouponValidateResponse)
def validate_coupon(
    payload: CouponValidateRequest,
    company: Company = Depends(can_use_coupons),
    db: Session = Depends(get_db)
):
    """
    Check a code without consuming it

    Unknown codes give 404; a known but unusable coupon gives 200 with
    valid=false and the reason in status.
    """
    coupon = _get_coupon_by_code(db, company.id, payload.code)
    return _validation_response(coupon, payload.subtotal, datetime.utcnow())


@router.post("/apply", response_model=CouponValidateResponse)
def apply_coupon(
    payload: CouponValidateRequest,
    company: Company = Depends(can_use_coupons),
    db: Session = Depends(get_db)
):
    """Validate and, when valid, count one use of the coupon"""
    coupon = _get_coupon_by_code(db, company.id, payload.code, lock=True)
    response = _validation_response(coupon, payload.subtotal, datetime.utcnow())

    if not response.valid:
        db.rollback()
        raise HTTPException(
            status_code=status.HTTP_422_UNPROCESSABLE_ENTITY,
            detail=response.model_dump()
        )

    coupon.used_count = (coupon.used_count or 0) + 1
    db.commit()

    logger.info(f"Coupon {coupon.code} applied for company {company.id} ({coupon.used_count} uses)")
    return response


@router.get("/{coupon_id}", response_model=CouponResponse)
def get_coupon(
    coupon_id: int,
    company: Company = Depends(can_use_coupons),
    db: Session = Depends(get_db)
):
    return _to_response(_get_coupon_or_404(db, company.id, coupon_id))


@router.put("/{coupon_id}", response_model=CouponResponse)
def update_coupon(
    coupon_id: int,
    payload: CouponUpdate,
    company: Company = Depends(can_use_coupons),
    db: Session = Depends(get_db)
):
    coupon = _get_coupon_or_404(db, company.id, coupon_id)

    if payload.name is not None:
        coupon.name = payload.name
    if payload.description is not None:
        coupon.description = payload.description
    if payload.discountValue is not None:
        if coupon.discount_type == "percentage" and payload.discountValue > 100:
            raise HTTPException(
                status_code=status.HTTP_400_BAD_REQUEST,
                detail={"discountValue": "Desconto percentual não pode ser maior que 100%"}
            )
        coupon.discount_value = payload.discountValue
    if payload.minOrderValue is not None:
        coupon.min_order_value = payload.minOrderValue
    if payload.maxDiscount is not None:
        coupon.max_discount = payload.maxDiscount
    if payload.usageLimit is not None:
        coupon.usage_limit = payload.usageLimit
    if payload.validUntil is not None:
        coupon.valid_until = payload.validUntil
    if payload.isActive is not None:
        coupon.is_active = payload.isActive

    db.commit()
    db.refresh(coupon)
    return _to_response(coupon)


@router.delete("/{coupon_id}", status_code=status.HTTP_204_NO_CONTENT)
def delete_coupon(
    coupon_id: int,
    company: Company = Depends(can_use_coupons),
    db: Session = Depends(get_db)
):
    coupon = _get_coupon_or_404(db, company.id, coupon_id)
    db.delete(coupon)
    db.commit()
    return None
