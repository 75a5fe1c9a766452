from typing import List

from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy.orm import Session

from app.core.database import get_db
from app.core.security import require_admin
from app.models.admin import Admin
from app.models.company import Company
from app.models.plan import Plan, DEFAULT_PLAN_PERMISSIONS
from app.schemas.plan import PlanCreate, PlanUpdate, PlanResponse
from app.services.permissions import parse_permissions

router = APIRouter(tags=["Plans"])


def _to_response(plan: Plan) -> PlanResponse:
    """Convert Plan model to response schema; permissions are always complete"""
    return PlanResponse(
        id=plan.id,
        name=plan.name,
        price=str(plan.price),
        annualPrice=str(plan.annual_price) if plan.annual_price is not None else None,
        freeDays=plan.free_days,
        maxProfessionals=plan.max_professionals,
        isActive=plan.is_active,
        permissions={key.value: value for key, value in parse_permissions(plan.permissions).items()},
    )


def _get_plan_or_404(db: Session, plan_id: int) -> Plan:
    plan = db.query(Plan).filter(Plan.id == plan_id).first()
    if not plan:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="Plan not found"
        )
    return plan


@router.get("/public-plans", response_model=List[PlanResponse])
def list_public_plans(db: Session = Depends(get_db)):
    """Active plans, for the landing page and registration (no auth)"""
    plans = db.query(Plan).filter(Plan.is_active == True).order_by(Plan.price.asc()).all()  # noqa: E712
    return [_to_response(plan) for plan in plans]


@router.get("/plans", response_model=List[PlanResponse])
def list_plans(
    db: Session = Depends(get_db),
    admin: Admin = Depends(require_admin)
):
    """All plans, including inactive ones"""
    plans = db.query(Plan).order_by(Plan.price.asc()).all()
    return [_to_response(plan) for plan in plans]


@router.post("/plans", response_model=PlanResponse, status_code=status.HTTP_201_CREATED)
def create_plan(
    payload: PlanCreate,
    db: Session = Depends(get_db),
    admin: Admin = Depends(require_admin)
):
    """Create a plan; a missing permission map gets the default one"""
    permissions = payload.permissions if payload.permissions is not None else dict(DEFAULT_PLAN_PERMISSIONS)

    plan = Plan(
        name=payload.name,
        price=payload.price,
        annual_price=payload.annualPrice,
        free_days=payload.freeDays,
        max_professionals=payload.maxProfessionals,
        is_active=payload.isActive,
        permissions=permissions,
    )
    db.add(plan)
    db.commit()
    db.refresh(plan)
    return _to_response(plan)


@router.put("/plans/{plan_id}", response_model=PlanResponse)
def update_plan(
    plan_id: int,
    payload: PlanUpdate,
    db: Session = Depends(get_db),
    admin: Admin = Depends(require_admin)
):
    """Update a plan; permission keys sent are merged into the stored map"""
    plan = _get_plan_or_404(db, plan_id)

    if payload.name is not None:
        plan.name = payload.name
    if payload.price is not None:
        plan.price = payload.price
    if payload.annualPrice is not None:
        plan.annual_price = payload.annualPrice
    if payload.freeDays is not None:
        plan.free_days = payload.freeDays
    if payload.maxProfessionals is not None:
        plan.max_professionals = payload.maxProfessionals
    if payload.isActive is not None:
        plan.is_active = payload.isActive
    if payload.permissions is not None:
        # Reassign so the JSON column is flagged dirty
        plan.permissions = {**(plan.permissions or {}), **payload.permissions}

    db.commit()
    db.refresh(plan)
    return _to_response(plan)


@router.delete("/plans/{plan_id}", status_code=status.HTTP_204_NO_CONTENT)
def delete_plan(
    plan_id: int,
    db: Session = Depends(get_db),
    admin: Admin = Depends(require_admin)
):
    """Delete a plan that no company references"""
    plan = _get_plan_or_404(db, plan_id)

    in_use = db.query(Company).filter(Company.plan_id == plan.id).count()
    if in_use:
        raise HTTPException(
            status_code=status.HTTP_409_CONFLICT,
            detail={
                "message": "Plano em uso por empresas. Desative-o em vez de excluir.",
                "companies": in_use,
            }
        )

    db.delete(plan)
    db.commit()
    return None
