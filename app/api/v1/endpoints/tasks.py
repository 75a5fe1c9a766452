from typing import List, Optional
from datetime import date

from fastapi import APIRouter, Depends, HTTPException, status, Query
from sqlalchemy.orm import Session

from app.core.database import get_db
from app.core.dependencies import require_permission
from app.models.company import Company
from app.models.task import Task
from app.schemas.task import TaskCreate, TaskUpdate, TaskResponse
from app.services.permissions import FeatureKey

router = APIRouter(prefix="/company/tasks", tags=["Tasks"])

can_use_tasks = require_permission(FeatureKey.TASKS)


def _to_response(task: Task) -> TaskResponse:
    return TaskResponse(
        id=task.id,
        name=task.name,
        description=task.description,
        dueDate=task.due_date,
        recurrence=task.recurrence,
        whatsappNumber=task.whatsapp_number,
        color=task.color,
        isActive=task.is_active,
    )


def _get_task_or_404(db: Session, company_id: int, task_id: int) -> Task:
    task = db.query(Task).filter(
        Task.id == task_id,
        Task.company_id == company_id,
        Task.is_active == True  # noqa: E712
    ).first()
    if not task:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="Task not found"
        )
    return task


@router.get("", response_model=List[TaskResponse])
def list_tasks(
    dueFrom: Optional[date] = Query(default=None),
    dueTo: Optional[date] = Query(default=None),
    company: Company = Depends(can_use_tasks),
    db: Session = Depends(get_db)
):
    """Active tasks ordered by due date, optionally within a date range"""
    query = db.query(Task).filter(
        Task.company_id == company.id,
        Task.is_active == True  # noqa: E712
    )
    if dueFrom:
        query = query.filter(Task.due_date >= dueFrom)
    if dueTo:
        query = query.filter(Task.due_date <= dueTo)
    return [_to_response(task) for task in query.order_by(Task.due_date.asc()).all()]


@router.post("", response_model=TaskResponse, status_code=status.HTTP_201_CREATED)
def create_task(
    payload: TaskCreate,
    company: Company = Depends(can_use_tasks),
    db: Session = Depends(get_db)
):
    task = Task(
        company_id=company.id,
        name=payload.name,
        description=payload.description,
        due_date=payload.dueDate,
        recurrence=payload.recurrence,
        whatsapp_number=payload.whatsappNumber,
        color=payload.color,
        is_active=True,
    )
    db.add(task)
    db.commit()
    db.refresh(task)
    return _to_response(task)


@router.put("/{task_id}", response_model=TaskResponse)
def update_task(
    task_id: int,
    payload: TaskUpdate,
    company: Company = Depends(can_use_tasks),
    db: Session = Depends(get_db)
):
    task = _get_task_or_404(db, company.id, task_id)

    if payload.name is not None:
        task.name = payload.name
    if payload.description is not None:
        task.description = payload.description
    if payload.dueDate is not None:
        task.due_date = payload.dueDate
    if payload.recurrence is not None:
        task.recurrence = payload.recurrence
    if payload.whatsappNumber is not None:
        task.whatsapp_number = payload.whatsappNumber
    if payload.color is not None:
        task.color = payload.color

    db.commit()
    db.refresh(task)
    return _to_response(task)


@router.delete("/{task_id}", status_code=status.HTTP_204_NO_CONTENT)
def delete_task(
    task_id: int,
    company: Company = Depends(can_use_tasks),
    db: Session = Depends(get_db)
):
    task = _get_task_or_404(db, company.id, task_id)
    task.is_active = False
    db.commit()
    return None
