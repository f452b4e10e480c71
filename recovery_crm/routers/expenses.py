"""Expenses router."""

from uuid import UUID

from fastapi import APIRouter, Depends, HTTPException
from sqlalchemy.orm import Session

from recovery_crm.core.deps import get_db
from recovery_crm.schemas.expense import ExpenseCreate, ExpenseRead
from recovery_crm.services import expense_service

router = APIRouter()


@router.get("", response_model=list[ExpenseRead])
def list_expenses(db: Session = Depends(get_db)):
    return expense_service.list_expenses(db)


@router.get("/{user_id}", response_model=list[ExpenseRead])
def list_user_expenses(user_id: UUID, db: Session = Depends(get_db)):
    return expense_service.list_expenses(db, user_id=user_id)


@router.post("", response_model=ExpenseRead, status_code=201)
def create_expense(data: ExpenseCreate, db: Session = Depends(get_db)):
    try:
        return expense_service.create_expense(db, data)
    except expense_service.ExpenseServiceError as exc:
        raise HTTPException(status_code=400, detail=str(exc))
