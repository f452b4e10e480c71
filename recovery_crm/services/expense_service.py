"""Expense service."""

from uuid import UUID

from sqlalchemy import func
from sqlalchemy.orm import Session

from recovery_crm.db.models import Expense
from recovery_crm.schemas.expense import ExpenseCreate
from recovery_crm.services import user_service


class ExpenseServiceError(Exception):
    """Base exception for expense service errors."""
    pass


class ExpenseUserNotFoundError(ExpenseServiceError):
    pass


def list_expenses(db: Session, user_id: UUID | None = None) -> list[Expense]:
    query = db.query(Expense)
    if user_id:
        query = query.filter(Expense.user_id == user_id)
    return query.order_by(Expense.created_at.desc()).all()


def create_expense(db: Session, data: ExpenseCreate) -> Expense:
    if not user_service.get_user(db, data.user_id):
        raise ExpenseUserNotFoundError("User not found")

    expense = Expense(
        user_id=data.user_id,
        date=data.date,
        amount=data.amount,
        advance=data.advance,
        type=data.type.strip(),
        description=data.description,
    )
    db.add(expense)
    db.commit()
    db.refresh(expense)
    return expense


def total_amount(db: Session, user_id: UUID | None = None) -> float:
    query = db.query(func.coalesce(func.sum(Expense.amount), 0))
    if user_id:
        query = query.filter(Expense.user_id == user_id)
    return float(query.scalar() or 0)
