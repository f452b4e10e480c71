"""Field visit service and visit categorisation."""

from uuid import UUID

from sqlalchemy.orm import Session

from recovery_crm.db.models import FieldData
from recovery_crm.schemas.field_data import FieldDataCreate


# Checked in order; the first keyword found in manager_type/bank_area wins
VISIT_CATEGORIES: list[tuple[str, str]] = [
    ("nbfc", "nbfc"),
    ("bank", "bank"),
    ("car", "car_showroom"),
    ("bike", "bike_showroom"),
    ("customer", "other_customer"),
]
DEFAULT_VISIT_CATEGORY = "other_manager"


def categorize_visit(visit: FieldData) -> str:
    """Bucket a visit by keywords in its manager type, then its area."""
    for text in (visit.manager_type, visit.bank_area):
        lowered = (text or "").lower()
        for keyword, category in VISIT_CATEGORIES:
            if keyword in lowered:
                return category
    return DEFAULT_VISIT_CATEGORY


def list_field_data(db: Session, created_by: UUID | None = None) -> list[FieldData]:
    query = db.query(FieldData)
    if created_by:
        query = query.filter(FieldData.created_by == created_by)
    return query.order_by(FieldData.created_at.desc()).all()


def create_field_data(db: Session, data: FieldDataCreate) -> FieldData:
    record = FieldData(**data.model_dump())
    db.add(record)
    db.commit()
    db.refresh(record)
    return record
