"""User service - lookups and listing."""

from uuid import UUID

from sqlalchemy import func
from sqlalchemy.orm import Session

from recovery_crm.db.enums import Role
from recovery_crm.db.models import User


def get_user(db: Session, user_id: UUID) -> User | None:
    return db.query(User).filter(User.id == user_id).first()


def get_user_by_email(db: Session, email: str) -> User | None:
    return db.query(User).filter(func.lower(User.email) == email.lower()).first()


def get_user_by_username(db: Session, username: str) -> User | None:
    return db.query(User).filter(User.username == username).first()


def parse_user_id(value: str | UUID | None) -> UUID | None:
    """Return a UUID for well-formed ids, None otherwise."""
    if value is None:
        return None
    if isinstance(value, UUID):
        return value
    try:
        return UUID(str(value).strip())
    except ValueError:
        return None


def get_agent(db: Session, agent_id: str | UUID | None) -> User | None:
    """Resolve a user that holds the agent role, or None."""
    parsed = parse_user_id(agent_id)
    if parsed is None:
        return None
    user = get_user(db, parsed)
    if not user or user.role != Role.AGENT.value:
        return None
    return user


def list_users(db: Session, role: Role | None = None) -> list[User]:
    """List users ordered by first name, optionally filtered by role."""
    query = db.query(User)
    if role:
        query = query.filter(User.role == role.value)
    return query.order_by(User.first_name, User.last_name).all()


def count_by_role(db: Session) -> dict[str, int]:
    rows = db.query(User.role, func.count(User.id)).group_by(User.role).all()
    return {role: count for role, count in rows}
