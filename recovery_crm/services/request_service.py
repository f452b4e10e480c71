"""Case request service - agent questions to admins and their answers."""

from uuid import UUID

from sqlalchemy.orm import Session, joinedload

from recovery_crm.db.enums import RequestStatus
from recovery_crm.db.models import CaseRequest, Customer
from recovery_crm.schemas.request import CaseRequestAction, CaseRequestCreate, CaseRequestRead
from recovery_crm.services import user_service


class RequestServiceError(Exception):
    """Base exception for case request errors."""
    pass


class RequestNotFoundError(RequestServiceError):
    pass


class RequestAlreadyClosedError(RequestServiceError):
    pass


def to_request_read(request: CaseRequest) -> CaseRequestRead:
    customer = request.customer
    return CaseRequestRead(
        id=request.id,
        customer_id=request.customer_id,
        case_id=customer.case_id if customer else None,
        customer_name=customer.name if customer else None,
        agent_id=request.agent_id,
        agent_name=request.agent_name,
        message=request.message,
        status=RequestStatus(request.status),
        admin_response=request.admin_response,
        created_at=request.created_at,
        updated_at=request.updated_at,
    )


def create_request(
    db: Session,
    customer: Customer,
    data: CaseRequestCreate,
    agent_id: UUID | None = None,
) -> CaseRequest:
    """Open a request; agent defaults to the case's assignee."""
    agent_id = data.agent_id or agent_id or customer.assigned_to
    agent_name = data.agent_name
    if agent_id and not agent_name:
        agent = user_service.get_user(db, agent_id)
        agent_name = agent.display_name if agent else None

    request = CaseRequest(
        customer_id=customer.id,
        agent_id=agent_id,
        agent_name=agent_name,
        message=data.message,
        status=RequestStatus.PENDING.value,
    )
    db.add(request)
    db.commit()
    db.refresh(request)
    return request


def list_requests(db: Session, customer_id: UUID | None = None) -> list[CaseRequest]:
    query = db.query(CaseRequest).options(joinedload(CaseRequest.customer))
    if customer_id:
        query = query.filter(CaseRequest.customer_id == customer_id)
    return query.order_by(CaseRequest.created_at.desc()).all()


def take_action(db: Session, request_id: UUID, data: CaseRequestAction) -> CaseRequest:
    """
    Resolve or reject a request with an admin response.

    Raises:
        RequestNotFoundError: Unknown request id
        RequestAlreadyClosedError: Request was already answered
    """
    request = db.query(CaseRequest).filter(CaseRequest.id == request_id).first()
    if not request:
        raise RequestNotFoundError("Request not found")
    if request.status != RequestStatus.PENDING.value:
        raise RequestAlreadyClosedError("Request has already been answered")

    request.status = data.status.value
    request.admin_response = data.admin_response
    db.commit()
    db.refresh(request)
    return request
