"""Enum definitions for application constants."""

from enum import Enum


class Role(str, Enum):
    """
    User roles.

    - ADMIN: assigns cases, reviews requests, sees organisation dashboards
    - AGENT: works assigned cases to resolution and brokers offers
    - TELECALLER: captures leads, logs calls, creates customers
    - MARKETING: records field visits and expenses
    - REFERRAL: referral partners
    """
    ADMIN = "admin"
    AGENT = "agent"
    TELECALLER = "telecaller"
    MARKETING = "marketing"
    REFERRAL = "referral"

    @classmethod
    def has_value(cls, value: str) -> bool:
        """Check if value is a valid role."""
        return value in cls._value2member_map_


class CaseStatus(str, Enum):
    """
    Customer (case) status.

    Pending -> In Progress (assign) -> Solved (complete).
    Allowed transitions live in core.case_status.
    """
    PENDING = "Pending"
    IN_PROGRESS = "In Progress"
    SOLVED = "Solved"


class CasePriority(str, Enum):
    LOW = "Low"
    MEDIUM = "Medium"
    HIGH = "High"


class LoanType(str, Enum):
    HOME = "Home Loan"
    PERSONAL = "Personal Loan"
    BUSINESS = "Business Loan"
    EDUCATION = "Education Loan"
    VEHICLE = "Vehicle Loan"
    GOLD = "Gold Loan"
    LAP = "Loan Against Property (LAP)"
    CREDIT_CARD = "Credit Card"


class CasePaymentStatus(str, Enum):
    """Case-level payment status (agent fee collection)."""
    PENDING = "pending"
    PARTIAL = "partial"
    COMPLETED = "completed"


class CallOutcome(str, Enum):
    """Outcome recorded in a customer's call history."""
    PENDING = "Pending"
    IN_PROGRESS = "In Progress"
    SOLVED = "Solved"
    CALL_BACK = "Call Back"
    NOT_REACHABLE = "Not Reachable"


class FollowupStatus(str, Enum):
    PENDING = "Pending"
    COMPLETED = "Completed"
    REJECTED = "Rejected"
    CALL_BACK = "Call Back"
    IN_PROGRESS = "In Progress"
    CONNECTED = "Connected"
    NOT_CONNECTED = "Not Connected"
    SUCCESS = "Success"


class CallLogStatus(str, Enum):
    CONNECTED = "Connected"
    NOT_CONNECTED = "Not Connected"
    NOT_RESPONDED = "Not Responded"
    CALL_BACK = "Call Back"
    IN_PROGRESS = "In Progress"

    @classmethod
    def no_response(cls) -> list[str]:
        """Statuses counted as a call nobody answered."""
        return [cls.NOT_CONNECTED.value, cls.NOT_RESPONDED.value]

    @classmethod
    def completed(cls) -> list[str]:
        """Statuses counted as a finished call attempt."""
        return [cls.CONNECTED.value, cls.NOT_CONNECTED.value, cls.NOT_RESPONDED.value]


class OfferCaseStatus(str, Enum):
    IN_PROGRESS = "In Progress"
    COMPLETED = "Completed"
    ON_HOLD = "On Hold"


class OfferPaymentStatus(str, Enum):
    PENDING = "Pending"
    PARTIAL = "Partial"
    COMPLETE = "Complete"


class PaymentMethod(str, Enum):
    CASH = "Cash"
    BANK_TRANSFER = "Bank Transfer"
    UPI = "UPI"
    CREDIT_CARD = "Credit Card"
    DEBIT_CARD = "Debit Card"
    CHEQUE = "Cheque"


class PaymentStatus(str, Enum):
    PENDING = "Pending"
    COMPLETED = "Completed"
    FAILED = "Failed"


class RequestStatus(str, Enum):
    """Status of an agent-to-admin case request."""
    PENDING = "Pending"
    RESOLVED = "Resolved"
    REJECTED = "Rejected"


class DocumentField(str, Enum):
    """Upload field names accepted for case documents."""
    AADHAAR = "aadhaar_doc"
    PAN = "pan_doc"
    ACCOUNT_STATEMENT = "account_statement_doc"
    PAYMENT_PROOF = "payment_proof"


# =============================================================================
# Defaults
# =============================================================================

DEFAULT_ROLE = Role.TELECALLER
DEFAULT_CASE_STATUS = CaseStatus.PENDING
DEFAULT_CASE_PRIORITY = CasePriority.MEDIUM
