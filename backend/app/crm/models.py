"""
CRM Domain Models

Opportunity / Proposal pipelines, Accounts, Contacts, Students, Leads, Tasks.
Stage of a pipeline card is never stored on the card: it is the title of the
column that currently holds it.
"""

from dataclasses import asdict, dataclass, field, fields
from datetime import datetime
from enum import Enum
from typing import Any, Dict, List, Optional
from uuid import uuid4


class OpportunityStage(str, Enum):
    """Sales funnel stages (column titles)"""
    NEW_OPPORTUNITY = "New Opportunity"
    TRIAL_CLASS = "Trial Class"
    NEGOTIATION = "Negotiation"
    CONTRACT_SIGNING = "Contract Signing"
    AWAITING_PAYMENT = "Awaiting Payment"
    WON = "Won"
    LOST = "Lost"


class ProposalStatus(str, Enum):
    """Proposal statuses (column titles)"""
    DRAFT = "Draft"
    SENT = "Sent"
    REVIEW = "Review"
    ACCEPTED = "Accepted"
    REJECTED = "Rejected"
    CANCELLED = "Cancelled"
    SUPERSEDED = "Superseded"


class LeadStage(str, Enum):
    """Lead funnel stages (column titles)"""
    NEW_LEAD = "New Lead"
    FIRST_CONTACT = "First Contact"
    FOLLOW_UP = "Follow-up"
    PRE_QUALIFIED = "Pre-qualified"
    QUALIFIED = "Qualified"
    DISQUALIFIED = "Disqualified"


class RelatedObjectType(str, Enum):
    """Entity kinds a GlobalTask can point at"""
    ACCOUNT = "account"
    CONTACT = "contact"
    OPPORTUNITY = "opportunity"
    LEAD = "lead"


class StatusColor(str, Enum):
    BLUE = "blue"
    ORANGE = "orange"
    PURPLE = "purple"
    YELLOW = "yellow"
    GREEN = "green"
    RED = "red"


# Board layouts, in display order
OPPORTUNITY_STAGE_ORDER = list(OpportunityStage)
PROPOSAL_STATUS_ORDER = list(ProposalStatus)
LEAD_STAGE_ORDER = list(LeadStage)

# Opportunities can only be created into this column
CREATION_STAGE = OpportunityStage.NEW_OPPORTUNITY

CLOSED_STAGES = {OpportunityStage.WON, OpportunityStage.LOST}

# Card label shown for each funnel stage
STAGE_DISPLAY_STATUS: Dict[OpportunityStage, tuple] = {
    OpportunityStage.NEW_OPPORTUNITY: ("New Lead", StatusColor.BLUE),
    OpportunityStage.NEGOTIATION: ("In Negotiation", StatusColor.ORANGE),
    OpportunityStage.CONTRACT_SIGNING: ("Contract", StatusColor.PURPLE),
    OpportunityStage.AWAITING_PAYMENT: ("Invoiced", StatusColor.YELLOW),
    OpportunityStage.WON: ("Completed", StatusColor.GREEN),
    OpportunityStage.LOST: ("Cancelled", StatusColor.RED),
}
DEFAULT_DISPLAY_STATUS = ("In Progress", StatusColor.BLUE)

UNKNOWN_NAME = "Unknown"


def display_status_for(stage_title: str) -> tuple:
    """(status label, color) shown on a card sitting in the given column"""
    try:
        stage = OpportunityStage(stage_title)
    except ValueError:
        return DEFAULT_DISPLAY_STATUS
    return STAGE_DISPLAY_STATUS.get(stage, DEFAULT_DISPLAY_STATUS)


def generate_id(prefix: str) -> str:
    """產生 ID: PREFIX-XXXXXXXX"""
    return f"{prefix}-{uuid4().hex[:8].upper()}"


def today_iso() -> str:
    return datetime.utcnow().date().isoformat()


class _Record:
    """to_dict / from_dict shared by every dataclass below"""

    def to_dict(self) -> Dict[str, Any]:
        data = asdict(self)
        for key, value in data.items():
            if isinstance(value, Enum):
                data[key] = value.value
        return data

    @classmethod
    def from_dict(cls, data: Dict[str, Any]):
        known = {f.name for f in fields(cls)}
        return cls(**{k: v for k, v in data.items() if k in known})


# === Opportunity ===

@dataclass
class ExperimentalClass(_Record):
    """Trial class booked for an opportunity"""
    id: str
    date: str
    time: str
    discipline: str
    student_name: str

    def __post_init__(self):
        if not self.id:
            self.id = generate_id("CLS")


@dataclass
class OpportunityCard(_Record):
    """Opportunity as shown on the sales funnel board"""
    id: str
    name: str
    amount: float = 0.0
    currency: str = "BRL"

    # Display label derived from the column on move
    status: str = "New Lead"
    status_color: str = StatusColor.BLUE.value

    sales_type: Optional[str] = None
    type: Optional[str] = None
    close_date: Optional[str] = None
    loss_reason: Optional[str] = None
    financial_status: Optional[str] = None

    account_id: Optional[str] = None
    contact_id: Optional[str] = None

    experimental_classes: List[ExperimentalClass] = field(default_factory=list)

    def __post_init__(self):
        if not self.id:
            self.id = generate_id("OPP")
        self.experimental_classes = [
            c if isinstance(c, ExperimentalClass) else ExperimentalClass.from_dict(c)
            for c in self.experimental_classes
        ]


# === Proposal ===

@dataclass
class PaymentInfo(_Record):
    installments: str = ""
    expiry_date: str = ""
    payment_methods: str = ""
    contract_period: str = ""
    contract_status: Optional[str] = None
    description: Optional[str] = None
    automated_contract: bool = False


@dataclass
class ProductItem(_Record):
    id: str
    label: str
    quantity: str = "1"
    tag: Optional[str] = None


@dataclass
class ProductGroup(_Record):
    id: str
    name: str
    quantity: str = "1"
    price: float = 0.0
    items: List[ProductItem] = field(default_factory=list)

    def __post_init__(self):
        self.items = [
            i if isinstance(i, ProductItem) else ProductItem.from_dict(i)
            for i in self.items
        ]


@dataclass
class ProposalTask(_Record):
    """Checklist item attached to a proposal"""
    id: str
    title: str
    due_date: str = ""
    is_completed: bool = False


@dataclass
class Proposal(_Record):
    """Commercial proposal for an opportunity"""
    id: str
    opportunity_id: str
    title: str = ""
    display_id: str = ""
    status: ProposalStatus = ProposalStatus.DRAFT
    value: float = 0.0
    date: str = ""
    discount: Optional[str] = None
    payment_info: Optional[PaymentInfo] = None
    products: List[ProductGroup] = field(default_factory=list)
    tasks: List[ProposalTask] = field(default_factory=list)

    def __post_init__(self):
        if not self.id:
            self.id = generate_id("PRP")
        if not isinstance(self.status, ProposalStatus):
            self.status = ProposalStatus(self.status)
        if isinstance(self.payment_info, dict):
            self.payment_info = PaymentInfo.from_dict(self.payment_info)
        self.products = [
            p if isinstance(p, ProductGroup) else ProductGroup.from_dict(p)
            for p in self.products
        ]
        self.tasks = [
            t if isinstance(t, ProposalTask) else ProposalTask.from_dict(t)
            for t in self.tasks
        ]


@dataclass
class ProposalCard(Proposal):
    """Proposal plus the display names of its opportunity and contact"""
    opportunity_name: str = UNKNOWN_NAME
    contact_name: str = UNKNOWN_NAME


# Fields of a ProposalCard that are cached copies of other entities
DENORMALIZED_PROPOSAL_FIELDS = ("opportunity_name", "contact_name")


# === Accounts / Contacts / Students ===

@dataclass
class Account(_Record):
    id: str
    name: str
    type: str = ""
    cpf_cnpj: str = ""
    main_contact_id: Optional[str] = None
    phone: str = ""
    email: str = ""
    manager: str = ""
    owner: str = ""

    def __post_init__(self):
        if not self.id:
            self.id = generate_id("ACC")


@dataclass
class Contact(_Record):
    id: str
    name: str
    account_id: Optional[str] = None
    phone: str = ""
    email: str = ""
    cpf: str = ""
    country: str = ""
    role: Optional[str] = None

    def __post_init__(self):
        if not self.id:
            self.id = generate_id("CON")


@dataclass
class Student(_Record):
    id: str
    first_name: str
    last_name: str = ""
    date_of_birth: Optional[str] = None
    school_year: str = ""
    school: str = ""
    email: str = ""
    guardian_contact_ids: List[str] = field(default_factory=list)

    def __post_init__(self):
        if not self.id:
            self.id = generate_id("STU")


# === Leads ===

@dataclass
class Lead(_Record):
    id: str
    name: str
    email: str = ""
    phone: str = ""
    source: str = ""
    company: Optional[str] = None
    priority: str = "Normal"
    note: Optional[str] = None
    disqualification_reason: Optional[str] = None

    def __post_init__(self):
        if not self.id:
            self.id = generate_id("LEAD")


# === Tasks ===

@dataclass
class GlobalTask(_Record):
    """
    Task shown on the tasks page.

    The relation is an id reference; related_object_name is a display value
    filled in on read and never used to resolve the relation.
    """
    id: str
    title: str
    due_date: str = ""
    is_completed: bool = False
    assignee: str = ""
    related_object_type: RelatedObjectType = RelatedObjectType.ACCOUNT
    related_object_id: Optional[str] = None
    related_object_name: str = ""
    created_at: str = field(default_factory=today_iso)
    completed_at: Optional[str] = None
    description: Optional[str] = None

    def __post_init__(self):
        if not self.id:
            self.id = generate_id("TSK")
        if not isinstance(self.related_object_type, RelatedObjectType):
            self.related_object_type = RelatedObjectType(self.related_object_type)
