from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum
from typing import Dict, Optional, Tuple, Union

class ApplicationStatus(str, Enum):
    APPLIED = "Applied"
    OA = "OA"
    PHONE_SCREEN = "Phone Screen"
    HIRING_MANAGER_CALL = "Hiring Manager Call"
    TECHNICAL_INTERVIEW = "Technical Interview"
    VERBAL_OFFER = "Verbal Offer"
    FORMAL_OFFER = "Formal Offer"
    REJECTED_AFTER_INTERVIEW = "Rejected After Interview"
    REJECTED = "Rejected"
    ARCHIVED = "Archived"
    SIGNED = "Signed"

    @classmethod
    def parse(cls, label: str) -> Optional["ApplicationStatus"]:
        try:
            return cls(label)
        except ValueError:
            return None

@dataclass(frozen=True)
class DeadlineRange:
    start: datetime
    end: Optional[datetime] = None

@dataclass(frozen=True)
class RawRow:
    """One page of the Applications database, flattened to the fields we read."""
    id: str
    created: datetime
    status: str
    company: Optional[str] = None
    role: Optional[str] = None
    team: Optional[str] = None
    parent_ids: Tuple[str, ...] = ()   # "Application" relation; set on phase rows only
    deadline: Optional[DeadlineRange] = None

@dataclass(frozen=True)
class Application:
    id: str
    status: ApplicationStatus
    company: str
    role: str
    created: datetime
    team: Optional[str] = None

@dataclass(frozen=True)
class Phase:
    parent_id: str
    status: ApplicationStatus
    date: Optional[datetime] = None

ApplicationRow = Union[Application, Phase]

@dataclass(frozen=True)
class HiringOutcome:
    hired: bool = False
    company: Optional[str] = None
    role: Optional[str] = None
    team: Optional[str] = None

NOT_HIRED = HiringOutcome()

@dataclass(frozen=True)
class CycleReport:
    hiring: HiringOutcome
    companies: Tuple[str, ...]
    phase_counts: Dict[ApplicationStatus, int]
    paths: Dict[str, Tuple[Phase, ...]]
    total: int
    start_date: Optional[datetime] = None
    end_date: Optional[datetime] = None
    skipped: Tuple[Exception, ...] = field(default=(), compare=False)

    @property
    def path_list(self) -> Tuple[Tuple[Phase, ...], ...]:
        return tuple(self.paths.values())

@dataclass(frozen=True)
class SubscriptionRow:
    price: float
    frequency_months: float
    name: Optional[str] = None

    @property
    def monthly_cost(self) -> float:
        return self.price / self.frequency_months

@dataclass(frozen=True)
class SubscriptionSummary:
    monthly: float
    count: int

    @property
    def yearly(self) -> float:
        return self.monthly * 12
