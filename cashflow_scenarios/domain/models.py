"""Domain models - pure Python dataclasses representing scenario entities"""

from dataclasses import dataclass, field
from datetime import date
from typing import List, Optional

INFLOW = "INFLOW"
OUTFLOW = "OUTFLOW"

INITIAL_BALANCE_WEEK_INDEX = 0


@dataclass(frozen=True)
class Transaction:
    """Display transaction inside a weekly aggregate"""

    id: str
    type: str  # "transaction" or "other"
    direction: str  # "INFLOW" or "OUTFLOW"
    amount_book_cents: int
    date_due: str  # ISO date, "" for the initial-balance "other" bucket
    counterparty: Optional[str] = None
    description: Optional[str] = None
    is_initial_balance: bool = False


@dataclass(frozen=True)
class TopTransactionItem:
    """One of the top-N transactions of a week, as delivered by the scenario API"""

    flow_id: str
    amount_book_cents: int
    counterparty: Optional[str]
    description: Optional[str]
    date_due: str


@dataclass(frozen=True)
class WeekAggregateRaw:
    """Raw weekly summary: top-5 per direction plus an "other" bucket"""

    week_index: int
    week_label: str
    week_start_date: Optional[str]
    inflow_total_book_cents: int
    outflow_total_book_cents: int
    inflow_top5: List[TopTransactionItem] = field(default_factory=list)
    outflow_top5: List[TopTransactionItem] = field(default_factory=list)
    inflow_other_book_cents: int = 0
    outflow_other_book_cents: int = 0


@dataclass(frozen=True)
class WeeklyAggregate:
    """Week bucket used by the override engine and the balance calculator"""

    week_index: int
    week_label: str
    week_start_date: Optional[str]
    inflow_total_book_cents: int
    outflow_total_book_cents: int
    transactions: List[Transaction] = field(default_factory=list)


@dataclass(frozen=True)
class RunningBalancePoint:
    """Balance in major currency units after all transactions on `date`"""

    date: str
    balance: float


@dataclass(frozen=True)
class Scenario:
    """Scenario metadata"""

    id: int
    name: str
    company_id: str
    dataset_code: str
    status: str  # "Draft" or "Locked"
    start_date: str
    end_date: str
    base_currency: str = "USD"
    locked_at: Optional[str] = None


@dataclass(frozen=True)
class ScenarioSnapshot:
    """Scenario with its weeks and the running balance derived from them"""

    scenario: Optional[Scenario]
    weekly_aggregates: List[WeeklyAggregate]
    running_balance: List[RunningBalancePoint]


@dataclass(frozen=True)
class TransactionUpdate:
    """Single-transaction amendment; None means keep the current value"""

    new_date_due: Optional[str] = None
    new_amount_book_cents: Optional[int] = None


@dataclass(frozen=True)
class OverrideItem:
    """One entry of a batch override submission"""

    flow_id: str
    new_date_due: Optional[str] = None
    new_amount_book_cents: Optional[int] = None


@dataclass(frozen=True)
class BatchOverrideResult:
    """Outcome of a batch override submission"""

    updated_count: int
    overrides: List[OverrideItem]


@dataclass(frozen=True)
class ImportedTransaction:
    """Transaction row produced by the CSV import pipeline"""

    flow_id: str
    direction: str
    amount_book_cents: int
    date_due: date
    counterparty: Optional[str] = None
    description: Optional[str] = None
    is_initial_balance: bool = False


@dataclass(frozen=True)
class ScenarioOverride:
    """Stored override; original values are frozen on first write"""

    flow_id: str
    original_date_due: date
    original_amount_book_cents: int
    new_date_due: Optional[date] = None
    new_amount_book_cents: Optional[int] = None


@dataclass(frozen=True)
class DailyBalance:
    """Per-date delta and cumulative balance in cents"""

    as_of_date: date
    delta_book_cents: int
    running_balance_book_cents: int
