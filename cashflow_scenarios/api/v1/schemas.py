"""Pydantic schemas for API request/response validation"""

from datetime import date
from typing import List, Optional
from pydantic import BaseModel, Field, model_validator


class ScenarioResponse(BaseModel):
    """Response for GET /companies/{company_id}/scenarios/{scenario_id}"""

    id: int
    name: str
    company_id: str
    dataset_code: str
    status: str
    start_date: str
    end_date: str
    base_currency: str
    locked_at: Optional[str] = None


class TopTransactionItemSchema(BaseModel):
    """One of the top-5 transactions of a week"""

    flow_id: str
    amount_book_cents: int
    counterparty: Optional[str] = None
    description: Optional[str] = None
    date_due: str


class WeekAggregateSchema(BaseModel):
    """Single week's aggregated data"""

    week_index: int
    week_label: str
    week_start_date: Optional[str] = None
    inflow_total_book_cents: int
    outflow_total_book_cents: int
    inflow_top5: List[TopTransactionItemSchema]
    outflow_top5: List[TopTransactionItemSchema]
    inflow_other_book_cents: int
    outflow_other_book_cents: int


class WeeklyAggregatesResponse(BaseModel):
    """Response for GET .../weekly-aggregates"""

    scenario_id: int
    base_currency: str
    weeks: List[WeekAggregateSchema]


class RunningBalanceItem(BaseModel):
    """Single day's balance"""

    as_of_date: date
    delta_book_cents: int
    running_balance_book_cents: int


class RunningBalanceResponse(BaseModel):
    """Response for GET .../running-balance"""

    scenario_id: int
    base_currency: str
    balances: List[RunningBalanceItem]


class UpsertOverrideRequest(BaseModel):
    """Request body for PUT .../overrides/{flow_id}; omitted fields keep their value, null clears"""

    new_date_due: Optional[date] = None
    new_amount_book_cents: Optional[int] = Field(None, ge=0, description="New amount in cents")

    @model_validator(mode="after")
    def require_one_change(self):
        if not self.model_fields_set & {"new_date_due", "new_amount_book_cents"}:
            raise ValueError("You must provide at least one value to change (date or amount)")
        return self

    def changes(self) -> dict:
        """Only the fields the client actually sent"""
        return self.model_dump(include={"new_date_due", "new_amount_book_cents"} & self.model_fields_set)


class BatchOverrideItem(UpsertOverrideRequest):
    """Single item in a batch update"""

    flow_id: str = Field(..., min_length=1, description="flow_id is required")


class BatchUpdateOverridesRequest(BaseModel):
    """Request body for POST .../overrides/batch"""

    overrides: List[BatchOverrideItem] = Field(..., min_length=1, max_length=100)


class OverrideResponse(BaseModel):
    """Stored override for one transaction"""

    flow_id: str
    original_date_due: date
    original_amount_book_cents: int
    new_date_due: Optional[date] = None
    new_amount_book_cents: Optional[int] = None


class BatchOverrideResult(BaseModel):
    """Result of a single override in a batch"""

    flow_id: str
    new_date_due: Optional[date] = None
    new_amount_book_cents: Optional[int] = None


class BatchUpdateOverridesResponse(BaseModel):
    """Response for POST .../overrides/batch"""

    updated_count: int
    overrides: List[BatchOverrideResult]
