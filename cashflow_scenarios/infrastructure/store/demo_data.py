"""Demo company with 4 weeks of cash-flow transactions, used without a backend"""

from datetime import date
from typing import List
from cashflow_scenarios.domain.models import INFLOW, OUTFLOW, ImportedTransaction, Scenario

DEMO_SCENARIO = Scenario(
    id=0,
    name="Demo Scenario - Q1 2026",
    company_id="demo-company",
    dataset_code="DEMO_2026_Q1",
    status="Draft",
    start_date="2026-01-06",
    end_date="2026-02-02",
    base_currency="USD",
)

# (flow_id, direction, amount_cents, due, counterparty, description)
_ROWS = [
    ("demo-ib", INFLOW, 10_000_000, "2026-01-05", None, "Initial Balance"),
    # Week 1
    ("demo-flow-1", INFLOW, 2_500_000, "2026-01-08", "Acme Corporation", "Invoice #2024-001 - Consulting Services"),
    ("demo-flow-2", INFLOW, 1_500_000, "2026-01-10", "TechStart Inc.", "Monthly Retainer - January"),
    ("demo-flow-3", INFLOW, 850_000, "2026-01-12", "Global Solutions Ltd", "Project Milestone Payment"),
    ("demo-flow-4", OUTFLOW, 1_200_000, "2026-01-07", "Office Supplies Co.", "Equipment Purchase"),
    ("demo-flow-5", OUTFLOW, 800_000, "2026-01-09", "Rent Holdings LLC", "Office Rent - January"),
    ("demo-flow-6", OUTFLOW, 450_000, "2026-01-11", "Cloud Services Provider", "Monthly Subscription"),
    ("demo-flow-7", OUTFLOW, 300_000, "2026-01-12", "Marketing Agency", "Social Media Management"),
    # Week 2
    ("demo-flow-8", INFLOW, 1_800_000, "2026-01-15", "Enterprise Client XYZ", "Quarterly Payment - Q1"),
    ("demo-flow-9", INFLOW, 1_400_000, "2026-01-17", "Startup Ventures", "Development Services"),
    ("demo-flow-10", OUTFLOW, 2_000_000, "2026-01-15", "Payroll Services Inc.", "Employee Salaries - January"),
    ("demo-flow-11", OUTFLOW, 950_000, "2026-01-16", "Insurance Provider", "Business Insurance Premium"),
    ("demo-flow-12", OUTFLOW, 600_000, "2026-01-18", "Legal Advisory LLC", "Contract Review Services"),
    ("demo-flow-13", OUTFLOW, 300_000, "2026-01-19", "Utilities Company", "Electricity & Internet"),
    # Week 3
    ("demo-flow-14", INFLOW, 3_000_000, "2026-01-22", "Major Client Corp", "Invoice #2024-045 - Full Stack Development"),
    ("demo-flow-15", INFLOW, 1_500_000, "2026-01-24", "TechStart Inc.", "Monthly Retainer - February (Early Payment)"),
    ("demo-flow-16", INFLOW, 1_000_000, "2026-01-26", "E-commerce Platform", "API Integration Services"),
    ("demo-flow-17", OUTFLOW, 850_000, "2026-01-21", "Software Licenses Ltd", "Annual Software Licenses"),
    ("demo-flow-18", OUTFLOW, 750_000, "2026-01-23", "Professional Training", "Employee Development Program"),
    ("demo-flow-19", OUTFLOW, 500_000, "2026-01-25", "Travel Agency", "Client Meeting Expenses"),
    # Week 4
    ("demo-flow-20", INFLOW, 1_600_000, "2026-01-29", "Retail Chain Inc.", "POS Integration Project"),
    ("demo-flow-21", INFLOW, 1_200_000, "2026-01-31", "Healthcare Provider", "System Maintenance Fee"),
    ("demo-flow-22", OUTFLOW, 1_500_000, "2026-01-28", "Tax Advisor Services", "Q4 2025 Tax Preparation"),
    ("demo-flow-23", OUTFLOW, 900_000, "2026-01-30", "Equipment Rental Co.", "Server Hosting & Infrastructure"),
    ("demo-flow-24", OUTFLOW, 800_000, "2026-02-01", "Rent Holdings LLC", "Office Rent - February"),
]


def demo_transactions() -> List[ImportedTransaction]:
    """Imported transactions behind the demo scenario"""
    return [
        ImportedTransaction(
            flow_id=flow_id,
            direction=direction,
            amount_book_cents=amount,
            date_due=date.fromisoformat(due),
            counterparty=counterparty,
            description=description,
            is_initial_balance=flow_id == "demo-ib",
        )
        for flow_id, direction, amount, due, counterparty, description in _ROWS
    ]
