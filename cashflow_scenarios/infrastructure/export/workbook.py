"""Excel export of a locked scenario"""

import re
from datetime import date
from io import BytesIO
from typing import List, Optional, Sequence, Tuple
from openpyxl import Workbook
from openpyxl.styles import Alignment, Border, Font, PatternFill, Side
from openpyxl.utils import get_column_letter
from openpyxl.worksheet.worksheet import Worksheet
from cashflow_scenarios.domain.models import DailyBalance, ImportedTransaction, Scenario, WeekAggregateRaw

XLSX_MEDIA_TYPE = "application/vnd.openxmlformats-officedocument.spreadsheetml.sheet"

WEEKLY_SHEET = "Weekly Summary"
TRANSACTIONS_SHEET = "Transactions"
BALANCE_SHEET = "Running Balance"

AMOUNT_FORMAT = "#,##0.00"
DATE_FORMAT = "yyyy-mm-dd"

_HEADER_FONT = Font(bold=True, size=12)
_HEADER_FILL = PatternFill(start_color="FF4472C4", end_color="FF4472C4", fill_type="solid")
_THIN = Side(style="thin")
_BORDER = Border(top=_THIN, left=_THIN, bottom=_THIN, right=_THIN)


def _add_sheet(
    workbook: Workbook,
    title: str,
    headers: Sequence[str],
    widths: Sequence[int],
    rows: List[list],
) -> Worksheet:
    ws = workbook.create_sheet(title)
    ws.append(list(headers))
    for cell in ws[1]:
        cell.font = _HEADER_FONT
        cell.fill = _HEADER_FILL
        cell.alignment = Alignment(horizontal="center", vertical="center")

    for row in rows:
        ws.append(row)

    for idx, width in enumerate(widths, start=1):
        ws.column_dimensions[get_column_letter(idx)].width = width
    for row in ws.iter_rows():
        for cell in row:
            cell.border = _BORDER
    return ws


def _format_column(ws: Worksheet, column: int, number_format: str) -> None:
    for (cell,) in ws.iter_rows(min_row=2, min_col=column, max_col=column):
        cell.number_format = number_format


def year_week(day: date) -> str:
    """ISO week of `day` as YYWW"""
    iso_year, iso_week, _ = day.isocalendar()
    return f"{iso_year % 100:02d}{iso_week:02d}"


def export_filename(scenario: Scenario, today: date) -> str:
    """scenario_<name>_<YYYY_MM_DD>.xlsx with the name reduced to [A-Za-z0-9_]"""
    name = re.sub(r"\.xlsx$", "", scenario.name, flags=re.IGNORECASE)
    name = re.sub(r"[^a-zA-Z0-9]+", "_", name).strip("_")
    return f"scenario_{name}_{today.strftime('%Y_%m_%d')}.xlsx"


def build_scenario_workbook(
    scenario: Scenario,
    weeks: List[WeekAggregateRaw],
    rows: List[Tuple[ImportedTransaction, bool]],
    balances: Optional[List[DailyBalance]] = None,
) -> bytes:
    """
    Render weekly summary, transaction detail and (optionally) running balance sheets.

    Amounts are written in major units of the scenario's base currency.
    The running balance sheet is left out when `balances` is None or empty.
    """
    currency = scenario.base_currency
    workbook = Workbook()
    workbook.remove(workbook.active)

    weekly = _add_sheet(
        workbook,
        WEEKLY_SHEET,
        ["Week", f"Inflows ({currency})", f"Outflows ({currency})", f"Net Flow ({currency})"],
        [18, 18, 18, 18],
        [
            [
                week.week_label,
                week.inflow_total_book_cents / 100,
                week.outflow_total_book_cents / 100,
                (week.inflow_total_book_cents - week.outflow_total_book_cents) / 100,
            ]
            for week in weeks
        ],
    )
    for column in (2, 3, 4):
        _format_column(weekly, column, AMOUNT_FORMAT)

    detail = _add_sheet(
        workbook,
        TRANSACTIONS_SHEET,
        ["Week", "Date", "Type", f"Amount ({currency})", "Counterparty", "Description", "Modified"],
        [10, 12, 10, 15, 25, 40, 12],
        [
            [
                year_week(txn.date_due),
                txn.date_due,
                txn.direction,
                txn.amount_book_cents / 100,
                txn.counterparty or "",
                txn.description or "",
                "Yes" if overridden else "No",
            ]
            for txn, overridden in rows
        ],
    )
    _format_column(detail, 2, DATE_FORMAT)
    _format_column(detail, 4, AMOUNT_FORMAT)

    if balances:
        balance = _add_sheet(
            workbook,
            BALANCE_SHEET,
            ["Date", f"Balance ({currency})"],
            [12, 18],
            [[b.as_of_date, b.running_balance_book_cents / 100] for b in balances],
        )
        _format_column(balance, 1, DATE_FORMAT)
        _format_column(balance, 2, AMOUNT_FORMAT)

    buffer = BytesIO()
    workbook.save(buffer)
    return buffer.getvalue()
