"""Command‑line interface for the mortgage planner.

This module uses the ``click`` library to implement a multi‑command
interface. Users can print the amortization schedule with their actual
payments applied, or only the summary comparing it with the unmodified plan.
Results can be printed to the terminal or exported to JSON/CSV files.
"""

from __future__ import annotations

import csv
import json
import logging
from pathlib import Path
from typing import Any, Dict, List, Optional, Tuple

import click

from . import config
from .data_models import LoanParameters, ScenarioComparison, ScheduleRow, ScheduleTotals
from .engine import compute_schedule, schedule_truncated
from .formatter import print_schedule, print_summary
from .overrides import apply_flat_extra, set_override
from .totals import compare_totals, summarize
from .utils import decimal_from_str, parse_year_month

logger = logging.getLogger(__name__)


def parse_amount(value: str) -> float:
    """Parse a numeric string with optional suffixes.

    Accepts plain floats ("315000") and shorthand with ``k``/``m`` suffixes
    (e.g., "315k" meaning 315_000). Returns a float.
    """
    value = value.strip().lower()
    value = value.replace(",", "")
    factor = 1.0
    if value.endswith("k"):
        factor = 1_000.0
        value = value[:-1]
    elif value.endswith("m"):
        factor = 1_000_000.0
        value = value[:-1]
    try:
        return float(value) * factor
    except ValueError:
        raise click.BadParameter(f"Invalid amount: {value}")


def parse_payment_strings(values: Tuple[str, ...]) -> Dict[int, Any]:
    """Parse ``MONTH:AMOUNT`` entries into an override map.

    Entries whose amount is empty or not a number are dropped, the same way
    the web form treats a cleared input.
    """
    overrides: Dict[int, Any] = {}
    for item in values:
        parts = item.split(":")
        if len(parts) != 2:
            raise click.BadParameter(f"Payment must be in MONTH:AMOUNT format; got {item}")
        month_str, amount_str = parts
        try:
            month_index = int(month_str)
        except ValueError:
            raise click.BadParameter(f"Invalid month number: {month_str}")
        if month_index < 1:
            raise click.BadParameter(f"Month numbers start at 1; got {month_index}")
        overrides = set_override(overrides, month_index, amount_str)
    return overrides


def build_params_from_options(principal: str, rate: float, term_years: float, start_month: str) -> LoanParameters:
    principal_value = decimal_from_str(str(parse_amount(principal)))
    try:
        start_dt = parse_year_month(start_month)
    except ValueError as exc:
        raise click.BadParameter(str(exc))
    return LoanParameters.from_inputs(principal_value, str(rate), str(term_years), start_dt)


def build_overrides_from_options(
    params: LoanParameters,
    payment: Tuple[str, ...],
    extra: Optional[str],
) -> Dict[int, Any]:
    """Combine explicit payments with an optional flat extra amount.

    The flat extra is applied first on top of the base plan; explicit
    ``--payment`` entries then win for their months.
    """
    overrides: Dict[int, Any] = {}
    if extra:
        amount = decimal_from_str(str(parse_amount(extra)))
        overrides = apply_flat_extra(compute_schedule(params, {}), amount)
    overrides.update(parse_payment_strings(payment))
    return overrides


def row_to_dict(row: ScheduleRow) -> Dict[str, Any]:
    return {
        "month": row.month_index,
        "due_date": row.due_date.strftime("%Y-%m"),
        "starting_balance": float(row.starting_balance),
        "planned_payment": float(row.planned_payment),
        "planned_principal": float(row.planned_principal),
        "planned_interest": float(row.planned_interest),
        "actual_payment": float(row.actual_payment),
        "interest_paid": float(row.interest_paid),
        "principal_paid": float(row.principal_paid),
        "extra_payment": float(row.extra_payment),
        "shortfall": float(row.shortfall),
        "balance_after": float(row.balance_after),
        "overridden": row.overridden,
    }


def totals_to_dict(totals: ScheduleTotals) -> Dict[str, Any]:
    return {
        "total_interest": float(totals.total_interest),
        "total_paid": float(totals.total_paid),
        "total_extra": float(totals.total_extra),
        "total_shortfall": float(totals.total_shortfall),
        "months": totals.months,
        "payoff_date": totals.payoff_date.strftime("%Y-%m") if totals.payoff_date else None,
    }


def comparison_to_dict(comparison: ScenarioComparison) -> Dict[str, Any]:
    return {
        "base": totals_to_dict(comparison.base),
        "actual": totals_to_dict(comparison.actual),
        "interest_saved": float(comparison.interest_saved),
        "months_saved": comparison.months_saved,
    }


def export_to_json(path: Path, schedule: List[ScheduleRow], comparison: ScenarioComparison) -> None:
    """Export schedule and summary to a JSON file."""
    data = {
        "summary": comparison_to_dict(comparison),
        "schedule": [row_to_dict(row) for row in schedule],
    }
    with path.open("w", encoding="utf-8") as f:
        json.dump(data, f, indent=2)


def export_to_csv(path: Path, schedule: List[ScheduleRow]) -> None:
    """Export schedule to a CSV file."""
    header = [
        "Month",
        "Due_Date",
        "Starting_Balance",
        "Planned_Payment",
        "Planned_Principal",
        "Planned_Interest",
        "Actual_Payment",
        "Interest_Paid",
        "Principal_Paid",
        "Extra_Payment",
        "Shortfall",
        "Balance_After",
    ]
    with path.open("w", newline="", encoding="utf-8") as f:
        writer = csv.writer(f)
        writer.writerow(header)
        for row in schedule:
            writer.writerow(
                [
                    row.month_index,
                    row.due_date.strftime("%Y-%m"),
                    float(row.starting_balance),
                    float(row.planned_payment),
                    float(row.planned_principal),
                    float(row.planned_interest),
                    float(row.actual_payment),
                    float(row.interest_paid),
                    float(row.principal_paid),
                    float(row.extra_payment),
                    float(row.shortfall),
                    float(row.balance_after),
                ]
            )


def run_scenario(params: LoanParameters, overrides: Dict[int, Any]) -> Tuple[List[ScheduleRow], ScenarioComparison]:
    """Generate the actual schedule and compare it with the base plan."""
    base_schedule = compute_schedule(params, {})
    actual_schedule = compute_schedule(params, overrides)
    if schedule_truncated(actual_schedule):
        click.echo(
            f"Warning: the balance is not repaid within {len(actual_schedule)} months; schedule truncated.",
            err=True,
        )
    comparison = compare_totals(summarize(base_schedule), summarize(actual_schedule))
    return actual_schedule, comparison


def loan_options(func):
    """Attach the loan and payment options shared by every command."""
    options = [
        click.option("--principal", "-p", "principal", default=str(config.DEFAULT_PRINCIPAL), show_default=True, help="Loan amount"),
        click.option("--rate", "-r", "rate", type=float, default=float(config.DEFAULT_ANNUAL_RATE), show_default=True, help="Annual interest rate (percent)"),
        click.option("--term-years", "-t", "term_years", type=float, default=config.DEFAULT_TERM_YEARS, show_default=True, help="Loan term in years"),
        click.option("--start-month", "-s", "start_month", default=config.DEFAULT_START_MONTH.strftime("%Y-%m"), show_default=True, help="First due month (YYYY-MM)"),
        click.option("--payment", "payment", multiple=True, help="Actual payment in MONTH:AMOUNT format, e.g. 1:0"),
        click.option("--extra", "extra", help="Flat extra amount paid on top of the planned payment every month"),
        click.option("--log-level", "log_level", default=None, help="Logging level (DEBUG, INFO, WARNING)"),
    ]
    for option in reversed(options):
        func = option(func)
    return func


@click.group()
def cli() -> None:
    """A mortgage planner that tracks actual payments against the plan."""
    pass


@cli.command()
@loan_options
@click.option("--output", "output", type=str, help="Output file path (.json or .csv)")
def schedule(
    principal: str,
    rate: float,
    term_years: float,
    start_month: str,
    payment: Tuple[str, ...],
    extra: Optional[str],
    log_level: Optional[str],
    output: Optional[str],
) -> None:
    """Compute and print the amortization schedule with actual payments applied."""
    config.configure_logging(log_level)
    params = build_params_from_options(principal, rate, term_years, start_month)
    overrides = build_overrides_from_options(params, payment, extra)
    logger.info("Computing schedule with %d payment overrides", len(overrides))
    schedule_rows, comparison = run_scenario(params, overrides)
    if output:
        path = Path(output)
        if path.suffix.lower() == ".json":
            export_to_json(path, schedule_rows, comparison)
        elif path.suffix.lower() == ".csv":
            export_to_csv(path, schedule_rows)
        else:
            raise click.BadParameter("Unsupported output format; use .json or .csv")
        click.echo(f"Schedule exported to {path}")
        return
    print_summary(comparison)
    if len(schedule_rows) > config.MAX_PRINTED_ROWS:
        click.echo(
            f"Schedule has {len(schedule_rows)} rows; showing first {config.MAX_PRINTED_ROWS} rows."
        )
        print_schedule(schedule_rows[: config.MAX_PRINTED_ROWS])
    else:
        print_schedule(schedule_rows)


@cli.command()
@loan_options
@click.option("--output", "output", type=str, help="Output file path (.json)")
def summary(
    principal: str,
    rate: float,
    term_years: float,
    start_month: str,
    payment: Tuple[str, ...],
    extra: Optional[str],
    log_level: Optional[str],
    output: Optional[str],
) -> None:
    """Compare the plan with actual payments against the unmodified plan."""
    config.configure_logging(log_level)
    params = build_params_from_options(principal, rate, term_years, start_month)
    overrides = build_overrides_from_options(params, payment, extra)
    _, comparison = run_scenario(params, overrides)
    if output:
        path = Path(output)
        if path.suffix.lower() != ".json":
            raise click.BadParameter("Summary export must use .json extension")
        with path.open("w", encoding="utf-8") as f:
            json.dump({"summary": comparison_to_dict(comparison)}, f, indent=2)
        click.echo(f"Summary exported to {path}")
    else:
        print_summary(comparison)


if __name__ == "__main__":
    cli()
