import logging
from typing import Dict, List, Optional

from flask import Flask, jsonify, render_template, request

from mortgage_planner import config
from mortgage_planner.data_models import LoanParameters, ScheduleRow
from mortgage_planner.engine import compute_schedule, schedule_truncated
from mortgage_planner.formatter import format_currency, format_month, format_optional
from mortgage_planner.main import comparison_to_dict, row_to_dict
from mortgage_planner.overrides import (
    FORM_PREFIX,
    apply_flat_extra,
    clear_overrides,
    overrides_from_form,
    parse_override_text,
)
from mortgage_planner.totals import compare_totals, summarize
from mortgage_planner.utils import parse_year_month

logger = logging.getLogger(__name__)

app = Flask(__name__)
app.config["ASSET_VERSION"] = config.ASSET_VERSION
app.secret_key = config.SECRET_KEY
app.jinja_env.filters["currency"] = format_currency
app.jinja_env.filters["month"] = format_month
app.jinja_env.filters["optional_currency"] = format_optional


def _parse_start_month(value: Optional[str]):
    try:
        return parse_year_month(value or "")
    except ValueError:
        logger.warning("Invalid start month %r; using default", value)
        return config.DEFAULT_START_MONTH


def _form_to_params(form) -> LoanParameters:
    """Build loan parameters from form fields, defaulting anything unusable."""
    return LoanParameters.from_inputs(
        form.get("principal", config.DEFAULT_PRINCIPAL),
        form.get("rate", config.DEFAULT_ANNUAL_RATE),
        form.get("term_years", config.DEFAULT_TERM_YEARS),
        _parse_start_month(form.get("start_month")),
    )


def _default_form() -> Dict[str, str]:
    return {
        "principal": str(config.DEFAULT_PRINCIPAL),
        "rate": str(config.DEFAULT_ANNUAL_RATE),
        "term_years": str(config.DEFAULT_TERM_YEARS),
        "start_month": config.DEFAULT_START_MONTH.strftime("%Y-%m"),
        "extra_amount": "",
    }


def _input_values_from_form(form) -> Dict[int, str]:
    """Keep the raw text of each ledger input so the page echoes what was typed."""
    values: Dict[int, str] = {}
    for key, value in form.items():
        if key.startswith(FORM_PREFIX) and value.strip():
            try:
                values[int(key[len(FORM_PREFIX):])] = value
            except ValueError:
                continue
    return values


def _handle_action(action: str, form, base_schedule):
    """Return the override map and the ledger input texts for an action."""
    if action == "reset":
        return clear_overrides(), {}
    overrides = overrides_from_form(form)
    input_values = _input_values_from_form(form)
    if action == "apply_extra":
        amount = parse_override_text(form.get("extra_amount"))
        if amount is not None and amount > 0:
            overrides = apply_flat_extra(base_schedule, amount, overrides)
            input_values = {month: f"{value:.2f}" for month, value in overrides.items()}
    return overrides, input_values


def _serialize_schedule(schedule):
    """Convert schedule rows into JSON-serialisable dictionaries for charts."""
    return [row_to_dict(row) for row in schedule]


@app.route("/", methods=["GET", "POST"])
def index():
    form = _default_form()
    error = None
    action = "run"
    if request.method == "POST":
        form.update({k: v for k, v in request.form.items() if not k.startswith(FORM_PREFIX)})
        action = request.form.get("action", "run")

    params = _form_to_params(form)
    base_schedule = compute_schedule(params, {})
    overrides, input_values = ({}, {})
    if request.method == "POST":
        overrides, input_values = _handle_action(action, request.form, base_schedule)
    if action == "reset":
        form["extra_amount"] = ""

    actual_schedule = compute_schedule(params, overrides)
    if schedule_truncated(actual_schedule):
        error = (
            f"The balance is not repaid within {len(actual_schedule)} months; "
            "the schedule has been cut short."
        )
    rendered = {row.month_index for row in actual_schedule}
    # Overrides past the last row go back to the browser as hidden fields.
    hidden_values = {month: text for month, text in input_values.items() if month not in rendered}
    comparison = compare_totals(summarize(base_schedule), summarize(actual_schedule))

    return render_template(
        "index.html",
        form=form,
        comparison=comparison,
        schedule=actual_schedule,
        input_values=input_values,
        hidden_values=hidden_values,
        error=error,
        asset_version=app.config["ASSET_VERSION"],
        last_action=action,
    )


@app.post("/api/schedule")
def api_schedule():
    """Compute a scenario from a JSON body.

    Expected keys: ``principal``, ``annual_rate``, ``term_years``,
    ``start_month`` (YYYY-MM), optional ``overrides`` (month -> amount) and
    ``extra`` (flat amount on top of every planned payment).
    """
    payload = request.get_json(silent=True)
    if not isinstance(payload, dict):
        return jsonify({"error": "Request body must be a JSON object"}), 400
    try:
        start_month = parse_year_month(str(payload.get("start_month", "")))
    except ValueError as exc:
        return jsonify({"error": str(exc)}), 400

    params = LoanParameters.from_inputs(
        payload.get("principal", 0),
        payload.get("annual_rate", 0),
        payload.get("term_years", 0),
        start_month,
    )
    raw_overrides = payload.get("overrides") or {}
    if not isinstance(raw_overrides, dict):
        return jsonify({"error": "overrides must be an object of month -> amount"}), 400
    explicit = overrides_from_form(
        {f"{FORM_PREFIX}{month}": str(amount) for month, amount in raw_overrides.items() if amount is not None}
    )

    base_schedule = compute_schedule(params, {})
    overrides = apply_flat_extra(base_schedule, payload.get("extra"))
    overrides.update(explicit)
    actual_schedule: List[ScheduleRow] = compute_schedule(params, overrides)
    comparison = compare_totals(summarize(base_schedule), summarize(actual_schedule))
    return jsonify(
        {
            "summary": comparison_to_dict(comparison),
            "truncated": schedule_truncated(actual_schedule),
            "schedule": _serialize_schedule(actual_schedule),
        }
    )


if __name__ == "__main__":
    config.configure_logging()
    logger.info("Starting Mortgage Planner web app...")
    app.run(host="0.0.0.0", port=8710, debug=True)
