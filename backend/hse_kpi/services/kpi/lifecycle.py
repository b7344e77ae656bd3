"""Weekly report lifecycle.

    draft --submit--> submitted --approve--> approved
                          |
                          +--reject--> rejected --resubmit--> submitted

Drafts and rejected reports can be edited with `update`; only drafts can be
deleted (soft delete, which frees the period for a new report). Approved
reports are frozen.
"""
import datetime as dt
from typing import Any, Mapping

import pydantic

from hse_kpi.core.config import settings
from hse_kpi.core.logging import logger
from hse_kpi.db.models.period_report import PeriodReport, ReportStatus
from hse_kpi.schemas.kpi import ReportFieldsIn
from hse_kpi.services.kpi.autopopulate import build_draft
from hse_kpi.services.kpi.errors import DuplicatePeriodError, ForbiddenOperation, ValidationError
from hse_kpi.services.kpi.periods import Period, resolve_period
from hse_kpi.services.kpi.rates import compute_rates
from hse_kpi.services.kpi.stores import KpiStores

DRAFT = ReportStatus.draft.value
SUBMITTED = ReportStatus.submitted.value
APPROVED = ReportStatus.approved.value
REJECTED = ReportStatus.rejected.value

ACTIONS = ("update", "submit", "resubmit", "approve", "reject", "delete")

# (current status, action) -> next status; None means the report leaves the live set
TRANSITIONS: dict[tuple[str, str], str | None] = {
    (DRAFT, "update"): DRAFT,
    (DRAFT, "submit"): SUBMITTED,
    (DRAFT, "delete"): None,
    (SUBMITTED, "approve"): APPROVED,
    (SUBMITTED, "reject"): REJECTED,
    (REJECTED, "update"): REJECTED,
    (REJECTED, "resubmit"): SUBMITTED,
}

APPROVER_ACTIONS = {"approve", "reject"}

RATE_INPUTS = {"accidents", "lost_workdays", "hours_worked"}
NULLABLE_FIELDS = {"hse_compliance_rate", "medical_compliance_rate", "noise_level", "notes"}
REQUIRED_FOR_SUBMIT = ("project_id", "period_number", "start_date", "end_date")


def _utcnow() -> dt.datetime:
    return dt.datetime.now(dt.timezone.utc)


def is_approver(actor: Any) -> bool:
    return getattr(actor, "role", None) in settings.approver_roles


def _check_permission(report: PeriodReport, action: str, actor: Any) -> None:
    if action in APPROVER_ACTIONS:
        if not is_approver(actor):
            raise ForbiddenOperation(action, report.status, "approver role required")
        return
    if is_approver(actor):
        return
    if report.submitted_by is None or report.submitted_by != getattr(actor, "id", None):
        raise ForbiddenOperation(action, report.status, "only the submitter can do this")


def validate_fields(payload: Mapping[str, Any] | None) -> dict[str, Any]:
    """Validate editable report fields; returns only the keys that were given."""
    if not payload:
        return {}
    try:
        data = ReportFieldsIn.model_validate(dict(payload))
    except pydantic.ValidationError as e:
        err = e.errors()[0]
        field = ".".join(str(p) for p in err.get("loc", ())) or None
        raise ValidationError(f"{field}: {err.get('msg')}" if field else str(e), field=field) from e

    values = data.model_dump(exclude_unset=True)
    for k, v in values.items():
        if v is None and k not in NULLABLE_FIELDS:
            raise ValidationError(f"{k} cannot be empty", field=k)
    return values


def _apply_fields(report: PeriodReport, values: Mapping[str, Any]) -> None:
    changed = {k for k, v in values.items() if getattr(report, k) != v}
    for k in changed:
        setattr(report, k, values[k])
    if changed & RATE_INPUTS:
        rates = compute_rates(report.accidents, report.lost_workdays, report.hours_worked)
        report.tf_value = rates.tf_value
        report.tg_value = rates.tg_value


def _check_submittable(report: PeriodReport, action: str) -> None:
    for name in REQUIRED_FOR_SUBMIT:
        if getattr(report, name, None) is None:
            raise ValidationError(f"{name} is required to {action} a report", field=name)


def create_report(
    stores: KpiStores,
    project_id: int,
    period: Period | dt.date,
    submitter: Any,
    values: Mapping[str, Any] | None = None,
) -> PeriodReport:
    if not isinstance(period, Period):
        period = resolve_period(period)

    overrides = validate_fields(values)
    if stores.reports.find_one(project_id, period.number, period.year) is not None:
        logger.info("kpi_report_duplicate", project_id=project_id, period_number=period.number, period_year=period.year)
        raise DuplicatePeriodError(project_id, period.number, period.year)

    draft = build_draft(stores, project_id, period)
    report = PeriodReport(
        **draft.report_fields(),
        submitted_by=getattr(submitter, "id", None),
        status=DRAFT,
        submission_count=1,
    )
    _apply_fields(report, overrides)

    report = stores.reports.save(report)
    logger.info(
        "kpi_report_created",
        report_id=report.id,
        project_id=project_id,
        period_number=period.number,
        period_year=period.year,
        sources=draft.sources,
    )
    return report


def allowed_actions(report: PeriodReport, actor: Any = None) -> list[str]:
    """Actions legal from the report's state; filtered by permission when an actor is given."""
    if report.is_deleted:
        return []
    out = []
    for action in ACTIONS:
        if (report.status, action) not in TRANSITIONS:
            continue
        if actor is not None:
            try:
                _check_permission(report, action, actor)
            except ForbiddenOperation:
                continue
        out.append(action)
    return out


def transition(
    stores: KpiStores,
    report: PeriodReport,
    action: str,
    actor: Any,
    payload: Mapping[str, Any] | None = None,
    now: dt.datetime | None = None,
) -> PeriodReport:
    """Apply one lifecycle action. Nothing is changed when an error is raised."""
    if action not in ACTIONS:
        raise ForbiddenOperation(action, report.status, "unknown action")
    if report.is_deleted:
        raise ForbiddenOperation(action, report.status, "report is deleted")
    key = (report.status, action)
    if key not in TRANSITIONS:
        raise ForbiddenOperation(action, report.status)
    _check_permission(report, action, actor)

    now = now or _utcnow()
    payload = dict(payload or {})
    previous = report.status

    if action == "delete":
        if report.id is None:
            raise ForbiddenOperation(action, report.status, "report was never saved")
        stores.reports.soft_delete(report.id)
        logger.info(
            "kpi_report_transition",
            report_id=report.id,
            action=action,
            from_status=previous,
            to_status="deleted",
            actor_id=getattr(actor, "id", None),
        )
        return report

    if action == "reject":
        reason = payload.get("reason")
        if not isinstance(reason, str) or not reason.strip():
            raise ValidationError("A rejection reason is required", field="reason")
        report.rejection_reason = reason.strip()
        report.rejected_at = now
        report.rejected_by = getattr(actor, "id", None)
    elif action == "approve":
        report.approved_by = getattr(actor, "id", None)
        report.approved_at = now
    elif action in ("update", "resubmit"):
        values = validate_fields(payload)
        if action == "resubmit":
            _check_submittable(report, action)
        _apply_fields(report, values)
        if action == "resubmit":
            # earlier rejection_* fields are kept as history
            report.submission_count = (report.submission_count or 1) + 1
            report.last_submitted_at = now
    elif action == "submit":
        _check_submittable(report, action)
        report.last_submitted_at = now

    report.status = TRANSITIONS[key]
    report = stores.reports.save(report)
    logger.info(
        "kpi_report_transition",
        report_id=report.id,
        action=action,
        from_status=previous,
        to_status=report.status,
        actor_id=getattr(actor, "id", None),
        submission_count=report.submission_count,
    )
    return report
