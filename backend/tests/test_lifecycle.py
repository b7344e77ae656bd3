import datetime as dt
import pytest

from hse_kpi.crud.reports import SqlReportStore
from hse_kpi.db.models import PeriodReport
from hse_kpi.services.kpi.errors import DuplicatePeriodError, ForbiddenOperation, ValidationError
from hse_kpi.services.kpi.lifecycle import TRANSITIONS, allowed_actions, create_report, transition
from hse_kpi.services.kpi.periods import period_bounds

WEEK = period_bounds(48, 2025)
NOW = dt.datetime(2025, 12, 1, 9, 0, tzinfo=dt.timezone.utc)


def _submitted(stores, project, owner):
    r = create_report(stores, project.id, WEEK, owner, values={"hours_worked": 50_000, "accidents": 1})
    return transition(stores, r, "submit", owner, now=NOW)


def test_create_report_starts_as_draft(stores, project, owner):
    r = create_report(stores, project.id, WEEK, owner, values={"hours_worked": 50_000, "accidents": 1, "lost_workdays": 5})
    assert r.id is not None
    assert r.status == "draft"
    assert r.submission_count == 1
    assert r.submitted_by == owner.id
    assert (r.period_number, r.period_year) == (48, 2025)
    assert r.tf_value == 20.0
    assert r.tg_value == 0.1


def test_create_report_accepts_a_date(stores, project, owner):
    r = create_report(stores, project.id, dt.date(2025, 11, 26), owner)
    assert (r.period_number, r.period_year) == (48, 2025)


def test_duplicate_create_fails(stores, make_project, owner):
    p5 = make_project("PRJ-5", "Nord")
    week12 = period_bounds(12, 2026)
    first = create_report(stores, p5.id, week12, owner, values={"hours_worked": 20_000, "accidents": 2, "notes": "S12"})

    with pytest.raises(DuplicatePeriodError):
        create_report(stores, p5.id, week12, owner, values={"hours_worked": 1_000, "accidents": 0, "notes": "autre"})

    kept = stores.reports.find_one(p5.id, 12, 2026)
    assert kept.id == first.id
    assert kept.status == "draft"
    assert kept.hours_worked == 20_000.0
    assert kept.accidents == 2
    assert kept.notes == "S12"
    assert kept.tf_value == 100.0
    assert kept.submission_count == 1


def test_invalid_values_persist_nothing(db, stores, project, owner):
    with pytest.raises(ValidationError) as e:
        create_report(stores, project.id, WEEK, owner, values={"accidents": -1})
    assert e.value.field == "accidents"
    assert db.query(PeriodReport).count() == 0


def test_submit_then_approve(stores, project, owner, manager):
    r = _submitted(stores, project, owner)
    assert r.status == "submitted"
    assert r.last_submitted_at is not None

    r = transition(stores, r, "approve", manager, now=NOW)
    assert r.status == "approved"
    assert r.approved_by == manager.id
    assert r.approved_at is not None
    assert allowed_actions(r) == []


def test_approved_report_is_frozen(stores, project, owner, manager):
    r = transition(stores, _submitted(stores, project, owner), "approve", manager)
    for action in ("update", "submit", "reject", "delete", "resubmit", "approve"):
        with pytest.raises(ForbiddenOperation):
            transition(stores, r, action, manager, payload={"reason": "x"})
    assert r.status == "approved"


def test_reject_requires_reason(stores, project, owner, manager):
    r = _submitted(stores, project, owner)
    with pytest.raises(ValidationError):
        transition(stores, r, "reject", manager, payload={"reason": "   "})
    assert r.status == "submitted"
    assert r.rejection_reason is None


@pytest.mark.parametrize("reason", [123, ["manque"], None])
def test_reject_reason_must_be_text(stores, project, owner, manager, reason):
    r = _submitted(stores, project, owner)
    with pytest.raises(ValidationError) as e:
        transition(stores, r, "reject", manager, payload={"reason": reason})
    assert e.value.field == "reason"
    assert r.status == "submitted"
    assert r.rejection_reason is None


def test_reject_then_resubmit_is_one_report(db, stores, project, owner, manager):
    r = _submitted(stores, project, owner)
    r = transition(stores, r, "reject", manager, payload={"reason": "Heures manquantes"}, now=NOW)
    assert r.status == "rejected"
    assert r.rejected_by == manager.id
    assert r.submission_count == 1
    assert allowed_actions(r) == ["update", "resubmit"]

    r = transition(stores, r, "update", owner, payload={"hours_worked": 100_000})
    assert r.status == "rejected"
    assert r.tf_value == 10.0

    r = transition(stores, r, "resubmit", owner, payload={"notes": "corrige"})
    assert r.status == "submitted"
    assert r.submission_count == 2
    assert r.rejection_reason == "Heures manquantes"
    assert r.notes == "corrige"
    assert db.query(PeriodReport).filter(PeriodReport.project_id == project.id).count() == 1


def test_only_approvers_decide(stores, project, owner):
    r = _submitted(stores, project, owner)
    with pytest.raises(ForbiddenOperation):
        transition(stores, r, "approve", owner)
    with pytest.raises(ForbiddenOperation):
        transition(stores, r, "reject", owner, payload={"reason": "non"})
    assert r.status == "submitted"


def test_non_owner_cannot_edit(stores, project, owner, other, manager):
    r = create_report(stores, project.id, WEEK, owner)
    with pytest.raises(ForbiddenOperation):
        transition(stores, r, "update", other, payload={"accidents": 2})
    assert r.accidents == 0
    assert allowed_actions(r, other) == []
    assert allowed_actions(r, owner) == ["update", "submit", "delete"]

    r = transition(stores, r, "update", manager, payload={"inspections": 4})
    assert r.inspections == 4


def test_update_validation(stores, project, owner):
    r = create_report(stores, project.id, WEEK, owner)
    with pytest.raises(ValidationError):
        transition(stores, r, "update", owner, payload={"hse_compliance_rate": 120})
    with pytest.raises(ValidationError):
        transition(stores, r, "update", owner, payload={"unknown_field": 1})
    with pytest.raises(ValidationError):
        transition(stores, r, "update", owner, payload={"accidents": None})
    assert r.hse_compliance_rate is None

    r = transition(stores, r, "update", owner, payload={"hse_compliance_rate": 97.5, "accidents": 2, "hours_worked": 40_000})
    assert r.hse_compliance_rate == 97.5
    assert r.tf_value == 50.0


def test_delete_draft_frees_the_period(stores, project, owner):
    r = create_report(stores, project.id, WEEK, owner)
    transition(stores, r, "delete", owner)
    assert r.deleted_at is not None
    assert r.is_deleted
    assert stores.reports.find_one(project.id, 48, 2025) is None
    with pytest.raises(ForbiddenOperation):
        transition(stores, r, "update", owner, payload={"accidents": 1})

    again = create_report(stores, project.id, WEEK, owner)
    assert again.id != r.id


def test_unsaved_report_cannot_be_deleted(stores, project, owner):
    r = PeriodReport(project_id=project.id, period_number=48, period_year=2025, status="draft", submitted_by=owner.id)
    with pytest.raises(ForbiddenOperation):
        transition(stores, r, "delete", owner)
    assert r.deleted_at is None


def test_submitted_report_cannot_be_deleted(stores, project, owner, manager):
    r = _submitted(stores, project, owner)
    with pytest.raises(ForbiddenOperation):
        transition(stores, r, "delete", manager)
    assert r.deleted_at is None


def test_unknown_action(stores, project, owner):
    r = create_report(stores, project.id, WEEK, owner)
    with pytest.raises(ForbiddenOperation):
        transition(stores, r, "archive", owner)


def test_transition_table():
    assert TRANSITIONS[("draft", "submit")] == "submitted"
    assert TRANSITIONS[("submitted", "reject")] == "rejected"
    assert TRANSITIONS[("rejected", "resubmit")] == "submitted"
    assert not [k for k in TRANSITIONS if k[0] == "approved"]


class RacingReportStore(SqlReportStore):
    """Another writer creates the same period between the check and the insert."""

    def __init__(self, db, competitor):
        super().__init__(db)
        self.competitor = competitor
        self.raced = False

    def find_one(self, project_id, period_number, period_year):
        if not self.raced:
            self.raced = True
            self.competitor()
            return None
        return super().find_one(project_id, period_number, period_year)


def test_concurrent_create_surfaces_duplicate(db, stores, project, owner, add_report):
    stores.reports = RacingReportStore(db, lambda: add_report(project, 48, 2025, status="draft"))
    with pytest.raises(DuplicatePeriodError):
        create_report(stores, project.id, WEEK, owner)
    assert db.query(PeriodReport).count() == 1
