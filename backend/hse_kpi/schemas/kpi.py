import datetime as dt
from pydantic import BaseModel, ConfigDict, Field


class DailyEntryIn(BaseModel):
    project_id: int
    entry_date: dt.date
    submitted_by: int | None = None
    workforce: int = Field(default=0, ge=0)
    inductions: int = Field(default=0, ge=0)
    findings: int = Field(default=0, ge=0)
    near_misses: int = Field(default=0, ge=0)
    first_aid_cases: int = Field(default=0, ge=0)
    accidents: int = Field(default=0, ge=0)
    lost_workdays: int = Field(default=0, ge=0)
    hours_worked: float = Field(default=0.0, ge=0)
    inspections: int = Field(default=0, ge=0)
    training_hours: float = Field(default=0.0, ge=0)
    work_permits: int = Field(default=0, ge=0)
    disciplinary_actions: int = Field(default=0, ge=0)
    hse_compliance_rate: float | None = Field(default=None, ge=0, le=100)
    medical_compliance_rate: float | None = Field(default=None, ge=0, le=100)
    noise_level: float | None = Field(default=None, ge=0)
    water_consumption: float = Field(default=0.0, ge=0)
    electricity_consumption: float = Field(default=0.0, ge=0)
    status: str = Field(default="draft", pattern="^(draft|submitted)$")
    notes: str | None = None


class ReportFieldsIn(BaseModel):
    """Editable report fields; every field optional, unknown keys rejected."""

    model_config = ConfigDict(extra="forbid")

    workforce: int | None = Field(default=None, ge=0)
    inductions: int | None = Field(default=None, ge=0)
    findings: int | None = Field(default=None, ge=0)
    near_misses: int | None = Field(default=None, ge=0)
    first_aid_cases: int | None = Field(default=None, ge=0)
    accidents: int | None = Field(default=None, ge=0)
    lost_workdays: int | None = Field(default=None, ge=0)
    hours_worked: float | None = Field(default=None, ge=0)
    inspections: int | None = Field(default=None, ge=0)
    disciplinary_actions: int | None = Field(default=None, ge=0)
    hse_compliance_rate: float | None = Field(default=None, ge=0, le=100)
    medical_compliance_rate: float | None = Field(default=None, ge=0, le=100)
    noise_level: float | None = Field(default=None, ge=0)
    water_consumption: float | None = Field(default=None, ge=0)
    electricity_consumption: float | None = Field(default=None, ge=0)
    training_hours: float | None = Field(default=None, ge=0)
    trainings_conducted: int | None = Field(default=None, ge=0)
    awareness_sessions: int | None = Field(default=None, ge=0)
    work_permits: int | None = Field(default=None, ge=0)
    findings_open: int | None = Field(default=None, ge=0)
    findings_closed: int | None = Field(default=None, ge=0)
    notes: str | None = None


class PeriodReportDraft(BaseModel):
    project_id: int
    period_number: int
    period_year: int
    start_date: dt.date
    end_date: dt.date

    workforce: int = 0
    inductions: int = 0
    findings: int = 0
    near_misses: int = 0
    first_aid_cases: int = 0
    accidents: int = 0
    lost_workdays: int = 0
    hours_worked: float = 0.0
    inspections: int = 0
    disciplinary_actions: int = 0
    hse_compliance_rate: float | None = None
    medical_compliance_rate: float | None = None
    noise_level: float | None = None
    water_consumption: float = 0.0
    electricity_consumption: float = 0.0

    training_hours: float = 0.0
    trainings_conducted: int = 0
    awareness_sessions: int = 0
    work_permits: int = 0
    findings_open: int = 0
    findings_closed: int = 0

    tf_value: float = 0.0
    tg_value: float = 0.0

    # raw row counts behind the snapshot, for display only
    sources: dict[str, int] = Field(default_factory=dict)

    def report_fields(self) -> dict:
        return self.model_dump(exclude={"sources"})


class MonthlyAggregate(BaseModel):
    pole: str
    month: int
    year: int
    project_count: int
    report_count: int
    indicators: dict[str, float | int | None]
    tf_value: float
    tg_value: float
    closure_rate: float
