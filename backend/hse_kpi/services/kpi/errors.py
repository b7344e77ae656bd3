class KpiError(Exception):
    """Base class for errors surfaced by the KPI engine."""


class ValidationError(KpiError):
    """Input is missing or malformed; nothing was persisted."""

    def __init__(self, message: str, field: str | None = None):
        super().__init__(message)
        self.message = message
        self.field = field


class DuplicatePeriodError(KpiError):
    """A non-deleted report already exists for the project and period."""

    def __init__(self, project_id: int, period_number: int, period_year: int):
        super().__init__(
            f"A report already exists for project {project_id}, week {period_number}/{period_year}"
        )
        self.project_id = project_id
        self.period_number = period_number
        self.period_year = period_year


class ForbiddenOperation(KpiError):
    """Lifecycle action not allowed from the report's current state or for this actor."""

    def __init__(self, action: str, status: str, reason: str | None = None):
        msg = f"Cannot '{action}' report (status={status})"
        if reason:
            msg += f": {reason}"
        super().__init__(msg)
        self.action = action
        self.status = status
        self.reason = reason
