# import all models so Base.metadata is complete
from hse_kpi.db.models.user import User, Role
from hse_kpi.db.models.project import Project
from hse_kpi.db.models.daily_entry import DailyEntry
from hse_kpi.db.models.period_report import PeriodReport, ReportStatus
from hse_kpi.db.models.sources import Training, AwarenessSession, WorkPermit, Deviation
