"""KPI aggregation engine.

Reduces a tenant's employee roster, monthly pay records and absence records
into a single dashboard snapshot: headcount and contract mix, turnover,
demographics, payroll cost, absenteeism and organisation breakdowns.
"""

from workforce_kpi.metrics.engine import compute_metrics_snapshot
from workforce_kpi.metrics.models import (
    AbsenceTypeSummary,
    CostCenterPayroll,
    MetricsSnapshot,
    PyramideAges,
    SiteHeadcount,
)
