"""Dashboard indicators built on top of metrics snapshots."""

from workforce_kpi.dashboard.alerts import Alert, build_alerts
from workforce_kpi.dashboard.indicators import (
    Evolution,
    KpiCard,
    PerformanceThresholds,
    build_kpi_cards,
    build_trend_frame,
    calculate_evolution,
    compute_evolutions,
    generate_insight,
    performance_level,
    resolve_thresholds,
    top_cost_centers,
    top_sites,
    trend_direction,
)
from workforce_kpi.dashboard.report import render_snapshot
