"""KPI aggregation engine: record sets in, one metrics snapshot out."""

import logging

import pandas as pd

from workforce_kpi.config import EngineSettings
from workforce_kpi.metrics.absenteeism import compute_absenteeism
from workforce_kpi.metrics.compensation import compute_compensation
from workforce_kpi.metrics.demographics import compute_demographics
from workforce_kpi.metrics.headcount import compute_contract_mix, filter_active
from workforce_kpi.metrics.models import (
    MetricsSnapshot,
    absence_schema,
    conform_frame,
    employee_schema,
    remuneration_schema,
)
from workforce_kpi.metrics.org_structure import compute_org_breakdown
from workforce_kpi.metrics.quality import score_data_quality
from workforce_kpi.metrics.turnover import compute_turnover

logger = logging.getLogger(__name__)


def _resolve_reference_date(reference_date: pd.Timestamp | str | None) -> pd.Timestamp:
    if reference_date is None:
        return pd.Timestamp.now().normalize()
    ts = pd.Timestamp(reference_date)
    if ts.tzinfo is not None:
        ts = ts.tz_localize(None)
    return ts


def compute_metrics_snapshot(
    employees: pd.DataFrame | None,
    remunerations: pd.DataFrame | None = None,
    absences: pd.DataFrame | None = None,
    reference_date: pd.Timestamp | str | None = None,
    settings: EngineSettings | None = None,
) -> MetricsSnapshot:
    """Reduce one tenant's employee, pay and absence records into dashboard KPIs.

    The inputs are validated against their schemas and never modified. A
    malformed record set raises ``pandera.errors.SchemaError``; an empty one
    yields a snapshot whose ratios are all zero.
    """
    settings = settings or EngineSettings()
    reference = _resolve_reference_date(reference_date)

    roster = conform_frame(employees, employee_schema)
    pay = conform_frame(remunerations, remuneration_schema)
    leave = conform_frame(absences, absence_schema)

    active = filter_active(roster)
    contracts = compute_contract_mix(active)
    turnover = compute_turnover(
        roster,
        active_count=len(active),
        reference_date=reference,
        window_months=settings.turnover_window_months,
        annualization_factor=settings.annualization_factor,
    )
    demographics = compute_demographics(active, reference, default_age=settings.default_age)
    compensation = compute_compensation(
        active,
        pay,
        fte_total=contracts["etp_total"],
        employer_charge_rate=settings.employer_charge_rate,
        legacy_cumulative_cost=settings.legacy_cumulative_cost,
    )
    absenteeism = compute_absenteeism(
        leave,
        active_count=len(active),
        fte_total=contracts["etp_total"],
        employer_cost=compensation["cout_total_employeur"],
        working_days_per_month=settings.working_days_per_month,
    )
    organisation = compute_org_breakdown(active)

    snapshot = MetricsSnapshot(
        date_reference=reference.date(),
        effectif_total=len(roster),
        **contracts,
        **turnover,
        **demographics,
        **compensation,
        **absenteeism,
        **organisation,
        score_qualite_donnees=score_data_quality(roster),
    )
    logger.info(
        "Computed snapshot at %s: %d active, FTE %.2f, turnover %.2f%%, absenteeism %.2f%%",
        snapshot.date_reference, snapshot.effectif_actif, snapshot.etp_total,
        snapshot.taux_turnover, snapshot.taux_absenteisme,
    )
    return snapshot
