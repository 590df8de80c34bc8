"""Absenteeism rate, duration and cost."""

import logging

import pandas as pd

from workforce_kpi.metrics.headcount import safe_pct
from workforce_kpi.metrics.models import UNSPECIFIED_ABSENCE, AbsenceTypeSummary
from workforce_kpi.utils.transforms import clean_text_column
from workforce_kpi.utils.types import MetricValue

logger = logging.getLogger(__name__)


def group_absences_by_type(absences: pd.DataFrame) -> list[AbsenceTypeSummary]:
    """Events and days per absence type, most days first.

    Types with equal totals keep the order in which they first appear.
    """
    if absences.empty:
        return []

    labelled = absences.assign(type_absence=clean_text_column(absences["type_absence"], default=UNSPECIFIED_ABSENCE))
    grouped = (
        labelled.groupby("type_absence", sort=False)
        .agg(nb_absences=("nb_jours_ouvres", "size"), nb_jours=("nb_jours_ouvres", "sum"))
        .reset_index()
        .sort_values("nb_jours", ascending=False, kind="stable")
    )
    return [
        AbsenceTypeSummary(
            type_absence=str(row.type_absence),
            nb_absences=int(row.nb_absences),
            nb_jours=float(row.nb_jours),
        )
        for row in grouped.itertuples(index=False)
    ]


def compute_absenteeism(
    absences: pd.DataFrame,
    active_count: int,
    fte_total: float,
    employer_cost: float,
    working_days_per_month: int = 22,
) -> dict[str, MetricValue | list[AbsenceTypeSummary]]:
    theoretical_days = active_count * working_days_per_month
    absence_days = float(absences["nb_jours_ouvres"].sum())
    events = len(absences)

    capacity_days = fte_total * working_days_per_month
    daily_cost = float(employer_cost) / capacity_days if capacity_days else 0.0

    return {
        "jours_theoriques": float(theoretical_days),
        "nb_jours_absence": absence_days,
        "nb_absences_total": events,
        "taux_absenteisme": safe_pct(absence_days, theoretical_days),
        "duree_moyenne_absence": absence_days / events if events else 0.0,
        "cout_journalier_moyen": daily_cost,
        "cout_absenteisme": absence_days * daily_cost,
        "absences_par_type": group_absences_by_type(absences),
    }
