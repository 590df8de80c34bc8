"""Entries, exits and turnover over a trailing window."""

import logging

import pandas as pd

from workforce_kpi.utils.types import DateRange, MetricValue

logger = logging.getLogger(__name__)


def trailing_window(reference_date: pd.Timestamp, months: int = 3) -> DateRange:
    """Calendar-month window ending at ``reference_date`` (both ends inclusive)."""
    return reference_date - pd.DateOffset(months=months), reference_date


def _in_window(dates: pd.Series, window: DateRange) -> pd.Series:
    start, end = window
    return dates.notna() & (dates >= start) & (dates <= end)


def compute_turnover(
    employees: pd.DataFrame,
    active_count: int,
    reference_date: pd.Timestamp,
    window_months: int = 3,
    annualization_factor: int = 4,
) -> dict[str, MetricValue]:
    """Count movements in the window and derive the turnover rate.

    Entries and exits are taken from the whole roster, not only the active
    population. The rate annualises the window linearly:

        average = (active + (active - exits + entries)) / 2
        rate = exits / average * annualization_factor * 100
    """
    window = trailing_window(reference_date, window_months)
    entries = int(_in_window(employees["date_entree"], window).sum())
    exits = int(_in_window(employees["date_sortie"], window).sum())

    average_headcount = (active_count + (active_count - exits + entries)) / 2
    if average_headcount > 0:
        rate = (exits / average_headcount) * annualization_factor * 100
    else:
        rate = 0.0

    logger.debug(
        "Turnover window %s..%s: %d entries, %d exits",
        window[0].date(), window[1].date(), entries, exits,
    )
    return {
        "nb_entrees": entries,
        "nb_sorties": exits,
        "effectif_moyen": float(average_headcount),
        "taux_turnover": float(rate),
    }
