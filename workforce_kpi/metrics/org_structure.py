"""Headcount and payroll broken down by site and cost center."""

import logging

import pandas as pd

from workforce_kpi.metrics.models import UNDEFINED_LABEL, CostCenterPayroll, SiteHeadcount
from workforce_kpi.utils.transforms import clean_text_column

logger = logging.getLogger(__name__)


def _label(series: pd.Series) -> pd.Series:
    return clean_text_column(series, default=UNDEFINED_LABEL)


def headcount_by_site(active: pd.DataFrame) -> list[SiteHeadcount]:
    """Active headcount per site, largest first."""
    if active.empty:
        return []
    counts = _label(active["code_site"]).value_counts(sort=False)
    ranked = counts.sort_values(ascending=False, kind="stable")
    return [SiteHeadcount(code_site=site, effectif=int(n)) for site, n in ranked.items()]


def payroll_by_cost_center(active: pd.DataFrame) -> list[CostCenterPayroll]:
    """Active headcount and base-salary payroll per cost center, costliest first."""
    if active.empty:
        return []
    grouped = (
        active.assign(code_cost_center=_label(active["code_cost_center"]))
        .groupby("code_cost_center", sort=False)
        .agg(effectif=("salaire_base_mensuel", "size"), masse_salariale=("salaire_base_mensuel", "sum"))
        .reset_index()
        .sort_values("masse_salariale", ascending=False, kind="stable")
    )
    return [
        CostCenterPayroll(
            code_cost_center=row.code_cost_center,
            effectif=int(row.effectif),
            masse_salariale=float(row.masse_salariale),
        )
        for row in grouped.itertuples(index=False)
    ]


def compute_org_breakdown(active: pd.DataFrame) -> dict[str, list]:
    sites = headcount_by_site(active)
    centers = payroll_by_cost_center(active)
    logger.debug("Org breakdown: %d site(s), %d cost center(s)", len(sites), len(centers))
    return {
        "effectifs_par_site": sites,
        "effectifs_par_cost_center": centers,
    }
