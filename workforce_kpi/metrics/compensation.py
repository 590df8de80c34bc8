"""Payroll mass, employer cost and leave-balance provisions."""

import logging

import pandas as pd

from workforce_kpi.metrics.headcount import safe_pct
from workforce_kpi.metrics.models import EMPLOYER_CHARGES, GROSS_COMPONENTS, LEAVE_BALANCES
from workforce_kpi.utils.types import MetricValue

logger = logging.getLogger(__name__)

SOURCE_PAYROLL = "remunerations"
SOURCE_ESTIMATE = "estimation"


def _safe_div(numerator: float, denominator: float) -> float:
    return float(numerator) / float(denominator) if denominator else 0.0


def _payroll_totals(remunerations: pd.DataFrame, legacy_cumulative_cost: bool) -> dict[str, float]:
    amounts = remunerations.fillna({col: 0.0 for col in GROSS_COMPONENTS + EMPLOYER_CHARGES + LEAVE_BALANCES})
    gross_per_row = amounts[GROSS_COMPONENTS].sum(axis=1)
    charges_per_row = amounts[EMPLOYER_CHARGES].sum(axis=1)

    gross = float(gross_per_row.sum())
    charges = float(charges_per_row.sum())
    if legacy_cumulative_cost:
        # Each record re-adds the running gross total, as the historical
        # dashboard computation did.
        employer_cost = float(gross_per_row.cumsum().sum()) + charges
    else:
        employer_cost = gross + charges

    totals = {
        "masse_salariale_brute": gross,
        "cout_total_employeur": employer_cost,
        "total_primes_variables": float(amounts["primes_variables"].sum()),
    }
    totals.update({col: float(amounts[col].sum()) for col in LEAVE_BALANCES})
    return totals


def _estimated_totals(active: pd.DataFrame, charge_rate: float) -> dict[str, float]:
    gross = float(active["salaire_base_mensuel"].sum())
    totals = {
        "masse_salariale_brute": gross,
        "cout_total_employeur": gross * (1 + charge_rate),
        "total_primes_variables": 0.0,
    }
    totals.update({col: 0.0 for col in LEAVE_BALANCES})
    return totals


def compute_compensation(
    active: pd.DataFrame,
    remunerations: pd.DataFrame,
    fte_total: float,
    employer_charge_rate: float = 0.45,
    legacy_cumulative_cost: bool = False,
) -> dict[str, MetricValue | str]:
    """Aggregate the period's payroll.

    Pay records, when present, are authoritative. Otherwise gross payroll is
    the active base salaries and the employer cost applies a flat charge rate.
    """
    if len(remunerations):
        source = SOURCE_PAYROLL
        totals = _payroll_totals(remunerations, legacy_cumulative_cost)
    else:
        source = SOURCE_ESTIMATE
        totals = _estimated_totals(active, employer_charge_rate)
        logger.info("No pay records, employer cost estimated at %.0f%% charges", employer_charge_rate * 100)

    gross = totals["masse_salariale_brute"]
    cost = totals["cout_total_employeur"]
    median_base = float(active["salaire_base_mensuel"].median()) if len(active) else 0.0

    return {
        "source_remuneration": source,
        **totals,
        "salaire_brut_moyen": _safe_div(gross, fte_total),
        "cout_moyen_par_etp": _safe_div(cost, fte_total),
        "part_variable": safe_pct(totals["total_primes_variables"], gross),
        "taux_charges": safe_pct(cost - gross, gross),
        "salaire_base_median": median_base,
    }
