"""Active population, FTE and contract mix."""

import logging

import pandas as pd

from workforce_kpi.utils.types import ContractType, EmploymentStatus, MetricValue

logger = logging.getLogger(__name__)


def safe_pct(part: float, whole: float) -> float:
    """``part / whole * 100``, or 0 when ``whole`` is 0."""
    if not whole:
        return 0.0
    return float(part) / float(whole) * 100


def filter_active(employees: pd.DataFrame) -> pd.DataFrame:
    """Employees whose employment status is active."""
    return employees[employees["statut_emploi"] == EmploymentStatus.ACTIVE.value].copy()


def compute_fte(active: pd.DataFrame) -> float:
    """Sum of work-time fractions, a missing fraction counting as full time."""
    return float(active["temps_travail"].fillna(1.0).sum())


def compute_contract_mix(active: pd.DataFrame) -> dict[str, MetricValue]:
    headcount = len(active)
    counts = active["type_contrat"].value_counts()

    def _count(contract: ContractType) -> int:
        return int(counts.get(contract.value, 0))

    nb_cdi = _count(ContractType.CDI)
    nb_cdd = _count(ContractType.CDD)
    nb_alternance = _count(ContractType.ALTERNANCE)
    nb_stage = _count(ContractType.STAGE)

    return {
        "effectif_actif": headcount,
        "etp_total": compute_fte(active),
        "nb_cdi": nb_cdi,
        "nb_cdd": nb_cdd,
        "nb_alternance": nb_alternance,
        "nb_stage": nb_stage,
        "pct_cdi": safe_pct(nb_cdi, headcount),
        "pct_cdd": safe_pct(nb_cdd, headcount),
        "pct_alternance": safe_pct(nb_alternance, headcount),
        "pct_stage": safe_pct(nb_stage, headcount),
    }
