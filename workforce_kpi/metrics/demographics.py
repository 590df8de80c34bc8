"""Workforce demographics: sex split, age, tenure and the age pyramid."""

import logging

import pandas as pd

from workforce_kpi.metrics.headcount import safe_pct
from workforce_kpi.metrics.models import PyramideAges
from workforce_kpi.utils.types import MetricValue, Sex

logger = logging.getLogger(__name__)

DAYS_PER_YEAR = 365


def _ages(active: pd.DataFrame, reference_date: pd.Timestamp) -> pd.Series:
    """Calendar-year ages; null where the birth date is unknown."""
    return reference_date.year - active["date_naissance"].dt.year


def _bucket_age(age: int) -> str:
    match age:
        case a if a < 30:
            return "moins_30"
        case a if a < 40:
            return "de_30_a_39"
        case a if a < 50:
            return "de_40_a_49"
        case _:
            return "plus_50"


def build_age_pyramid(active: pd.DataFrame, reference_date: pd.Timestamp) -> PyramideAges:
    """Count employees per age band, skipping unknown birth dates."""
    known = _ages(active, reference_date).dropna().astype(int)
    counts = known.map(_bucket_age).value_counts()
    return PyramideAges(**{band: int(n) for band, n in counts.items()})


def compute_demographics(
    active: pd.DataFrame,
    reference_date: pd.Timestamp,
    default_age: int = 30,
) -> dict[str, MetricValue | PyramideAges]:
    headcount = len(active)
    nb_hommes = int((active["sexe"] == Sex.MALE.value).sum())
    nb_femmes = int((active["sexe"] == Sex.FEMALE.value).sum())

    if headcount:
        ages = _ages(active, reference_date).fillna(default_age)
        age_moyen = float(ages.mean())
        tenure = (reference_date - active["date_entree"]) / pd.Timedelta(days=DAYS_PER_YEAR)
        anciennete = float(tenure.mean())
    else:
        age_moyen = 0.0
        anciennete = 0.0

    missing_birth = int(active["date_naissance"].isna().sum())
    if missing_birth:
        logger.info("%d active employee(s) without birth date, age defaulted to %d", missing_birth, default_age)

    return {
        "nb_hommes": nb_hommes,
        "nb_femmes": nb_femmes,
        "pct_hommes": safe_pct(nb_hommes, headcount),
        "pct_femmes": safe_pct(nb_femmes, headcount),
        "age_moyen": age_moyen,
        "anciennete_moyenne_annees": anciennete,
        "pyramide_ages": build_age_pyramid(active, reference_date),
    }
