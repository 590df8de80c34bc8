"""Completeness score of the optional employee fields."""

import pandas as pd

QUALITY_FIELDS = ["date_naissance", "temps_travail", "code_site", "code_cost_center"]


def _is_filled(value: object) -> bool:
    if isinstance(value, str):
        return bool(value.strip())
    return not pd.isna(value)


def score_data_quality(employees: pd.DataFrame, fields: list[str] | None = None) -> float:
    """Share of filled optional cells, 0-100. An empty roster scores 100."""
    fields = fields or QUALITY_FIELDS
    if employees.empty:
        return 100.0
    filled = employees[fields].map(_is_filled)
    return float(filled.to_numpy(dtype=bool).mean() * 100)
