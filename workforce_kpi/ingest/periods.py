"""Split a normalised workbook into per-period record sets and summarise it."""

import logging
from dataclasses import dataclass, field

import pandas as pd

from workforce_kpi.ingest.models import (
    absence_import_schema,
    employee_import_schema,
    remuneration_import_schema,
)
from workforce_kpi.ingest.workbook import SHEET_ABSENCES, SHEET_EMPLOYEES, SHEET_REMUNERATIONS, WorkbookData
from workforce_kpi.utils.types import PeriodKey
from workforce_kpi.utils.validators import (
    ValidationResult,
    merge_results,
    validate_dataframe,
    validate_unique,
)

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class PeriodBatch:
    """The three record sets of one pay period."""

    periode: PeriodKey
    employees: pd.DataFrame
    remunerations: pd.DataFrame
    absences: pd.DataFrame

    @property
    def reference_date(self) -> pd.Timestamp:
        """Last day of the period."""
        return pd.Period(self.periode, freq="M").end_time.normalize()


@dataclass(frozen=True)
class PeriodCounts:
    periode: PeriodKey
    employees: int = 0
    remunerations: int = 0
    absences: int = 0


@dataclass(frozen=True)
class ImportSummary:
    total_periods: int
    periods: list[PeriodKey]
    total_employees: int
    total_remunerations: int
    total_absences: int
    by_period: list[PeriodCounts] = field(default_factory=list)


def _rows_for(df: pd.DataFrame, column: str, periode: PeriodKey) -> pd.DataFrame:
    if df.empty:
        return df.copy()
    return df[df[column] == periode].reset_index(drop=True)


def _drop_orphans(df: pd.DataFrame, known_ids: set[str], label: str, periode: PeriodKey) -> pd.DataFrame:
    """Keep rows whose matricule has an employee row in the same period."""
    if df.empty:
        return df
    mask = df["matricule"].isin(known_ids)
    dropped = int((~mask).sum())
    if dropped:
        logger.warning("%s: dropped %d %s row(s) with no matching employee", periode, dropped, label)
    return df[mask].reset_index(drop=True)


def list_periods(workbook: WorkbookData) -> list[PeriodKey]:
    keys: set[PeriodKey] = set()
    for df, column in (
        (workbook.employees, "periode"),
        (workbook.remunerations, "mois_paie"),
        (workbook.absences, "periode_reference"),
    ):
        if not df.empty:
            keys.update(df[column].dropna().unique())
    return sorted(keys)


def split_by_period(workbook: WorkbookData) -> list[PeriodBatch]:
    """Group a normalised workbook into chronologically sorted period batches."""
    batches = []
    for periode in list_periods(workbook):
        employees = _rows_for(workbook.employees, "periode", periode)
        known_ids = set(employees["matricule"]) if not employees.empty else set()
        remunerations = _drop_orphans(
            _rows_for(workbook.remunerations, "mois_paie", periode), known_ids, "pay", periode,
        )
        absences = _drop_orphans(
            _rows_for(workbook.absences, "periode_reference", periode), known_ids, "absence", periode,
        )
        batches.append(PeriodBatch(periode, employees, remunerations, absences))

    logger.info("Split workbook into %d period(s)", len(batches))
    return batches


def summarize_workbook(workbook: WorkbookData) -> ImportSummary:
    """Row counts per sheet and per period, before any orphan filtering."""
    periods = list_periods(workbook)

    def _counts(df: pd.DataFrame, column: str) -> pd.Series:
        return df[column].value_counts() if not df.empty else pd.Series(dtype=int)

    employees = _counts(workbook.employees, "periode")
    remunerations = _counts(workbook.remunerations, "mois_paie")
    absences = _counts(workbook.absences, "periode_reference")

    return ImportSummary(
        total_periods=len(periods),
        periods=periods,
        total_employees=len(workbook.employees),
        total_remunerations=len(workbook.remunerations),
        total_absences=len(workbook.absences),
        by_period=[
            PeriodCounts(
                periode=p,
                employees=int(employees.get(p, 0)),
                remunerations=int(remunerations.get(p, 0)),
                absences=int(absences.get(p, 0)),
            )
            for p in periods
        ],
    )


def validate_workbook(workbook: WorkbookData) -> ValidationResult:
    """Validate every normalised sheet; empty optional sheets are skipped."""
    results = [
        validate_dataframe(workbook.employees, employee_import_schema, label=SHEET_EMPLOYEES),
        validate_unique(workbook.employees, ["matricule", "periode"], label=SHEET_EMPLOYEES),
    ]
    if not workbook.remunerations.empty:
        results.append(validate_dataframe(workbook.remunerations, remuneration_import_schema, label=SHEET_REMUNERATIONS))
        results.append(validate_unique(workbook.remunerations, ["matricule", "mois_paie"], label=SHEET_REMUNERATIONS))
    if not workbook.absences.empty:
        results.append(validate_dataframe(workbook.absences, absence_import_schema, label=SHEET_ABSENCES))
    return merge_results(*results)
