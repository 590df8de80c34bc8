"""Read the three-sheet HR import workbook."""

import logging
from dataclasses import dataclass
from pathlib import Path

import pandas as pd

from workforce_kpi.utils.io import FilePath, read_excel_file
from workforce_kpi.utils.transforms import normalize_columns

logger = logging.getLogger(__name__)

SHEET_EMPLOYEES = "EMPLOYES"
SHEET_REMUNERATIONS = "REMUNERATION"
SHEET_ABSENCES = "ABSENCES"


@dataclass(frozen=True)
class WorkbookData:
    employees: pd.DataFrame
    remunerations: pd.DataFrame
    absences: pd.DataFrame
    source: Path | None = None


def _find_sheet(sheets: dict[str, pd.DataFrame], name: str) -> pd.DataFrame | None:
    """Look a sheet up by name, ignoring case and surrounding spaces."""
    for sheet_name, frame in sheets.items():
        if str(sheet_name).strip().upper() == name:
            return frame
    return None


def read_workbook(path: FilePath) -> WorkbookData:
    """Load the EMPLOYES, REMUNERATION and ABSENCES sheets.

    EMPLOYES is mandatory; the two other sheets are optional and default to
    empty frames. Headers are normalised to snake_case.
    """
    path = Path(path)
    sheets = read_excel_file(path, sheet_name=None)

    employees = _find_sheet(sheets, SHEET_EMPLOYEES)
    if employees is None:
        raise ValueError(f"Sheet '{SHEET_EMPLOYEES}' not found in {path.name}")

    remunerations = _find_sheet(sheets, SHEET_REMUNERATIONS)
    absences = _find_sheet(sheets, SHEET_ABSENCES)
    for name, frame in ((SHEET_REMUNERATIONS, remunerations), (SHEET_ABSENCES, absences)):
        if frame is None:
            logger.info("Optional sheet %s missing from %s", name, path.name)

    data = WorkbookData(
        employees=normalize_columns(employees.dropna(how="all")),
        remunerations=normalize_columns(remunerations.dropna(how="all")) if remunerations is not None else pd.DataFrame(),
        absences=normalize_columns(absences.dropna(how="all")) if absences is not None else pd.DataFrame(),
        source=path,
    )
    logger.info(
        "Read %s: %d employee rows, %d pay rows, %d absence rows",
        path.name, len(data.employees), len(data.remunerations), len(data.absences),
    )
    return data
