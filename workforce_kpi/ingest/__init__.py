"""HR workbook import pipeline.

Reads the EMPLOYES / REMUNERATION / ABSENCES workbook, normalises and
validates the rows, then splits them into per-period record sets ready for
the KPI engine.
"""

from workforce_kpi.ingest.workbook import WorkbookData, read_workbook
from workforce_kpi.ingest.transform import normalize_workbook
from workforce_kpi.ingest.periods import (
    ImportSummary,
    PeriodBatch,
    split_by_period,
    summarize_workbook,
    validate_workbook,
)
from workforce_kpi.ingest.template import write_import_template
from workforce_kpi.utils.io import FilePath


def load_workbook(path: FilePath) -> WorkbookData:
    """Read and normalise a workbook."""
    return normalize_workbook(read_workbook(path))


def validate(path: FilePath) -> dict[str, str | bool | list[str]]:
    """Check that a workbook can be read and that its rows are valid."""
    try:
        return validate_workbook(load_workbook(path))
    except (FileNotFoundError, ValueError) as exc:
        return {"valid": False, "status": "error", "errors": [str(exc)]}


def run(path: FilePath) -> list[PeriodBatch]:
    """Import a workbook into chronologically ordered period batches.

    Raises ``ValueError`` listing every validation failure when the rows are
    invalid.
    """
    workbook = load_workbook(path)
    result = validate_workbook(workbook)
    if not result["valid"]:
        raise ValueError("Invalid workbook:\n" + "\n".join(result["errors"]))
    return split_by_period(workbook)
