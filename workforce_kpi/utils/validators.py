"""Data validation utilities using pandera."""

import pandera as pa
import pandas as pd
from pandera import DataFrameSchema

type ValidationResult = dict[str, str | bool | list[str]]


def validate_dataframe(
    df: pd.DataFrame,
    schema: DataFrameSchema,
    label: str | None = None,
) -> ValidationResult:
    """Validate a DataFrame against a pandera schema, collecting every failure."""
    prefix = f"[{label}] " if label else ""
    try:
        schema.validate(df, lazy=True)
        return {"valid": True, "status": "ok", "errors": []}
    except pa.errors.SchemaErrors as e:
        errors = []
        for _, row in e.failure_cases.iterrows():
            match row.to_dict():
                case {"column": col, "check": check, "failure_case": val, "index": idx} if pd.notna(idx):
                    errors.append(f"{prefix}Column '{col}' failed check '{check}' at row {idx}: {val}")
                case {"column": col, "check": check, "failure_case": val}:
                    errors.append(f"{prefix}Column '{col}' failed check '{check}': {val}")
                case failure:
                    errors.append(f"{prefix}Validation failure: {failure}")
        return {"valid": False, "status": "error", "errors": errors}


def validate_unique(df: pd.DataFrame, columns: list[str], label: str | None = None) -> ValidationResult:
    """Check that ``columns`` form a unique key, reporting a few offending keys."""
    if df.empty:
        return {"valid": True, "status": "ok", "errors": []}
    duplicates = df[df.duplicated(subset=columns, keep=False)]

    match len(duplicates):
        case 0:
            return {"valid": True, "status": "ok", "errors": []}
        case n:
            prefix = f"[{label}] " if label else ""
            sample = sorted({tuple(map(str, key)) for key in duplicates[columns].itertuples(index=False)})[:5]
            return {
                "valid": False,
                "status": "error",
                "errors": [f"{prefix}Found {n} duplicate rows on columns {columns}. Sample: {sample}"],
            }


def merge_results(*results: ValidationResult) -> ValidationResult:
    errors = [err for result in results for err in result["errors"]]
    if errors:
        return {"valid": False, "status": "error", "errors": errors}
    return {"valid": True, "status": "ok", "errors": []}
