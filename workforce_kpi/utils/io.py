"""File I/O utilities for reading workbooks and writing pipeline output."""

import json
import tomllib
from pathlib import Path

import pandas as pd
from rich.console import Console

type FilePath = str | Path

console = Console()


def read_excel_file(path: FilePath, sheet_name: str | int | None = None) -> pd.DataFrame | dict[str, pd.DataFrame]:
    """Read an Excel file with automatic engine detection.

    With ``sheet_name=None`` every sheet is returned, keyed by name.
    """
    path = Path(path)
    if not path.exists():
        raise FileNotFoundError(f"Workbook not found: {path}")

    match path.suffix.lower():
        case ".xlsx" | ".xlsm":
            return pd.read_excel(path, sheet_name=sheet_name, engine="openpyxl")
        case ".xls":
            return pd.read_excel(path, sheet_name=sheet_name, engine="xlrd")
        case ext:
            raise ValueError(f"Unsupported Excel format: {ext}")


def write_output(df: pd.DataFrame, path: FilePath, fmt: str = "csv") -> None:
    """Write a DataFrame as csv or an Excel sheet."""
    path = Path(path)
    path.parent.mkdir(parents=True, exist_ok=True)

    match fmt:
        case "csv":
            df.to_csv(path, index=False)
        case "excel":
            df.to_excel(path, index=False, engine="openpyxl")
        case other:
            raise ValueError(f"Unsupported output format: {other}")

    console.print(f"  Wrote {len(df)} rows to {path}")


def write_json(payload: dict | list, path: FilePath) -> None:
    """Write a JSON-ready payload (e.g. a snapshot dict) to disk."""
    path = Path(path)
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(json.dumps(payload, indent=2, ensure_ascii=False, default=str), encoding="utf-8")
    console.print(f"  Wrote {path}")


def load_toml_config(path: FilePath) -> dict:
    with open(path, "rb") as f:
        return tomllib.load(f)
