"""Common data transformation utilities."""

import datetime as dt
import numbers

import numpy as np
import pandas as pd

type ColumnMapping = dict[str, str]

# Excel's day zero (accounts for the 1900 leap-year bug)
EXCEL_EPOCH = pd.Timestamp("1899-12-30")


def normalize_columns(df: pd.DataFrame, mapping: ColumnMapping | None = None) -> pd.DataFrame:
    """Normalize column names to snake_case and apply optional mapping."""
    df = df.copy()
    df.columns = [
        str(col).strip().lower().replace(" ", "_").replace("-", "_")
        for col in df.columns
    ]

    if mapping:
        df = df.rename(columns=mapping)

    return df


def ensure_columns(df: pd.DataFrame, columns: list[str]) -> pd.DataFrame:
    """Return a copy of ``df`` with any missing ``columns`` added as nulls."""
    missing = [col for col in columns if col not in df.columns]
    if not missing:
        return df.copy()
    result = df.copy()
    for col in missing:
        result[col] = None
    return result


def parse_date_value(value: object) -> pd.Timestamp:
    """Parse a spreadsheet cell into a Timestamp.

    Accepts datetimes, ISO or day-first strings, and Excel serial numbers.
    Blank cells become ``NaT``; anything else unparseable raises ``ValueError``.
    """
    match value:
        case None:
            return pd.NaT
        case dt.datetime() if pd.isna(value):
            return pd.NaT
        case pd.Timestamp() | dt.datetime() | dt.date():
            return pd.Timestamp(value).normalize()
        case bool():
            raise ValueError(f"Unparseable date: {value!r}")
        case numbers.Number() if pd.isna(value):
            return pd.NaT
        case numbers.Number():
            return (EXCEL_EPOCH + pd.Timedelta(days=float(value))).normalize()
        case str() if not value.strip():
            return pd.NaT
        case str():
            text = value.strip()
            try:
                parsed = pd.to_datetime(text, dayfirst="/" in text)
            except (ValueError, OverflowError) as exc:
                raise ValueError(f"Unparseable date: {value!r}") from exc
            return parsed.normalize()
        case _ if pd.isna(value):
            return pd.NaT
        case _:
            raise ValueError(f"Unparseable date: {value!r}")


def parse_date_column(series: pd.Series) -> pd.Series:
    parsed = series.map(parse_date_value)
    return pd.to_datetime(parsed)


def parse_amount_value(value: object) -> float:
    """Parse a numeric cell, tolerating French formatting (``"3 500,50 €"``)."""
    match value:
        case None:
            return np.nan
        case bool():
            return float(value)
        case numbers.Number():
            return float(value)
        case str():
            cleaned = (
                value.replace(" ", "")
                .replace("\u00a0", "")
                .replace("\u202f", "")
                .replace("€", "")
                .replace(",", ".")
            )
            if not cleaned:
                return np.nan
            try:
                return float(cleaned)
            except ValueError as exc:
                raise ValueError(f"Unparseable amount: {value!r}") from exc
        case _:
            return np.nan if pd.isna(value) else float(value)


def parse_amount_column(series: pd.Series, default: float | None = None) -> pd.Series:
    parsed = series.map(parse_amount_value).astype(float)
    if default is not None:
        parsed = parsed.fillna(default)
    return parsed


def clean_text_column(series: pd.Series, default: str | None = None) -> pd.Series:
    """Strip strings, turn blanks into nulls, optionally fill a default."""
    def _clean(value: object) -> object:
        if value is None or (not isinstance(value, str) and pd.isna(value)):
            return None
        text = str(value).strip()
        # integer-like codes read back as floats (e.g. 1001.0)
        if isinstance(value, float) and value.is_integer():
            text = str(int(value))
        return text or None

    cleaned = series.map(_clean).astype(object)
    if default is not None:
        cleaned = cleaned.where(cleaned.notna(), default)
    return cleaned
