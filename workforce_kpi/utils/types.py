"""Shared type definitions for the workforce KPI pipeline."""

from enum import StrEnum

import pandas as pd


type PeriodKey = str  # "YYYY-MM"
type MetricValue = int | float
type DateRange = tuple[pd.Timestamp, pd.Timestamp]


class ContractType(StrEnum):
    CDI = "CDI"
    CDD = "CDD"
    ALTERNANCE = "Alternance"
    STAGE = "Stage"


class EmploymentStatus(StrEnum):
    ACTIVE = "Actif"
    INACTIVE = "Inactif"
    SUSPENDED = "Suspendu"


class Sex(StrEnum):
    MALE = "M"
    FEMALE = "F"


class PerformanceLevel(StrEnum):
    EXCELLENT = "excellent"
    GOOD = "good"
    WARNING = "warning"
    CRITICAL = "critical"


class Trend(StrEnum):
    UP = "up"
    DOWN = "down"
    STABLE = "stable"


class DataQuality(StrEnum):
    HIGH = "high"
    MEDIUM = "medium"
    LOW = "low"
    UNKNOWN = "unknown"


def classify_quality(score: float) -> DataQuality:
    """Bucket a 0-100 completeness score."""
    match score:
        case s if s >= 95:
            return DataQuality.HIGH
        case s if s >= 80:
            return DataQuality.MEDIUM
        case s if s >= 50:
            return DataQuality.LOW
        case _:
            return DataQuality.UNKNOWN
