"""Shared utilities for the workforce KPI pipeline."""

from workforce_kpi.utils.io import read_excel_file, write_json, write_output
from workforce_kpi.utils.transforms import normalize_columns, parse_amount_value, parse_date_value
from workforce_kpi.utils.validators import ValidationResult, validate_dataframe
from workforce_kpi.utils.types import ContractType, EmploymentStatus, PeriodKey
