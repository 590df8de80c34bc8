"""Normalize and clean raw workbook rows before validation."""

import logging
import re
import unicodedata

import pandas as pd

from workforce_kpi.ingest.workbook import WorkbookData
from workforce_kpi.metrics.models import (
    EMPLOYER_CHARGES,
    GROSS_COMPONENTS,
    LEAVE_BALANCES,
    UNSPECIFIED_ABSENCE,
)
from workforce_kpi.utils.transforms import (
    clean_text_column,
    ensure_columns,
    parse_amount_column,
    parse_date_column,
    parse_date_value,
)
from workforce_kpi.utils.types import ContractType, EmploymentStatus, PeriodKey, Sex

logger = logging.getLogger(__name__)

EMPLOYEE_COLUMNS = [
    "matricule", "nom", "prenom", "sexe", "date_naissance", "date_entree", "date_sortie",
    "type_contrat", "temps_travail", "intitule_poste", "salaire_base_mensuel",
    "code_cost_center", "code_site", "manager_matricule", "statut_emploi",
    "periode", "statut_periode",
]
REMUNERATION_COLUMNS = [
    "matricule", "mois_paie", "type_contrat", "etp_paie",
    *GROSS_COMPONENTS, *EMPLOYER_CHARGES, *LEAVE_BALANCES,
    "code_cost_center", "code_site",
]
ABSENCE_COLUMNS = [
    "matricule", "type_absence", "date_debut", "date_fin", "nb_jours_ouvres", "periode_reference",
]

_PERIOD_RE = re.compile(r"^(\d{4})[-/](\d{1,2})$")


def _fold(raw: str) -> str:
    """Lowercase, strip accents and unify separators."""
    text = unicodedata.normalize("NFKD", raw.strip().lower())
    text = "".join(ch for ch in text if not unicodedata.combining(ch))
    return text.replace("-", "_").replace(" ", "_")


def _classify_contract_type(raw_type: object) -> str:
    """Map raw contract labels to the four contract types."""
    if raw_type is None or pd.isna(raw_type):
        return ContractType.CDI.value
    match _fold(str(raw_type)):
        case "cdi" | "permanent" | "indetermine" | "duree_indeterminee":
            return ContractType.CDI.value
        case "cdd" | "fixed_term" | "determine" | "duree_determinee" | "saisonnier":
            return ContractType.CDD.value
        case "alternance" | "apprentissage" | "apprenti" | "professionnalisation" | "apprenticeship":
            return ContractType.ALTERNANCE.value
        case "stage" | "stagiaire" | "internship" | "intern":
            return ContractType.STAGE.value
        case _:
            logger.warning("Unknown contract type: %r, defaulting to CDI", raw_type)
            return ContractType.CDI.value


def _classify_status(raw_status: object) -> str:
    if raw_status is None or pd.isna(raw_status):
        return EmploymentStatus.ACTIVE.value
    match _fold(str(raw_status)):
        case "actif" | "active" | "en_poste" | "present":
            return EmploymentStatus.ACTIVE.value
        case "inactif" | "inactive" | "sorti" | "parti" | "terminated":
            return EmploymentStatus.INACTIVE.value
        case "suspendu" | "suspended":
            return EmploymentStatus.SUSPENDED.value
        case _:
            logger.debug("Unmapped employment status: %r", raw_status)
            return str(raw_status).strip()


def _classify_sex(raw_sex: object) -> object:
    if raw_sex is None or pd.isna(raw_sex):
        return None
    match _fold(str(raw_sex)):
        case "m" | "h" | "homme" | "masculin" | "male":
            return Sex.MALE.value
        case "f" | "femme" | "feminin" | "female":
            return Sex.FEMALE.value
        case _:
            logger.debug("Unmapped sex value: %r", raw_sex)
            return str(raw_sex).strip()


def to_period_key(value: object, default: PeriodKey) -> PeriodKey:
    """Coerce a period cell (``"2024-01"``, a date, an Excel serial) to ``YYYY-MM``."""
    if isinstance(value, str):
        match = _PERIOD_RE.match(value.strip())
        if match:
            return f"{match.group(1)}-{int(match.group(2)):02d}"
    parsed = parse_date_value(value)
    if pd.isna(parsed):
        return default
    return parsed.strftime("%Y-%m")


def current_period() -> PeriodKey:
    return pd.Timestamp.now().strftime("%Y-%m")


def _period_column(series: pd.Series, default: PeriodKey) -> pd.Series:
    return series.map(lambda v: to_period_key(v, default)).astype(object)


def _period_start(periods: pd.Series) -> pd.Series:
    return pd.to_datetime(periods + "-01")


def normalize_employees(raw_df: pd.DataFrame, default_period: PeriodKey | None = None) -> pd.DataFrame:
    """Apply cleaning, type mapping and import defaults to EMPLOYES rows."""
    default_period = default_period or current_period()
    df = ensure_columns(raw_df, EMPLOYEE_COLUMNS).reset_index(drop=True)

    df["periode"] = _period_column(df["periode"], default_period)

    df["matricule"] = clean_text_column(df["matricule"])
    missing_ids = df["matricule"].isna()
    if missing_ids.any():
        logger.warning("%d employee row(s) without matricule, generating identifiers", int(missing_ids.sum()))
        df.loc[missing_ids, "matricule"] = [f"EMP-AUTO-{i:05d}" for i in df.index[missing_ids]]

    df["nom"] = clean_text_column(df["nom"], default="INCONNU")
    df["prenom"] = clean_text_column(df["prenom"], default="Inconnu")
    df["intitule_poste"] = clean_text_column(df["intitule_poste"], default="Non spécifié")
    for col in ("code_site", "code_cost_center", "manager_matricule"):
        df[col] = clean_text_column(df[col])

    df["sexe"] = df["sexe"].map(_classify_sex).astype(object)
    df["type_contrat"] = df["type_contrat"].map(_classify_contract_type)
    df["statut_emploi"] = df["statut_emploi"].map(_classify_status)
    df["statut_periode"] = clean_text_column(df["statut_periode"], default="Actif")

    for col in ("date_naissance", "date_entree", "date_sortie"):
        df[col] = parse_date_column(df[col])
    # hire date falls back to the first day of the row's period
    df["date_entree"] = df["date_entree"].fillna(_period_start(df["periode"]))

    df["temps_travail"] = parse_amount_column(df["temps_travail"], default=1.0)
    df["salaire_base_mensuel"] = parse_amount_column(df["salaire_base_mensuel"], default=0.0)

    logger.info("Normalized %d employee records", len(df))
    return df


def normalize_remunerations(raw_df: pd.DataFrame, default_period: PeriodKey | None = None) -> pd.DataFrame:
    default_period = default_period or current_period()
    df = ensure_columns(raw_df, REMUNERATION_COLUMNS).reset_index(drop=True)

    df["matricule"] = clean_text_column(df["matricule"])
    df["mois_paie"] = _period_column(df["mois_paie"], default_period)
    df["type_contrat"] = df["type_contrat"].map(_classify_contract_type)
    df["etp_paie"] = parse_amount_column(df["etp_paie"], default=1.0)
    for col in (*GROSS_COMPONENTS, *EMPLOYER_CHARGES, *LEAVE_BALANCES):
        df[col] = parse_amount_column(df[col], default=0.0)
    for col in ("code_site", "code_cost_center"):
        df[col] = clean_text_column(df[col])

    logger.info("Normalized %d pay records", len(df))
    return df


def normalize_absences(raw_df: pd.DataFrame, default_period: PeriodKey | None = None) -> pd.DataFrame:
    default_period = default_period or current_period()
    df = ensure_columns(raw_df, ABSENCE_COLUMNS).reset_index(drop=True)

    df["matricule"] = clean_text_column(df["matricule"])
    df["periode_reference"] = _period_column(df["periode_reference"], default_period)
    df["type_absence"] = clean_text_column(df["type_absence"], default=UNSPECIFIED_ABSENCE)
    period_start = _period_start(df["periode_reference"])
    for col in ("date_debut", "date_fin"):
        df[col] = parse_date_column(df[col]).fillna(period_start)
    df["nb_jours_ouvres"] = parse_amount_column(df["nb_jours_ouvres"], default=1.0)

    logger.info("Normalized %d absence records", len(df))
    return df


def normalize_workbook(raw: WorkbookData, default_period: PeriodKey | None = None) -> WorkbookData:
    """Normalize every sheet of a workbook read by :func:`read_workbook`."""
    default_period = default_period or current_period()
    return WorkbookData(
        employees=normalize_employees(raw.employees, default_period),
        remunerations=normalize_remunerations(raw.remunerations, default_period),
        absences=normalize_absences(raw.absences, default_period),
        source=raw.source,
    )
