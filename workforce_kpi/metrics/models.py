"""Pandera schemas for the engine inputs and the metrics snapshot dataclasses."""

import datetime as dt
from dataclasses import asdict, dataclass, field

import pandas as pd
import pandera as pa
from pandera import Check, Column

from workforce_kpi.utils.transforms import ensure_columns
from workforce_kpi.utils.types import ContractType, EmploymentStatus, Sex

UNDEFINED_LABEL = "undefined"
UNSPECIFIED_ABSENCE = "Non spécifié"

GROSS_COMPONENTS = [
    "salaire_de_base",
    "primes_fixes",
    "primes_variables",
    "heures_supp_payees",
    "avantages_nature",
    "autres_elements_bruts",
]
EMPLOYER_CHARGES = [
    "cotisations_sociales",
    "taxes_sur_salaire",
    "mutuelle_employeur",
    "prevoyance_employeur",
]
LEAVE_BALANCES = [
    "stock_cp_jours",
    "stock_rtt_jours",
    "valeur_cp_provisionnee",
    "valeur_rtt_provisionnee",
]


def _amount(required: bool = False) -> Column:
    return Column(float, Check.greater_than_or_equal_to(0), nullable=True, coerce=True, required=required)


employee_schema = pa.DataFrameSchema(
    {
        "matricule": Column(nullable=True, required=False),
        "type_contrat": Column(checks=Check.isin([c.value for c in ContractType]), nullable=False),
        "statut_emploi": Column(checks=Check.isin([s.value for s in EmploymentStatus]), nullable=False),
        "temps_travail": Column(float, Check.greater_than_or_equal_to(0), nullable=True, coerce=True, required=False),
        "date_naissance": Column(pa.DateTime, nullable=True, coerce=True, required=False),
        "date_entree": Column(pa.DateTime, nullable=False, coerce=True),
        "date_sortie": Column(pa.DateTime, nullable=True, coerce=True, required=False),
        "sexe": Column(checks=Check.isin([s.value for s in Sex]), nullable=False),
        "salaire_base_mensuel": Column(float, Check.greater_than_or_equal_to(0), nullable=False, coerce=True),
        "code_site": Column(nullable=True, required=False),
        "code_cost_center": Column(nullable=True, required=False),
    },
    strict=False,
)


remuneration_schema = pa.DataFrameSchema(
    {
        "matricule": Column(nullable=True, required=False),
        **{col: _amount() for col in GROSS_COMPONENTS},
        **{col: _amount() for col in EMPLOYER_CHARGES},
        **{col: _amount() for col in LEAVE_BALANCES},
    },
    strict=False,
)


absence_schema = pa.DataFrameSchema(
    {
        "matricule": Column(nullable=True, required=False),
        "type_absence": Column(nullable=True, required=False),
        "nb_jours_ouvres": Column(float, Check.greater_than_or_equal_to(0), nullable=False, coerce=True),
    },
    strict=False,
)


def conform_frame(df: pd.DataFrame | None, schema: pa.DataFrameSchema) -> pd.DataFrame:
    """Validate a record set against ``schema`` and return a coerced copy.

    An empty (even column-less) frame is valid and receives every schema
    column. Non-empty frames only receive the optional columns they lack, so
    a missing required column still fails validation.
    """
    if df is None or df.empty:
        columns = list(schema.columns)
        base = pd.DataFrame(columns=columns) if df is None else df.reset_index(drop=True)
        frame = ensure_columns(base, columns)
    else:
        optional = [name for name, col in schema.columns.items() if not col.required]
        frame = ensure_columns(df, optional)
    return schema.validate(frame)


@dataclass(frozen=True)
class PyramideAges:
    moins_30: int = 0
    de_30_a_39: int = 0
    de_40_a_49: int = 0
    plus_50: int = 0

    @property
    def total(self) -> int:
        return self.moins_30 + self.de_30_a_39 + self.de_40_a_49 + self.plus_50


@dataclass(frozen=True)
class SiteHeadcount:
    code_site: str
    effectif: int


@dataclass(frozen=True)
class CostCenterPayroll:
    code_cost_center: str
    effectif: int
    masse_salariale: float


@dataclass(frozen=True)
class AbsenceTypeSummary:
    type_absence: str
    nb_absences: int
    nb_jours: float


@dataclass(frozen=True)
class MetricsSnapshot:
    """One computed set of dashboard KPIs for a tenant at a reference date.

    Percentages are on a 0-100 scale and kept at full precision; rounding is
    left to the presentation layer.
    """

    date_reference: dt.date

    # effectifs & contrats
    effectif_total: int
    effectif_actif: int
    etp_total: float
    nb_cdi: int
    nb_cdd: int
    nb_alternance: int
    nb_stage: int
    pct_cdi: float
    pct_cdd: float
    pct_alternance: float
    pct_stage: float

    # mouvements
    nb_entrees: int
    nb_sorties: int
    effectif_moyen: float
    taux_turnover: float

    # démographie
    nb_hommes: int
    nb_femmes: int
    pct_hommes: float
    pct_femmes: float
    age_moyen: float
    anciennete_moyenne_annees: float
    pyramide_ages: PyramideAges

    # rémunération
    source_remuneration: str
    masse_salariale_brute: float
    cout_total_employeur: float
    total_primes_variables: float
    salaire_brut_moyen: float
    cout_moyen_par_etp: float
    part_variable: float
    taux_charges: float
    salaire_base_median: float
    stock_cp_jours: float
    stock_rtt_jours: float
    valeur_cp_provisionnee: float
    valeur_rtt_provisionnee: float

    # absentéisme
    jours_theoriques: float
    nb_jours_absence: float
    nb_absences_total: int
    taux_absenteisme: float
    duree_moyenne_absence: float
    cout_journalier_moyen: float
    cout_absenteisme: float
    absences_par_type: list[AbsenceTypeSummary] = field(default_factory=list)

    # organisation
    effectifs_par_site: list[SiteHeadcount] = field(default_factory=list)
    effectifs_par_cost_center: list[CostCenterPayroll] = field(default_factory=list)

    score_qualite_donnees: float = 100.0

    @property
    def turnover_rate(self) -> float:
        return self.taux_turnover

    def to_dict(self) -> dict:
        payload = asdict(self)
        payload["date_reference"] = self.date_reference.isoformat()
        return payload
