"""Pandera schemas for normalised import sheets."""

import pandera as pa
from pandera import Check, Column

from workforce_kpi.metrics.models import EMPLOYER_CHARGES, GROSS_COMPONENTS, LEAVE_BALANCES
from workforce_kpi.utils.types import ContractType, EmploymentStatus, Sex

PERIOD_PATTERN = r"^\d{4}-(0[1-9]|1[0-2])$"

_CONTRACTS = [c.value for c in ContractType]


employee_import_schema = pa.DataFrameSchema(
    {
        "matricule": Column(nullable=False),
        "nom": Column(nullable=False),
        "prenom": Column(nullable=False),
        "sexe": Column(checks=Check.isin([s.value for s in Sex]), nullable=False),
        "date_naissance": Column(pa.DateTime, nullable=True, coerce=True),
        "date_entree": Column(pa.DateTime, nullable=False, coerce=True),
        "date_sortie": Column(pa.DateTime, nullable=True, coerce=True),
        "type_contrat": Column(checks=Check.isin(_CONTRACTS), nullable=False),
        "temps_travail": Column(float, Check.in_range(0.0, 2.0), nullable=False),
        "salaire_base_mensuel": Column(float, Check.greater_than_or_equal_to(0), nullable=False),
        "statut_emploi": Column(checks=Check.isin([s.value for s in EmploymentStatus]), nullable=False),
        "periode": Column(checks=Check.str_matches(PERIOD_PATTERN), nullable=False),
    },
    strict=False,
)


remuneration_import_schema = pa.DataFrameSchema(
    {
        "matricule": Column(nullable=False),
        "mois_paie": Column(checks=Check.str_matches(PERIOD_PATTERN), nullable=False),
        "type_contrat": Column(checks=Check.isin(_CONTRACTS), nullable=False),
        "etp_paie": Column(float, Check.in_range(0.0, 2.0), nullable=False),
        **{
            col: Column(float, Check.greater_than_or_equal_to(0), nullable=False)
            for col in (*GROSS_COMPONENTS, *EMPLOYER_CHARGES, *LEAVE_BALANCES)
        },
    },
    strict=False,
)


absence_import_schema = pa.DataFrameSchema(
    {
        "matricule": Column(nullable=False),
        "type_absence": Column(nullable=False),
        "date_debut": Column(pa.DateTime, nullable=False, coerce=True),
        "date_fin": Column(pa.DateTime, nullable=False, coerce=True),
        "nb_jours_ouvres": Column(float, Check.greater_than_or_equal_to(0), nullable=False),
        "periode_reference": Column(checks=Check.str_matches(PERIOD_PATTERN), nullable=False),
    },
    checks=[
        Check(lambda df: df["date_fin"] >= df["date_debut"], name="date_fin_after_date_debut"),
    ],
    strict=False,
)
