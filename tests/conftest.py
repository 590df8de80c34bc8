import pandas as pd
import pytest

from workforce_kpi.metrics.models import EMPLOYER_CHARGES, GROSS_COMPONENTS, LEAVE_BALANCES

REFERENCE_DATE = pd.Timestamp("2025-06-30")


def employee(**overrides) -> dict:
    row = {
        "matricule": "E001",
        "type_contrat": "CDI",
        "statut_emploi": "Actif",
        "temps_travail": 1.0,
        "date_naissance": "1990-03-15",
        "date_entree": "2020-01-01",
        "date_sortie": None,
        "sexe": "M",
        "salaire_base_mensuel": 3000.0,
        "code_site": "PAR",
        "code_cost_center": "CC1",
    }
    row.update(overrides)
    return row


def pay_record(**overrides) -> dict:
    row = {"matricule": "E001", **{col: 0.0 for col in (*GROSS_COMPONENTS, *EMPLOYER_CHARGES, *LEAVE_BALANCES)}}
    row.update(overrides)
    return row


def absence(type_absence: str = "Maladie", nb_jours_ouvres: float = 1.0, **overrides) -> dict:
    row = {"matricule": "E001", "type_absence": type_absence, "nb_jours_ouvres": nb_jours_ouvres}
    row.update(overrides)
    return row


@pytest.fixture
def reference_date() -> pd.Timestamp:
    return REFERENCE_DATE


@pytest.fixture
def make_employees():
    """Build an employee frame, numbering matricules in row order."""
    def _build(*rows: dict) -> pd.DataFrame:
        records = [{"matricule": f"E{i:03d}", **row} for i, row in enumerate(rows, start=1)]
        return pd.DataFrame([employee(**r) for r in records])
    return _build


@pytest.fixture
def make_remunerations():
    def _build(*rows: dict) -> pd.DataFrame:
        return pd.DataFrame([pay_record(**row) for row in rows])
    return _build


@pytest.fixture
def make_absences():
    def _build(*rows: dict) -> pd.DataFrame:
        return pd.DataFrame([absence(**row) for row in rows])
    return _build


@pytest.fixture
def roster(make_employees) -> pd.DataFrame:
    """Five employees: four active with mixed contracts, one who left in the window."""
    return make_employees(
        {"type_contrat": "CDI", "sexe": "F", "date_naissance": "1990-05-01", "code_site": "PAR",
         "code_cost_center": "CC1", "salaire_base_mensuel": 4000.0},
        {"type_contrat": "CDI", "sexe": "M", "date_naissance": "1985-01-20", "code_site": "PAR",
         "code_cost_center": "CC2", "salaire_base_mensuel": 3500.0, "temps_travail": 0.8},
        {"type_contrat": "CDD", "sexe": "F", "date_naissance": "1970-11-02", "code_site": "LYO",
         "code_cost_center": "CC1", "salaire_base_mensuel": 2500.0, "date_entree": "2025-05-01"},
        {"type_contrat": "Alternance", "sexe": "M", "date_naissance": None, "code_site": None,
         "code_cost_center": None, "salaire_base_mensuel": 1200.0, "temps_travail": None},
        {"type_contrat": "CDI", "statut_emploi": "Inactif", "sexe": "M", "date_sortie": "2025-04-30",
         "salaire_base_mensuel": 5000.0},
    )
