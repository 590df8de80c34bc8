"""Downloadable import template with sample rows for three months."""

from pathlib import Path

import pandas as pd
from rich.console import Console

from workforce_kpi.ingest.workbook import SHEET_ABSENCES, SHEET_EMPLOYEES, SHEET_REMUNERATIONS
from workforce_kpi.utils.io import FilePath

console = Console()

_EMPLOYEE_HEADER = [
    "matricule", "nom", "prenom", "sexe", "date_naissance", "date_entree", "date_sortie",
    "type_contrat", "temps_travail", "intitule_poste", "salaire_base_mensuel",
    "code_cost_center", "code_site", "manager_matricule", "statut_emploi", "periode", "statut_periode",
]
_EMPLOYEE_ROWS = [
    ["E001", "MARTIN", "Sophie", "F", "1985-06-15", "2020-03-01", "", "CDI", 1, "Directrice RH", 5500, "CC001", "PAR", "", "Actif", "2024-01", "Actif"],
    ["E001", "MARTIN", "Sophie", "F", "1985-06-15", "2020-03-01", "", "CDI", 1, "Directrice RH", 5500, "CC001", "PAR", "", "Actif", "2024-02", "Actif"],
    ["E001", "MARTIN", "Sophie", "F", "1985-06-15", "2020-03-01", "", "CDI", 1, "Directrice RH", 5600, "CC001", "PAR", "", "Actif", "2024-03", "Actif"],
    ["E002", "DUBOIS", "Pierre", "M", "1990-02-20", "2021-01-15", "", "CDI", 1, "Responsable Paie", 4200, "CC001", "PAR", "E001", "Actif", "2024-01", "Actif"],
    ["E002", "DUBOIS", "Pierre", "M", "1990-02-20", "2021-01-15", "", "CDI", 1, "Responsable Paie", 4200, "CC001", "PAR", "E001", "Actif", "2024-02", "Actif"],
    ["E002", "DUBOIS", "Pierre", "M", "1990-02-20", "2021-01-15", "2024-03-31", "CDI", 1, "Responsable Paie", 4200, "CC001", "PAR", "E001", "Actif", "2024-03", "Sortant"],
    ["E003", "MOREAU", "Julie", "F", "1988-11-30", "2019-09-01", "", "CDI", 0.8, "Chargée RH", 3500, "CC001", "PAR", "E001", "Actif", "2024-01", "Actif"],
    ["E003", "MOREAU", "Julie", "F", "1988-11-30", "2019-09-01", "", "CDI", 0.8, "Chargée RH", 3500, "CC001", "PAR", "E001", "Actif", "2024-02", "Actif"],
    ["E003", "MOREAU", "Julie", "F", "1988-11-30", "2019-09-01", "", "CDI", 0.8, "Chargée RH", 3500, "CC001", "PAR", "E001", "Actif", "2024-03", "Actif"],
    ["E004", "PETIT", "Thomas", "M", "1995-04-10", "2024-02-01", "", "CDD", 1, "Assistant RH", 2500, "CC001", "PAR", "E002", "Actif", "2024-02", "Entrant"],
    ["E004", "PETIT", "Thomas", "M", "1995-04-10", "2024-02-01", "", "CDD", 1, "Assistant RH", 2500, "CC001", "PAR", "E001", "Actif", "2024-03", "Actif"],
]

_REMUNERATION_HEADER = [
    "matricule", "mois_paie", "type_contrat", "etp_paie", "salaire_de_base", "primes_fixes",
    "primes_variables", "heures_supp_payees", "avantages_nature", "autres_elements_bruts",
    "cotisations_sociales", "taxes_sur_salaire", "mutuelle_employeur", "prevoyance_employeur",
    "stock_cp_jours", "stock_rtt_jours", "valeur_cp_provisionnee", "valeur_rtt_provisionnee",
]
_REMUNERATION_ROWS = [
    ["E001", "2024-01", "CDI", 1, 5500, 500, 800, 0, 150, 0, 1800, 220, 55, 65, 20, 8, 2500, 800],
    ["E001", "2024-02", "CDI", 1, 5500, 500, 600, 0, 150, 0, 1800, 220, 55, 65, 21, 8, 2600, 800],
    ["E001", "2024-03", "CDI", 1, 5600, 500, 1000, 0, 150, 0, 1850, 224, 56, 65, 22, 7, 2700, 700],
    ["E002", "2024-01", "CDI", 1, 4200, 300, 400, 150, 100, 0, 1400, 168, 45, 50, 15, 5, 1800, 500],
    ["E002", "2024-02", "CDI", 1, 4200, 300, 300, 0, 100, 0, 1400, 168, 45, 50, 16, 5, 1900, 500],
    ["E002", "2024-03", "CDI", 1, 4200, 300, 500, 0, 100, 0, 1400, 168, 45, 50, 0, 0, 0, 0],
    ["E003", "2024-01", "CDI", 0.8, 2800, 200, 0, 0, 80, 0, 900, 112, 35, 40, 18, 6, 1600, 480],
    ["E003", "2024-02", "CDI", 0.8, 2800, 200, 0, 0, 80, 0, 900, 112, 35, 40, 19, 6, 1700, 480],
    ["E003", "2024-03", "CDI", 0.8, 2800, 200, 200, 0, 80, 0, 900, 112, 35, 40, 20, 5, 1800, 400],
    ["E004", "2024-02", "CDD", 1, 2500, 0, 0, 200, 80, 0, 800, 100, 30, 35, 0, 0, 0, 0],
    ["E004", "2024-03", "CDD", 1, 2500, 0, 0, 150, 80, 0, 800, 100, 30, 35, 2, 0, 200, 0],
]

_ABSENCE_HEADER = ["matricule", "type_absence", "date_debut", "date_fin", "nb_jours_ouvres", "periode_reference"]
_ABSENCE_ROWS = [
    ["E001", "Congés_payés", "2024-01-15", "2024-01-19", 5, "2024-01"],
    ["E002", "Maladie_courte", "2024-01-10", "2024-01-12", 3, "2024-01"],
    ["E003", "RTT", "2024-02-20", "2024-02-21", 2, "2024-02"],
    ["E001", "Formation", "2024-02-05", "2024-02-07", 3, "2024-02"],
    ["E002", "Congés_payés", "2024-03-11", "2024-03-15", 5, "2024-03"],
    ["E003", "Maladie_courte", "2024-03-25", "2024-03-26", 2, "2024-03"],
]


def template_frames() -> dict[str, pd.DataFrame]:
    return {
        SHEET_EMPLOYEES: pd.DataFrame(_EMPLOYEE_ROWS, columns=_EMPLOYEE_HEADER),
        SHEET_REMUNERATIONS: pd.DataFrame(_REMUNERATION_ROWS, columns=_REMUNERATION_HEADER),
        SHEET_ABSENCES: pd.DataFrame(_ABSENCE_ROWS, columns=_ABSENCE_HEADER),
    }


def write_import_template(path: FilePath) -> Path:
    """Write the three-sheet import template to ``path``."""
    path = Path(path)
    if path.suffix.lower() != ".xlsx":
        raise ValueError(f"Template must be an .xlsx file, got: {path.suffix or path.name}")
    path.parent.mkdir(parents=True, exist_ok=True)

    with pd.ExcelWriter(path, engine="openpyxl") as writer:
        for sheet, frame in template_frames().items():
            frame.to_excel(writer, sheet_name=sheet, index=False)

    console.print(f"  Wrote import template to {path}")
    return path
