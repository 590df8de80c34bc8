import logging

import pandas as pd
import pytest

from workforce_kpi import ingest
from workforce_kpi.ingest.periods import PeriodCounts
from workforce_kpi.ingest.transform import (
    normalize_absences,
    normalize_employees,
    normalize_workbook,
    to_period_key,
)
from workforce_kpi.ingest.workbook import WorkbookData, read_workbook
from workforce_kpi.metrics import compute_metrics_snapshot
from workforce_kpi.utils.io import read_excel_file


@pytest.fixture
def template_path(tmp_path):
    return ingest.write_import_template(tmp_path / "import.xlsx")


def _write_workbook(path, **sheets):
    with pd.ExcelWriter(path, engine="openpyxl") as writer:
        for name, frame in sheets.items():
            frame.to_excel(writer, sheet_name=name, index=False)
    return path


def test_template_round_trip(template_path):
    batches = ingest.run(template_path)

    assert [b.periode for b in batches] == ["2024-01", "2024-02", "2024-03"]
    assert [len(b.employees) for b in batches] == [3, 4, 4]
    assert [len(b.remunerations) for b in batches] == [3, 4, 4]
    assert [len(b.absences) for b in batches] == [2, 2, 2]
    assert batches[1].reference_date == pd.Timestamp("2024-02-29")


def test_template_period_feeds_the_engine(template_path):
    march = ingest.run(template_path)[-1]

    snapshot = compute_metrics_snapshot(
        march.employees, march.remunerations, march.absences, reference_date=march.reference_date,
    )

    assert snapshot.effectif_actif == 4
    assert snapshot.etp_total == pytest.approx(3.8)
    assert snapshot.nb_entrees == 1
    assert snapshot.nb_sorties == 1
    assert snapshot.taux_turnover == pytest.approx(100.0)
    assert snapshot.source_remuneration == "remunerations"
    assert snapshot.masse_salariale_brute == pytest.approx(18360.0)
    assert snapshot.cout_total_employeur == pytest.approx(24270.0)
    assert snapshot.nb_jours_absence == 7.0


def test_summary_counts_rows_per_period(template_path):
    summary = ingest.summarize_workbook(ingest.load_workbook(template_path))

    assert summary.total_periods == 3
    assert summary.periods == ["2024-01", "2024-02", "2024-03"]
    assert (summary.total_employees, summary.total_remunerations, summary.total_absences) == (11, 11, 6)
    assert summary.by_period[0] == PeriodCounts("2024-01", employees=3, remunerations=3, absences=2)


def test_template_requires_xlsx(tmp_path):
    with pytest.raises(ValueError, match="xlsx"):
        ingest.write_import_template(tmp_path / "import.csv")


def test_missing_employee_sheet(tmp_path):
    path = _write_workbook(tmp_path / "bad.xlsx", AUTRE=pd.DataFrame({"a": [1]}))

    with pytest.raises(ValueError, match="EMPLOYES"):
        read_workbook(path)
    assert ingest.validate(path)["valid"] is False


def test_sheet_names_are_case_insensitive_and_optional_sheets_default_empty(tmp_path):
    employees = pd.DataFrame({"Matricule": ["E1"], "Date Entree": ["2024-01-01"], "Periode": ["2024-01"]})
    path = _write_workbook(tmp_path / "lower.xlsx", employes=employees)

    workbook = read_workbook(path)

    assert list(workbook.employees.columns) == ["matricule", "date_entree", "periode"]
    assert workbook.remunerations.empty
    assert workbook.absences.empty


def test_read_excel_file_rejects_unknown_files(tmp_path):
    with pytest.raises(FileNotFoundError):
        read_excel_file(tmp_path / "missing.xlsx")

    other = tmp_path / "data.csv"
    other.write_text("a,b\n1,2\n")
    with pytest.raises(ValueError, match="Unsupported"):
        read_excel_file(other)


def test_excel_serial_dates_are_converted():
    raw = pd.DataFrame({
        "matricule": ["E1"],
        "sexe": ["F"],
        "date_entree": [45292],
        "date_naissance": ["20/07/1991"],
        "periode": ["2024-01"],
    })

    employees = normalize_employees(raw)

    assert employees.loc[0, "date_entree"] == pd.Timestamp("2024-01-01")
    assert employees.loc[0, "date_naissance"] == pd.Timestamp("1991-07-20")


def test_employee_import_defaults(caplog):
    raw = pd.DataFrame({
        "matricule": ["E1", None],
        "sexe": ["Femme", "homme"],
        "type_contrat": ["Freelance", "Apprentissage"],
        "statut_emploi": [None, "active"],
        "temps_travail": [None, "0,5"],
        "salaire_base_mensuel": ["2 500 €", None],
        "periode": ["2024/3", "2024-02"],
    })

    with caplog.at_level(logging.WARNING):
        employees = normalize_employees(raw, default_period="2024-01")

    assert employees["matricule"].tolist() == ["E1", "EMP-AUTO-00001"]
    assert employees["sexe"].tolist() == ["F", "M"]
    assert employees["type_contrat"].tolist() == ["CDI", "Alternance"]
    assert employees["statut_emploi"].tolist() == ["Actif", "Actif"]
    assert employees["temps_travail"].tolist() == [1.0, 0.5]
    assert employees["salaire_base_mensuel"].tolist() == [2500.0, 0.0]
    assert employees["periode"].tolist() == ["2024-03", "2024-02"]
    assert employees["date_entree"].tolist() == [pd.Timestamp("2024-03-01"), pd.Timestamp("2024-02-01")]
    assert employees["nom"].tolist() == ["INCONNU", "INCONNU"]
    assert "Freelance" in caplog.text


def test_absence_import_defaults():
    raw = pd.DataFrame({"matricule": ["E1"], "periode_reference": [None]})

    absences = normalize_absences(raw, default_period="2024-05")

    row = absences.iloc[0]
    assert row["type_absence"] == "Non spécifié"
    assert row["nb_jours_ouvres"] == 1.0
    assert row["periode_reference"] == "2024-05"
    assert row["date_debut"] == pd.Timestamp("2024-05-01")


@pytest.mark.parametrize(
    ("value", "expected"),
    [
        ("2024-01", "2024-01"),
        ("2024/7", "2024-07"),
        (pd.Timestamp("2024-05-17"), "2024-05"),
        (45292, "2024-01"),
        (None, "2030-12"),
    ],
)
def test_to_period_key(value, expected):
    assert to_period_key(value, "2030-12") == expected


def test_orphan_rows_are_dropped(caplog):
    raw = WorkbookData(
        employees=pd.DataFrame({"matricule": ["E1"], "sexe": ["M"], "periode": ["2024-01"]}),
        remunerations=pd.DataFrame({"matricule": ["E1", "E9"], "mois_paie": ["2024-01", "2024-01"]}),
        absences=pd.DataFrame({"matricule": ["E9"], "periode_reference": ["2024-01"], "nb_jours_ouvres": [2]}),
    )

    with caplog.at_level(logging.WARNING):
        batches = ingest.split_by_period(normalize_workbook(raw))

    assert len(batches) == 1
    assert batches[0].remunerations["matricule"].tolist() == ["E1"]
    assert batches[0].absences.empty
    assert "no matching employee" in caplog.text


def test_period_with_pay_rows_only_has_no_employees():
    raw = WorkbookData(
        employees=pd.DataFrame({"matricule": ["E1"], "sexe": ["M"], "periode": ["2024-01"]}),
        remunerations=pd.DataFrame({"matricule": ["E1"], "mois_paie": ["2024-02"]}),
        absences=pd.DataFrame(),
    )

    batches = ingest.split_by_period(normalize_workbook(raw))

    assert [b.periode for b in batches] == ["2024-01", "2024-02"]
    assert batches[1].employees.empty
    assert batches[1].remunerations.empty


def test_validation_reports_every_failure(tmp_path):
    employees = pd.DataFrame({
        "matricule": ["E1", "E1"],
        "sexe": ["X", "M"],
        "date_entree": ["2024-01-01", "2024-01-01"],
        "periode": ["2024-01", "2024-01"],
    })
    path = _write_workbook(tmp_path / "invalid.xlsx", EMPLOYES=employees)

    result = ingest.validate(path)

    assert result["valid"] is False
    assert any("sexe" in error for error in result["errors"])
    assert any("duplicate" in error for error in result["errors"])
    with pytest.raises(ValueError, match="Invalid workbook"):
        ingest.run(path)


def test_absence_end_before_start_is_invalid():
    raw = WorkbookData(
        employees=pd.DataFrame({"matricule": ["E1"], "sexe": ["M"], "periode": ["2024-01"]}),
        remunerations=pd.DataFrame(),
        absences=pd.DataFrame({
            "matricule": ["E1"],
            "date_debut": ["2024-01-10"],
            "date_fin": ["2024-01-05"],
            "periode_reference": ["2024-01"],
        }),
    )

    result = ingest.validate_workbook(normalize_workbook(raw))

    assert result["valid"] is False
    assert any("date_fin_after_date_debut" in error for error in result["errors"])
