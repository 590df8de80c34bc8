import datetime as dt

import pandas as pd
import pandera as pa
import pytest

from workforce_kpi.config import EngineSettings
from workforce_kpi.metrics import MetricsSnapshot, PyramideAges, compute_metrics_snapshot

PERCENT_FIELDS = [
    "pct_cdi", "pct_cdd", "pct_alternance", "pct_stage", "pct_hommes", "pct_femmes",
    "taux_turnover", "taux_absenteisme", "part_variable", "taux_charges",
]


def test_snapshot_over_mixed_roster(roster, reference_date):
    snapshot = compute_metrics_snapshot(roster, reference_date=reference_date)

    assert isinstance(snapshot, MetricsSnapshot)
    assert snapshot.date_reference == dt.date(2025, 6, 30)
    assert snapshot.effectif_total == 5
    assert snapshot.effectif_actif == 4
    assert snapshot.etp_total == pytest.approx(3.8)
    assert (snapshot.nb_cdi, snapshot.nb_cdd, snapshot.nb_alternance, snapshot.nb_stage) == (2, 1, 1, 0)
    assert snapshot.pct_cdi == pytest.approx(50.0)
    assert snapshot.pct_cdd == pytest.approx(25.0)
    assert snapshot.pct_stage == 0.0

    assert snapshot.nb_entrees == 1
    assert snapshot.nb_sorties == 1
    assert snapshot.effectif_moyen == pytest.approx(4.0)
    assert snapshot.taux_turnover == pytest.approx(100.0)

    assert snapshot.age_moyen == pytest.approx(40.0)
    assert snapshot.pyramide_ages == PyramideAges(moins_30=0, de_30_a_39=1, de_40_a_49=1, plus_50=1)
    assert snapshot.score_qualite_donnees == pytest.approx(80.0)


def test_percentages_stay_in_range(roster, reference_date):
    snapshot = compute_metrics_snapshot(roster, reference_date=reference_date)

    for name in ("pct_cdi", "pct_cdd", "pct_alternance", "pct_stage"):
        assert 0 <= getattr(snapshot, name) <= 100
    assert snapshot.pct_hommes + snapshot.pct_femmes == pytest.approx(100.0)


@pytest.mark.parametrize("employees", [None, pd.DataFrame()])
def test_empty_roster_yields_zeroed_snapshot(employees):
    snapshot = compute_metrics_snapshot(employees, reference_date="2025-01-31")

    assert snapshot.effectif_actif == 0
    assert snapshot.etp_total == 0
    assert snapshot.turnover_rate == 0
    assert snapshot.taux_absenteisme == 0
    assert snapshot.pct_hommes + snapshot.pct_femmes == 0
    for name in PERCENT_FIELDS:
        assert getattr(snapshot, name) == 0
    assert snapshot.pyramide_ages.total == 0
    assert snapshot.effectifs_par_site == []
    assert snapshot.score_qualite_donnees == 100.0


def test_only_inactive_employees_is_zero_guarded(make_employees):
    employees = make_employees({"statut_emploi": "Inactif"}, {"statut_emploi": "Suspendu"})

    snapshot = compute_metrics_snapshot(employees, reference_date="2025-01-31")

    assert snapshot.effectif_total == 2
    assert snapshot.effectif_actif == 0
    assert snapshot.pct_cdi == 0
    assert snapshot.cout_moyen_par_etp == 0
    assert snapshot.age_moyen == 0


def test_fallback_cost_applies_flat_charge_rate(make_employees):
    employees = make_employees(*[{"salaire_base_mensuel": 2800.0} for _ in range(7)])

    snapshot = compute_metrics_snapshot(employees, reference_date="2025-06-30")

    assert snapshot.source_remuneration == "estimation"
    assert snapshot.masse_salariale_brute == pytest.approx(7 * 2800.0)
    assert snapshot.cout_total_employeur == pytest.approx(7 * 2800.0 * 1.45)


def test_turnover_formula(make_employees):
    stayers = [{"date_entree": "2015-01-01"} for _ in range(90)]
    hires = [{"date_entree": "2025-05-15"} for _ in range(10)]
    leavers = [
        {"statut_emploi": "Inactif", "date_entree": "2015-01-01", "date_sortie": "2025-05-31"}
        for _ in range(5)
    ]
    employees = make_employees(*stayers, *hires, *leavers)

    snapshot = compute_metrics_snapshot(employees, reference_date="2025-06-30")

    assert snapshot.effectif_actif == 100
    assert snapshot.nb_entrees == 10
    assert snapshot.nb_sorties == 5
    assert snapshot.effectif_moyen == pytest.approx(102.5)
    assert snapshot.turnover_rate == pytest.approx(5 / 102.5 * 4 * 100)
    assert round(snapshot.turnover_rate, 2) == 19.51


def test_age_scenario(make_employees):
    employees = make_employees(
        {"date_naissance": "1990-07-01"},
        {"date_naissance": "1985-07-01"},
        {"date_naissance": "1970-07-01"},
    )

    snapshot = compute_metrics_snapshot(employees, reference_date="2025-03-31")

    assert snapshot.pyramide_ages == PyramideAges(moins_30=0, de_30_a_39=1, de_40_a_49=1, plus_50=1)
    assert snapshot.age_moyen == pytest.approx(43.33, abs=0.01)


def test_absence_grouping_scenario(make_employees, make_absences):
    employees = make_employees({}, {})
    absences = make_absences(
        {"type_absence": "Maladie", "nb_jours_ouvres": 5},
        {"type_absence": "Maladie", "nb_jours_ouvres": 3},
        {"type_absence": "Congé", "nb_jours_ouvres": 2},
    )

    snapshot = compute_metrics_snapshot(employees, absences=absences, reference_date="2025-06-30")

    grouped = [(a.type_absence, a.nb_absences, a.nb_jours) for a in snapshot.absences_par_type]
    assert grouped == [("Maladie", 2, 8.0), ("Congé", 1, 2.0)]
    assert snapshot.nb_jours_absence == 10
    assert snapshot.taux_absenteisme == pytest.approx(10 / 44 * 100)


def test_pay_records_take_precedence_over_estimate(make_employees, make_remunerations):
    employees = make_employees({"salaire_base_mensuel": 9999.0})
    pay = make_remunerations(
        {"salaire_de_base": 3000.0, "primes_variables": 500.0, "cotisations_sociales": 1200.0},
        {"salaire_de_base": 2000.0, "cotisations_sociales": 800.0, "stock_cp_jours": 12.5},
    )

    snapshot = compute_metrics_snapshot(employees, remunerations=pay, reference_date="2025-06-30")

    assert snapshot.source_remuneration == "remunerations"
    assert snapshot.masse_salariale_brute == pytest.approx(5500.0)
    assert snapshot.cout_total_employeur == pytest.approx(7500.0)
    assert snapshot.total_primes_variables == pytest.approx(500.0)
    assert snapshot.stock_cp_jours == pytest.approx(12.5)


def test_legacy_cumulative_cost_setting(make_employees, make_remunerations):
    employees = make_employees({})
    pay = make_remunerations(
        {"salaire_de_base": 1000.0, "cotisations_sociales": 100.0},
        {"salaire_de_base": 2000.0, "cotisations_sociales": 200.0},
    )

    corrected = compute_metrics_snapshot(employees, pay, reference_date="2025-06-30")
    legacy = compute_metrics_snapshot(
        employees, pay, reference_date="2025-06-30", settings=EngineSettings(legacy_cumulative_cost=True),
    )

    assert corrected.cout_total_employeur == pytest.approx(3300.0)
    # running gross totals 1000 then 3000, plus 300 of charges
    assert legacy.cout_total_employeur == pytest.approx(4300.0)
    assert legacy.masse_salariale_brute == corrected.masse_salariale_brute


def test_missing_required_column_raises(make_employees):
    employees = make_employees({}).drop(columns=["date_entree"])

    with pytest.raises(pa.errors.SchemaError):
        compute_metrics_snapshot(employees, reference_date="2025-06-30")


def test_unknown_contract_type_raises(make_employees):
    employees = make_employees({"type_contrat": "Freelance"})

    with pytest.raises(pa.errors.SchemaError):
        compute_metrics_snapshot(employees, reference_date="2025-06-30")


def test_inputs_are_not_modified(roster, make_remunerations, make_absences):
    pay = make_remunerations({"salaire_de_base": 1000.0})
    absences = make_absences({"nb_jours_ouvres": 2})
    before = (roster.copy(), pay.copy(), absences.copy())

    compute_metrics_snapshot(roster, pay, absences, reference_date="2025-06-30")

    pd.testing.assert_frame_equal(roster, before[0])
    pd.testing.assert_frame_equal(pay, before[1])
    pd.testing.assert_frame_equal(absences, before[2])


def test_timezone_aware_reference_date_is_accepted(roster):
    snapshot = compute_metrics_snapshot(roster, reference_date=pd.Timestamp("2025-06-30", tz="Europe/Paris"))

    assert snapshot.date_reference == dt.date(2025, 6, 30)


def test_to_dict_serialises_nested_values(roster, reference_date):
    payload = compute_metrics_snapshot(roster, reference_date=reference_date).to_dict()

    assert payload["date_reference"] == "2025-06-30"
    assert payload["pyramide_ages"]["de_30_a_39"] == 1
    assert payload["effectifs_par_site"][0] == {"code_site": "PAR", "effectif": 2}


def test_leaver_pay_records_count_towards_payroll(make_employees, make_remunerations):
    employees = make_employees({}, {"statut_emploi": "Inactif", "date_sortie": "2025-06-15"})
    pay = make_remunerations(
        {"matricule": "E001", "salaire_de_base": 3000.0, "cotisations_sociales": 1000.0},
        {"matricule": "E002", "salaire_de_base": 1500.0, "cotisations_sociales": 500.0},
    )

    snapshot = compute_metrics_snapshot(employees, pay, reference_date="2025-06-30")

    assert snapshot.effectif_actif == 1
    assert snapshot.masse_salariale_brute == pytest.approx(4500.0)
    assert snapshot.cout_total_employeur == pytest.approx(6000.0)
