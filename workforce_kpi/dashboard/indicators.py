"""KPI cards: period-over-period evolutions, performance levels, trends and insights."""

import logging
from collections.abc import Mapping
from dataclasses import dataclass

import pandas as pd

from workforce_kpi.config import AlertThresholds
from workforce_kpi.metrics.models import CostCenterPayroll, MetricsSnapshot, SiteHeadcount
from workforce_kpi.utils.types import PerformanceLevel, Trend, classify_quality

logger = logging.getLogger(__name__)

# Relative change (%) for volumes, point difference for rates.
VOLUME_METRICS = {
    "effectif": "effectif_actif",
    "masse": "masse_salariale_brute",
    "cout": "cout_total_employeur",
    "fte": "etp_total",
    "anciennete": "anciennete_moyenne_annees",
}
RATE_METRICS = {
    "turnover": "taux_turnover",
    "absenteisme": "taux_absenteisme",
    "charges": "taux_charges",
    "cdi": "pct_cdi",
    "qualite": "score_qualite_donnees",
}


@dataclass(frozen=True)
class Evolution:
    monthly: float = 0.0
    yearly: float = 0.0


@dataclass(frozen=True)
class PerformanceThresholds:
    excellent: float
    good: float
    warning: float


@dataclass(frozen=True)
class KpiCard:
    id: str
    title: str
    value: float
    subtitle: str
    detail: str
    format: str  # "number" | "currency" | "percent" | "duration"
    category: str
    evolution: Evolution
    trend: Trend
    performance: PerformanceLevel
    is_diff: bool = False
    threshold: float | None = None
    alert: str | None = None  # "critical" | "warning"
    insight: str | None = None


def calculate_evolution(current: float, previous: float | None) -> float:
    """Relative change in percent; 0 without a usable previous value."""
    if not previous:
        return 0.0
    return (current - previous) / previous * 100


def _delta(metric: str, current: MetricsSnapshot, other: MetricsSnapshot | None) -> float:
    if other is None:
        return 0.0
    if metric in VOLUME_METRICS:
        field_name = VOLUME_METRICS[metric]
        return calculate_evolution(getattr(current, field_name), getattr(other, field_name))
    field_name = RATE_METRICS[metric]
    return getattr(current, field_name) - getattr(other, field_name)


def compute_evolutions(
    current: MetricsSnapshot,
    previous: MetricsSnapshot | None = None,
    yearly: MetricsSnapshot | None = None,
) -> dict[str, Evolution]:
    """Monthly and yearly evolution of every tracked metric."""
    return {
        metric: Evolution(monthly=_delta(metric, current, previous), yearly=_delta(metric, current, yearly))
        for metric in (*VOLUME_METRICS, *RATE_METRICS)
    }


def performance_level(
    value: float,
    thresholds: PerformanceThresholds,
    lower_is_better: bool = False,
) -> PerformanceLevel:
    if lower_is_better:
        if value <= thresholds.excellent:
            return PerformanceLevel.EXCELLENT
        if value <= thresholds.good:
            return PerformanceLevel.GOOD
        if value <= thresholds.warning:
            return PerformanceLevel.WARNING
        return PerformanceLevel.CRITICAL

    if value >= thresholds.excellent:
        return PerformanceLevel.EXCELLENT
    if value >= thresholds.good:
        return PerformanceLevel.GOOD
    if value >= thresholds.warning:
        return PerformanceLevel.WARNING
    return PerformanceLevel.CRITICAL


def trend_direction(delta: float, tolerance: float = 2.0) -> Trend:
    match delta:
        case d if d > tolerance:
            return Trend.UP
        case d if d < -tolerance:
            return Trend.DOWN
        case _:
            return Trend.STABLE


def resolve_thresholds(
    establishment: Mapping | None = None,
    company: Mapping | None = None,
    defaults: AlertThresholds | None = None,
) -> AlertThresholds:
    """Establishment thresholds win over company defaults, which win over ``defaults``.

    Zero or missing values fall through to the next level.
    """
    defaults = defaults or AlertThresholds()
    establishment = establishment or {}
    company = company or {}
    return AlertThresholds(
        turnover=float(
            establishment.get("seuil_turnover")
            or company.get("seuil_turnover_default")
            or defaults.turnover
        ),
        absenteeism=float(
            establishment.get("seuil_absenteisme")
            or company.get("seuil_absenteisme_default")
            or defaults.absenteeism
        ),
        data_quality=defaults.data_quality,
    )


def generate_insight(metric: str, value: float, evolution: float, threshold: float | None = None) -> str:
    """One-line French commentary for a KPI card."""
    match metric:
        case "effectif":
            if evolution > 15:
                return f"Croissance forte (+{evolution:.1f}%) - Anticipez les besoins RH"
            if evolution < -15:
                return f"Réduction importante ({evolution:.1f}%) - Analysez l'impact organisationnel"
            if abs(evolution) < 2:
                return "Effectif stable - Situation maîtrisée"
            return f"Évolution modérée de {evolution:.1f}% - Surveillance continue"
        case "masse":
            if evolution > 20:
                return f"Hausse significative (+{evolution:.1f}%) - Vérifiez la rentabilité"
            if evolution < -8:
                return f"Baisse notable ({evolution:.1f}%) - Attention à la motivation des équipes"
            return f"Évolution maîtrisée de {abs(evolution):.1f}% - Dans les normes"
        case "turnover":
            if value > (threshold or 15):
                return f"Critique: {value:.1f}% - Action urgente requise pour la fidélisation"
            if value < 5:
                return f"Excellent: {value:.1f}% - Fidélisation très efficace"
            return f"Niveau acceptable: {value:.1f}% - Surveillance continue recommandée"
        case "absenteisme":
            if value > (threshold or 8):
                return f"Préoccupant: {value:.1f}% - Programme QVT recommandé"
            if value < 3:
                return f"Très bon niveau: {value:.1f}% - Continuez sur cette lancée"
            return f"Niveau acceptable: {value:.1f}% - Maintenir la vigilance"
        case _:
            return "Analyse en cours..."


def build_kpi_cards(
    current: MetricsSnapshot,
    previous: MetricsSnapshot | None = None,
    yearly: MetricsSnapshot | None = None,
    thresholds: AlertThresholds | None = None,
) -> list[KpiCard]:
    """Assemble the dashboard cards for ``current``, compared with earlier snapshots."""
    thresholds = thresholds or AlertThresholds()
    evo = compute_evolutions(current, previous, yearly)
    turnover_alert = current.taux_turnover > thresholds.turnover
    absence_alert = current.taux_absenteisme > thresholds.absenteeism
    tenure_months = current.anciennete_moyenne_annees * 12
    logger.debug("Building KPI cards for %s (previous: %s, yearly: %s)", current.date_reference,
                 previous and previous.date_reference, yearly and yearly.date_reference)

    return [
        KpiCard(
            id="effectif",
            title="Effectif Total",
            value=current.effectif_actif,
            subtitle=f"ETP: {current.etp_total:.1f} • Moyen: {current.effectif_moyen:.0f}",
            detail=f"{current.nb_entrees} entrées • {current.nb_sorties} sorties sur 3 mois",
            format="number",
            category="headcount",
            evolution=evo["effectif"],
            trend=trend_direction(evo["effectif"].monthly, 2),
            performance=performance_level(current.effectif_actif, PerformanceThresholds(50, 30, 15)),
            insight=generate_insight("effectif", current.effectif_actif, evo["effectif"].monthly),
        ),
        KpiCard(
            id="turnover",
            title="Taux de Turnover",
            value=current.taux_turnover,
            subtitle=f"{current.nb_entrees + current.nb_sorties} mouvements totaux",
            detail="Seuil dépassé - Action requise" if turnover_alert else "Niveau acceptable",
            format="percent",
            category="headcount",
            evolution=evo["turnover"],
            trend=trend_direction(evo["turnover"].monthly, 2),
            performance=performance_level(
                current.taux_turnover, PerformanceThresholds(5, 10, thresholds.turnover), lower_is_better=True,
            ),
            is_diff=True,
            threshold=thresholds.turnover,
            alert="critical" if turnover_alert else None,
            insight=generate_insight("turnover", current.taux_turnover, evo["turnover"].monthly, thresholds.turnover),
        ),
        KpiCard(
            id="masse",
            title="Masse Salariale Brute",
            value=current.masse_salariale_brute,
            subtitle=f"Salaire de base médian: {current.salaire_base_median:,.0f} €",
            detail=f"Salaire brut moyen par ETP: {current.salaire_brut_moyen:,.0f} €",
            format="currency",
            category="payroll",
            evolution=evo["masse"],
            trend=trend_direction(evo["masse"].monthly, 5),
            performance=performance_level(current.masse_salariale_brute, PerformanceThresholds(1_000_000, 500_000, 200_000)),
            insight=generate_insight("masse", current.masse_salariale_brute, evo["masse"].monthly),
        ),
        KpiCard(
            id="cout_total",
            title="Coût Total Employeur",
            value=current.cout_total_employeur,
            subtitle=f"Charges: {current.taux_charges:.1f}% • Variable: {current.part_variable:.1f}%",
            detail=f"Coût moyen par ETP: {current.cout_moyen_par_etp:,.0f} €",
            format="currency",
            category="payroll",
            evolution=evo["cout"],
            trend=trend_direction(evo["cout"].monthly, 3),
            performance=performance_level(current.taux_charges, PerformanceThresholds(35, 40, 45), lower_is_better=True),
        ),
        KpiCard(
            id="taux_cdi",
            title="Stabilité Contractuelle",
            value=current.pct_cdi,
            subtitle=f"{current.nb_cdi} CDI sur {current.effectif_actif} employés",
            detail=f"CDD: {current.pct_cdd:.1f}% • Alternance: {current.pct_alternance:.1f}% • Stage: {current.pct_stage:.1f}%",
            format="percent",
            category="performance",
            evolution=evo["cdi"],
            trend=Trend.STABLE,
            performance=performance_level(current.pct_cdi, PerformanceThresholds(85, 70, 60)),
            is_diff=True,
        ),
        KpiCard(
            id="absenteisme",
            title="Taux d'Absentéisme",
            value=current.taux_absenteisme,
            subtitle=f"{current.nb_jours_absence:g} jours d'absence • {current.nb_absences_total} absences",
            detail=f"Durée moyenne: {current.duree_moyenne_absence:.1f}j • Coût: {current.cout_absenteisme:,.0f} €",
            format="percent",
            category="absence",
            evolution=evo["absenteisme"],
            trend=trend_direction(evo["absenteisme"].monthly, 1),
            performance=performance_level(
                current.taux_absenteisme, PerformanceThresholds(3, 5, thresholds.absenteeism), lower_is_better=True,
            ),
            is_diff=True,
            threshold=thresholds.absenteeism,
            alert="warning" if absence_alert else None,
            insight=generate_insight(
                "absenteisme", current.taux_absenteisme, evo["absenteisme"].monthly, thresholds.absenteeism,
            ),
        ),
        KpiCard(
            id="anciennete",
            title="Ancienneté Moyenne",
            value=tenure_months,
            subtitle=f"Âge moyen: {current.age_moyen:.1f} ans",
            detail=f"Hommes: {current.pct_hommes:.0f}% • Femmes: {current.pct_femmes:.0f}%",
            format="duration",
            category="performance",
            evolution=evo["anciennete"],
            trend=Trend.UP if evo["anciennete"].monthly > 2 else Trend.STABLE,
            performance=performance_level(tenure_months, PerformanceThresholds(60, 36, 12)),
        ),
        KpiCard(
            id="qualite",
            title="Qualité des Données",
            value=current.score_qualite_donnees,
            subtitle=f"{current.effectif_total} lignes employés analysées",
            detail=f"Fiabilité {classify_quality(current.score_qualite_donnees)} • naissance, temps de travail, site, cost center",
            format="percent",
            category="performance",
            evolution=evo["qualite"],
            trend=Trend.STABLE,
            performance=performance_level(current.score_qualite_donnees, PerformanceThresholds(95, 85, 70)),
            is_diff=True,
            alert="warning" if current.score_qualite_donnees < 70 else None,
        ),
    ]


def top_sites(snapshot: MetricsSnapshot, n: int = 5) -> list[SiteHeadcount]:
    """Largest sites by active headcount."""
    return snapshot.effectifs_par_site[:n]


def top_cost_centers(snapshot: MetricsSnapshot, n: int = 5) -> list[CostCenterPayroll]:
    """Cost centers with the highest gross payroll."""
    return snapshot.effectifs_par_cost_center[:n]


TREND_COLUMNS = [
    "effectif_actif", "etp_total", "taux_turnover", "taux_absenteisme",
    "masse_salariale_brute", "cout_total_employeur", "pct_cdi", "score_qualite_donnees",
]


def build_trend_frame(snapshots: list[MetricsSnapshot]) -> pd.DataFrame:
    """One row per snapshot, ordered by reference date, for trend charts."""
    rows = [
        {
            "periode": s.date_reference.strftime("%Y-%m"),
            "date_reference": pd.Timestamp(s.date_reference),
            **{col: getattr(s, col) for col in TREND_COLUMNS},
        }
        for s in snapshots
    ]
    df = pd.DataFrame(rows, columns=["periode", "date_reference", *TREND_COLUMNS])
    return df.sort_values("date_reference", kind="stable").reset_index(drop=True)
