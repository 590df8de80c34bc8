"""Threshold alerts raised from a snapshot."""

import logging
from dataclasses import dataclass

from workforce_kpi.config import AlertThresholds
from workforce_kpi.metrics.models import MetricsSnapshot

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class Alert:
    id: str
    type: str  # "warning" | "info"
    title: str
    message: str
    priority: str  # "high" | "medium" | "low"
    category: str


def build_alerts(snapshot: MetricsSnapshot, thresholds: AlertThresholds | None = None) -> list[Alert]:
    """Turnover and absenteeism above threshold, data quality below it."""
    thresholds = thresholds or AlertThresholds()
    alerts = []

    if snapshot.taux_turnover > thresholds.turnover:
        alerts.append(Alert(
            id="turnover-alert",
            type="warning",
            title="Turnover critique",
            message=f"Le taux de turnover ({snapshot.taux_turnover:.1f}%) dépasse le seuil d'alerte",
            priority="high",
            category="headcount",
        ))

    if snapshot.taux_absenteisme > thresholds.absenteeism:
        alerts.append(Alert(
            id="absence-alert",
            type="warning",
            title="Absentéisme élevé",
            message=f"Le taux d'absentéisme ({snapshot.taux_absenteisme:.1f}%) nécessite une attention",
            priority="medium",
            category="absence",
        ))

    if snapshot.score_qualite_donnees < thresholds.data_quality:
        alerts.append(Alert(
            id="quality-alert",
            type="info",
            title="Qualité des données",
            message=f"Score de qualité: {snapshot.score_qualite_donnees:.0f}% - Vérification recommandée",
            priority="low",
            category="quality",
        ))

    if alerts:
        logger.info("%d alert(s) raised for %s", len(alerts), snapshot.date_reference)
    return alerts
