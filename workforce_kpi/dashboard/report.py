"""Terminal rendering of a snapshot with rich, using French number formats."""

import math

from rich.console import Console
from rich.table import Table

from workforce_kpi.dashboard.alerts import Alert
from workforce_kpi.dashboard.indicators import KpiCard, top_cost_centers, top_sites
from workforce_kpi.metrics.models import MetricsSnapshot
from workforce_kpi.utils.types import PerformanceLevel, Trend

console = Console()

# fr-FR groups thousands with a narrow no-break space
_GROUP_SEP = "\u202f"

_LEVEL_STYLES = {
    PerformanceLevel.EXCELLENT: "green",
    PerformanceLevel.GOOD: "cyan",
    PerformanceLevel.WARNING: "yellow",
    PerformanceLevel.CRITICAL: "red",
}
_TREND_ARROWS = {Trend.UP: "↑", Trend.DOWN: "↓", Trend.STABLE: "→"}


def _round_half_up(value: float) -> int:
    return int(math.floor(value + 0.5))


def format_number(value: float | None) -> str:
    """Rounded integer with French digit grouping: ``12345.6`` -> ``"12 346"``."""
    rounded = _round_half_up(value or 0)
    return f"{rounded:,}".replace(",", _GROUP_SEP)


def format_currency(value: float | None) -> str:
    return f"{format_number(value)}\u00a0€"


def format_percentage(value: float | None, decimals: int = 1) -> str:
    return f"{value or 0:.{decimals}f}%"


def format_duration(months: float) -> str:
    """Months as years and months: ``27`` -> ``"2a 3m"``."""
    years = int(months // 12)
    remaining = _round_half_up(months % 12)
    if years == 0:
        return f"{remaining}m"
    if remaining == 0:
        return f"{years}a"
    return f"{years}a {remaining}m"


def format_card_value(card: KpiCard) -> str:
    match card.format:
        case "currency":
            return format_currency(card.value)
        case "percent":
            return format_percentage(card.value)
        case "duration":
            return format_duration(card.value)
        case _:
            return format_number(card.value)


def _format_evolution(value: float, is_diff: bool) -> str:
    sign = "+" if value > 0 else ""
    return f"{sign}{value:.1f} pts" if is_diff else f"{sign}{value:.1f}%"


def _bar(count: int, total: int, width: int = 30) -> str:
    if total <= 0:
        return ""
    return "█" * round(count / total * width)


def render_snapshot(
    snapshot: MetricsSnapshot,
    cards: list[KpiCard] | None = None,
    alerts: list[Alert] | None = None,
    out: Console | None = None,
) -> None:
    """Print KPI cards, the age pyramid, top-5 rankings and alerts."""
    out = out or console
    out.print(f"\n[bold]Tableau de bord RH au {snapshot.date_reference.strftime('%d/%m/%Y')}[/bold]")

    if cards:
        table = Table(title="Indicateurs clés")
        table.add_column("Indicateur")
        table.add_column("Valeur", justify="right")
        table.add_column("Évol. M-1", justify="right")
        table.add_column("Évol. N-1", justify="right")
        table.add_column("Tendance", justify="center")
        table.add_column("Analyse")
        for card in cards:
            style = _LEVEL_STYLES[card.performance]
            title = f"[bold red]! {card.title}[/bold red]" if card.alert else card.title
            table.add_row(
                title,
                f"[{style}]{format_card_value(card)}[/{style}]",
                _format_evolution(card.evolution.monthly, card.is_diff),
                _format_evolution(card.evolution.yearly, card.is_diff),
                _TREND_ARROWS[card.trend],
                card.insight or card.subtitle,
            )
        out.print(table)

    pyramid = snapshot.pyramide_ages
    table = Table(title="Pyramide des âges")
    table.add_column("Tranche")
    table.add_column("Effectif", justify="right")
    table.add_column("")
    for label, count in (
        ("< 30 ans", pyramid.moins_30),
        ("30-39 ans", pyramid.de_30_a_39),
        ("40-49 ans", pyramid.de_40_a_49),
        ("50 ans et +", pyramid.plus_50),
    ):
        table.add_row(label, format_number(count), f"[cyan]{_bar(count, pyramid.total)}[/cyan]")
    out.print(table)

    sites = top_sites(snapshot)
    if sites:
        table = Table(title="Top 5 sites")
        table.add_column("Site")
        table.add_column("Effectif", justify="right")
        for site in sites:
            table.add_row(site.code_site, format_number(site.effectif))
        out.print(table)

    cost_centers = top_cost_centers(snapshot)
    if cost_centers:
        table = Table(title="Top 5 cost centers")
        table.add_column("Cost center")
        table.add_column("Effectif", justify="right")
        table.add_column("Masse salariale", justify="right")
        for cc in cost_centers:
            table.add_row(cc.code_cost_center, format_number(cc.effectif), format_currency(cc.masse_salariale))
        out.print(table)

    if snapshot.absences_par_type:
        table = Table(title="Absences par type")
        table.add_column("Type")
        table.add_column("Absences", justify="right")
        table.add_column("Jours", justify="right")
        for row in snapshot.absences_par_type:
            table.add_row(row.type_absence, format_number(row.nb_absences), f"{row.nb_jours:g}")
        out.print(table)

    for alert in alerts or []:
        color = "red" if alert.type == "warning" else "yellow"
        out.print(f"[{color}]{alert.title}[/{color}]: {alert.message}")
