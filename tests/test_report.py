from io import StringIO

from rich.console import Console

from workforce_kpi.dashboard import build_alerts, build_kpi_cards, render_snapshot
from workforce_kpi.dashboard.report import (
    format_currency,
    format_duration,
    format_number,
    format_percentage,
)
from workforce_kpi.metrics import compute_metrics_snapshot


def test_french_number_formats():
    assert format_number(1234567.4) == "1\u202f234\u202f567"
    assert format_number(None) == "0"
    assert format_currency(2500.5) == "2\u202f501\u00a0€"
    assert format_percentage(12.345) == "12.3%"
    assert format_percentage(None) == "0.0%"


def test_format_duration():
    assert format_duration(5) == "5m"
    assert format_duration(24) == "2a"
    assert format_duration(27) == "2a 3m"


def test_render_snapshot_prints_every_section(roster, reference_date):
    snapshot = compute_metrics_snapshot(roster, reference_date=reference_date)
    buffer = StringIO()
    out = Console(file=buffer, width=200, force_terminal=False)

    render_snapshot(snapshot, build_kpi_cards(snapshot), build_alerts(snapshot), out=out)

    text = buffer.getvalue()
    assert "30/06/2025" in text
    assert "Indicateurs clés" in text
    assert "Pyramide des âges" in text
    assert "Top 5 sites" in text
    assert "Turnover critique" in text
