from src.notion_tracker.cycle_review import aggregate
from src.notion_tracker.models import SubscriptionRow
from src.notion_tracker.reporting import format_currency, render_cycle_report, render_subscription_summary
from src.notion_tracker.subscriptions import summarize_subscriptions

def test_render_cycle_report(app_row, phase_row):
    report = aggregate([
        app_row(id="A", company="Acme", status="Signed", team="Core", created="2022-09-01"),
        app_row(id="B", company="Globex", status="Rejected", created="2022-10-01"),
        app_row(id="C", status="Intern"),
        phase_row(parent="A", status="OA"),
        phase_row(parent="A", status="Signed", start="2023-02-15"),
    ])
    lines = render_cycle_report(report, "Post Grad 2022-2023")
    assert lines[0] == "[CYCLE] Post Grad 2022-2023"
    assert "Hired: Acme | Engineer (Core)" in lines
    assert "Applications: 2" in lines
    assert "Companies (2): Acme, Globex" in lines
    assert "  Signed: 2" in lines
    assert "  Applied: 0" not in lines
    assert "  A: OA -> Signed" in lines
    assert "Start: 2022-09-01 | End: 2023-02-15" in lines
    assert lines[-1] == "Skipped rows: 1"

def test_render_not_hired(app_row):
    lines = render_cycle_report(aggregate([app_row()]), "c")
    assert "Hired: no" in lines
    assert "Start: 2023-01-01 | End: -" in lines

def test_format_currency():
    assert format_currency(1234.5) == "$1,234.50"
    assert format_currency(0) == "$0.00"
    assert format_currency(-3) == "-$3.00"

def test_subscription_summary(caplog):
    summary = summarize_subscriptions([
        SubscriptionRow(price=120, frequency_months=12, name="Music"),
        SubscriptionRow(price=15, frequency_months=1, name="Video"),
        SubscriptionRow(price=5, frequency_months=0, name="Broken"),
    ])
    assert summary.count == 2
    assert summary.monthly == 25
    assert render_subscription_summary(summary) == ["Total monthly cost: $25.00", "Total yearly cost: $300.00"]
    assert "Broken" in caplog.text
