"""
Plain-text rendering of cycle reports and cost summaries.
"""

from typing import List

from .models import ApplicationStatus, CycleReport, SubscriptionSummary

def format_currency(amount: float) -> str:
    sign = "-" if amount < 0 else ""
    return f"{sign}${abs(amount):,.2f}"

def render_cycle_report(report: CycleReport, cycle: str) -> List[str]:
    """
    Build the printable lines for a cycle report.

    Status counts follow the order of ApplicationStatus and leave out
    statuses that never occurred.
    """
    lines = [f"[CYCLE] {cycle}"]

    hiring = report.hiring
    if hiring.hired:
        team = f" ({hiring.team})" if hiring.team else ""
        lines.append(f"Hired: {hiring.company} | {hiring.role}{team}")
    else:
        lines.append("Hired: no")

    lines.append(f"Applications: {report.total}")
    lines.append(f"Companies ({len(report.companies)}): {', '.join(report.companies)}")

    lines.append("Statuses:")
    for status in ApplicationStatus:
        count = report.phase_counts.get(status, 0)
        if count:
            lines.append(f"  {status.value}: {count}")

    lines.append("Paths:")
    for parent_id, phases in report.paths.items():
        steps = " -> ".join(phase.status.value for phase in phases)
        lines.append(f"  {parent_id}: {steps}")

    start = report.start_date.date().isoformat() if report.start_date else "-"
    end = report.end_date.date().isoformat() if report.end_date else "-"
    lines.append(f"Start: {start} | End: {end}")

    if report.skipped:
        lines.append(f"Skipped rows: {len(report.skipped)}")
    return lines

def render_subscription_summary(summary: SubscriptionSummary) -> List[str]:
    return [
        f"Total monthly cost: {format_currency(summary.monthly)}",
        f"Total yearly cost: {format_currency(summary.yearly)}",
    ]
