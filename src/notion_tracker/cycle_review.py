import logging
from typing import Dict, Iterable, List

from .classifier import classify
from .errors import ClassificationError
from .models import (
    NOT_HIRED,
    Application,
    ApplicationStatus,
    CycleReport,
    HiringOutcome,
    Phase,
    RawRow,
)

LOGGER = logging.getLogger(__name__)

def aggregate(rows: Iterable[RawRow]) -> CycleReport:
    """
    Fold the rows of one hiring cycle into a CycleReport.

    Rows are consumed one at a time in source order. Rows that fail
    classification are logged and skipped; anything raised by the source
    iterator itself propagates unchanged.

    When several rows are Signed the last one seen wins, both for the
    hiring outcome and for the end date.
    """
    hiring: HiringOutcome = NOT_HIRED
    companies = set()
    phase_counts: Dict[ApplicationStatus, int] = {}
    paths: Dict[str, List[Phase]] = {}
    total = 0
    start_date = None
    end_date = None
    skipped: List[ClassificationError] = []

    for raw in rows:
        try:
            row = classify(raw)
        except ClassificationError as exc:
            LOGGER.warning("Skipping row %s: %s", exc.row_id, exc)
            skipped.append(exc)
            continue

        phase_counts[row.status] = phase_counts.get(row.status, 0) + 1

        if isinstance(row, Phase):
            paths.setdefault(row.parent_id, []).append(row)
            if row.status is ApplicationStatus.SIGNED:
                end_date = row.date
            continue

        if row.status is ApplicationStatus.SIGNED:
            hiring = _hired_at(row)

        if start_date is None or row.created < start_date:
            start_date = row.created

        companies.add(row.company)
        total += 1

    LOGGER.debug("Aggregated %d applications, %d skipped rows", total, len(skipped))
    return CycleReport(
        hiring=hiring,
        companies=tuple(sorted(companies)),
        phase_counts=phase_counts,
        paths={parent: tuple(phases) for parent, phases in paths.items()},
        total=total,
        start_date=start_date,
        end_date=end_date,
        skipped=tuple(skipped),
    )

def _hired_at(app: Application) -> HiringOutcome:
    return HiringOutcome(hired=True, company=app.company, role=app.role, team=app.team)

def review_cycle(cycle: str, source) -> CycleReport:
    """Aggregate every row of `cycle` from a source exposing iter_cycle_rows()."""
    LOGGER.info("Reviewing cycle %r", cycle)
    return aggregate(source.iter_cycle_rows(cycle))

def is_empty(report: CycleReport) -> bool:
    """True when the source returned no rows at all, skipped ones included."""
    return report.total == 0 and not report.paths and not report.skipped
