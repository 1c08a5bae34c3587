from datetime import datetime

import pytest
import pytz

from src.notion_tracker.models import DeadlineRange, RawRow

def _dt(day: str) -> datetime:
    return pytz.UTC.localize(datetime.strptime(day, "%Y-%m-%d"))

@pytest.fixture
def dt():
    return _dt

@pytest.fixture
def app_row():
    def make(id="app-1", status="Applied", company="Acme", role="Engineer", team=None, created="2023-01-01"):
        return RawRow(id=id, created=_dt(created), status=status, company=company, role=role, team=team)
    return make

@pytest.fixture
def phase_row():
    def make(parent="app-1", status="OA", id="phase-1", start=None, end=None, created="2023-02-01"):
        deadline = DeadlineRange(start=_dt(start), end=_dt(end) if end else None) if start else None
        return RawRow(id=id, created=_dt(created), status=status, parent_ids=(parent,), deadline=deadline)
    return make

@pytest.fixture
def notion_page():
    def make(id="page-1", status="Applied", company="Acme", role="Engineer", team=None,
             parents=(), deadline=None, created="2023-01-01T00:00:00.000Z"):
        return {
            "object": "page",
            "id": id,
            "created_time": created,
            "properties": {
                "Company": {"type": "title", "title": [{"plain_text": company}] if company else []},
                "Status": {"type": "status", "status": {"name": status} if status else None},
                "Role": {"type": "select", "select": {"name": role} if role else None},
                "Team": {"type": "select", "select": {"name": team} if team else None},
                "Application": {"type": "relation", "relation": [{"id": p} for p in parents]},
                "Next Deadline": {"type": "date", "date": deadline},
                "Cycle": {"type": "select", "select": {"name": "Post Grad 2022-2023"}},
            },
        }
    return make
