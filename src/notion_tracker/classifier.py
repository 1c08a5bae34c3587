from .errors import InvalidStatus, MissingCompany, MissingRole
from .models import Application, ApplicationRow, ApplicationStatus, Phase, RawRow

def classify(raw: RawRow) -> ApplicationRow:
    """Turn a raw Applications row into an Application or a Phase.

    Rows linked to another application through the "Application" relation
    are phases of that application; everything else is an application in
    its own right and must name a company and a role.

    Raises InvalidStatus, MissingCompany or MissingRole.
    """
    status = ApplicationStatus.parse(raw.status)
    if status is None:
        raise InvalidStatus(raw.status, row_id=raw.id)

    if raw.parent_ids:
        date = None
        if raw.deadline is not None:
            date = raw.deadline.end or raw.deadline.start or None
        return Phase(parent_id=raw.parent_ids[0], status=status, date=date)

    if not raw.company:
        raise MissingCompany(row_id=raw.id)
    if raw.role is None:
        raise MissingRole(row_id=raw.id)

    return Application(
        id=raw.id,
        status=status,
        company=raw.company,
        role=raw.role,
        created=raw.created,
        team=raw.team or None,
    )
