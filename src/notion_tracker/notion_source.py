import logging
from datetime import datetime
from typing import Any, Dict, Iterator, List, Optional, Type, TypeVar

import dateparser
import pytz
import requests
from pydantic import BaseModel, ValidationError

from .errors import ConfigError, UpstreamFault
from .models import DeadlineRange, RawRow, SubscriptionRow
from .schemas import (
    ApplicationPage,
    Page,
    QueryResponse,
    SearchResponse,
    SubscriptionPage,
    TitleProperty,
)
from .settings import Settings

LOGGER = logging.getLogger(__name__)

API_BASE = "https://api.notion.com/v1"

# Notion accepts at most this many children per append call
MAX_APPEND_CHILDREN = 100

CYCLE_PROP = "Cycle"

Model = TypeVar("Model", bound=BaseModel)

def cycle_filter(cycle: str) -> Dict[str, Any]:
    return {"property": CYCLE_PROP, "select": {"equals": cycle}}

def not_empty_filter(rich_text_property: str) -> Dict[str, Any]:
    return {"and": [{"property": rich_text_property, "rich_text": {"is_not_empty": True}}]}

def _validate(model: Type[Model], data: Any, what: str) -> Model:
    try:
        return model.model_validate(data)
    except ValidationError as exc:
        raise UpstreamFault(f"{what} does not match the expected shape: {exc}") from exc

def _page_id(page: Any) -> str:
    return page.get("id", "<no id>") if isinstance(page, dict) else "<no id>"

def _title_text(properties: Dict[str, Any], name: str, page_id: str) -> Optional[str]:
    prop = properties.get(name)
    if prop is None:
        return None
    return _validate(TitleProperty, prop, f"Property {name!r} of page {page_id}").text

def _parse_date(value: str, tz, page_id: str) -> datetime:
    parsed = dateparser.parse(
        value,
        languages=["en"],
        settings={"TIMEZONE": tz.zone, "RETURN_AS_TIMEZONE_AWARE": True, "DATE_ORDER": "YMD"},
    )
    if parsed is None:
        raise UpstreamFault(f"Page {page_id} has an unreadable date: {value!r}")
    return parsed.astimezone(tz)

def page_to_raw_row(page: Dict[str, Any], company_property: str = "Company", tz=pytz.UTC) -> RawRow:
    """Flatten a Notion page from the Applications database into a RawRow."""
    parsed = _validate(ApplicationPage, page, f"Page {_page_id(page)}")
    props = parsed.properties

    deadline = None
    date = props.next_deadline.date
    if date is not None:
        deadline = DeadlineRange(
            start=_parse_date(date.start, tz, parsed.id),
            end=_parse_date(date.end, tz, parsed.id) if date.end else None,
        )

    return RawRow(
        id=parsed.id,
        created=_parse_date(parsed.created_time, tz, parsed.id),
        # an unset status comes back as null; the classifier rejects it
        status=props.status.status.name if props.status.status else "",
        company=_title_text(page["properties"], company_property, parsed.id),
        role=props.role.select.name if props.role.select else None,
        team=props.team.select.name if props.team.select else None,
        parent_ids=tuple(rel.id for rel in props.application.relation),
        deadline=deadline,
    )

def page_to_subscription_row(page: Dict[str, Any]) -> SubscriptionRow:
    parsed = _validate(SubscriptionPage, page, f"Subscription {_page_id(page)}")
    title = next(
        (name for name, prop in page["properties"].items() if isinstance(prop, dict) and prop.get("type") == "title"),
        None,
    )
    return SubscriptionRow(
        price=parsed.properties.price.number,
        frequency_months=parsed.properties.frequency.number,
        name=_title_text(page["properties"], title, parsed.id) if title else None,
    )

class NotionSource:
    """Paginated reads (and block appends) over the Notion databases we track."""

    def __init__(
        self,
        token: str,
        application_database_id: str,
        subscription_database_id: Optional[str] = None,
        api_version: str = "2022-06-28",
        page_size: int = 100,
        company_property: str = "Company",
        timeout: float = 30,
        timezone: str = "UTC",
        session=None,
    ):
        self.application_database_id = application_database_id
        self.subscription_database_id = subscription_database_id
        self.page_size = page_size
        self.company_property = company_property
        self.timeout = timeout
        self.tz = pytz.timezone(timezone)
        self.session = session or requests.Session()
        self._headers = {
            "Authorization": f"Bearer {token}",
            "Notion-Version": api_version,
            "Content-Type": "application/json",
        }

    @classmethod
    def from_settings(cls, cfg: Settings, session=None) -> "NotionSource":
        return cls(
            token=cfg.notion_token,
            application_database_id=cfg.notion["application_database_id"],
            subscription_database_id=cfg.notion.get("subscription_database_id"),
            api_version=cfg.notion["api_version"],
            page_size=cfg.notion["page_size"],
            company_property=cfg.notion["company_property"],
            timeout=cfg.notion["timeout"],
            timezone=cfg.app["timezone"],
            session=session,
        )

    def _request(self, method: str, path: str, payload: Optional[Dict[str, Any]] = None) -> Dict[str, Any]:
        url = f"{API_BASE}/{path}"
        try:
            resp = self.session.request(method, url, json=payload, headers=self._headers, timeout=self.timeout)
        except requests.RequestException as exc:
            raise UpstreamFault(f"Notion request failed: {exc}") from exc

        if not resp.ok:
            try:
                message = resp.json().get("message", "")
            except ValueError:
                message = ""
            raise UpstreamFault(f"Notion returned {resp.status_code}: {message}".rstrip(": "))

        try:
            return resp.json()
        except ValueError as exc:
            raise UpstreamFault(f"Notion returned a non-JSON body for {path}") from exc

    def iter_pages(self, database_id: str, query_filter: Optional[Dict[str, Any]] = None) -> Iterator[Dict[str, Any]]:
        cursor = None
        page_no = 0
        while True:
            payload: Dict[str, Any] = {"page_size": self.page_size}
            if query_filter:
                payload["filter"] = query_filter
            if cursor:
                payload["start_cursor"] = cursor
            data = _validate(
                QueryResponse,
                self._request("POST", f"databases/{database_id}/query", payload),
                f"Query response for {database_id}",
            )
            page_no += 1
            LOGGER.debug("Fetched page %d of %s (%d rows)", page_no, database_id, len(data.results))
            yield from data.results

            if not data.has_more:
                return
            if not data.next_cursor:
                raise UpstreamFault(f"Query response for {database_id} has has_more without next_cursor")
            cursor = data.next_cursor

    def iter_cycle_rows(self, cycle: str) -> Iterator[RawRow]:
        for page in self.iter_pages(self.application_database_id, query_filter=cycle_filter(cycle)):
            yield page_to_raw_row(page, self.company_property, self.tz)

    def iter_company_names(self) -> Iterator[str]:
        for page in self.iter_pages(self.application_database_id):
            parsed = _validate(Page, page, f"Page {_page_id(page)}")
            company = _title_text(parsed.properties, self.company_property, parsed.id)
            if company is None:
                continue
            yield company

    def iter_subscription_rows(self) -> Iterator[SubscriptionRow]:
        if not self.subscription_database_id:
            raise ConfigError("notion.subscription_database_id: required for the subscriptions command")
        for page in self.iter_pages(self.subscription_database_id):
            yield page_to_subscription_row(page)

    def find_database(self, query: str) -> str:
        """Id of the first database whose title matches `query`."""
        payload = {"query": query, "filter": {"property": "object", "value": "database"}}
        data = _validate(SearchResponse, self._request("POST", "search", payload), "Search response")
        ids = [result.get("id") for result in data.results if result.get("id")]
        if not ids:
            raise UpstreamFault(f"Could not find a {query!r} database")
        return ids[0]

    def get_page(self, page_id: str) -> Page:
        return _validate(Page, self._request("GET", f"pages/{page_id}"), f"Page {page_id}")

    def append_blocks(self, block_id: str, children: List[Dict[str, Any]]) -> None:
        for start in range(0, len(children), MAX_APPEND_CHILDREN):
            batch = children[start:start + MAX_APPEND_CHILDREN]
            self._request("PATCH", f"blocks/{block_id}/children", {"children": batch})
