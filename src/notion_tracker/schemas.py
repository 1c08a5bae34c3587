"""
Pydantic models for the parts of Notion API responses we read.

Only the fields we use are declared; everything else in a response is
ignored. Property names with spaces are mapped through aliases.
"""
from typing import Any, Dict, List, Literal, Optional

from pydantic import BaseModel, Field

class QueryResponse(BaseModel):
    results: List[Dict[str, Any]]
    has_more: bool = False
    next_cursor: Optional[str] = None

class SearchResponse(BaseModel):
    results: List[Dict[str, Any]] = []

class SelectOption(BaseModel):
    name: str

class SelectProperty(BaseModel):
    select: Optional[SelectOption] = None

class StatusProperty(BaseModel):
    status: Optional[SelectOption] = None

class RelationRef(BaseModel):
    id: str

class RelationProperty(BaseModel):
    relation: List[RelationRef] = []

class DateValue(BaseModel):
    start: str
    end: Optional[str] = None

class DateProperty(BaseModel):
    date: Optional[DateValue] = None

class TextSpan(BaseModel):
    plain_text: str = ""

class TitleProperty(BaseModel):
    title: List[TextSpan] = []

    @property
    def text(self) -> Optional[str]:
        return "".join(span.plain_text for span in self.title).strip() or None

class NumberProperty(BaseModel):
    number: float

class RichTextProperty(BaseModel):
    type: Literal["rich_text"]
    rich_text: List[Dict[str, Any]] = []

class ApplicationProperties(BaseModel):
    status: StatusProperty = Field(alias="Status")
    role: SelectProperty = Field(alias="Role")
    team: SelectProperty = Field(alias="Team")
    application: RelationProperty = Field(alias="Application")
    next_deadline: DateProperty = Field(alias="Next Deadline")

class ApplicationPage(BaseModel):
    """A page of the Applications database (applications and their phases)."""
    id: str
    created_time: str
    properties: ApplicationProperties

class SubscriptionProperties(BaseModel):
    price: NumberProperty = Field(alias="Price")
    frequency: NumberProperty = Field(alias="Frequency (Months)")

class SubscriptionPage(BaseModel):
    id: str
    properties: SubscriptionProperties

class Page(BaseModel):
    """Any page, properties left raw."""
    id: str
    properties: Dict[str, Any] = {}
