"""
Copy the rich-text "Notes" property of each page into the page body.

Notion returns rich text in response form; appending it as blocks needs the
request form, and a property holds one run of text where the body wants one
paragraph block per blank-line-separated chunk.
"""
import logging
from dataclasses import dataclass, field
from functools import reduce
from typing import Any, Dict, Iterable, List

from pydantic import ValidationError

from .errors import UnsupportedRichText, UpstreamFault
from .notion_source import not_empty_filter
from .schemas import Page, RichTextProperty

LOGGER = logging.getLogger(__name__)

PARAGRAPH_BREAK = "\n\n"
MENTION_TYPES = ("database", "date", "page", "user")
UNSUPPORTED_MENTIONS = ("link_preview", "template_mention")

RichText = Dict[str, Any]
Block = Dict[str, Any]

@dataclass
class MigrationResult:
    migrated: int = 0
    failed: List[str] = field(default_factory=list)

def mention_to_request(mention: Dict[str, Any]) -> Dict[str, Any]:
    kind = mention.get("type")
    if kind in MENTION_TYPES:
        return {kind: mention.get(kind)}
    if kind in UNSUPPORTED_MENTIONS:
        raise UnsupportedRichText(f"Unsupported mention type: {kind}")
    raise UnsupportedRichText(f"Unrecognized mention type: {kind}")

def rich_text_to_request(item: RichText) -> RichText:
    kind = item.get("type")
    if kind in ("text", "equation"):
        return dict(item)
    if kind == "mention":
        return {**item, "mention": mention_to_request(item.get("mention") or {})}
    raise UnsupportedRichText(f"Unrecognized rich text type: {kind}")

def paragraph(rich_text: List[RichText]) -> Block:
    return {"type": "paragraph", "paragraph": {"rich_text": rich_text}}

def split_paragraphs(blocks: List[Block], item: RichText) -> List[Block]:
    """
    Reducer: add one rich-text item to a list of paragraph blocks.

    Non-text items and text without a blank line join the last block.
    Text containing blank lines is split there: the first chunk joins the
    last block and every later chunk starts a block of its own, keeping the
    item's annotations. Annotated spans never start a block by themselves.
    """
    done = blocks[:-1]
    current = list(blocks[-1]["paragraph"]["rich_text"]) if blocks else []

    if item.get("type") != "text":
        return done + [paragraph(current + [item])]

    content = (item.get("text") or {}).get("content")
    if content is None:
        raise UnsupportedRichText("Text item has no content")

    first, *rest = content.split(PARAGRAPH_BREAK)
    head = {**item, "text": {**item["text"], "content": first}}
    return done + [paragraph(current + [head])] + [
        paragraph([{**item, "text": {"content": chunk}}]) for chunk in rest
    ]

def notes_to_blocks(rich_text: Iterable[RichText]) -> List[Block]:
    return reduce(split_paragraphs, (rich_text_to_request(item) for item in rich_text), [])

def page_notes_blocks(page: Page, notes_property: str = "Notes") -> List[Block]:
    try:
        notes = RichTextProperty.model_validate(page.properties.get(notes_property))
    except ValidationError as exc:
        raise UpstreamFault(f"Page {page.id}: expecting rich text in {notes_property!r}") from exc
    return notes_to_blocks(notes.rich_text)

def migrate_notes(source, database_id: str, notes_property: str = "Notes", dry_run: bool = False) -> MigrationResult:
    """
    Append the notes of every page with non-empty notes to that page's body.

    A page that fails is logged and counted; the remaining pages are still
    migrated. Failures of the database query itself propagate.
    """
    result = MigrationResult()
    for row in source.iter_pages(database_id, query_filter=not_empty_filter(notes_property)):
        page_id = row.get("id", "<no id>")
        try:
            blocks = page_notes_blocks(source.get_page(page_id), notes_property)
            if dry_run:
                print(f"[DRY-RUN] Would append {len(blocks)} blocks to page {page_id}")
            else:
                source.append_blocks(page_id, blocks)
        except (UpstreamFault, UnsupportedRichText) as exc:
            LOGGER.error("Could not migrate notes of page %s: %s", page_id, exc)
            result.failed.append(page_id)
            continue
        result.migrated += 1
        LOGGER.debug("Migrated notes of page %s (%d blocks)", page_id, len(blocks))
    return result
