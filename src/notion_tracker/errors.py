from typing import Optional

class NotionTrackerError(Exception):
    pass

class ConfigError(NotionTrackerError):
    pass

class UpstreamFault(NotionTrackerError):
    """The Notion API could not be reached or returned something we can't read."""

class ClassificationError(NotionTrackerError):
    """A single row that can't be turned into an Application or a Phase."""

    def __init__(self, message: str, row_id: Optional[str] = None):
        super().__init__(message)
        self.row_id = row_id

class InvalidStatus(ClassificationError):
    def __init__(self, label: str, row_id: Optional[str] = None):
        super().__init__(f"Invalid status: {label}", row_id)
        self.label = label

class MissingCompany(ClassificationError):
    def __init__(self, row_id: Optional[str] = None):
        super().__init__("Application has no company.", row_id)

class MissingRole(ClassificationError):
    def __init__(self, row_id: Optional[str] = None):
        super().__init__("Application has no role.", row_id)

class UnsupportedRichText(NotionTrackerError):
    """A rich-text item that can't be sent back to Notion as a block."""
