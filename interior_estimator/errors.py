"""
Structural errors raised while building estimate documents.

Numeric input problems never raise: they are coerced to zero at the model
boundary. The errors below mean the data reaching the document builder is
inconsistent and the export must stop.
"""


class DocumentStructureError(ValueError):
    """Base class for fatal document-building errors."""


class UnsupportedItemTypeError(DocumentStructureError):
    """An item of a type the table builder does not know."""

    def __init__(self, item):
        self.item = item
        type_name = getattr(item, "type", type(item).__name__)
        super().__init__(f"Unknown item type for table structure: {type_name!r}")


class EmptyGroupError(DocumentStructureError):
    """A section group with no items reached the table builder."""

    def __init__(self, group: str = ""):
        self.group = group
        label = f" '{group}'" if group else ""
        super().__init__(f"No items to generate table structure for group{label}")


class NoCompletedPaymentsError(DocumentStructureError):
    """A consolidated receipt was requested with no completed payments."""
