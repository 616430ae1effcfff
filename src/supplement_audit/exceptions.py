"""
Exceptions raised by the Supplement Audit Engine.
"""


class SupplementAuditError(Exception):
    """Base class for all supplement audit errors."""


class LayoutOverflowError(SupplementAuditError):
    """
    A section row cannot fit on any page with the configured geometry.

    Raised by the layout engine instead of truncating content. Callers are
    expected to catch it and report that the document could not be generated.
    """

    def __init__(
        self,
        section_id: str,
        row_index: int,
        required_height: float,
        available_height: float,
    ) -> None:
        self.section_id = section_id
        self.row_index = row_index
        self.required_height = required_height
        self.available_height = available_height
        super().__init__(
            f"Section '{section_id}' row {row_index} needs {required_height:.1f}pt "
            f"but only {available_height:.1f}pt is printable per page"
        )
