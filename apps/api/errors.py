class DocuProError(Exception):
    """Base class for errors raised by the document engine."""


class StorageUnavailable(DocuProError):
    """
    The backing store could not be reached or the statement failed.

    Raised by repository helpers; callers abort the current operation and
    report the failure upward. Nothing in this package retries.
    """


class InvalidLineItem(DocuProError):
    """A line item that cannot take part in a totals computation."""

    def __init__(self, index: int, field: str, message: str):
        self.index = index
        self.field = field
        super().__init__(f"lines[{index}].{field}: {message}")


class InvalidTotalsPolicy(DocuProError):
    """Tax rate or discount percentage outside its accepted range."""
