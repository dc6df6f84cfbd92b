"""Error types raised while collecting and assembling catalogs."""


class CatalogError(Exception):
    """Base class for catalog build errors."""


class SourceUnavailable(CatalogError):
    """A vendor catalog could not be fetched or extracted.

    The vendor is skipped for this run; other sources continue.
    """

    def __init__(self, source: str, reason: str):
        super().__init__(f"{source}: {reason}")
        self.source = source
        self.reason = reason


class MalformedInput(CatalogError):
    """A vendor catalog parsed but is missing required structure."""

    def __init__(self, source: str, reason: str):
        super().__init__(f"{source}: {reason}")
        self.source = source
        self.reason = reason


class ThresholdNotMet(CatalogError):
    """Fewer items were produced than the configured minimum."""

    def __init__(self, label: str, count: int, minimum: int):
        super().__init__(
            f"{label}: {count} items collected, expected at least {minimum}"
        )
        self.label = label
        self.count = count
        self.minimum = minimum
