"""Infrastructure layer exports."""

from .repository import EntityStore, InMemoryEntityStore
from .sheets import (
    FetchResult,
    SheetClient,
    SheetFetched,
    SheetFetcher,
    SourceError,
    configure_sheet_client,
    get_sheet_client,
)

__all__ = [
    "EntityStore",
    "FetchResult",
    "InMemoryEntityStore",
    "SheetClient",
    "SheetFetched",
    "SheetFetcher",
    "SourceError",
    "configure_sheet_client",
    "get_sheet_client",
]
