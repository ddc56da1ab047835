from .cache import ResultCache
from .repository import (
    InMemoryResultRepository,
    InMemoryTenderRepository,
    ResultRepository,
    TenderRepository,
)

__all__ = [
    "ResultCache",
    "InMemoryResultRepository",
    "InMemoryTenderRepository",
    "ResultRepository",
    "TenderRepository",
]
