"""
Page-based pagination shared by list queries.
"""

from dataclasses import dataclass

MAX_PAGE_SIZE = 1000
DEFAULT_PAGE_SIZE = 10


@dataclass
class PageQuery:
    """Base query with page/limit pagination (pages start at 1)."""

    page: int = 1
    limit: int = DEFAULT_PAGE_SIZE

    def __post_init__(self):
        """Clamp pagination to sane bounds."""
        self.page = max(1, self.page)
        if self.limit < 1:
            self.limit = DEFAULT_PAGE_SIZE
        self.limit = min(self.limit, MAX_PAGE_SIZE)

    @property
    def offset(self) -> int:
        return (self.page - 1) * self.limit
