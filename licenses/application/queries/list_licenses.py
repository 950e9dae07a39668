"""
ListLicensesQuery.

Query to list licenses, optionally for one owner.
"""

from dataclasses import dataclass
from typing import Optional

from licenses.application.queries.pagination import PageQuery


@dataclass
class ListLicensesQuery(PageQuery):
    """Query to list licenses."""

    owner_id: Optional[str] = None
