"""
Audit log listing queries.
"""

import uuid
from dataclasses import dataclass
from typing import Optional

from licenses.application.queries.pagination import PageQuery


@dataclass
class ListCheckLogsQuery(PageQuery):
    """Query to list license check logs with optional filters."""

    license_key: Optional[str] = None
    product_id: Optional[uuid.UUID] = None
    product_group_id: Optional[uuid.UUID] = None
    status_code: Optional[int] = None


@dataclass
class ListAdminLogsQuery(PageQuery):
    """Query to list admin action logs, optionally for one action or owner."""

    action: Optional[str] = None
    owner_id: Optional[str] = None
