"""
Audit log port (interface).

Check requests and administrative actions each produce one fixed-shape
log entry. Writers are fire-and-forget: a failed write never changes
the response of the request that produced it.
"""
import uuid
from abc import ABC, abstractmethod
from dataclasses import asdict, dataclass, field
from typing import Any, Dict, List, Optional, Tuple

from core.domain.value_objects import AdminAction


@dataclass(frozen=True)
class LicenseCheckLogEntry:
    """One check request and its outcome."""

    license_key: str
    status_code: int
    response_payload: Dict[str, Any]
    request_payload: Dict[str, Any] = field(default_factory=dict)
    license_id: Optional[uuid.UUID] = None
    product_id: Optional[uuid.UUID] = None
    ip_address: Optional[str] = None
    user_agent: str = ""

    def to_payload(self) -> Dict[str, Any]:
        """Serialize to a JSON-compatible dict."""
        payload = asdict(self)
        payload["license_id"] = str(self.license_id) if self.license_id else None
        payload["product_id"] = str(self.product_id) if self.product_id else None
        return payload


@dataclass(frozen=True)
class AdminLogEntry:
    """One administrative action on a license."""

    action: AdminAction
    entity_id: str
    details: Dict[str, Any] = field(default_factory=dict)
    entity_type: str = "LICENSE"
    actor: str = "admin"
    ip_address: Optional[str] = None
    owner_id: Optional[str] = None

    def to_payload(self) -> Dict[str, Any]:
        """Serialize to a JSON-compatible dict."""
        payload = asdict(self)
        payload["action"] = self.action.value
        return payload


class AuditLogPort(ABC):
    """Abstract sink for audit log entries."""

    @abstractmethod
    async def record_check(self, entry: LicenseCheckLogEntry) -> None:
        """
        Record a check request.

        Args:
            entry: LicenseCheckLogEntry to record
        """
        pass

    @abstractmethod
    async def record_admin_action(self, entry: AdminLogEntry) -> None:
        """
        Record an administrative action.

        Args:
            entry: AdminLogEntry to record
        """
        pass


class AuditLogReader(ABC):
    """Abstract read side of the audit logs."""

    @abstractmethod
    async def list_checks(
        self,
        license_key: Optional[str] = None,
        product_id: Optional[uuid.UUID] = None,
        product_group_id: Optional[uuid.UUID] = None,
        status_code: Optional[int] = None,
        limit: int = 100,
        offset: int = 0,
    ) -> Tuple[List[Dict[str, Any]], int]:
        """List check log records matching the filters, newest first, with the total count."""
        pass

    @abstractmethod
    async def list_admin_actions(
        self,
        action: Optional[str] = None,
        owner_id: Optional[str] = None,
        limit: int = 100,
        offset: int = 0,
    ) -> Tuple[List[Dict[str, Any]], int]:
        """List admin log records, newest first, with the total count."""
        pass
