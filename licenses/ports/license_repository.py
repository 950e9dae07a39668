"""
License repository port (interface).

This defines the contract for license persistence operations.
Implementations are in the infrastructure layer.
"""
from abc import ABC, abstractmethod
from typing import List, Optional, Tuple

from licenses.domain.license import License


class LicenseRepository(ABC):
    """
    Abstract repository for License entities.

    This is a port in hexagonal architecture - it defines
    what operations are available, not how they're implemented.
    """

    @abstractmethod
    async def create(self, license: License) -> License:
        """
        Persist a new license.

        Feature codes and release versions are linked only when they
        belong to the license's product, its group, or are global;
        unknown codes are dropped.

        Args:
            license: License entity to create

        Returns:
            Created license with the confirmed features and releases

        Raises:
            DuplicateLicenseKeyError: If the key already exists
        """
        pass

    @abstractmethod
    async def update(self, license: License) -> License:
        """
        Persist changes to an existing license.

        Args:
            license: License entity with updated fields

        Returns:
            Updated license with the confirmed features and releases

        Raises:
            LicenseNotFoundError: If no license has this key
        """
        pass

    @abstractmethod
    async def find_by_key(self, key: str) -> Optional[License]:
        """
        Find a license by its key.

        Args:
            key: License key string

        Returns:
            License entity or None if not found
        """
        pass

    @abstractmethod
    async def delete(self, key: str) -> bool:
        """
        Delete a license.

        Args:
            key: License key string

        Returns:
            True if a license was deleted
        """
        pass

    @abstractmethod
    async def admit_ip(self, key: str, ip: str, limit: int) -> bool:
        """
        Append ip to allowed_ips if the list holds fewer than limit entries.

        The length check and the append happen atomically, so concurrent
        calls never grow the list past limit.

        Args:
            key: License key string
            ip: Normalized caller IP
            limit: Maximum number of allowed IPs

        Returns:
            True if the IP was appended or already present, False if the
            list is full
        """
        pass

    @abstractmethod
    async def list(
        self, owner_id: Optional[str] = None, limit: int = 100, offset: int = 0
    ) -> Tuple[List[License], int]:
        """
        List licenses, newest first.

        Args:
            owner_id: Optional owner filter
            limit: Page size
            offset: Number of licenses to skip

        Returns:
            Tuple of (licenses, total_count)
        """
        pass
