"""
License query handlers.

Handlers for fetching one license by key and listing licenses.
"""

from core.domain.exceptions import LicenseNotFoundError
from licenses.application.dto.license_dto import LicenseDTO, LicenseListDTO
from licenses.application.queries.get_license import GetLicenseQuery
from licenses.application.queries.list_licenses import ListLicensesQuery
from licenses.ports.license_repository import LicenseRepository


class GetLicenseHandler:
    """Handler for GetLicenseQuery."""

    def __init__(self, license_repository: LicenseRepository):
        """Initialize handler with repositories."""
        self.license_repository = license_repository

    async def handle(self, query: GetLicenseQuery) -> LicenseDTO:
        """
        Handle get license query.

        Args:
            query: GetLicenseQuery

        Returns:
            LicenseDTO

        Raises:
            LicenseNotFoundError: If license not found
        """
        license = await self.license_repository.find_by_key(query.key)
        if not license:
            raise LicenseNotFoundError(f"License {query.key} not found")
        return LicenseDTO.from_entity(license)


class ListLicensesHandler:
    """Handler for ListLicensesQuery."""

    def __init__(self, license_repository: LicenseRepository):
        """Initialize handler with repositories."""
        self.license_repository = license_repository

    async def handle(self, query: ListLicensesQuery) -> LicenseListDTO:
        """
        Handle list licenses query.

        Args:
            query: ListLicensesQuery

        Returns:
            LicenseListDTO with one page of licenses
        """
        licenses, total = await self.license_repository.list(
            owner_id=query.owner_id, limit=query.limit, offset=query.offset
        )
        return LicenseListDTO(
            items=[LicenseDTO.from_entity(license) for license in licenses],
            total=total,
            page=query.page,
            limit=query.limit,
        )
