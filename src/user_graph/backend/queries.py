"""REST backend lookups."""

from typing import Optional
from urllib.parse import quote

from user_graph.backend.http import RestBackend
from user_graph.errors import BackendNotFound, BackendUnavailable


def _segment(value: str) -> str:
    return quote(str(value), safe="")


class BackendQueries:
    """Point lookups against the REST backend."""

    # ==================== USER ====================

    @staticmethod
    async def get_user(user_id: str) -> Optional[dict]:
        """Get user by ID."""
        return await _get_record(f"/users/{_segment(user_id)}")

    # ==================== COMPANY ====================

    @staticmethod
    async def get_company(company_id: str) -> Optional[dict]:
        """Get company by ID."""
        return await _get_record(f"/companies/{_segment(company_id)}")

    @staticmethod
    async def get_company_users(company_id: str) -> list[dict]:
        """Get users of a company, in backend order."""
        path = f"/companies/{_segment(company_id)}/users"
        try:
            users = await RestBackend.get_json(path)
        except BackendNotFound:
            return []
        if not isinstance(users, list):
            raise BackendUnavailable(f"Expected a list from GET {path}", path)
        return users


async def _get_record(path: str) -> Optional[dict]:
    try:
        record = await RestBackend.get_json(path)
    except BackendNotFound:
        return None
    if not isinstance(record, dict):
        raise BackendUnavailable(f"Expected an object from GET {path}", path)
    return record
