"""GraphQL resolvers."""

from typing import Any, Optional

from user_graph.backend import BackendQueries


async def user(parent: None, args: dict[str, Any]) -> Optional[dict]:
    """Get user by ID.

    Example:
    ```graphql
    query {
        user(id: "23") {
            firstName
            company { name }
        }
    }
    ```
    """
    return await BackendQueries.get_user(args["id"])


async def company(parent: None, args: dict[str, Any]) -> Optional[dict]:
    """Get company by ID."""
    return await BackendQueries.get_company(args["id"])


async def user_company(parent: dict, args: dict[str, Any]) -> Optional[dict]:
    """Company the user works for, via its ``companyId``."""
    company_id = parent.get("companyId")
    if company_id is None:
        return None
    return await BackendQueries.get_company(company_id)


async def company_users(parent: dict, args: dict[str, Any]) -> list[dict]:
    """Users working for the company, in backend order.

    Example:
    ```graphql
    query {
        company(id: "1") {
            name
            users { firstName age }
        }
    }
    ```
    """
    return await BackendQueries.get_company_users(parent["id"])
