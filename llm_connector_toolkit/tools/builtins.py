"""Collection of built-in tools available to the connector."""

from __future__ import annotations

import logging
from typing import Any, Dict, Optional

import httpx

from ..exceptions import ToolError

logger = logging.getLogger(__name__)

APOLLO_PEOPLE_SEARCH_URL = "https://api.apollo.io/v1/mixed_people/search"
APOLLO_TIMEOUT_SECONDS = 30.0


def build_apollo_query(
    organizationDomains: Optional[str] = None,  # noqa: N803
    locations: Optional[str] = None,
    titles: Optional[str] = None,
    limit: Optional[int] = None,
) -> Dict[str, Any]:
    """Translate tool arguments into an Apollo people-search body, skipping empty ones."""
    query: Dict[str, Any] = {}
    if organizationDomains:
        query["q_organization_domains"] = organizationDomains
    if locations:
        query["person_locations"] = [locations]
    if titles:
        query["person_titles"] = [titles]
    if limit:
        query["per_page"] = limit
    return query


async def search_people_using_apollo(
    apiKey: str,  # noqa: N803
    organizationDomains: Optional[str] = None,  # noqa: N803
    locations: Optional[str] = None,
    titles: Optional[str] = None,
    limit: Optional[int] = None,
    http_client: Optional[httpx.AsyncClient] = None,
) -> Any:
    """Search people through the Apollo API and return the decoded JSON body.

    ``apiKey`` is always filled in by the dispatcher from trusted settings.
    Transport failures and non-2xx answers raise ``ToolError``.
    """
    query = build_apollo_query(organizationDomains, locations, titles, limit)
    headers = {
        "Content-Type": "application/json",
        "Cache-Control": "no-cache",
        "X-Api-Key": apiKey,
    }
    logger.info("Searching people using Apollo API with query: %s", query)

    try:
        if http_client is not None:
            response = await http_client.post(
                APOLLO_PEOPLE_SEARCH_URL, headers=headers, json=query
            )
        else:
            async with httpx.AsyncClient(timeout=APOLLO_TIMEOUT_SECONDS) as client:
                response = await client.post(
                    APOLLO_PEOPLE_SEARCH_URL, headers=headers, json=query
                )
    except httpx.HTTPError as e:
        logger.error("Apollo API request failed: %s", e)
        raise ToolError(f"Apollo API request failed: {e}") from e

    if response.status_code >= 400:
        logger.error(
            "Apollo API returned status %s: %s", response.status_code, response.text
        )
        raise ToolError(
            f"Apollo API request failed with status code {response.status_code}"
        )

    try:
        return response.json()
    except ValueError as e:
        raise ToolError(f"Apollo API returned a non-JSON body: {e}") from e
