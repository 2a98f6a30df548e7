"""Component name → CachetHQ id resolution."""

from __future__ import annotations

import logging

from bridge.cachet.client import IncidentClient

logger = logging.getLogger("bridge.cachet")


class ComponentResolver:
    """Resolves component names through an IncidentClient's listing and search calls."""

    def __init__(self, client: IncidentClient) -> None:
        self._client = client

    async def component_map(self) -> dict[str, int]:
        components = await self._client.list_components()
        logger.debug("Resolved %d components: %s", len(components), sorted(components))
        return components

    async def resolve(self, name: str) -> int:
        return await self._client.search_component(name)
