"""
AdSet Duplicator - create one paused ad set cloned from the template.
"""

import logging
from typing import Any, Dict

import httpx

from ....services.exceptions import AdSetCreationError, MetaApiError
from ....services.meta_graph_client import MetaGraphClient
from ....services.models import AdSetConfig

logger = logging.getLogger(__name__)

DEFAULT_BILLING_EVENT = "IMPRESSIONS"
DEFAULT_OPTIMIZATION_GOAL = "LINK_CLICKS"

# Copied only when the source ad set has them
_OPTIONAL_FIELDS = (
    "targeting",
    "bid_amount",
    "bid_strategy",
    "daily_budget",
    "lifetime_budget",
    "promoted_object",
    "destination_type",
    "attribution_spec",
)


class AdSetDuplicator:
    """Clones ad-set configuration into a new ad set."""

    def __init__(self, graph: MetaGraphClient):
        self.graph = graph

    @staticmethod
    def build_create_request(config: AdSetConfig, new_name: str) -> Dict[str, Any]:
        """
        Build the sparse create request for the clone.

        Status is always PAUSED, whatever the source's status; a clone must
        never start spending on its own.
        """
        request: Dict[str, Any] = {
            "name": new_name,
            "campaign_id": config.campaign_id,
            "status": "PAUSED",
            "billing_event": config.billing_event or DEFAULT_BILLING_EVENT,
            "optimization_goal": config.optimization_goal or DEFAULT_OPTIMIZATION_GOAL,
        }
        for name in _OPTIONAL_FIELDS:
            value = getattr(config, name)
            if value:
                request[name] = value
        return request

    async def duplicate(self, ad_account_id: str, config: AdSetConfig, new_name: str) -> str:
        """
        Create the cloned ad set.

        Returns:
            New ad set id

        Raises:
            AdSetCreationError: upstream rejected the request
        """
        request = self.build_create_request(config, new_name)
        logger.info(
            f"Creating ad set '{new_name}' in {ad_account_id} "
            f"(campaign {config.campaign_id}, fields: {', '.join(sorted(request))})"
        )

        try:
            response = await self.graph.post_edge(ad_account_id, "adsets", request)
        except MetaApiError as e:
            raise AdSetCreationError(f"Failed to create ad set: {e.detail}") from e
        except httpx.HTTPError as e:
            raise AdSetCreationError(f"Failed to create ad set: {e}") from e

        ad_set_id = response.get("id")
        if not ad_set_id:
            raise AdSetCreationError(f"Ad set creation returned no id: {response}")

        logger.info(f"Created ad set {ad_set_id} ('{new_name}')")
        return ad_set_id
