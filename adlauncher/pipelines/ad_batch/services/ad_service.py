"""
Ad Creator - create the ad that ties the new ad set to a creative.
"""

import logging
from typing import Any, Dict, Optional

import httpx

from ....services.exceptions import AdCreationError, MetaApiError
from ....services.meta_graph_client import MetaGraphClient

logger = logging.getLogger(__name__)


class AdCreator:
    """Creates paused (optionally scheduled) ads."""

    def __init__(self, graph: MetaGraphClient):
        self.graph = graph

    @staticmethod
    def build_payload(
        ad_set_id: str,
        creative_id: str,
        ad_name: str,
        scheduled_time: Optional[str] = None,
    ) -> Dict[str, Any]:
        """
        Ads are always created PAUSED. A scheduled time adds
        configured_status/effective_status on top; both are forwarded as-is.
        """
        payload: Dict[str, Any] = {
            "name": ad_name,
            "adset_id": ad_set_id,
            "creative": {"creative_id": creative_id},
            "status": "PAUSED",
        }
        if scheduled_time:
            payload["configured_status"] = "ACTIVE"
            payload["effective_status"] = "SCHEDULED"
        return payload

    async def create(
        self,
        ad_account_id: str,
        ad_set_id: str,
        creative_id: str,
        ad_name: str,
        scheduled_time: Optional[str] = None,
    ) -> str:
        """
        Returns:
            New ad id

        Raises:
            AdCreationError: upstream rejected the ad
        """
        payload = self.build_payload(ad_set_id, creative_id, ad_name, scheduled_time)
        if scheduled_time:
            logger.info(f"Creating ad '{ad_name}' scheduled for {scheduled_time}")
        else:
            logger.info(f"Creating ad '{ad_name}' in ad set {ad_set_id}")

        try:
            response = await self.graph.post_edge(ad_account_id, "ads", payload)
        except MetaApiError as e:
            raise AdCreationError(f"Failed to create ad: {e.detail}") from e
        except httpx.HTTPError as e:
            raise AdCreationError(f"Failed to create ad: {e}") from e

        ad_id = response.get("id")
        if not ad_id:
            raise AdCreationError(f"Ad creation returned no id: {response}")
        return ad_id
