"""
Template Resolver - read the template ad and the ad set it lives in.

The template ad supplies the ad account, the Facebook page (from its
creative's object_story_spec) and the ad-set settings that every new
batch is cloned from. Any failure here is fatal to the batch, and happens
before anything is written upstream.
"""

import logging
from typing import Any, Dict, Optional

import httpx
from pydantic import ValidationError

from ....services.exceptions import MetaApiError, TemplateResolutionError
from ....services.meta_graph_client import MetaGraphClient, normalize_account_id
from ....services.models import AdSetConfig, TemplateContext, TemplateCopy

logger = logging.getLogger(__name__)


class TemplateResolver:
    """Reads template ads and their ad sets."""

    AD_FIELDS = [
        "id",
        "adset_id",
        "account_id",
        "creative{id,object_story_spec,asset_feed_spec}",
    ]

    AD_SET_FIELDS = [
        "id",
        "campaign_id",
        "targeting",
        "billing_event",
        "optimization_goal",
        "bid_amount",
        "bid_strategy",
        "daily_budget",
        "lifetime_budget",
        "promoted_object",
        "destination_type",
        "attribution_spec",
        "start_time",
        "end_time",
    ]

    def __init__(self, graph: MetaGraphClient):
        self.graph = graph

    async def _read(self, object_id: str, fields, what: str) -> Dict[str, Any]:
        try:
            return await self.graph.get_object(object_id, fields)
        except MetaApiError as e:
            raise TemplateResolutionError(f"Failed to read {what} {object_id}: {e.detail}") from e
        except httpx.HTTPError as e:
            raise TemplateResolutionError(f"Failed to read {what} {object_id}: {e}") from e

    async def resolve(self, template_ad_id: str) -> TemplateContext:
        """
        Resolve a template ad into everything the batch needs.

        Args:
            template_ad_id: Ad id of the template

        Returns:
            TemplateContext with account id, page id, creative spec and
            the source ad-set configuration

        Raises:
            TemplateResolutionError: ad/ad set unreadable, or no page id
        """
        logger.info(f"Resolving template ad {template_ad_id}")

        ad = await self._read(template_ad_id, self.AD_FIELDS, "template ad")

        creative = ad.get("creative") or {}
        story_spec = creative.get("object_story_spec") or {}
        page_id = story_spec.get("page_id")
        if not page_id:
            raise TemplateResolutionError("Could not determine page ID from template ad")

        ad_set_id = ad.get("adset_id")
        account_id = ad.get("account_id")
        if not ad_set_id or not account_id:
            raise TemplateResolutionError(
                f"Template ad {template_ad_id} is missing adset_id or account_id"
            )

        ad_set = await self._read(ad_set_id, self.AD_SET_FIELDS, "template ad set")
        try:
            config = AdSetConfig.model_validate(ad_set)
        except ValidationError as e:
            raise TemplateResolutionError(
                f"Template ad set {ad_set_id} has an unexpected shape: {e}"
            ) from e

        context = TemplateContext(
            source_ad_id=template_ad_id,
            source_ad_set_id=ad_set_id,
            ad_account_id=normalize_account_id(account_id),
            page_id=str(page_id),
            creative_spec={
                "object_story_spec": story_spec,
                "asset_feed_spec": creative.get("asset_feed_spec"),
            },
            ad_set_config=config,
        )
        logger.info(
            f"Template resolved: account={context.ad_account_id}, page={context.page_id}, "
            f"ad_set={ad_set_id}, campaign={config.campaign_id}"
        )
        return context

    @staticmethod
    def extract_copy(creative_spec: Optional[Dict[str, Any]]) -> TemplateCopy:
        """
        Pull primary text, headline and URL out of a template creative.

        link_data wins; asset_feed_spec (dynamic creative) is the fallback.
        """
        if not creative_spec:
            return TemplateCopy()

        story_spec = creative_spec.get("object_story_spec") or {}
        link_data = story_spec.get("link_data")
        if link_data:
            return TemplateCopy(
                primary_text=link_data.get("message") or "",
                headline=link_data.get("name") or link_data.get("caption") or "",
                url=link_data.get("link") or "",
            )

        feed = creative_spec.get("asset_feed_spec")
        if feed:
            def first(key: str, attr: str) -> str:
                entries = feed.get(key) or []
                return (entries[0].get(attr) or "") if entries else ""

            return TemplateCopy(
                primary_text=first("bodies", "text"),
                headline=first("titles", "text"),
                url=first("link_urls", "website_url"),
            )

        return TemplateCopy()
