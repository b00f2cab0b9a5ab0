"""
Ad Batch Dependencies - typed dependency injection for pipeline nodes.

Provides the Graph API client, the five step services and the step
observer. Tests build this with mocks; production code uses create().
"""

import logging
from typing import Any, Optional

from pydantic import BaseModel, ConfigDict, Field

from ...services.meta_graph_client import MetaGraphClient
from .observer import LoggingObserver
from .services.template_service import TemplateResolver
from .services.ad_set_service import AdSetDuplicator
from .services.media_service import MediaResolver
from .services.creative_service import CreativeBuilder
from .services.ad_service import AdCreator

logger = logging.getLogger(__name__)


class AdBatchDependencies(BaseModel):
    model_config = ConfigDict(arbitrary_types_allowed=True)

    graph: MetaGraphClient
    templates: TemplateResolver
    ad_sets: AdSetDuplicator
    media: MediaResolver
    creatives: CreativeBuilder
    ads: AdCreator
    # Anything with record(StepEvent)
    observer: Any = Field(default_factory=LoggingObserver)

    @classmethod
    def create(
        cls,
        access_token: Optional[str] = None,
        observer: Optional[Any] = None,
        graph: Optional[MetaGraphClient] = None,
    ) -> "AdBatchDependencies":
        graph = graph or MetaGraphClient(access_token=access_token)
        logger.info(f"Ad batch dependencies initialized (graph: {graph.base_url})")

        return cls(
            graph=graph,
            templates=TemplateResolver(graph),
            ad_sets=AdSetDuplicator(graph),
            media=MediaResolver(graph),
            creatives=CreativeBuilder(graph),
            ads=AdCreator(graph),
            observer=observer or LoggingObserver(),
        )

    async def aclose(self) -> None:
        await self.graph.aclose()
