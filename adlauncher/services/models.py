"""
Pydantic models for AdLauncher services.

These models provide type-safe, validated data structures for:
- Creative media (MediaAsset) and the ad groups built from them (AdGroup)
- The template being cloned (TemplateContext, AdSetConfig, TemplateCopy)
- The batch request/response contract (BatchCreateRequest, BatchCreateResult)

All models use Pydantic v2. Request/response models accept and emit the
camelCase field names used by the web client.
"""

import mimetypes
from enum import Enum
from typing import List, Optional, Dict, Any

from pydantic import BaseModel, ConfigDict, Field, model_validator
from pydantic.alias_generators import to_camel


# ============================================================================
# Enums
# ============================================================================

class AspectRatio(str, Enum):
    """Placement aspect ratio inferred from a filename."""
    VERTICAL = "9x16"
    PORTRAIT = "4x5"
    SQUARE = "1x1"
    LANDSCAPE = "16x9"
    OTHER = "other"


class MediaKind(str, Enum):
    IMAGE = "image"
    VIDEO = "video"


def guess_media_kind(filename: str) -> Optional[MediaKind]:
    """image/* -> IMAGE, video/* -> VIDEO, anything else -> None."""
    mime_type, _ = mimetypes.guess_type(filename)
    if not mime_type:
        return None
    if mime_type.startswith("video/"):
        return MediaKind.VIDEO
    if mime_type.startswith("image/"):
        return MediaKind.IMAGE
    return None


class GroupStatus(str, Enum):
    """Lifecycle of an ad group during a batch run."""
    PENDING = "pending"
    IN_PROGRESS = "in_progress"
    SUCCESS = "success"
    FAILED = "failed"


class _CamelModel(BaseModel):
    """Accepts both snake_case and camelCase keys; dumps camelCase with by_alias."""
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


# ============================================================================
# Media & Ad Groups
# ============================================================================

class MediaAsset(_CamelModel):
    """
    A single creative file destined for an ad.

    Either `payload` (base64 file content) or `resolved_ref` (image hash or
    video id already known to the platform) must be present for the asset
    to be usable; assets with neither are skipped at upload time.
    """
    filename: str = Field(..., description="Original file name, e.g. 'summer_9x16.mp4'")
    kind: MediaKind = Field(..., description="Inferred from the filename extension when omitted")
    aspect_ratio: AspectRatio = Field(default=AspectRatio.OTHER)
    payload: Optional[str] = Field(None, description="Base64-encoded file content")
    resolved_ref: Optional[str] = Field(None, description="Image hash or video id")
    thumbnail_url: Optional[str] = Field(
        None,
        alias="resolvedThumbnailUrl",
        description="Platform-provided thumbnail (video only)",
    )

    @model_validator(mode="before")
    @classmethod
    def _infer_kind(cls, data: Any) -> Any:
        if isinstance(data, dict) and data.get("kind") is None and data.get("filename"):
            kind = guess_media_kind(data["filename"])
            if kind is not None:
                data = {**data, "kind": kind}
        return data

    @property
    def is_video(self) -> bool:
        return self.kind == MediaKind.VIDEO


# Wire name for a media entry in a batch request
MediaInput = MediaAsset


class AdGroup(BaseModel):
    """Media files sharing a filename prefix; becomes exactly one ad."""
    group_key: str
    media: List[MediaAsset] = Field(default_factory=list)
    ad_name: str
    primary_text: str = ""
    headline: str = ""
    url: str = ""
    status: GroupStatus = GroupStatus.PENDING
    error: Optional[str] = None

    def to_input(self) -> "AdGroupInput":
        return AdGroupInput(
            ad_name=self.ad_name,
            primary_text=self.primary_text,
            headline=self.headline,
            url=self.url,
            media=list(self.media),
        )


# ============================================================================
# Template
# ============================================================================

class AdSetConfig(BaseModel):
    """
    Source ad-set settings as read from the platform.

    Absent upstream fields stay None so the duplicator can build a sparse
    create request. start_time/end_time are informational only.
    """
    id: Optional[str] = None
    campaign_id: str
    targeting: Optional[Dict[str, Any]] = None
    billing_event: Optional[str] = None
    optimization_goal: Optional[str] = None
    bid_amount: Optional[int] = None
    bid_strategy: Optional[str] = None
    daily_budget: Optional[str] = None
    lifetime_budget: Optional[str] = None
    promoted_object: Optional[Dict[str, Any]] = None
    destination_type: Optional[str] = None
    attribution_spec: Optional[List[Dict[str, Any]]] = None
    start_time: Optional[str] = None
    end_time: Optional[str] = None


class TemplateContext(BaseModel):
    """Everything read from the template ad that the batch needs."""
    source_ad_id: str
    source_ad_set_id: str
    ad_account_id: str = Field(..., description="act_-prefixed account id")
    page_id: str
    creative_spec: Dict[str, Any] = Field(default_factory=dict)
    ad_set_config: AdSetConfig


class TemplateCopy(BaseModel):
    """Ad copy lifted from a template creative, used as group defaults."""
    primary_text: str = ""
    headline: str = ""
    url: str = ""


# ============================================================================
# Batch contract
# ============================================================================

class AdGroupInput(_CamelModel):
    """One ad to create. An empty media list fails this ad only."""
    ad_name: str
    primary_text: str = ""
    headline: str = ""
    url: str = ""
    media: List[MediaAsset] = Field(default_factory=list)

    def to_group(self) -> AdGroup:
        return AdGroup(
            group_key=self.ad_name,
            media=list(self.media),
            ad_name=self.ad_name,
            primary_text=self.primary_text,
            headline=self.headline,
            url=self.url,
        )


class BatchCreateRequest(_CamelModel):
    access_token: str
    template_ad_id: str
    new_ad_set_name: str
    scheduled_time: Optional[str] = Field(
        None, description="ISO-8601 time; marks ads as scheduled when present"
    )
    ads: List[AdGroupInput] = Field(default_factory=list)


class AdResult(_CamelModel):
    ad_name: str
    success: bool
    ad_id: Optional[str] = None
    error: Optional[str] = None


class BatchCreateResult(_CamelModel):
    ad_set_id: str
    ad_set_name: str
    results: List[AdResult] = Field(default_factory=list)

    @property
    def success_count(self) -> int:
        return sum(1 for r in self.results if r.success)

    @property
    def failure_count(self) -> int:
        return sum(1 for r in self.results if not r.success)
