"""
Services layer - Meta Graph API access, filename grouping and shared models.
"""

from .exceptions import (
    AdLauncherError,
    MetaApiError,
    BatchFatalError,
    TemplateResolutionError,
    AdSetCreationError,
    GroupError,
    MediaUploadError,
    NoMediaResolvedError,
    CreativeRejectedError,
    AdCreationError,
)
from .filename_classifier import AdGroupPool, RawFile, classify_files
from .meta_graph_client import MetaGraphClient
from .models import (
    AspectRatio,
    MediaKind,
    GroupStatus,
    MediaAsset,
    MediaInput,
    AdGroup,
    AdSetConfig,
    TemplateContext,
    TemplateCopy,
    AdGroupInput,
    BatchCreateRequest,
    AdResult,
    BatchCreateResult,
)

__all__ = [
    # Errors
    "AdLauncherError",
    "MetaApiError",
    "BatchFatalError",
    "TemplateResolutionError",
    "AdSetCreationError",
    "GroupError",
    "MediaUploadError",
    "NoMediaResolvedError",
    "CreativeRejectedError",
    "AdCreationError",
    # Classifier
    "AdGroupPool",
    "RawFile",
    "classify_files",
    # Client
    "MetaGraphClient",
    # Models
    "AspectRatio",
    "MediaKind",
    "GroupStatus",
    "MediaAsset",
    "MediaInput",
    "AdGroup",
    "AdSetConfig",
    "TemplateContext",
    "TemplateCopy",
    "AdGroupInput",
    "BatchCreateRequest",
    "AdResult",
    "BatchCreateResult",
]
