"""
Filename Classifier - group creative files into ads by filename prefix.

    summer_sale_9x16.mp4  ─┐
    summer_sale_4x5.jpg   ─┼─> AdGroup "summer_sale" (video 9x16, image 4x5, image 1x1)
    summer_sale-1x1.png   ─┘
    winter.jpg            ───> AdGroup "winter" (image other)

The group key is the name without its extension and without a trailing
aspect-ratio token. The aspect tag is detected separately, anywhere in the
name, so "9x16_promo.jpg" is tagged 9x16 but keeps "9x16_promo" as its key.
"""

import logging
import re
from dataclasses import dataclass
from typing import Dict, Iterable, List, Optional, Union

from .models import AdGroup, AspectRatio, MediaAsset, MediaKind, TemplateCopy, guess_media_kind

logger = logging.getLogger(__name__)

_EXTENSION_RE = re.compile(r"\.[^/.]+$")
_TRAILING_ASPECT_RE = re.compile(r"[_-]?(9x16|9_16|4x5|4_5|1x1|1_1|16x9|16_9)$", re.IGNORECASE)

# Checked in order; first hit wins
_ASPECT_PRIORITY = [
    (AspectRatio.VERTICAL, ("9x16", "9_16")),
    (AspectRatio.PORTRAIT, ("4x5", "4_5")),
    (AspectRatio.SQUARE, ("1x1", "1_1")),
    (AspectRatio.LANDSCAPE, ("16x9", "16_9")),
]


@dataclass
class RawFile:
    """A file handed to the classifier, before grouping."""
    filename: str
    payload: Optional[str] = None          # base64
    kind: Optional[MediaKind] = None       # guessed from the name when None
    resolved_ref: Optional[str] = None
    thumbnail_url: Optional[str] = None


def strip_extension(filename: str) -> str:
    return _EXTENSION_RE.sub("", filename)


def group_key_for(filename: str) -> str:
    """Filename minus extension minus a trailing aspect token."""
    return _TRAILING_ASPECT_RE.sub("", strip_extension(filename)).strip()


def detect_aspect_ratio(filename: str) -> AspectRatio:
    lower = filename.lower()
    for aspect, tokens in _ASPECT_PRIORITY:
        if any(token in lower for token in tokens):
            return aspect
    return AspectRatio.OTHER


class AdGroupPool:
    """
    Ordered collection of ad groups that grows across classify calls.

    Files whose key matches an existing group are appended to it, so an
    operator can drop files in several batches and still end up with one
    group per prefix.
    """

    def __init__(self, defaults: Optional[TemplateCopy] = None):
        self.defaults = defaults or TemplateCopy()
        self._groups: Dict[str, AdGroup] = {}

    def __len__(self) -> int:
        return len(self._groups)

    def __iter__(self):
        return iter(self._groups.values())

    def __contains__(self, key: str) -> bool:
        return key in self._groups

    def get(self, key: str) -> Optional[AdGroup]:
        return self._groups.get(key)

    @property
    def groups(self) -> List[AdGroup]:
        return list(self._groups.values())

    def add(self, asset: MediaAsset) -> AdGroup:
        key = group_key_for(asset.filename)
        group = self._groups.get(key)
        if group is None:
            group = AdGroup(
                group_key=key,
                ad_name=key,
                primary_text=self.defaults.primary_text,
                headline=self.defaults.headline,
                url=self.defaults.url,
            )
            self._groups[key] = group
        group.media.append(asset)
        return group

    def remove(self, key: str) -> Optional[AdGroup]:
        return self._groups.pop(key, None)


def classify_files(
    files: Iterable[Union[RawFile, str]],
    pool: Optional[AdGroupPool] = None,
    defaults: Optional[TemplateCopy] = None,
) -> AdGroupPool:
    """
    Classify files into ad groups.

    Args:
        files: RawFile entries or bare filenames
        pool: Existing pool to extend (incremental addition); a new one is
            created when omitted
        defaults: Copy for newly created groups (ignored when pool is given)

    Returns:
        The pool, with every image/video file placed in its group
    """
    if pool is None:
        pool = AdGroupPool(defaults=defaults)

    added = 0
    for entry in files:
        raw = RawFile(filename=entry) if isinstance(entry, str) else entry
        kind = raw.kind or guess_media_kind(raw.filename)
        if kind is None:
            logger.warning(f"Skipping {raw.filename}: not an image or video")
            continue

        asset = MediaAsset(
            filename=raw.filename,
            kind=kind,
            aspect_ratio=detect_aspect_ratio(raw.filename),
            payload=raw.payload,
            resolved_ref=raw.resolved_ref,
            thumbnail_url=raw.thumbnail_url if kind == MediaKind.VIDEO else None,
        )
        pool.add(asset)
        added += 1

    logger.info(f"Classified {added} file(s) into {len(pool)} ad group(s)")
    return pool
