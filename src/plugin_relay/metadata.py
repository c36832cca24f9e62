"""Mapping of plugin metadata onto asset store fields."""

from __future__ import annotations

import json
import re
from dataclasses import dataclass, field
from typing import Dict, Iterable, Optional

from .errors import BadRequestError

IMAGE_EXTENSION_RE = re.compile(r"\.(png|jpg|jpeg|gif|webp)$", re.IGNORECASE)
CUSTOM_CONTEXT_PREFIX = "context.custom."
UNKNOWN_GROUP = "unknown"
CONTEXT_PAIR_SEPARATOR = "|"


@dataclass(frozen=True)
class MetadataSplit:
    """Built-in descriptive fields and free-form context of one upload."""

    builtin: Dict[str, str] = field(default_factory=dict)
    context: Dict[str, str] = field(default_factory=dict)

    @property
    def caption(self) -> Optional[str]:
        return self.builtin.get("caption")

    @property
    def alt(self) -> Optional[str]:
        return self.builtin.get("alt")

    @property
    def context_string(self) -> str:
        return serialize_context(self.context)


def strip_image_extension(filename: str) -> str:
    """Drop a trailing image extension so the name can serve as a public id."""

    return IMAGE_EXTENSION_RE.sub("", filename)


def _coerce_value(key: str, value: object) -> str:
    if value is None:
        return ""
    if isinstance(value, bool):
        return "true" if value else ""
    if isinstance(value, (int, float)):
        return str(value)
    if isinstance(value, str):
        return value
    raise BadRequestError(
        "Invalid metadata", details=f"Metadata value for '{key}' must be a string"
    )


def parse_metadata(raw: Optional[str]) -> Dict[str, str]:
    """Decode the ``metadata`` form field into a flat string mapping.

    Absent or blank input yields an empty mapping. Scalars are stringified;
    nested objects and arrays are rejected.
    """

    if raw is None or not raw.strip():
        return {}
    try:
        data = json.loads(raw)
    except json.JSONDecodeError as exc:
        raise BadRequestError("Invalid metadata", details=str(exc)) from exc
    if not isinstance(data, dict):
        raise BadRequestError("Invalid metadata", details="Metadata must be a JSON object")
    return {str(key): _coerce_value(str(key), value) for key, value in data.items()}


def _first_present(metadata: Dict[str, str], keys: Iterable[str]) -> Optional[str]:
    for key in keys:
        value = metadata.get(key)
        if value:
            return value
    return None


def split_metadata(
    metadata: Dict[str, str],
    *,
    caption_keys: Iterable[str],
    alt_keys: Iterable[str],
    denylist: Iterable[str],
) -> MetadataSplit:
    """Partition metadata into built-in fields and ordered context pairs."""

    caption_keys = list(caption_keys)
    alt_keys = list(alt_keys)
    excluded = set(denylist) | set(caption_keys) | set(alt_keys)

    builtin: Dict[str, str] = {}
    caption = _first_present(metadata, caption_keys)
    if caption:
        builtin["caption"] = caption
    alt = _first_present(metadata, alt_keys)
    if alt:
        builtin["alt"] = alt

    context = {
        key: value
        for key, value in metadata.items()
        if value and key not in excluded and not key.startswith(CUSTOM_CONTEXT_PREFIX)
    }
    return MetadataSplit(builtin=builtin, context=context)


def serialize_context(pairs: Dict[str, str]) -> str:
    return CONTEXT_PAIR_SEPARATOR.join(f"{key}={value}" for key, value in pairs.items())


def resolve_grouping_id(metadata: Dict[str, str], keys: Iterable[str]) -> Optional[str]:
    """Return the first non-empty grouping key value, or ``None``."""

    return _first_present(metadata, keys)


def build_folder(base_folder: str, grouping_id: Optional[str], *, group_subfolders: bool) -> str:
    if not group_subfolders:
        return base_folder
    return f"{base_folder.rstrip('/')}/{grouping_id or UNKNOWN_GROUP}"


__all__ = [
    "MetadataSplit",
    "UNKNOWN_GROUP",
    "build_folder",
    "parse_metadata",
    "resolve_grouping_id",
    "serialize_context",
    "split_metadata",
    "strip_image_extension",
]
