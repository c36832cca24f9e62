"""Upload and completion relays.

Both relays are built once from the startup ``Settings`` and hold no
per-request state; every call validates its input, performs a single upstream
call and returns the normalized result.
"""

from __future__ import annotations

from typing import List, Optional

from .completion import CompletionClient
from .config import Settings
from .errors import BadRequestError
from .logging import get_logger
from .metadata import (
    build_folder,
    parse_metadata,
    resolve_grouping_id,
    split_metadata,
    strip_image_extension,
)
from .schemas import AssetUploadRequest, CompletionRequest, UploadResult
from .storage import AssetStore

LOGGER = get_logger(__name__)

DEFAULT_FILENAME = "unnamed"


class UploadRelay:
    def __init__(self, settings: Settings, store: AssetStore) -> None:
        self._settings = settings
        self._store = store

    def build_request(self, metadata: dict, filename: str) -> AssetUploadRequest:
        """Derive folder, tags, context and built-in fields for one upload."""

        settings = self._settings
        grouping_id = resolve_grouping_id(metadata, settings.grouping_keys)
        folder = build_folder(
            settings.upload_folder,
            grouping_id,
            group_subfolders=settings.upload_group_subfolders,
        )
        split = split_metadata(
            metadata,
            caption_keys=settings.caption_keys,
            alt_keys=settings.alt_keys,
            denylist=settings.context_denylist,
        )
        tags: List[str] = list(settings.upload_tags)
        if grouping_id and grouping_id not in tags:
            tags.append(grouping_id)

        LOGGER.info(
            "Mapped upload metadata",
            builtin=split.builtin,
            folder=folder,
            context=split.context_string,
        )
        return AssetUploadRequest(
            public_id=strip_image_extension(filename),
            folder=folder,
            context=split.context_string,
            tags=tags,
            caption=split.caption,
            alt=split.alt,
        )

    async def upload(
        self,
        image: Optional[bytes],
        metadata_raw: Optional[str],
        filename: Optional[str],
    ) -> UploadResult:
        if image is None:
            raise BadRequestError("No image file provided")
        if not image:
            raise BadRequestError("Image file is empty")

        metadata = parse_metadata(metadata_raw)
        filename = filename or DEFAULT_FILENAME
        LOGGER.info(
            "Upload request received",
            filename=filename,
            size_kb=round(len(image) / 1024, 2),
            metadata_keys=list(metadata),
        )

        request = self.build_request(metadata, filename)
        return await self._store.upload(image, request)


class CompletionRelay:
    REQUIRED_FIELDS = (
        ("prompt", "prompt"),
        ("field_type", "fieldType"),
        ("target_locale", "targetLocale"),
        ("api_key", "apiKey"),
    )

    def __init__(self, settings: Settings, client: Optional[CompletionClient] = None) -> None:
        self._client = client or CompletionClient(settings)

    def missing_fields(self, request: CompletionRequest) -> List[str]:
        return [alias for name, alias in self.REQUIRED_FIELDS if not getattr(request, name)]

    async def complete(self, request: CompletionRequest) -> str:
        missing = self.missing_fields(request)
        if missing:
            raise BadRequestError(f"Missing required fields: {', '.join(missing)}")

        # the provider key is relayed as-is and never logged
        LOGGER.info(
            "Completion request received",
            field_type=request.field_type,
            target_locale=request.target_locale,
            prompt_chars=len(request.prompt or ""),
        )
        return await self._client.complete(request.prompt, request.api_key)


__all__ = ["CompletionRelay", "UploadRelay"]
