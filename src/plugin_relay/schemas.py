"""Pydantic schemas for relay requests and responses."""

from __future__ import annotations

from typing import Any, Dict, List, Optional

from pydantic import BaseModel, ConfigDict, Field


class AssetUploadRequest(BaseModel):
    """Options sent to the asset store for a single upload."""

    model_config = ConfigDict(frozen=True)

    public_id: str
    folder: str
    resource_type: str = "image"
    context: str = ""
    tags: List[str] = Field(default_factory=list)
    overwrite: bool = True
    unique_filename: bool = False
    use_filename: bool = True
    caption: Optional[str] = None
    alt: Optional[str] = None

    def to_options(self) -> Dict[str, Any]:
        """Flatten into provider options; built-in fields are merged last."""

        options = self.model_dump(exclude={"caption", "alt"})
        builtin = self.model_dump(include={"caption", "alt"}, exclude_none=True)
        return {**options, **builtin}


class UploadResult(BaseModel):
    """Stable subset of the asset store's upload descriptor."""

    model_config = ConfigDict(frozen=True)

    url: Optional[str] = None
    public_id: Optional[str] = None
    width: Optional[int] = None
    height: Optional[int] = None
    format: Optional[str] = None
    bytes: Optional[int] = None
    created_at: Optional[str] = None
    caption: Optional[str] = None
    alt: Optional[str] = None
    context: Optional[Any] = None
    tags: List[str] = Field(default_factory=list)

    @classmethod
    def from_provider(cls, payload: Dict[str, Any]) -> "UploadResult":
        custom = (payload.get("context") or {}).get("custom") or {}
        return cls(
            url=payload.get("secure_url") or payload.get("url"),
            public_id=payload.get("public_id"),
            width=payload.get("width"),
            height=payload.get("height"),
            format=payload.get("format"),
            bytes=payload.get("bytes"),
            created_at=payload.get("created_at"),
            caption=payload.get("caption") or custom.get("caption"),
            alt=payload.get("alt") or custom.get("alt"),
            context=payload.get("context"),
            tags=payload.get("tags") or [],
        )


class UploadResponse(UploadResult):
    success: bool = True


class CompletionRequest(BaseModel):
    """Body of ``POST /api/claude``; presence is checked by the relay."""

    prompt: Optional[str] = None
    field_type: Optional[str] = Field(default=None, alias="fieldType")
    target_locale: Optional[str] = Field(default=None, alias="targetLocale")
    api_key: Optional[str] = Field(default=None, alias="apiKey", repr=False)

    model_config = ConfigDict(populate_by_name=True, extra="ignore")


class CompletionResponse(BaseModel):
    text: str


class HealthResponse(BaseModel):
    success: bool = True
    message: str
    timestamp: str


__all__ = [
    "AssetUploadRequest",
    "CompletionRequest",
    "CompletionResponse",
    "HealthResponse",
    "UploadResponse",
    "UploadResult",
]
