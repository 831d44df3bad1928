# models/template_metadata.py
"""
The fixed, schema-independent fields of a template/campaign record.
"""
from __future__ import annotations

from typing import Any, Dict, List, Mapping, Optional, Union
from urllib.parse import urlparse

from pydantic import BaseModel, ConfigDict, Field, field_validator

from .field_schema import split_comma_text

# Keys that may sit next to schema fields without a FieldSchema entry
METADATA_FIELDS = (
    "name",
    "description",
    "website",
    "urlPattern",
    "category",
    "isPublic",
    "tags",
    "actorReference",
)

# Metadata that must be non-empty before a record can be saved
REQUIRED_METADATA = ("name", "website", "urlPattern")

DEFAULT_CATEGORY = "ecommerce"


class TemplateMetadata(BaseModel):
    """
    Record-level fields edited next to the actor configuration.

    ``actor_reference`` holds whatever the operator (or the backend) supplied;
    it is re-resolved right before submission and never trusted as canonical.
    """

    name: str = ""
    description: str = ""
    website: str = ""
    url_pattern: str = Field("", alias="urlPattern")
    category: str = DEFAULT_CATEGORY
    is_public: bool = Field(True, alias="isPublic")
    tags: List[str] = Field(default_factory=list)
    actor_reference: Any = Field(None, alias="actorReference")
    actor_type: str = Field("web-scraper", alias="actorType")

    model_config = ConfigDict(populate_by_name=True, extra="ignore")

    @field_validator("name", "description", "website", "url_pattern", mode="before")
    @classmethod
    def _strip(cls, v: Optional[str]) -> str:
        if v is None:
            return ""
        return v.strip() if isinstance(v, str) else v

    @field_validator("category", mode="before")
    @classmethod
    def _category_default(cls, v: Optional[str]) -> str:
        if isinstance(v, str) and v.strip():
            return v.strip()
        return DEFAULT_CATEGORY

    @field_validator("is_public", mode="before")
    @classmethod
    def _public_default(cls, v: Any) -> Any:
        return True if v is None else v

    @field_validator("tags", mode="before")
    @classmethod
    def _split_tags(cls, v: Union[str, List[str], None]) -> List[str]:
        if v is None:
            return []
        if isinstance(v, str):
            return split_comma_text(v)
        return [str(t).strip() for t in v if str(t).strip()]

    @classmethod
    def from_document(cls, document: Mapping[str, Any]) -> "TemplateMetadata":
        """
        Build metadata from a backend template document.

        ``website`` falls back to ``input.url`` the way the listing screens do.
        """
        data = {k: document.get(k) for k in METADATA_FIELDS if k in document}
        if "actorId" in document:
            data["actorReference"] = document["actorId"]
        if document.get("actorType"):
            data["actorType"] = document["actorType"]
        if not data.get("website"):
            config = document.get("input")
            if isinstance(config, Mapping) and isinstance(config.get("url"), str):
                data["website"] = config["url"]
        return cls.model_validate(data)

    def effective_website(self, config_url: Any = None) -> str:
        if self.website:
            return self.website
        return config_url.strip() if isinstance(config_url, str) else ""

    def effective_url_pattern(self, website: str) -> str:
        """``urlPattern`` or the ``*.<host>/*`` pattern derived from the website."""
        if self.url_pattern:
            return self.url_pattern
        host = urlparse(website).netloc if "://" in website else website
        return f"*.{host or 'example.com'}/*"

    def to_document(self) -> Dict[str, Any]:
        """Backend field names; ``actor_reference`` is left to the builder."""
        return self.model_dump(by_alias=True, exclude={"actor_reference"})
