from typing import Any
from urllib.parse import urlparse

from pydantic import BaseModel, ConfigDict, Field, field_validator


class CrawlWebsiteArgs(BaseModel):
    url: str = Field(description="The URL of the company website to crawl.")

    @field_validator("url")
    @classmethod
    def _well_formed(cls, value: str) -> str:
        parsed = urlparse(value)
        if parsed.scheme not in ("http", "https") or not parsed.netloc:
            raise ValueError(f"Invalid URL: {value!r}")
        return value


class StoreFileArgs(BaseModel):
    path: str = Field(min_length=1, description="Workspace path to write, e.g. reports/acme.md")
    content: str = Field(description="Text content of the file.")


class GetFileArgs(BaseModel):
    path: str = Field(min_length=1, description="Exact workspace path of the file to read.")


class WorkspaceFile(BaseModel):
    model_config = ConfigDict(populate_by_name=True, extra="ignore")

    id: int | str | None = None
    path: str
    full_url: str = Field(alias="fullUrl")


class ToolCallRequest(BaseModel):
    args: dict[str, Any] = {}
    action: dict[str, Any] | None = None


class ToolCallResponse(BaseModel):
    result: str
