"""Pydantic models: Telegraph node tree, API records, HTTP request/response bodies."""

from __future__ import annotations

from collections.abc import Mapping
from types import MappingProxyType
from typing import Any, Literal, Union

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator

# Tags accepted by the Telegraph content format.
Tag = Literal[
    "p",
    "br",
    "strong",
    "em",
    "u",
    "s",
    "code",
    "pre",
    "a",
    "h3",
    "h4",
    "blockquote",
    "figure",
    "img",
    "video",
    "iframe",
    "figcaption",
    "ul",
    "ol",
    "li",
]


class Node(BaseModel):
    """One element of a Telegraph page body.

    Immutable all the way down: ``attrs`` is a read-only mapping and
    ``children`` a tuple, whatever was passed in.
    """

    model_config = ConfigDict(frozen=True)

    tag: Tag
    attrs: Mapping[str, str] | None = None
    children: tuple[Union[Node, str], ...] | None = None

    @field_validator("attrs")
    @classmethod
    def freeze_attrs(cls, value: Mapping[str, str] | None) -> Mapping[str, str] | None:
        if value is None:
            return None
        return MappingProxyType(dict(value))

    @model_validator(mode="after")
    def code_holds_text_only(self) -> Node:
        if self.tag == "code" and self.children:
            if any(isinstance(child, Node) for child in self.children):
                raise ValueError("code nodes may only contain text")
        return self

    def to_payload(self) -> dict[str, Any]:
        """Telegraph wire format: ``{"tag", "attrs"?, "children"?}``."""
        payload: dict[str, Any] = {"tag": self.tag}
        if self.attrs:
            payload["attrs"] = dict(self.attrs)
        if self.children is not None:
            payload["children"] = [
                child.to_payload() if isinstance(child, Node) else child for child in self.children
            ]
        return payload


Node.model_rebuild()


class TelegraphAccount(BaseModel):
    short_name: str
    author_name: str = ""
    author_url: str | None = None
    access_token: str = ""
    auth_url: str | None = None
    page_count: int | None = None


class TelegraphPage(BaseModel):
    path: str
    url: str
    title: str
    description: str = ""
    author_name: str | None = None
    author_url: str | None = None
    image_url: str | None = None
    # Raw wire nodes; Telegraph may return tags the converter never emits.
    content: list[Any] | None = None
    views: int = 0
    can_edit: bool | None = None


class TelegraphPageList(BaseModel):
    total_count: int
    pages: list[TelegraphPage] = Field(default_factory=list)


class PageMapping(BaseModel):
    """One published file; serialized with camelCase keys in the mapping file."""

    model_config = ConfigDict(populate_by_name=True)

    file_path: str = Field(alias="filePath")
    telegraph_path: str = Field(alias="telegraphPath")
    telegraph_url: str = Field(alias="telegraphUrl")
    last_modified: str = Field(alias="lastModified")


class MarkdownFile(BaseModel):
    file_path: str
    relative_path: str
    content: str
    title: str | None = None


class ActionConfig(BaseModel):
    account_name: str = "GitHub Action"
    author_name: str = "GitHub Action"
    author_url: str | None = None
    include_patterns: list[str] = Field(default_factory=lambda: ["**/*.md"])
    exclude_patterns: list[str] = Field(default_factory=lambda: ["node_modules/**"])
    output_file: str = "telegraph-pages.json"
    access_token: str | None = None
    one_entry_mode: bool = False
    replace_existing_pages: bool = False


class PublishResult(BaseModel):
    pages_created: int = 0
    mapping_file: str = ""
    mappings: list[PageMapping] = Field(default_factory=list)


# HTTP API bodies


class ConvertRequest(BaseModel):
    markdown: str
    base_path: str | None = None
    # Relative .md path -> published URL, used to resolve internal links.
    links: dict[str, str] = Field(default_factory=dict)
    source_format: Literal["markdown", "html"] = "markdown"
    file_name: str = "README.md"


class ConvertResponse(BaseModel):
    title: str
    nodes: list[dict[str, Any]]


class PublishRequest(BaseModel):
    workspace_root: str
    account_name: str = "GitHub Action"
    author_name: str = "GitHub Action"
    author_url: str | None = None
    include_patterns: list[str] = Field(default_factory=lambda: ["**/*.md"])
    exclude_patterns: list[str] = Field(default_factory=lambda: ["node_modules/**"])
    output_file: str = "telegraph-pages.json"
    telegraph_token: str | None = None
    one_entry_mode: bool = False
    replace_existing_pages: bool = False


class PublishResponse(BaseModel):
    task_id: str


class TaskListItem(BaseModel):
    task_id: str
    status: str
    pages_created: int | None = None
    failure_reason: str | None = None


class TaskListResponse(BaseModel):
    tasks: list[TaskListItem]
    total: int
