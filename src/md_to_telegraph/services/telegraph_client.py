"""Telegraph API client: account bootstrap, create/edit/fetch pages, list pages."""

from __future__ import annotations

import logging
from typing import Any, Iterable

import httpx

from ..models import Node, TelegraphAccount, TelegraphPage, TelegraphPageList
from .block_converter import nodes_to_content_json

logger = logging.getLogger(__name__)

TELEGRAPH_API_BASE = "https://api.telegra.ph"
DEFAULT_TIMEOUT = 30.0


class PageNotFoundError(RuntimeError):
    """Raised by :func:`get_page` when Telegraph answers 404."""


def _http_client(timeout: float) -> httpx.Client:
    return httpx.Client(base_url=TELEGRAPH_API_BASE, timeout=timeout)


def _raise_http_error(resp: httpx.Response, *, hint: str = "") -> None:
    body = ""
    try:
        body = resp.text
    except Exception:
        body = "<unreadable body>"
    msg = f"HTTP {resp.status_code} for {resp.request.method} {resp.request.url}\nResponse body: {body}"
    if hint:
        msg = hint + "\n" + msg
    raise RuntimeError(msg)


def _unwrap(resp: httpx.Response) -> dict[str, Any]:
    if resp.status_code >= 400:
        _raise_http_error(resp)
    data = resp.json()
    # Telegraph returns {ok: true, result: {...}} or {ok: false, error: "..."}
    if not isinstance(data, dict) or not data.get("ok"):
        error = data.get("error") if isinstance(data, dict) else data
        raise RuntimeError(f"Telegraph API error: {error}")
    return data.get("result") or {}


def _post_json(path: str, *, payload: dict[str, Any], timeout: float = DEFAULT_TIMEOUT) -> dict[str, Any]:
    with _http_client(timeout) as client:
        resp = client.post(path, json=payload)
        return _unwrap(resp)


def _get_json(path: str, *, params: dict[str, Any] | None, timeout: float = DEFAULT_TIMEOUT) -> dict[str, Any]:
    with _http_client(timeout) as client:
        resp = client.get(path, params=params)
        if resp.status_code == 404:
            raise PageNotFoundError("Telegraph page not found")
        return _unwrap(resp)


def _require_token(token: str | None) -> str:
    if not token:
        raise RuntimeError("No access token available. Create an account first.")
    return token


def create_account(short_name: str, author_name: str, author_url: str | None = None) -> TelegraphAccount:
    """POST /createAccount. The returned account carries the access token."""
    payload: dict[str, Any] = {"short_name": short_name, "author_name": author_name}
    if author_url:
        payload["author_url"] = author_url
    try:
        result = _post_json("/createAccount", payload=payload)
    except Exception as e:
        logger.error("Failed to create Telegraph account: %s", e)
        raise
    logger.info("Telegraph account created: %s", short_name)
    return TelegraphAccount.model_validate(result)


def _page_payload(
    token: str,
    title: str,
    content: Iterable[Node],
    author_name: str | None,
    author_url: str | None,
    return_content: bool,
) -> dict[str, Any]:
    payload: dict[str, Any] = {
        "access_token": token,
        "title": title,
        "content": nodes_to_content_json(content),
        "return_content": return_content,
    }
    if author_name:
        payload["author_name"] = author_name
    if author_url:
        payload["author_url"] = author_url
    return payload


def create_page(
    token: str | None,
    title: str,
    content: Iterable[Node],
    author_name: str | None = None,
    author_url: str | None = None,
    return_content: bool = False,
) -> TelegraphPage:
    """POST /createPage."""
    payload = _page_payload(_require_token(token), title, content, author_name, author_url, return_content)
    try:
        result = _post_json("/createPage", payload=payload)
    except Exception as e:
        logger.error("Failed to create Telegraph page: %s", e)
        raise
    page = TelegraphPage.model_validate(result)
    logger.info("Telegraph page created: %s", page.url)
    return page


def edit_page(
    token: str | None,
    path: str,
    title: str,
    content: Iterable[Node],
    author_name: str | None = None,
    author_url: str | None = None,
    return_content: bool = False,
) -> TelegraphPage:
    """POST /editPage/{path}."""
    payload = _page_payload(_require_token(token), title, content, author_name, author_url, return_content)
    try:
        result = _post_json(f"/editPage/{path}", payload=payload)
    except Exception as e:
        logger.error("Failed to edit Telegraph page: %s", e)
        raise
    page = TelegraphPage.model_validate(result)
    logger.info("Telegraph page updated: %s", page.url)
    return page


def get_page(path: str, return_content: bool = True) -> TelegraphPage:
    """GET /getPage/{path}. Raises :class:`PageNotFoundError` on 404."""
    try:
        result = _get_json(f"/getPage/{path}", params={"return_content": str(return_content).lower()})
    except PageNotFoundError:
        raise
    except Exception as e:
        logger.error("Failed to get Telegraph page: %s", e)
        raise
    return TelegraphPage.model_validate(result)


def get_page_list(token: str | None, offset: int = 0, limit: int = 50) -> TelegraphPageList:
    """GET /getPageList for the account behind ``token``."""
    params = {"access_token": _require_token(token), "offset": offset, "limit": limit}
    try:
        result = _get_json("/getPageList", params=params)
    except Exception as e:
        logger.error("Failed to get Telegraph page list: %s", e)
        raise
    return TelegraphPageList.model_validate(result)


def find_existing_page_by_title(token: str | None, title: str) -> TelegraphPage | None:
    """First page of the account whose title matches (case-insensitively)."""
    try:
        page_list = get_page_list(token)
    except Exception as e:
        logger.warning("Failed to search for existing page: %s", e)
        return None
    for page in page_list.pages:
        if page.title == title or page.title.lower() == title.lower():
            return page
    return None
