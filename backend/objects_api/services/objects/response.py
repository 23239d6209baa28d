"""
Response builder: envelopes, links and pagination headers.

Usage:
    builder = ResponseBuilder(config, adapter)
    body = builder.envelope(obj, Context.VIEW)
    headers = builder.pagination_headers(total_count=25, page_count=3, page=2, query={"per_page": "10"})
"""

from __future__ import annotations

from typing import Any, Mapping
from urllib.parse import urlencode

from shared.config.settings import Settings, settings as default_settings
from .adapter import DomainObjectAdapter
from .descriptor import ResourceConfig


class ResponseBuilder:
    """
    Shapes domain objects into response envelopes.

    Args:
        config: Resource configuration (rest base and additional fields)
        adapter: Domain object adapter providing the core fields
        app_settings: Settings carrying ``base_url`` and ``api_namespace``
    """

    def __init__(
        self,
        config: ResourceConfig,
        adapter: DomainObjectAdapter,
        app_settings: Settings | None = None,
    ):
        self._config = config
        self._adapter = adapter
        self._settings = app_settings or default_settings

    # =========================================================================
    # URLs
    # =========================================================================

    def collection_url(self) -> str:
        base = self._settings.base_url.rstrip("/")
        namespace = self._settings.api_namespace.strip("/")
        return f"{base}/{namespace}/{self._config.rest_base}"

    def item_url(self, object_id: int) -> str:
        return f"{self.collection_url()}/{object_id}"

    def location(self, obj: Any) -> str:
        """Canonical location of ``obj``, used for the 201 Location header."""
        return self.item_url(self._adapter.get_id(obj))

    def links(self, obj: Any) -> dict[str, list[dict[str, str]]]:
        return {
            "self": [{"href": self.location(obj)}],
            "collection": [{"href": self.collection_url()}],
        }

    # =========================================================================
    # Envelopes
    # =========================================================================

    def envelope(self, obj: Any, context: str) -> dict[str, Any]:
        """Adapter fields, then additional fields, then links."""
        data = self._adapter.to_response(obj, context)
        data.update(self._config.fields.get_values(obj, context))
        data["_links"] = self.links(obj)
        return data

    # =========================================================================
    # Pagination
    # =========================================================================

    def pagination_headers(
        self,
        total_count: int,
        page_count: int,
        page: int,
        query: Mapping[str, Any] | None = None,
    ) -> dict[str, str]:
        """
        ``X-Total-Count``, ``X-Total-Pages`` and a ``Link`` header.

        ``prev`` points at the last existing page when ``page`` is past the
        end; ``next`` is present only while more pages remain.
        """
        headers = {
            "X-Total-Count": str(total_count),
            "X-Total-Pages": str(page_count),
        }

        links = []
        if page > 1:
            prev_page = min(page - 1, page_count) if page_count else page - 1
            links.append(f'<{self._page_url(prev_page, query)}>; rel="prev"')
        if page_count > page:
            links.append(f'<{self._page_url(page + 1, query)}>; rel="next"')
        if links:
            headers["Link"] = ", ".join(links)

        return headers

    def _page_url(self, page: int, query: Mapping[str, Any] | None) -> str:
        params = {key: value for key, value in (query or {}).items() if key != "page"}
        params["page"] = page
        return f"{self.collection_url()}?{urlencode(params, doseq=True)}"
