"""
Tests for the response builder.
"""

import pytest

from objects_api.services.objects import (
    AdditionalField,
    FieldRegistry,
    ResourceConfig,
    ResourceDescriptor,
    ResponseBuilder,
    StoredObjectAdapter,
)
from shared.config.settings import Settings


@pytest.fixture
def app_settings():
    return Settings(base_url="https://example.test/", api_namespace="/api/v1/")


@pytest.fixture
def config():
    return ResourceConfig(
        descriptor=ResourceDescriptor(type="page", hierarchical=True),
        rest_base="pages",
        fields=FieldRegistry([
            AdditionalField("word_count", get_callback=lambda obj, name, context: len(obj.content.split())),
        ]),
    )


@pytest.fixture
def builder(db_session, config, app_settings):
    return ResponseBuilder(config, StoredObjectAdapter(db_session, config.descriptor), app_settings)


class TestEnvelope:
    """Tests for ResponseBuilder.envelope()"""

    def test_envelope_fields_and_links(self, builder, make_object):
        """Adapter fields, additional fields and links are merged."""
        page = make_object("page", title="About", name="about", content="one two three")

        data = builder.envelope(page, "view")

        assert data["id"] == page.id
        assert data["slug"] == "about"
        assert data["type"] == "page"
        assert data["parent"] == 0
        assert data["word_count"] == 3
        assert data["_links"]["self"][0]["href"] == f"https://example.test/api/v1/pages/{page.id}"
        assert data["_links"]["collection"][0]["href"] == "https://example.test/api/v1/pages"

    def test_edit_context_adds_meta_and_author(self, db_session, builder, make_object):
        """Edit context exposes author, public meta and terms."""
        page = make_object("page", author_id=3)
        page.set_meta("template", "wide")
        page.set_meta("_private", "x")
        page.set_terms("section", ["docs"])
        db_session.commit()

        view = builder.envelope(page, "view")
        edit = builder.envelope(page, "edit")

        assert "author" not in view
        assert "meta" not in view
        assert edit["author"] == 3
        assert edit["meta"] == {"template": "wide"}
        assert edit["terms"] == {"section": ["docs"]}

    def test_location(self, builder, make_object):
        """location() is the canonical item URL."""
        page = make_object("page")

        assert builder.location(page) == f"https://example.test/api/v1/pages/{page.id}"


class TestPaginationHeaders:
    """Tests for ResponseBuilder.pagination_headers()"""

    def test_first_page(self, builder):
        """First page links to next only."""
        headers = builder.pagination_headers(total_count=25, page_count=3, page=1, query={"per_page": "10"})

        assert headers["X-Total-Count"] == "25"
        assert headers["X-Total-Pages"] == "3"
        assert 'rel="next"' in headers["Link"]
        assert 'rel="prev"' not in headers["Link"]
        assert "page=2" in headers["Link"]
        assert "per_page=10" in headers["Link"]

    def test_middle_page(self, builder):
        """Middle pages link both ways."""
        headers = builder.pagination_headers(total_count=25, page_count=3, page=2)

        assert "page=1" in headers["Link"]
        assert "page=3" in headers["Link"]

    def test_past_the_end(self, builder):
        """prev points at the last page when the page is out of bounds."""
        headers = builder.pagination_headers(total_count=5, page_count=1, page=4)

        assert headers["Link"] == '<https://example.test/api/v1/pages?page=1>; rel="prev"'

    def test_single_page_has_no_link(self, builder):
        """No Link header when everything fits in one page."""
        headers = builder.pagination_headers(total_count=3, page_count=1, page=1)

        assert "Link" not in headers

    def test_list_params_repeated(self, builder):
        """List query values are repeated in links."""
        headers = builder.pagination_headers(total_count=30, page_count=3, page=1, query={"include": ["1", "2"]})

        assert "include=1&include=2" in headers["Link"]
