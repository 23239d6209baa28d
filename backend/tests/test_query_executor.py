"""
Tests for the SQLAlchemy query executor.
"""

from datetime import datetime

import pytest

from objects_api.services.objects import SqlObjectQuery


@pytest.fixture
def executor(db_session):
    return SqlObjectQuery(db_session, max_page_size=100)


class TestExecute:
    """Tests for SqlObjectQuery.execute()"""

    def test_filters_by_object_type_and_public_status(self, executor, make_object):
        """Without a status var only published objects of the type match."""
        published = make_object("post")
        make_object("post", status="draft")
        make_object("page")

        result = executor.execute({"object_type": "post"})

        assert result.ids == [published.id]
        assert result.total_count == 1

    def test_status_any_excludes_trash(self, executor, make_object):
        """status=any matches every status but trash."""
        draft = make_object("post", status="draft")
        published = make_object("post")
        make_object("post", status="trash")

        result = executor.execute({"object_type": "post", "status": "any", "orderby": "ID", "order": "asc"})

        assert result.ids == [draft.id, published.id]

    def test_status_list(self, executor, make_object):
        """A list of statuses matches any of them."""
        draft = make_object("post", status="draft")
        pending = make_object("post", status="pending")
        make_object("post")

        result = executor.execute({"object_type": "post", "status": ["draft", "pending"], "orderby": "ID"})

        assert result.ids == [pending.id, draft.id]

    def test_pagination_and_total(self, executor, make_object):
        """page_size/paged slice the IDs; the total covers every match."""
        objects = [make_object("post") for _ in range(7)]

        result = executor.execute({"object_type": "post", "orderby": "ID", "order": "asc", "page_size": 3, "paged": 2})

        assert result.ids == [o.id for o in objects[3:6]]
        assert result.total_count == 7
        assert result.effective_page_size == 3

    def test_empty_page_reports_zero_total(self, executor, make_object):
        """Out-of-bounds pages report no total."""
        for _ in range(3):
            make_object("post")

        result = executor.execute({"object_type": "post", "page_size": 10, "paged": 2})

        assert result.ids == []
        assert result.total_count == 0

    def test_offset_wins_over_paged(self, executor, make_object):
        """offset takes precedence over paged."""
        objects = [make_object("post") for _ in range(5)]

        result = executor.execute({
            "object_type": "post", "orderby": "ID", "order": "asc",
            "page_size": 2, "paged": 3, "offset": 1,
        })

        assert result.ids == [objects[1].id, objects[2].id]

    def test_page_size_clamped(self, db_session, make_object):
        """Page sizes above the maximum are clamped."""
        for _ in range(4):
            make_object("post")

        result = SqlObjectQuery(db_session, max_page_size=2).execute({"object_type": "post", "page_size": 50})

        assert len(result.ids) == 2
        assert result.effective_page_size == 2
        assert result.total_count == 4

    def test_non_positive_page_size_means_no_limit(self, executor, make_object):
        """page_size <= 0 returns every match."""
        for _ in range(12):
            make_object("post")

        result = executor.execute({"object_type": "post", "page_size": -1})

        assert len(result.ids) == 12
        assert result.total_count == 12

    def test_include_order(self, executor, make_object):
        """orderby id_in keeps the inclusion order."""
        a, b, c = make_object("post"), make_object("post"), make_object("post")

        result = executor.execute({"object_type": "post", "id_in": [b.id, c.id, a.id], "orderby": "id_in"})

        assert result.ids == [b.id, c.id, a.id]

    def test_exclude(self, executor, make_object):
        """id_not_in removes IDs."""
        a, b = make_object("post"), make_object("post")

        result = executor.execute({"object_type": "post", "id_not_in": [a.id]})

        assert result.ids == [b.id]

    def test_date_tiebreak_by_id(self, executor, make_object):
        """Equal dates are ordered by ID."""
        same = datetime(2024, 5, 1, 12, 0, 0)
        first = make_object("post", date=same)
        second = make_object("post", date=same)

        result = executor.execute({"object_type": "post", "orderby": "date,ID", "order": "desc"})

        assert result.ids == [second.id, first.id]

    def test_sticky_first_unless_ignored(self, executor, make_object):
        """Sticky objects lead only when ignore_sticky is False."""
        normal = make_object("post", date=datetime(2024, 2, 1))
        sticky = make_object("post", date=datetime(2024, 1, 1), sticky=True)

        ignored = executor.execute({"object_type": "post", "ignore_sticky": True})
        honored = executor.execute({"object_type": "post", "ignore_sticky": False})

        assert ignored.ids == [normal.id, sticky.id]
        assert honored.ids == [sticky.id, normal.id]

    def test_search_escapes_wildcards(self, executor, make_object):
        """Search terms are matched literally."""
        match = make_object("post", title="100% cotton")
        make_object("post", title="100 cotton")

        result = executor.execute({"object_type": "post", "search": "100%"})

        assert result.ids == [match.id]

    def test_date_filter_range(self, executor, make_object):
        """after/before in one clause form a range."""
        make_object("post", date=datetime(2023, 12, 31))
        inside = make_object("post", date=datetime(2024, 1, 15))
        make_object("post", date=datetime(2024, 3, 1))

        result = executor.execute({
            "object_type": "post",
            "date_filter": [{"after": datetime(2024, 1, 1), "before": datetime(2024, 2, 1), "column": "date"}],
        })

        assert result.ids == [inside.id]

    def test_parent_filters(self, executor, make_object):
        """parent_id_in / parent_id_not_in filter on the parent."""
        root = make_object("page")
        child = make_object("page", parent_id=root.id)

        children = executor.execute({"object_type": "page", "parent_id_in": [root.id]})
        top_level = executor.execute({"object_type": "page", "parent_id_not_in": [root.id]})

        assert children.ids == [child.id]
        assert top_level.ids == [root.id]

    def test_meta_query(self, db_session, executor, make_object):
        """meta_key/meta_value and meta_compare filter through object meta."""
        featured = make_object("post")
        featured.set_meta("rating", "5")
        other = make_object("post")
        other.set_meta("rating", "3")
        db_session.commit()

        equal = executor.execute({"object_type": "post", "meta_key": "rating", "meta_value": "5"})
        exists = executor.execute({"object_type": "post", "meta_key": "rating", "orderby": "ID", "order": "asc"})
        greater = executor.execute({
            "object_type": "post", "meta_key": "rating", "meta_value_numeric": 4, "meta_compare": ">",
        })

        assert equal.ids == [featured.id]
        assert exists.ids == [featured.id, other.id]
        assert greater.ids == [featured.id]

    def test_taxonomy_filter(self, db_session, executor, make_object):
        """taxonomy_filter supports IN and NOT IN."""
        news = make_object("post")
        news.set_terms("category", ["news"])
        other = make_object("post")
        other.set_terms("category", ["misc"])
        db_session.commit()

        tagged = executor.execute({"object_type": "post", "taxonomy_filter": [{"taxonomy": "category", "terms": ["news"]}]})
        untagged = executor.execute({
            "object_type": "post",
            "taxonomy_filter": [{"taxonomy": "category", "terms": ["news"], "operator": "NOT IN"}],
        })

        assert tagged.ids == [news.id]
        assert untagged.ids == [other.id]


class TestBatchFetch:
    """Tests for SqlObjectQuery.batch_fetch()"""

    def test_any_status_applies_no_filter(self, executor, make_object):
        """status=any loads trashed objects too."""
        trashed = make_object("page", status="trash")
        published = make_object("page")

        objects = executor.batch_fetch([trashed.id, published.id], "page", "any")

        assert {o.id for o in objects} == {trashed.id, published.id}

    def test_status_filter(self, executor, make_object):
        """A concrete status limits the rows."""
        draft = make_object("page", status="draft")
        published = make_object("page")

        objects = executor.batch_fetch([draft.id, published.id], "page", "publish")

        assert [o.id for o in objects] == [published.id]

    def test_other_type_ignored(self, executor, make_object):
        """Rows of another type are never returned."""
        post = make_object("post")

        assert executor.batch_fetch([post.id], "page", "any") == []
