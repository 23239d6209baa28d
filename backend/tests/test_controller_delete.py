"""
Tests for ObjectsController.delete_item().

Tests cover:
- Existence checked before permissions
- Soft delete (trash) and its failure states
- Permanent delete
- Delete failures reported as 500
"""

import pytest

from objects_api.models import StoredObject
from objects_api.resources import PAGES
from objects_api.services.objects import (
    ObjectEventBus,
    ObjectEventType,
    ObjectsController,
    ResourceConfig,
    SqlObjectQuery,
    StoredObjectAdapter,
)
from objects_api.services.permissions import PermissionContext, RolePermissionGate
from objects_api.dependencies import make_object_lookup
from shared.config.constants import TRASH_STATUS_META_KEY
from shared.config.settings import Settings
from shared.utils.exceptions import (
    AlreadyDeletedError,
    DeleteFailedError,
    ForbiddenError,
    NotFoundError,
    NotSupportedError,
)


class ExplodingAdapter(StoredObjectAdapter):
    def delete(self, obj, hard):
        raise RuntimeError("storage unavailable")


class NoopAdapter(StoredObjectAdapter):
    def delete(self, obj, hard):
        return None


def controller_with(adapter_class, db_session, config=PAGES, events=None):
    gate = RolePermissionGate(PermissionContext({"sub": "1", "roles": ["ADMIN"]}), make_object_lookup(db_session))
    return ObjectsController(
        config,
        adapter_class(db_session, config.descriptor),
        SqlObjectQuery(db_session),
        gate,
        events=events,
        app_settings=Settings(),
    )


class TestDeletePreconditions:
    """Checks that run before anything is deleted."""

    def test_missing_before_permission(self, make_controller, pages_config):
        """A missing object is 404 even for anonymous requesters."""
        with pytest.raises(NotFoundError):
            make_controller(pages_config, requester="anonymous").delete_item(999)

    def test_anonymous_denied(self, db_session, make_controller, make_object, pages_config):
        """Anonymous requesters get 401 and the object is kept."""
        page = make_object("page")

        with pytest.raises(ForbiddenError) as exc_info:
            make_controller(pages_config, requester="anonymous").delete_item(page.id)

        assert exc_info.value.status_code == 401
        assert exc_info.value.code == "user_cannot_delete_page"
        db_session.expire_all()
        assert db_session.get(StoredObject, page.id).status == "publish"

    def test_other_author_denied(self, make_controller, make_object, pages_config):
        """Authors cannot delete objects of other authors."""
        page = make_object("page", author_id=3)

        with pytest.raises(ForbiddenError) as exc_info:
            make_controller(pages_config, requester="other_author").delete_item(page.id)

        assert exc_info.value.status_code == 403


class TestSoftDelete:
    """Tests for trashing objects."""

    def test_trash(self, db_session, make_controller, make_object, pages_config):
        """Soft delete moves the object to the trash and remembers its status."""
        page = make_object("page", status="draft", author_id=3)

        result = make_controller(pages_config, requester="author").delete_item(page.id)

        assert result["deleted"] is True
        assert result["previous"]["status"] == "draft"
        db_session.expire_all()
        stored = db_session.get(StoredObject, page.id)
        assert stored.status == "trash"
        assert stored.get_meta(TRASH_STATUS_META_KEY) == "draft"

    def test_already_trashed(self, make_controller, make_object, pages_config):
        """A second soft delete is 410."""
        page = make_object("page")
        controller = make_controller(pages_config)
        controller.delete_item(page.id)

        with pytest.raises(AlreadyDeletedError) as exc_info:
            controller.delete_item(page.id)

        assert exc_info.value.status_code == 410

    def test_trash_disabled(self, db_session, make_controller, make_object, pages_config):
        """Without trash retention soft delete is 501 and nothing changes."""
        page = make_object("page")

        with pytest.raises(NotSupportedError) as exc_info:
            make_controller(pages_config, app_settings=Settings(empty_trash_days=0)).delete_item(page.id)

        assert exc_info.value.status_code == 501
        db_session.expire_all()
        assert db_session.get(StoredObject, page.id).status == "publish"

    def test_trashable_hook(self, make_controller, make_object):
        """The resource hook can refuse trash per object."""
        config = ResourceConfig(
            descriptor=PAGES.descriptor,
            rest_base=PAGES.rest_base,
            trashable=lambda default, obj: default and not obj.sticky,
        )
        sticky = make_object("page", sticky=True)
        normal = make_object("page")
        controller = make_controller(config)

        with pytest.raises(NotSupportedError):
            controller.delete_item(sticky.id)
        assert controller.delete_item(normal.id)["deleted"] is True

    def test_noop_delete_fails(self, db_session, make_object):
        """An object still outside the trash after delete is a 500."""
        page = make_object("page")

        with pytest.raises(DeleteFailedError) as exc_info:
            controller_with(NoopAdapter, db_session).delete_item(page.id)

        assert exc_info.value.status_code == 500
        assert exc_info.value.code == "cannot_delete"


class TestForceDelete:
    """Tests for permanent deletes."""

    def test_force_delete(self, db_session, make_controller, make_object, pages_config):
        """force removes the row and returns the previous envelope."""
        page = make_object("page", title="Gone")
        page_id = page.id

        result = make_controller(pages_config).delete_item(page_id, force=True)

        assert set(result) == {"deleted", "previous"}
        assert result["deleted"] is True
        assert result["previous"]["id"] == page_id
        assert result["previous"]["title"] == "Gone"
        db_session.expire_all()
        assert db_session.get(StoredObject, page_id) is None

    def test_force_delete_trashed(self, db_session, make_controller, make_object, pages_config):
        """Trashed objects can still be deleted permanently."""
        page = make_object("page", status="trash")
        page_id = page.id

        result = make_controller(pages_config).delete_item(page_id, force=True)

        assert result["previous"]["status"] == "trash"
        db_session.expire_all()
        assert db_session.get(StoredObject, page_id) is None

    def test_force_ignores_trash_support(self, make_controller, make_object, pages_config):
        """Permanent delete works without trash retention."""
        page = make_object("page")

        controller = make_controller(pages_config, app_settings=Settings(empty_trash_days=0))

        assert controller.delete_item(page.id, force=True)["deleted"] is True

    def test_adapter_error_wrapped(self, db_session, make_object):
        """Unexpected adapter errors become DeleteFailedError."""
        page = make_object("page")

        with pytest.raises(DeleteFailedError) as exc_info:
            controller_with(ExplodingAdapter, db_session).delete_item(page.id, force=True)

        assert isinstance(exc_info.value.__cause__, RuntimeError)


class TestDeleteEvents:
    """Tests for the deleted event."""

    def test_trash_event_carries_delete_response(self, make_controller, make_object, pages_config):
        """Soft delete events carry the same body the client receives."""
        bus = ObjectEventBus()
        events = []
        bus.subscribe(ObjectEventType.OBJECT_DELETED, events.append)
        page = make_object("page")

        result = make_controller(pages_config, events=bus).delete_item(page.id, request={"force": False})

        assert len(events) == 1
        assert events[0].object_id == page.id
        assert events[0].response == result
        assert events[0].response["previous"]["status"] == "publish"
        assert events[0].obj.status == "trash"
        assert events[0].request == {"force": False}

    def test_force_event_carries_delete_response(self, make_controller, make_object, pages_config):
        """Permanent delete events carry the deleted flag and the previous envelope."""
        bus = ObjectEventBus()
        events = []
        bus.subscribe(ObjectEventType.OBJECT_DELETED, events.append)
        page = make_object("page")
        page_id = page.id

        result = make_controller(pages_config, events=bus).delete_item(page_id, force=True)

        assert events[0].response == result
        assert events[0].response["deleted"] is True
        assert events[0].response["previous"]["id"] == page_id

    def test_failed_delete_emits_nothing(self, db_session, make_object):
        """No event when the delete did not happen."""
        page = make_object("page")
        bus = ObjectEventBus()
        events = []
        bus.subscribe(ObjectEventType.OBJECT_DELETED, events.append)
        controller = controller_with(NoopAdapter, db_session, events=bus)

        with pytest.raises(DeleteFailedError):
            controller.delete_item(page.id)

        assert events == []
