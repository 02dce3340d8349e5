"""
Tests for the host platform services: metadata, counting, permissions and error channels.
"""
import shutil
import tempfile
from datetime import datetime
from pathlib import Path

import pytest

from app.content.models import ContentItem
from app.content.store import ContentStore
from app.host.capabilities import ContentTypeRegistry
from app.host.errors import ErrorCollection, RequestHalted
from app.host.lifecycle import LifecycleOrchestrator
from app.host.platform import EDIT_USER, EDIT_USERS, HostEnvironment, HostPlatform
from app.user_management.services import UserService


class TestHostPlatform:
    """HostPlatform bound to one actor."""

    def setup_method(self):
        self.temp_dir = Path(tempfile.mkdtemp())
        user_data_dir = self.temp_dir / "user_data"
        user_data_dir.mkdir()
        self.user_service = UserService(user_data_dir, admin_user_ids=["admin"])
        self.store = ContentStore(self.temp_dir / "content")
        self.registry = ContentTypeRegistry(["post", "page"])

    def teardown_method(self):
        shutil.rmtree(self.temp_dir)

    def platform_for(self, actor_id):
        return HostPlatform(
            user_service=self.user_service,
            content_store=self.store,
            capabilities=self.registry.snapshot(),
            actor_id=actor_id,
        )

    def add_item(self, author_id, content_type="post", status="publish"):
        now = datetime.now().isoformat()
        self.store.save(ContentItem(
            id=self.store.new_id(),
            author_id=author_id,
            content_type=content_type,
            status=status,
            created_at=now,
            updated_at=now,
        ))

    def test_user_meta(self):
        """Test get/set/delete of user metadata."""
        host = self.platform_for("alice")

        assert host.get_user_meta("alice", "color") is None
        host.set_user_meta("alice", "color", "blue")
        assert host.get_user_meta("alice", "color") == "blue"

        assert host.delete_user_meta("alice", "color") is True
        assert host.delete_user_meta("alice", "color") is False
        assert host.get_user_meta("alice", "color") is None

    def test_add_user_meta_once(self):
        host = self.platform_for("alice")

        assert host.add_user_meta_once("alice", "flag", True) is True
        assert host.add_user_meta_once("alice", "flag", False) is False
        assert host.get_user_meta("alice", "flag") is True

    def test_meta_for_missing_user(self):
        host = self.platform_for(None)

        assert host.get_user_meta(None, "anything") is None
        assert host.delete_user_meta(None, "anything") is False

    def test_count_content_items(self):
        """Test counting by author and type, excluding trash by default."""
        self.add_item("alice")
        self.add_item("alice", status="draft")
        self.add_item("alice", status="trash")
        self.add_item("alice", content_type="page")
        self.add_item("bob")
        host = self.platform_for("alice")

        assert host.count_content_items("alice", "post") == 2
        assert host.count_content_items("alice", "post", exclude_statuses=()) == 3
        assert host.count_content_items("alice", "page") == 1
        assert host.count_content_items(None, "post") == 0

    def test_admin_capabilities(self):
        host = self.platform_for("admin")

        assert host.current_actor_can(EDIT_USERS) is True
        assert host.current_actor_can(EDIT_USER, "alice") is True

    def test_user_capabilities(self):
        """Test that regular users may edit only themselves."""
        host = self.platform_for("alice")

        assert host.current_actor_can(EDIT_USERS) is False
        assert host.current_actor_can(EDIT_USER, "alice") is True
        assert host.current_actor_can(EDIT_USER, "bob") is False
        assert host.current_actor_can(EDIT_USER) is False
        assert host.current_actor_can("manage_everything") is False

    def test_anonymous_has_no_capabilities(self):
        host = self.platform_for(None)

        assert host.current_actor_can(EDIT_USERS) is False
        assert host.actor_can_for_type("post", "create_posts") is False

    def test_content_type_capabilities(self):
        host = self.platform_for("alice")

        capabilities = host.get_content_type_capabilities("post")
        capabilities.create_posts = False

        assert host.actor_can_for_type("post", "create_posts") is False
        assert host.actor_can_for_type("page", "create_posts") is True
        assert host.actor_can_for_type("story", "create_posts") is False
        with pytest.raises(KeyError):
            host.get_content_type_capabilities("story")

    def test_halt_request(self):
        host = self.platform_for("alice")

        with pytest.raises(RequestHalted) as exc_info:
            host.halt_request_with_message("Stop right there.")
        assert exc_info.value.message == "Stop right there."
        assert exc_info.value.status_code == 403

    def test_attach_validation_error(self):
        host = self.platform_for("admin")
        errors = ErrorCollection()

        host.attach_validation_error(errors, "bad", "Bad value")
        host.attach_validation_error(errors, "fyi", "Heads up", blocking=False)

        assert errors.codes() == ["bad", "fyi"]
        assert [e.code for e in errors.blocking()] == ["bad"]
        assert [e.code for e in errors.advisories()] == ["fyi"]


class TestHostEnvironment:
    """Scope creation."""

    def setup_method(self):
        self.temp_dir = Path(tempfile.mkdtemp())
        user_data_dir = self.temp_dir / "user_data"
        user_data_dir.mkdir()
        self.orchestrator = LifecycleOrchestrator()
        self.registry = ContentTypeRegistry(["post"])
        self.environment = HostEnvironment(
            user_service=UserService(user_data_dir, admin_user_ids=[]),
            content_store=ContentStore(self.temp_dir / "content"),
            content_types=self.registry,
            orchestrator=self.orchestrator,
        )

    def teardown_method(self):
        shutil.rmtree(self.temp_dir)

    def test_open_scope_runs_app_init(self):
        """Test that capability filters see every new scope."""
        seen = []

        class Recorder:
            def filter_capabilities(self, scope):
                seen.append(scope.actor_id)
                scope.host.get_content_type_capabilities("post").publish_posts = False

        self.orchestrator.register(Recorder())

        scope = self.environment.open_scope("alice")

        assert seen == ["alice"]
        assert scope.actor_id == "alice"
        assert scope.host.get_content_type_capabilities("post").publish_posts is False
        assert self.registry.get("post").capabilities.publish_posts is True
