"""
Unit tests for the task lifecycle service.
Covers the create/get/list/update pipelines and best-effort notification.
"""
from unittest import mock

from bson import ObjectId
from django.test import SimpleTestCase
from pymongo.errors import ServerSelectionTimeoutError

from apps.core.event_service import TaskAction
from apps.tasks.config import TaskServiceConfig
from apps.tasks.exceptions import InvalidTaskId, SanitizationError, TaskValidationError
from apps.tasks.status import TaskStatus
from apps.tasks.store import MongoTaskStore

from .helpers import DUE_DATE, RecordingNotifier, failing_notifier, make_service


class CreateTaskTest(SimpleTestCase):
    """Test task creation through the service."""

    def setUp(self):
        self.notifier = RecordingNotifier()
        self.service = make_service(notifier=self.notifier)

    def test_create_defaults_to_open(self):
        """Test that status defaults to OPEN and description to empty."""
        task = self.service.create_task(title="Write report", due_date=DUE_DATE)

        self.assertEqual(task.status, TaskStatus.OPEN)
        self.assertEqual(task.title, "Write report")
        self.assertEqual(task.description, "")
        self.assertEqual(task.version, 1)

    def test_create_with_status_and_description(self):
        """Test supplied status and description are applied."""
        task = self.service.create_task(
            title="Write report",
            description="<i>Quarterly</i> numbers",
            due_date=DUE_DATE,
            status="в процессе",
        )
        self.assertEqual(task.status, TaskStatus.IN_PROGRESS)
        self.assertEqual(task.description, "Quarterly numbers")

    def test_create_sanitizes_title(self):
        """Test markup and surrounding whitespace are removed from the title."""
        task = self.service.create_task(title="  <b>Write</b> report ", due_date=DUE_DATE)
        self.assertEqual(task.title, "Write report")

    def test_create_is_persisted(self):
        """Test created task can be read back unchanged."""
        task = self.service.create_task(title="Write report", due_date=DUE_DATE)
        self.assertEqual(self.service.get_task(task.id), task)

    def test_create_publishes_created_event(self):
        """Test a created event is published with an aware timestamp."""
        task = self.service.create_task(title="Write report", due_date=DUE_DATE)

        self.assertEqual(len(self.notifier.events), 1)
        event = self.notifier.events[0]
        self.assertEqual(event.task_id, task.id)
        self.assertEqual(event.action, TaskAction.CREATED)
        self.assertIsNotNone(event.timestamp.tzinfo)

    def test_empty_title_rejected(self):
        """Test empty title - should raise title required."""
        with self.assertRaises(TaskValidationError) as ctx:
            self.service.create_task(title="", due_date=DUE_DATE)
        self.assertEqual(ctx.exception.message, "Title is required")

    def test_markup_only_title_rejected(self):
        """Test a title that is blank once markup is stripped is not stored."""
        with self.assertRaises(TaskValidationError) as ctx:
            self.service.create_task(title="<b> </b>", due_date=DUE_DATE)
        self.assertEqual(ctx.exception.code, "title_required")
        self.assertEqual(self.service.list_tasks(), [])

    def test_long_title_rejected(self):
        """Test title over 100 characters."""
        with self.assertRaises(TaskValidationError) as ctx:
            self.service.create_task(title="x" * 101, due_date=DUE_DATE)
        self.assertIn("100", ctx.exception.message)

    def test_bad_due_date_rejected(self):
        """Test unparseable due date."""
        with self.assertRaises(TaskValidationError) as ctx:
            self.service.create_task(title="Write report", due_date="tomorrow-ish")
        self.assertEqual(ctx.exception.code, "invalid_due_date")

    def test_script_payload_rejected(self):
        """Test script payload in the title."""
        with self.assertRaises(SanitizationError):
            self.service.create_task(title="<b>alert(1)</b>", due_date=DUE_DATE)

    def test_description_length_checked_after_sanitization(self):
        """Test description limit applies to the sanitized text."""
        # Over 500 characters of input, 400 once markup is stripped
        description = "<b>" + "d" * 400 + "</b>" + "<i></i>" * 27
        task = self.service.create_task(title="Write report", description=description, due_date=DUE_DATE)
        self.assertEqual(len(task.description), 400)

    def test_oversized_description_rejected(self):
        """Test description over 500 characters."""
        with self.assertRaises(TaskValidationError) as ctx:
            self.service.create_task(title="Write report", description="d" * 501, due_date=DUE_DATE)
        self.assertEqual(ctx.exception.code, "description_too_long")

    def test_invalid_status_rejected(self):
        """Test status outside the REST vocabulary."""
        with self.assertRaises(TaskValidationError):
            self.service.create_task(title="Write report", due_date=DUE_DATE, status="DONE")

    def test_rejected_create_writes_and_publishes_nothing(self):
        """Test a failed create leaves no record and no event."""
        with self.assertRaises(TaskValidationError):
            self.service.create_task(title="Write report", due_date=DUE_DATE, status="DONE")
        self.assertEqual(self.service.list_tasks(), [])
        self.assertEqual(self.notifier.events, [])

    def test_configured_limits_apply(self):
        """Test limits from TaskServiceConfig override the defaults."""
        service = make_service(config=TaskServiceConfig(title_max_length=5))
        with self.assertRaises(TaskValidationError):
            service.create_task(title="Too long", due_date=DUE_DATE)


class GetTaskTest(SimpleTestCase):
    """Test single task lookup."""

    def setUp(self):
        self.service = make_service()

    def test_malformed_id_is_not_found(self):
        """Test malformed ObjectId string returns None."""
        self.assertIsNone(self.service.get_task("not-a-valid-id-format"))

    def test_unknown_id_is_not_found(self):
        """Test well-formed but unknown id returns None."""
        self.assertIsNone(self.service.get_task(str(ObjectId())))

    def test_wrong_type_is_invalid_id(self):
        """Test non-string id raises InvalidTaskId."""
        with self.assertRaises(InvalidTaskId) as ctx:
            self.service.get_task(123)
        self.assertEqual(str(ctx.exception), "Invalid task ID")

    def test_empty_id_is_invalid_id(self):
        """Test empty id raises InvalidTaskId."""
        with self.assertRaises(InvalidTaskId):
            self.service.get_task("")


class ListTasksTest(SimpleTestCase):
    """Test task listing and filtering."""

    def setUp(self):
        self.service = make_service()

    def test_list_all_newest_first(self):
        """Test tasks are listed newest first."""
        first = self.service.create_task(title="First", due_date=DUE_DATE)
        second = self.service.create_task(title="Second", due_date=DUE_DATE)

        self.assertEqual([t.id for t in self.service.list_tasks()], [second.id, first.id])

    def test_list_filtered(self):
        """Test filtering by REST status value."""
        self.service.create_task(title="Open", due_date=DUE_DATE)
        done = self.service.create_task(title="Done", due_date=DUE_DATE, status="завершена")

        self.assertEqual([t.id for t in self.service.list_tasks("завершена")], [done.id])

    def test_invalid_filter_fails_before_store(self):
        """Test an unknown filter is rejected without a store call."""
        store = mock.create_autospec(MongoTaskStore, instance=True)
        service = make_service(store=store)

        with self.assertRaises(TaskValidationError):
            service.list_tasks("INVALID_STATUS")
        store.list_tasks.assert_not_called()


class UpdateTaskTest(SimpleTestCase):
    """Test partial task updates."""

    def setUp(self):
        self.notifier = RecordingNotifier()
        self.service = make_service(notifier=self.notifier)
        self.task = self.service.create_task(
            title="Write report",
            description="Old text",
            due_date=DUE_DATE,
            status="в процессе",
        )

    def test_partial_update_changes_only_supplied_field(self):
        """Test omitted fields keep their stored values."""
        updated = self.service.update_task(self.task.id, {"description": "new text"})

        self.assertEqual(updated.description, "new text")
        self.assertEqual(updated.id, self.task.id)
        self.assertEqual(updated.title, self.task.title)
        self.assertEqual(updated.status, self.task.status)
        self.assertEqual(updated.due_date, self.task.due_date)
        self.assertEqual(updated.created_at, self.task.created_at)
        self.assertEqual(updated.version, self.task.version + 1)
        self.assertGreaterEqual(updated.updated_at, self.task.updated_at)

    def test_update_status_any_to_any(self):
        """Test any status may follow any other."""
        completed = self.service.update_task(self.task.id, {"status": "завершена"})
        reopened = self.service.update_task(self.task.id, {"status": "открыта"})

        self.assertEqual(completed.status, TaskStatus.COMPLETED)
        self.assertEqual(reopened.status, TaskStatus.OPEN)
        self.assertEqual(reopened.version, 3)

    def test_update_sanitizes_title(self):
        """Test updated title goes through sanitization."""
        updated = self.service.update_task(self.task.id, {"title": "<em>Ship</em> it"})
        self.assertEqual(updated.title, "Ship it")

    def test_update_can_clear_description(self):
        """Test description can be set to empty."""
        updated = self.service.update_task(self.task.id, {"description": ""})
        self.assertEqual(updated.description, "")

    def test_invalid_update_leaves_task_untouched(self):
        """Test one invalid field rejects the whole update."""
        with self.assertRaises(TaskValidationError):
            self.service.update_task(self.task.id, {"title": "Fine", "status": "nope"})

        stored = self.service.get_task(self.task.id)
        self.assertEqual(stored, self.task)

    def test_update_markup_only_title_rejected(self):
        """Test update to a markup-only title is rejected."""
        with self.assertRaises(TaskValidationError) as ctx:
            self.service.update_task(self.task.id, {"title": "<i>\t</i>"})

        self.assertEqual(ctx.exception.code, "title_required")
        self.assertEqual(self.service.get_task(self.task.id), self.task)

    def test_update_publishes_updated_event(self):
        """Test an updated event follows the created one."""
        self.service.update_task(self.task.id, {"title": "Renamed"})

        self.assertEqual([e.action for e in self.notifier.events], [TaskAction.CREATED, TaskAction.UPDATED])
        self.assertEqual(self.notifier.events[-1].task_id, self.task.id)

    def test_update_unknown_task(self):
        """Test unknown task returns None and publishes nothing."""
        self.assertIsNone(self.service.update_task(str(ObjectId()), {"title": "Renamed"}))
        self.assertEqual(len(self.notifier.events), 1)

    def test_update_malformed_id_is_not_found(self):
        """Test malformed id on update returns None."""
        self.assertIsNone(self.service.update_task("not-a-valid-id-format", {"title": "Renamed"}))

    def test_update_wrong_type_is_invalid_id(self):
        """Test None id on update raises InvalidTaskId."""
        with self.assertRaises(InvalidTaskId):
            self.service.update_task(None, {"title": "Renamed"})


class BestEffortNotificationTest(SimpleTestCase):
    """Test writes succeed when the notifier fails."""

    def setUp(self):
        self.notifier = failing_notifier()
        self.service = make_service(notifier=self.notifier)

    def test_create_survives_publish_failure(self):
        """Test create is kept when publishing fails."""
        with self.assertLogs("apps.tasks.services", level="ERROR"):
            task = self.service.create_task(title="Write report", due_date=DUE_DATE)

        self.assertEqual(self.service.get_task(task.id), task)
        self.notifier.publish.assert_called_once()

    def test_update_survives_publish_failure(self):
        """Test update is kept when publishing fails."""
        with self.assertLogs("apps.tasks.services", level="ERROR"):
            task = self.service.create_task(title="Write report", due_date=DUE_DATE)
            updated = self.service.update_task(task.id, {"title": "Renamed"})

        self.assertEqual(updated.title, "Renamed")
        self.assertEqual(updated.version, 2)
        self.assertEqual(self.notifier.publish.call_count, 2)

    def test_notify_reports_outcome(self):
        """Test notify_best_effort returns whether publishing worked."""
        with self.assertLogs("apps.tasks.services", level="ERROR"):
            self.assertFalse(self.service.notify_best_effort("abc", TaskAction.CREATED))
        self.assertTrue(make_service().notify_best_effort("abc", TaskAction.CREATED))


class StoreFailureTest(SimpleTestCase):
    """Test store errors reach the caller."""

    def test_store_errors_propagate(self):
        """Test store error propagates and nothing is published."""
        store = mock.create_autospec(MongoTaskStore, instance=True)
        store.create_task.side_effect = ServerSelectionTimeoutError("no servers")
        notifier = RecordingNotifier()
        service = make_service(store=store, notifier=notifier)

        with self.assertRaises(ServerSelectionTimeoutError):
            service.create_task(title="Write report", due_date=DUE_DATE)
        self.assertEqual(notifier.events, [])
