import threading

import pytest

from conftest import FakeTasksClient
from triage.dates import parse_instant
from triage.engine import TriageEngine, build_insert_body
from triage.errors import AuthenticationMissing, ResolutionFailure
from triage.models import Task


@pytest.fixture
def inbox_items():
    return [
        {"id": "t1", "title": "👪 Book summer trip 🔥 This Week", "notes": "bring sunscreen", "status": "needsAction", "due": "2024-07-01T00:00:00.000Z"},
        {"id": "t2", "title": "Buy milk", "status": "needsAction"},
        {"id": "t3", "title": "Square monthly report", "status": "completed"},
        {"id": "t4", "title": "🛠️ Paint the living room", "status": "needsAction"},
        {"title": "partial record"},
    ]


@pytest.fixture
def client(remote_lists, inbox_items):
    return FakeTasksClient(remote_lists, {"L-inbox": inbox_items})


@pytest.fixture
def engine(client, settings):
    return TriageEngine(client, settings)


def test_sync_moves_resolvable_items_and_counts_all_inspected(engine, client):
    result = engine.sync_default_list()

    # home_improvement has no remote list, buy milk stays in default
    assert result.moved == 2
    assert result.inspected == 5
    remaining = [item.get("id") for item in client.items["L-inbox"]]
    assert remaining == ["t2", "t4", None]
    assert [i["title"] for i in client.items["L-family"]] == ["👪 Book summer trip 🔥 This Week"]
    assert [i["title"] for i in client.items["L-square"]] == ["Square monthly report"]


def test_sync_inserts_before_delete_and_appends_audit_line(engine, client):
    engine.sync_default_list()

    mutations = [call for call in client.calls if call[0] in ("insert_task", "delete_task")]
    assert mutations[0][:2] == ("insert_task", "L-family")
    assert mutations[1] == ("delete_task", "L-inbox", "t1")

    body = mutations[0][2]
    assert body["notes"] == "bring sunscreen\nTarget: family | Urgency: high"
    assert body["due"] == "2024-07-01T00:00:00.000Z"
    assert body["status"] == "needsAction"
    assert "completed" not in body


def test_sync_stamps_completion_for_completed_items(engine, client):
    engine.sync_default_list()

    square_body = [call[2] for call in client.calls_named("insert_task") if call[1] == "L-square"][0]
    assert square_body["status"] == "completed"
    assert parse_instant(square_body["completed"])


def test_sync_isolates_failed_insert(engine, client):
    client.fail_insert_titles.add("👪 Book summer trip 🔥 This Week")

    result = engine.sync_default_list()

    assert result.moved == 1
    assert result.inspected == 5
    assert "t1" in [item.get("id") for item in client.items["L-inbox"]]
    assert ("delete_task", "L-inbox", "t1") not in client.calls
    assert ("delete_task", "L-inbox", "t3") in client.calls


def test_sync_failed_delete_leaves_duplicate_not_loss(engine, client):
    client.fail_delete_ids.add("t1")

    result = engine.sync_default_list()

    assert result.moved == 1
    assert "t1" in [item.get("id") for item in client.items["L-inbox"]]
    assert len(client.items["L-family"]) == 1


def test_sync_stops_before_next_item_when_cancelled(engine, client):
    cancel = threading.Event()
    cancel.set()

    result = engine.sync_default_list(cancel=cancel)

    assert result.moved == 0
    assert result.inspected == 0
    assert client.calls_named("insert_task") == []


def test_operations_require_credential(remote_lists, settings):
    engine = TriageEngine(FakeTasksClient(remote_lists, token=None), settings)

    with pytest.raises(AuthenticationMissing):
        engine.sync_default_list()
    with pytest.raises(AuthenticationMissing):
        engine.bulk_archive_completed()


def test_sync_fails_without_default_list(settings):
    client = FakeTasksClient([{"id": "L-family", "title": "Family"}])

    with pytest.raises(ResolutionFailure):
        TriageEngine(client, settings).sync_default_list()
    assert client.calls_named("list_tasks") == []


def test_bulk_archive_clears_each_resolved_list_once(engine, client):
    cleared = engine.bulk_archive_completed()

    assert cleared == 3
    assert [call[1] for call in client.calls_named("clear_completed")] == [
        "L-family",
        "L-square",
        "L-inbox",
    ]


def test_move_tasks_to_list_requires_known_destination(engine, client):
    task = Task(id="t2", title="Buy milk", list_id="L-inbox", target_list="default", urgency="medium")

    with pytest.raises(ResolutionFailure):
        engine.move_tasks_to_list("L-missing", [task])
    assert client.calls_named("insert_task") == []


def test_move_tasks_to_list_moves_and_isolates_failures(engine, client):
    tasks = [
        Task(id="t2", title="Buy milk", list_id="L-inbox", target_list="default", urgency="medium", due="2024-03-05"),
        Task(id="t4", title="🛠️ Paint the living room", list_id="L-inbox", target_list="home_improvement", urgency="medium"),
        Task(id="t3", title="Square monthly report", list_id="L-inbox", target_list="square", urgency="medium", status="completed", completed="2024-03-01T08:00:00Z"),
    ]
    client.fail_insert_titles.add("🛠️ Paint the living room")

    result = engine.move_tasks_to_list("L-family", tasks)

    assert result.moved == 2
    bodies = [call[2] for call in client.calls_named("insert_task")]
    assert bodies[0]["due"] == "2024-03-05T00:00:00.000Z"
    assert bodies[2]["completed"] == "2024-03-01T08:00:00.000Z"
    assert ("delete_task", "L-inbox", "t4") not in client.calls
    assert [i.get("id") for i in client.items["L-inbox"]] == ["t1", "t4", None]


def test_quick_add_routes_by_title(engine, client):
    engine.quick_add_task("Square invoice urgent", notes="from phone")

    call = client.calls_named("insert_task")[0]
    assert call[1] == "L-square"
    assert call[2] == {
        "title": "Square invoice urgent",
        "notes": "from phone\nTarget: square | Urgency: high",
        "status": "needsAction",
    }


def test_quick_add_explicit_key_falls_back_to_default(engine, client):
    engine.quick_add_task("Paint fence", list_key="home_improvement")

    call = client.calls_named("insert_task")[0]
    assert call[1] == "L-inbox"
    assert call[2]["notes"] == "Target: home_improvement | Urgency: medium"


def test_quick_add_rejects_unknown_key(engine, client):
    with pytest.raises(ValueError):
        engine.quick_add_task("Paint fence", list_key="garage")
    assert client.calls == []


def test_reorder_issues_single_move_call(engine, client):
    engine.reorder_task("L-inbox", "t3", "t1")

    assert client.calls_named("move_task") == [("move_task", "L-inbox", "t3", "t1")]


def test_fetch_tasklists_with_tasks_projects_and_flags_default(engine):
    tasklists = engine.fetch_tasklists_with_tasks()

    assert [(tl.id, tl.is_default) for tl in tasklists] == [
        ("L-inbox", True),
        ("L-family", False),
        ("L-square", False),
    ]
    inbox = tasklists[0]
    assert [t.id for t in inbox.tasks] == ["t1", "t2", "t3", "t4"]
    assert inbox.tasks[0].target_list == "family"
    assert inbox.tasks[0].urgency == "high"
    assert inbox.tasks[0].list_id == "L-inbox"


def test_snapshot_is_capped(engine, client):
    snapshot = engine.fetch_default_task_snapshot(limit=2)

    assert snapshot.error is None
    assert [t.id for t in snapshot.tasks] == ["t1", "t2"]
    assert ("list_tasks", "L-inbox", 2) in client.calls


def test_snapshot_zero_limit_is_empty_not_default(engine, client):
    snapshot = engine.fetch_default_task_snapshot(limit=0)

    assert snapshot.tasks == []
    assert snapshot.error is None
    assert client.calls_named("list_tasks") == []


def test_snapshot_rejects_negative_limit(engine, client):
    with pytest.raises(ValueError):
        engine.fetch_default_task_snapshot(limit=-1)
    assert client.calls == []


def test_snapshot_degrades_on_failure(settings, remote_lists):
    client = FakeTasksClient(remote_lists, token=None)

    snapshot = TriageEngine(client, settings).fetch_default_task_snapshot()

    assert snapshot.tasks == []
    assert "Not authenticated" in snapshot.error


def test_build_insert_body_drops_malformed_due():
    body = build_insert_body(title="x", notes="", status=None, due="soon", completed=None)

    assert body == {"title": "x", "notes": None, "status": "needsAction", "due": None}


def test_clear_completed_in_list_clears_only_that_list(engine, client):
    engine.clear_completed_in_list("L-family")

    assert client.calls_named("clear_completed") == [("clear_completed", "L-family")]
