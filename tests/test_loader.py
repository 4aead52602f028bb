"""Tests for opencode_session.services.loader."""

from datetime import datetime

import pytest

from opencode_session.services.loader import StorageLoader, parse_log_date
from helpers import tree_size


@pytest.fixture
def loader(storage_paths):
    return StorageLoader(storage_paths)


def _expected_session_size(paths, project_id, session_id, message_ids):
    total = tree_size(paths.message_dir(session_id))
    total += sum(tree_size(paths.part_dir(m)) for m in message_ids)
    total += tree_size(paths.diff_file(session_id))
    total += tree_size(paths.todo_file(session_id))
    total += tree_size(paths.session_file(project_id, session_id))
    return total


# ---------------------------------------------------------------------------
# Projects
# ---------------------------------------------------------------------------

class TestLoadProjects:
    def test_loads_by_id(self, loader, store, worktree):
        store.project("p1", worktree)
        store.project("p2", "/gone")
        projects = loader.load_projects()
        assert set(projects) == {"p1", "p2"}
        assert projects["p1"].worktree == str(worktree)
        assert projects["p1"].vcs == "git"

    def test_skips_malformed(self, loader, store, storage_paths, worktree):
        store.project("p1", worktree)
        bad = storage_paths.project_file("broken")
        bad.write_text("{oops")
        (storage_paths.project_root / "noid.json").write_text('{"worktree": "/x"}')
        assert set(loader.load_projects()) == {"p1"}

    def test_missing_root(self, loader):
        assert loader.load_projects() == {}


# ---------------------------------------------------------------------------
# Sessions
# ---------------------------------------------------------------------------

class TestLoadSessions:
    def test_size_formula(self, loader, store, storage_paths, worktree):
        store.project("p1", worktree)
        store.full_session("p1", "s1", worktree, messages=3, parts=2)

        sessions = loader.load_sessions(loader.load_projects())
        assert len(sessions) == 1
        s = sessions[0]
        expected = _expected_session_size(
            storage_paths, "p1", "s1", ["s1-msg0", "s1-msg1", "s1-msg2"],
        )
        assert s.size_bytes == expected
        assert s.message_count == 3
        assert s.project_worktree == str(worktree)

    def test_empty_session_size_is_record_size(self, loader, store, worktree):
        record = store.session("p1", "s1", worktree)
        s = loader.load_sessions({})[0]
        assert s.size_bytes == record.stat().st_size
        assert s.message_count == 0

    def test_orphan_flag(self, loader, store, worktree, tmp_path):
        store.session("p1", "alive", worktree)
        store.session("p1", "dead", tmp_path / "deleted-dir")
        by_id = {s.id: s for s in loader.load_sessions({})}
        assert by_id["alive"].is_orphan is False
        assert by_id["dead"].is_orphan is True

    def test_unknown_project_worktree_defaults_to_root(self, loader, store, worktree):
        store.session("unknown", "s1", worktree)
        assert loader.load_sessions({})[0].project_worktree == "/"

    def test_sorted_by_updated_desc(self, loader, store, worktree):
        store.session("p1", "old", worktree, updated=100)
        store.session("p1", "new", worktree, updated=300)
        store.session("p2", "mid", worktree, updated=200)
        ids = [s.id for s in loader.load_sessions({})]
        assert ids == ["new", "mid", "old"]

    def test_malformed_session_skipped(self, loader, store, storage_paths, worktree):
        store.session("p1", "good", worktree)
        storage_paths.session_file("p1", "bad").write_text("not json")
        assert [s.id for s in loader.load_sessions({})] == ["good"]

    def test_stray_file_in_session_root_ignored(self, loader, store, storage_paths, worktree):
        store.session("p1", "s1", worktree)
        (storage_paths.session_root / "stray.json").write_text("{}")
        assert [s.id for s in loader.load_sessions({})] == ["s1"]

    def test_part_dirs_of_other_sessions_not_counted(self, loader, store, worktree):
        store.full_session("p1", "s1", worktree)
        store.full_session("p1", "s2", worktree)
        sessions = loader.load_sessions({})
        # Identical shapes, so sizes match only if nothing leaks across sessions
        assert sessions[0].size_bytes == sessions[1].size_bytes


# ---------------------------------------------------------------------------
# Project infos
# ---------------------------------------------------------------------------

class TestLoadProjectInfos:
    def test_totals_match_sessions(self, loader, store, worktree):
        store.project("p1", worktree)
        store.full_session("p1", "s1", worktree)
        store.full_session("p1", "s2", worktree, messages=1)
        data = loader.load_all_data()
        project = data.projects[0]
        assert project.session_count == 2
        assert project.total_size_bytes == sum(s.size_bytes for s in project.sessions)
        assert project.is_orphan is False
        assert project.has_record is True

    def test_placeholder_for_unknown_project(self, loader, store, tmp_path):
        store.session("ghost", "s1", tmp_path / "a", created=50, updated=500)
        store.session("ghost", "s2", tmp_path / "b", created=10, updated=100)
        infos = loader.load_project_infos(loader.load_sessions({}), {})
        assert len(infos) == 1
        ghost = infos[0]
        assert ghost.id == "ghost"
        assert ghost.is_orphan is True
        assert ghost.has_record is False
        assert ghost.worktree == str(tmp_path / "a")
        assert ghost.time.created == 10
        assert ghost.time.updated == 500

    def test_placeholder_without_directory(self, loader, store):
        store.session("ghost", "s1", "")
        ghost = loader.load_all_data().projects[0]
        assert ghost.worktree == "/unknown"

    def test_project_with_no_sessions(self, loader, store, worktree):
        store.project("empty", worktree)
        info = loader.load_all_data().projects[0]
        assert info.session_count == 0
        assert info.total_size_bytes == 0
        assert info.sessions == ()

    def test_orphan_project(self, loader, store, tmp_path):
        store.project("p1", tmp_path / "removed")
        assert loader.load_all_data().projects[0].is_orphan is True

    def test_every_session_in_exactly_one_project(self, loader, store, worktree):
        store.project("p1", worktree)
        store.session("p1", "a", worktree)
        store.session("p2", "b", worktree)
        store.session("p2", "c", worktree)
        data = loader.load_all_data()
        owned = [s.id for p in data.projects for s in p.sessions]
        assert sorted(owned) == sorted(s.id for s in data.sessions)

    def test_sorted_by_updated_desc(self, loader, store, worktree):
        store.project("old", worktree, updated=1)
        store.project("new", worktree, updated=9)
        assert [p.id for p in loader.load_all_data().projects] == ["new", "old"]


# ---------------------------------------------------------------------------
# Logs
# ---------------------------------------------------------------------------

class TestLogs:
    def test_parse_log_date(self):
        assert parse_log_date("2026-01-17T071231.log") == datetime(2026, 1, 17, 7, 12, 31)

    def test_parse_log_date_fallback(self):
        now = datetime(2030, 1, 1)
        assert parse_log_date("random.log", now=now) == now

    def test_load_logs_newest_first(self, loader, store):
        store.log("2026-01-17T071231.log", "aaa")
        store.log("2026-02-01T000000.log", "bbbbb")
        store.log("notes.txt")
        logs = loader.load_logs()
        assert [log.filename for log in logs] == ["2026-02-01T000000.log", "2026-01-17T071231.log"]
        assert logs[0].size_bytes == 5


# ---------------------------------------------------------------------------
# Per-entity loaders
# ---------------------------------------------------------------------------

class TestDetailLoaders:
    def test_load_messages_sorted(self, loader, store):
        store.message("s1", "m-late", created=20)
        store.message("s1", "m-early", created=10)
        assert [m.id for m in loader.load_messages("s1")] == ["m-early", "m-late"]

    def test_load_parts_sorted(self, loader, store):
        store.part("s1", "m1", "b", start=5)
        store.part("s1", "m1", "a", start=5)
        store.part("s1", "m1", "c", start=1)
        assert [p.id for p in loader.load_parts("m1")] == ["c", "a", "b"]

    def test_load_todos(self, loader, store):
        store.todos("s1", [{"id": "t1", "content": "write", "status": "done", "priority": "low"}])
        todos = loader.load_todos("s1")
        assert len(todos) == 1
        assert todos[0].content == "write"

    def test_load_todos_missing_or_malformed(self, loader, store, storage_paths):
        assert loader.load_todos("none") == []
        store.todos("s1", {"not": "a list"})
        assert loader.load_todos("s1") == []

    def test_project_storage_info(self, loader, store, worktree):
        store.full_session("p1", "s1", worktree, messages=2, parts=3)
        store.full_session("p1", "s2", worktree, messages=1, parts=1)
        info = loader.get_project_storage_info("p1")
        assert info.session_files == 2
        assert info.message_files == 3
        assert info.part_files == 7
        assert info.diff_size > 0
        assert info.todo_size > 0

    def test_project_storage_info_missing(self, loader):
        info = loader.get_project_storage_info("nope")
        assert info.session_files == 0
        assert info.part_files == 0


# ---------------------------------------------------------------------------
# Snapshot
# ---------------------------------------------------------------------------

class TestLoadAllData:
    def test_idempotent(self, loader, store, worktree, tmp_path):
        store.project("p1", worktree)
        store.full_session("p1", "s1", worktree, updated=5)
        store.full_session("p1", "s2", worktree, updated=5)
        store.session("ghost", "s3", tmp_path / "gone")
        store.log("2026-01-17T071231.log")
        assert loader.load_all_data() == loader.load_all_data()

    def test_empty_store(self, loader):
        data = loader.load_all_data()
        assert data.sessions == []
        assert data.projects == []
        assert data.logs == []

    def test_orphan_views(self, loader, store, worktree, tmp_path):
        store.project("p1", worktree)
        store.session("p1", "ok", worktree)
        store.session("p1", "lost", tmp_path / "gone")
        store.project("p2", tmp_path / "gone-too")
        data = loader.load_all_data()
        assert [s.id for s in data.orphan_sessions] == ["lost"]
        assert [p.id for p in data.orphan_projects] == ["p2"]
