"""Tests for WorkspaceOrchestrator and initialize_workspace with a fake backend."""

from pathlib import Path

import pytest

from pygit_workspace import (
    BufferedOutputHandler,
    Classification,
    CloneError,
    Mode,
    NoRepositoriesFoundError,
    NullOutputHandler,
    ProjectListExistsError,
    ProjectRegistry,
    SyncState,
    Workspace,
    WorkspaceConfig,
    WorkspaceOrchestrator,
    aggregate,
    compile_patterns,
    initialize_workspace,
    parse_project_list,
)

from fakes import FakeBackend, FakeGitRepository


def _workspace(root: Path, lines: list[str], ignore: list[str] = ()) -> Workspace:
    return Workspace(root, ProjectRegistry(parse_project_list(lines)), compile_patterns(ignore))


class TestStatus:
    def test_missing_repository(self, tmp_path: Path):
        ws = _workspace(tmp_path, ["lib | url"])
        buf = BufferedOutputHandler()
        reports = WorkspaceOrchestrator(ws, WorkspaceConfig(), buf, FakeBackend()).status()
        assert len(reports) == 1
        assert reports[0].exists is False
        assert ("error", ("lib: Missing repository", 0)) in buf.messages
        assert aggregate(reports).exit_code == 1

    def test_sorted_order_and_ignored_excluded(self, tmp_path: Path):
        backend = FakeBackend()
        for name in ("b", "a", "archive-old"):
            (tmp_path / name).mkdir()
            backend.repos[tmp_path / name] = FakeGitRepository({"main": ("x", "x")})
        ws = _workspace(tmp_path, ["b | u", "archive-old | u", "a | u"], ["^archive"])

        reports = WorkspaceOrchestrator(ws, WorkspaceConfig(), NullOutputHandler(), backend).status()
        assert [r.path for r in reports] == ["a", "b"]
        assert aggregate(reports).up_to_date is True

    def test_repository_error_isolated(self, tmp_path: Path):
        backend = FakeBackend()
        (tmp_path / "broken").mkdir()
        (tmp_path / "ok").mkdir()
        backend.repos[tmp_path / "ok"] = FakeGitRepository({"main": ("x", "x")})
        ws = _workspace(tmp_path, ["broken | u", "ok | u"])

        buf = BufferedOutputHandler()
        reports = WorkspaceOrchestrator(ws, WorkspaceConfig(), buf, backend).status()
        assert reports[0].error is not None
        assert "not a repository" in reports[0].error
        assert reports[1].error is None
        assert reports[1].branches[0].sync is SyncState.IN_SYNC

        lines = [args[0] for _level, args in buf.messages]
        assert lines.index("broken:") < lines.index("ok:")
        error_line = lines[lines.index("broken:") + 1]
        assert error_line.startswith("Error: ") and "not a repository" in error_line
        assert aggregate(reports).errors == 1

    def test_repository_error_isolated_in_parallel(self, tmp_path: Path):
        backend = FakeBackend()
        for name in ("a", "broken", "c"):
            (tmp_path / name).mkdir()
        for name in ("a", "c"):
            backend.repos[tmp_path / name] = FakeGitRepository({"main": ("x", "x")})
        ws = _workspace(tmp_path, ["a | u", "broken | u", "c | u"])

        buf = BufferedOutputHandler()
        config = WorkspaceConfig(parallel=True, max_workers=3)
        reports = WorkspaceOrchestrator(ws, config, buf, backend).status()
        assert [r.path for r in reports] == ["a", "broken", "c"]
        assert [r.error is None for r in reports] == [True, False, True]
        expected = f"Error: git open failed in {tmp_path / 'broken'}: not a repository"
        assert ("error", (expected, 1)) in buf.messages

    def test_parallel_matches_sequential_order(self, tmp_path: Path):
        names = [f"repo{i:02d}" for i in range(12)]
        backend = FakeBackend()
        for name in names:
            (tmp_path / name).mkdir()
            backend.repos[tmp_path / name] = FakeGitRepository({"main": ("x", "y")})
        ws = _workspace(tmp_path, [f"{n} | u" for n in reversed(names)])

        buf = BufferedOutputHandler()
        config = WorkspaceConfig(parallel=True, max_workers=4)
        reports = WorkspaceOrchestrator(ws, config, buf, backend).status(Mode.NONE)

        assert [r.path for r in reports] == names
        headers = [args[0] for level, args in buf.messages if args[0].endswith(":")]
        assert headers == [f"{n}:" for n in names]
        assert aggregate(reports).out_of_sync == 12

    def test_no_projects(self, tmp_path: Path):
        ws = _workspace(tmp_path, [])
        assert WorkspaceOrchestrator(ws, WorkspaceConfig(), NullOutputHandler(), FakeBackend()).status() == []


class TestUpdate:
    def test_clones_missing_projects(self, tmp_path: Path):
        (tmp_path / "present").mkdir()
        backend = FakeBackend()
        ws = _workspace(tmp_path, ["present | u0", "lib | u1 | up1", "app | u2"])

        cloned = WorkspaceOrchestrator(ws, WorkspaceConfig(), NullOutputHandler(), backend).update()
        assert cloned == ["app", "lib"]
        assert [url for url, _dest in backend.cloned] == ["u2", "u1"]
        assert backend.repos[tmp_path / "lib"].urls == {"origin": "u1", "upstream": "up1"}
        assert backend.repos[tmp_path / "app"].urls == {"origin": "u2"}

    def test_fail_fast_on_clone_error(self, tmp_path: Path):
        backend = FakeBackend(failing_urls={"bad"})
        ws = _workspace(tmp_path, ["a | ok1", "b | bad", "c | ok2"])

        with pytest.raises(CloneError) as exc_info:
            WorkspaceOrchestrator(ws, WorkspaceConfig(), NullOutputHandler(), backend).update()
        assert exc_info.value.project_path == "b"
        assert [url for url, _dest in backend.cloned] == ["ok1", "bad"]
        assert not (tmp_path / "c").exists()

    def test_ignored_not_cloned(self, tmp_path: Path):
        backend = FakeBackend()
        ws = _workspace(tmp_path, ["archive-old | u"], ["^archive"])
        assert WorkspaceOrchestrator(ws, WorkspaceConfig(), NullOutputHandler(), backend).update() == []
        assert backend.cloned == []


class TestCheck:
    def test_classification(self, tmp_path: Path):
        for name in ("lib", "archive-old", "stray", "lib/vendor"):
            (tmp_path / name / ".git").mkdir(parents=True)
        ws = _workspace(tmp_path, ["lib | u", "archive-old | u", "gone | u"], ["^archive"])

        items = WorkspaceOrchestrator(ws, WorkspaceConfig(), NullOutputHandler(), FakeBackend()).check()
        assert {i.path: i.classification for i in items} == {
            "archive-old": Classification.IGNORED,
            "gone": Classification.MISSING,
            "lib": Classification.KNOWN,
            "stray": Classification.UNKNOWN,
        }


class TestInitializeWorkspace:
    def test_writes_project_list(self, tmp_path: Path):
        backend = FakeBackend()
        for name, urls in (("b", {"origin": "url-b", "upstream": "up-b"}),
                           ("a", {"origin": "url-a"}),
                           ("local", {})):
            (tmp_path / name / ".git").mkdir(parents=True)
            backend.repos[tmp_path / name] = FakeGitRepository(urls=urls)

        list_path = initialize_workspace(tmp_path, WorkspaceConfig(), NullOutputHandler(), backend)
        assert list_path == tmp_path / ".projects.gws"
        assert list_path.read_text() == "a | url-a\nb | url-b | up-b\n"

    def test_existing_list_rejected(self, tmp_path: Path):
        (tmp_path / ".projects.gws").write_text("")
        with pytest.raises(ProjectListExistsError):
            initialize_workspace(tmp_path, WorkspaceConfig(), NullOutputHandler(), FakeBackend())

    def test_nothing_found(self, tmp_path: Path):
        with pytest.raises(NoRepositoriesFoundError):
            initialize_workspace(tmp_path, WorkspaceConfig(), NullOutputHandler(), FakeBackend())
        assert not (tmp_path / ".projects.gws").exists()
