import subprocess

import pytest

from commiter.changes import StagedChange
from commiter.exceptions import GitError
from commiter.git import GitRepo, find_git_repo_root


class _Result:
    def __init__(self, stdout="", returncode=0, stderr=""):
        self.stdout = stdout
        self.returncode = returncode
        self.stderr = stderr


def test_run_git_command_success(monkeypatch, tmp_path):
    monkeypatch.setattr(subprocess, "run", lambda *a, **k: _Result("ok\n"))
    assert GitRepo(str(tmp_path))._run_git_command(["status"]) == "ok"


def test_run_git_command_called_process_error(monkeypatch, tmp_path):
    def fake_run(*args, **kwargs):
        raise subprocess.CalledProcessError(1, "git", stderr="bad\n")

    monkeypatch.setattr(subprocess, "run", fake_run)
    with pytest.raises(GitError) as ei:
        GitRepo(str(tmp_path))._run_git_command(["commit"])
    assert "failed" in str(ei.value)


def test_run_git_command_file_not_found(monkeypatch, tmp_path):
    def fake_run(*args, **kwargs):
        raise FileNotFoundError()

    monkeypatch.setattr(subprocess, "run", fake_run)
    with pytest.raises(GitError) as ei:
        GitRepo(str(tmp_path))._run_git_command(["add", "-A"])
    assert "not found" in str(ei.value)


def test_status_query_nonzero_exit_is_empty(monkeypatch, tmp_path):
    monkeypatch.setattr(
        subprocess,
        "run",
        lambda *a, **k: _Result("A\tignored.py\n", returncode=128, stderr="fatal"),
    )
    repo = GitRepo(str(tmp_path))
    assert repo.list_staged_changes() == []
    assert repo.get_staged_diff() == ""
    assert repo.current_branch() == ""


def test_status_query_missing_git_is_empty(monkeypatch, tmp_path):
    def fake_run(*args, **kwargs):
        raise FileNotFoundError("git")

    monkeypatch.setattr(subprocess, "run", fake_run)
    assert GitRepo(str(tmp_path)).list_staged_changes() == []


def test_list_staged_changes_parses_name_status(monkeypatch, tmp_path):
    calls = []

    def fake_run(cmd, **kwargs):
        calls.append(cmd)
        return _Result("A\tnew.py\nR087\told name.py\tnew name.py\n")

    monkeypatch.setattr(subprocess, "run", fake_run)
    changes = GitRepo(str(tmp_path)).list_staged_changes()
    assert calls == [["git", "diff", "--cached", "--name-status"]]
    assert changes == [
        StagedChange("A", "new.py"),
        StagedChange("R", "old name.py new name.py"),
    ]


def test_push_without_branch_raises(monkeypatch, tmp_path):
    monkeypatch.setattr(subprocess, "run", lambda *a, **k: _Result("", 1))
    with pytest.raises(GitError):
        GitRepo(str(tmp_path)).push()


def test_real_repo_staged_changes_and_diff(git_repo):
    (git_repo / "README.md").write_text("hello world\n")
    (git_repo / "added file.txt").write_text("new\n")
    repo = GitRepo(str(git_repo))
    assert repo.list_staged_changes() == []
    assert repo.get_staged_diff() == ""

    repo.stage_all()
    changes = repo.list_staged_changes()
    assert {c.status for c in changes} == {"A", "M"}
    assert StagedChange("A", "added file.txt") in changes
    assert "hello world" in repo.get_staged_diff()


def test_real_repo_commit_and_branch(git_repo):
    (git_repo / "a.txt").write_text("a\n")
    repo = GitRepo(str(git_repo))
    repo.stage_all()
    repo.commit("feat: add a")
    assert repo.list_staged_changes() == []
    assert repo.current_branch()


def test_find_git_repo_root(git_repo, tmp_path):
    nested = git_repo / "pkg"
    nested.mkdir()
    assert find_git_repo_root(nested).resolve() == git_repo.resolve()
    outside = tmp_path / "outside"
    outside.mkdir()
    # tmp_path itself is not a repository
    assert find_git_repo_root(outside) is None


def test_real_repo_non_utf8_diff_is_decoded_with_replacement(git_repo):
    (git_repo / "latin1.txt").write_bytes(b"caf\xe9\n")
    repo = GitRepo(str(git_repo))
    repo.stage_all()
    assert "caf\ufffd" in repo.get_staged_diff()
    assert [c.status for c in repo.list_staged_changes()] == ["A"]
