import os
import subprocess
from dataclasses import dataclass, field
from pathlib import Path
from typing import Dict

import pytest

BASE_TIME = 1_600_000_000


def git_env(when: int = BASE_TIME) -> Dict[str, str]:
    env = dict(os.environ)
    env.update(
        {
            "GIT_AUTHOR_NAME": "Ada",
            "GIT_AUTHOR_EMAIL": "ada@example.com",
            "GIT_AUTHOR_DATE": f"{when} +0200",
            "GIT_COMMITTER_NAME": "Bob",
            "GIT_COMMITTER_EMAIL": "bob@example.com",
            "GIT_COMMITTER_DATE": f"{when} +0200",
            # keep the user's gitconfig (signing, hooks, templates) out of the fixtures
            "GIT_CONFIG_NOSYSTEM": "1",
            "GIT_CONFIG_GLOBAL": os.devnull,
        }
    )
    return env


def run(repo: Path, *args: str, when: int = BASE_TIME) -> str:
    cmd = ["git", *args]
    result = subprocess.run(cmd, cwd=repo, capture_output=True, text=True, env=git_env(when))
    if result.returncode != 0:
        raise RuntimeError(f"Failed to run git command: {cmd}\n{result.stderr}")
    return result.stdout.strip()


def commit(repo: Path, message: str, when: int, files: Dict[str, str]) -> str:
    for name, content in files.items():
        path = repo / name
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_text(content)
    run(repo, "add", "-A", when=when)
    run(repo, "commit", "-q", "-m", message, when=when)
    return run(repo, "rev-parse", "HEAD")


@dataclass
class HistoryRepo:
    path: Path
    ids: Dict[str, str] = field(default_factory=dict)

    def __getitem__(self, name: str) -> str:
        return self.ids[name]


@pytest.fixture(scope="session")
def history(tmp_path_factory):
    """A repository with two diverged branches.

        c1 -- c2 -- c3            main
               \\
                f1 -- f2          feature

    c1 adds README.txt, c2 changes it and adds src/app.py (tagged v1),
    c3 changes README.txt and adds docs/guide.md, f1 adds fix.txt,
    f2 changes src/app.py. Commit times are BASE_TIME + 0/100/200/300/400.
    """
    repo = tmp_path_factory.mktemp("history")
    run(repo, "init", "-q")
    run(repo, "symbolic-ref", "HEAD", "refs/heads/main")

    h = HistoryRepo(path=repo)
    h.ids["c1"] = commit(repo, "Initial commit", BASE_TIME, {"README.txt": "hello\n"})
    h.ids["c2"] = commit(
        repo, "Add app", BASE_TIME + 100, {"README.txt": "hello world\n", "src/app.py": "print('v1')\n"}
    )
    run(repo, "tag", "v1")
    run(repo, "branch", "feature")
    h.ids["c3"] = commit(
        repo, "Write guide", BASE_TIME + 200, {"README.txt": "hello again\n", "docs/guide.md": "# Guide\n"}
    )

    run(repo, "checkout", "-q", "feature")
    h.ids["f1"] = commit(repo, "Add fix", BASE_TIME + 300, {"fix.txt": "fixed\n"})
    h.ids["f2"] = commit(
        repo, "Update app\n\nLonger body.", BASE_TIME + 400, {"src/app.py": "print('v2')\n"}
    )
    run(repo, "checkout", "-q", "main")
    return h
