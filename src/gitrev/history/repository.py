import logging
import os
from datetime import datetime
from pathlib import Path
from typing import Dict, List, NoReturn, Optional, Sequence, Union

from gitrev import command
from gitrev.errors import ExecutionFailure, MalformedOutput, RevisionNotExist, ValidationError, classify
from gitrev.git_objects.identity import ObjectId, is_full_hex
from gitrev.git_objects.models import Commit, Reference
from gitrev.git_objects.parser import (
    LOG_FORMAT,
    escape_path,
    parse_commit_records,
    parse_ids,
    parse_name_only,
    parse_raw_date,
    stdout_to_lines,
)
from gitrev.history import remote
from gitrev.history.cache import CommitCache
from gitrev.history.options import (
    AddRemoteOptions,
    CommitByRevisionOptions,
    CommitsSinceOptions,
    DiffNameOnlyOptions,
    LatestCommitTimeOptions,
    LogOptions,
    RemoteOptions,
    RemoteURLGetOptions,
    RemoteURLSetOptions,
    RevListCountOptions,
    RevListOptions,
)
from gitrev.history.resolver import resolve_to_identity

logger = logging.getLogger(__name__)

REFS_HEADS = "refs/heads/"

# ids per `git log --no-walk` invocation when loading many commits at once
_LOAD_CHUNK = 256


def _reraise(e: ExecutionFailure, rev: str) -> NoReturn:
    err = classify(e, rev=rev)
    if err is e:
        raise e
    raise err from e


class Repository:
    """A git working copy (or bare repository) on disk.

    Every parsed commit is kept in a cache owned by this instance; drop the
    instance to drop the cache.
    """

    def __init__(self, path: Union[str, Path]):
        self.path = Path(os.path.abspath(path))
        self.cache = CommitCache()

    def __repr__(self) -> str:
        return f"<Repository {self.path}>"

    def _run(self, args: List[str], timeout: Optional[float] = None) -> bytes:
        return command.run_git(args, cwd=self.path, timeout=timeout)

    def _load_commits(self, oids: Sequence[ObjectId], timeout: Optional[float] = None) -> List[Commit]:
        commits = []
        for start in range(0, len(oids), _LOAD_CHUNK):
            chunk = [str(oid) for oid in oids[start:start + _LOAD_CHUNK]]
            args = ["log", "--no-walk=unsorted", "-z", "--date=raw", LOG_FORMAT, *chunk, "--"]
            try:
                stdout = self._run(args, timeout)
            except ExecutionFailure as e:
                _reraise(e, " ".join(chunk))
            commits.extend(parse_commit_records(stdout))
        return commits

    def get_commit(self, oid: ObjectId, timeout: Optional[float] = None) -> Commit:
        """Commit with the given id, from the cache when possible."""
        def load(missing: ObjectId) -> Commit:
            commits = self._load_commits([missing], timeout)
            if len(commits) != 1 or commits[0].id != missing:
                raise MalformedOutput(f"expected commit {missing}, git printed {len(commits)} commits")
            return commits[0]

        return self.cache.get_or_load(oid, load)

    def get_commits(self, oids: Sequence[ObjectId], timeout: Optional[float] = None) -> List[Commit]:
        """Commits for ``oids`` in the same order. Cache misses are loaded in bulk."""
        missing = list(dict.fromkeys(oid for oid in oids if oid not in self.cache))
        if missing:
            logger.debug("loading %d uncached commits", len(missing))
            loaded: Dict[ObjectId, Commit] = {}
            for commit in self._load_commits(missing, timeout):
                loaded[commit.id] = self.cache.put(commit.id, commit)
            for oid in missing:
                if oid not in loaded:
                    raise MalformedOutput(f"git did not print commit {oid}")

        return [self.cache.get(oid) for oid in oids]

    def log(self, rev: str, opt: Optional[LogOptions] = None) -> List[Commit]:
        """Commits reachable from ``rev``, most recent first."""
        opt = opt or LogOptions()

        args = ["log", "-z", "--date=raw", LOG_FORMAT]
        if opt.max_count is not None:
            args.append(f"--max-count={opt.max_count}")
        if opt.skip > 0:
            args.append(f"--skip={opt.skip}")
        if opt.since is not None:
            # @<unix> is read as an exact 64-bit timestamp, --max-age would wrap past 2106
            args.append(f"--since=@{int(opt.since.timestamp())}")
        if opt.grep_pattern:
            args.append(f"--grep={opt.grep_pattern}")
        if opt.regexp_ignore_case:
            args.append("--regexp-ignore-case")
        args.extend([rev, "--"])
        if opt.path:
            args.append(escape_path(opt.path))

        try:
            stdout = self._run(args, opt.timeout)
        except ExecutionFailure as e:
            _reraise(e, rev)

        return [self.cache.put(commit.id, commit) for commit in parse_commit_records(stdout)]

    def commit_by_revision(self, rev: str, opt: Optional[CommitByRevisionOptions] = None) -> Commit:
        """The commit ``rev`` names, or with ``opt.path`` the latest commit at ``rev`` touching that path.

        Raises:
            RevisionNotExist: ``rev`` does not resolve to a commit.
        """
        opt = opt or CommitByRevisionOptions()

        if opt.path:
            args = ["log", "-1", "--format=%H", rev, "--", escape_path(opt.path)]
            try:
                ids = parse_ids(self._run(args, opt.timeout))
            except ExecutionFailure as e:
                _reraise(e, rev)
            if not ids:
                raise RevisionNotExist(rev)
            return self.get_commit(ids[0], opt.timeout)

        if is_full_hex(rev):
            cached = self.cache.get(ObjectId.from_hex(rev))
            if cached is not None:
                return cached

        oid = resolve_to_identity(self.path, rev, opt.timeout)
        return self.get_commit(oid, opt.timeout)

    def commits_since(self, rev: str, since: datetime, opt: Optional[CommitsSinceOptions] = None) -> List[Commit]:
        """Commits reachable from ``rev`` committed at or after ``since``."""
        opt = opt or CommitsSinceOptions()
        return self.log(rev, LogOptions(since=since, path=opt.path, timeout=opt.timeout))

    def diff_name_only(self, base: str, head: str, opt: Optional[DiffNameOnlyOptions] = None) -> List[str]:
        """Names of files changed between ``base`` and ``head``.

        With ``needs_merge_base`` the diff is taken from the merge base of the
        two revisions to ``head`` instead of from ``base`` directly.
        """
        opt = opt or DiffNameOnlyOptions()

        args = ["diff", "--name-only", "-z"]
        if opt.needs_merge_base:
            args.append(f"{base}...{head}")
        else:
            args.extend([base, head])
        args.append("--")
        if opt.path:
            args.append(escape_path(opt.path))

        try:
            stdout = self._run(args, opt.timeout)
        except ExecutionFailure as e:
            self._reraise_diff(e, base, head, opt.timeout)

        return parse_name_only(stdout, sep="\0")

    def _reraise_diff(self, e: ExecutionFailure, base: str, head: str, timeout: Optional[float]) -> NoReturn:
        err = classify(e, rev=base)
        if not isinstance(err, RevisionNotExist):
            raise e
        # stderr quotes whatever git choked on, ask rev-parse which endpoint is missing
        for rev in (base, head):
            try:
                resolve_to_identity(self.path, rev, timeout)
            except RevisionNotExist as missing:
                raise missing from e
        raise err from e

    def _rev_list_args(self, refspecs: Sequence[str], path: str) -> List[str]:
        if isinstance(refspecs, str):
            raise ValidationError(f"refspecs must be a sequence of strings, got {refspecs!r}")
        if not refspecs:
            raise ValidationError("must have at least one refspec")
        args = [*refspecs, "--"]
        if path:
            args.append(escape_path(path))
        return args

    def rev_list_count(self, refspecs: Sequence[str], opt: Optional[RevListCountOptions] = None) -> int:
        """Number of commits reachable from ``refspecs``."""
        opt = opt or RevListCountOptions()
        args = ["rev-list", "--count"] + self._rev_list_args(refspecs, opt.path)

        try:
            stdout = self._run(args, opt.timeout)
        except ExecutionFailure as e:
            _reraise(e, " ".join(refspecs))

        text = stdout.decode("utf-8", errors="replace").strip()
        try:
            return int(text)
        except ValueError:
            raise MalformedOutput(f"rev-list --count printed {text!r}")

    def rev_list(self, refspecs: Sequence[str], opt: Optional[RevListOptions] = None) -> List[Commit]:
        """Commits reachable from ``refspecs`` in the order rev-list prints them."""
        opt = opt or RevListOptions()
        args = ["rev-list"] + self._rev_list_args(refspecs, opt.path)

        try:
            stdout = self._run(args, opt.timeout)
        except ExecutionFailure as e:
            _reraise(e, " ".join(refspecs))

        return self.get_commits(parse_ids(stdout), opt.timeout)

    def latest_commit_time(self, branch: str = "", opt: Optional[LatestCommitTimeOptions] = None) -> datetime:
        """Committer time of the tip of ``branch``, or of the newest ref when no branch is given."""
        opt = opt or LatestCommitTimeOptions()

        if branch:
            # for-each-ref matches prefixes and globs, log reads exactly this ref
            args = ["log", "-1", "--date=raw", "--format=%cd", REFS_HEADS + branch, "--"]
            try:
                stdout = self._run(args, opt.timeout)
            except ExecutionFailure as e:
                _reraise(e, branch)
        else:
            args = ["for-each-ref", "--count=1", "--sort=-committerdate", "--format=%(committerdate:raw)"]
            stdout = self._run(args, opt.timeout)

        lines = stdout_to_lines(stdout)
        if not lines:
            raise RevisionNotExist(branch)
        return parse_raw_date(lines[0])

    # Remotes

    def add_remote(self, name: str, url: str, opt: Optional[AddRemoteOptions] = None) -> None:
        remote.add_remote(self.path, name, url, opt)

    def remove_remote(self, name: str, opt: Optional[RemoteOptions] = None) -> None:
        remote.remove_remote(self.path, name, opt)

    def remotes_list(self, opt: Optional[RemoteOptions] = None) -> List[str]:
        return remote.remotes_list(self.path, opt)

    def remote_url_get(self, name: str, opt: Optional[RemoteURLGetOptions] = None) -> List[str]:
        return remote.remote_url_get(self.path, name, opt)

    def remote_url_set_first(self, name: str, new_url: str, opt: Optional[RemoteURLSetOptions] = None) -> None:
        remote.remote_url_set_first(self.path, name, new_url, opt)

    def remote_url_set_regex(
        self, name: str, url_regex: str, new_url: str, opt: Optional[RemoteURLSetOptions] = None
    ) -> None:
        remote.remote_url_set_regex(self.path, name, url_regex, new_url, opt)

    def remote_url_add(self, name: str, new_url: str, opt: Optional[RemoteURLSetOptions] = None) -> None:
        remote.remote_url_add(self.path, name, new_url, opt)

    def remote_url_del_regex(self, name: str, url_regex: str, opt: Optional[RemoteURLSetOptions] = None) -> None:
        remote.remote_url_del_regex(self.path, name, url_regex, opt)

    def ls_remote(self, name: str = "origin") -> List[Reference]:
        """References of the remote called ``name``."""
        return remote.ls_remote(name, cwd=self.path)


def open_repository(path: Union[str, Path]) -> Repository:
    path = Path(os.path.abspath(path))
    if not path.is_dir():
        raise NotADirectoryError(f"no such directory: {path}")
    return Repository(path)


def init_repository(path: Union[str, Path], bare: bool = False, timeout: Optional[float] = None) -> Repository:
    path = Path(os.path.abspath(path))
    path.mkdir(parents=True, exist_ok=True)
    args = ["init"]
    if bare:
        args.append("--bare")
    command.run_git(args, cwd=path, timeout=timeout)
    return Repository(path)


def clone(source: str, target: Union[str, Path], timeout: Optional[float] = None) -> Repository:
    target = Path(os.path.abspath(target))
    target.parent.mkdir(parents=True, exist_ok=True)
    command.run_git(["clone", source, str(target)], timeout=timeout)
    return Repository(target)
