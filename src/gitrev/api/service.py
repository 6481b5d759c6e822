import logging
from datetime import datetime
from pathlib import Path
from typing import List, Optional

from gitrev.api.schemas import CommitResponse, CountResponse, DiffResponse, LatestCommitTimeResponse, SignatureResponse
from gitrev.git_objects.models import Commit, Signature
from gitrev.history.options import CommitByRevisionOptions, DiffNameOnlyOptions, LogOptions, RevListCountOptions, RevListOptions
from gitrev.history.repository import Repository

logger = logging.getLogger(__name__)


class GitService:
    def __init__(self, repo_path: Path = Path(".")):
        self.repo = Repository(repo_path)

    @property
    def repo_path(self) -> Path:
        return self.repo.path

    def open(self, repo_path: Path):
        """Point the service at another repository. The old commit cache is dropped with it."""
        self.repo = Repository(repo_path)
        logger.info(f"Serving git history of {self.repo.path}")

    def get_commits(
        self,
        rev: str = "HEAD",
        limit: int = 50,
        skip: int = 0,
        since: Optional[datetime] = None,
        path: str = "",
    ) -> List[CommitResponse]:
        commits = self.repo.log(rev, LogOptions(max_count=limit, skip=skip, since=since, path=path))
        return [self._to_response(c) for c in commits]

    def get_commit(self, rev: str, path: str = "") -> CommitResponse:
        return self._to_response(self.repo.commit_by_revision(rev, CommitByRevisionOptions(path=path)))

    def get_diff(self, base: str, head: str, merge_base: bool = False, path: str = "") -> DiffResponse:
        files = self.repo.diff_name_only(base, head, DiffNameOnlyOptions(needs_merge_base=merge_base, path=path))
        return DiffResponse(base=base, head=head, merge_base=merge_base, files=files)

    def rev_list(self, refspecs: List[str], path: str = "") -> List[CommitResponse]:
        commits = self.repo.rev_list(refspecs, RevListOptions(path=path))
        return [self._to_response(c) for c in commits]

    def rev_list_count(self, refspecs: List[str], path: str = "") -> CountResponse:
        count = self.repo.rev_list_count(refspecs, RevListCountOptions(path=path))
        return CountResponse(refspecs=refspecs, count=count)

    def latest_commit_time(self, branch: str) -> LatestCommitTimeResponse:
        when = self.repo.latest_commit_time(branch)
        return LatestCommitTimeResponse(branch=branch, time=when, timestamp=int(when.timestamp()))

    def _signature(self, sig: Signature) -> SignatureResponse:
        return SignatureResponse(name=sig.name, email=sig.email, when=sig.when, timestamp=sig.timestamp)

    def _to_response(self, commit: Commit) -> CommitResponse:
        return CommitResponse(
            oid=str(commit.id),
            tree_oid=str(commit.tree_id),
            parent_oids=[str(p) for p in commit.parent_ids],
            author=self._signature(commit.author),
            committer=self._signature(commit.committer),
            summary=commit.summary,
            message=commit.message,
        )
