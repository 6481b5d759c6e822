"""Options of the repository operations.

Every field is optional. ``timeout`` is in seconds; None uses the configured
default (GITREV_TIMEOUT).
"""
from dataclasses import dataclass, field
from datetime import datetime
from typing import List, Optional


@dataclass(frozen=True)
class LogOptions:
    # Maximum number of commits to return, None for all.
    max_count: Optional[int] = None
    # Number of commits to skip before returning.
    skip: int = 0
    # Only commits with a committer date at or after this time.
    since: Optional[datetime] = None
    # Only commits whose message matches this pattern.
    grep_pattern: str = ""
    # Match grep_pattern case-insensitively.
    regexp_ignore_case: bool = False
    # Only commits touching this path.
    path: str = ""
    timeout: Optional[float] = None


@dataclass(frozen=True)
class CommitByRevisionOptions:
    # Latest commit at the revision that touched this path.
    path: str = ""
    timeout: Optional[float] = None


@dataclass(frozen=True)
class CommitsSinceOptions:
    path: str = ""
    timeout: Optional[float] = None


@dataclass(frozen=True)
class DiffNameOnlyOptions:
    # Diff head against the merge base of base and head (base...head).
    needs_merge_base: bool = False
    # Only files equal to or under this path.
    path: str = ""
    timeout: Optional[float] = None


@dataclass(frozen=True)
class RevListCountOptions:
    path: str = ""
    timeout: Optional[float] = None


@dataclass(frozen=True)
class RevListOptions:
    path: str = ""
    timeout: Optional[float] = None


@dataclass(frozen=True)
class LatestCommitTimeOptions:
    timeout: Optional[float] = None


@dataclass(frozen=True)
class LsRemoteOptions:
    heads: bool = False
    tags: bool = False
    # Do not show peeled tags or pseudorefs.
    refs: bool = False
    patterns: List[str] = field(default_factory=list)
    timeout: Optional[float] = None


@dataclass(frozen=True)
class AddRemoteOptions:
    # Run git fetch once the remote is set up.
    fetch: bool = False
    # Add the remote as a mirror with --mirror=fetch.
    mirror_fetch: bool = False
    timeout: Optional[float] = None


@dataclass(frozen=True)
class RemoteURLGetOptions:
    # Push URLs instead of fetch URLs.
    push: bool = False
    # All URLs, not only the main one.
    all: bool = False
    timeout: Optional[float] = None


@dataclass(frozen=True)
class RemoteURLSetOptions:
    push: bool = False
    timeout: Optional[float] = None


@dataclass(frozen=True)
class RemoteOptions:
    """Options of remote operations that only take a timeout."""

    timeout: Optional[float] = None
