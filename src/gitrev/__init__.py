"""Read git history (commits, revisions, diffs, remotes) as Python objects."""
from gitrev.errors import (
    DelAllNonPushURL,
    ExecutionFailure,
    GitError,
    InvalidFormat,
    MalformedOutput,
    RemoteNotExist,
    RevisionNotExist,
    URLNotExist,
    ValidationError,
)
from gitrev.git_objects.identity import ObjectId, parse_id
from gitrev.git_objects.models import Commit, Reference, Signature
from gitrev.git_objects.parser import escape_path
from gitrev.history.options import (
    AddRemoteOptions,
    CommitByRevisionOptions,
    CommitsSinceOptions,
    DiffNameOnlyOptions,
    LatestCommitTimeOptions,
    LogOptions,
    LsRemoteOptions,
    RemoteOptions,
    RemoteURLGetOptions,
    RemoteURLSetOptions,
    RevListCountOptions,
    RevListOptions,
)
from gitrev.history.remote import is_url_accessible, ls_remote
from gitrev.history.repository import Repository, clone, init_repository, open_repository

__version__ = "0.1.0"
