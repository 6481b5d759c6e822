"""Errors raised by gitrev and the matching of git's stderr onto them."""
from typing import List, Optional, Sequence


class GitError(Exception):
    pass


class InvalidFormat(GitError, ValueError):
    """Text that is not a 40 character hex object id."""


class MalformedOutput(GitError):
    """Output of git did not match the expected grammar."""


class ValidationError(GitError, ValueError):
    """Caller arguments rejected before running git."""


class RevisionNotExist(GitError):
    def __init__(self, rev: str = ""):
        self.rev = rev
        super().__init__(f"revision does not exist: {rev}" if rev else "revision does not exist")


class RemoteNotExist(GitError):
    def __init__(self, name: str = ""):
        self.name = name
        super().__init__(f"remote does not exist: {name}" if name else "remote does not exist")


class URLNotExist(GitError):
    pass


class DelAllNonPushURL(GitError):
    pass


class ExecutionFailure(GitError):
    """git exited non-zero, timed out or could not be started."""

    def __init__(
        self,
        args: Sequence[str],
        returncode: Optional[int] = None,
        stderr: str = "",
        timed_out: bool = False,
    ):
        self.args_list: List[str] = list(args)
        self.returncode = returncode
        self.stderr = stderr
        self.timed_out = timed_out

        cmd = " ".join(self.args_list)
        if timed_out:
            msg = f"git {cmd} timed out"
        elif returncode is None:
            msg = f"git {cmd} could not be executed"
        else:
            msg = f"git {cmd} (exit code {returncode})"
        if stderr:
            msg += f": {stderr.strip()}"
        super().__init__(msg)


# git has no structured error channel, its wording is matched here and nowhere else.
# The wording differs between git versions and between error:/fatal: prefixes.
_REVISION_NOT_EXIST = (
    "unknown revision",
    "bad revision",
    "not a valid object name",
    "Needed a single revision",
    "bad object",
    "invalid object name",
)
_AMBIGUOUS = "is ambiguous"
_REMOTE_NOT_EXIST = "No such remote"
_URL_NOT_EXIST = "No such URL found"
_DEL_ALL_NON_PUSH_URL = "Will not delete all non-push URLs"


def is_revision_not_exist(stderr: str) -> bool:
    stderr = stderr.lower()
    if _AMBIGUOUS in stderr:
        return False
    return any(pattern.lower() in stderr for pattern in _REVISION_NOT_EXIST)


def classify(failure: ExecutionFailure, rev: Optional[str] = None, remote: Optional[str] = None) -> GitError:
    """Map a failed git invocation onto the most specific error.

    ``rev`` enables revision classification, ``remote`` enables remote
    classification. Whatever is not recognized comes back unchanged.
    """
    if failure.timed_out:
        return failure

    stderr = failure.stderr
    if rev is not None and is_revision_not_exist(stderr):
        return RevisionNotExist(rev)
    if remote is not None:
        # checked before "No such remote", git prints both for a missing URL
        if _URL_NOT_EXIST in stderr:
            return URLNotExist(f"no such URL found for remote {remote}")
        if _REMOTE_NOT_EXIST in stderr:
            return RemoteNotExist(remote)
        if _DEL_ALL_NON_PUSH_URL in stderr:
            return DelAllNonPushURL(f"will not delete all non-push URLs of remote {remote}")
    return failure
