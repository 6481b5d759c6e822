"""Resolving revision expressions to object ids."""
from pathlib import Path
from typing import Optional, Union

from gitrev import command
from gitrev.errors import ExecutionFailure, MalformedOutput, ValidationError, classify
from gitrev.git_objects.identity import ObjectId
from gitrev.git_objects.parser import parse_ids


def is_range(rev: str) -> bool:
    """True for ``A..B`` and ``A...B`` expressions."""
    return ".." in rev


def resolve_to_identity(
    repo_path: Union[str, Path],
    rev: str,
    timeout: Optional[float] = None,
) -> ObjectId:
    """Resolve ``rev`` (branch, tag, full or abbreviated hash) to a commit id.

    Ranges are rejected, they only make sense to rev-list and diff. Ambiguous
    abbreviations are left to git and surface as ExecutionFailure.

    Raises:
        RevisionNotExist: git does not know ``rev``.
        ValidationError: ``rev`` is empty or a range.
    """
    if not rev:
        raise ValidationError("revision must not be empty")
    if is_range(rev):
        raise ValidationError(f"cannot resolve range {rev!r} to a single commit")

    try:
        stdout = command.run_git(["rev-parse", "--verify", rev + "^{commit}"], cwd=repo_path, timeout=timeout)
    except ExecutionFailure as e:
        err = classify(e, rev=rev)
        if err is e:
            raise
        raise err from e

    ids = parse_ids(stdout)
    if len(ids) != 1:
        raise MalformedOutput(f"rev-parse printed {len(ids)} object ids for {rev!r}")
    return ids[0]
