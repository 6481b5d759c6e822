"""Turn the textual output of git into structured data.

Nothing in here runs git; every function takes the captured stdout.
"""
from datetime import datetime, timedelta, timezone
from typing import List

from gitrev.errors import InvalidFormat, MalformedOutput
from gitrev.git_objects.identity import ObjectId
from gitrev.git_objects.models import Commit, Reference, Signature

FIELD_SEP = "\x1f"
RECORD_SEP = "\x00"

# hash, tree, parents, author name/email/date, committer name/email/date, raw message.
# Meant to be used with `git log -z --date=raw`, which NUL-terminates every record.
LOG_FORMAT = "--format=" + "%x1f".join(["%H", "%T", "%P", "%an", "%ae", "%ad", "%cn", "%ce", "%cd", "%B"])
_LOG_FIELDS = 10


def _decode(stdout: bytes) -> str:
    if isinstance(stdout, str):
        return stdout
    return stdout.decode("utf-8", errors="replace")


def parse_raw_date(text: str) -> datetime:
    """Parse git's raw date format, e.g. ``1581250680 +0800``."""
    parts = text.split()
    if len(parts) != 2:
        raise MalformedOutput(f"expected '<timestamp> <offset>', got {text!r}")
    stamp, offset = parts
    if not stamp.lstrip("-").isdigit():
        raise MalformedOutput(f"timestamp is not numeric: {stamp!r}")
    if len(offset) != 5 or offset[0] not in "+-" or not offset[1:].isdigit():
        raise MalformedOutput(f"invalid timezone offset: {offset!r}")

    delta = timedelta(hours=int(offset[1:3]), minutes=int(offset[3:5]))
    if offset[0] == "-":
        delta = -delta
    return datetime.fromtimestamp(int(stamp), timezone(delta))


def _parse_id(text: str, what: str) -> ObjectId:
    try:
        return ObjectId.from_hex(text.strip())
    except InvalidFormat as e:
        raise MalformedOutput(f"invalid {what} in git output: {text!r}") from e


def parse_commit_record(record: str) -> Commit:
    fields = record.split(FIELD_SEP, _LOG_FIELDS - 1)
    if len(fields) != _LOG_FIELDS:
        raise MalformedOutput(f"commit record has {len(fields)} fields, expected {_LOG_FIELDS}")

    commit_hash, tree, parents, an, ae, ad, cn, ce, cd, message = fields
    if not commit_hash.strip():
        raise MalformedOutput("commit record without hash")

    return Commit(
        id=_parse_id(commit_hash, "commit hash"),
        tree_id=_parse_id(tree, "tree hash"),
        parent_ids=tuple(_parse_id(p, "parent hash") for p in parents.split()),
        author=Signature(name=an, email=ae, when=parse_raw_date(ad)),
        committer=Signature(name=cn, email=ce, when=parse_raw_date(cd)),
        message=message,
    )


def parse_commit_records(stdout: bytes) -> List[Commit]:
    """Parse the output of ``git log -z --date=raw LOG_FORMAT``."""
    records = _decode(stdout).split(RECORD_SEP)
    commits = []
    for record in records:
        record = record.lstrip("\n")
        if not record.strip():
            continue
        commits.append(parse_commit_record(record))
    return commits


def parse_ids(stdout: bytes) -> List[ObjectId]:
    """One id per line (rev-list, log --format=%H). Order is kept."""
    return [_parse_id(line, "object id") for line in stdout_to_lines(stdout)]


def parse_name_only(stdout: bytes, sep: str = "\n") -> List[str]:
    """File names from ``diff --name-only``, in the order git printed them."""
    return [name for name in _decode(stdout).split(sep) if name]


def parse_refs(stdout: bytes) -> List[Reference]:
    refs = []
    for line in _decode(stdout).split("\n"):
        fields = line.split()
        if len(fields) < 2:
            continue
        refs.append(Reference(id=fields[0], refspec=fields[1]))
    return refs


def stdout_to_lines(stdout: bytes) -> List[str]:
    return [line.strip() for line in _decode(stdout).split("\n") if line.strip()]


def escape_path(path: str) -> str:
    """Escape a leading colon so git does not read it as pathspec magic."""
    if path.startswith(":"):
        return "\\" + path
    return path
