from datetime import timedelta

import pytest

from gitrev.errors import MalformedOutput
from gitrev.git_objects.identity import ObjectId
from gitrev.git_objects.models import Reference
from gitrev.git_objects.parser import (
    escape_path,
    parse_commit_records,
    parse_ids,
    parse_name_only,
    parse_raw_date,
    parse_refs,
    stdout_to_lines,
)

C1 = "0eedd79eba4394bbef888c804e899731644367fe"
C2 = "4e59b72440188e7c2578299fc28ea425fbe9aece"
C3 = "978fb7f6388b49b532fbef8b856681cfa6fcaa0a"
TREE = "4b825dc642cb6eb9a060e54bf8d69288fbee4904"


def record(sha, parents="", author_date="1581250680 +0800", committer_date="1581250700 -0130", message="Subject\n"):
    return "\x1f".join(
        [sha, TREE, parents, "Ada", "ada@example.com", author_date, "Bob", "bob@example.com", committer_date, message]
    )


def log_output(*records):
    return "".join(r + "\x00" for r in records).encode()


@pytest.mark.parametrize(
    "path, expected",
    [
        ("", ""),
        ("normal", "normal"),
        (":normal", "\\:normal"),
        ("a:b", "a:b"),
    ],
)
def test_escape_path(path, expected):
    assert escape_path(path) == expected


def test_parse_commit_records():
    out = log_output(
        record(C3, parents=f"{C1} {C2}", message="Merge branch 'feature'\n\nBody text.\n"),
        record(C2, parents=C1),
        record(C1),
    )
    commits = parse_commit_records(out)

    assert [str(c.id) for c in commits] == [C3, C2, C1]

    merge = commits[0]
    assert merge.is_merge
    assert merge.parent_ids == (ObjectId.from_hex(C1), ObjectId.from_hex(C2))
    assert merge.message == "Merge branch 'feature'\n\nBody text.\n"
    assert merge.summary == "Merge branch 'feature'"
    assert str(merge.tree_id) == TREE

    root = commits[2]
    assert root.parent_ids == ()
    assert root.parent_count == 0
    assert root.author.name == "Ada"
    assert root.author.email == "ada@example.com"
    assert root.author.timestamp == 1581250680
    assert root.author.when.utcoffset() == timedelta(hours=8)
    assert root.committer.name == "Bob"
    assert root.committer.timestamp == 1581250700
    assert root.committer.when.utcoffset() == -timedelta(hours=1, minutes=30)


def test_message_kept_verbatim():
    message = "subject\n\n  indented\n\ttab\x1fseparator in body\n\n"
    commits = parse_commit_records(log_output(record(C1, message=message)))
    assert commits[0].message == message


def test_parse_commit_records_empty():
    assert parse_commit_records(b"") == []
    assert parse_commit_records(b"\n") == []


@pytest.mark.parametrize(
    "bad",
    [
        record("", message="x"),
        record("nothex"),
        record(C1, author_date=""),
        record(C1, author_date="yesterday +0000"),
        record(C1, author_date="1581250680"),
        record(C1, committer_date="1581250680 0800"),
        record(C1, parents="abc"),
        "\x1f".join([C1, TREE, ""]),
    ],
)
def test_parse_commit_records_malformed(bad):
    with pytest.raises(MalformedOutput):
        parse_commit_records(log_output(bad))


def test_parse_raw_date():
    when = parse_raw_date("1581256638 -0700")
    assert int(when.timestamp()) == 1581256638
    assert when.utcoffset() == -timedelta(hours=7)


def test_parse_ids_keeps_order():
    out = f"{C3}\n{C1}\n{C2}\n\n".encode()
    assert [str(i) for i in parse_ids(out)] == [C3, C1, C2]
    assert parse_ids(b"") == []


def test_parse_ids_malformed():
    with pytest.raises(MalformedOutput):
        parse_ids(b"fatal: something\n")


def test_parse_name_only():
    out = b"src/b.txt\nREADME\n\nsrc/b.txt\n"
    # neither sorted nor deduplicated
    assert parse_name_only(out) == ["src/b.txt", "README", "src/b.txt"]
    assert parse_name_only(b"a b.txt\x00c\nd.txt\x00", sep="\0") == ["a b.txt", "c\nd.txt"]
    assert parse_name_only(b"") == []
    assert parse_name_only(b" \x00a.txt\x00", sep="\0") == [" ", "a.txt"]


def test_parse_refs():
    out = (
        f"{C1}\tHEAD\n"
        f"{C2}\trefs/heads/main\n"
        "garbage\n"
        "\n"
    ).encode()
    assert parse_refs(out) == [
        Reference(id=C1, refspec="HEAD"),
        Reference(id=C2, refspec="refs/heads/main"),
    ]


def test_stdout_to_lines():
    assert stdout_to_lines(b"origin\n  upstream \n\n") == ["origin", "upstream"]
