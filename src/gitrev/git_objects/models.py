from dataclasses import dataclass, field
from datetime import datetime
from typing import Tuple

from gitrev.git_objects.identity import ObjectId


@dataclass(frozen=True)
class Signature:
    name: str
    email: str
    # timezone aware, keeps the offset git recorded
    when: datetime

    @property
    def timestamp(self) -> int:
        return int(self.when.timestamp())

    def __str__(self) -> str:
        return f"{self.name} <{self.email}>"


@dataclass(frozen=True)
class Commit:
    id: ObjectId
    tree_id: ObjectId
    author: Signature
    committer: Signature
    message: str
    parent_ids: Tuple[ObjectId, ...] = field(default_factory=tuple)

    @property
    def summary(self) -> str:
        """First line of the commit message."""
        lines = self.message.splitlines()
        return lines[0] if lines else ""

    @property
    def parent_count(self) -> int:
        return len(self.parent_ids)

    @property
    def is_merge(self) -> bool:
        return len(self.parent_ids) > 1


@dataclass(frozen=True)
class Reference:
    # ls-remote reports whatever the remote sends, so the id stays text
    id: str
    refspec: str
