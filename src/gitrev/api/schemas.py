from datetime import datetime
from typing import List

from pydantic import BaseModel


class SignatureResponse(BaseModel):
    name: str
    email: str
    when: datetime
    timestamp: int


class CommitResponse(BaseModel):
    oid: str
    tree_oid: str
    parent_oids: List[str]
    author: SignatureResponse
    committer: SignatureResponse
    summary: str
    message: str


class DiffResponse(BaseModel):
    base: str
    head: str
    merge_base: bool
    files: List[str]


class CountResponse(BaseModel):
    refspecs: List[str]
    count: int


class LatestCommitTimeResponse(BaseModel):
    branch: str
    time: datetime
    timestamp: int
