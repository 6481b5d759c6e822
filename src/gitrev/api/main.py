from datetime import datetime
from typing import List, Optional

from fastapi import FastAPI, Query, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from gitrev.api.schemas import CommitResponse, CountResponse, DiffResponse, LatestCommitTimeResponse
from gitrev.api.service import GitService
from gitrev.config import get_settings
from gitrev.errors import ExecutionFailure, MalformedOutput, RevisionNotExist, ValidationError

import logging

settings = get_settings()

# Configure Logging
logging.basicConfig(
    level=settings.log_level,
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
)
logger = logging.getLogger(__name__)

app = FastAPI(title="Git History Explorer API")

# In production, set ALLOWED_ORIGINS to a comma-separated list of domains
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.allowed_origins,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

# Repository defaults to CWD, override with GITREV_REPO.
service = GitService(settings.repo_path)


@app.exception_handler(RevisionNotExist)
async def revision_not_exist_handler(request: Request, exc: RevisionNotExist):
    return JSONResponse(status_code=404, content={"detail": str(exc)})


@app.exception_handler(ValidationError)
async def validation_error_handler(request: Request, exc: ValidationError):
    return JSONResponse(status_code=422, content={"detail": str(exc)})


@app.exception_handler(ExecutionFailure)
async def execution_failure_handler(request: Request, exc: ExecutionFailure):
    logger.error(f"git failed: {exc}")
    return JSONResponse(status_code=500, content={"detail": str(exc), "stderr": exc.stderr})


@app.exception_handler(MalformedOutput)
async def malformed_output_handler(request: Request, exc: MalformedOutput):
    logger.error(f"unexpected git output: {exc}")
    return JSONResponse(status_code=500, content={"detail": str(exc)})


@app.get("/api/commits", response_model=List[CommitResponse])
def get_commits(
    rev: str = "HEAD",
    limit: int = Query(50, ge=0),
    skip: int = Query(0, ge=0),
    since: Optional[datetime] = None,
    path: str = "",
):
    """Log of a revision, most recent first."""
    return service.get_commits(rev, limit, skip, since, path)


@app.get("/api/commits/{rev:path}", response_model=CommitResponse)
def get_commit(rev: str, path: str = ""):
    """Details of the commit a revision points to."""
    return service.get_commit(rev, path)


@app.get("/api/diff", response_model=DiffResponse)
def get_diff(base: str, head: str, merge_base: bool = False, path: str = ""):
    """Names of files changed between two revisions."""
    return service.get_diff(base, head, merge_base, path)


@app.get("/api/rev-list", response_model=List[CommitResponse])
def rev_list(refspec: List[str] = Query(default=[]), path: str = ""):
    return service.rev_list(refspec, path)


@app.get("/api/rev-list/count", response_model=CountResponse)
def rev_list_count(refspec: List[str] = Query(default=[]), path: str = ""):
    return service.rev_list_count(refspec, path)


@app.get("/api/branches/{branch:path}/latest-commit-time", response_model=LatestCommitTimeResponse)
def latest_commit_time(branch: str):
    return service.latest_commit_time(branch)


@app.get("/health")
def health_check():
    return {"status": "ok", "repo": str(service.repo_path)}
