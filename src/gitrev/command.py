"""Running the git executable."""
import logging
import subprocess
from pathlib import Path
from typing import Optional, Sequence, Union

from gitrev.config import get_settings
from gitrev.errors import ExecutionFailure

logger = logging.getLogger(__name__)


def run_git(
    args: Sequence[str],
    cwd: Optional[Union[str, Path]] = None,
    timeout: Optional[float] = None,
) -> bytes:
    """Run ``git <args>`` in ``cwd`` and return its stdout.

    Args:
        args: Git command arguments (without 'git' prefix).
        cwd: Working directory, usually the repository path.
        timeout: Seconds before the process is killed. Falls back to the
            configured default when None.

    Raises:
        ExecutionFailure: git exited non-zero, timed out or is not installed.
    """
    settings = get_settings()
    if timeout is None:
        timeout = settings.timeout

    cmd = [settings.git_binary, *args]
    logger.debug("running %s in %s (timeout=%s)", cmd, cwd, timeout)
    try:
        result = subprocess.run(
            cmd,
            cwd=str(cwd) if cwd is not None else None,
            capture_output=True,
            timeout=timeout,
            check=True,
        )
    except subprocess.TimeoutExpired as e:
        logger.debug("git %s timed out after %ss", args, timeout)
        raise ExecutionFailure(args, stderr=_decode(e.stderr), timed_out=True) from e
    except subprocess.CalledProcessError as e:
        stderr = _decode(e.stderr)
        logger.debug("git exits with %d, dir: %r, args: %r, stderr: %r", e.returncode, cwd, args, stderr)
        raise ExecutionFailure(args, e.returncode, stderr) from e
    except FileNotFoundError as e:
        # missing git binary or missing cwd
        raise ExecutionFailure(args, stderr=str(e)) from e

    return result.stdout


def _decode(data: Optional[bytes]) -> str:
    if not data:
        return ""
    return data.decode("utf-8", errors="replace")
