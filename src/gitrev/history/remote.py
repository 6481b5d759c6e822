"""Listing and configuring remotes."""
import logging
from pathlib import Path
from typing import List, NoReturn, Optional, Union

from gitrev import command
from gitrev.errors import ExecutionFailure, classify
from gitrev.git_objects.models import Reference
from gitrev.git_objects.parser import parse_refs, stdout_to_lines
from gitrev.history.options import (
    AddRemoteOptions,
    LsRemoteOptions,
    RemoteOptions,
    RemoteURLGetOptions,
    RemoteURLSetOptions,
)

logger = logging.getLogger(__name__)

PathLike = Union[str, Path]


def _run_remote(args: List[str], repo_path: PathLike, name: str, timeout: Optional[float]) -> bytes:
    try:
        return command.run_git(args, cwd=repo_path, timeout=timeout)
    except ExecutionFailure as e:
        _reraise(e, name)


def _reraise(e: ExecutionFailure, name: str) -> NoReturn:
    err = classify(e, remote=name)
    if err is e:
        raise e
    raise err from e


def ls_remote(url: str, opt: Optional[LsRemoteOptions] = None, cwd: Optional[PathLike] = None) -> List[Reference]:
    """References in the remote repository at ``url`` (or a remote name when ``cwd`` is a repository)."""
    opt = opt or LsRemoteOptions()

    args = ["ls-remote", "--quiet"]
    if opt.heads:
        args.append("--heads")
    if opt.tags:
        args.append("--tags")
    if opt.refs:
        args.append("--refs")
    args.append(url)
    args.extend(opt.patterns)

    return parse_refs(command.run_git(args, cwd=cwd, timeout=opt.timeout))


def is_url_accessible(url: str, timeout: Optional[float] = None) -> bool:
    try:
        ls_remote(url, LsRemoteOptions(patterns=["HEAD"], timeout=timeout))
    except ExecutionFailure as e:
        logger.debug("%s is not accessible: %s", url, e)
        return False
    return True


def add_remote(repo_path: PathLike, name: str, url: str, opt: Optional[AddRemoteOptions] = None) -> None:
    opt = opt or AddRemoteOptions()

    args = ["remote", "add"]
    if opt.fetch:
        args.append("-f")
    if opt.mirror_fetch:
        args.append("--mirror=fetch")
    args.extend([name, url])

    command.run_git(args, cwd=repo_path, timeout=opt.timeout)


def remove_remote(repo_path: PathLike, name: str, opt: Optional[RemoteOptions] = None) -> None:
    """Raises RemoteNotExist when there is no remote called ``name``."""
    opt = opt or RemoteOptions()
    _run_remote(["remote", "remove", name], repo_path, name, opt.timeout)


def remotes_list(repo_path: PathLike, opt: Optional[RemoteOptions] = None) -> List[str]:
    opt = opt or RemoteOptions()
    return stdout_to_lines(command.run_git(["remote"], cwd=repo_path, timeout=opt.timeout))


def remote_url_get(repo_path: PathLike, name: str, opt: Optional[RemoteURLGetOptions] = None) -> List[str]:
    opt = opt or RemoteURLGetOptions()

    args = ["remote", "get-url"]
    if opt.push:
        args.append("--push")
    if opt.all:
        args.append("--all")
    args.append(name)

    return stdout_to_lines(_run_remote(args, repo_path, name, opt.timeout))


def _set_url_args(opt: RemoteURLSetOptions, *extra: str) -> List[str]:
    args = ["remote", "set-url", *extra]
    if opt.push:
        args.append("--push")
    return args


def remote_url_set_first(repo_path: PathLike, name: str, new_url: str, opt: Optional[RemoteURLSetOptions] = None) -> None:
    opt = opt or RemoteURLSetOptions()
    args = _set_url_args(opt) + [name, new_url]
    _run_remote(args, repo_path, name, opt.timeout)


def remote_url_set_regex(
    repo_path: PathLike, name: str, url_regex: str, new_url: str, opt: Optional[RemoteURLSetOptions] = None
) -> None:
    """Replace the URL of remote ``name`` matching ``url_regex``.

    Raises URLNotExist when no URL matches.
    """
    opt = opt or RemoteURLSetOptions()
    args = _set_url_args(opt) + [name, new_url, url_regex]
    _run_remote(args, repo_path, name, opt.timeout)


def remote_url_add(repo_path: PathLike, name: str, new_url: str, opt: Optional[RemoteURLSetOptions] = None) -> None:
    opt = opt or RemoteURLSetOptions()
    args = _set_url_args(opt, "--add") + [name, new_url]
    _run_remote(args, repo_path, name, opt.timeout)


def remote_url_del_regex(repo_path: PathLike, name: str, url_regex: str, opt: Optional[RemoteURLSetOptions] = None) -> None:
    """Delete URLs of remote ``name`` matching ``url_regex``.

    Raises DelAllNonPushURL when that would remove every fetch URL.
    """
    opt = opt or RemoteURLSetOptions()
    args = _set_url_args(opt, "--delete") + [name, url_regex]
    _run_remote(args, repo_path, name, opt.timeout)
