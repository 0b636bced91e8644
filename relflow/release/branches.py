"""Branch switching, remote integration and first-time repository setup."""

from __future__ import annotations

from relflow.core.result import Err, Ok, Result
from relflow.git.protocol import VersionControl
from relflow.output.console import ConsoleProtocol
from relflow.release.errors import ReleaseError
from relflow.release.guard import MessagePrompt, commit_pending, ensure_no_conflicts
from relflow.release.refs import has_remote_ref
from relflow.release.steps import echo_git, git_failure


def ensure_branch(
    vcs: VersionControl, name: str, console: ConsoleProtocol
) -> Result[None, ReleaseError]:
    """Check out ``name``, creating it from the current position if it is new."""
    local = vcs.list_local_branches()
    if isinstance(local, Err):
        return Err(git_failure(local.error))

    if name in local.value:
        echo_git(console, "checkout", name)
        switched = vcs.checkout(name)
    else:
        echo_git(console, "checkout", "-b", name)
        switched = vcs.checkout_new(name)
    if isinstance(switched, Err):
        return Err(git_failure(switched.error))

    console.success(f"on branch {name}")
    return Ok(None)


def integrate_remote(
    vcs: VersionControl,
    remote: str,
    branch: str,
    console: ConsoleProtocol,
    *,
    allow_unrelated: bool = False,
) -> Result[None, ReleaseError]:
    """Pull ``remote/branch`` into the current branch.

    Nothing is resolved here: a conflicting pull comes back as a ``conflict``
    error and the working copy is left for the user to fix.
    """
    args = ["pull", "--no-edit", remote, branch]
    if allow_unrelated:
        args.append("--allow-unrelated-histories")
    echo_git(console, *args)

    pulled = vcs.pull(remote, branch, allow_unrelated=allow_unrelated)
    if isinstance(pulled, Err):
        return Err(git_failure(pulled.error, kind="remote_failed"))
    console.success(f"merged {remote}/{branch}")
    return Ok(None)


def publish_branch(
    vcs: VersionControl, remote: str, branch: str, console: ConsoleProtocol
) -> Result[None, ReleaseError]:
    echo_git(console, "push", remote, branch)
    pushed = vcs.push(remote, branch)
    if isinstance(pushed, Err):
        return Err(git_failure(pushed.error, kind="remote_failed"))
    console.success(f"pushed {branch} to {remote}")
    return Ok(None)


def bootstrap(
    vcs: VersionControl,
    *,
    remote: str,
    remote_url: str,
    stable_branch: str,
    ask_message: MessagePrompt,
    console: ConsoleProtocol,
) -> Result[bool, ReleaseError]:
    """Turn a plain directory into a repository wired to ``remote``.

    Returns Ok(False) without touching anything when the repository already
    exists. When the remote already has ``stable_branch``, its history is
    pulled in (unrelated histories allowed) before the first push.
    """
    if vcs.exists():
        console.verbose("repository already initialized")
        return Ok(False)

    console.info("Initializing repository...")
    echo_git(console, "init")
    initialized = vcs.init()
    if isinstance(initialized, Err):
        return Err(git_failure(initialized.error))

    remotes = vcs.list_remotes()
    if isinstance(remotes, Err):
        return Err(git_failure(remotes.error))
    if remote not in remotes.value:
        echo_git(console, "remote", "add", remote, remote_url)
        added = vcs.add_remote(remote, remote_url)
        if isinstance(added, Err):
            return Err(git_failure(added.error))

    conflicts = ensure_no_conflicts(vcs, console)
    if isinstance(conflicts, Err):
        return conflicts
    committed = commit_pending(vcs, ask_message, console)
    if isinstance(committed, Err):
        return committed

    on_stable = ensure_branch(vcs, stable_branch, console)
    if isinstance(on_stable, Err):
        return on_stable

    echo_git(console, "ls-remote", "--refs", remote)
    listing = vcs.list_remote_refs(remote)
    if isinstance(listing, Err):
        return Err(git_failure(listing.error, kind="remote_failed"))

    if has_remote_ref(listing.value, f"refs/heads/{stable_branch}"):
        pulled = integrate_remote(vcs, remote, stable_branch, console, allow_unrelated=True)
        if isinstance(pulled, Err):
            return pulled
        conflicts = ensure_no_conflicts(vcs, console)
        if isinstance(conflicts, Err):
            return conflicts

    pushed = publish_branch(vcs, remote, stable_branch, console)
    if isinstance(pushed, Err):
        return pushed
    return Ok(True)
