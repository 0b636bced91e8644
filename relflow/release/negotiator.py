"""Decide the version and development branch a run works on.

The local manifest version is compared with the highest ``release/<v>`` tag
on the remote:

- no release yet, or local already ahead: keep the local version;
- otherwise: bump the latest *release* (never the local version) by the
  increment the caller picks.

The result is written back to the manifest when it differs.
"""

from __future__ import annotations

from collections.abc import Callable, Mapping
from dataclasses import replace
from pathlib import Path

from relflow.core.result import Err, Ok, Result
from relflow.git.protocol import VersionControl
from relflow.output.console import ConsoleProtocol
from relflow.release.errors import ReleaseError
from relflow.release.manifest import write_manifest_version
from relflow.release.model import Negotiation, PublishContext, dev_branch_name
from relflow.release.refs import latest_release, parse_remote_refs
from relflow.release.steps import echo_git, git_failure
from relflow.release.version import ReleaseBump, Version, bump, bump_candidates

type BumpChooser = Callable[[Version, Mapping[ReleaseBump, Version]], ReleaseBump]


def negotiate(local: Version, latest: Version | None, choose_bump: BumpChooser) -> Negotiation:
    if latest is None or local > latest:
        return Negotiation(version=local, branch=dev_branch_name(local))

    kind = choose_bump(latest, bump_candidates(latest))
    bumped = bump(latest, kind)
    return Negotiation(version=bumped, branch=dev_branch_name(bumped), bump=kind)


def check_divergence(listing: str, latest: Version | None) -> Result[None, ReleaseError]:
    """Refuse to guess when several unreleased dev lines exist remotely."""
    ahead = [v for v in parse_remote_refs(listing, "dev-branch") if latest is None or v > latest]
    if len(ahead) <= 1:
        return Ok(None)

    branches = ", ".join(dev_branch_name(v) for v in ahead)
    base = f"release {latest}" if latest is not None else "any release"
    return Err(
        ReleaseError(
            kind="unsupported_divergence",
            message=f"remote has {len(ahead)} development branches ahead of {base}: {branches}",
            hint="publish or delete all but one of them, then rerun",
        )
    )


def negotiate_version(
    ctx: PublishContext,
    *,
    vcs: VersionControl,
    remote: str,
    manifest_path: Path,
    choose_bump: BumpChooser,
    console: ConsoleProtocol,
) -> Result[PublishContext, ReleaseError]:
    console.info("Fetching remote releases...")
    echo_git(console, "ls-remote", "--refs", remote)
    listing = vcs.list_remote_refs(remote)
    if isinstance(listing, Err):
        return Err(git_failure(listing.error, kind="remote_failed"))

    latest = latest_release(listing.value)
    console.verbose(f"latest release: {latest if latest is not None else 'none'}")

    diverged = check_divergence(listing.value, latest)
    if isinstance(diverged, Err):
        return diverged

    decision = negotiate(ctx.version, latest, choose_bump)
    if decision.bump is None:
        if latest is not None:
            console.info(f"local version {ctx.version} is ahead of release {latest}")
    else:
        console.info(f"release {latest} -> {decision.version} ({decision.bump})")
    console.verbose(f"development branch: {decision.branch}")

    written = write_manifest_version(manifest_path, str(decision.version))
    if isinstance(written, Err):
        return written
    if written.value:
        console.success(f"{manifest_path.name} version set to {decision.version}")

    return Ok(replace(ctx, version=decision.version, target_branch=decision.branch))
