"""Commit cycle and publish, composed from the individual steps.

Standard commit cycle:

    negotiate version -> guard workspace -> switch to dev/<v>
    -> pull <remote>/<stable> -> conflict check
    -> pull <remote>/dev/<v> (if it exists) -> conflict check
    -> push dev/<v>
"""

from __future__ import annotations

from pathlib import Path

from relflow.core.config import WorkflowConfig
from relflow.core.result import Err, Ok, Result
from relflow.git.protocol import VersionControl
from relflow.output.console import ConsoleProtocol
from relflow.release.branches import ensure_branch, integrate_remote, publish_branch
from relflow.release.build import Builder
from relflow.release.errors import ReleaseError
from relflow.release.guard import ensure_no_conflicts, guard_workspace
from relflow.release.manifest import Manifest, read_manifest
from relflow.release.model import PipelineReport, PublishContext, UploadTarget, dev_branch_name
from relflow.release.negotiator import negotiate_version
from relflow.release.pipeline import PipelineDeps, run_pipeline
from relflow.release.prompter import Prompter
from relflow.release.refs import has_remote_ref, parse_remote_refs
from relflow.release.state import StateStore
from relflow.release.steps import echo_git, git_failure
from relflow.release.version import parse_version

PUBLISH_TARGETS: tuple[str, ...] = ("oss",)


def load_context(
    work_dir: Path,
    *,
    config: WorkflowConfig,
    build_command: str = "",
    is_production: bool = False,
    upload: UploadTarget | None = None,
) -> Result[tuple[PublishContext, Manifest], ReleaseError]:
    """Read the manifest and build the context a run starts from."""
    manifest = read_manifest(work_dir / config.manifest)
    if isinstance(manifest, Err):
        return manifest

    version = parse_version(manifest.value.version, source=config.manifest)
    if isinstance(version, Err):
        return version

    name = manifest.value.name or work_dir.name
    ctx = PublishContext(
        project_name=name,
        version=version.value,
        work_dir=work_dir,
        build_command=build_command,
        target_branch=dev_branch_name(version.value),
        is_production=is_production,
        upload=upload,
    )
    return Ok((ctx, manifest.value))


def commit(
    ctx: PublishContext,
    *,
    vcs: VersionControl,
    config: WorkflowConfig,
    prompter: Prompter,
    console: ConsoleProtocol,
) -> Result[PublishContext, ReleaseError]:
    """Bring the development branch for this version up to date and push it."""
    console.header(f"Commit {ctx.project_name}")
    remote = config.remote

    negotiated = negotiate_version(
        ctx,
        vcs=vcs,
        remote=remote,
        manifest_path=ctx.work_dir / config.manifest,
        choose_bump=prompter.choose_bump,
        console=console,
    )
    if isinstance(negotiated, Err):
        return negotiated
    ctx = negotiated.value
    branch = ctx.target_branch

    guarded = guard_workspace(vcs, prompter.commit_message, console)
    if isinstance(guarded, Err):
        return guarded

    switched = ensure_branch(vcs, branch, console)
    if isinstance(switched, Err):
        return switched

    echo_git(console, "ls-remote", "--refs", remote)
    listing = vcs.list_remote_refs(remote)
    if isinstance(listing, Err):
        return Err(git_failure(listing.error, kind="remote_failed"))

    if has_remote_ref(listing.value, f"refs/heads/{config.stable_branch}"):
        pulled = integrate_remote(vcs, remote, config.stable_branch, console)
        if isinstance(pulled, Err):
            return pulled
        conflicts = ensure_no_conflicts(vcs, console)
        if isinstance(conflicts, Err):
            return conflicts
    else:
        console.info(f"{remote}/{config.stable_branch} does not exist yet")

    if ctx.version in parse_remote_refs(listing.value, "dev-branch"):
        pulled = integrate_remote(vcs, remote, branch, console)
        if isinstance(pulled, Err):
            return pulled
        conflicts = ensure_no_conflicts(vcs, console)
        if isinstance(conflicts, Err):
            return conflicts
    else:
        console.info(f"{remote}/{branch} does not exist yet")

    pushed = publish_branch(vcs, remote, branch, console)
    if isinstance(pushed, Err):
        return pushed
    return Ok(ctx)


def choose_publish_target(
    store: StateStore, prompter: Prompter, console: ConsoleProtocol
) -> Result[str, ReleaseError]:
    target = store.resolve(
        "publish",
        ask=lambda: prompter.publish_target(PUBLISH_TARGETS),
        console=console,
    )
    if isinstance(target, Err):
        return target
    if target.value not in PUBLISH_TARGETS:
        return Err(
            ReleaseError(
                kind="invalid_input",
                message=f"unsupported publish target: {target.value!r}",
                hint=f"expected one of: {', '.join(PUBLISH_TARGETS)}; edit {store.path('publish')}",
            )
        )
    return target


def publish(
    ctx: PublishContext,
    *,
    manifest: Manifest,
    vcs: VersionControl,
    builder: Builder,
    store: StateStore,
    config: WorkflowConfig,
    prompter: Prompter,
    console: ConsoleProtocol,
) -> Result[PipelineReport, ReleaseError]:
    """Build, and for production runs tag, merge to stable and clean up."""
    console.header(f"Publish {ctx.project_name}@{ctx.version}")

    target = choose_publish_target(store, prompter, console)
    if isinstance(target, Err):
        return target
    console.verbose(f"publish target: {target.value}")

    deps = PipelineDeps(
        vcs=vcs,
        builder=builder,
        console=console,
        scripts=manifest.scripts,
        ask_message=prompter.commit_message,
        remote=config.remote,
        stable_branch=config.stable_branch,
        allowed_runners=config.allowed_runners,
        default_build_command=config.default_build_command,
    )
    return run_pipeline(ctx, deps)
