"""Publish pipeline.

    idle -> pre_publish_validated -> built -> production_gate -> tag_created
         -> master_updated -> branches_cleaned -> done

Non-production runs go from ``built`` straight to ``done``. A failure stops
the run where it happened, except branch cleanup, which only warns: by then
the release is tagged and merged.
"""

from __future__ import annotations

from collections.abc import Mapping, Sequence
from dataclasses import dataclass, replace

from relflow.core.config import DEFAULT_BUILD_COMMAND, DEFAULT_RUNNERS
from relflow.core.result import Err, Ok, Result
from relflow.git.protocol import VersionControl
from relflow.output.console import ConsoleProtocol
from relflow.release.branches import ensure_branch, publish_branch
from relflow.release.build import Builder
from relflow.release.errors import ReleaseError
from relflow.release.fsm import FINISH, StepHandler, StepOutcome, advance, run_state_machine
from relflow.release.guard import MessagePrompt, commit_pending, ensure_no_conflicts
from relflow.release.model import PipelineReport, PipelineState, PublishContext, release_tag_name
from relflow.release.refs import has_remote_ref
from relflow.release.steps import echo_git, git_failure
from relflow.release.version import Version

__all__ = [
    "PipelineDeps",
    "clean_branches",
    "finalize_tag",
    "run_pipeline",
    "update_stable",
    "validate_build_command",
]


def validate_build_command(
    command: str,
    scripts: Mapping[str, str],
    allowed_runners: Sequence[str] = DEFAULT_RUNNERS,
    *,
    default: str = DEFAULT_BUILD_COMMAND,
) -> Result[str, ReleaseError]:
    """Check a build command before anything is built.

    Returns the command to run (``default`` when ``command`` is blank).
    """
    tokens = command.split() or default.split()
    if tokens[0] not in allowed_runners:
        return Err(
            ReleaseError(
                kind="illegal_build_command",
                message=f"illegal build command: {' '.join(tokens)}",
                hint=f"must start with one of: {', '.join(allowed_runners)}",
            )
        )

    script = tokens[-1]
    if script not in scripts:
        return Err(
            ReleaseError(
                kind="missing_script",
                message=f"script {script!r} not found in manifest scripts",
                hint=f"available: {', '.join(sorted(scripts)) or 'none'}",
            )
        )
    return Ok(" ".join(tokens))


def finalize_tag(
    vcs: VersionControl, remote: str, version: Version, console: ConsoleProtocol
) -> Result[str, ReleaseError]:
    """(Re)create ``release/<version>`` at HEAD and push it.

    An existing tag of the same name, remote or local, is deleted first, so
    running this twice leaves exactly one tag.
    """
    tag = release_tag_name(version)

    echo_git(console, "ls-remote", "--refs", remote)
    listing = vcs.list_remote_refs(remote)
    if isinstance(listing, Err):
        return Err(git_failure(listing.error, kind="remote_failed"))
    if has_remote_ref(listing.value, f"refs/tags/{tag}"):
        echo_git(console, "push", remote, f":refs/tags/{tag}")
        deleted = vcs.delete_remote_tag(remote, tag)
        if isinstance(deleted, Err):
            return Err(git_failure(deleted.error, kind="remote_failed"))
        console.info(f"removed remote tag {tag}")

    local = vcs.list_tags()
    if isinstance(local, Err):
        return Err(git_failure(local.error))
    if tag in local.value:
        echo_git(console, "tag", "-d", tag)
        dropped = vcs.delete_local_tag(tag)
        if isinstance(dropped, Err):
            return Err(git_failure(dropped.error))

    echo_git(console, "tag", tag)
    added = vcs.add_tag(tag)
    if isinstance(added, Err):
        return Err(git_failure(added.error))

    echo_git(console, "push", remote, "--tags")
    pushed = vcs.push_tags(remote)
    if isinstance(pushed, Err):
        return Err(git_failure(pushed.error, kind="remote_failed"))
    console.success(f"tagged {tag}")
    return Ok(tag)


def update_stable(
    vcs: VersionControl,
    remote: str,
    stable_branch: str,
    dev_branch: str,
    console: ConsoleProtocol,
    *,
    ask_message: MessagePrompt,
) -> Result[None, ReleaseError]:
    """Merge ``dev_branch`` into ``stable_branch`` and push it.

    Pending changes are committed (conflicts refused) before the checkout.
    """
    committed = commit_pending(vcs, ask_message, console)
    if isinstance(committed, Err):
        return committed

    echo_git(console, "checkout", stable_branch)
    echo_git(console, "merge", "--no-edit", dev_branch)
    merged = vcs.merge(dev_branch, stable_branch)
    if isinstance(merged, Err):
        return Err(git_failure(merged.error))

    conflicts = ensure_no_conflicts(vcs, console)
    if isinstance(conflicts, Err):
        return conflicts

    return publish_branch(vcs, remote, stable_branch, console)


def clean_branches(
    vcs: VersionControl, remote: str, branch: str, console: ConsoleProtocol
) -> tuple[ReleaseError, ...]:
    """Delete ``branch`` locally and on ``remote``. Failures come back as warnings."""
    warnings: list[ReleaseError] = []

    echo_git(console, "branch", "-d", branch)
    deleted = vcs.delete_local_branch(branch)
    if isinstance(deleted, Err):
        warnings.append(
            _cleanup_warning(f"could not delete local branch {branch}", deleted.error.message)
        )
    else:
        console.success(f"deleted local branch {branch}")

    listing = vcs.list_remote_refs(remote)
    if isinstance(listing, Err):
        warnings.append(
            _cleanup_warning(f"could not list {remote} branches", listing.error.message)
        )
    elif not has_remote_ref(listing.value, f"refs/heads/{branch}"):
        console.info(f"{remote}/{branch} does not exist")
    else:
        echo_git(console, "push", remote, "--delete", branch)
        removed = vcs.delete_remote_branch(remote, branch)
        if isinstance(removed, Err):
            warnings.append(
                _cleanup_warning(f"could not delete {remote}/{branch}", removed.error.message)
            )
        else:
            console.success(f"deleted remote branch {remote}/{branch}")

    for warning in warnings:
        console.warning(warning.pretty())
    return tuple(warnings)


def _cleanup_warning(message: str, detail: str) -> ReleaseError:
    return ReleaseError(
        kind="cleanup_failed",
        message=f"{message}: {detail}",
        hint="the release is complete; remove the branch by hand",
    )


@dataclass(frozen=True, slots=True)
class PipelineDeps:
    vcs: VersionControl
    builder: Builder
    console: ConsoleProtocol
    scripts: Mapping[str, str]
    ask_message: MessagePrompt
    remote: str = "origin"
    stable_branch: str = "master"
    allowed_runners: tuple[str, ...] = DEFAULT_RUNNERS
    default_build_command: str = DEFAULT_BUILD_COMMAND


@dataclass(frozen=True, slots=True)
class _Run:
    state: PipelineState
    ctx: PublishContext
    reached: tuple[PipelineState, ...] = ()
    warnings: tuple[ReleaseError, ...] = ()

    def to(self, state: PipelineState) -> _Run:
        return replace(self, state=state)


type _Outcome = Result[StepOutcome[_Run], ReleaseError]


def run_pipeline(ctx: PublishContext, deps: PipelineDeps) -> Result[PipelineReport, ReleaseError]:
    console = deps.console
    vcs = deps.vcs

    def idle(run: _Run) -> _Outcome:
        console.info("Checking build command...")
        command = validate_build_command(
            run.ctx.build_command,
            deps.scripts,
            deps.allowed_runners,
            default=deps.default_build_command,
        )
        if isinstance(command, Err):
            return command
        console.success(f"build command: {command.value}")
        ctx = replace(run.ctx, build_command=command.value)
        return Ok(advance(replace(run, state=PipelineState.PRE_PUBLISH_VALIDATED, ctx=ctx)))

    def validated(run: _Run) -> _Outcome:
        built = deps.builder.build(run.ctx)
        if isinstance(built, Err):
            return built
        if not built.value:
            return Err(
                ReleaseError(
                    kind="build_failed",
                    message=f"build of {run.ctx.project_name}@{run.ctx.version} did not succeed",
                )
            )
        return Ok(advance(run.to(PipelineState.BUILT)))

    def built(run: _Run) -> _Outcome:
        if not run.ctx.is_production:
            console.info("not a production publish; skipping tag and merge")
            return Ok(advance(run.to(PipelineState.DONE)))
        return Ok(advance(run.to(PipelineState.PRODUCTION_GATE)))

    def gate(run: _Run) -> _Outcome:
        # The build may have rewritten tracked files.
        committed = commit_pending(vcs, deps.ask_message, console)
        if isinstance(committed, Err):
            return committed
        if vcs.current_branch() != run.ctx.target_branch:
            on_branch = ensure_branch(vcs, run.ctx.target_branch, console)
            if isinstance(on_branch, Err):
                return on_branch
        tagged = finalize_tag(vcs, deps.remote, run.ctx.version, console)
        if isinstance(tagged, Err):
            return tagged
        return Ok(advance(run.to(PipelineState.TAG_CREATED)))

    def tag_created(run: _Run) -> _Outcome:
        updated = update_stable(
            vcs,
            deps.remote,
            deps.stable_branch,
            run.ctx.target_branch,
            console,
            ask_message=deps.ask_message,
        )
        if isinstance(updated, Err):
            return updated
        return Ok(advance(run.to(PipelineState.MASTER_UPDATED)))

    def master_updated(run: _Run) -> _Outcome:
        warnings = clean_branches(vcs, deps.remote, run.ctx.target_branch, console)
        return Ok(
            advance(
                replace(
                    run,
                    state=PipelineState.BRANCHES_CLEANED,
                    warnings=run.warnings + warnings,
                )
            )
        )

    def cleaned(run: _Run) -> _Outcome:
        return Ok(advance(run.to(PipelineState.DONE)))

    def done(run: _Run) -> _Outcome:
        return Ok(FINISH)

    handlers: dict[str, StepHandler[_Run]] = {
        PipelineState.IDLE: idle,
        PipelineState.PRE_PUBLISH_VALIDATED: validated,
        PipelineState.BUILT: built,
        PipelineState.PRODUCTION_GATE: gate,
        PipelineState.TAG_CREATED: tag_created,
        PipelineState.MASTER_UPDATED: master_updated,
        PipelineState.BRANCHES_CLEANED: cleaned,
        PipelineState.DONE: done,
    }

    def record(run: _Run) -> _Run:
        console.verbose(f"pipeline: {run.state}")
        return replace(run, reached=run.reached + (run.state,))

    start = _Run(state=PipelineState.IDLE, ctx=ctx, reached=(PipelineState.IDLE,))
    final = run_state_machine(
        initial_state=start,
        get_step=lambda run: str(run.state),
        handlers=handlers,
        on_advance=record,
    )
    if isinstance(final, Err):
        return final

    console.success(f"published {ctx.project_name}@{final.value.ctx.version}")
    return Ok(PipelineReport(states=final.value.reached, warnings=final.value.warnings))
