"""Make sure the project has a hosted repository and a local clone wired to it."""

from __future__ import annotations

from collections.abc import Callable
from dataclasses import dataclass
from pathlib import Path

from relflow.core.config import Config
from relflow.core.result import Err, Ok, Result
from relflow.git.protocol import VersionControl
from relflow.hosting import PLATFORMS, HostingError, HostingProvider, HttpClient, create_provider
from relflow.output.console import ConsoleProtocol
from relflow.release.branches import bootstrap
from relflow.release.errors import ReleaseError, ReleaseErrorKind
from relflow.release.prompter import OWNER_KINDS, OwnerKind, Prompter
from relflow.release.state import StateStore

GITIGNORE = "\n".join(
    [
        ".DS_Store",
        "node_modules",
        "/dist",
        "",
        "# local env files",
        ".env.local",
        ".env.*.local",
        "",
        "# Log files",
        "npm-debug.log*",
        "yarn-debug.log*",
        "yarn-error.log*",
        "pnpm-debug.log*",
        "",
        "# Editor directories and files",
        ".idea",
        ".vscode",
        "*.suo",
        "*.ntvs*",
        "*.njsproj",
        "*.sln",
        "*.sw?",
        "",
    ]
)

type ProviderFactory = Callable[..., Result[HostingProvider, HostingError]]


@dataclass(frozen=True, slots=True)
class RefreshOptions:
    server: bool = False
    token: bool = False
    owner: bool = False


@dataclass(frozen=True, slots=True)
class PreparedRepository:
    platform: str
    owner: OwnerKind
    login: str
    name: str
    remote_url: str
    bootstrapped: bool


def normalize_project_name(name: str) -> str:
    """Repository name for a package name: ``@scope/pkg`` -> ``scope_pkg``."""
    if name.startswith("@") and name.find("/") > 0:
        return "_".join(name.split("/")).replace("@", "", 1)
    return name


def ensure_gitignore(work_dir: Path, console: ConsoleProtocol) -> Result[bool, ReleaseError]:
    path = work_dir / ".gitignore"
    if path.exists():
        return Ok(False)
    try:
        path.write_text(GITIGNORE, encoding="utf-8")
    except OSError as e:
        return Err(ReleaseError(kind="invalid_input", message=f"failed to write {path}: {e}"))
    console.success(f"wrote {path.name}")
    return Ok(True)


def prepare_repository(
    *,
    project_name: str,
    work_dir: Path,
    vcs: VersionControl,
    store: StateStore,
    http: HttpClient,
    config: Config,
    prompter: Prompter,
    console: ConsoleProtocol,
    refresh: RefreshOptions = RefreshOptions(),
    provider_factory: ProviderFactory = create_provider,
) -> Result[PreparedRepository, ReleaseError]:
    console.header("Preparing repository")

    platform = store.resolve(
        "server",
        ask=lambda: prompter.platform(PLATFORMS, config.hosting.default_platform),
        console=console,
        refresh=refresh.server,
    )
    if isinstance(platform, Err):
        return platform

    probe = provider_factory(platform.value, token="", http=http)
    if isinstance(probe, Err):
        return Err(_hosting_error(probe.error, kind="invalid_input"))

    token = store.resolve(
        "token",
        ask=lambda: prompter.token(platform.value, probe.value.token_url()),
        console=console,
        refresh=refresh.token,
    )
    if isinstance(token, Err):
        return token

    provider = provider_factory(platform.value, token=token.value, http=http)
    if isinstance(provider, Err):
        return Err(_hosting_error(provider.error, kind="invalid_input"))
    host = provider.value

    user = host.get_user()
    if isinstance(user, Err):
        return Err(_hosting_error(user.error))
    orgs = host.get_organizations(user.value)
    if isinstance(orgs, Err):
        return Err(_hosting_error(orgs.error))
    console.success(f"{platform.value} user {user.value.login} ({len(orgs.value)} organizations)")

    owner = store.read("owner")
    login = store.read("login")
    if owner is None or login is None or refresh.owner:
        kinds = OWNER_KINDS if orgs.value else OWNER_KINDS[:1]
        owner = prompter.owner_kind(kinds)
        if owner == "user":
            login = user.value.login
        else:
            choices = [o.login for o in orgs.value]
            login = prompter.organization(choices)
            if login not in choices:
                return Err(
                    ReleaseError(
                        kind="invalid_input",
                        message=f"unknown organization: {login!r}",
                        hint=f"expected one of: {', '.join(choices)}",
                    )
                )
        saved = store.write("owner", owner)
        if isinstance(saved, Err):
            return saved
        saved = store.write("login", login)
        if isinstance(saved, Err):
            return saved
        console.success(f"owner saved: {owner} {login}")

    if owner not in OWNER_KINDS:
        return Err(
            ReleaseError(
                kind="invalid_input",
                message=f"invalid stored owner kind: {owner!r}",
                hint="rerun with --refresh-owner",
            )
        )
    owner_kind: OwnerKind = "org" if owner == "org" else "user"

    name = normalize_project_name(project_name)
    repo = host.get_repository(login, name)
    if isinstance(repo, Err):
        return Err(_hosting_error(repo.error))
    if repo.value is None:
        console.info(f"Creating {platform.value} repository {login}/{name}...")
        if owner_kind == "user":
            created = host.create_repository(name)
        else:
            created = host.create_organization_repository(name, login)
        if isinstance(created, Err):
            return Err(_hosting_error(created.error))
        console.success(f"created {login}/{name}")
    else:
        console.success(f"found {login}/{name}")

    remote_url = host.clone_url(login, name)

    ignored = ensure_gitignore(work_dir, console)
    if isinstance(ignored, Err):
        return ignored

    booted = bootstrap(
        vcs,
        remote=config.workflow.remote,
        remote_url=remote_url,
        stable_branch=config.workflow.stable_branch,
        ask_message=prompter.commit_message,
        console=console,
    )
    if isinstance(booted, Err):
        return booted

    return Ok(
        PreparedRepository(
            platform=platform.value,
            owner=owner_kind,
            login=login,
            name=name,
            remote_url=remote_url,
            bootstrapped=booted.value,
        )
    )


def _hosting_error(
    error: HostingError, *, kind: ReleaseErrorKind = "hosting_failed"
) -> ReleaseError:
    return ReleaseError(
        kind=kind,
        message=f"{error.provider}: {error.message}",
        hint=error.hint,
    )
