"""Read and update the project manifest (package.json)."""

from __future__ import annotations

import json
from collections.abc import Mapping
from dataclasses import dataclass
from pathlib import Path

from relflow.core.result import Err, Ok, Result
from relflow.core.structured import StrDict, as_str_dict, get_str, get_table
from relflow.platform.files import atomic_write_text
from relflow.release.errors import ReleaseError


@dataclass(frozen=True, slots=True)
class Manifest:
    path: Path
    name: str | None
    version: str
    scripts: Mapping[str, str]


def read_manifest(path: Path) -> Result[Manifest, ReleaseError]:
    data = _load(path)
    if isinstance(data, Err):
        return data

    version = get_str(data.value, "version")
    if version is None:
        return Err(
            ReleaseError(
                kind="invalid_version",
                message=f"missing version in {path.name}",
                hint=str(path),
            )
        )

    scripts_table = get_table(data.value, "scripts") or {}
    scripts = {k: v for k, v in scripts_table.items() if isinstance(v, str)}
    return Ok(
        Manifest(
            path=path,
            name=get_str(data.value, "name"),
            version=version,
            scripts=scripts,
        )
    )


def write_manifest_version(path: Path, version: str) -> Result[bool, ReleaseError]:
    """Store ``version`` in the manifest.

    Returns:
        Ok(True) if the file changed, Ok(False) if it already held ``version``
    """
    data = _load(path)
    if isinstance(data, Err):
        return data

    if get_str(data.value, "version") == version:
        return Ok(False)

    data.value["version"] = version
    try:
        atomic_write_text(path, json.dumps(data.value, indent=2, ensure_ascii=False) + "\n")
    except OSError as e:
        return Err(
            ReleaseError(
                kind="missing_manifest",
                message=f"failed to write {path.name}: {e}",
                hint=str(path),
            )
        )
    return Ok(True)


def _load(path: Path) -> Result[StrDict, ReleaseError]:
    try:
        text = path.read_text(encoding="utf-8")
    except FileNotFoundError:
        return Err(
            ReleaseError(
                kind="missing_manifest",
                message=f"{path.name} not found",
                hint=f"expected project manifest at {path}",
            )
        )
    except OSError as e:
        return Err(
            ReleaseError(
                kind="missing_manifest",
                message=f"failed to read {path.name}: {e}",
                hint=str(path),
            )
        )

    try:
        obj: object = json.loads(text)
    except json.JSONDecodeError as e:
        return Err(
            ReleaseError(
                kind="invalid_input",
                message=f"invalid JSON in {path.name}: {e}",
                hint=str(path),
            )
        )

    data = as_str_dict(obj)
    if data is None:
        return Err(
            ReleaseError(
                kind="invalid_input",
                message=f"invalid JSON root in {path.name}",
                hint=str(path),
            )
        )
    return Ok(data)
