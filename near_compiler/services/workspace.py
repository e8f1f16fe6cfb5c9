"""Workspace provisioning for contract builds.

Each compile request gets its own temporary cargo project:

    <tmp>/near-contract-XXXXXXXX/
        Cargo.toml
        src/lib.rs
        target/<wasm_target>/release/<crate_name>.wasm   (after a build)

The directory is removed when the `provision_workspace` context exits,
whatever happened inside it.
"""

import logging
import shutil
import tempfile
from contextlib import contextmanager
from pathlib import Path
from typing import Iterator, Optional

from ..config import Settings, settings as default_settings
from .toolchain import Toolchain, ToolchainError, ToolchainLaunchError

logger = logging.getLogger(__name__)

WORKSPACE_PREFIX = "near-contract-"

CARGO_TOML_TEMPLATE = """[package]
name = {name}
version = "0.1.0"
edition = "2021"

[lib]
crate-type = ["cdylib"]

[dependencies]
near-sdk = "{near_sdk_version}"
borsh = {{ version = "{borsh_version}", features = ["derive"] }}

[profile.release]
codegen-units = 1
opt-level = "z"
lto = true
debug = false
panic = "abort"
overflow-checks = true
"""


_TOML_ESCAPES = str.maketrans({
    "\\": "\\\\",
    '"': '\\"',
    "\n": "\\n",
    "\r": "\\r",
    "\t": "\\t",
})


class ProvisioningError(Exception):
    """The workspace could not be created or populated."""


def _toml_string(value: str) -> str:
    escaped = value.translate(_TOML_ESCAPES)
    return f'"{escaped}"'


def render_cargo_toml(name: str, config: Optional[Settings] = None) -> str:
    """Render the Cargo.toml for a NEAR contract crate called `name`."""
    config = config or default_settings
    return CARGO_TOML_TEMPLATE.format(
        name=_toml_string(name),
        near_sdk_version=config.near_sdk_version,
        borsh_version=config.borsh_version,
    )


def crate_artifact_name(name: str) -> str:
    """File name cargo gives the cdylib for package `name`."""
    return name.replace("-", "_") + ".wasm"


class BuildWorkspace:
    """A provisioned project directory for a single build."""

    def __init__(self, path: Path, contract_name: str, wasm_target: str):
        self.path = path
        self.contract_name = contract_name
        self.wasm_target = wasm_target

    @property
    def manifest_path(self) -> Path:
        return self.path / "Cargo.toml"

    @property
    def source_path(self) -> Path:
        return self.path / "src" / "lib.rs"

    @property
    def artifact_path(self) -> Path:
        return (
            self.path
            / "target"
            / self.wasm_target
            / "release"
            / crate_artifact_name(self.contract_name)
        )

    def artifact_size(self) -> Optional[int]:
        """Byte length of the built .wasm, or None if it isn't there."""
        try:
            return self.artifact_path.stat().st_size
        except (OSError, ValueError):
            return None

    def __repr__(self) -> str:
        return f"BuildWorkspace({str(self.path)!r}, {self.contract_name!r})"


def _allocate_dir(config: Settings) -> Path:
    root = config.workspace_root
    try:
        if root is not None:
            root.mkdir(parents=True, exist_ok=True)
        return Path(tempfile.mkdtemp(prefix=WORKSPACE_PREFIX, dir=root))
    except OSError as e:
        raise ProvisioningError(f"Failed to create temp directory: {e}") from e


def _scaffold(workspace: BuildWorkspace, toolchain: Toolchain, config: Settings) -> None:
    """Run `cargo init --lib`.

    A launch failure is fatal. A non-zero exit is fatal only when strict_scaffold
    is set; otherwise the files written next overwrite whatever cargo left.
    """
    try:
        result = toolchain.init_project(workspace.path, workspace.contract_name)
    except ToolchainLaunchError as e:
        raise ProvisioningError(f"Failed to initialize cargo project: {e}") from e
    except ToolchainError as e:
        detail = str(e)
    else:
        if result.succeeded:
            return
        detail = result.stderr.strip() or f"exit status {result.returncode}"

    if config.strict_scaffold:
        raise ProvisioningError(f"Failed to initialize cargo project: {detail}")
    logger.warning("cargo init failed for %r, continuing: %s", workspace.contract_name, detail)


def _clean(workspace: BuildWorkspace, toolchain: Toolchain) -> None:
    try:
        toolchain.clean(workspace.path)
    except ToolchainError as e:
        logger.debug("cargo clean skipped: %s", e)


def _write_files(workspace: BuildWorkspace, code: str, config: Settings) -> None:
    try:
        workspace.manifest_path.write_text(
            render_cargo_toml(workspace.contract_name, config), encoding="utf-8"
        )
    except (OSError, UnicodeError) as e:
        raise ProvisioningError(f"Failed to write Cargo.toml: {e}") from e

    try:
        workspace.source_path.parent.mkdir(parents=True, exist_ok=True)
        workspace.source_path.write_text(code, encoding="utf-8")
    except (OSError, UnicodeError) as e:
        raise ProvisioningError(f"Failed to write contract code: {e}") from e


@contextmanager
def provision_workspace(
    contract_name: str,
    code: str,
    toolchain: Toolchain,
    config: Optional[Settings] = None,
) -> Iterator[BuildWorkspace]:
    """Create a scaffolded cargo project holding `code` and yield it.

    Raises ProvisioningError before yielding if any fatal step fails.
    The directory is removed on every exit path once it exists.
    """
    config = config or default_settings
    path = _allocate_dir(config)
    workspace = BuildWorkspace(path, contract_name, config.wasm_target)
    logger.debug("Created workspace %s", path)

    try:
        _scaffold(workspace, toolchain, config)
        _clean(workspace, toolchain)
        _write_files(workspace, code, config)
        yield workspace
    finally:
        shutil.rmtree(path, ignore_errors=True)
        logger.debug("Removed workspace %s", path)
