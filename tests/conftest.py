from pathlib import Path
from typing import Dict, List, Optional, Sequence, Set

import pytest
from fastapi.testclient import TestClient

import near_compiler.services.compiler as compiler_module
from near_compiler.config import Settings
from near_compiler.main import app
from near_compiler.services.compiler import CompilerService
from near_compiler.services.toolchain import (
    Invocation,
    Toolchain,
    ToolchainLaunchError,
    ToolchainTimeout,
)
from near_compiler.services.workspace import crate_artifact_name

FAKE_WASM = b"\x00asm\x01\x00\x00\x00" + b"\x00" * 120


class FakeToolchain(Toolchain):
    """Stands in for cargo/rustup.

    `cargo build` writes FAKE_WASM where cargo would, unless told to fail,
    time out, or skip the artifact.
    """

    def __init__(self, config: Settings):
        super().__init__(config)
        self.calls: List[List[str]] = []
        self.missing: Set[str] = set()
        self.names: Dict[Path, str] = {}
        self.built_sources: Dict[Path, str] = {}

        self.init_returncode = 0
        self.init_stderr = ""
        self.target_returncode = 0
        self.build_returncode = 0
        self.build_stdout = ""
        self.build_stderr = ""
        self.build_times_out = False
        self.wasm: Optional[bytes] = FAKE_WASM

    def run(self, command: str, args: Sequence[str], cwd: Optional[Path] = None,
            timeout: Optional[float] = None) -> Invocation:
        self.calls.append([command, *args])
        if command in self.missing:
            raise ToolchainLaunchError(f"[Errno 2] No such file or directory: '{command}'")
        if any("\x00" in arg for arg in args):
            raise ToolchainLaunchError("embedded null byte")

        step = args[0]
        if step == "init":
            return self._init(command, args, cwd)
        if step == "build":
            return self._build(command, args, cwd, timeout)
        if step == "target":
            return Invocation(command, list(args), cwd, "", "", self.target_returncode)
        return Invocation(command, list(args), cwd, "", "", 0)

    def _init(self, command, args, cwd):
        name = args[args.index("--name") + 1]
        self.names[cwd] = name
        if self.init_returncode == 0:
            (cwd / "src").mkdir()
            (cwd / "src" / "lib.rs").write_text("// scaffold\n")
            (cwd / "Cargo.toml").write_text(f'[package]\nname = "{name}"\n')
        return Invocation(command, list(args), cwd, "", self.init_stderr, self.init_returncode)

    def _build(self, command, args, cwd, timeout):
        self.built_sources[cwd] = (cwd / "src" / "lib.rs").read_text()
        if self.build_times_out:
            raise ToolchainTimeout(
                f"{command} timed out after {timeout:g} seconds",
                timeout=timeout,
                stdout="partial output",
                stderr="   Compiling near-sdk v5.5.0",
            )
        if self.build_returncode == 0 and self.wasm is not None:
            artifact = (
                cwd / "target" / self.settings.wasm_target / "release"
                / crate_artifact_name(self.names[cwd])
            )
            artifact.parent.mkdir(parents=True, exist_ok=True)
            artifact.write_bytes(self.wasm)
        return Invocation(
            command, list(args), cwd, self.build_stdout, self.build_stderr, self.build_returncode
        )


@pytest.fixture
def test_settings(tmp_path):
    """Settings with workspaces under a per-test directory."""
    return Settings(workspace_root=tmp_path / "workspaces")


@pytest.fixture
def workspace_root(test_settings):
    return test_settings.workspace_root


@pytest.fixture
def toolchain(test_settings):
    return FakeToolchain(test_settings)


@pytest.fixture
def compiler(toolchain, test_settings):
    """Compiler singleton wired to the fake toolchain."""
    compiler_module.reset_compiler()
    service = CompilerService(toolchain=toolchain, settings=test_settings)
    compiler_module._compiler = service

    yield service

    compiler_module.reset_compiler()


@pytest.fixture
def client(compiler):
    """Test client with the compiler service backed by the fake toolchain."""
    with TestClient(app) as c:
        yield c
