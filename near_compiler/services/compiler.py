"""Compiler service: source in, wasm size or diagnostics out."""

import logging
from typing import Optional

from ..models import CompileRequest, CompileResponse
from ..config import Settings, settings as default_settings
from .toolchain import (
    Invocation,
    Toolchain,
    ToolchainError,
    ToolchainLaunchError,
    ToolchainTimeout,
)
from .workspace import BuildWorkspace, ProvisioningError, provision_workspace

logger = logging.getLogger(__name__)


def failure(errors: str, output: str = "") -> CompileResponse:
    return CompileResponse(success=False, output=output, errors=errors, wasm_size=None)


def interpret_build(invocation: Invocation, workspace: BuildWorkspace) -> CompileResponse:
    """Turn a finished `cargo build` into a CompileResponse."""
    if not invocation.succeeded:
        logger.error("Compilation failed (exit status %s)", invocation.returncode)
        return failure(invocation.stderr, output=invocation.stdout)

    wasm_size = workspace.artifact_size()
    if wasm_size is None:
        # Build passed but the file isn't where cargo should have put it
        logger.warning("Build succeeded but no artifact at %s", workspace.artifact_path)

    logger.info("Contract compiled successfully")
    return CompileResponse(
        success=True,
        output=invocation.stdout,
        errors=invocation.stderr or None,
        wasm_size=wasm_size,
    )


def interpret_timeout(error: ToolchainTimeout) -> CompileResponse:
    logger.error("Build timed out after %g seconds", error.timeout)
    message = f"Build timed out after {error.timeout:g} seconds"
    if error.stderr:
        message = f"{error.stderr.rstrip()}\n{message}"
    return failure(message, output=error.stdout)


class CompilerService:
    """Service for compiling NEAR contracts to wasm.

    Pipeline per request: provision workspace -> ensure wasm target ->
    cargo build -> interpret -> remove workspace.
    """

    def __init__(self, toolchain: Optional[Toolchain] = None, settings: Optional[Settings] = None):
        self.settings = settings or default_settings
        self.toolchain = toolchain or Toolchain(self.settings)

    def compile(self, request: CompileRequest) -> CompileResponse:
        """Compile a contract. Never raises for pipeline failures."""
        try:
            with provision_workspace(
                request.contract_name, request.code, self.toolchain, self.settings
            ) as workspace:
                self._ensure_target()
                return self._build(workspace)
        except ProvisioningError as e:
            logger.error("%s", e)
            return failure(str(e))
        except Exception as e:
            logger.exception("Unexpected error compiling %r", request.contract_name)
            return failure(f"Internal compiler error: {e}")

    def _ensure_target(self) -> None:
        # The build reports a missing target on its own.
        try:
            self.toolchain.add_target()
        except ToolchainError as e:
            logger.debug("rustup target add skipped: %s", e)

    def _build(self, workspace: BuildWorkspace) -> CompileResponse:
        try:
            invocation = self.toolchain.build(workspace.path)
        except ToolchainTimeout as e:
            return interpret_timeout(e)
        except ToolchainLaunchError as e:
            logger.error("Failed to execute cargo build: %s", e)
            return failure(f"Failed to execute cargo build: {e}")
        return interpret_build(invocation, workspace)


# Global singleton
_compiler: Optional[CompilerService] = None


def get_compiler() -> CompilerService:
    """Get the global compiler service instance."""
    global _compiler
    if _compiler is None:
        _compiler = CompilerService()
    return _compiler


def reset_compiler():
    """Reset the compiler singleton (for testing)."""
    global _compiler
    _compiler = None
