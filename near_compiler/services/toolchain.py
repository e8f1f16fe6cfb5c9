"""Toolchain invoker: runs cargo / rustup as subprocesses.

Every call blocks until the child exits (or its deadline passes) and
returns the complete stdout/stderr. Nothing is streamed.
"""

import logging
import os
import signal
import subprocess
from dataclasses import dataclass
from pathlib import Path
from typing import List, Optional, Sequence

from ..config import Settings, settings as default_settings

logger = logging.getLogger(__name__)


class ToolchainError(Exception):
    """Base class for invocations that did not produce an exit status."""


class ToolchainLaunchError(ToolchainError):
    """The executable could not be started (missing binary, permissions, bad cwd)."""


class ToolchainTimeout(ToolchainError):
    """The process exceeded its deadline and was killed."""

    def __init__(self, message: str, timeout: float, stdout: str = "", stderr: str = ""):
        super().__init__(message)
        self.timeout = timeout
        self.stdout = stdout
        self.stderr = stderr


@dataclass
class Invocation:
    """A subprocess that ran to completion."""
    command: str
    args: List[str]
    cwd: Optional[Path]
    stdout: str
    stderr: str
    returncode: int

    @property
    def succeeded(self) -> bool:
        return self.returncode == 0


def _decode(data) -> str:
    if data is None:
        return ""
    if isinstance(data, str):
        return data
    return data.decode("utf-8", errors="replace")


def _kill_group(proc: subprocess.Popen) -> None:
    """SIGKILL the child and everything it spawned."""
    if not hasattr(os, "killpg"):
        proc.kill()
        return
    try:
        os.killpg(proc.pid, signal.SIGKILL)
    except ProcessLookupError:
        pass


class Toolchain:
    """Thin wrapper around the Rust toolchain binaries.

    Tests substitute a subclass that overrides `run`.
    """

    def __init__(self, config: Optional[Settings] = None):
        self.settings = config or default_settings

    def run(
        self,
        command: str,
        args: Sequence[str],
        cwd: Optional[Path] = None,
        timeout: Optional[float] = None,
    ) -> Invocation:
        """Run `command args...` in `cwd` and wait for it.

        Raises ToolchainLaunchError if the process cannot be started and
        ToolchainTimeout if it is still running after `timeout` seconds.
        """
        argv = [command, *args]
        logger.debug("Running %s (cwd=%s)", " ".join(argv), cwd)
        try:
            # Own session, so a timeout can kill rustc and build scripts too
            proc = subprocess.Popen(
                argv,
                cwd=str(cwd) if cwd is not None else None,
                stdout=subprocess.PIPE,
                stderr=subprocess.PIPE,
                start_new_session=True,
            )
        except (OSError, ValueError) as e:
            # ValueError: embedded NUL in an argument
            raise ToolchainLaunchError(str(e)) from e

        with proc:
            try:
                stdout, stderr = proc.communicate(timeout=timeout)
            except subprocess.TimeoutExpired as e:
                _kill_group(proc)
                stdout, stderr = proc.communicate()
                raise ToolchainTimeout(
                    f"{command} timed out after {timeout:g} seconds",
                    timeout=timeout,
                    stdout=_decode(stdout),
                    stderr=_decode(stderr),
                ) from e
            except BaseException:
                _kill_group(proc)
                raise

        return Invocation(
            command=command,
            args=list(args),
            cwd=cwd,
            stdout=_decode(stdout),
            stderr=_decode(stderr),
            returncode=proc.returncode,
        )

    # -------------------------------------------------------------------------
    # Steps used by the compile pipeline
    # -------------------------------------------------------------------------

    def init_project(self, project_dir: Path, name: str) -> Invocation:
        return self.run(
            self.settings.cargo_bin,
            ["init", "--name", name, "--lib"],
            cwd=project_dir,
            timeout=self.settings.command_timeout,
        )

    def clean(self, project_dir: Path) -> Invocation:
        return self.run(
            self.settings.cargo_bin,
            ["clean"],
            cwd=project_dir,
            timeout=self.settings.command_timeout,
        )

    def add_target(self) -> Invocation:
        return self.run(
            self.settings.rustup_bin,
            ["target", "add", self.settings.wasm_target],
            timeout=self.settings.command_timeout,
        )

    def build(self, project_dir: Path) -> Invocation:
        return self.run(
            self.settings.cargo_bin,
            ["build", "--target", self.settings.wasm_target, "--release"],
            cwd=project_dir,
            timeout=self.settings.build_timeout,
        )
