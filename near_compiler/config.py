"""Server configuration."""

from pathlib import Path
from typing import Optional
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application settings.

    All settings can be overridden via environment variables with NEAR_COMPILER_ prefix.
    Example: NEAR_COMPILER_BUILD_TIMEOUT=600 NEAR_COMPILER_PORT=9000 near-compiler
    """

    model_config = SettingsConfigDict(env_prefix="NEAR_COMPILER_")

    # Server
    host: str = "127.0.0.1"
    port: int = 8080
    service_name: str = "NEAR Contract Compiler"
    cors_origin: str = "http://localhost:3000"
    log_level: str = "INFO"

    # Toolchain
    cargo_bin: str = "cargo"
    rustup_bin: str = "rustup"
    wasm_target: str = "wasm32-unknown-unknown"
    build_timeout: float = 300.0    # primary `cargo build`
    command_timeout: float = 120.0  # init / clean / rustup

    # Generated Cargo.toml
    near_sdk_version: str = "5.5.0"
    borsh_version: str = "1.0"

    # Workspaces
    workspace_root: Optional[Path] = None  # None -> system temp dir
    strict_scaffold: bool = False          # fail when `cargo init` exits non-zero


settings = Settings()
