"""MCP server for the NEAR contract compiler.

Exposes the compile pipeline and template catalog as MCP tools for use
with desktop assistants and other MCP clients.

Uses STDIO transport.
"""

import anyio.to_thread
from mcp.server.fastmcp import FastMCP

from near_compiler.models import CompileRequest, CompileResponse
from near_compiler.services.compiler import get_compiler
from near_compiler.services.templates import get_templates

mcp = FastMCP("near-compiler")


# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------


def _format_size(size: int) -> str:
    return f"{size} bytes ({size / 1024:.2f} KB)"


def _format_result(contract_name: str, result: CompileResponse) -> str:
    """Format a CompileResponse as readable text."""
    if result.success:
        parts = [f"## Compiled `{contract_name}`"]
        if result.wasm_size is not None:
            parts.append(f"WASM file generated: {_format_size(result.wasm_size)}")
        else:
            parts.append("Build succeeded but no .wasm artifact was found.")
        if result.errors:
            parts.append("\n## Warnings")
            parts.append(f"```\n{result.errors.rstrip()}\n```")
    else:
        parts = [f"## Compilation of `{contract_name}` failed"]
        if result.errors:
            parts.append(f"```\n{result.errors.rstrip()}\n```")

    if result.output.strip():
        parts.append("\n## Output")
        parts.append(f"```\n{result.output.rstrip()}\n```")

    return "\n".join(parts)


# ---------------------------------------------------------------------------
# Tools
# ---------------------------------------------------------------------------


@mcp.tool()
def list_templates() -> str:
    """List the built-in example contracts."""
    templates = get_templates()
    lines = [f"{len(templates)} template(s):"]
    for t in templates:
        lines.append(f"  {t.name}  -  {t.description}")
    return "\n".join(lines)


@mcp.tool()
def get_template(name: str) -> str:
    """Get the Rust source of a built-in example contract.

    Args:
        name: Template name as shown by `list_templates` (case-insensitive).
    """
    for t in get_templates():
        if t.name.lower() == name.strip().lower():
            return f"## {t.name}\n{t.description}\n\n```rust\n{t.code}\n```"
    return f"Template not found: {name}"


@mcp.tool()
async def compile_contract(code: str, contract_name: str) -> str:
    """Compile a NEAR smart contract (Rust) to wasm.

    The contract is built as a cdylib with near-sdk in a throwaway cargo
    project. Returns the wasm size on success, or the compiler diagnostics.

    Args:
        code: Full contents of src/lib.rs.
        contract_name: Crate name, e.g. "hello-world".
    """
    request = CompileRequest(code=code, contract_name=contract_name)
    # Builds block for up to build_timeout; run them off the event loop
    result = await anyio.to_thread.run_sync(get_compiler().compile, request)
    return _format_result(contract_name, result)


# ---------------------------------------------------------------------------
# Entry point
# ---------------------------------------------------------------------------


def main():
    """Run the compiler MCP server on STDIO transport."""
    mcp.run(transport="stdio")


if __name__ == "__main__":
    main()
