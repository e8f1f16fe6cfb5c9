from typing import Optional

from pydantic import BaseModel, Field


# Compile models

class CompileRequest(BaseModel):
    """Compilation request: contract source plus the crate name to build it under."""
    code: str
    contract_name: str


class CompileResponse(BaseModel):
    """Compilation result. Always returned with HTTP 200."""
    success: bool
    output: str = ""
    errors: Optional[str] = None
    wasm_size: Optional[int] = Field(None, description="Size of the .wasm artifact in bytes")


# Catalog models

class ContractTemplate(BaseModel):
    """A built-in example contract."""
    name: str
    description: str
    code: str


class HealthResponse(BaseModel):
    status: str
    service: str
