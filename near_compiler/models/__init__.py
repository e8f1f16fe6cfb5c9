from .schemas import (
    CompileRequest,
    CompileResponse,
    ContractTemplate,
    HealthResponse,
)

__all__ = [
    "CompileRequest",
    "CompileResponse",
    "ContractTemplate",
    "HealthResponse",
]
