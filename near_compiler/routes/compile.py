"""Compile endpoint."""

from fastapi import APIRouter
from fastapi.concurrency import run_in_threadpool

from ..models import CompileRequest, CompileResponse
from ..services.compiler import get_compiler

router = APIRouter()


@router.post("/compile", response_model=CompileResponse)
async def compile_contract(request: CompileRequest):
    """Compile a NEAR contract to wasm.

    POST /compile - always 200; failures are reported in the body.
    The build blocks, so it runs on the threadpool.
    """
    compiler = get_compiler()
    return await run_in_threadpool(compiler.compile, request)
