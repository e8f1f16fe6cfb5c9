from .compile import router as compile_router
from .templates import router as templates_router

__all__ = ["compile_router", "templates_router"]
