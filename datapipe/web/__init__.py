"""
Optional FastAPI integration: pagination dependency, response envelope
and exception handlers.
"""

from .dependencies import page_params
from .handler import global_exception_handler, register_exception_handlers
from .response import ResponseModel

__all__ = ["ResponseModel", "global_exception_handler", "page_params", "register_exception_handlers"]
