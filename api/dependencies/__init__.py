"""FastAPI dependencies."""
from api.dependencies.session import build_controller, get_controller

__all__ = ["build_controller", "get_controller"]
