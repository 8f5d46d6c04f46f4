"""API route modules."""
from api.routes import session

__all__ = ["session"]
