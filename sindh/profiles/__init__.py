"""Worker and employer profiles."""
from .service import ProfileService

__all__ = ["ProfileService"]
