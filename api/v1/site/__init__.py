"""Public archive and single routes declared by content types"""

from .routes import build_site_router

__all__ = ["build_site_router"]
