"""HTTP API package."""

from projecthub.api.server import create_app

__all__ = ["create_app"]
