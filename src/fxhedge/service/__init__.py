"""HTTP JSON service over the engine entry points."""

from fxhedge.service.app import create_app

__all__ = ["create_app"]
