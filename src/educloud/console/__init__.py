"""
FastAPI console serving the provider and school portal route trees.
"""
from educloud.console.app import create_app

__all__ = ["create_app"]
