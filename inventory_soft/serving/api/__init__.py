"""
REST API
"""
from inventory_soft.serving.api.main import create_app

__all__ = ["create_app"]
