"""
Local HTTP controller so editor extensions can trigger Defold commands.
"""

from .app import create_app, generate_token

__all__ = ["create_app", "generate_token"]
