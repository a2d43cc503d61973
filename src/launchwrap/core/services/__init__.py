"""
Service layer: one entry point the CLI (or an embedding IDE) calls.
"""

from launchwrap.core.services.launch import LaunchService, normalize_exit_code

__all__ = ["LaunchService", "normalize_exit_code"]
