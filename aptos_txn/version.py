"""
Version helpers for the aptos-txn package.

We keep a static __version__ (PEP 440) and expose the user-agent string the
REST client sends with every request.
"""

from __future__ import annotations

import platform

# Bump this when publishing
__version__ = "0.3.0"


def user_agent() -> str:
    """e.g. 'aptos-txn-py/0.3.0 (CPython 3.12.1)'."""
    return (
        f"aptos-txn-py/{__version__} "
        f"({platform.python_implementation()} {platform.python_version()})"
    )


__all__ = ["__version__", "user_agent"]
