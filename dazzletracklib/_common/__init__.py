"""Common components shared by the tracking core.

This internal package contains storage helpers used by the classifier,
the frozen-source adapter, the wrapper cache and the usage registry.
It should NOT be imported directly by users.

Important: This package must NEVER import from core to avoid
circular dependencies.
"""

from ._identity_store import _IdentityStore

__all__ = [
    '_IdentityStore',
]
