"""
threadboard.services._shared.ports
==================================

*Ports* (hexagonal interfaces) the service layer depends on.

Modules
-------
- :mod:`token_provider`:
    Defines :class:`~.TokenProvider`, the abstraction for issuing access and
    refresh tokens and verifying refresh tokens.

Concrete adapters live under ``threadboard.infra``.
"""

from __future__ import annotations

from .token_provider import RefreshClaims, StubTokenProvider, TokenProvider

__all__ = ["RefreshClaims", "StubTokenProvider", "TokenProvider"]
