"""Reverse-proxy awareness for deployments behind a load balancer."""

from __future__ import annotations

from flask import Flask
from werkzeug.middleware.proxy_fix import ProxyFix


def init_app(app: Flask) -> None:
    """Wrap the WSGI pipeline in :class:`ProxyFix` when ``USE_PROXYFIX`` is on.

    ``PROXY_FIX_HOPS`` sets how many upstream proxies are trusted for the
    ``X-Forwarded-*`` headers (one by default), so access logs and
    ``request.url_root`` reflect the client-facing address.
    """
    if not app.config.get("USE_PROXYFIX", True):
        return
    hops = int(app.config.get("PROXY_FIX_HOPS", 1))
    app.wsgi_app = ProxyFix(  # type: ignore[method-assign]
        app.wsgi_app, x_for=hops, x_proto=hops, x_host=hops, x_prefix=hops
    )
