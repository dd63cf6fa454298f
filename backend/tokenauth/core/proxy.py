"""Client address resolution behind reverse proxies."""

from __future__ import annotations

from flask import Flask
from werkzeug.middleware.proxy_fix import ProxyFix


def init_app(app: Flask) -> None:
    """Apply :class:`werkzeug.middleware.proxy_fix.ProxyFix` when enabled.

    Access tokens are bound to ``request.remote_addr``; behind a proxy that value
    must come from ``X-Forwarded-For``. ``PROXYFIX_X_FOR`` is the number of
    trusted hops (``1`` by default). Disable with ``USE_PROXYFIX=false`` when the
    service is exposed directly, otherwise clients could spoof their address.
    """
    if not app.config.get("USE_PROXYFIX", True):
        return
    hops = int(app.config.get("PROXYFIX_X_FOR", 1))
    app.wsgi_app = ProxyFix(app.wsgi_app, x_for=hops, x_proto=1)
