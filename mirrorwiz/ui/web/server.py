"""
Web server — Flask app factory for the wizard API and the generated site.

The app serves two things:
  /api/...   JSON endpoints driving the step-by-step wizard
  /...       the static site written by ``mirrorwiz generate``
"""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Callable

from flask import Flask

from mirrorwiz.core.models.site import SiteConfig
from mirrorwiz.ui.web.wizard import WizardOptions, WizardState

logger = logging.getLogger(__name__)

__all__ = ["WizardOptions", "WizardState", "create_app", "run_server"]


def create_app(
    site_dir: Path,
    options: WizardOptions | None = None,
    *,
    site: SiteConfig | None = None,
    prober: Callable[[str], object] | None = None,
) -> Flask:
    """Create and configure the Flask application.

    Args:
        site_dir: Directory holding the generated site.
        options: Wizard presentation switches.
        site: Site settings, used for one-click command URLs.
        prober: ``tool_key → SpeedTestResult``. Defaults to
            ``mirrorwiz.core.services.speed_test.probe_tool``.
    """
    if prober is None:
        from mirrorwiz.core.services.speed_test import probe_tool

        prober = probe_tool

    app = Flask(__name__, static_folder=None)
    app.config["SITE_DIR"] = str(site_dir)
    app.extensions["mirrorwiz"] = {
        "options": options or WizardOptions(),
        "site": site or SiteConfig(),
        "state": WizardState(),
        "prober": prober,
    }

    from mirrorwiz.ui.web.routes_api import api_bp
    from mirrorwiz.ui.web.routes_site import site_bp

    app.register_blueprint(api_bp, url_prefix="/api")
    app.register_blueprint(site_bp)

    logger.info("Web app created (site=%s)", site_dir)
    return app


def run_server(
    app: Flask,
    host: str = "127.0.0.1",
    port: int = 8000,
    debug: bool = False,
) -> None:
    """Run the Flask development server."""
    logger.info("Starting web server on %s:%d", host, port)
    app.run(host=host, port=port, debug=debug, use_reloader=False)
