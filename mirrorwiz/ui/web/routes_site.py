"""
Site routes — serve the generated static site.

Directories resolve to their ``index.html``. Paths may not escape the
site directory.
"""

from __future__ import annotations

import mimetypes
from pathlib import Path

from flask import Blueprint, abort, current_app, send_file

site_bp = Blueprint("site", __name__)

# Extra types the system mime table may lack
_MIME_OVERRIDES = {".sh": "text/x-shellscript; charset=utf-8"}


def _site_dir() -> Path:
    return Path(current_app.config["SITE_DIR"]).resolve()


@site_bp.route("/")
@site_bp.route("/<path:filepath>")
def serve_site(filepath: str = ""):  # type: ignore[no-untyped-def]
    """Serve a file from the generated site."""
    root = _site_dir()
    if not root.is_dir():
        abort(404, description="No generated site. Run 'mirrorwiz generate all' first.")

    requested = (root / filepath).resolve()
    if requested != root and root not in requested.parents:
        abort(404)

    if requested.is_dir():
        requested = requested / "index.html"

    if not requested.is_file():
        abort(404, description=f"File not found: {filepath}")

    mime = _MIME_OVERRIDES.get(requested.suffix) or (
        mimetypes.guess_type(str(requested))[0] or "application/octet-stream"
    )
    return send_file(requested, mimetype=mime)
