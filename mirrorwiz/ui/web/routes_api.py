"""
API routes — JSON endpoints for the wizard.

    GET  /api/tools                   tools grouped by category
    GET  /api/tools/<tool>            one tool with mirrors and OS versions
    GET  /api/render?tool=&mirror=&os=   rendered outputs (400 on a bad selection)
    GET  /api/wizard                  current wizard state
    POST /api/wizard/select           advance the wizard
    POST /api/speed-test/<tool>       probe a tool's mirrors
"""

from __future__ import annotations

import logging

from flask import Blueprint, current_app, jsonify, request

from mirrorwiz.core.registry import (
    RegistryError,
    RegistryLookupError,
    get_tool,
    list_categories,
    render_artifact,
)
from mirrorwiz.ui.web.wizard import WizardError

logger = logging.getLogger(__name__)

api_bp = Blueprint("api", __name__)


def _ctx() -> dict:
    return current_app.extensions["mirrorwiz"]


def _tool_summary(key: str) -> dict:
    tool = get_tool(key)
    info = tool.info()
    return {
        "key": key,
        "name": info.name,
        "icon": info.icon,
        "mirrors": len(tool.mirrors()),
        "requires_os_version": info.requires_os_version,
        "supports_config_file": info.supports_config_file,
    }


# ── Registry ─────────────────────────────────────────────────────────


@api_bp.route("/tools")
def api_tools():  # type: ignore[no-untyped-def]
    """All tools, grouped by category."""
    return jsonify([
        {
            "category": group.key.value,
            "label": group.label,
            "icon": group.icon,
            "tools": [_tool_summary(key) for key in group.tools],
        }
        for group in list_categories()
    ])


@api_bp.route("/tools/<tool_key>")
def api_tool(tool_key: str):  # type: ignore[no-untyped-def]
    """One tool in full."""
    try:
        tool = get_tool(tool_key)
    except RegistryLookupError as e:
        return jsonify({"error": str(e)}), 404

    data = tool.info().model_dump(mode="json")
    data["mirrors"] = [m.model_dump(mode="json") for m in tool.mirrors().values()]
    return jsonify(data)


@api_bp.route("/render")
def api_render():  # type: ignore[no-untyped-def]
    """Render one selection."""
    tool_key = request.args.get("tool", "")
    mirror_key = request.args.get("mirror", "")
    os_version = request.args.get("os") or None
    if not tool_key or not mirror_key:
        return jsonify({"error": "Both 'tool' and 'mirror' are required"}), 400

    try:
        artifact = render_artifact(tool_key, mirror_key, os_version)
    except RegistryError as e:
        return jsonify({"error": str(e)}), 400
    return jsonify(artifact.model_dump(mode="json"))


# ── Wizard ───────────────────────────────────────────────────────────


def _state_response():  # type: ignore[no-untyped-def]
    ctx = _ctx()
    return jsonify(ctx["state"].to_dict(ctx["options"], ctx["site"]))


@api_bp.route("/wizard")
def api_wizard():  # type: ignore[no-untyped-def]
    """Current wizard state."""
    return _state_response()


@api_bp.route("/wizard/select", methods=["POST"])
def api_wizard_select():  # type: ignore[no-untyped-def]
    """Apply one wizard action.

    Body (one of):
        {"reset": true} | {"back": true} | {"tool": "apt"}
        | {"os": "ubuntu-22.04"} | {"mirror": "aliyun"}
    """
    ctx = _ctx()
    state = ctx["state"]
    body = request.get_json(silent=True) or {}

    try:
        if body.get("reset"):
            state.reset()
        elif body.get("back"):
            state.back()
        elif "tool" in body:
            state.select_tool(str(body["tool"]))
            if ctx["options"].auto_speed_test:
                state.speed = ctx["prober"](state.tool).to_dict()
        elif "os" in body:
            state.select_os(str(body["os"]))
        elif "mirror" in body:
            state.select_mirror(str(body["mirror"]))
        else:
            return jsonify({"error": "Expected one of: reset, back, tool, os, mirror"}), 400
    except WizardError as e:
        return jsonify({"error": str(e)}), 400

    return _state_response()


# ── Speed test ───────────────────────────────────────────────────────


@api_bp.route("/speed-test/<tool_key>", methods=["POST"])
def api_speed_test(tool_key: str):  # type: ignore[no-untyped-def]
    """Probe every mirror of a tool."""
    try:
        get_tool(tool_key)
    except RegistryLookupError as e:
        return jsonify({"error": str(e)}), 404

    result = _ctx()["prober"](tool_key).to_dict()
    state = _ctx()["state"]
    if state.tool == tool_key:
        state.speed = result
    return jsonify(result)
