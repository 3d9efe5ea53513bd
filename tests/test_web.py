"""
Tests for the web wizard — app factory, API routes, static site serving.
"""

from __future__ import annotations

from pathlib import Path

import pytest
from flask.testing import FlaskClient

from mirrorwiz.core.models.site import SiteConfig
from mirrorwiz.core.registry import get_tool, render_artifact, tool_keys
from mirrorwiz.core.services.speed_test import MirrorLatency, SpeedTestResult
from mirrorwiz.ui.web.server import WizardOptions, WizardState, create_app
from mirrorwiz.ui.web.wizard import WizardError, render_result


class FakeProber:
    """Marks the first mirror fastest, records every call."""

    def __init__(self):
        self.calls: list[str] = []

    def __call__(self, tool_key: str) -> SpeedTestResult:
        self.calls.append(tool_key)
        mirrors = list(get_tool(tool_key).mirrors().values())
        return SpeedTestResult(tool=tool_key, results=[
            MirrorLatency(mirror=m.key, name=m.name, url=m.test_url,
                          latency_ms=10 * (i + 1), fastest=i == 0)
            for i, m in enumerate(mirrors)
        ])


@pytest.fixture()
def site_dir(tmp_path: Path) -> Path:
    """A tiny generated site."""
    root = tmp_path / "dist"
    (root / "tools" / "npm").mkdir(parents=True)
    (root / "scripts").mkdir()
    (root / "index.html").write_text("<h1>home</h1>")
    (root / "tools" / "npm" / "index.html").write_text("<h1>npm</h1>")
    (root / "scripts" / "npm-aliyun.sh").write_text("#!/bin/bash\necho hi\n")
    (tmp_path / "secret.txt").write_text("nope")
    return root


@pytest.fixture()
def prober() -> FakeProber:
    return FakeProber()


def _client(site_dir: Path, prober: FakeProber, **options) -> FlaskClient:
    app = create_app(
        site_dir, WizardOptions(**options),
        site=SiteConfig(site_url="https://mirrors.test"), prober=prober,
    )
    app.config["TESTING"] = True
    return app.test_client()


@pytest.fixture()
def client(site_dir: Path, prober: FakeProber) -> FlaskClient:
    return _client(site_dir, prober)


# ═══════════════════════════════════════════════════════════════════
#  App factory
# ═══════════════════════════════════════════════════════════════════


class TestAppFactory:
    def test_creates_app(self, site_dir: Path, prober):
        app = create_app(site_dir, prober=prober)
        assert app is not None
        assert app.config["SITE_DIR"] == str(site_dir)
        assert isinstance(app.extensions["mirrorwiz"]["state"], WizardState)
        assert app.extensions["mirrorwiz"]["options"] == WizardOptions()

    def test_blueprints_registered(self, site_dir: Path, prober):
        app = create_app(site_dir, prober=prober)
        assert "api" in app.blueprints
        assert "site" in app.blueprints


# ═══════════════════════════════════════════════════════════════════
#  Registry API
# ═══════════════════════════════════════════════════════════════════


class TestRegistryAPI:
    def test_tools(self, client: FlaskClient):
        resp = client.get("/api/tools")
        assert resp.status_code == 200
        data = resp.get_json()
        keys = [t["key"] for group in data for t in group["tools"]]
        assert sorted(keys) == sorted(tool_keys())

    def test_tool(self, client: FlaskClient):
        data = client.get("/api/tools/apt").get_json()
        assert data["requires_os_version"] is True
        assert "ubuntu-22.04" in data["os_versions"]
        assert len(data["mirrors"]) == len(get_tool("apt").mirrors())

    def test_unknown_tool(self, client: FlaskClient):
        assert client.get("/api/tools/nope").status_code == 404

    def test_render(self, client: FlaskClient):
        resp = client.get("/api/render?tool=npm&mirror=aliyun")
        assert resp.status_code == 200
        data = resp.get_json()
        assert data["manual_command"] == "npm config set registry https://registry.npmmirror.com"
        assert data["filename"] == "npm-aliyun.sh"

    def test_render_versioned(self, client: FlaskClient):
        data = client.get("/api/render?tool=apt&mirror=aliyun&os=debian-11").get_json()
        assert data["script"] == render_artifact("apt", "aliyun", "debian-11").script

    @pytest.mark.parametrize("query", [
        "tool=npm",
        "mirror=aliyun",
        "tool=nope&mirror=aliyun",
        "tool=npm&mirror=nope",
        "tool=apt&mirror=aliyun",
        "tool=npm&mirror=aliyun&os=debian-12",
    ])
    def test_render_bad_selection(self, client: FlaskClient, query):
        resp = client.get(f"/api/render?{query}")
        assert resp.status_code == 400
        assert "error" in resp.get_json()


# ═══════════════════════════════════════════════════════════════════
#  Wizard API
# ═══════════════════════════════════════════════════════════════════


class TestWizardAPI:
    def _select(self, client, **body):
        return client.post("/api/wizard/select", json=body)

    def test_initial_state(self, client: FlaskClient):
        data = client.get("/api/wizard").get_json()
        assert data["step"] == "tool"
        assert data["progress"] == {
            "steps": ["tool", "mirror", "result"], "current": 1, "total": 3, "percent": 0,
        }

    def test_versioned_flow(self, client: FlaskClient, prober):
        data = self._select(client, tool="apt").get_json()
        assert data["step"] == "os"
        assert data["progress"]["steps"] == ["tool", "os", "mirror", "result"]
        assert data["speed"]["fastest"] == "aliyun"
        assert prober.calls == ["apt"]

        data = self._select(client, os="ubuntu-22.04").get_json()
        assert data["step"] == "mirror"

        data = self._select(client, mirror="tsinghua").get_json()
        assert data["step"] == "result"
        assert data["progress"]["percent"] == 100
        result = data["result"]
        assert result["filename"] == "apt-ubuntu2204-tsinghua.sh"
        assert [t["id"] for t in result["tabs"]] == ["oneclick", "manual", "script"]
        assert result["tabs"][0]["content"] == (
            "curl -sSL https://mirrors.test/scripts/apt-ubuntu2204-tsinghua.sh | bash"
        )

    def test_unversioned_flow_with_config(self, client: FlaskClient):
        self._select(client, tool="npm")
        data = self._select(client, mirror="aliyun").get_json()
        tabs = data["result"]["tabs"]
        assert [t["id"] for t in tabs] == ["oneclick", "manual", "script", "config"]

    def test_back_and_reset(self, client: FlaskClient):
        self._select(client, tool="apt")
        self._select(client, os="debian-12")
        self._select(client, mirror="aliyun")

        data = self._select(client, back=True).get_json()
        assert data["step"] == "mirror"
        assert data["os"] == "debian-12"

        data = self._select(client, back=True).get_json()
        assert data["step"] == "os"

        data = self._select(client, reset=True).get_json()
        assert data["step"] == "tool"
        assert data["tool"] is None
        assert "speed" not in data

    def test_out_of_order_selection(self, client: FlaskClient):
        assert self._select(client, mirror="aliyun").status_code == 400
        self._select(client, tool="apt")
        assert self._select(client, mirror="aliyun").status_code == 400
        assert self._select(client, os="centos-7").status_code == 400

    def test_os_for_unversioned_tool(self, client: FlaskClient):
        self._select(client, tool="npm")
        assert self._select(client, os="debian-12").status_code == 400

    def test_unknown_tool(self, client: FlaskClient):
        resp = self._select(client, tool="nope")
        assert resp.status_code == 400
        assert "Unknown tool" in resp.get_json()["error"]

    def test_empty_body(self, client: FlaskClient):
        assert client.post("/api/wizard/select", json={}).status_code == 400

    def test_no_auto_speed_test(self, site_dir: Path, prober):
        client = _client(site_dir, prober, auto_speed_test=False, progress_bar=False)
        data = client.post("/api/wizard/select", json={"tool": "npm"}).get_json()
        assert "speed" not in data
        assert "progress" not in data
        assert prober.calls == []

    def test_flat_results(self, site_dir: Path, prober):
        client = _client(site_dir, prober, tabbed_results=False)
        client.post("/api/wizard/select", json={"tool": "go"})
        result = client.post("/api/wizard/select", json={"mirror": "goproxy"}).get_json()["result"]
        assert set(result) == {"oneclick", "manual", "script", "page", "filename"}
        assert result["page"] == "/tools/go/goproxy/"


class TestSpeedTestAPI:
    def test_probe(self, client: FlaskClient, prober):
        resp = client.post("/api/speed-test/pip")
        assert resp.status_code == 200
        assert resp.get_json()["tool"] == "pip"
        assert prober.calls == ["pip"]

    def test_updates_current_tool(self, site_dir: Path, prober):
        client = _client(site_dir, prober, auto_speed_test=False)
        client.post("/api/wizard/select", json={"tool": "pip"})
        client.post("/api/speed-test/pip")
        assert client.get("/api/wizard").get_json()["speed"]["tool"] == "pip"

    def test_unknown_tool(self, client: FlaskClient, prober):
        assert client.post("/api/speed-test/nope").status_code == 404
        assert prober.calls == []


# ═══════════════════════════════════════════════════════════════════
#  Wizard state (unit)
# ═══════════════════════════════════════════════════════════════════


class TestWizardState:
    def test_context_before_result(self):
        state = WizardState()
        with pytest.raises(WizardError):
            state.context()

    def test_back_on_empty_history(self):
        state = WizardState()
        state.back()
        assert state.current_step() == "tool"

    def test_render_result_matches_registry(self):
        state = WizardState()
        state.select_tool("cargo")
        state.select_mirror("ustc")
        result = render_result(
            state.context(), WizardOptions(tabbed_results=False), SiteConfig(site_url="https://x.test"),
        )
        artifact = render_artifact("cargo", "ustc")
        assert result["script"] == artifact.script
        assert result["config"] == artifact.config_file

    def test_one_click_follows_scripts_dir(self):
        state = WizardState()
        state.select_tool("npm")
        state.select_mirror("aliyun")
        site = SiteConfig(site_url="https://x.test", scripts_dir="sh")
        result = render_result(state.context(), WizardOptions(tabbed_results=False), site)
        assert result["oneclick"] == "curl -sSL https://x.test/sh/npm-aliyun.sh | bash"

    def test_reselecting_tool_drops_later_steps(self):
        state = WizardState()
        state.select_tool("apt")
        state.select_os("debian-12")
        state.select_mirror("aliyun")
        state.select_tool("npm")
        assert state.history == ["tool"]

        state.back()
        assert state.current_step() == "tool"
        assert state.tool is None

    def test_reselecting_os_drops_mirror_step(self):
        state = WizardState()
        state.select_tool("apt")
        state.select_os("debian-12")
        state.select_mirror("aliyun")
        state.select_os("ubuntu-22.04")
        assert state.history == ["tool", "os"]

        state.back()
        assert state.current_step() == "os"
        state.back()
        assert state.current_step() == "tool"


# ═══════════════════════════════════════════════════════════════════
#  Static site
# ═══════════════════════════════════════════════════════════════════


class TestStaticSite:
    def test_home(self, client: FlaskClient):
        resp = client.get("/")
        assert resp.status_code == 200
        assert b"home" in resp.data

    def test_directory_index(self, client: FlaskClient):
        resp = client.get("/tools/npm/")
        assert resp.status_code == 200
        assert b"npm" in resp.data

    def test_script_mime(self, client: FlaskClient):
        resp = client.get("/scripts/npm-aliyun.sh")
        assert resp.status_code == 200
        assert resp.mimetype == "text/x-shellscript"
        assert resp.data.startswith(b"#!/bin/bash")

    def test_missing(self, client: FlaskClient):
        assert client.get("/tools/nope/").status_code == 404

    def test_traversal_blocked(self, client: FlaskClient):
        assert client.get("/../secret.txt").status_code == 404
        assert client.get("/%2e%2e/secret.txt").status_code == 404

    def test_no_site(self, tmp_path: Path, prober):
        client = _client(tmp_path / "missing", prober)
        assert client.get("/").status_code == 404
        assert client.get("/api/tools").status_code == 200
