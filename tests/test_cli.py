"""
Tests for CLI commands — registry browsing, rendering, generation, validation.
"""

import json
import textwrap
from pathlib import Path

import pytest
from click.testing import CliRunner

from mirrorwiz.core.registry import get_tool, render_artifact, tool_keys
from mirrorwiz.core.services.speed_test import MirrorLatency, SpeedTestResult
from mirrorwiz.main import cli


@pytest.fixture(autouse=True)
def _isolated_cwd(tmp_path: Path, monkeypatch):
    """Run every command from an empty directory (no mirrorwiz.yml above)."""
    work = tmp_path / "work"
    work.mkdir()
    monkeypatch.chdir(work)
    return work


class TestCLIGlobal:
    """Tests for global CLI behavior."""

    def test_help(self):
        runner = CliRunner()
        result = runner.invoke(cli, ["--help"])
        assert result.exit_code == 0
        assert "Mirror Wizard" in result.output
        for command in ("tools", "render", "generate", "validate", "speed-test", "web"):
            assert command in result.output

    def test_version(self):
        runner = CliRunner()
        result = runner.invoke(cli, ["--version"])
        assert result.exit_code == 0
        assert "0.1.0" in result.output

    def test_invalid_config(self, tmp_path: Path):
        config = tmp_path / "mirrorwiz.yml"
        config.write_text("site_url: not-a-url\n")
        runner = CliRunner()
        result = runner.invoke(cli, ["-c", str(config), "generate", "sitemap"])
        assert result.exit_code == 1
        assert "Invalid site configuration" in result.output

    def test_missing_config(self, tmp_path: Path):
        runner = CliRunner()
        result = runner.invoke(cli, ["-c", str(tmp_path / "nope.yml"), "generate", "sitemap"])
        assert result.exit_code == 1
        assert "not found" in result.output


class TestToolsCommand:
    def test_list(self):
        result = CliRunner().invoke(cli, ["tools", "list"])
        assert result.exit_code == 0
        assert "System package managers" in result.output
        assert "apt" in result.output and "cran" in result.output

    def test_list_json(self):
        result = CliRunner().invoke(cli, ["tools", "list", "--json"])
        assert result.exit_code == 0
        data = json.loads(result.output)
        keys = [t["key"] for group in data for t in group["tools"]]
        assert sorted(keys) == sorted(tool_keys())
        assert data[0]["category"] == "system"

    def test_show(self):
        result = CliRunner().invoke(cli, ["tools", "show", "apt"])
        assert result.exit_code == 0
        assert "debian-12" in result.output
        assert "tsinghua" in result.output

    def test_show_json(self):
        result = CliRunner().invoke(cli, ["tools", "show", "docker", "--json"])
        assert result.exit_code == 0
        data = json.loads(result.output)
        assert data["key"] == "docker"
        assert data["supports_config_file"] is True
        assert [m["key"] for m in data["mirrors"]] == list(get_tool("docker").mirrors())

    def test_show_unknown(self):
        result = CliRunner().invoke(cli, ["tools", "show", "nope"])
        assert result.exit_code == 1
        assert "Unknown tool" in result.output


class TestRenderCommand:
    def test_manual(self):
        result = CliRunner().invoke(cli, ["render", "npm", "aliyun", "--part", "manual"])
        assert result.exit_code == 0
        assert result.output == "npm config set registry https://registry.npmmirror.com\n"

    def test_script_is_byte_exact(self):
        result = CliRunner().invoke(cli, ["render", "apt", "tsinghua", "--os", "debian-12"])
        assert result.exit_code == 0
        assert result.output == render_artifact("apt", "tsinghua", "debian-12").script

    def test_config(self):
        result = CliRunner().invoke(cli, ["render", "pip", "aliyun", "--part", "config"])
        assert result.exit_code == 0
        assert result.output == render_artifact("pip", "aliyun").config_file

    def test_config_unsupported(self):
        result = CliRunner().invoke(cli, ["render", "go", "goproxy", "--part", "config"])
        assert result.exit_code == 1
        assert "no standalone config file" in result.output

    def test_missing_os(self):
        result = CliRunner().invoke(cli, ["render", "apt", "aliyun"])
        assert result.exit_code == 1
        assert "requires an OS version" in result.output

    def test_unknown_mirror(self):
        result = CliRunner().invoke(cli, ["render", "npm", "nope"])
        assert result.exit_code == 1
        assert "Unknown mirror" in result.output


class TestGenerateCommand:
    def test_all(self, tmp_path: Path):
        out = tmp_path / "site"
        result = CliRunner().invoke(cli, ["generate", "all", "--out", str(out)])
        assert result.exit_code == 0, result.output
        assert "Scripts:" in result.output
        assert "Pages:" in result.output
        assert "Sitemap:" in result.output
        assert (out / "scripts" / "npm-aliyun.sh").is_file()
        assert (out / "scripts" / "index.json").is_file()
        assert (out / "tools" / "npm" / "aliyun" / "index.html").is_file()
        assert (out / "sitemap.xml").is_file()

    def test_scripts_json(self, tmp_path: Path):
        out = tmp_path / "site"
        result = CliRunner().invoke(cli, ["generate", "scripts", "--out", str(out), "--json"])
        assert result.exit_code == 0
        data = json.loads(result.output)
        assert data["ok"] is True
        assert data["succeeded"] == data["expected"]

    def test_output_dir_from_config(self, tmp_path: Path):
        config = tmp_path / "mirrorwiz.yml"
        config.write_text(textwrap.dedent("""\
            site_url: https://mirrors.example.org
            output_dir: public
        """))
        result = CliRunner().invoke(cli, ["-c", str(config), "generate", "sitemap"])
        assert result.exit_code == 0
        sitemap = tmp_path / "public" / "sitemap.xml"
        assert "https://mirrors.example.org/tools/" in sitemap.read_text()

    def test_pages_copy_scripts(self, tmp_path: Path):
        runner = CliRunner()
        build = tmp_path / "build"
        site = tmp_path / "site"
        runner.invoke(cli, ["generate", "scripts", "--out", str(build)])
        result = runner.invoke(cli, [
            "generate", "pages", "--out", str(site), "--scripts-from", str(build / "scripts"),
        ])
        assert result.exit_code == 0
        assert "Scripts copied:" in result.output
        assert (site / "scripts" / "apt-debian12-aliyun.sh").is_file()


class TestValidateCommand:
    def test_generated_scripts_pass(self, tmp_path: Path):
        runner = CliRunner()
        out = tmp_path / "site"
        runner.invoke(cli, ["generate", "scripts", "--out", str(out)])
        result = runner.invoke(cli, ["validate", str(out / "scripts"), "--strict"])
        assert result.exit_code == 0
        assert "Validated" in result.output

    def test_issues_are_advisory(self, tmp_path: Path):
        (tmp_path / "bad.sh").write_text("rm -rf /tmp/x\n")
        result = CliRunner().invoke(cli, ["validate", str(tmp_path)])
        assert result.exit_code == 0
        assert "bad.sh" in result.output
        assert "Missing shebang" in result.output

    def test_strict(self, tmp_path: Path):
        (tmp_path / "bad.sh").write_text("rm -rf /tmp/x\n")
        result = CliRunner().invoke(cli, ["validate", str(tmp_path), "--strict", "--json"])
        assert result.exit_code == 1
        data = json.loads(result.output)
        assert data["issues"] == 1

    def test_missing_directory(self, tmp_path: Path):
        result = CliRunner().invoke(cli, ["validate", str(tmp_path / "nope")])
        assert result.exit_code == 1

    def test_default_directory(self, _isolated_cwd: Path):
        runner = CliRunner()
        runner.invoke(cli, ["generate", "scripts"])
        assert (_isolated_cwd / "dist" / "scripts").is_dir()
        result = runner.invoke(cli, ["validate", "--json"])
        assert result.exit_code == 0
        assert json.loads(result.output)["issues"] == 0


class TestSpeedTestCommand:
    def _fake(self, latencies):
        def probe(tool_key, attempts=3, timeout=5.0, opener=None):
            results = [
                MirrorLatency(mirror=m.key, name=m.name, url=m.test_url, latency_ms=ms)
                for m, ms in zip(get_tool(tool_key).mirrors().values(), latencies)
            ]
            reachable = [r for r in results if r.latency_ms is not None]
            if reachable:
                min(reachable, key=lambda r: r.latency_ms).fastest = True
            return SpeedTestResult(tool=tool_key, results=results)
        return probe

    def test_fastest_suggested(self, monkeypatch):
        monkeypatch.setattr(
            "mirrorwiz.core.services.speed_test.probe_tool", self._fake([120, 40, None, 80]),
        )
        result = CliRunner().invoke(cli, ["speed-test", "npm", "-n", "1"])
        assert result.exit_code == 0
        assert "mirrorwiz render npm tencent" in result.output
        assert "unreachable" in result.output

    def test_nothing_reachable(self, monkeypatch):
        monkeypatch.setattr(
            "mirrorwiz.core.services.speed_test.probe_tool", self._fake([None, None, None]),
        )
        result = CliRunner().invoke(cli, ["speed-test", "pip"])
        assert result.exit_code == 1
        assert "No mirror reachable" in result.output

    def test_json(self, monkeypatch):
        monkeypatch.setattr(
            "mirrorwiz.core.services.speed_test.probe_tool", self._fake([10, 20, 30]),
        )
        result = CliRunner().invoke(cli, ["speed-test", "pip", "--json"])
        assert result.exit_code == 0
        assert json.loads(result.output)["fastest"] == "aliyun"

    def test_attempts_range(self):
        result = CliRunner().invoke(cli, ["speed-test", "npm", "-n", "0"])
        assert result.exit_code == 2

    def test_unknown_tool(self):
        result = CliRunner().invoke(cli, ["speed-test", "nope"])
        assert result.exit_code == 1
