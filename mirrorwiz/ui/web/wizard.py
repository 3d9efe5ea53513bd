"""
Wizard state — the step-by-step selection behind the web UI.

Steps:
    tool → os (only for OS-versioned tools) → mirror → result

``WizardState`` belongs to the controller. The registry never reads it;
it only receives a finished selection through ``render_artifact()``.
Presentation switches live in ``WizardOptions`` and are fixed when the
app is created.
"""

from __future__ import annotations

from dataclasses import dataclass, field

from mirrorwiz.core.models.site import SiteConfig
from mirrorwiz.core.registry import (
    RegistryError,
    RenderContext,
    RenderContextError,
    build_artifact,
    get_tool,
)


@dataclass(frozen=True)
class WizardOptions:
    """Presentation switches for the wizard.

    Attributes:
        progress_bar:    Include step progress in every state response.
        auto_speed_test: Probe a tool's mirrors as soon as it is selected.
        tabbed_results:  Return the result as ordered tabs instead of flat fields.
    """

    progress_bar: bool = True
    auto_speed_test: bool = True
    tabbed_results: bool = True


_STEP_ORDER = ("tool", "os", "mirror")


class WizardError(ValueError):
    """A selection that does not fit the current wizard step."""


@dataclass
class WizardState:
    tool: str | None = None
    os_version: str | None = None
    mirror: str | None = None
    speed: dict | None = None
    history: list[str] = field(default_factory=list)

    # ── Steps ───────────────────────────────────────────────────────

    def steps(self) -> list[str]:
        if self.tool and get_tool(self.tool).requires_os_version:
            return ["tool", "os", "mirror", "result"]
        return ["tool", "mirror", "result"]

    def current_step(self) -> str:
        if self.tool is None:
            return "tool"
        if get_tool(self.tool).requires_os_version and self.os_version is None:
            return "os"
        if self.mirror is None:
            return "mirror"
        return "result"

    def progress(self) -> dict:
        steps = self.steps()
        index = steps.index(self.current_step())
        return {
            "steps": steps,
            "current": index + 1,
            "total": len(steps),
            "percent": round(index * 100 / (len(steps) - 1)),
        }

    # ── Transitions ─────────────────────────────────────────────────

    def reset(self) -> None:
        self.tool = self.os_version = self.mirror = None
        self.speed = None
        self.history.clear()

    def select_tool(self, tool_key: str) -> None:
        try:
            get_tool(tool_key)
        except RegistryError as e:
            raise WizardError(str(e)) from e
        self.tool = tool_key
        self.os_version = self.mirror = None
        self.speed = None
        self._enter("tool")

    def select_os(self, os_version: str) -> None:
        if self.tool is None:
            raise WizardError("Select a tool first")
        tool = get_tool(self.tool)
        if not tool.requires_os_version:
            raise WizardError(f"Tool '{self.tool}' does not take an OS version")
        if os_version not in tool.os_versions():
            raise WizardError(f"Unknown OS version '{os_version}' for tool '{self.tool}'")
        self.os_version = os_version
        self.mirror = None
        self._enter("os")

    def select_mirror(self, mirror_key: str) -> None:
        step = self.current_step()
        if step in ("tool", "os"):
            raise WizardError(f"Select {'a tool' if step == 'tool' else 'an OS version'} first")
        if mirror_key not in get_tool(self.tool).mirrors():
            raise WizardError(f"Unknown mirror '{mirror_key}' for tool '{self.tool}'")
        self.mirror = mirror_key
        self._enter("mirror")

    def _enter(self, step: str) -> None:
        # Re-entering a step drops it and every later step from the history.
        rank = _STEP_ORDER.index(step)
        self.history = [h for h in self.history if _STEP_ORDER.index(h) < rank]
        self.history.append(step)

    def back(self) -> None:
        """Undo the most recent selection."""
        if not self.history:
            return
        last = self.history.pop()
        if last == "mirror":
            self.mirror = None
        elif last == "os":
            self.os_version = self.mirror = None
        else:
            self.tool = self.os_version = self.mirror = None
            self.speed = None

    def context(self) -> RenderContext:
        """The finished selection. Raises ``WizardError`` before the result step."""
        if self.current_step() != "result":
            raise WizardError("Selection is not complete")
        try:
            return RenderContext.build(get_tool(self.tool), self.mirror, self.os_version)
        except RenderContextError as e:
            raise WizardError(str(e)) from e

    # ── Output ──────────────────────────────────────────────────────

    def to_dict(self, options: WizardOptions, site: SiteConfig) -> dict:
        data: dict = {
            "step": self.current_step(),
            "tool": self.tool,
            "os": self.os_version,
            "mirror": self.mirror,
        }
        if options.progress_bar:
            data["progress"] = self.progress()
        if self.speed is not None:
            data["speed"] = self.speed
        if data["step"] == "result":
            data["result"] = render_result(self.context(), options, site)
        return data


def render_result(context: RenderContext, options: WizardOptions, site: SiteConfig) -> dict:
    """The wizard's final output: one-click command, manual steps, script, config."""
    artifact = build_artifact(context)
    one_click = f"curl -sSL {site.site_url}/{site.scripts_dir}/{artifact.filename} | bash"
    sections = [
        ("oneclick", "🚀 One-click", one_click),
        ("manual", "📝 Manual", artifact.manual_command),
        ("script", "💾 Script", artifact.script),
    ]
    if artifact.config_file is not None:
        sections.append(("config", "📄 Config file", artifact.config_file))

    if options.tabbed_results:
        return {
            "page": artifact.page_path,
            "filename": artifact.filename,
            "tabs": [{"id": i, "label": label, "content": text} for i, label, text in sections],
        }
    flat = {i: text for i, _label, text in sections}
    flat.update(page=artifact.page_path, filename=artifact.filename)
    return flat
