"""
Shell helpers — building blocks for generated setup scripts.

Every generated script has the same five parts:

  1. progress messages   (``echo`` lines)
  2. backup              (copy any file about to be overwritten)
  3. apply               (the tool-specific mirror change)
  4. verify              (show the resulting configuration)
  5. undo hint           (how to restore the previous state)

``compose_script()`` lays those parts out; tool modules only supply the
``apply`` and ``verify`` bodies. Output is deterministic: backup suffixes
are shell ``$(date ...)`` expressions, never a render-time timestamp.
"""

from __future__ import annotations

from mirrorwiz.core.models.mirror import Mirror

SHEBANG = "#!/bin/bash"
GENERATOR_TAG = "# Generated by Mirror Wizard"
BACKUP_SUFFIX = ".backup.$(date +%Y%m%d%H%M%S)"


def echo(text: str) -> str:
    """Return an ``echo`` line printing ``text`` literally."""
    escaped = (
        text.replace("\\", "\\\\")
        .replace('"', '\\"')
        .replace("$", "\\$")
        .replace("`", "\\`")
    )
    return f'echo "{escaped}"'


def backup_file(path: str, *, sudo: bool = False, label: str = "") -> list[str]:
    """Lines that copy ``path`` aside if it exists.

    ``label`` replaces the path in the progress message; use it when
    ``path`` is a shell variable reference.
    """
    prefix = "sudo " if sudo else ""
    if path.startswith('"'):
        target = '"' + path.strip('"') + BACKUP_SUFFIX + '"'
    else:
        target = f"{path}{BACKUP_SUFFIX}"
    return [
        f"if [ -f {path} ]; then",
        f"    {prefix}cp {path} {target}",
        f"    {echo(f'✓ Backed up {label or path}')}",
        "fi",
    ]


def heredoc(target: str, content: str, *, sudo: bool = False) -> list[str]:
    """Lines that write ``content`` verbatim to ``target``."""
    if sudo:
        opener = f"sudo tee {target} > /dev/null << 'EOF'"
    else:
        opener = f"cat > {target} << 'EOF'"
    return [opener, *content.splitlines(), "EOF"]


def append_once(target: str, line: str) -> list[str]:
    """Lines that append ``line`` to ``target`` unless it is already there."""
    quoted = line.replace("'", "'\\''")
    return [
        f"if ! grep -qxF '{quoted}' {target} 2>/dev/null; then",
        f"    echo '{quoted}' >> {target}",
        "fi",
    ]


def compose_script(
    *,
    title: str,
    mirror: Mirror,
    apply: list[str],
    verify: list[str],
    undo: str,
    backup: list[str] | None = None,
    os_label: str = "",
) -> str:
    """Assemble a complete setup script.

    Args:
        title: Tool display name used in messages (``NPM``).
        mirror: The selected mirror.
        apply: Lines performing the configuration change.
        verify: Lines printing the resulting configuration.
        undo: Human-readable undo command.
        backup: Lines backing up files that ``apply`` overwrites.
        os_label: Target system label, for OS-versioned tools.
    """
    lines = [SHEBANG, f"# {title} mirror setup - {mirror.name}"]
    if os_label:
        lines.append(f"# Target system: {os_label}")
    lines.append(GENERATOR_TAG)
    if mirror.note:
        lines.append(f"# Note: {mirror.note}")
    lines.append("")
    lines.append(echo(f"Configuring {title} mirror ({mirror.name})..."))
    lines.append("")

    if backup:
        lines.append("# Back up existing configuration")
        lines.extend(backup)
        lines.append("")

    lines.append("# Apply mirror configuration")
    lines.extend(apply)
    lines.append(echo("✓ Mirror configuration updated"))
    lines.append("")

    lines.append("# Verify")
    lines.append(echo("Current configuration:"))
    lines.extend(verify)
    lines.append("")

    lines.append(echo(f"✅ {title} now uses the {mirror.name} mirror"))
    lines.append(echo(f"To undo: {undo}"))
    return "\n".join(lines) + "\n"
