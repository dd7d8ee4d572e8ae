"""Static registry of known AI agents and the host signals that identify them.

Each ``DiscoveryTarget`` lists, per evidence category, what the engine
should look for: dot-directories and config files, environment variable
prefixes, executables on ``PATH``, application bundles, and process
command-line regexes. Only the categories a target fills in count towards
its possible confidence.

Platform Notes:
    App paths are keyed by ``sys.platform``. macOS bundles live under
    ``/Applications``; Linux packages usually install to ``/usr/share`` or
    ``/opt``; Windows installs under ``C:\\Program Files``.
"""

from __future__ import annotations

import re

from agentradar.discovery.models import DiscoveryTarget

# Helper processes spawned by macOS apps that look like agents but are not.
DEFAULT_PROCESS_EXCLUSIONS: tuple[re.Pattern[str], ...] = (
    re.compile(r"CursorUIViewService", re.IGNORECASE),
    re.compile(r"TextInputUIMacHelper", re.IGNORECASE),
)


def _cmd(*names: str) -> tuple[re.Pattern[str], ...]:
    """Regexes matching ``name`` as a standalone command or path basename."""
    return tuple(
        re.compile(rf"(^|/){re.escape(name)}(\s|$)", re.IGNORECASE)
        for name in names
    )


def _bundle(app_name: str) -> re.Pattern[str]:
    return re.compile(rf"{re.escape(app_name)}\.app", re.IGNORECASE)


def _build_targets() -> list[DiscoveryTarget]:
    """Build the complete list of built-in discovery targets.

    Returns:
        Ordered list of targets; order is the tie-break for equal
        confidence in scan results.
    """
    return [
        # -- Coding assistants --
        DiscoveryTarget(
            id="claude-code",
            name="Claude Code",
            filesystem_signals=(".claude", ".claude/settings.json"),
            env_signals=("CLAUDE_",),
            process_signals=_cmd("claude"),
            process_exclusions=(
                re.compile(r"ollama\s+launch\s+claude", re.IGNORECASE),
            ),
            binaries=("claude",),
        ),
        DiscoveryTarget(
            id="cursor",
            name="Cursor",
            filesystem_signals=(".cursor", ".cursor/settings.json"),
            process_signals=(_bundle("Cursor"), *_cmd("cursor")),
            process_exclusions=DEFAULT_PROCESS_EXCLUSIONS,
            binaries=("cursor",),
            app_paths={
                "darwin": ("/Applications/Cursor.app",),
                "linux": ("/usr/share/cursor", "/opt/Cursor"),
                "win32": ("C:\\Program Files\\Cursor\\Cursor.exe",),
            },
        ),
        DiscoveryTarget(
            id="codex",
            name="Codex",
            filesystem_signals=(
                ".codex",
                "Library/Application Support/Codex/User/settings.json",
            ),
            process_signals=(_bundle("Codex"), *_cmd("codex")),
            binaries=("codex",),
            app_paths={
                "darwin": ("/Applications/Codex.app",),
                "linux": ("/opt/codex", "/usr/share/codex"),
                "win32": ("C:\\Program Files\\Codex\\Codex.exe",),
            },
        ),
        DiscoveryTarget(
            id="vscode",
            name="Visual Studio Code",
            filesystem_signals=(
                ".vscode",
                ".vscode/settings.json",
                "Library/Application Support/Code/User/settings.json",
            ),
            process_signals=(_bundle("Visual Studio Code"), *_cmd("code")),
            binaries=("code",),
            app_paths={
                "darwin": ("/Applications/Visual Studio Code.app",),
                "linux": ("/usr/share/code", "/opt/visual-studio-code"),
                "win32": ("C:\\Program Files\\Microsoft VS Code\\Code.exe",),
            },
        ),
        DiscoveryTarget(
            id="zed",
            name="Zed",
            filesystem_signals=(".zed", ".config/zed/settings.json"),
            process_signals=(_bundle("Zed"), *_cmd("zed")),
            binaries=("zed",),
            app_paths={
                "darwin": ("/Applications/Zed.app",),
                "linux": ("/usr/share/zed", "/opt/zed"),
                "win32": ("C:\\Program Files\\Zed\\Zed.exe",),
            },
        ),
        DiscoveryTarget(
            id="gemini-cli",
            name="Gemini CLI",
            env_signals=("GOOGLE_API_KEY", "GEMINI_"),
            process_signals=_cmd("gemini"),
            binaries=("gemini",),
        ),
        DiscoveryTarget(
            id="windsurf",
            name="Windsurf",
            filesystem_signals=(".windsurf", ".windsurf/mcp_config.json"),
            process_signals=(_bundle("Windsurf"), *_cmd("windsurf")),
            binaries=("windsurf",),
            app_paths={
                "darwin": ("/Applications/Windsurf.app",),
                "linux": ("/usr/share/windsurf", "/opt/Windsurf"),
                "win32": ("C:\\Program Files\\Windsurf\\Windsurf.exe",),
            },
        ),
        DiscoveryTarget(
            id="claude-desktop",
            name="Claude Desktop",
            filesystem_signals=(
                "claude_desktop_config.json",
                "Library/Application Support/Claude/claude_desktop_config.json",
            ),
            env_signals=("ANTHROPIC_API_KEY",),
            process_signals=(
                _bundle("Claude"),
                re.compile(r"(^|/)Claude(\s|$)"),
            ),
            app_paths={"darwin": ("/Applications/Claude.app",)},
        ),
        DiscoveryTarget(
            id="antigravity",
            name="Antigravity (Gemini Code Assist)",
            filesystem_signals=(".gemini", ".gemini/settings.json"),
            env_signals=("GEMINI_", "GOOGLE_CLOUD_PROJECT"),
            binaries=("gemini-code-assist",),
        ),
        # -- Editor extensions --
        DiscoveryTarget(
            id="cline",
            name="Cline",
            filesystem_signals=(".cline", ".vscode/cline_mcp_settings.json"),
        ),
        DiscoveryTarget(
            id="continue",
            name="Continue",
            filesystem_signals=(".continue", ".continue/config.json"),
        ),
        DiscoveryTarget(
            id="copilot",
            name="GitHub Copilot",
            filesystem_signals=(
                ".github-copilot",
                ".vscode/extensions/github.copilot",
            ),
            env_signals=("COPILOT_",),
        ),
        # -- Terminal agents and local model runtimes --
        DiscoveryTarget(
            id="aider",
            name="Aider",
            filesystem_signals=(".aider",),
            process_signals=_cmd("aider"),
            binaries=("aider",),
        ),
        DiscoveryTarget(
            id="ollama",
            name="Ollama",
            env_signals=("OLLAMA_",),
            process_signals=_cmd("ollama"),
            binaries=("ollama",),
        ),
        DiscoveryTarget(
            id="lmstudio",
            name="LM Studio",
            process_signals=(_bundle("LM Studio"), *_cmd("lms")),
            binaries=("lms",),
            app_paths={"darwin": ("/Applications/LM Studio.app",)},
        ),
        DiscoveryTarget(
            id="opencode",
            name="OpenCode",
            filesystem_signals=(".opencode", ".opencode/config.json"),
            process_signals=_cmd("opencode"),
            binaries=("opencode",),
        ),
    ]


# Module-level constant: the canonical list of built-in targets.
AGENT_TARGETS: list[DiscoveryTarget] = _build_targets()


def get_target(agent_id: str) -> DiscoveryTarget | None:
    """Look up a built-in target by id."""
    for target in AGENT_TARGETS:
        if target.id == agent_id:
            return target
    return None
