"""Interactive loop configuration: tick rate and external programs."""

from __future__ import annotations

import os
from dataclasses import dataclass
from typing import Any, Mapping

from Mdq.config.common import get_section, read_float, read_optional_str, read_str


@dataclass(frozen=True, slots=True)
class InteractiveConfig:
    """Store validated interactive loop settings.

    Attributes:
        tick_rate: Seconds between tick events.
        editor_env: Environment variable naming the editor.
        pager_env: Environment variable naming the pager.
        editor: Editor command, from config or `editor_env`; None lets click
            pick its default.
        pager: Pager command, from config or `pager_env`; None lets click
            pick its default.
    """

    tick_rate: float
    editor_env: str
    pager_env: str
    editor: str | None
    pager: str | None


def load_interactive(raw: Mapping[str, Any]) -> InteractiveConfig:
    """Load interactive config, resolving editor and pager from the environment."""
    section = get_section(raw, "interactive")
    editor_env = read_str(section, "interactive", "editor_env")
    pager_env = read_str(section, "interactive", "pager_env")
    return InteractiveConfig(
        tick_rate=read_float(section, "interactive", "tick_rate"),
        editor_env=editor_env,
        pager_env=pager_env,
        editor=read_optional_str(section, "interactive", "editor") or _command_from_env(editor_env),
        pager=read_optional_str(section, "interactive", "pager") or _command_from_env(pager_env),
    )


def check_interactive(config: InteractiveConfig) -> None:
    """Validate interactive domain constraints."""
    if config.tick_rate <= 0:
        raise ValueError("interactive.tick_rate must be positive")
    if not config.editor_env.strip():
        raise ValueError("interactive.editor_env must not be empty")
    if not config.pager_env.strip():
        raise ValueError("interactive.pager_env must not be empty")


def _command_from_env(env_name: str) -> str | None:
    """Read a command line from an environment variable, None when unset."""
    return os.getenv(env_name, "").strip() or None
