"""
Configuration for visgram.

Defines VisSettings, a frozen dataclass carrying the rendering option defaults that
visualise() seeds into every new builder, plus persistence and logging settings.
Defaults are sourced from visgram.core.constants (the single source of truth).

Source of truth
- visgram.core.constants.DEFAULT_WIDTH, DEFAULT_HEIGHT, DEFAULT_RENDERER,
  DEFAULT_DURATION, DEFAULT_JSON_INDENT, DEFAULT_LOG_LEVEL

Import DAG discipline
- Depends only on stdlib and visgram.core.constants.

Notes
- Precedence is environment > TOML > defaults.
- Invalid values are ignored (with a warning) and the lower-precedence value is kept.
"""

from __future__ import annotations

import logging
import os
import tomllib
from dataclasses import dataclass, replace
from pathlib import Path
from typing import Any, Literal

from visgram.core.constants import DEFAULT_DURATION as CORE_DURATION
from visgram.core.constants import DEFAULT_HEIGHT as CORE_HEIGHT
from visgram.core.constants import DEFAULT_JSON_INDENT as CORE_JSON_INDENT
from visgram.core.constants import DEFAULT_LOG_LEVEL as CORE_LOG_LEVEL
from visgram.core.constants import DEFAULT_RENDERER as CORE_RENDERER
from visgram.core.constants import DEFAULT_WIDTH as CORE_WIDTH

__all__ = ["VisSettings"]

log = logging.getLogger(__name__)

Renderer = Literal["svg", "canvas"]

_RENDERERS = ("svg", "canvas")
_LOG_LEVELS = ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL")
_INT_FIELDS = ("width", "height", "padding", "duration", "json_indent")


@dataclass(frozen=True)
class VisSettings:
    """
    Runtime settings for visgram.

    Attributes:
        width (int): Plot width in pixels.
        height (int): Plot height in pixels.
        padding (int | None): Padding around the plot; None lets the renderer decide.
        renderer (Literal["svg","canvas"]): Renderer the spec is intended for.
        duration (int): Transition duration in milliseconds.
        json_indent (int): Indentation used by save_spec/show_spec.
        log_level (str): Level the CLI configures logging with.

    Examples:
        >>> from visgram.io.config import VisSettings
        >>> VisSettings(width=300).options()["width"]
        300
    """

    width: int = CORE_WIDTH
    height: int = CORE_HEIGHT
    padding: int | None = None
    renderer: Renderer = CORE_RENDERER  # type: ignore[assignment]
    duration: int = CORE_DURATION
    json_indent: int = CORE_JSON_INDENT
    log_level: str = CORE_LOG_LEVEL

    def options(self) -> dict[str, Any]:
        """Rendering options for a new builder; padding only when set."""
        out: dict[str, Any] = {"width": self.width, "height": self.height}
        if self.padding is not None:
            out["padding"] = self.padding
        out["renderer"] = self.renderer
        out["duration"] = self.duration
        return out

    # Configuration loaders (env/TOML) with precedence: env > TOML > defaults.

    @classmethod
    def _apply_mapping(cls, base: VisSettings, cfg: dict[str, Any] | None) -> VisSettings:
        """Apply a loose config mapping onto VisSettings, returning a new instance."""
        if not isinstance(cfg, dict):
            return base

        s = base
        for name in _INT_FIELDS:
            if name not in cfg:
                continue
            try:
                value = int(cfg[name])
            except (TypeError, ValueError):
                log.warning("ignoring non-integer %s setting: %r", name, cfg[name])
                continue
            if value < 0:
                log.warning("ignoring negative %s setting: %r", name, value)
                continue
            s = replace(s, **{name: value})

        if "renderer" in cfg:
            renderer = str(cfg["renderer"]).strip().lower()
            if renderer in _RENDERERS:
                s = replace(s, renderer=renderer)  # type: ignore[arg-type]
            else:
                log.warning("ignoring unknown renderer %r", cfg["renderer"])

        if "log_level" in cfg:
            level = str(cfg["log_level"]).strip().upper()
            if level in _LOG_LEVELS:
                s = replace(s, log_level=level)
            else:
                log.warning("ignoring unknown log level %r", cfg["log_level"])

        return s

    @classmethod
    def from_env(cls, base: VisSettings | None = None, prefix: str = "VISGRAM_") -> VisSettings:
        """
        Build VisSettings from environment variables. Precedence is env > base > defaults.

        Recognized variables:
            - VISGRAM_WIDTH, VISGRAM_HEIGHT, VISGRAM_PADDING
            - VISGRAM_RENDERER ("svg" | "canvas")
            - VISGRAM_DURATION
            - VISGRAM_JSON_INDENT
            - VISGRAM_LOG_LEVEL
        """
        s = base or cls()
        mapping: dict[str, Any] = {}
        for name in (*_INT_FIELDS, "renderer", "log_level"):
            v = os.getenv(prefix + name.upper())
            if v:
                mapping[name] = v
        return cls._apply_mapping(s, mapping)

    @classmethod
    def from_toml(cls, path: str | os.PathLike[str] | None = None) -> VisSettings:
        """
        Build VisSettings from a TOML file.

        Search order when `path` is None:
            1) ./visgram.toml (with either an [options] table or top-level keys)
            2) ./pyproject.toml under [tool.visgram]

        Returns defaults if no file is present or the file is not valid TOML.
        """
        s = cls()

        def _load_toml(p: Path) -> dict[str, Any] | None:
            try:
                with p.open("rb") as fh:
                    return tomllib.load(fh)
            except (OSError, tomllib.TOMLDecodeError) as exc:
                log.warning("could not read settings from %s: %s", p, exc)
                return None

        cand: list[Path] = []
        if path is not None:
            cand.append(Path(path))
        else:
            cand.append(Path.cwd() / "visgram.toml")
            cand.append(Path.cwd() / "pyproject.toml")

        cfg: dict[str, Any] | None = None
        for p in cand:
            if not p.exists():
                continue
            data = _load_toml(p)
            if not isinstance(data, dict):
                continue
            if p.name == "pyproject.toml":
                tool = data.get("tool", {})
                cfg = tool.get("visgram") if isinstance(tool, dict) else None
            elif isinstance(data.get("options"), dict):
                cfg = data["options"]
            else:
                cfg = data
            if cfg:
                log.debug("loaded settings from %s", p)
                break

        return cls._apply_mapping(s, cfg)

    @classmethod
    def load(cls, path: str | os.PathLike[str] | None = None) -> VisSettings:
        """
        Load VisSettings applying precedence: environment > TOML > defaults.

        Args:
            path: Optional explicit TOML path. If None, search visgram.toml, pyproject.toml.
        """
        s = cls.from_toml(path)
        return cls.from_env(base=s)
