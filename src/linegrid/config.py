"""Session options and their environment overrides."""

from __future__ import annotations

import os
from dataclasses import dataclass
from typing import Dict, Mapping, Optional

ENV_PREFIX = "LINEGRID_"


def _env_int(environ: Mapping[str, str], key: str, fallback: int) -> int:
    value = environ.get(f"{ENV_PREFIX}{key}")
    if value is None:
        return fallback
    try:
        return int(value)
    except ValueError:
        return fallback


@dataclass
class FrontendOptions:
    """How the client attaches to the editor."""

    rows: int = 24
    cols: int = 80
    ext_linegrid: bool = True
    rgb: bool = True
    # Global variable set on the editor so user config can detect this client.
    client_var: str = "linegrid"
    config_file: str = "init.vim"

    @classmethod
    def from_env(cls, environ: Optional[Mapping[str, str]] = None) -> "FrontendOptions":
        env = os.environ if environ is None else environ
        defaults = cls()
        return cls(
            rows=_env_int(env, "ROWS", defaults.rows),
            cols=_env_int(env, "COLS", defaults.cols),
            config_file=env.get(f"{ENV_PREFIX}CONFIG_FILE", defaults.config_file),
        )

    def attach_options(self) -> Dict[str, bool]:
        return {"ext_linegrid": self.ext_linegrid, "rgb": self.rgb}


__all__ = ["ENV_PREFIX", "FrontendOptions"]
