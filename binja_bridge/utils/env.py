"""Loading of ``BINJA_MCP_*`` defaults from a ``.env`` file."""
from __future__ import annotations

import os
from pathlib import Path
from typing import Optional

from dotenv import find_dotenv, load_dotenv

__all__ = ["ENV_FILE_VAR", "load_env"]

ENV_FILE_VAR = "BINJA_BRIDGE_ENV_FILE"

_loaded_from: Optional[Path] = None
_env_loaded = False


def load_env(*, dotenv_path: Optional[str | Path] = None, force: bool = False) -> Optional[Path]:
    """Load a ``.env`` file once and return its path, or ``None`` if none was found.

    The file is *dotenv_path*, else ``$BINJA_BRIDGE_ENV_FILE``, else the nearest
    ``.env`` above the working directory. Variables already exported win.
    """

    global _env_loaded, _loaded_from
    if _env_loaded and not force:
        return _loaded_from

    candidate = dotenv_path or os.environ.get(ENV_FILE_VAR) or find_dotenv(usecwd=True)
    path = Path(candidate) if candidate else None
    if path is not None and path.is_file():
        load_dotenv(dotenv_path=path, override=False)
        _loaded_from = path
    else:
        _loaded_from = None
    _env_loaded = True
    return _loaded_from
