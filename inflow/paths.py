"""Path helpers for locating the bundled dataset.

 - project_root(): repo root (directory containing this file's parent)
 - data_root(): DATA_ROOT override or project root
 - default_data_source(): INFLOW_DATA_SOURCE override or bundled CSV

INFLOW_DATA_SOURCE may be a local path or an http(s) URL.
"""

from __future__ import annotations

import os
from pathlib import Path
from typing import Mapping, Optional

DATA_FILE_NAME = "water_year_metrics.csv"


def project_root() -> Path:
    # Assume this file is at <root>/inflow/paths.py
    return Path(__file__).resolve().parent.parent


def data_root(environ: Optional[Mapping[str, str]] = None) -> Path:
    env = os.environ if environ is None else environ
    override = env.get("DATA_ROOT")
    if override:
        return Path(override).expanduser()
    return project_root()


def default_data_source(environ: Optional[Mapping[str, str]] = None) -> str:
    env = os.environ if environ is None else environ
    override = env.get("INFLOW_DATA_SOURCE")
    if override:
        return override
    return str(data_root(env) / "data" / DATA_FILE_NAME)


def is_remote(source: str) -> bool:
    return source.lower().startswith(("http://", "https://"))


__all__ = [
    "DATA_FILE_NAME",
    "project_root",
    "data_root",
    "default_data_source",
    "is_remote",
]
