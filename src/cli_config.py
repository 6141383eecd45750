"""Runtime configuration: YAML config file plus CLI overrides.

Precedence, highest first: CLI flags, the config file (``--config``, then
``WPSCAFFOLD_CONFIG``, then the default locations), built-in ``Constants``.
Values are applied onto ``Constants`` so every module sees the same settings.
"""

from __future__ import annotations

import logging
import os
from typing import Any, Dict, Optional

import yaml

from constants import Constants

logger = logging.getLogger(__name__)


def find_config_file(explicit: Optional[str] = None) -> Optional[str]:
    """Return the first existing config file path, or None."""
    candidates = []
    if explicit:
        candidates.append(explicit)
    env_path = os.environ.get(Constants.ENV_CONFIG)
    if env_path:
        candidates.append(env_path)
    candidates.extend(Constants.DEFAULT_CONFIG_LOCATIONS)
    for candidate in candidates:
        path = os.path.expanduser(candidate)
        if os.path.isfile(path):
            return path
    if explicit:
        logger.warning("Config file not found: %s", explicit)
    return None


def load_config(path: Optional[str]) -> Dict[str, Any]:
    """Load a YAML config file; malformed or missing files yield an empty dict."""
    if not path:
        return {}
    try:
        with open(path, "r", encoding="utf-8") as fh:
            data = yaml.safe_load(fh)
    except (OSError, yaml.YAMLError) as e:
        logger.error("Failed to load config %s: %s", path, e)
        return {}
    if not isinstance(data, dict):
        logger.warning("Ignoring config %s: top level is not a mapping", path)
        return {}
    logger.debug("Loaded config from %s", path)
    return data


def apply_config(cfg: Dict[str, Any]) -> None:
    """Apply config file values onto Constants."""
    registry = cfg.get("registry") or {}
    http = cfg.get("http") or {}
    if isinstance(registry, dict):
        if registry.get("api_url"):
            Constants.API_URL_WPORG = str(registry["api_url"]).rstrip("/")
        if registry.get("downloads_url"):
            Constants.DOWNLOADS_URL_WPORG = str(registry["downloads_url"]).rstrip("/")
    if isinstance(http, dict) and http.get("timeout") is not None:
        try:
            Constants.REQUEST_TIMEOUT = float(http["timeout"])
        except (TypeError, ValueError):
            logger.warning("Ignoring invalid http.timeout: %r", http["timeout"])
    if cfg.get("workdir"):
        Constants.WORKDIR_PARENT = os.path.expanduser(str(cfg["workdir"]))


def apply_cli_overrides(args) -> None:
    """Apply CLI overrides for registry endpoints and tunables (highest precedence)."""
    if getattr(args, "API_URL", None):
        Constants.API_URL_WPORG = args.API_URL.rstrip("/")
    if getattr(args, "DOWNLOADS_URL", None):
        Constants.DOWNLOADS_URL_WPORG = args.DOWNLOADS_URL.rstrip("/")
    if getattr(args, "TIMEOUT", None) is not None:
        Constants.REQUEST_TIMEOUT = args.TIMEOUT
    if getattr(args, "WORKDIR", None):
        Constants.WORKDIR_PARENT = args.WORKDIR


def configure(args) -> None:
    """Load the config file and apply it, then the CLI overrides."""
    apply_config(load_config(find_config_file(getattr(args, "CONFIG", None))))
    apply_cli_overrides(args)
