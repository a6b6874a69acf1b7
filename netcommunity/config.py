"""
Configuration constants for netcommunity.
=========================================

This module contains the default parameters used throughout the
toolkit. Every algorithm takes its default argument values from here,
so a run is reproducible from these constants alone.

Overrides can be kept in a YAML file and loaded with :func:`load_config`.
"""

import logging
from pathlib import Path
from typing import Any, Dict, Union

import yaml

from .errors import InvalidArgument

logger = logging.getLogger(__name__)

# Random seed for all stochastic operations
RANDOM_SEED = 42

# Clique enumeration
DEFAULT_MIN_CLIQUE_SIZE = 3

# Community detection configuration
COMMUNITY_DETECTION_METHOD = "louvain"
COMMUNITY_DETECTION_SEED = RANDOM_SEED
LOUVAIN_RESOLUTION = 1.0

# Walktrap (Pons & Latapy, 2005) walk length
WALKTRAP_STEPS = 4

# Two modularity values closer than this are treated as equal
MODULARITY_TOLERANCE = 1e-10

DEFAULTS: Dict[str, Any] = {
    "method": COMMUNITY_DETECTION_METHOD,
    "seed": COMMUNITY_DETECTION_SEED,
    "resolution": LOUVAIN_RESOLUTION,
    "steps": WALKTRAP_STEPS,
    "n_walks": None,
    "require_connected": False,
}


def load_config(config_path: Union[str, Path]) -> Dict[str, Any]:
    """
    Load a YAML configuration file and merge it over :data:`DEFAULTS`.

    Parameters
    ----------
    config_path : str or Path
        Path to the YAML file

    Returns
    -------
    Dict[str, Any]
        Configuration dictionary containing every key of ``DEFAULTS``

    Raises
    ------
    FileNotFoundError
        If the file does not exist
    InvalidArgument
        If the file contains keys that are not known settings
    """
    config_path = Path(config_path)
    if not config_path.exists():
        raise FileNotFoundError(f"Configuration file not found: {config_path}")

    with open(config_path, "r", encoding="utf-8") as f:
        loaded = yaml.safe_load(f) or {}

    if not isinstance(loaded, dict):
        raise InvalidArgument(f"Configuration root must be a mapping: {config_path}")

    unknown = sorted(set(loaded) - set(DEFAULTS))
    if unknown:
        raise InvalidArgument(f"Unknown configuration keys: {unknown}")

    config = dict(DEFAULTS)
    config.update(loaded)
    logger.debug(f"Loaded configuration from {config_path}: {config}")
    return config
