"""Read conceptzoom settings from .conceptzoom.toml or pyproject.toml."""

from __future__ import annotations

import logging
import tomllib
from dataclasses import dataclass
from pathlib import Path

from conceptzoom.builder import ON_ERROR_CHOICES
from conceptzoom.concepts import Category

logger = logging.getLogger(__name__)


@dataclass
class ExplorerConfig:
    on_error: str = "skip"
    categories: list[Category] | None = None  # None = whole catalog


def read_config(directory: Path) -> ExplorerConfig:
    """Return settings found next to a snapshot in *directory*.

    ``.conceptzoom.toml`` (``[conceptzoom]`` table) wins over
    ``[tool.conceptzoom]`` in ``pyproject.toml``.  Unreadable files are
    ignored.
    """
    table = _read_table(directory)
    config = ExplorerConfig()
    if not table:
        return config

    on_error = table.get("on_error")
    if on_error in ON_ERROR_CHOICES:
        config.on_error = on_error
    elif on_error is not None:
        logger.warning("Ignoring on_error=%r (expected one of %s)", on_error, ON_ERROR_CHOICES)

    labels = table.get("categories")
    if isinstance(labels, list):
        categories = []
        for label in labels:
            try:
                categories.append(Category.from_label(str(label)))
            except ValueError as e:
                logger.warning("%s", e)
        config.categories = categories

    return config


def _read_table(directory: Path) -> dict | None:
    # Try .conceptzoom.toml first
    conceptzoom_toml = directory / ".conceptzoom.toml"
    if conceptzoom_toml.exists():
        try:
            with open(conceptzoom_toml, "rb") as f:
                data = tomllib.load(f)
            return data.get("conceptzoom", {})
        except (OSError, tomllib.TOMLDecodeError) as e:
            logger.debug("Could not read %s: %s", conceptzoom_toml, e)

    # Fall back to [tool.conceptzoom] in pyproject.toml
    pyproject = directory / "pyproject.toml"
    if pyproject.exists():
        try:
            with open(pyproject, "rb") as f:
                data = tomllib.load(f)
            return data.get("tool", {}).get("conceptzoom", {})
        except (OSError, tomllib.TOMLDecodeError) as e:
            logger.debug("Could not read %s: %s", pyproject, e)

    return None
