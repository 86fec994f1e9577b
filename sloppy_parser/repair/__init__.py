"""Reconstruction of candidate spans into strict JSON."""

from __future__ import annotations

from .base import BaseReconstructor, Reconstruction
from .json_reconstructor import JsonReconstructor
from .orchestrator import repair
from .yaml_reconstructor import YamlReconstructor

__all__ = [
    "BaseReconstructor",
    "JsonReconstructor",
    "Reconstruction",
    "YamlReconstructor",
    "repair",
]
