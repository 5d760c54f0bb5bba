"""Configuration helpers for the parser and the canvas engine."""

from __future__ import annotations

import copy
from dataclasses import dataclass


@dataclass
class ParserConfig:
    # Raise on expression failures instead of substituting 0.0.
    strict_expressions: bool = False


@dataclass
class CanvasConfig:
    snap_tolerance: float = 25.0
    arrow_base_length: float = 80.0
    arrow_reference_magnitude: float = 10.0
    arrow_min_length: float = 30.0
    arrow_max_length: float = 150.0
    arrow_head_size: float = 8.0
    arrow_label_offset: float = 15.0
    arc_thickness: float = 20.0
    thumbnail_radius: float = 50.0
    thumbnail_thickness: float = 8.0
    thumbnail_padding: float = 10.0
    arc_segments: int = 20


_PARSER_CONFIG = ParserConfig()
_CANVAS_CONFIG = CanvasConfig()


def get_parser_config() -> ParserConfig:
    return copy.deepcopy(_PARSER_CONFIG)


def set_parser_config(config: ParserConfig) -> None:
    global _PARSER_CONFIG
    _PARSER_CONFIG = copy.deepcopy(config)


def get_canvas_config() -> CanvasConfig:
    return copy.deepcopy(_CANVAS_CONFIG)


def set_canvas_config(config: CanvasConfig) -> None:
    global _CANVAS_CONFIG
    _CANVAS_CONFIG = copy.deepcopy(config)
