"""Plan building and rendering algorithms."""

from .plan_builder import build_plan, compute_crop, resolve_target_width, select_output_mode
from .render_executor import render

__all__ = [
    "build_plan",
    "compute_crop",
    "render",
    "resolve_target_width",
    "select_output_mode",
]
