"""Reel script generation: prompts, templates and the composer."""

from .composer import ScriptComposer, extract_json_object, parse_script
from .image_analysis import ProductImageAnalyzer
from .models import ImageAnalysis, ReelGoal, ReelScript, ScriptDraft, normalize_hashtags
from .templates import FALLBACK_TEMPLATES, ScriptTemplate, render_fallback, select_template

__all__ = [
    "ScriptComposer",
    "ProductImageAnalyzer",
    "ReelGoal",
    "ReelScript",
    "ScriptDraft",
    "ImageAnalysis",
    "ScriptTemplate",
    "FALLBACK_TEMPLATES",
    "extract_json_object",
    "parse_script",
    "normalize_hashtags",
    "render_fallback",
    "select_template",
]
