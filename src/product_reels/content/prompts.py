"""Prompt builders for reel scripts and image analysis."""

from __future__ import annotations

from ..catalog.models import Product
from .models import ReelGoal

GOAL_DIRECTIONS: dict[ReelGoal, str] = {
    ReelGoal.REACH: (
        "Maximise shares and watch time. Open with a scroll-stopping hook, keep "
        "it punchy and broadly relatable."
    ),
    ReelGoal.ENGAGEMENT: (
        "Maximise comments and saves. Ask the viewer to choose, vote or reply."
    ),
    ReelGoal.CONVERSION: (
        "Drive purchases. Lead with the product benefit, show the price and "
        "create urgency."
    ),
}

SCRIPT_PROMPT = """Write a script for a 7-15 second vertical product reel.

PRODUCT:
- Title: {title}
- Price: {price}
- Category: {category}
- Tags: {tags}
- Description: {description}

GOAL: {goal}
{direction}
{trends}
Return ONLY a JSON object with exactly these keys:
{{
  "hook": "first 2 seconds, under 10 words",
  "scenes": ["scene 1 description", "scene 2 description", "scene 3 description"],
  "on_screen_text": ["short overlay line", "short overlay line"],
  "caption": "Instagram caption, lowercase, 2-3 short paragraphs",
  "hashtags": ["#Tag1", "#Tag2", "#Tag3", "#Tag4", "#Tag5"],
  "cta": "one call-to-action line"
}}"""

IMAGE_ANALYSIS_PROMPT = """Look at this product photo and describe it for a social media editor.

Return ONLY a JSON object:
{
  "colors": ["dominant colour", "accent colour"],
  "style": "one or two words, e.g. streetwear, minimal, vintage",
  "mood": "one word",
  "description": "one sentence describing what is shown"
}"""


def build_script_prompt(
    product: Product,
    goal: ReelGoal,
    trend_hints: list[str] | None = None,
) -> str:
    """Build the JSON-shaped script prompt for a product."""
    description = " ".join(product.description.split())[:600]
    trends = ""
    if trend_hints:
        joined = ", ".join(trend_hints[:5])
        trends = f"\nTRENDING NOW (weave one in naturally): {joined}\n"

    return SCRIPT_PROMPT.format(
        title=product.title,
        price=product.price_label,
        category=product.category or "general",
        tags=", ".join(product.tags[:10]) or "none",
        description=description or "n/a",
        goal=goal.value,
        direction=GOAL_DIRECTIONS[goal],
        trends=trends,
    )
