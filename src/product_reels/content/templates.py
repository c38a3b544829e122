"""Static reel script templates used when no provider can write one.

Templates are plain format strings over ``{title}``, ``{price}`` and
``{brand}``. Each goal has a short punchy variant and a longer storyboard
variant; which one runs is rotated by weekday and product category.
"""

from __future__ import annotations

import zlib
from dataclasses import dataclass
from datetime import date

from ..catalog.models import Product
from .models import ReelGoal, ReelScript, normalize_hashtags


@dataclass(frozen=True)
class ScriptTemplate:
    """One fallback script, parameterised by product fields."""

    hook: str
    scenes: tuple[str, ...]
    on_screen_text: tuple[str, ...]
    caption: str
    hashtags: tuple[str, ...]
    cta: str

    def render(self, goal: ReelGoal, **fields: str) -> ReelScript:
        return ReelScript(
            hook=self.hook.format(**fields),
            scenes=[scene.format(**fields) for scene in self.scenes],
            on_screen_text=[line.format(**fields) for line in self.on_screen_text],
            caption=self.caption.format(**fields),
            hashtags=normalize_hashtags([tag.format(**fields) for tag in self.hashtags]),
            cta=self.cta.format(**fields),
            goal=goal,
            source="template",
        )


FALLBACK_TEMPLATES: dict[ReelGoal, tuple[ScriptTemplate, ...]] = {
    ReelGoal.REACH: (
        ScriptTemplate(
            hook="Wait for this! 🖤",
            scenes=(
                "Fast cuts across the product shots, synced to the beat",
                "Slow push-in on the strongest detail shot",
                "End frame with price and link in bio",
            ),
            on_screen_text=("WAIT FOR THIS 🖤", "Game changer alert!", "Link in bio 👆"),
            caption="wait for this drop 😮‍💨\n\n{title} just landed at {price}.\n\nlink in bio 👆",
            hashtags=(
                "#Viral", "#Trending", "#NewDrop", "#MustHave",
                "#ShopNow", "#FashionTips", "#StyleInspo",
            ),
            cta="Follow for more drops like this!",
        ),
        ScriptTemplate(
            hook="They said {title} was just another drop...",
            scenes=(
                "Scene 1 (0-2s): Low-angle detail shot, moody bass starts",
                "Scene 2 (2-5s): Beat drops, quick cuts of fit and fabric details",
                "Scene 3 (5-10s): Full look in slow motion, {brand} mark on screen",
                "Scene 4 (10-15s): Flat-lay end frame with price overlay",
            ),
            on_screen_text=(
                "They said it was just another drop...",
                "...we just made it louder.",
                "{brand} | {price}",
            ),
            caption=(
                "this isn't a trend. it's a language.\n\n"
                "{title} doesn't need an introduction.\n\n"
                "tap the link. wear the attitude. 🖤"
            ),
            hashtags=("#{brand}", "#NewDrop", "#OOTD", "#FitCheck", "#StreetStyle", "#Viral"),
            cta="Link in bio → New drop just landed",
        ),
    ),
    ReelGoal.ENGAGEMENT: (
        ScriptTemplate(
            hook="Left or Right? Comment below! 👇",
            scenes=(
                "Side-by-side product shots",
                "Let the product speak for itself",
                "Comment prompt end frame",
            ),
            on_screen_text=("LEFT OR RIGHT? 👈👉", "Comment below! 👇", "Which one you choosing?"),
            caption="left or right? 👇\n\n{title} at {price}.\n\ndrop a comment!",
            hashtags=("#CommentBelow", "#VoteNow", "#LeftOrRight", "#FashionTips", "#StyleInspo"),
            cta="Comment your choice below!",
        ),
        ScriptTemplate(
            hook="Pick a side.",
            scenes=(
                "Scene 1 (0-2s): Split screen, basic look vs {title}",
                "Scene 2 (2-6s): Zoom into the {brand} side, quick styling montage",
                "Scene 3 (6-10s): Full outfit mirror check",
                "Scene 4 (10-12s): Comment prompt overlay",
            ),
            on_screen_text=("Pick a side.", "Basic or Bold?", "Thought so. 🖤"),
            caption=(
                "there are two types of people.\n\n"
                "the ones who blend in. and the ones who don't.\n\n"
                "which one are you? comment below 👇"
            ),
            hashtags=("#{brand}", "#BasicVsBold", "#StyleChoice", "#FashionReels", "#OOTD"),
            cta="Comment '🖤' if you chose the right side",
        ),
    ),
    ReelGoal.CONVERSION: (
        ScriptTemplate(
            hook="Limited stock — tap the link before it's gone! 🔥",
            scenes=(
                "Product details close-up",
                "Benefits and social proof",
                "Urgency end frame with price",
            ),
            on_screen_text=("LIMITED STOCK 🔥", "Tap link in bio NOW!", "Only a few left!"),
            caption=(
                "limited stock available 🔥\n\n"
                "{title} for {price}.\n\n"
                "tap link in bio before it's gone!"
            ),
            hashtags=("#LimitedStock", "#ShopNow", "#SaleOn", "#DontMissOut", "#Quick"),
            cta="Shop now — link in bio!",
        ),
        ScriptTemplate(
            hook="POV: Your {brand} order just arrived",
            scenes=(
                "Scene 1 (0-3s): Top-down unboxing of {title}",
                "Scene 2 (3-6s): Fabric texture close-up in natural light",
                "Scene 3 (6-10s): Quick transition to wearing it, mirror shot",
                "Scene 4 (10-15s): Product card with name and {price}",
            ),
            on_screen_text=(
                "POV: Your order just arrived",
                "The quality is insane 🤯",
                "Shop now → Link in bio",
            ),
            caption=(
                "unboxing hits different.\n\n"
                "the fabric. the fit. the feeling.\n\n"
                "→ tap link in bio to cop {title} before it's gone"
            ),
            hashtags=("#{brand}", "#Unboxing", "#NewInWardrobe", "#ShopNow", "#QualityOverQuantity"),
            cta="Tap link in bio — limited stock on this drop",
        ),
    ),
}


def select_template(goal: ReelGoal, category: str, today: date) -> ScriptTemplate:
    """Pick the fallback variant for a goal.

    Rotates by weekday and a stable hash of the product category so the same
    product on the same day always gets the same template.
    """
    variants = FALLBACK_TEMPLATES.get(goal) or FALLBACK_TEMPLATES[ReelGoal.REACH]
    category_key = zlib.crc32(category.strip().lower().encode("utf-8"))
    index = (today.weekday() + category_key) % len(variants)
    return variants[index]


def render_fallback(
    product: Product,
    goal: ReelGoal,
    today: date,
    brand: str,
    trend_hints: list[str] | None = None,
) -> ReelScript:
    """Render the fallback script for a product. Never raises."""
    template = select_template(goal, product.category, today)
    script = template.render(
        goal,
        title=product.title,
        price=product.price_label,
        brand=brand,
    )
    if trend_hints:
        caption = f"{script.caption}\n\ninspired by the '{trend_hints[0]}' wave 🌊"
        script = script.model_copy(update={"caption": caption})
    return script
