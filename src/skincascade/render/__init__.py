from __future__ import annotations

from skincascade.render.markup import ie_comment, single_block, style_tag, stylesheet_link
from skincascade.render.wizard import wizard_css

__all__ = [
    "ie_comment",
    "single_block",
    "style_tag",
    "stylesheet_link",
    "wizard_css",
]
