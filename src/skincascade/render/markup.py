"""HTML fragments that embed or link stylesheets."""

from __future__ import annotations

import re

from skincascade.model.skin import IECondition, Role, Skin
from skincascade.render.wizard import wizard_css

__all__ = ["stylesheet_link", "style_tag", "ie_comment", "single_block"]

_IE_VERSION_RE = re.compile(r"IE(\d)")


def stylesheet_link(href: str, media: str) -> str:
    return f'<link rel="stylesheet" type="text/css" media="{media}" href="{href}" />'


def style_tag(css: str, media: str) -> str:
    return f'<style type="text/css" media="{media}">{css}</style>'


def ie_comment(markup: str, ie_condition: IECondition | str | None) -> str:
    """Wrap *markup* in a conditional comment for legacy Internet Explorer.

    ``IE8_or_lower`` becomes ``<!--[if lte IE 8]>``; a condition ending in
    ``_or_higher`` uses ``gte``; anything else is an exact match. Without a
    condition the markup is returned unchanged.
    """
    if not ie_condition:
        return markup
    condition = str(ie_condition)
    parts = ["<!--[if "]
    if "or_lower" in condition:
        parts.append("lte ")
    if "or_higher" in condition:
        parts.append("gte ")
    parts.append("IE")
    match = _IE_VERSION_RE.search(condition)
    if match:
        parts.append(f" {match.group(1)}")
    parts.append("]>")
    return "".join(parts) + markup + "<![endif]-->"


def single_block(skin: Skin, roles_to_include: frozenset[Role] | set[Role]) -> str:
    """Markup for one skin alone, or ``""`` when its role is filtered out.

    A static file wins over literal CSS, which wins over wizard settings.
    Wizard output is never IE-gated.
    """
    if skin.effective_role not in roles_to_include:
        return ""
    media = skin.media_attribute()
    if skin.filename:
        return ie_comment(stylesheet_link(skin.filename, media), skin.ie_condition)
    if skin.css:
        return ie_comment(style_tag(skin.css, media), skin.ie_condition)
    wizard_block = wizard_css(skin.wizard)
    if wizard_block:
        return style_tag(wizard_block, media)
    return ""
