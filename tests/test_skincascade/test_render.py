"""Tests for markup fragments and wizard CSS."""
from __future__ import annotations

from skincascade.model.skin import DEFAULT_ROLES_TO_INCLUDE, Role, Skin, WizardSettings
from skincascade.render import ie_comment, single_block, style_tag, stylesheet_link, wizard_css


# ---------------------------------------------------------------------------
# Conditional comments
# ---------------------------------------------------------------------------


class TestIEComment:
    def test_or_lower(self):
        assert ie_comment("X", "IE8_or_lower") == "<!--[if lte IE 8]>X<![endif]-->"

    def test_exact_version(self):
        assert ie_comment("X", "IE9") == "<!--[if IE 9]>X<![endif]-->"

    def test_or_higher(self):
        assert ie_comment("X", "IE7_or_higher") == "<!--[if gte IE 7]>X<![endif]-->"

    def test_any_ie(self):
        assert ie_comment("X", "IE") == "<!--[if IE]>X<![endif]-->"

    def test_no_condition(self):
        assert ie_comment("X", None) == "X"
        assert ie_comment("X", "") == "X"


class TestTags:
    def test_stylesheet_link(self):
        assert stylesheet_link("/a.css", "screen, print") == (
            '<link rel="stylesheet" type="text/css" media="screen, print" href="/a.css" />'
        )

    def test_style_tag(self):
        assert style_tag("p{}", "all") == '<style type="text/css" media="all">p{}</style>'


# ---------------------------------------------------------------------------
# Single-skin blocks
# ---------------------------------------------------------------------------


class TestSingleBlock:
    def test_filtered_role_contributes_nothing(self):
        skin = Skin(title="s", css="p{}", role="override")
        assert single_block(skin, {Role.USER}) == ""

    def test_file_wins_over_css(self):
        skin = Skin(title="s", css="p{}", filename="/site/1.css", media=("screen",), ie_condition="IE7")
        assert single_block(skin, DEFAULT_ROLES_TO_INCLUDE) == (
            '<!--[if IE 7]><link rel="stylesheet" type="text/css" media="screen" '
            'href="/site/1.css" /><![endif]-->'
        )

    def test_literal_css(self):
        skin = Skin(title="s", css="p { color: red; }")
        assert single_block(skin, DEFAULT_ROLES_TO_INCLUDE) == (
            '<style type="text/css" media="all">p { color: red; }</style>'
        )

    def test_wizard_css_is_not_ie_wrapped(self):
        skin = Skin(title="s", ie_condition="IE8", wizard=WizardSettings(base_em=90))
        block = single_block(skin, DEFAULT_ROLES_TO_INCLUDE)
        assert block.startswith('<style type="text/css" media="all">')
        assert "font-size: 90%;" in block
        assert "<!--[if" not in block

    def test_nothing_to_say(self):
        assert single_block(Skin(title="s"), DEFAULT_ROLES_TO_INCLUDE) == ""


# ---------------------------------------------------------------------------
# Wizard CSS
# ---------------------------------------------------------------------------


class TestWizardCSS:
    def test_empty(self):
        assert wizard_css(WizardSettings()) == ""

    def test_margin(self):
        css = wizard_css(WizardSettings(margin=5.0))
        assert "margin: auto 5%;" in css
        assert "padding: 0.5em 5% 0;" in css

    def test_paragraph_margin(self):
        assert "margin-bottom: 1.5em;" in wizard_css(WizardSettings(paragraph_margin=1.5))

    def test_colours(self):
        css = wizard_css(
            WizardSettings(background_color="#fff", foreground_color="#111", headercolor="#900", accent_color="#ddd")
        )
        assert "background: #fff;" in css
        assert "color: #111;" in css
        assert "background-color: #900;" in css
        assert "border-color: #ddd;" in css

    def test_knobs_are_additive(self):
        font = wizard_css(WizardSettings(font="Georgia, serif"))
        margin = wizard_css(WizardSettings(margin=3))
        both = wizard_css(WizardSettings(margin=3, font="Georgia, serif"))
        assert both == margin + font
