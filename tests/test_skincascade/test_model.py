"""Tests for the skin model."""
from __future__ import annotations

import pytest

from skincascade.model.parent import SkinParent
from skincascade.model.skin import (
    DEFAULT_ROLES_TO_INCLUDE,
    IECondition,
    Media,
    Role,
    Skin,
    WizardSettings,
)


class TestSkin:
    def test_string_values_become_enums(self):
        skin = Skin(title="s", media=["screen", "only screen and (max-width: 42em)"], role="site", ie_condition="IE8")
        assert skin.media == (Media.SCREEN, Media.NARROW)
        assert skin.role is Role.SITE
        assert skin.ie_condition is IECondition.IE8

    def test_blank_enums_become_none(self):
        skin = Skin(title="s", role="", ie_condition="")
        assert skin.role is None
        assert skin.ie_condition is None

    @pytest.mark.parametrize(
        "kwargs",
        [{"role": "wizard"}, {"media": ["hologram"]}, {"ie_condition": "IE11"}],
    )
    def test_unknown_enum_values_rejected(self, kwargs):
        with pytest.raises(ValueError):
            Skin(title="s", **kwargs)

    def test_empty_title_rejected(self):
        with pytest.raises(ValueError):
            Skin(title="")

    def test_effective_defaults(self):
        skin = Skin(title="s")
        assert skin.effective_role is Role.USER
        assert skin.effective_media == (Media.ALL,)
        assert skin.media_attribute() == "all"

    def test_media_attribute(self):
        skin = Skin(title="s", media=("screen", "print"))
        assert skin.media_attribute() == "screen, print"
        assert skin.media_attribute(".") == "screen.print"

    def test_dirname(self):
        assert Skin(id=7, title="Archive 2.0: (1) core").dirname == "skin_7_archive_2_0___1__core"

    def test_dirname_requires_id(self):
        with pytest.raises(ValueError):
            Skin(title="unsaved").dirname

    def test_wizard_settings_flag(self):
        assert not Skin(title="s").has_wizard_settings
        assert Skin(title="s", wizard=WizardSettings(margin=0.0)).has_wizard_settings
        assert Skin(title="s", wizard=WizardSettings(font="Georgia")).has_wizard_settings

    def test_default_roles(self):
        assert DEFAULT_ROLES_TO_INCLUDE == {Role.USER, Role.OVERRIDE, Role.SITE}


class TestSkinParent:
    def test_self_link_rejected(self):
        with pytest.raises(ValueError):
            SkinParent(child_skin_id=1, parent_skin_id=1, position=1)

    def test_position_must_be_positive(self):
        with pytest.raises(ValueError):
            SkinParent(child_skin_id=1, parent_skin_id=2, position=0)


class TestExports:
    def test_package_exports_resolve(self):
        import skincascade.model as model

        assert all(hasattr(model, name) for name in model.__all__)
        assert "USER_ROLES" not in model.__all__
