"""Tests for cascade resolution and memoisation."""
from __future__ import annotations

from skincascade.file_cache import FileCache
from skincascade.graph import SkinGraph
from skincascade.model.skin import Role, Skin
from skincascade.resolver import CascadeResolver
from skincascade.style_cache import StyleCache


def _resolver(tmp_path, skins, links=(), wrapper=None) -> CascadeResolver:
    graph = SkinGraph()
    for skin in skins:
        graph.add(skin)
    for child, parent, position in links:
        graph.link(child, parent, position)
    cache = FileCache(tmp_path / "skins", public_root=tmp_path)
    return CascadeResolver(graph, cache, wrapper=wrapper)


# ---------------------------------------------------------------------------
# Ordering
# ---------------------------------------------------------------------------


class TestOrdering:
    def test_chain_puts_ancestors_first(self, tmp_path):
        resolver = _resolver(
            tmp_path,
            [Skin(id=1, title="A", css=".a{}"), Skin(id=2, title="B", css=".b{}"), Skin(id=3, title="C", css=".c{}")],
            links=((1, 2, 1), (2, 3, 1)),
        )
        markup = resolver.resolve(1, set(Role))
        assert markup.index(".c{}") < markup.index(".b{}") < markup.index(".a{}")

    def test_multiple_parents(self, tmp_path):
        resolver = _resolver(
            tmp_path,
            [Skin(id=1, title="A", css=".a{}"), Skin(id=2, title="P1", css=".p1{}"), Skin(id=3, title="P2", css=".p2{}")],
            links=((1, 3, 2), (1, 2, 1)),
        )
        markup = resolver.resolve(1)
        assert markup.index(".p1{}") < markup.index(".p2{}") < markup.index(".a{}")

    def test_blocks_joined_by_newlines(self, tmp_path):
        resolver = _resolver(
            tmp_path,
            [Skin(id=1, title="A", css=".a{}"), Skin(id=2, title="B", css=".b{}")],
            links=((1, 2, 1),),
        )
        assert resolver.resolve(1) == (
            '<style type="text/css" media="all">.b{}</style>\n'
            '<style type="text/css" media="all">.a{}</style>'
        )


# ---------------------------------------------------------------------------
# Role filtering
# ---------------------------------------------------------------------------


class TestRoleFiltering:
    def _mixed(self, tmp_path) -> CascadeResolver:
        return _resolver(
            tmp_path,
            [
                Skin(id=1, title="A", css=".user-a{}", role="user"),
                Skin(id=2, title="B", css=".override-b{}", role="override"),
                Skin(id=3, title="C", css=".site-c{}", role="site"),
            ],
            links=((1, 2, 1), (2, 3, 1)),
        )

    def test_override_only(self, tmp_path):
        markup = self._mixed(tmp_path).resolve(1, ["override"])
        assert ".override-b{}" in markup
        assert ".user-a{}" not in markup
        assert ".site-c{}" not in markup

    def test_user_only(self, tmp_path):
        markup = self._mixed(tmp_path).resolve(1, [Role.USER])
        assert ".user-a{}" in markup
        assert ".override-b{}" not in markup

    def test_default_roles_skip_admin(self, tmp_path):
        resolver = _resolver(tmp_path, [Skin(id=1, title="A", css=".admin{}", role="admin")])
        assert resolver.resolve(1) == ""
        assert ".admin{}" in resolver.resolve(1, [Role.ADMIN])


# ---------------------------------------------------------------------------
# Site wrapping
# ---------------------------------------------------------------------------


class TestSiteWrapping:
    def _wrapped(self, tmp_path, role: str) -> CascadeResolver:
        site = Skin(id=9, title="Archive 2.0", css=".site{}", role="site")
        return _resolver(
            tmp_path,
            [site, Skin(id=1, title="Mine", css=".mine{}", role=role)],
            wrapper=lambda: site,
        )

    def test_user_skin_is_wrapped(self, tmp_path):
        markup = self._wrapped(tmp_path, "user").resolve(1)
        assert markup.index(".site{}") < markup.index(".mine{}")

    def test_override_skin_is_not_wrapped(self, tmp_path):
        markup = self._wrapped(tmp_path, "override").resolve(1)
        assert ".site{}" not in markup

    def test_wrapper_does_not_wrap_itself(self, tmp_path):
        user_default = Skin(id=5, title="House", css=".house{}", role="user")
        resolver = _resolver(tmp_path, [user_default], wrapper=lambda: user_default)
        assert resolver.resolve(5) == '<style type="text/css" media="all">.house{}</style>'


# ---------------------------------------------------------------------------
# Failure handling
# ---------------------------------------------------------------------------


class TestFailures:
    def test_cycle_renders_empty_block(self, tmp_path, caplog):
        resolver = _resolver(
            tmp_path,
            [Skin(id=1, title="A", css=".a{}"), Skin(id=2, title="B", css=".b{}")],
            links=((1, 2, 1), (2, 1, 1)),
        )
        assert resolver.resolve(1) == ""
        assert "Could not resolve ancestors" in caplog.text


# ---------------------------------------------------------------------------
# Memoisation
# ---------------------------------------------------------------------------


class TestMemoisation:
    def test_result_is_memoised_until_invalidated(self, tmp_path):
        resolver = _resolver(tmp_path, [Skin(id=1, title="A", css=".old{}")])
        assert ".old{}" in resolver.resolve(1)
        resolver.graph.add(Skin(id=1, title="A", css=".new{}"))
        assert ".old{}" in resolver.resolve(1)
        resolver.invalidate(1)
        assert ".new{}" in resolver.resolve(1)

    def test_invalidating_parent_refreshes_children(self, tmp_path):
        resolver = _resolver(
            tmp_path,
            [Skin(id=1, title="A", css=".a{}"), Skin(id=2, title="P", css=".p-old{}")],
            links=((1, 2, 1),),
        )
        assert ".p-old{}" in resolver.resolve(1)
        resolver.graph.add(Skin(id=2, title="P", css=".p-new{}"))
        resolver.invalidate(2)
        assert ".p-new{}" in resolver.resolve(1)

    def test_invalidating_wrapper_clears_everything(self, tmp_path):
        site = Skin(id=9, title="Site", css=".site{}", role="site")
        resolver = _resolver(tmp_path, [site, Skin(id=1, title="A", css=".a{}")], wrapper=lambda: site)
        resolver.resolve(1)
        assert len(resolver.cache) == 2
        resolver.invalidate(9)
        assert len(resolver.cache) == 0


class TestStyleCache:
    def test_role_sets_are_separate_keys(self):
        cache = StyleCache()
        cache.get_or_compute(1, ["user"], lambda: "u")
        cache.get_or_compute(1, ["user", "override"], lambda: "uo")
        assert cache.get(1, [Role.USER]) == "u"
        assert cache.get(1, [Role.OVERRIDE, Role.USER]) == "uo"

    def test_invalidate_by_skin_keeps_others(self):
        cache = StyleCache()
        cache.get_or_compute(1, ["user"], lambda: "one")
        cache.get_or_compute(2, ["user"], lambda: "two")
        cache.invalidate([1])
        assert cache.get(1, ["user"]) is None
        assert cache.get(2, ["user"]) == "two"

    def test_stale_computation_is_not_served(self):
        cache = StyleCache()

        def compute() -> str:
            cache.invalidate([1])
            return "stale"

        assert cache.get_or_compute(1, ["user"], compute) == "stale"
        assert cache.get(1, ["user"]) is None
