"""Tests for localised_path template expansion."""

from __future__ import annotations

import logging

from i18nfanout.paths import PathTemplate, localised_path


class TestLocaleFirstTemplate:
    def test_root(self):
        assert localised_path("/", ":locale/:file", "en") == "/en"

    def test_absolute_file(self):
        assert localised_path("/index.html", ":locale/:file", "en") == "/en/index.html"

    def test_locale_override(self):
        tpl = PathTemplate(":locale/:file", "en")
        assert tpl("/index.html") == "/en/index.html"
        assert tpl("/index.html", "fr") == "/fr/index.html"

    def test_relative_file(self):
        assert localised_path("blog/post.html", ":locale/:file", "fr") == "fr/blog/post.html"


class TestSuffixTemplate:
    TEMPLATE = ":dir/:name-:locale:ext:query:hash"

    def test_query_and_hash_preserved(self):
        assert (
            localised_path("/foo/bar.php?filter=cars#heading", self.TEMPLATE, "en")
            == "/foo/bar-en.php?filter=cars#heading"
        )
        assert (
            localised_path("/foo/bar.php?filter=cars#heading", self.TEMPLATE, "fr")
            == "/foo/bar-fr.php?filter=cars#heading"
        )

    def test_relative_without_dir_has_no_leading_slash(self):
        assert localised_path("index.hamlc", ":dir/:name-:locale:ext", "en") == "index-en.hamlc"


class TestFileOnlyTemplate:
    def test_root_stays_root(self):
        assert localised_path("/", "/:file", "en") == "/"

    def test_locale_has_no_effect(self):
        tpl = PathTemplate("/:file", "en")
        assert tpl("/index.html") == "/index.html"
        assert tpl("/index.html", "fr") == "/index.html"

    def test_bare_file_template(self):
        assert localised_path("/index.html", ":file", "en") == "/index.html"
        assert localised_path("index.hbs", ":file", "en") == "index.hbs"


class TestNormalisation:
    def test_collapses_slash_runs(self):
        assert localised_path("/a//b.html", ":locale//:file", "en") == "/en/a/b.html"

    def test_strips_single_trailing_slash(self):
        assert localised_path("/docs/", ":locale/:file", "en") == "/en/docs"

    def test_absolute_template_on_absolute_path_single_leading_slash(self):
        assert localised_path("/index.html", "/:locale/:file", "en") == "/en/index.html"


class TestUnknownTokens:
    def test_unknown_token_left_literally(self):
        assert localised_path("/index.html", ":lang/:file", "en") == "/:lang/index.html"

    def test_token_with_known_prefix_left_literally(self):
        assert localised_path("/index.html", ":locale/:filename", "en") == "/en/:filename"
        assert localised_path("/a/b.txt", ":dirs/:locale", "en") == "/:dirs/en"

    def test_unknown_token_is_logged(self, caplog):
        with caplog.at_level(logging.DEBUG, logger="i18nfanout.paths"):
            localised_path("/index.html", ":region/:locale/:file", "en")
        assert any(":region" in r.getMessage() for r in caplog.records)
