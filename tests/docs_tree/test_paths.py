import pytest

from plugins.docs_tree.models import ContentFile, parse_candidates
from plugins.docs_tree.paths import (
    DocumentOutputPath,
    FixedOutputPath,
    OutputPathMapper,
    absolute_url,
)


class TestContentFile:
    def test_nested_file(self):
        f = ContentFile.from_path("guide/setup.md")
        assert f.relative_path == "guide/setup.md"
        assert f.relative_directory == "guide"
        assert f.basename == "setup"
        assert f.extension == "md"
        assert f.filename == "setup.md"

    def test_root_file_has_empty_directory(self):
        f = ContentFile.from_path("intro.md")
        assert f.relative_directory == ""

    def test_file_without_extension(self):
        f = ContentFile.from_path("docs/Makefile")
        assert f.basename == "Makefile"
        assert f.extension == ""

    def test_basename_stops_at_first_dot(self):
        f = ContentFile.from_path("setup.blade.md")
        assert f.basename == "setup"
        assert f.extension == "blade.md"

    def test_backslashes_are_normalized(self):
        f = ContentFile.from_path("guide\\win\\page.md")
        assert f.relative_path == "guide/win/page.md"
        assert f.relative_directory == "guide/win"

    def test_empty_path_rejected(self):
        with pytest.raises(ValueError):
            ContentFile.from_path("")


class TestParseCandidates:
    def test_comma_separated(self):
        assert parse_candidates("readme, index,") == ("readme", "index")

    def test_list(self):
        assert parse_candidates(["readme", " index "]) == ("readme", "index")

    def test_empty(self):
        assert parse_candidates("") == ()
        assert parse_candidates(None) == ()


class TestOutputPathMapper:
    def setup_method(self):
        self.mapper = OutputPathMapper("/docs")

    def test_nested_document(self):
        f = ContentFile.from_path("guide/setup.md")
        assert self.mapper.output_path(f) == "docs/guide/setup/index.html"
        assert self.mapper.url(f) == "/docs/guide/setup"

    def test_root_document(self):
        f = ContentFile.from_path("intro.md")
        assert self.mapper.output_path(f) == "docs/intro/index.html"

    def test_empty_prefix(self):
        mapper = OutputPathMapper("")
        f = ContentFile.from_path("intro.md")
        assert mapper.output_path(f) == "intro/index.html"
        assert mapper.url(f) == "/intro"

    def test_duplicate_separators_trimmed(self):
        mapper = OutputPathMapper("//docs//v1/")
        f = ContentFile.from_path("guide/setup.md")
        assert mapper.output_path(f) == "docs/v1/guide/setup/index.html"

    def test_content_root_is_stripped(self):
        mapper = OutputPathMapper("/docs", "content")
        f = ContentFile.from_path("content/guide/a.md")
        assert mapper.output_path(f) == "docs/guide/a/index.html"

    def test_directory_paths(self):
        assert self.mapper.directory_output_path("") == "docs/index.html"
        assert self.mapper.directory_output_path("guide") == "docs/guide/index.html"
        assert self.mapper.directory_url("guide") == "/docs/guide"

    def test_root_directory_without_prefix(self):
        mapper = OutputPathMapper("")
        assert mapper.directory_output_path("") == "index.html"
        assert mapper.directory_url("") == "/"

    def test_every_output_is_directory_style(self):
        paths = [
            "intro.md",
            "guide/setup.md",
            "a/b/c/deep-page.markdown",
            "setup.blade.md",
            "Makefile",
            "notes/todo.txt",
        ]
        for mapper in (self.mapper, OutputPathMapper("")):
            for path in paths:
                f = ContentFile.from_path(path)
                out = mapper.output_path(f)
                assert out.endswith("/index.html")
                if f.extension:
                    assert f".{f.extension}" not in out

    def test_mapping_is_stable(self):
        f = ContentFile.from_path("guide/setup.md")
        assert self.mapper.output_path(f) == OutputPathMapper("/docs").output_path(f)


class TestStrategies:
    def test_document_strategy_uses_mapper(self):
        mapper = OutputPathMapper("/docs")
        f = ContentFile.from_path("guide/setup.md")
        assert DocumentOutputPath(mapper).resolve(f) == "docs/guide/setup/index.html"

    def test_fixed_strategy_ignores_document(self):
        f = ContentFile.from_path("guide/setup.md")
        assert FixedOutputPath("docs/guide/index.html").resolve(f) == "docs/guide/index.html"


class TestAbsoluteUrl:
    def test_without_site_url(self):
        assert absolute_url("", "docs/guide") == "/docs/guide"

    def test_with_site_url(self):
        assert absolute_url("https://example.com/", "/docs/guide") == "https://example.com/docs/guide"
