import logging

import pytest

from plugins.docs_tree.classifier import ContentClassifier
from plugins.docs_tree.models import ContentFile


def files(*paths):
    return [ContentFile.from_path(p) for p in paths]


class DictReader:
    def __init__(self, contents):
        self.contents = contents

    def read(self, file):
        return self.contents[file.relative_path]


class TestContentClassifier:
    def test_partition_separates_index_files(self):
        """Index files at any depth are kept out of the documents."""
        result = ContentClassifier("README").partition(
            files("README.md", "guide/setup.md", "intro.md", "guide/README.md")
        )
        assert result.index.relative_path == "README.md"
        assert [d.relative_path for d in result.documents] == ["guide/setup.md", "intro.md"]
        assert set(result.directory_indexes) == {"", "guide"}

    def test_nested_index_is_not_the_site_index(self):
        result = ContentClassifier("README").partition(files("guide/README.md", "intro.md"))
        assert result.index is None
        assert result.directory_indexes["guide"].relative_path == "guide/README.md"

    def test_match_is_exact(self):
        """README-old.md is a document, not an index."""
        result = ContentClassifier("README").partition(files("README-old.md"))
        assert result.index is None
        assert [d.relative_path for d in result.documents] == ["README-old.md"]

    def test_extra_index_in_same_directory_warns(self, caplog):
        caplog.set_level(logging.WARNING)
        result = ContentClassifier("README").partition(files("README.md", "README.txt"))
        assert result.index.relative_path == "README.md"
        assert result.documents == []
        assert "ignoring extra index file README.txt" in caplog.text

    def test_classify_without_index(self):
        """No authored index leaves index_content unset."""
        result = ContentClassifier("README").classify(files("a.md", "b.md"))
        assert result.index is None
        assert result.index_content is None
        assert [d.relative_path for d in result.documents] == ["a.md", "b.md"]

    def test_classify_reads_index(self):
        reader = DictReader({"README.md": "- [A](/docs/a)\n"})
        result = ContentClassifier("README", reader).classify(files("README.md", "a.md"))
        assert result.index.relative_path == "README.md"
        assert result.index_content == "- [A](/docs/a)\n"
        assert [d.relative_path for d in result.documents] == ["a.md"]

    def test_classify_keeps_directory_indexes(self):
        reader = DictReader({})
        result = ContentClassifier("README", reader).classify(files("guide/README.md", "guide/a.md"))
        assert result.index_content is None
        assert result.directory_indexes["guide"].relative_path == "guide/README.md"

    def test_classify_needs_reader_for_index(self):
        with pytest.raises(ValueError):
            ContentClassifier("README").classify(files("README.md"))

    def test_preserves_discovery_order(self):
        result = ContentClassifier("README").partition(files("z.md", "README.md", "a.md", "m/b.md"))
        assert [d.relative_path for d in result.documents] == ["z.md", "a.md", "m/b.md"]
