from pathlib import PurePosixPath
from typing import List, NamedTuple

from plugins.docs_tree.models import ContentFile

INDEX_LEAF = "index.html"


def split_segments(value: str) -> List[str]:
    """Split a path or URL fragment into its non-empty segments."""
    return [p for p in value.replace("\\", "/").split("/") if p not in ("", ".")]


def absolute_url(site_url: str, path: str) -> str:
    """Prefix a root-relative ``path`` with ``site_url`` when one is set."""
    route = "/" + "/".join(split_segments(path))
    if not site_url:
        return route
    return site_url.rstrip("/") + route


class OutputPath(NamedTuple):
    """Directory-style destination of a page: ``{directory}/index.html``."""

    directory: str
    filename: str = INDEX_LEAF

    @property
    def path(self) -> str:
        if not self.directory:
            return self.filename
        return f"{self.directory}/{self.filename}"

    @property
    def url(self) -> str:
        return "/" + self.directory


class OutputPathMapper:
    """Maps content files and directories onto site output paths.

    Every document becomes a directory-style URL:
    ``guide/setup.md`` under prefix ``/docs`` is written to
    ``docs/guide/setup/index.html`` and linked as ``/docs/guide/setup``.
    """

    def __init__(self, base_url_prefix: str, content_root: str = ""):
        self.prefix = split_segments(base_url_prefix)
        self.content_root = split_segments(content_root)

    def _relative_directory(self, directory: str) -> List[str]:
        segments = split_segments(directory)
        root = self.content_root
        if root and segments[: len(root)] == root:
            return segments[len(root):]
        return segments

    def for_file(self, file: ContentFile) -> OutputPath:
        segments = self.prefix + self._relative_directory(file.relative_directory)
        if file.basename:
            segments.append(file.basename)
        return OutputPath(str(PurePosixPath(*segments)) if segments else "")

    def for_directory(self, directory: str) -> OutputPath:
        segments = self.prefix + self._relative_directory(directory)
        return OutputPath(str(PurePosixPath(*segments)) if segments else "")

    def output_path(self, file: ContentFile) -> str:
        return self.for_file(file).path

    def url(self, file: ContentFile) -> str:
        return self.for_file(file).url

    def directory_output_path(self, directory: str) -> str:
        return self.for_directory(directory).path

    def directory_url(self, directory: str) -> str:
        return self.for_directory(directory).url


class OutputPathStrategy:
    """Decides where a rendered document is written."""

    def resolve(self, document: ContentFile) -> str:
        raise NotImplementedError


class DocumentOutputPath(OutputPathStrategy):
    """Default strategy: the document's own directory-style path."""

    def __init__(self, mapper: OutputPathMapper):
        self.mapper = mapper

    def resolve(self, document: ContentFile) -> str:
        return self.mapper.output_path(document)


class FixedOutputPath(OutputPathStrategy):
    """Writes whatever document it is given to one fixed path (landing pages)."""

    def __init__(self, path: str):
        self.path = path

    def resolve(self, document: ContentFile) -> str:
        return self.path
