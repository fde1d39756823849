from dataclasses import dataclass
from pathlib import PurePosixPath
from typing import Optional, Sequence, Tuple, Union

from mkdocs.exceptions import PluginError


class DocsBuildError(PluginError):
    """Fatal docs_tree failure; MkDocs aborts the build when it sees one."""


@dataclass(frozen=True)
class ContentFile:
    """One source document, addressed relative to the content root.

    ``basename`` is the filename up to its first dot and ``extension`` is
    everything after it, so ``setup.blade.md`` has basename ``setup`` and
    extension ``blade.md``. Root-level files have an empty
    ``relative_directory``.
    """

    relative_path: str
    relative_directory: str
    basename: str
    extension: str

    @classmethod
    def from_path(cls, relative_path: str) -> "ContentFile":
        parts = [p for p in relative_path.replace("\\", "/").split("/") if p not in ("", ".")]
        if not parts:
            raise ValueError(f"Empty content path: {relative_path!r}")
        path = PurePosixPath(*parts)
        directory = "/".join(parts[:-1])
        basename, _, extension = path.name.partition(".")
        return cls(str(path), directory, basename, extension)

    @property
    def filename(self) -> str:
        return PurePosixPath(self.relative_path).name


def parse_candidates(value: Union[str, Sequence[str], None]) -> Tuple[str, ...]:
    """Normalize ``landing_names`` (comma separated or a list) into a tuple."""
    if not value:
        return ()
    if isinstance(value, str):
        items = value.split(",")
    else:
        items = [str(v) for v in value]
    return tuple(item.strip() for item in items if item.strip())


@dataclass(frozen=True)
class DocsConfig:
    """Immutable per-build settings shared by every docs_tree component."""

    content_directory: str
    index_filename: str = "README"
    base_url_prefix: str = "/docs"
    candidate_landing_names: Tuple[str, ...] = ()
    emit_redirects: bool = False
    template_extends: Optional[str] = None
    template_yield_name: Optional[str] = "content"
    site_url: str = ""
    workers: int = 1
