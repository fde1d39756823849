from dataclasses import dataclass
from typing import Collection, List, Optional, Union

from mkdocs.utils import log

from plugins.docs_tree.landings import LandingResult
from plugins.docs_tree.models import ContentFile
from plugins.docs_tree.paths import OutputPathMapper, absolute_url


@dataclass(frozen=True)
class RedirectStub:
    """Generated page at a directory URL that redirects to its landing."""

    directory: str
    output_path: str
    target_url: str


@dataclass(frozen=True)
class LandingEmission:
    """The landing rendered a second time at its directory URL.

    ``source`` is None when the landing is the index page.
    """

    directory: str
    output_path: str
    source: Optional[ContentFile]


PlannedPage = Union[RedirectStub, LandingEmission]


class RedirectPlanner:
    """Plans what gets written at each directory's own URL.

    A document ``guide/index.md`` lives at ``docs/guide/index/index.html``,
    so ``docs/guide/index.html`` needs either a redirect stub or a copy of
    the landing. Unresolved directories land on the index page. Directory
    URLs already taken by a document (``guide.md`` next to ``guide/``) are
    left to that document, as is the index page's own URL whenever some
    directory lands on it.
    """

    def __init__(self, mapper: OutputPathMapper, emit_redirects: bool, site_url: str = ""):
        self.mapper = mapper
        self.emit_redirects = emit_redirects
        self.site_url = site_url

    def plan(
        self,
        result: LandingResult,
        occupied: Collection[str],
        index_page: ContentFile,
    ) -> List[PlannedPage]:
        planned: List[PlannedPage] = []
        occupied = set(occupied)
        # Unresolved directories land on the index page, so its path is taken too
        if result.unresolved:
            occupied.add(self.mapper.output_path(index_page))
        for directory in result.directories:
            output_path = self.mapper.directory_output_path(directory)
            if output_path in occupied:
                log.debug(
                    f"[docs_tree] {output_path} is a document page; no landing page for '{directory}'"
                )
                continue

            target = result.landings.get(directory)
            source = ContentFile.from_path(target) if target is not None else None
            if self.emit_redirects:
                url = self.mapper.url(source if source is not None else index_page)
                planned.append(
                    RedirectStub(directory, output_path, absolute_url(self.site_url, url))
                )
            else:
                planned.append(LandingEmission(directory, output_path, source))
        return planned
