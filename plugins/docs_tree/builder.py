from concurrent.futures import ThreadPoolExecutor
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, Iterable, List, Mapping, Optional

from mkdocs.utils import log

from plugins.docs_tree.classifier import Classification, ContentClassifier
from plugins.docs_tree.fallback_index import link_title, synthesize_index
from plugins.docs_tree.landings import LandingResolver
from plugins.docs_tree.models import ContentFile, DocsConfig
from plugins.docs_tree.paths import (
    DocumentOutputPath,
    FixedOutputPath,
    OutputPathMapper,
    OutputPathStrategy,
    absolute_url,
)
from plugins.docs_tree.redirects import LandingEmission, RedirectPlanner, RedirectStub
from plugins.docs_tree.rendering import extract_title
from plugins.docs_tree.scanner import split_front_matter

MARKUP_EXTENSIONS = ("md", "markdown")


class BuildState(Enum):
    CLASSIFYING = "classifying"
    INDEX_READY = "index_ready"
    DOCUMENTS_EMITTING = "documents_emitting"
    LANDINGS_RESOLVED = "landings_resolved"
    REDIRECTS_EMITTED = "redirects_emitted"
    DONE = "done"


@dataclass
class RenderedPage:
    output_path: str
    html: str
    source: Optional[ContentFile] = None


@dataclass
class BuildReport:
    # relative source path -> output path
    documents: Dict[str, str] = field(default_factory=dict)
    landings: Dict[str, str] = field(default_factory=dict)
    unresolved: List[str] = field(default_factory=list)
    redirects: List[RedirectStub] = field(default_factory=list)
    emissions: List[LandingEmission] = field(default_factory=list)
    index_page: Optional[str] = None
    collisions: List[str] = field(default_factory=list)


class DocsBuilder:
    """Builds the docs tree: documents first, then one page per directory URL.

    Collaborators:
    - ``source``: ``scan()`` and ``read(file)`` (see ``ContentSource``)
    - ``renderer``: ``render_template``, ``render_named``, ``wrap_layout``
    - ``markup``: ``parse(markdown) -> html``
    - ``writer``: ``write(path, content)``; it also exposes ``collisions``
    """

    def __init__(self, config: DocsConfig, source, renderer, markup, writer):
        self.config = config
        self.source = source
        self.renderer = renderer
        self.markup = markup
        self.writer = writer
        self.mapper = OutputPathMapper(config.base_url_prefix)
        self.state = BuildState.CLASSIFYING

    def build(self, files: Optional[Iterable[ContentFile]] = None, data: Optional[Mapping[str, Any]] = None) -> BuildReport:
        data = dict(data or {})
        report = BuildReport()

        self.state = BuildState.CLASSIFYING
        if files is None:
            files = self.source.scan()
        classification = ContentClassifier(self.config.index_filename, self.source).classify(files)
        documents = classification.documents
        if not documents:
            log.info("[docs_tree] no documents found; nothing to build")
            self.state = BuildState.DONE
            return report

        # Authored index wins; otherwise list every document
        index_content = classification.index_content
        if index_content is None:
            log.info(
                f"[docs_tree] no {self.config.index_filename} index found; generating one from {len(documents)} documents"
            )
            index_content = synthesize_index(documents, self.mapper)
        fallback_docs_index = self.compile_index(index_content, data)
        indexes = self.directory_indexes(classification, fallback_docs_index, data)
        self.state = BuildState.INDEX_READY

        # Documents
        self.state = BuildState.DOCUMENTS_EMITTING
        pages = self.render_documents(documents, indexes, fallback_docs_index, data)
        for page in pages:
            self.writer.write(page.output_path, page.html)
            report.documents[page.source.relative_path] = page.output_path

        # Landing pages
        candidates = self.config.candidate_landing_names or LandingResolver.default_candidates(documents)
        result = LandingResolver(candidates).resolve(documents)
        report.landings = result.landings.as_dict()
        report.unresolved = list(result.unresolved)
        self.state = BuildState.LANDINGS_RESOLVED

        index_page = ContentFile.from_path(f"{self.config.index_filename}.md")
        planner = RedirectPlanner(self.mapper, self.config.emit_redirects, self.config.site_url)
        planned = planner.plan(result, set(report.documents.values()), index_page)

        # Unresolved directories land here
        if result.unresolved:
            page = self.render_index_page(
                index_page, fallback_docs_index, data, FixedOutputPath(self.mapper.output_path(index_page))
            )
            self.writer.write(page.output_path, page.html)
            report.index_page = page.output_path

        for item in planned:
            docs_index = indexes.get(item.directory, fallback_docs_index)
            if isinstance(item, RedirectStub):
                html = self.renderer.render_named(
                    "redirector", {**data, "docs_index": docs_index, "target": item.target_url}
                )
                self.writer.write(item.output_path, html)
                report.redirects.append(item)
                continue

            strategy = FixedOutputPath(item.output_path)
            if item.source is None:
                page = self.render_index_page(index_page, fallback_docs_index, data, strategy)
            else:
                page = self.render_document(item.source, {**data, "docs_index": docs_index}, strategy)
            self.writer.write(page.output_path, page.html)
            report.emissions.append(item)
        self.state = BuildState.REDIRECTS_EMITTED

        # Writer-side overwrites, in write order
        report.collisions = list(getattr(self.writer, "collisions", []))
        log.info(
            f"[docs_tree] built {len(report.documents)} documents, "
            f"{len(report.redirects) + len(report.emissions)} landing pages"
        )
        self.state = BuildState.DONE
        return report

    # Index compilation

    def docs_url(self) -> str:
        return absolute_url(self.config.site_url, "/".join(self.mapper.prefix)).rstrip("/")

    def compile_index(self, content: str, data: Mapping[str, Any]) -> str:
        rendered = self.renderer.render_template(content, {**data, "docs_url": self.docs_url()})
        return self.markup.parse(rendered)

    def directory_indexes(self, classification: Classification, fallback: str, data: Mapping[str, Any]) -> Dict[str, str]:
        """Compiled index per directory that has its own index file."""
        compiled = {}
        for directory, index_file in classification.directory_indexes.items():
            if index_file is classification.index:
                compiled[directory] = fallback
                continue
            compiled[directory] = self.compile_index(self.source.read(index_file), data)
            log.debug(f"[docs_tree] compiled directory index {index_file.relative_path}")
        return compiled

    # Page rendering

    def render_documents(
        self,
        documents: List[ContentFile],
        indexes: Mapping[str, str],
        fallback: str,
        data: Mapping[str, Any],
    ) -> List[RenderedPage]:
        """Render every document; the result keeps the order of ``documents``."""
        strategy = DocumentOutputPath(self.mapper)

        def render_one(doc: ContentFile) -> RenderedPage:
            docs_index = indexes.get(doc.relative_directory, fallback)
            return self.render_document(doc, {**data, "docs_index": docs_index}, strategy)

        if self.config.workers > 1 and len(documents) > 1:
            with ThreadPoolExecutor(max_workers=self.config.workers) as pool:
                return list(pool.map(render_one, documents))
        return [render_one(doc) for doc in documents]

    def render_document(self, doc: ContentFile, data: Mapping[str, Any], strategy: OutputPathStrategy) -> RenderedPage:
        front_matter, body = split_front_matter(self.source.read(doc))
        url = self.mapper.url(doc)
        page_data = {**data, **front_matter, "page_url": absolute_url(self.config.site_url, url)}

        html = self.renderer.render_template(body, page_data)
        if doc.extension.rsplit(".", 1)[-1] in MARKUP_EXTENSIONS:
            html = self.markup.parse(html)
        return RenderedPage(strategy.resolve(doc), self.finish_page(html, page_data, url), doc)

    def render_index_page(
        self,
        index_page: ContentFile,
        docs_index: str,
        data: Mapping[str, Any],
        strategy: OutputPathStrategy,
    ) -> RenderedPage:
        url = self.mapper.url(index_page)
        page_data = {**data, "docs_index": docs_index, "page_url": absolute_url(self.config.site_url, url)}
        return RenderedPage(strategy.resolve(index_page), self.finish_page(docs_index, page_data, url))

    def finish_page(self, html: str, page_data: Dict[str, Any], url: str) -> str:
        """Set the page title and wrap ``html`` in the configured layout."""
        page_data.setdefault("title", extract_title(html) or link_title(url))
        if not self.config.template_extends:
            return html
        return self.renderer.wrap_layout(
            html,
            self.config.template_extends,
            self.config.template_yield_name or "content",
            page_data,
        )
