from pathlib import Path
from typing import Any, Dict, List, Mapping, Optional, Sequence

import jinja2
import markdown
from bs4 import BeautifulSoup
from mkdocs.utils import log

from plugins.docs_tree.models import DocsBuildError

BUILTIN_TEMPLATES = Path(__file__).parent / "templates"


def extract_title(html: str) -> Optional[str]:
    """Text of the first <h1> in ``html``, if any."""
    h1 = BeautifulSoup(html, "html.parser").find("h1")
    if not h1:
        return None
    return h1.get_text(strip=True) or None


class TemplateRenderer:
    """Jinja2-backed template collaborator.

    Template lookup checks the user's template directories first, then the
    templates bundled with the plugin (``redirector.html``).
    """

    def __init__(self, template_dirs: Sequence[str] = ()):
        search_path = [str(d) for d in template_dirs] + [str(BUILTIN_TEMPLATES)]
        self.env = jinja2.Environment(
            loader=jinja2.FileSystemLoader(search_path),
            keep_trailing_newline=True,
        )

    def render_template(self, content: str, data: Mapping[str, Any]) -> str:
        try:
            return self.env.from_string(content).render(**data)
        except jinja2.TemplateError as exc:
            raise DocsBuildError(f"[docs_tree] template error: {exc}") from exc

    def find_template(self, name: str) -> str:
        """Resolve a template name (``redirector`` or ``redirector.html``) to its file."""
        for candidate in (name, f"{name}.html"):
            try:
                _, filename, _ = self.env.loader.get_source(self.env, candidate)
            except jinja2.TemplateNotFound:
                continue
            return filename
        raise DocsBuildError(f"[docs_tree] template '{name}' not found")

    def render_named(self, name: str, data: Mapping[str, Any]) -> str:
        path = Path(self.find_template(name))
        return self.render_template(path.read_text(encoding="utf-8"), data)

    def wrap_layout(self, html: str, extends: str, block: str, data: Mapping[str, Any]) -> str:
        """Place ``html`` in ``block`` of the ``extends`` layout."""
        if not block.isidentifier():
            raise DocsBuildError(f"[docs_tree] invalid block name for yields: {block!r}")
        source = "{% extends docs_layout %}{% block " + block + " %}{{ content }}{% endblock %}"
        return self.render_template(source, {**data, "docs_layout": extends, "content": html})


class MarkupParser:
    """Markdown to HTML using the site's configured extensions."""

    def __init__(self, extensions: Optional[List[Any]] = None, extension_configs: Optional[Dict] = None):
        self.extensions = list(extensions or [])
        self.extension_configs = dict(extension_configs or {})

    def parse(self, content: str) -> str:
        # markdown.markdown builds a fresh Markdown instance per call, safe across threads
        try:
            return markdown.markdown(
                content,
                extensions=self.extensions,
                extension_configs=self.extension_configs,
            )
        except Exception as exc:
            # Unknown extensions and bad extension configs surface here
            raise DocsBuildError(f"[docs_tree] markdown conversion failed: {exc}") from exc


class SiteWriter:
    """Writes rendered pages below ``site_dir``.

    Writing the same path twice keeps the last content; each overwrite is
    logged and recorded in ``collisions``.
    """

    def __init__(self, site_dir):
        self.site_dir = Path(site_dir).resolve()
        self.written: Dict[str, int] = {}
        self.collisions: List[str] = []

    def write(self, path: str, content: str) -> Path:
        target = (self.site_dir / path).resolve()
        try:
            target.relative_to(self.site_dir)
        except ValueError:
            raise DocsBuildError(f"[docs_tree] output path '{path}' resolves outside the site directory")

        if path in self.written:
            log.warning(f"[docs_tree] {path} written more than once; keeping the last version")
            self.collisions.append(path)
        self.written[path] = self.written.get(path, 0) + 1

        target.parent.mkdir(parents=True, exist_ok=True)
        target.write_text(content, encoding="utf-8")
        log.debug(f"[docs_tree] wrote {target}")
        return target
