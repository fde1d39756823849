from pathlib import Path

from mkdocs.config.config_options import Type
from mkdocs.plugins import BasePlugin
from mkdocs.utils import log

from plugins.docs_tree.builder import DocsBuilder
from plugins.docs_tree.models import DocsConfig, parse_candidates
from plugins.docs_tree.rendering import MarkupParser, SiteWriter, TemplateRenderer
from plugins.docs_tree.scanner import ContentSource


class DocsTreePlugin(BasePlugin):
    """Builds a directory-style docs tree from a content directory.

    After MkDocs finishes the site, every document under ``content_dir`` is
    rendered to ``{url_prefix}/{directory}/{name}/index.html`` and each
    directory gets a landing page, either a copy of its landing document or
    a redirect stub pointing at it.
    """

    config_scheme = (
        ("content_dir", Type(str, required=True)),
        ("index_filename", Type(str, default="README")),
        ("url_prefix", Type(str, default="/docs")),
        ("landing_names", Type((str, list), default="")),
        ("redirects", Type(bool, default=False)),
        ("extends", Type(str, default=None)),
        ("yields", Type(str, default="content")),
        ("templates_dir", Type(str, default=None)),
        ("extensions", Type(list, default=[".md"])),
        ("workers", Type(int, default=1)),
    )

    def on_post_build(self, config):
        project_root = Path(config["config_file_path"]).resolve().parent
        docs_config = self.build_docs_config(config)
        content_root = (project_root / docs_config.content_directory).resolve()
        if not content_root.is_dir():
            log.warning(f"[docs_tree] content directory '{content_root}' not found; skipping docs build")
            return

        template_dirs = []
        if self.config["templates_dir"]:
            template_dirs.append(str((project_root / self.config["templates_dir"]).resolve()))

        builder = DocsBuilder(
            docs_config,
            source=ContentSource(content_root, self.config["extensions"]),
            renderer=TemplateRenderer(template_dirs),
            markup=MarkupParser(config.get("markdown_extensions"), config.get("mdx_configs")),
            writer=SiteWriter(config["site_dir"]),
        )
        log.info(f"[docs_tree] building docs from {content_root}")
        report = builder.build(data=self.shared_data(config))
        if report.collisions:
            log.warning(f"[docs_tree] {len(report.collisions)} output paths were overwritten: {report.collisions}")

    def build_docs_config(self, config) -> DocsConfig:
        return DocsConfig(
            content_directory=self.config["content_dir"],
            index_filename=self.config["index_filename"],
            base_url_prefix=self.config["url_prefix"],
            candidate_landing_names=parse_candidates(self.config["landing_names"]),
            emit_redirects=self.config["redirects"],
            template_extends=self.config["extends"],
            template_yield_name=self.config["yields"],
            site_url=config.get("site_url") or "",
            workers=max(1, self.config["workers"]),
        )

    @staticmethod
    def shared_data(config) -> dict:
        """Values every docs page and index can use in its templates."""
        return {
            "site_name": config.get("site_name"),
            "site_url": config.get("site_url") or "",
        }
