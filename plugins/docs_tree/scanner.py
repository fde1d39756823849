import os
import re
from pathlib import Path
from typing import List, Sequence, Tuple

import yaml
from mkdocs.utils import log

from plugins.docs_tree.models import ContentFile, DocsBuildError

FM_PATTERN = re.compile(r"^---\s*\n(.*?)\n---\s*\n?", re.DOTALL)


def split_front_matter(source_text: str) -> Tuple[dict, str]:
    """
    Return (front_matter_dict, body_text). If no FM, dict={} and body=source_text.
    """
    m = FM_PATTERN.match(source_text)
    if not m:
        return {}, source_text
    try:
        fm = yaml.safe_load(m.group(1)) or {}
    except yaml.YAMLError as exc:
        log.warning(f"[docs_tree] unable to parse front matter: {exc}")
        fm = {}
    if not isinstance(fm, dict):
        log.warning("[docs_tree] front matter is not a mapping; ignoring it")
        fm = {}
    return fm, source_text[m.end():]


class ContentSource:
    """Lists and reads the content files under one root directory."""

    def __init__(self, root, extensions: Sequence[str] = (".md",)):
        self.root = Path(root)
        self.extensions = tuple(extensions)

    def scan(self) -> List[ContentFile]:
        """Collect content files in sorted path order, skipping hidden files and directories."""
        results = []
        for root, dirs, files in os.walk(self.root):
            dirs[:] = [d for d in dirs if not d.startswith(".")]
            for file in files:
                if file.startswith(".") or not file.endswith(self.extensions):
                    continue
                rel_path = Path(root, file).relative_to(self.root)
                results.append(ContentFile.from_path(rel_path.as_posix()))
        results.sort(key=lambda f: f.relative_path)
        log.debug(f"[docs_tree] found {len(results)} content files under {self.root}")
        return results

    def path_for(self, file: ContentFile) -> Path:
        return self.root / file.relative_path

    def exists(self, file: ContentFile) -> bool:
        return self.path_for(file).is_file()

    def read(self, file: ContentFile) -> str:
        try:
            return self.path_for(file).read_text(encoding="utf-8")
        except OSError as exc:
            raise DocsBuildError(f"[docs_tree] unable to read {file.relative_path}: {exc}") from exc
