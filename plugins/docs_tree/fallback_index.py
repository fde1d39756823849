from typing import Iterable

from plugins.docs_tree.models import ContentFile
from plugins.docs_tree.paths import OutputPathMapper


def link_title(url: str) -> str:
    """``/docs/getting-started`` -> ``Getting started``."""
    segment = url.rstrip("/").split("/")[-1]
    text = segment.replace("-", " ")
    return text[:1].upper() + text[1:]


def synthesize_index(documents: Iterable[ContentFile], mapper: OutputPathMapper) -> str:
    """Build a Markdown link list standing in for a missing index file.

    Lines follow the order of ``documents`` (discovery order); nothing is
    sorted here.
    """
    lines = []
    for doc in documents:
        url = mapper.url(doc)
        lines.append(f"- [{link_title(url)}]({url})\n")
    return "".join(lines)
