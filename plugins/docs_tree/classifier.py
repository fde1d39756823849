from dataclasses import dataclass, field
from typing import Dict, Iterable, List, Optional

from mkdocs.utils import log

from plugins.docs_tree.models import ContentFile


@dataclass
class Classification:
    index: Optional[ContentFile] = None
    documents: List[ContentFile] = field(default_factory=list)
    # directory -> that directory's own index file
    directory_indexes: Dict[str, ContentFile] = field(default_factory=dict)
    # raw text of ``index``, filled in by ContentClassifier.classify
    index_content: Optional[str] = None


class ContentClassifier:
    """Splits scanned files into the index file and the documents to build."""

    def __init__(self, index_filename: str, reader=None):
        self.index_filename = index_filename
        self.reader = reader

    def is_index(self, file: ContentFile) -> bool:
        return file.basename == self.index_filename

    def partition(self, files: Iterable[ContentFile]) -> Classification:
        """
        Every file named after ``index_filename`` is kept out of the
        documents. The first one per directory is that directory's index,
        and the root-level one is the designated site index.
        """
        result = Classification()
        for file in files:
            if not self.is_index(file):
                result.documents.append(file)
                continue
            if file.relative_directory in result.directory_indexes:
                log.warning(
                    f"[docs_tree] ignoring extra index file {file.relative_path}; "
                    f"{result.directory_indexes[file.relative_directory].relative_path} is used"
                )
                continue
            result.directory_indexes[file.relative_directory] = file

        result.index = result.directory_indexes.get("")
        log.debug(
            f"[docs_tree] classified {len(result.documents)} documents, "
            f"{len(result.directory_indexes)} index files"
        )
        return result

    def classify(self, files: Iterable[ContentFile]) -> Classification:
        """
        Partition ``files`` and load the designated index through ``reader``.
        ``index_content`` stays None when no index is authored, and the
        caller synthesizes one.
        """
        result = self.partition(files)
        if result.index is None:
            return result
        if self.reader is None:
            raise ValueError("ContentClassifier needs a reader to load the index file")
        result.index_content = self.reader.read(result.index)
        return result
