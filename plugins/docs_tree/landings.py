from dataclasses import dataclass, field
from typing import Dict, Iterator, List, Optional, Sequence, Set, Tuple

from mkdocs.utils import log

from plugins.docs_tree.models import ContentFile


def join_key(directory: str, name: str) -> str:
    return f"{directory}/{name}" if directory else name


class LandingMap:
    """Directory -> landing document path. Entries are never overwritten."""

    def __init__(self):
        self._entries: Dict[str, str] = {}
        self._explicit: Set[str] = set()

    def assign(self, directory: str, target: str, explicit: bool = False) -> bool:
        if directory in self._entries:
            return False
        self._entries[directory] = target
        if explicit:
            self._explicit.add(directory)
        return True

    def is_explicit(self, directory: str) -> bool:
        return directory in self._explicit

    def get(self, directory: str) -> Optional[str]:
        return self._entries.get(directory)

    def items(self):
        return self._entries.items()

    def as_dict(self) -> Dict[str, str]:
        return dict(self._entries)

    def __contains__(self, directory: object) -> bool:
        return directory in self._entries

    def __getitem__(self, directory: str) -> str:
        return self._entries[directory]

    def __iter__(self) -> Iterator[str]:
        return iter(self._entries)

    def __len__(self) -> int:
        return len(self._entries)


@dataclass
class LandingResult:
    landings: LandingMap
    # distinct directories holding at least one document, in discovery order
    directories: List[str] = field(default_factory=list)
    unresolved: List[str] = field(default_factory=list)


class LandingResolver:
    """Picks the landing document of every directory in the document set.

    Resolution runs in two passes. The explicit pass assigns a directory to
    a document inside it whose basename is a candidate; the earliest
    candidate wins, then the first document seen. The fallback pass visits
    the remaining directories in discovery order and takes the landing
    already recorded for ``{directory}/{candidate}``, trying candidates in
    order. Whatever is still missing is reported as unresolved.
    """

    def __init__(self, candidates: Sequence[str]):
        self.candidates = tuple(candidates)

    @staticmethod
    def default_candidates(documents: Sequence[ContentFile]) -> Tuple[str, ...]:
        if not documents:
            return ()
        return (documents[0].basename,)

    def resolve(self, documents: Sequence[ContentFile]) -> LandingResult:
        result = LandingResult(LandingMap())

        ranks = {name: rank for rank, name in reversed(list(enumerate(self.candidates)))}
        best: Dict[str, Tuple[int, str]] = {}
        for doc in documents:
            directory = doc.relative_directory
            if directory not in result.directories:
                result.directories.append(directory)
            rank = ranks.get(doc.basename)
            if rank is None:
                continue
            if directory not in best or rank < best[directory][0]:
                best[directory] = (rank, doc.relative_path)

        for directory in result.directories:
            if directory in best:
                result.landings.assign(directory, best[directory][1], explicit=True)

        for directory in result.directories:
            if directory in result.landings:
                continue
            landing = self.find_landing(directory, result.landings)
            if landing is None:
                result.unresolved.append(directory)
                continue
            result.landings.assign(directory, landing)
            log.debug(f"[docs_tree] '{directory}' falls back to nested landing {landing}")

        log.debug(
            f"[docs_tree] resolved {len(result.landings)} landings, "
            f"{len(result.unresolved)} unresolved directories"
        )
        return result

    def find_landing(self, directory: str, landings: LandingMap) -> Optional[str]:
        for candidate in self.candidates:
            target = landings.get(join_key(directory, candidate))
            if target is not None:
                return target
        return None
