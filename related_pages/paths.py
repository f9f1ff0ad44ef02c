from __future__ import annotations

from typing import Dict, Iterable, List, Sequence, Tuple

from .config import PATH_EXACT_FOLDER_POINTS, PATH_SUBFOLDER_POINTS
from .documents import Document, split_path


def directory_of(path: str) -> Tuple[str, ...]:
    """All segments of ``path`` except the last."""
    return tuple(split_path(path)[:-1])


def path_proximity_score(reference_path: str, candidate_path: str) -> int:
    """
    Points for how close ``candidate_path`` sits to ``reference_path``.

    - same folder as the reference: PATH_EXACT_FOLDER_POINTS
    - any deeper folder under the reference's folder: PATH_SUBFOLDER_POINTS
    - anything else (including the reference itself): 0

    Folder prefixes are compared segment by segment, so ``A/B`` is not a
    prefix of ``A/BC``.
    """
    if candidate_path == reference_path:
        return 0
    ref_dir = directory_of(reference_path)
    cand_dir = directory_of(candidate_path)
    if cand_dir == ref_dir:
        return PATH_EXACT_FOLDER_POINTS
    if len(cand_dir) > len(ref_dir) and cand_dir[: len(ref_dir)] == ref_dir:
        return PATH_SUBFOLDER_POINTS
    return 0


def score_paths(reference: Document, documents: Iterable[Document]) -> Dict[str, int]:
    """Map candidate path -> proximity points, omitting zero scores."""
    scores: Dict[str, int] = {}
    for doc in documents:
        pts = path_proximity_score(reference.path, doc.path)
        if pts > 0:
            scores[doc.path] = pts
    return scores


def documents_under_directory(reference: Document, documents: Sequence[Document]) -> List[Document]:
    """Documents in the reference's folder or any folder below it, excluding the reference."""
    return [d for d in documents if path_proximity_score(reference.path, d.path) > 0]
