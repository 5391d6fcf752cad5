"""Short keys for declared sources.

``nedots install .bashrc`` installs a single source. Any segment of a
declared path works as its key: given the sources ``.config/bspwm`` and
``.profile``, both ``.config`` and ``bspwm`` select ``.config/bspwm``.
"""

from __future__ import annotations

import logging
import os
from pathlib import Path
from typing import Dict, Iterable, Iterator, List, Optional

from .errors import AmbiguousSourceKeyError, SourceNotFoundError
from .paths import PathLike

logger = logging.getLogger(__name__)


def path_segments(path: PathLike) -> List[str]:
    """Split a path on the separator, dropping empty segments."""
    return [part for part in str(path).split(os.sep) if part]


class SourceKeyIndex:
    """Map path segments of declared sources to the sources themselves.

    By default a key maps to the first source, in declared order, whose
    string form *contains* the key. That means a short key can match a
    longer, unrelated source: with ``.config/nvim-old`` declared before
    ``.config/nvim``, the key ``nvim`` selects ``.config/nvim-old``. In exact mode a
    key must equal a whole segment, and a key shared by several sources is
    reported as ambiguous on lookup instead of picking one.

    Attributes:
        exact (bool): Whether keys match whole segments only.
    """

    def __init__(self, entries: Dict[str, List[Path]], exact: bool = False) -> None:
        """Initialize index from precomputed entries."""
        self._entries = entries
        self.exact = exact

    @classmethod
    def build(cls, sources: Iterable[PathLike], exact: bool = False) -> "SourceKeyIndex":
        """Build the index for ``sources``.

        Args:
            sources: Declared sources, in configuration order.
            exact: Match whole segments only (default: False).

        Returns:
            SourceKeyIndex: Index over every distinct segment.
        """
        paths = [Path(s) for s in sources]
        keys = sorted({segment for path in paths for segment in path_segments(path)})

        entries: Dict[str, List[Path]] = {}
        for key in keys:
            if exact:
                matches = [p for p in paths if key in path_segments(p)]
            else:
                matches = [p for p in paths if key in str(p)][:1]
            entries[key] = matches

        logger.debug("Keyed sources %s", {k: [str(p) for p in v] for k, v in entries.items()})
        return cls(entries, exact=exact)

    def get(self, key: str) -> Optional[Path]:
        """Return the source for ``key``, or None if nothing matches.

        Raises:
            AmbiguousSourceKeyError: In exact mode, if ``key`` matches more
                than one source.
        """
        matches = self._entries.get(key)
        if not matches:
            return None
        if len(matches) > 1:
            raise AmbiguousSourceKeyError(key, matches)
        return matches[0]

    def lookup(self, key: str) -> Path:
        """Return the source for ``key``.

        Raises:
            SourceNotFoundError: If no source matches ``key``.
            AmbiguousSourceKeyError: In exact mode, if ``key`` matches more
                than one source.
        """
        source = self.get(key)
        if source is None:
            raise SourceNotFoundError(key)
        return source

    def keys(self) -> List[str]:
        """Return every key, sorted."""
        return list(self._entries)

    def __contains__(self, key: object) -> bool:
        return key in self._entries

    def __iter__(self) -> Iterator[str]:
        return iter(self._entries)

    def __len__(self) -> int:
        return len(self._entries)
