"""Unit to parent lookup with an explicit load-once lifecycle."""

from collections.abc import Mapping

from loguru import logger

from area_profile.lib.spatial_store.base import BaseSpatialStore

DEFAULT_PARENT_CODE_LENGTH = 4


class ParentLookup:
    """Read-only table mapping base unit codes to parent codes.

    Codes missing from the table fall back to their first
    ``prefix_length`` characters. The table may be loaded exactly once.
    """

    def __init__(self, prefix_length: int = DEFAULT_PARENT_CODE_LENGTH) -> None:
        if prefix_length < 1:
            msg = f"prefix_length must be positive, got {prefix_length}"
            raise ValueError(msg)
        self._prefix_length = prefix_length
        self._table: dict[str, str] = {}
        self._loaded = False

    @property
    def loaded(self) -> bool:
        return self._loaded

    def __len__(self) -> int:
        return len(self._table)

    def load(self, table: Mapping[str, str]) -> None:
        """Load the lookup table.

        Raises:
            RuntimeError: If the table was already loaded.
        """
        if self._loaded:
            msg = "ParentLookup is already loaded"
            raise RuntimeError(msg)
        self._table = dict(table)
        self._loaded = True
        logger.debug(f"Loaded parent lookup with {len(self._table)} units")

    def parent_of(self, unit_code: str) -> str:
        """Return the parent code for a unit."""
        parent = self._table.get(unit_code)
        if parent:
            return parent
        return unit_code[: self._prefix_length]

    @classmethod
    async def from_store(
        cls, store: BaseSpatialStore, prefix_length: int = DEFAULT_PARENT_CODE_LENGTH
    ) -> "ParentLookup":
        """Build a loaded lookup from a spatial store's parent table."""
        lookup = cls(prefix_length)
        lookup.load(await store.unit_parents())
        return lookup
