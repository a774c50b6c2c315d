"""Insertion-ordered set of entity references keyed by canonical form."""

from collections.abc import Iterable, Iterator

from rollcall.catalog.model import EntityReference, stringify_entity_ref


class OrderedRefSet:
    """Keeps the first occurrence of each canonical reference, in order."""

    def __init__(self, refs: Iterable[EntityReference] = ()):
        self._items: dict[str, EntityReference] = {}
        self.update(refs)

    def add(self, ref: EntityReference) -> bool:
        """Add a reference. Returns False if its canonical form was already present."""
        key = stringify_entity_ref(ref)
        if key in self._items:
            return False
        self._items[key] = ref
        return True

    def update(self, refs: Iterable[EntityReference]) -> None:
        for ref in refs:
            self.add(ref)

    def __contains__(self, item: object) -> bool:
        if isinstance(item, EntityReference):
            item = stringify_entity_ref(item)
        return item in self._items

    def __iter__(self) -> Iterator[EntityReference]:
        return iter(self._items.values())

    def __len__(self) -> int:
        return len(self._items)

    def canonical(self) -> list[str]:
        """Canonical string forms, in insertion order."""
        return list(self._items)
