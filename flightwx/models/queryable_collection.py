"""
Chainable in-memory collection for fluent queries over decoded weather.
"""

from typing import TypeVar, Generic, Callable, List, Dict, Optional, Any, Union, Iterator
from collections.abc import Iterable

T = TypeVar('T')


class QueryableCollection(Generic[T]):
    """
    A lightweight, chainable collection for filtering in-memory items.

    Every filtering method returns a new collection of the same class, so
    calls can be chained.

    Examples:
        collection.filter(lambda s: s.category.is_known).first()
        collection.where(station='KJFK').all()
        collection.order_by(lambda s: s.station).all()
    """

    def __init__(self, items: Union[List[T], Iterable[T]]):
        self._items: List[T] = list(items) if not isinstance(items, list) else items

    def _new_collection(self, items: List[T]) -> 'QueryableCollection[T]':
        return self.__class__(items)

    def filter(self, predicate: Callable[[T], bool]) -> 'QueryableCollection[T]':
        """Keep items for which ``predicate`` returns True."""
        return self._new_collection([item for item in self._items if predicate(item)])

    def where(self, **kwargs) -> 'QueryableCollection[T]':
        """
        Keep items whose attributes equal all the given values (AND logic).

        Example:
            collection.where(station='KJFK')
        """
        def matches(item: T) -> bool:
            return all(
                getattr(item, key, None) == value
                for key, value in kwargs.items()
            )
        return self.filter(matches)

    def first(self) -> Optional[T]:
        return self._items[0] if self._items else None

    def last(self) -> Optional[T]:
        return self._items[-1] if self._items else None

    def all(self) -> List[T]:
        """Return the items as a new list."""
        return list(self._items)

    def count(self) -> int:
        return len(self._items)

    def is_empty(self) -> bool:
        return not self._items

    def group_by(self, key_func: Callable[[T], Any]) -> Dict[Any, List[T]]:
        """Group items by key, preserving item order within each group."""
        groups: Dict[Any, List[T]] = {}
        for item in self._items:
            groups.setdefault(key_func(item), []).append(item)
        return groups

    def order_by(self, key_func: Callable[[T], Any], reverse: bool = False) -> 'QueryableCollection[T]':
        return self._new_collection(sorted(self._items, key=key_func, reverse=reverse))

    def __iter__(self) -> Iterator[T]:
        return iter(self._items)

    def __len__(self) -> int:
        return len(self._items)

    def __getitem__(self, index):
        if isinstance(index, slice):
            return self._new_collection(self._items[index])
        return self._items[index]

    def __bool__(self) -> bool:
        return bool(self._items)

    def __repr__(self) -> str:
        return f"{self.__class__.__name__}({len(self._items)} items)"
