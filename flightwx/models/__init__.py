from .queryable_collection import QueryableCollection

__all__ = ['QueryableCollection']
