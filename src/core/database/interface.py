from typing import Any, Dict, Generic, List, Optional, Protocol, TypeVar

T = TypeVar("T")


class IRepository(Generic[T], Protocol):
    """
    Generic repository contract.
    Lookups every backend supports on top of its table-specific queries.
    """

    def find_by_id(self, id_value: Any, id_column: str = "id") -> Optional[T]:
        """Find a record by its identifier."""
        ...

    def find_by(self, filters: Dict[str, Any], limit: int = 100) -> List[T]:
        """Find records matching simple equality filters."""
        ...
