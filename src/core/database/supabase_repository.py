"""
Supabase implementation of the Repository Pattern (PostgREST query builder).
"""

from typing import Any, Dict, Generic, List, Optional, Type, TypeVar

from supabase import Client

from src.core.utils import get_logger

logger = get_logger(__name__)

T = TypeVar("T")  # Pydantic Model


class SupabaseRepository(Generic[T]):
    """
    Supabase implementation of IRepository.

    Rows come back from PostgREST as dicts and are mapped straight onto the
    Pydantic model class.
    """

    def __init__(
        self,
        client: Client,
        table_name: str,
        model_class: Type[T],
        primary_key: str = "id",
    ):
        self.client = client
        self.table_name = table_name
        self.model_class = model_class
        self.primary_key = primary_key

    def find_by_id(self, id_value: Any, id_column: Optional[str] = None) -> Optional[T]:
        column = id_column or self.primary_key
        try:
            result = (
                self.client.table(self.table_name)
                .select("*")
                .eq(column, id_value)
                .limit(1)
                .execute()
            )
            if result.data:
                return self.model_class(**result.data[0])
            return None
        except Exception as e:
            logger.error(
                "supabase_find_by_id_failed",
                table=self.table_name,
                id_value=str(id_value),
                error=str(e),
            )
            raise

    def find_by(self, filters: Dict[str, Any], limit: int = 100) -> List[T]:
        try:
            query = self.client.table(self.table_name).select("*")
            for column, value in filters.items():
                query = query.eq(column, value)
            result = query.limit(limit).execute()
            return [self.model_class(**item) for item in result.data]
        except Exception as e:
            logger.error(
                "supabase_find_by_failed", table=self.table_name, error=str(e)
            )
            raise
