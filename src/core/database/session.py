"""
Supabase client management.
"""

from typing import Optional

from supabase import Client, ClientOptions, create_client

from src.core.config import settings
from src.core.utils import get_logger

logger = get_logger(__name__)


class DatabaseConnection:
    """
    Singleton holding the Supabase client for subscriber, tier and usage tables.
    """

    _instance: Optional["DatabaseConnection"] = None
    _client: Optional[Client] = None

    def __new__(cls):
        if cls._instance is None:
            cls._instance = super().__new__(cls)
        return cls._instance

    def _validate_supabase_settings(self) -> None:
        missing: list[str] = []
        if not settings.supabase.url:
            missing.append("SUPABASE_URL")
        if not (settings.supabase.service_key or settings.supabase.key):
            missing.append("SUPABASE_KEY")
        if missing:
            raise RuntimeError(
                "Supabase backend selected but settings are missing: "
                + ", ".join(missing)
            )

    def _connect(self) -> None:
        if settings.database.backend != "supabase":
            raise RuntimeError(
                f"DatabaseConnection (Supabase) cannot be used when DATABASE_BACKEND={settings.database.backend}"
            )
        self._validate_supabase_settings()

        # Subscription rows are written by webhooks, so the service role is
        # preferred to bypass RLS
        api_key = settings.supabase.service_key or settings.supabase.key
        key_type = "SERVICE_KEY" if settings.supabase.service_key else "ANON_KEY"

        try:
            self._client = create_client(
                settings.supabase.url,
                api_key,
                options=ClientOptions(schema=settings.supabase.db_schema),
            )
        except Exception as e:
            logger.error("supabase_connection_failed", error=str(e))
            raise

        logger.info(
            "supabase_connected",
            schema=settings.supabase.db_schema,
            key_type=key_type,
        )

    @property
    def client(self) -> Client:
        if self._client is None:
            self._connect()
        return self._client

    def disconnect(self) -> None:
        # supabase-py keeps no socket open between requests
        self._client = None
        logger.info("supabase_disconnected")
