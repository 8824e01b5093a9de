import psycopg
from psycopg.rows import dict_row

from app.config.models import SessionConfig
from app.config.store_base import BaseConfigStore
from app.database.connection import get_connection
from app.exceptions import ConfigStoreError
from app.logging.logger import Log


class SessionConfigRepository(BaseConfigStore):
    """Database operations for the session_configs table (one row per profile)."""

    def __init__(self, profile: str = "default") -> None:
        self._profile = profile

    def ensure_schema(self) -> None:
        """Create the session_configs table if it does not exist."""
        try:
            with get_connection() as conn:
                conn.execute(
                    """
                    CREATE TABLE IF NOT EXISTS session_configs (
                        profile TEXT PRIMARY KEY,
                        extraction_endpoint TEXT NOT NULL DEFAULT '',
                        extraction_key TEXT NOT NULL DEFAULT '',
                        analysis_key TEXT NOT NULL DEFAULT '',
                        updated_at TIMESTAMPTZ NOT NULL DEFAULT NOW()
                    )
                    """
                )
                conn.commit()
        except psycopg.Error as exc:
            raise ConfigStoreError(f"Failed to create session_configs table: {exc}") from exc

    def load(self) -> SessionConfig:
        try:
            with get_connection() as conn:
                with conn.cursor(row_factory=dict_row) as cur:
                    cur.execute(
                        """
                        SELECT extraction_endpoint, extraction_key, analysis_key
                        FROM session_configs
                        WHERE profile = %s
                        """,
                        (self._profile,),
                    )
                    row = cur.fetchone()
        except psycopg.Error as exc:
            raise ConfigStoreError(f"Failed to load config profile {self._profile}: {exc}") from exc

        if row is None:
            return SessionConfig()

        return SessionConfig(
            extraction_endpoint=row["extraction_endpoint"],
            extraction_key=row["extraction_key"],
            analysis_key=row["analysis_key"],
        )

    def save(self, config: SessionConfig) -> None:
        try:
            with get_connection() as conn:
                conn.execute(
                    """
                    INSERT INTO session_configs
                        (profile, extraction_endpoint, extraction_key, analysis_key, updated_at)
                    VALUES (%s, %s, %s, %s, NOW())
                    ON CONFLICT (profile) DO UPDATE
                    SET extraction_endpoint = EXCLUDED.extraction_endpoint,
                        extraction_key = EXCLUDED.extraction_key,
                        analysis_key = EXCLUDED.analysis_key,
                        updated_at = NOW()
                    """,
                    (
                        self._profile,
                        config.extraction_endpoint,
                        config.extraction_key,
                        config.analysis_key,
                    ),
                )
                conn.commit()
        except psycopg.Error as exc:
            raise ConfigStoreError(f"Failed to save config profile {self._profile}: {exc}") from exc
        Log.info(f"Saved session configuration for profile {self._profile}")
