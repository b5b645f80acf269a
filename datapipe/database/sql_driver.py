from typing import Any, Dict, Optional
from sqlalchemy import create_engine, text
from sqlalchemy.orm import sessionmaker
from sqlmodel import Session

class SQLDriver:
    """Owns the engine and the session factory shared by data sources."""

    def __init__(
        self,
        url: str,
        echo: bool = False,
        pool_pre_ping: bool = True,
        engine_options: Optional[Dict[str, Any]] = None,
    ):
        self.engine = create_engine(
            url, echo=echo, pool_pre_ping=pool_pre_ping, **(engine_options or {})
        )
        # Shared by every data source; each call opens its own session
        self.session_factory = sessionmaker(
            self.engine, class_=Session, expire_on_commit=False
        )

    def connect(self):
        """Check the database is reachable."""
        with self.engine.begin() as conn:
            conn.execute(text("SELECT 1"))

    def disconnect(self):
        """Dispose the connection pool."""
        self.engine.dispose()

    def get_session(self):
        with self.session_factory() as session:
            yield session
