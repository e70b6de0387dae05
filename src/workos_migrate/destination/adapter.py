"""Data-access adapter for the destination auth database."""

from datetime import datetime, timezone
from typing import Any, Dict, Optional

from loguru import logger
from sqlalchemy import create_engine, text
from sqlalchemy.engine import Engine
from sqlalchemy.exc import SQLAlchemyError

from ..utils.crypto import generate_random_string
from .schema import TABLES, TIMESTAMP_DEFAULTS, metadata

ID_LENGTH = 32


class DestinationError(Exception):
    """Raised when a destination write is rejected."""

    def __init__(self, message: str, model: Optional[str] = None):
        super().__init__(message)
        self.model = model


def generate_id() -> str:
    """Generate a record ID in the destination library's format."""
    return generate_random_string(ID_LENGTH, 'a-z', 'A-Z', '0-9')


class DatabaseAdapter:
    """Inserts records into the destination tables.

    Mirrors the ``create`` operation of the destination library's adapter:
    records are addressed by model name and IDs are generated unless the
    caller forces its own.
    """

    def __init__(self, url: str, echo: bool = False, engine: Optional[Engine] = None):
        """Initialize the adapter.

        Args:
            url: SQLAlchemy database URL
            echo: Echo SQL statements
            engine: Pre-built engine, used instead of ``url`` when given
        """
        self.url = url
        self.engine = engine or create_engine(url, echo=echo, future=True)
        self.logger = logger.bind(component='DatabaseAdapter')

    def create_tables(self) -> None:
        """Create any destination tables that do not exist yet."""
        metadata.create_all(self.engine)
        self.logger.info('Destination tables ready')

    def test_connection(self) -> bool:
        """Check that the database accepts queries."""
        try:
            with self.engine.connect() as conn:
                conn.execute(text('SELECT 1'))
            return True
        except SQLAlchemyError as e:
            self.logger.error(f'Database connection test failed: {e}')
            return False

    def prepare(
        self, model: str, data: Dict[str, Any], force_allow_id: bool = False
    ) -> Dict[str, Any]:
        """Build the row that ``create`` would insert.

        Raises:
            DestinationError: For unknown models or fields
        """
        table = TABLES.get(model)
        if table is None:
            raise DestinationError(f'Unknown model: {model}', model=model)

        unknown = set(data) - set(table.columns.keys())
        if unknown:
            raise DestinationError(
                f'Unknown fields for {model}: {", ".join(sorted(unknown))}',
                model=model,
            )

        row = dict(data)
        if not force_allow_id or not row.get('id'):
            row['id'] = generate_id()

        now = datetime.now(timezone.utc)
        for column in TIMESTAMP_DEFAULTS[model]:
            if row.get(column) is None:
                row[column] = now

        return row

    def create(
        self, model: str, data: Dict[str, Any], force_allow_id: bool = False
    ) -> Dict[str, Any]:
        """Insert one record.

        Args:
            model: Model name (user, account, organization, member, twoFactor)
            data: Field mapping using the destination's column names
            force_allow_id: Keep the caller's ``id`` instead of generating one

        Returns:
            The inserted record

        Raises:
            DestinationError: If the model is unknown or the insert fails
        """
        row = self.prepare(model, data, force_allow_id)
        self._insert(model, row)
        return row

    def _insert(self, model: str, row: Dict[str, Any]) -> None:
        try:
            with self.engine.begin() as conn:
                conn.execute(TABLES[model].insert().values(**row))
        except SQLAlchemyError as e:
            raise DestinationError(f'Failed to create {model}: {e}', model=model)

    def close(self) -> None:
        self.engine.dispose()


class DryRunAdapter(DatabaseAdapter):
    """Adapter that validates and logs records without writing them."""

    def _insert(self, model: str, row: Dict[str, Any]) -> None:
        self.logger.info(f'Dry run: would create {model} {row["id"]}')
