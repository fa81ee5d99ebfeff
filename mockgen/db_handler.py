import logging
from abc import ABC, abstractmethod
from typing import Any, Dict, List, Optional

from sqlalchemy import create_engine, inspect
from sqlalchemy.exc import CompileError, SQLAlchemyError

from mockgen.utils.exceptions import ExecutionError, SchemaFetchError


class DatabaseHandler(ABC):
    """Schema introspection plus raw statement execution for one database"""

    dialect = 'postgresql'

    @abstractmethod
    def get_schema(self) -> List[Dict[str, Any]]:
        """
        Tables in the shape
        [{"name": .., "columns": [{"name", "type", "nullable", "default",
                                   "constraint", "foreign_table", "foreign_column"}]}]
        """
        pass

    @abstractmethod
    def execute(self, statement: str) -> Dict[str, Any]:
        """Run one statement; returns {"rows": [...]}, raises ExecutionError"""
        pass

    def close(self):
        pass

    def __enter__(self):
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        self.close()


class SQLAlchemyHandler(DatabaseHandler):
    """
    Database handler over a SQLAlchemy engine.

    The connection runs in AUTOCOMMIT mode so that explicit BEGIN / COMMIT /
    ROLLBACK statements sent through execute() control the transaction.
    """

    def __init__(self, database_url: str, schema: Optional[str] = None, logger: Optional[logging.Logger] = None):
        self.database_url = database_url
        self.logger = logger or logging.getLogger(__name__)
        try:
            self.engine = create_engine(database_url, pool_pre_ping=True, isolation_level="AUTOCOMMIT")
        except (SQLAlchemyError, ImportError, ValueError) as e:
            raise SchemaFetchError(f"Could not create engine for database URL: {e}") from e
        self.dialect = self.engine.dialect.name
        self.schema = schema if schema is not None else self._default_schema()
        self.connection = None

    def _default_schema(self) -> Optional[str]:
        if self.dialect == "postgresql":
            return "public"
        return None

    def connect(self):
        """Establish database connection"""
        if self.connection is None:
            try:
                self.connection = self.engine.connect()
            except SQLAlchemyError as e:
                self.logger.error(f"Error connecting to database: {e}")
                raise
        return self.connection

    def close(self):
        """Close database connection"""
        if self.connection is not None:
            self.connection.close()
            self.connection = None
        self.engine.dispose()

    def get_schema(self) -> List[Dict[str, Any]]:
        try:
            insp = inspect(self.engine)
            tables = []
            for table_name in insp.get_table_names(schema=self.schema):
                tables.append({
                    'name': table_name,
                    'columns': self._reflect_columns(insp, table_name)
                })
        except SQLAlchemyError as e:
            self.logger.error(f"Error reading database schema: {e}")
            raise SchemaFetchError(str(e)) from e

        self.logger.info(f"Discovered {len(tables)} tables")
        return tables

    def _reflect_columns(self, insp, table_name: str) -> List[Dict[str, Any]]:
        pk_cols = set(insp.get_pk_constraint(table_name, schema=self.schema).get("constrained_columns") or [])
        fk_map = {}
        for fk in insp.get_foreign_keys(table_name, schema=self.schema):
            for local_col, remote_col in zip(fk["constrained_columns"], fk["referred_columns"]):
                fk_map[local_col] = (fk["referred_table"], remote_col)

        columns = []
        for col in insp.get_columns(table_name, schema=self.schema):
            name = col["name"]
            default = col.get("default")
            if default is None and col.get("identity"):
                default = "identity"

            # Referencing columns are reported as foreign keys even when also keyed
            if name in fk_map:
                constraint = 'FOREIGN KEY'
            elif name in pk_cols:
                constraint = 'PRIMARY KEY'
            else:
                constraint = None
            foreign_table, foreign_column = fk_map.get(name, (None, None))

            columns.append({
                'name': name,
                'type': self._type_name(col["type"]),
                'nullable': bool(col.get("nullable", True)),
                'default': str(default) if default is not None else None,
                'constraint': constraint,
                'foreign_table': foreign_table,
                'foreign_column': foreign_column
            })
        return columns

    def _type_name(self, column_type) -> str:
        try:
            return column_type.compile(dialect=self.engine.dialect)
        except CompileError:
            return str(column_type)

    def execute(self, statement: str) -> Dict[str, Any]:
        try:
            connection = self.connect()
            result = connection.execution_options(no_parameters=True).exec_driver_sql(statement)
            rows = [dict(row._mapping) for row in result] if result.returns_rows else []
        except SQLAlchemyError as e:
            message = str(getattr(e, 'orig', None) or e)
            self.logger.debug(f"Statement failed: {message}")
            raise ExecutionError(message) from e
        return {'rows': rows}
