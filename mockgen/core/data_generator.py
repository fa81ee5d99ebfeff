import time
import logging
from dataclasses import dataclass, field
from typing import Any, Dict, List, Mapping, Optional, Union

from mockgen.core.executor import ExecutionResult, TransactionalExecutor
from mockgen.core.relationship_preserver import RelationshipPreserver
from mockgen.core.type_generators import TypeGenerators
from mockgen.input.schema_analyzer import SchemaAnalyzer, SchemaGraph, TableMetadata
from mockgen.output.query_builder import build_insert_query
from mockgen.utils.config_manager import ColumnOptions, GenerationConfig
from mockgen.utils.exceptions import GenerationError, QueryBuildError, SchemaFetchError
from mockgen.utils.helpers import format_duration

NULL_PROBABILITY = 0.1
DEFAULT_DIALECT = 'postgresql'

PREVIEW_RECORDS_PER_TABLE = 3
PREVIEW_QUERIES = 5


@dataclass
class TableStatement:
    """INSERT for one table; ``error`` is set instead of ``query`` when none could be built"""
    table: str
    query: Optional[str]
    records: List[Dict[str, Any]]
    error: Optional[str] = None


@dataclass
class GenerationResult:
    data: Dict[str, List[Dict[str, Any]]] = field(default_factory=dict)
    statements: List[TableStatement] = field(default_factory=list)
    order: List[str] = field(default_factory=list)

    @property
    def queries(self) -> List[str]:
        return [statement.query for statement in self.statements if statement.query]

    @property
    def summary(self) -> Dict[str, int]:
        return {
            'tables_processed': len(self.order),
            'total_records': sum(len(records) for records in self.data.values())
        }

    def to_dict(self) -> Dict[str, Any]:
        return {'data': self.data, 'queries': self.queries, 'summary': self.summary}

    def preview(self, records_per_table: int = PREVIEW_RECORDS_PER_TABLE,
                max_queries: int = PREVIEW_QUERIES) -> Dict[str, Any]:
        return {
            'preview': {table: records[:records_per_table] for table, records in self.data.items()},
            'queries': self.queries[:max_queries],
            'summary': self.summary
        }


class MockDataGenerator:
    """
    Schema-aware mock data generator.

    Analyzes a schema source, orders tables by foreign-key dependencies,
    generates records table by table (feeding each table's records to its
    dependents) and optionally inserts them through a database handler.
    """

    def __init__(self, seed: Optional[int] = None, locale: str = "en_US", logger=None):
        self.logger = logger or logging.getLogger(__name__)
        self.seed = seed
        self.locale = locale
        self.generators = TypeGenerators(seed=seed, locale=locale)
        self.analyzer = SchemaAnalyzer(logger=self.logger)
        self.relationship_preserver = RelationshipPreserver(logger=self.logger, rng=self.generators.random)
        self.executor = TransactionalExecutor(logger=self.logger)

    def reseed(self, seed: Optional[int], locale: Optional[str] = None):
        """Start a fresh random source, e.g. for a reproducible run"""
        self.seed = seed
        self.locale = locale or self.locale
        self.generators = TypeGenerators(seed=seed, locale=self.locale)
        self.relationship_preserver.random = self.generators.random

    def analyze_schema(self, source) -> SchemaGraph:
        """
        Build the SchemaGraph for ``source``: a handler with ``get_schema()``
        or an already fetched raw schema list.
        """
        if isinstance(source, list):
            raw_schema = source
        else:
            try:
                raw_schema = source.get_schema()
            except SchemaFetchError:
                raise
            except Exception as e:
                self.logger.error(f"Schema fetch failed: {e}")
                raise SchemaFetchError(str(e)) from e

        return self.analyzer.analyze(raw_schema)

    def generate_table_data(self, table: Union[TableMetadata, Dict[str, Any]], count: int = 10,
                            options: Optional[Mapping[str, Union[ColumnOptions, Dict[str, Any]]]] = None,
                            foreign_key_pool: Optional[Dict[str, List[Dict[str, Any]]]] = None
                            ) -> List[Dict[str, Any]]:
        """Generate ``count`` records for one table"""
        if count < 0:
            raise GenerationError(f"Record count must be non-negative, got {count}")
        if isinstance(table, dict):
            table = self.analyzer.analyze([table]).tables[table['name']]

        column_options = {name: self._as_options(opts) for name, opts in (options or {}).items()}
        pool = foreign_key_pool or {}
        rng = self.generators.random

        records = []
        for _ in range(count):
            record = {}
            for column in table.columns:
                if column.is_auto_increment:
                    continue

                if column.is_foreign_key and pool:
                    found, value = self.relationship_preserver.choose_fk_value(column, pool, rng=rng)
                    if found:
                        record[column.name] = value
                        continue

                if column.nullable and not column.is_primary_key and rng.random() < NULL_PROBABILITY:
                    record[column.name] = None
                    continue

                record[column.name] = self.generators.generate(column, column_options.get(column.name))
            records.append(record)

        self.logger.debug(f"Generated {len(records)} records for {table.name}")
        return records

    @staticmethod
    def _as_options(options) -> ColumnOptions:
        if isinstance(options, ColumnOptions):
            return options
        return ColumnOptions.model_validate(options or {})

    def generate_mock_data(self, source, config=None) -> GenerationResult:
        """
        Generate records and INSERT statements for every table in dependency
        order. Nothing is written to the database.
        """
        config = GenerationConfig.from_mapping(config)
        if config.seed is not None:
            self.reseed(config.seed, config.locale)

        graph = self.analyze_schema(source)
        dialect = config.dialect or getattr(source, 'dialect', None) or DEFAULT_DIALECT

        result = GenerationResult(order=self.relationship_preserver.get_generation_order(graph.dependencies))
        self.relationship_preserver.clear_fk_pools()

        for table_name in result.order:
            table = graph.tables.get(table_name)
            if table is None:
                continue

            table_config = config.table_config(table_name)
            records = self.generate_table_data(
                table,
                count=table_config.count,
                options=table_config.options,
                foreign_key_pool=self.relationship_preserver.pool
            )
            result.data[table_name] = records
            self.relationship_preserver.add_records(table_name, records)

            if not records:
                continue
            try:
                query = build_insert_query(table_name, records, dialect=dialect)
            except QueryBuildError as e:
                self.logger.warning(f"No INSERT for {table_name}: {e}")
                result.statements.append(TableStatement(table=table_name, query=None, records=records, error=str(e)))
                continue
            result.statements.append(TableStatement(table=table_name, query=query, records=records))

        self.logger.info(
            f"Generated {result.summary['total_records']} records for "
            f"{result.summary['tables_processed']} tables"
        )
        return result

    def execute_mock_data_generation(self, handler, config=None) -> ExecutionResult:
        """
        Generate and insert mock data. Always returns a result; a schema fetch
        failure is reported through ``error`` instead of raised.
        """
        start_time = time.time()
        try:
            generation = self.generate_mock_data(handler, config)
        except SchemaFetchError as e:
            self.logger.error(f"Mock data generation failed: {e}")
            return ExecutionResult.schema_failure(str(e))

        result = self.executor.execute(handler, generation)
        self.logger.info(f"{result.message} in {format_duration(time.time() - start_time)}")
        return result


def analyze_schema(source) -> SchemaGraph:
    return MockDataGenerator().analyze_schema(source)


def generate_table_data(table, count: int = 10, options=None, foreign_key_pool=None,
                        seed: Optional[int] = None) -> List[Dict[str, Any]]:
    return MockDataGenerator(seed=seed).generate_table_data(table, count, options, foreign_key_pool)


def generate_mock_data(source, config=None) -> GenerationResult:
    return MockDataGenerator().generate_mock_data(source, config)


def execute_mock_data_generation(handler, config=None) -> ExecutionResult:
    return MockDataGenerator().execute_mock_data_generation(handler, config)
