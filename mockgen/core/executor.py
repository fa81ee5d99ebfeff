"""
Transactional executor: one BEGIN / INSERT / COMMIT-or-ROLLBACK per table,
tables in generation order, failures isolated to their own table.
"""
import logging
from dataclasses import dataclass, field, asdict
from enum import Enum
from typing import Any, Dict, List, Optional


class TransactionStage(str, Enum):
    BEGIN = "begin"
    INSERT = "insert"
    COMMIT = "commit"


@dataclass
class ExecutionSummary:
    tables_processed: int = 0
    successful_tables: int = 0
    failed_tables: int = 0
    total_records: int = 0


@dataclass
class ExecutionResult:
    success: bool
    summary: ExecutionSummary = field(default_factory=ExecutionSummary)
    successful_tables: List[Dict[str, Any]] = field(default_factory=list)
    failed_tables: List[Dict[str, Any]] = field(default_factory=list)
    message: str = ""
    error: Optional[str] = None

    @classmethod
    def schema_failure(cls, error: str) -> 'ExecutionResult':
        return cls(success=False, error=error, message="Failed to generate mock data")

    def to_dict(self) -> Dict[str, Any]:
        result = asdict(self)
        if self.error is None:
            result.pop('error')
        return result


def summarize(successful: List[Dict[str, Any]], failed: List[Dict[str, Any]],
              total_records: int, tables_processed: int) -> str:
    if tables_processed == 0:
        return "No tables found in schema"
    if not successful and not failed:
        return "No records were generated"
    if successful and not failed:
        return f"Successfully generated {total_records} records across {len(successful)} tables"
    if successful:
        return f"Partially completed: {len(successful)} tables succeeded, {len(failed)} tables failed"
    return f"Failed to generate data for all {len(failed)} tables"


class TransactionalExecutor:
    """Runs batched INSERT statements through a database handler"""

    def __init__(self, logger=None):
        self.logger = logger or logging.getLogger(__name__)

    def execute(self, handler, generation) -> ExecutionResult:
        """
        Insert every generated table in order. A failing table is rolled back
        and recorded; tables already committed stay committed.
        """
        successful_tables = []
        failed_tables = []
        total_records = 0

        for statement in generation.statements:
            record_count = len(statement.records)
            if statement.error:
                self.logger.error(f"No INSERT could be built for {statement.table}: {statement.error}")
                failed_tables.append({
                    'table': statement.table,
                    'error': statement.error,
                    'records': record_count
                })
                continue

            stage = TransactionStage.BEGIN
            try:
                handler.execute('BEGIN;')
                stage = TransactionStage.INSERT
                handler.execute(statement.query)
                stage = TransactionStage.COMMIT
                handler.execute('COMMIT;')
            except Exception as e:
                self._rollback(handler, statement.table)
                self.logger.error(f"Failed to insert data into {statement.table} during {stage.value}: {e}")
                failed_tables.append({
                    'table': statement.table,
                    'error': str(e),
                    'records': record_count
                })
                continue

            successful_tables.append({'table': statement.table, 'records': record_count})
            total_records += record_count
            self.logger.info(f"Committed {record_count} records into {statement.table}")

        summary = ExecutionSummary(
            tables_processed=generation.summary['tables_processed'],
            successful_tables=len(successful_tables),
            failed_tables=len(failed_tables),
            total_records=total_records
        )
        return ExecutionResult(
            success=bool(successful_tables),
            summary=summary,
            successful_tables=successful_tables,
            failed_tables=failed_tables,
            message=summarize(successful_tables, failed_tables, total_records, summary.tables_processed)
        )

    def _rollback(self, handler, table_name: str):
        try:
            handler.execute('ROLLBACK;')
        except Exception as e:
            self.logger.warning(f"Rollback for {table_name} failed: {e}")
