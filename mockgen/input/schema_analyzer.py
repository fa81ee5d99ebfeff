"""
Schema Analyzer - turn raw introspected schema into per-table metadata and
a foreign-key dependency graph
"""
import logging
from dataclasses import dataclass, field, asdict
from typing import Any, Dict, List, Optional

from mockgen.core.column_types import is_serial_type

logger = logging.getLogger(__name__)

PRIMARY_KEY = 'PRIMARY KEY'
FOREIGN_KEY = 'FOREIGN KEY'

# Substrings of a default expression meaning the database assigns the value
AUTO_INCREMENT_MARKERS = ('nextval(', 'autoincrement', 'auto_increment', 'identity')


@dataclass
class ColumnMetadata:
    name: str
    type: str = 'text'
    nullable: bool = False
    default: Optional[str] = None
    constraint: Optional[str] = None
    foreign_table: Optional[str] = None
    foreign_column: Optional[str] = None

    @classmethod
    def from_raw(cls, raw: Dict[str, Any]) -> 'ColumnMetadata':
        default = raw.get('default')
        constraint = raw.get('constraint')
        return cls(
            name=raw.get('name', ''),
            type=raw.get('type') or 'text',
            nullable=bool(raw.get('nullable', False)),
            default=str(default) if default is not None else None,
            constraint=constraint.upper() if isinstance(constraint, str) else None,
            foreign_table=raw.get('foreign_table'),
            foreign_column=raw.get('foreign_column'),
        )

    @property
    def is_primary_key(self) -> bool:
        return self.constraint == PRIMARY_KEY

    @property
    def is_foreign_key(self) -> bool:
        return self.constraint == FOREIGN_KEY

    @property
    def is_auto_increment(self) -> bool:
        """Primary key whose value the database assigns on insert"""
        if not self.is_primary_key:
            return False
        if is_serial_type(self.type):
            return True
        default = (self.default or '').lower()
        return any(marker in default for marker in AUTO_INCREMENT_MARKERS)


@dataclass
class Dependency:
    table: str
    column: str
    foreign_column: Optional[str] = None


@dataclass
class TableMetadata:
    name: str
    columns: List[ColumnMetadata] = field(default_factory=list)
    primary_key: Optional[ColumnMetadata] = None
    foreign_keys: List[ColumnMetadata] = field(default_factory=list)
    dependencies: List[Dependency] = field(default_factory=list)

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)


@dataclass
class SchemaGraph:
    tables: Dict[str, TableMetadata] = field(default_factory=dict)
    dependencies: Dict[str, List[str]] = field(default_factory=dict)

    def to_dict(self) -> Dict[str, Any]:
        return {
            'tables': {name: table.to_dict() for name, table in self.tables.items()},
            'dependencies': {name: list(deps) for name, deps in self.dependencies.items()}
        }


class SchemaAnalyzer:
    """Builds a SchemaGraph from the raw schema returned by a schema source"""

    def __init__(self, logger=None):
        self.logger = logger or logging.getLogger(__name__)

    def analyze(self, raw_schema: List[Dict[str, Any]]) -> SchemaGraph:
        graph = SchemaGraph()

        for raw_table in raw_schema or []:
            table_name = raw_table.get('name')
            if not table_name:
                continue

            columns = [ColumnMetadata.from_raw(col) for col in raw_table.get('columns') or []]
            table = TableMetadata(name=table_name, columns=columns)
            for column in columns:
                if column.is_primary_key and table.primary_key is None:
                    table.primary_key = column
                elif column.is_foreign_key:
                    table.foreign_keys.append(column)

            graph.tables[table_name] = table
            graph.dependencies[table_name] = []

        # Edges resolve against the full table set, so declaration order doesn't matter
        for table in graph.tables.values():
            for fk in table.foreign_keys:
                if fk.foreign_table and fk.foreign_table in graph.tables:
                    graph.dependencies[table.name].append(fk.foreign_table)
                    table.dependencies.append(Dependency(
                        table=fk.foreign_table,
                        column=fk.name,
                        foreign_column=fk.foreign_column
                    ))
                else:
                    self.logger.debug(
                        f"Foreign key {table.name}.{fk.name} references unknown table "
                        f"'{fk.foreign_table}', no dependency edge added"
                    )

        self.logger.info(f"Analyzed schema with {len(graph.tables)} tables")
        return graph


def analyze_raw_schema(raw_schema: List[Dict[str, Any]]) -> SchemaGraph:
    return SchemaAnalyzer().analyze(raw_schema)
