"""
Schema Parser Module - Parse CREATE TABLE DDL into the raw schema shape
returned by database introspection, so generation can run without a live
database connection.
"""

import re
import logging
from pathlib import Path
from typing import Any, Dict, List, Optional, Union

import sqlparse

from mockgen.utils.exceptions import SchemaParsingError

CREATE_TABLE_RE = re.compile(
    r'^\s*CREATE\s+(?:(?:GLOBAL|LOCAL)\s+)?(?:TEMP(?:ORARY)?\s+|UNLOGGED\s+)?TABLE\s+'
    r'(?:IF\s+NOT\s+EXISTS\s+)?([^\s(]+)',
    re.IGNORECASE
)
REFERENCES_RE = re.compile(r'REFERENCES\s+([^\s(]+)\s*(?:\(([^)]*)\))?', re.IGNORECASE)
TABLE_PK_RE = re.compile(r'PRIMARY\s+KEY\s*\(([^)]+)\)', re.IGNORECASE)
TABLE_FK_RE = re.compile(
    r'FOREIGN\s+KEY\s*\(([^)]+)\)\s*REFERENCES\s+([^\s(]+)\s*(?:\(([^)]*)\))?',
    re.IGNORECASE
)

# Table-level clauses; a column named e.g. "key" or "checked_at" must not match
TABLE_CONSTRAINT_RE = re.compile(
    r'^(?:PRIMARY\s+KEY|FOREIGN\s+KEY|CONSTRAINT\s|UNIQUE\s*\(|UNIQUE\s+(?:KEY|INDEX)\b|CHECK\s*\(|EXCLUDE\s)',
    re.IGNORECASE
)

# Words that end the type portion of a column definition
COLUMN_KEYWORDS = {'NOT', 'NULL', 'PRIMARY', 'REFERENCES', 'DEFAULT', 'UNIQUE', 'CHECK',
                   'CONSTRAINT', 'GENERATED', 'AUTO_INCREMENT', 'AUTOINCREMENT', 'COLLATE',
                   'ON', 'IDENTITY'}


def strip_identifier(identifier: str) -> str:
    """Remove quoting and schema qualification: public."Users" -> Users"""
    identifier = identifier.strip().rstrip(';')
    parts = [part.strip('`"[]') for part in identifier.split('.')]
    return parts[-1] if parts else identifier


def split_identifiers(text: str) -> List[str]:
    return [strip_identifier(part) for part in text.split(',') if part.strip()]


class SchemaParser:
    """Parse DDL files and extract table metadata for data generation"""

    def __init__(self, logger=None):
        self.logger = logger or logging.getLogger(__name__)
        self.tables: Dict[str, Dict[str, Any]] = {}

    def parse_ddl_file(self, file_path: Union[str, Path]) -> List[Dict[str, Any]]:
        """Parse DDL file and return the raw schema"""
        try:
            with open(file_path, 'r', encoding='utf-8') as f:
                ddl_content = f.read()
        except OSError as e:
            self.logger.error(f"Error reading DDL file {file_path}: {e}")
            raise SchemaParsingError(f"Cannot read DDL file {file_path}: {e}") from e

        return self.parse_ddl_string(ddl_content)

    def parse_ddl_string(self, ddl_content: str) -> List[Dict[str, Any]]:
        """Parse DDL string; tables come back in declaration order"""
        self.tables = {}
        cleaned = sqlparse.format(ddl_content, strip_comments=True)

        for statement in sqlparse.parse(cleaned):
            if statement.get_type() == 'CREATE':
                self._parse_create_statement(str(statement))

        self._resolve_foreign_columns()
        return list(self.tables.values())

    def _parse_create_statement(self, sql: str):
        """Parse CREATE TABLE statement"""
        match = CREATE_TABLE_RE.match(sql)
        if not match:
            return

        table_name = strip_identifier(match.group(1))
        table_def = self._extract_table_definition(sql)
        if table_def is None:
            raise SchemaParsingError(f"No column list found for table {table_name}")

        columns = []
        table_constraints = []
        for part in self._smart_split(table_def, ','):
            if not part:
                continue
            if TABLE_CONSTRAINT_RE.match(part):
                table_constraints.append(part)
                continue
            column = self._parse_single_column(part)
            if column:
                columns.append(column)

        table_metadata = {'name': table_name, 'columns': columns}
        for constraint in table_constraints:
            self._apply_table_constraint(constraint, table_metadata)

        self.tables[table_name] = table_metadata
        self.logger.info(f"Parsed table: {table_name} with {len(columns)} columns")

    def _extract_table_definition(self, sql: str) -> Optional[str]:
        """Extract the column list between the outermost parentheses"""
        start = sql.find('(')
        end = sql.rfind(')')
        if start == -1 or end <= start:
            return None
        return sql[start + 1:end]

    def _parse_single_column(self, column_def: str) -> Optional[Dict[str, Any]]:
        """Parse single column definition"""
        parts = self._smart_split(column_def, ' ')
        if len(parts) < 2:
            return None

        column = {
            'name': strip_identifier(parts[0]),
            'type': None,
            'nullable': True,
            'default': None,
            'constraint': None,
            'foreign_table': None,
            'foreign_column': None
        }

        type_parts = []
        i = 1
        while i < len(parts) and parts[i].upper() not in COLUMN_KEYWORDS:
            type_parts.append(parts[i])
            i += 1
        column['type'] = ' '.join(type_parts) or 'text'

        is_primary = False
        while i < len(parts):
            word = parts[i].upper()
            following = parts[i + 1].upper() if i + 1 < len(parts) else ''

            if word == 'NOT' and following == 'NULL':
                column['nullable'] = False
                i += 1
            elif word == 'PRIMARY' and following == 'KEY':
                is_primary = True
                column['nullable'] = False
                i += 1
            elif word == 'DEFAULT' and following:
                default_parts = []
                i += 1
                while i < len(parts) and parts[i].upper() not in COLUMN_KEYWORDS:
                    default_parts.append(parts[i])
                    i += 1
                column['default'] = ' '.join(default_parts)
                continue
            elif word in ('AUTO_INCREMENT', 'AUTOINCREMENT'):
                column['default'] = column['default'] or 'autoincrement'
            elif word == 'IDENTITY':
                column['default'] = column['default'] or 'identity'
            elif word == 'REFERENCES':
                ref_match = REFERENCES_RE.search(' '.join(parts[i:]))
                if ref_match:
                    column['constraint'] = 'FOREIGN KEY'
                    column['foreign_table'] = strip_identifier(ref_match.group(1))
                    if ref_match.group(2):
                        column['foreign_column'] = split_identifiers(ref_match.group(2))[0]
            i += 1

        # A column both referencing and keyed is treated as a foreign key so it orders correctly
        if is_primary and column['constraint'] is None:
            column['constraint'] = 'PRIMARY KEY'

        return column

    def _apply_table_constraint(self, constraint: str, table_metadata: Dict[str, Any]):
        """Fold table-level PRIMARY KEY / FOREIGN KEY clauses into the columns"""
        columns = {col['name']: col for col in table_metadata['columns']}

        fk_match = TABLE_FK_RE.search(constraint)
        if fk_match:
            child_columns = split_identifiers(fk_match.group(1))
            parent_table = strip_identifier(fk_match.group(2))
            parent_columns = split_identifiers(fk_match.group(3)) if fk_match.group(3) else []
            for index, child in enumerate(child_columns):
                if child not in columns:
                    self.logger.warning(f"Foreign key on unknown column {table_metadata['name']}.{child}")
                    continue
                columns[child]['constraint'] = 'FOREIGN KEY'
                columns[child]['foreign_table'] = parent_table
                if index < len(parent_columns):
                    columns[child]['foreign_column'] = parent_columns[index]
            return

        pk_match = TABLE_PK_RE.search(constraint)
        if pk_match:
            for name in split_identifiers(pk_match.group(1)):
                if name in columns:
                    columns[name]['nullable'] = False
                    if columns[name]['constraint'] is None:
                        columns[name]['constraint'] = 'PRIMARY KEY'

    def _resolve_foreign_columns(self):
        """REFERENCES without a column list points at the parent's primary key"""
        for table in self.tables.values():
            for column in table['columns']:
                if column['constraint'] != 'FOREIGN KEY' or column['foreign_column']:
                    continue
                parent = self.tables.get(column['foreign_table'])
                if not parent:
                    self.logger.warning(f"Foreign key reference to undefined table: {column['foreign_table']}")
                    continue
                pk = next((c['name'] for c in parent['columns'] if c['constraint'] == 'PRIMARY KEY'), None)
                column['foreign_column'] = pk

    def _smart_split(self, text: str, delimiter: str) -> List[str]:
        """Split text by delimiter, respecting parentheses and quoted strings"""
        parts = []
        current_part = ""
        paren_count = 0
        quote = None

        for char in text:
            if quote:
                if char == quote:
                    quote = None
            elif char in ("'", '"'):
                quote = char
            elif char == '(':
                paren_count += 1
            elif char == ')':
                paren_count -= 1
            elif (char == delimiter or (delimiter == ' ' and char.isspace())) and paren_count == 0:
                if current_part.strip():
                    parts.append(current_part.strip())
                current_part = ""
                continue

            current_part += char

        if current_part.strip():
            parts.append(current_part.strip())

        return parts


class DDLSchemaSource:
    """Schema source backed by a DDL file or string instead of a live database"""

    def __init__(self, ddl: Optional[str] = None, path: Optional[Union[str, Path]] = None, logger=None):
        if ddl is None and path is None:
            raise SchemaParsingError("Either DDL text or a DDL file path is required")
        self.ddl = ddl
        self.path = path
        self.parser = SchemaParser(logger=logger)

    def get_schema(self) -> List[Dict[str, Any]]:
        if self.path is not None:
            return self.parser.parse_ddl_file(self.path)
        return self.parser.parse_ddl_string(self.ddl)
