"""
Closed set of column base types understood by the generators, plus the
classifier that maps a declared SQL type string onto it.
"""
import re
from enum import Enum
from typing import NamedTuple, Optional


class ColumnType(str, Enum):
    INTEGER = "integer"
    BIGINT = "bigint"
    SMALLINT = "smallint"
    DECIMAL = "decimal"
    BOOLEAN = "boolean"
    UUID = "uuid"
    DATE = "date"
    TIME = "time"
    TIMETZ = "timetz"
    TIMESTAMP = "timestamp"
    TIMESTAMPTZ = "timestamptz"
    JSON = "json"
    VARCHAR = "varchar"
    TEXT = "text"
    CHAR = "char"
    UNKNOWN = "unknown"


INTEGER_TYPES = (ColumnType.INTEGER, ColumnType.BIGINT, ColumnType.SMALLINT)
STRING_TYPES = (ColumnType.VARCHAR, ColumnType.TEXT, ColumnType.CHAR)

# Lower-cased declared type -> base type
TYPE_ALIASES = {
    'integer': ColumnType.INTEGER,
    'int': ColumnType.INTEGER,
    'int4': ColumnType.INTEGER,
    'mediumint': ColumnType.INTEGER,
    'serial': ColumnType.INTEGER,
    'serial4': ColumnType.INTEGER,
    'bigint': ColumnType.BIGINT,
    'int8': ColumnType.BIGINT,
    'bigserial': ColumnType.BIGINT,
    'serial8': ColumnType.BIGINT,
    'smallint': ColumnType.SMALLINT,
    'int2': ColumnType.SMALLINT,
    'smallserial': ColumnType.SMALLINT,
    'serial2': ColumnType.SMALLINT,
    'decimal': ColumnType.DECIMAL,
    'numeric': ColumnType.DECIMAL,
    'real': ColumnType.DECIMAL,
    'float': ColumnType.DECIMAL,
    'float4': ColumnType.DECIMAL,
    'float8': ColumnType.DECIMAL,
    'double': ColumnType.DECIMAL,
    'double precision': ColumnType.DECIMAL,
    'boolean': ColumnType.BOOLEAN,
    'bool': ColumnType.BOOLEAN,
    'uuid': ColumnType.UUID,
    'date': ColumnType.DATE,
    'time': ColumnType.TIME,
    'time without time zone': ColumnType.TIME,
    'time with time zone': ColumnType.TIMETZ,
    'timetz': ColumnType.TIMETZ,
    'timestamp': ColumnType.TIMESTAMP,
    'timestamp without time zone': ColumnType.TIMESTAMP,
    'datetime': ColumnType.TIMESTAMP,
    'timestamp with time zone': ColumnType.TIMESTAMPTZ,
    'timestamptz': ColumnType.TIMESTAMPTZ,
    'json': ColumnType.JSON,
    'jsonb': ColumnType.JSON,
    'character varying': ColumnType.VARCHAR,
    'varchar': ColumnType.VARCHAR,
    'nvarchar': ColumnType.VARCHAR,
    'string': ColumnType.VARCHAR,
    'text': ColumnType.TEXT,
    'char': ColumnType.CHAR,
    'character': ColumnType.CHAR,
    'nchar': ColumnType.CHAR,
    'bpchar': ColumnType.CHAR,
}

SERIAL_TYPES = {'serial', 'serial2', 'serial4', 'serial8', 'smallserial', 'bigserial'}

_ARGS_RE = re.compile(r'\(([^)]*)\)')
_SPACES_RE = re.compile(r'\s+')


class ColumnTypeInfo(NamedTuple):
    base: ColumnType
    is_array: bool
    name: str
    length: Optional[int] = None


def normalize_type_name(type_string: Optional[str]) -> str:
    """Lower-case, drop length/precision arguments and collapse whitespace"""
    name = _ARGS_RE.sub('', (type_string or '').lower())
    return _SPACES_RE.sub(' ', name).strip()


def classify(type_string: Optional[str]) -> ColumnTypeInfo:
    """Classify a declared column type such as 'VARCHAR(50)' or 'integer[]'"""
    raw = (type_string or '').strip()
    length = None
    match = _ARGS_RE.search(raw)
    if match and match.group(1).strip().isdigit():
        length = int(match.group(1).strip())

    name = normalize_type_name(raw)
    is_array = False
    if name.endswith('[]'):
        is_array = True
        name = name.rstrip('[]').strip()
    elif name == 'array':
        is_array = True
        name = ''

    base = TYPE_ALIASES.get(name, ColumnType.UNKNOWN)
    # Numeric precision is not a length
    if base not in STRING_TYPES:
        length = None
    return ColumnTypeInfo(base=base, is_array=is_array, name=name, length=length)


def is_serial_type(type_string: Optional[str]) -> bool:
    return normalize_type_name(type_string) in SERIAL_TYPES
