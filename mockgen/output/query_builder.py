"""
Render generated records as batched INSERT statements
"""
import json
import math
import logging
from datetime import date, datetime, time
from decimal import Decimal
from typing import Any, Dict, List, Optional

from mockgen.utils.exceptions import QueryBuildError

logger = logging.getLogger(__name__)


def quote_identifier(name: str) -> str:
    return '"' + str(name).replace('"', '""') + '"'


def quote_string(value: str) -> str:
    return "'" + value.replace("'", "''") + "'"


def render_number(value) -> str:
    if isinstance(value, float) and (math.isnan(value) or math.isinf(value)):
        raise QueryBuildError(f"Cannot render non-finite number {value!r} as a SQL literal")
    return str(value)


def array_element(value: Any) -> str:
    """One element of a PostgreSQL array literal, before the literal is quoted"""
    if value is None:
        return 'NULL'
    if isinstance(value, bool):
        return 'true' if value else 'false'
    if isinstance(value, (int, float, Decimal)):
        return render_number(value)
    if isinstance(value, (list, tuple)):
        return '{' + ','.join(array_element(v) for v in value) + '}'
    if isinstance(value, dict):
        text = json.dumps(value, default=str)
    elif isinstance(value, (datetime, date, time)):
        text = value.isoformat()
    else:
        text = str(value)
    return '"' + text.replace('\\', '\\\\').replace('"', '\\"') + '"'


def render_array(values: List[Any], dialect: str) -> str:
    if dialect == 'postgresql':
        # Quoted '{...}' literal: the server casts it to the column's array type
        return quote_string(array_element(values))
    # No native arrays: store as JSON text
    return quote_string(json.dumps(values, default=str))


def render_literal(value: Any, dialect: str = 'postgresql') -> str:
    """SQL literal for one Python value"""
    if value is None:
        return 'NULL'
    # bool before int: bool is an int subclass
    if isinstance(value, bool):
        return 'true' if value else 'false'
    if isinstance(value, (int, float, Decimal)):
        return render_number(value)
    if isinstance(value, str):
        return quote_string(value)
    if isinstance(value, (list, tuple)):
        return render_array(list(value), dialect)
    if isinstance(value, dict):
        return quote_string(json.dumps(value, default=str))
    if isinstance(value, (datetime, date, time)):
        return quote_string(value.isoformat())
    return quote_string(str(value))


def record_columns(records: List[Dict[str, Any]]) -> List[str]:
    """Column names in first-seen order across all records"""
    columns = []
    seen = set()
    for record in records:
        for key in record:
            if key not in seen:
                seen.add(key)
                columns.append(key)
    return columns


def build_insert_query(table_name: str, records: List[Dict[str, Any]],
                       dialect: str = 'postgresql', columns: Optional[List[str]] = None) -> str:
    """
    One INSERT carrying every record as a value tuple:

        INSERT INTO "users" ("name", "active") VALUES ('Ann', true), ('Bob', NULL);
    """
    if not records:
        raise QueryBuildError(f"No records to insert into {table_name}")

    columns = columns or record_columns(records)
    if not columns:
        raise QueryBuildError(f"Records for {table_name} have no columns")

    rows = []
    for record in records:
        values = ', '.join(render_literal(record.get(column), dialect) for column in columns)
        rows.append(f"({values})")

    column_list = ', '.join(quote_identifier(column) for column in columns)
    query = f"INSERT INTO {quote_identifier(table_name)} ({column_list}) VALUES {', '.join(rows)};"
    logger.debug(f"Built INSERT for {table_name} with {len(records)} rows")
    return query
