"""
Suggested record counts and column options for an analyzed schema
"""
from datetime import date
from typing import Any, Dict, List

from mockgen.input.schema_analyzer import SchemaGraph, TableMetadata

# Checked in order; first table-name category that matches wins
RECOMMENDED_COUNTS = [
    (('category', 'role', 'status', 'type'), 5),
    (('user', 'customer', 'account'), 50),
    (('order', 'transaction', 'log', 'event'), 200),
    (('post', 'article', 'product'), 100),
    (('comment', 'review', 'rating'), 300),
]
DEFAULT_RECOMMENDED_COUNT = 10


def get_recommended_count(table: TableMetadata) -> int:
    table_name = table.name.lower()
    for fragments, count in RECOMMENDED_COUNTS:
        if any(fragment in table_name for fragment in fragments):
            return count
    return DEFAULT_RECOMMENDED_COUNT


def _numeric_suggestion(column_name: str) -> Dict[str, Any]:
    if any(word in column_name for word in ('price', 'amount', 'cost')):
        return {'min': 1, 'max': 1000, 'precision': 2, 'description': 'Price/amount field'}
    if 'age' in column_name:
        return {'min': 18, 'max': 80, 'description': 'Age field'}
    if 'year' in column_name:
        return {'min': 2000, 'max': date.today().year, 'description': 'Year field'}
    if 'quantity' in column_name or 'count' in column_name:
        return {'min': 1, 'max': 100, 'description': 'Quantity/count field'}
    return {}


def _string_suggestion(column_name: str) -> Dict[str, Any]:
    if 'email' in column_name:
        return {'pattern': 'email', 'description': 'Email address field'}
    if 'phone' in column_name:
        return {'pattern': 'phone', 'description': 'Phone number field'}
    if 'url' in column_name or 'website' in column_name:
        return {'pattern': 'url', 'description': 'URL field'}
    if 'code' in column_name or 'id' in column_name:
        return {'pattern': 'alphanumeric', 'maxLength': 20, 'description': 'Code/ID field'}
    return {}


def _date_suggestion(column_name: str) -> Dict[str, Any]:
    if 'created' in column_name or 'registered' in column_name:
        return {
            'startDate': '2020-01-01',
            'endDate': date.today().isoformat(),
            'description': 'Creation/registration date'
        }
    if 'birth' in column_name or 'dob' in column_name:
        return {'startDate': '1950-01-01', 'endDate': '2005-12-31', 'description': 'Birth date'}
    return {}


def get_column_suggestions(columns: List) -> Dict[str, Dict[str, Any]]:
    """
    Option hints per column name. These are informational: the ``pattern``
    values here name a kind of value, they are not X/A generation patterns.
    """
    suggestions = {}
    for column in columns:
        column_name = column.name.lower()
        column_type = (column.type or '').lower()

        suggestion = {}
        if any(word in column_type for word in ('int', 'numeric', 'decimal')):
            suggestion = _numeric_suggestion(column_name) or suggestion
        if any(word in column_type for word in ('varchar', 'text', 'char')):
            suggestion = _string_suggestion(column_name) or suggestion
        if 'timestamp' in column_type or 'date' in column_type:
            suggestion = _date_suggestion(column_name) or suggestion

        if suggestion:
            suggestions[column.name] = suggestion
    return suggestions


def suggest_configuration(graph: SchemaGraph) -> Dict[str, Dict[str, Any]]:
    return {
        table.name: {
            'recommended_count': get_recommended_count(table),
            'column_suggestions': get_column_suggestions(table.columns),
            'dependencies': [dep.table for dep in table.dependencies]
        }
        for table in graph.tables.values()
    }
