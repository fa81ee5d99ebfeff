# tests/test_suggestions.py
"""
Tests for recommended counts and column option hints
"""
import pytest

from mockgen.core.suggestions import get_column_suggestions, get_recommended_count, suggest_configuration
from mockgen.input.schema_analyzer import ColumnMetadata, SchemaAnalyzer, TableMetadata


@pytest.mark.parametrize("table_name,expected", [
    ('user_roles', 5),
    ('order_status', 5),
    ('customers', 50),
    ('transactions', 200),
    ('event_log', 200),
    ('products', 100),
    ('reviews', 300),
    ('settings', 10),
])
def test_recommended_counts(table_name, expected):
    assert get_recommended_count(TableMetadata(name=table_name)) == expected


class TestColumnSuggestions:

    def test_numeric_columns(self):
        suggestions = get_column_suggestions([
            ColumnMetadata(name='unit_price', type='numeric(10,2)'),
            ColumnMetadata(name='age', type='integer'),
            ColumnMetadata(name='stock_quantity', type='integer'),
            ColumnMetadata(name='rank', type='integer'),
        ])
        assert suggestions['unit_price']['precision'] == 2
        assert suggestions['age'] == {'min': 18, 'max': 80, 'description': 'Age field'}
        assert suggestions['stock_quantity']['max'] == 100
        assert 'rank' not in suggestions

    def test_string_columns(self):
        suggestions = get_column_suggestions([
            ColumnMetadata(name='email', type='varchar(255)'),
            ColumnMetadata(name='phone', type='text'),
            ColumnMetadata(name='website', type='varchar'),
            ColumnMetadata(name='promo_code', type='varchar(20)'),
        ])
        assert suggestions['email']['pattern'] == 'email'
        assert suggestions['phone']['pattern'] == 'phone'
        assert suggestions['website']['pattern'] == 'url'
        assert suggestions['promo_code']['maxLength'] == 20

    def test_date_columns(self):
        suggestions = get_column_suggestions([
            ColumnMetadata(name='created_at', type='timestamp'),
            ColumnMetadata(name='date_of_birth', type='date'),
            ColumnMetadata(name='shipped_at', type='timestamp'),
        ])
        assert suggestions['created_at']['startDate'] == '2020-01-01'
        assert suggestions['date_of_birth']['endDate'] == '2005-12-31'
        assert 'shipped_at' not in suggestions


def test_suggest_configuration(blog_schema):
    graph = SchemaAnalyzer().analyze(blog_schema)
    suggestions = suggest_configuration(graph)

    assert suggestions['users']['recommended_count'] == 50
    assert suggestions['posts']['recommended_count'] == 100
    assert suggestions['posts']['dependencies'] == ['users']
    assert suggestions['users']['column_suggestions']['email']['pattern'] == 'email'
