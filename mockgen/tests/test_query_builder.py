# tests/test_query_builder.py
"""
Tests for SQL literal rendering and batched INSERT statements
"""
from datetime import date, datetime

import pytest

from mockgen.output.query_builder import (
    build_insert_query,
    quote_identifier,
    record_columns,
    render_literal,
)
from mockgen.utils.exceptions import QueryBuildError


class TestRenderLiteral:

    def test_scalars(self):
        assert render_literal(None) == 'NULL'
        assert render_literal(True) == 'true'
        assert render_literal(False) == 'false'
        assert render_literal(5) == '5'
        assert render_literal(12.5) == '12.5'
        assert render_literal("O'Brien") == "'O''Brien'"

    def test_non_finite_numbers_rejected(self):
        with pytest.raises(QueryBuildError):
            render_literal(float('nan'))

    def test_arrays_per_dialect(self):
        assert render_literal(['a', "b'c"]) == "'{\"a\",\"b''c\"}'"
        assert render_literal([1, 2], dialect='postgresql') == "'{1,2}'"
        assert render_literal([], dialect='postgresql') == "'{}'"
        assert render_literal([True, None]) == "'{true,NULL}'"
        assert render_literal([[1, 2], [3, 4]]) == "'{{1,2},{3,4}}'"
        assert render_literal(['a', 1], dialect='sqlite') == '\'["a", 1]\''

    def test_postgres_array_element_escaping(self):
        assert render_literal(['back\\slash', 'say "hi"']) == '\'{"back\\\\slash","say \\"hi\\""}\''

    def test_typed_postgres_arrays_are_untyped_literals(self):
        ids = ['c386bbc4-1f0e-4a8b-9d2c-3e5f6a7b8c9d', '7ed4d57b-2a1b-4c3d-8e9f-0a1b2c3d4e5f']
        assert render_literal(ids) == (
            "'{\"c386bbc4-1f0e-4a8b-9d2c-3e5f6a7b8c9d\",\"7ed4d57b-2a1b-4c3d-8e9f-0a1b2c3d4e5f\"}'"
        )
        assert render_literal([date(2023, 3, 18), date(2024, 1, 2)]) == "'{\"2023-03-18\",\"2024-01-02\"}'"
        assert render_literal(['2023-03-18']) == "'{\"2023-03-18\"}'"

    def test_dict_and_dates(self):
        assert render_literal({'k': "it's"}) == '\'{"k": "it\'\'s"}\''
        assert render_literal(date(2024, 2, 29)) == "'2024-02-29'"
        assert render_literal(datetime(2024, 1, 1, 8, 30)) == "'2024-01-01T08:30:00'"

    def test_identifier_quoting(self):
        assert quote_identifier('users') == '"users"'
        assert quote_identifier('we"ird') == '"we""ird"'


class TestBuildInsertQuery:

    def test_single_record_tuple(self):
        query = build_insert_query('people', [{'id': 5, 'name': "O'Brien", 'active': True, 'note': None}])
        assert query == (
            'INSERT INTO "people" ("id", "name", "active", "note") '
            "VALUES (5, 'O''Brien', true, NULL);"
        )

    def test_multiple_records_share_column_list(self):
        records = [{'a': 1, 'b': 'x'}, {'b': 'y', 'a': 2}, {'a': 3}]
        query = build_insert_query('t', records)
        assert query == 'INSERT INTO "t" ("a", "b") VALUES (1, \'x\'), (2, \'y\'), (3, NULL);'

    def test_explicit_columns(self):
        query = build_insert_query('t', [{'a': 1, 'b': 2}], columns=['b'])
        assert query == 'INSERT INTO "t" ("b") VALUES (2);'

    def test_empty_records(self):
        with pytest.raises(QueryBuildError):
            build_insert_query('t', [])

    def test_records_without_columns(self):
        with pytest.raises(QueryBuildError):
            build_insert_query('t', [{}, {}])

    def test_record_columns_first_seen_order(self):
        assert record_columns([{'b': 1}, {'a': 1, 'b': 2}, {'c': 3}]) == ['b', 'a', 'c']
