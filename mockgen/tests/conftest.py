# tests/conftest.py
"""
Shared fixtures: raw schemas, a recording fake handler and sqlite databases
"""
import pytest
from sqlalchemy import create_engine, text

from mockgen.db_handler import DatabaseHandler
from mockgen.utils.exceptions import ExecutionError, SchemaFetchError


def column(name, type_, nullable=False, default=None, constraint=None,
           foreign_table=None, foreign_column=None):
    return {
        'name': name,
        'type': type_,
        'nullable': nullable,
        'default': default,
        'constraint': constraint,
        'foreign_table': foreign_table,
        'foreign_column': foreign_column
    }


BLOG_SCHEMA = [
    {
        'name': 'posts',
        'columns': [
            column('id', 'integer', default="nextval('posts_id_seq'::regclass)", constraint='PRIMARY KEY'),
            column('user_id', 'integer', constraint='FOREIGN KEY', foreign_table='users', foreign_column='id'),
            column('title', 'character varying(200)'),
            column('tags', 'text[]', nullable=True),
            column('published_at', 'timestamp without time zone', nullable=True),
        ]
    },
    {
        'name': 'users',
        'columns': [
            column('id', 'uuid', constraint='PRIMARY KEY'),
            column('email', 'character varying(100)'),
            column('first_name', 'character varying(50)'),
            column('age', 'integer', nullable=True),
            column('is_active', 'boolean'),
        ]
    },
]


class FakeHandler(DatabaseHandler):
    """Handler returning a fixed schema and recording every executed statement"""

    def __init__(self, schema=None, fail_tables=(), schema_error=None, dialect='postgresql'):
        self.schema = schema if schema is not None else []
        self.fail_tables = set(fail_tables)
        self.schema_error = schema_error
        self.dialect = dialect
        self.statements = []
        self.closed = False

    def get_schema(self):
        if self.schema_error:
            raise SchemaFetchError(self.schema_error)
        return self.schema

    def execute(self, statement):
        self.statements.append(statement)
        for table in self.fail_tables:
            if statement.startswith(f'INSERT INTO "{table}"'):
                raise ExecutionError(f'relation "{table}" violates a constraint')
        return {'rows': []}

    def close(self):
        self.closed = True


@pytest.fixture
def blog_schema():
    return [dict(table, columns=[dict(col) for col in table['columns']]) for table in BLOG_SCHEMA]


@pytest.fixture
def fake_handler(blog_schema):
    return FakeHandler(schema=blog_schema)


SQLITE_DDL = [
    """
    CREATE TABLE authors (
        id INTEGER PRIMARY KEY,
        name VARCHAR(80) NOT NULL,
        email VARCHAR(120)
    )
    """,
    """
    CREATE TABLE books (
        id INTEGER PRIMARY KEY,
        author_id INTEGER NOT NULL REFERENCES authors(id),
        title VARCHAR(200) NOT NULL,
        price NUMERIC(10, 2)
    )
    """,
]


@pytest.fixture
def sqlite_url(tmp_path):
    """File-backed sqlite database with an authors/books schema"""
    url = f"sqlite:///{tmp_path / 'mock.db'}"
    engine = create_engine(url)
    with engine.begin() as conn:
        for ddl in SQLITE_DDL:
            conn.execute(text(ddl))
    engine.dispose()
    return url


def count_rows(url, table):
    engine = create_engine(url)
    try:
        with engine.connect() as conn:
            return conn.execute(text(f'SELECT COUNT(*) FROM "{table}"')).scalar()
    finally:
        engine.dispose()
