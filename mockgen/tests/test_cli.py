# tests/test_cli.py
"""
Tests for the command line interface
"""
import json

from click.testing import CliRunner

from mockgen.api.cli import cli
from mockgen.tests.conftest import count_rows

DDL = """
CREATE TABLE teams (id UUID PRIMARY KEY, name VARCHAR(60) NOT NULL);
CREATE TABLE players (
    id SERIAL PRIMARY KEY,
    team_id UUID NOT NULL REFERENCES teams(id),
    age INTEGER
);
"""


class TestCli:

    def setup_method(self):
        self.runner = CliRunner()

    def write_ddl(self, tmp_path):
        path = tmp_path / 'schema.sql'
        path.write_text(DDL)
        return str(path)

    def test_templates(self):
        result = self.runner.invoke(cli, ['templates'])
        assert result.exit_code == 0
        assert 'ecommerce' in result.output
        assert 'user_management' in result.output

    def test_analyze_ddl(self, tmp_path):
        result = self.runner.invoke(cli, ['analyze', '--ddl', self.write_ddl(tmp_path)])
        assert result.exit_code == 0
        assert 'teams -> players' in result.output

    def test_analyze_needs_source(self):
        result = self.runner.invoke(cli, ['analyze'])
        assert result.exit_code != 0
        assert '--database-url' in result.output

    def test_preview_json(self, tmp_path):
        result = self.runner.invoke(cli, ['preview', '--ddl', self.write_ddl(tmp_path), '--seed', '4', '--json'])
        assert result.exit_code == 0

        preview = json.loads(result.output)
        assert preview['summary'] == {'tables_processed': 2, 'total_records': 20}
        assert len(preview['preview']['teams']) == 3
        assert all('id' not in player for player in preview['preview']['players'])
        assert preview['queries'][0].startswith('INSERT INTO "teams"')

    def test_preview_with_config_file(self, tmp_path):
        config_path = tmp_path / 'config.json'
        config_path.write_text(json.dumps({'teams': {'count': 2}, 'players': {'count': 5}}))
        result = self.runner.invoke(cli, [
            'preview', '--ddl', self.write_ddl(tmp_path), '--config', str(config_path), '--json'
        ])
        assert result.exit_code == 0
        assert json.loads(result.output)['summary']['total_records'] == 7

    def test_preview_table_output(self, tmp_path):
        result = self.runner.invoke(cli, ['preview', '--ddl', self.write_ddl(tmp_path)])
        assert result.exit_code == 0
        assert 'Preview Summary' in result.output
        assert 'Foreign Key Pools' in result.output
        assert 'Available Keys' in result.output

    def test_invalid_config_file(self, tmp_path):
        config_path = tmp_path / 'config.json'
        config_path.write_text(json.dumps({'teams': {'count': -1}}))
        result = self.runner.invoke(cli, [
            'preview', '--ddl', self.write_ddl(tmp_path), '--config', str(config_path)
        ])
        assert result.exit_code == 1
        assert 'Error' in result.output

    def test_generate_into_sqlite(self, sqlite_url):
        result = self.runner.invoke(cli, ['generate', '--database-url', sqlite_url, '--seed', '2', '--yes'])
        assert result.exit_code == 0
        assert 'Successfully generated 20 records across 2 tables' in result.output
        assert count_rows(sqlite_url, 'books') == 10

    def test_generate_asks_for_confirmation(self, sqlite_url):
        result = self.runner.invoke(cli, ['generate', '--database-url', sqlite_url], input='n\n')
        assert result.exit_code != 0
        assert count_rows(sqlite_url, 'authors') == 0
