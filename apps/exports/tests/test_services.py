"""
Export Service Tests

Table flattening, filenames and the three writers.
"""
import io
from datetime import date, datetime
from zoneinfo import ZoneInfo

import pytest
from openpyxl import load_workbook

from apps.exports.services import (
    ExportTable,
    agent_export_filename,
    build_agent_rows,
    build_registration_table,
    registration_export_filename,
    render_table,
    table_to_html,
    table_to_pdf,
    table_to_xlsx,
)

IST = ZoneInfo('Asia/Kolkata')

QUESTIONS = [
    {'id': 'q-crops', 'question_text': 'Crops grown', 'sort_order': 2},
    {'id': 'q-name', 'question_text': 'Full name', 'sort_order': 0},
    {'id': 'q-ward', 'question_text': 'Ward', 'sort_order': 1},
]

REGISTRATIONS = [
    {
        'id': 'r1',
        'created_at': datetime(2025, 1, 5, 10, 30, tzinfo=IST),
        'answers': {'q-name': 'Asha', 'q-ward': 4, 'q-crops': ['Paddy', 'Banana']},
    },
    {
        'id': 'r2',
        'created_at': datetime(2025, 1, 6, 15, 0, tzinfo=IST),
        'answers': {'q-name': 'Ravi', 'q-crops': []},
    },
]


class TestBuildRegistrationTable:

    def test_columns_follow_sort_order(self):
        table = build_registration_table(REGISTRATIONS, QUESTIONS)

        assert table.columns == ['#', 'Registration Date', 'Full name', 'Ward', 'Crops grown']
        assert table.sheet_name == 'Registrations'

    def test_rows(self):
        table = build_registration_table(REGISTRATIONS, QUESTIONS)

        assert table.rows == [
            [1, '5 Jan 2025, 10:30 AM', 'Asha', '4', 'Paddy, Banana'],
            [2, '6 Jan 2025, 03:00 PM', 'Ravi', '', ''],
        ]
        assert table.summary == ['Total Registrations: 2']

    def test_answers_as_json_string(self):
        table = build_registration_table(
            [{'id': 'r', 'created_at': None, 'answers': '{"q-name": "Meera"}'}],
            QUESTIONS,
        )

        assert table.rows == [[1, '', 'Meera', '', '']]

    def test_unparseable_answers_give_empty_cells(self):
        table = build_registration_table(
            [{'id': 'r', 'created_at': None, 'answers': 'not json'}],
            QUESTIONS,
        )

        assert table.rows == [[1, '', '', '', '']]

    def test_no_registrations(self):
        table = build_registration_table([], QUESTIONS)

        assert table.rows == []
        assert len(table.columns) == 5


class TestBuildAgentRows:

    def test_agent_rows(self):
        agents = [
            {
                'name': 'Lead', 'mobile': '900', 'role': 'team_leader', 'panchayath_name': 'Kodur',
                'ward': '2', 'customer_count': 40, 'is_active': True,
                'created_at': datetime(2025, 2, 1, 9, 0, tzinfo=IST),
            },
            {
                'name': 'Pro', 'mobile': '901', 'role': 'pro', 'panchayath_name': None,
                'panchayath_id': 'p2', 'ward': None, 'customer_count': 12, 'is_active': False,
                'created_at': None,
            },
            {
                'name': 'Pro 2', 'mobile': '902', 'role': 'pro', 'panchayath_id': 'gone',
                'customer_count': None, 'is_active': True, 'created_at': None,
            },
        ]

        table = build_agent_rows(agents, [{'id': 'p2', 'name': 'Ponmala'}])

        assert table.rows == [
            [1, 'Lead', '900', 'Team Leader', 'Kodur', '2', '', 'Active', '1 Feb 2025'],
            [2, 'Pro', '901', 'PRO', 'Ponmala', '', 12, 'Inactive', ''],
            [3, 'Pro 2', '902', 'PRO', '', '', 0, 'Active', ''],
        ]
        assert table.summary == ['Total Agents: 3', 'Total Customers: 12']
        assert table.columns[6] == 'Customer Count'


class TestFilenames:

    def test_registration_filename(self):
        name = registration_export_filename('Onam Fest 2024!', today=date(2025, 1, 5))

        assert name == 'Onam_Fest_2024__registrations_2025-01-05.xlsx'

    def test_registration_filename_truncates(self):
        name = registration_export_filename('x' * 80, 'pdf', today=date(2025, 1, 5))

        assert name == 'x' * 50 + '_registrations_2025-01-05.pdf'

    def test_agent_filename(self):
        assert agent_export_filename('html', date(2025, 3, 9)) == 'Pennyekart_Agents_2025-03-09.html'


class TestWriters:

    @pytest.fixture
    def table(self):
        return build_registration_table(REGISTRATIONS, QUESTIONS, title='Onam Fest')

    def test_xlsx(self, table):
        wb = load_workbook(io.BytesIO(table_to_xlsx(table)))
        ws = wb.active

        assert ws.title == 'Registrations'
        rows = list(ws.iter_rows(values_only=True))
        assert rows[0] == ('#', 'Registration Date', 'Full name', 'Ward', 'Crops grown')
        assert rows[1] == (1, '5 Jan 2025, 10:30 AM', 'Asha', '4', 'Paddy, Banana')
        assert len(rows) == 3
        assert ws['A1'].font.bold
        assert ws.column_dimensions['A'].width == 15
        assert ws.column_dimensions['B'].width == 17

    def test_pdf(self, table):
        content = table_to_pdf(table)

        assert content.startswith(b'%PDF')

    def test_pdf_without_rows(self):
        content = table_to_pdf(ExportTable(title='Empty', columns=['#']))

        assert content.startswith(b'%PDF')

    def test_html_escapes_and_prints(self):
        table = ExportTable(title='A & B', columns=['Name'], rows=[['<script>']], summary=['Total: 1'])

        html = table_to_html(table)

        assert html.startswith('<!DOCTYPE html>')
        assert 'onload="window.print()"' in html
        assert '&lt;script&gt;' in html
        assert '<script>' not in html
        assert '<title>A &amp; B</title>' in html
        assert 'Total: 1' in html

    def test_render_table_dispatch(self, table):
        assert render_table(table, 'html').startswith(b'<!DOCTYPE html>')
        assert render_table(table, 'pdf').startswith(b'%PDF')

    def test_render_table_rejects_unknown_format(self, table):
        with pytest.raises(ValueError):
            render_table(table, 'csv')
