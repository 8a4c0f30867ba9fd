"""
Export response helper tests.
"""
from apps.exports.services import ExportTable
from apps.exports.views import export_response


def make_table():
    return ExportTable(title='Agents', columns=['#', 'Name'], rows=[[1, 'Asha']])


class TestExportResponse:

    def test_xlsx_is_an_attachment(self):
        response = export_response(make_table(), 'xlsx', 'Pennyekart_Agents_2025-01-05.xlsx')

        assert response['Content-Type'] == 'application/vnd.openxmlformats-officedocument.spreadsheetml.sheet'
        assert response['Content-Disposition'] == 'attachment; filename="Pennyekart_Agents_2025-01-05.xlsx"'
        assert response.content[:2] == b'PK'

    def test_pdf_is_an_attachment(self):
        response = export_response(make_table(), 'pdf', 'report.pdf')

        assert response['Content-Type'] == 'application/pdf'
        assert response['Content-Disposition'].startswith('attachment;')
        assert response.content.startswith(b'%PDF')

    def test_html_opens_inline(self):
        response = export_response(make_table(), 'html', 'report.html')

        assert response['Content-Type'] == 'text/html; charset=utf-8'
        assert response['Content-Disposition'] == 'inline; filename="report.html"'
        assert b'Asha' in response.content
