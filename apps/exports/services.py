"""
Export Services

Flattens registrations and agents into rectangular tables and renders them
as XLSX, PDF or a print-ready HTML document.
"""
import io
import logging
from dataclasses import dataclass, field
from datetime import date

from django.utils import timezone
from django.utils.html import escape

from apps.core.constants import EXPORT, LEAF_AGENT_ROLE, ROLE_LABELS
from apps.core.utils import date_stamp, format_date, format_datetime, sanitize_filename
from apps.registrations.answers import answer_display, parse_answers

logger = logging.getLogger(__name__)

CONTENT_TYPES = {
    'xlsx': 'application/vnd.openxmlformats-officedocument.spreadsheetml.sheet',
    'pdf': 'application/pdf',
    'html': 'text/html; charset=utf-8',
}

AGENT_COLUMNS = ['#', 'Name', 'Mobile', 'Role', 'Panchayath', 'Ward', 'Customer Count', 'Status', 'Created At']


@dataclass
class ExportTable:
    """A header row plus data rows of equal width."""
    title: str
    columns: list[str]
    rows: list[list] = field(default_factory=list)
    sheet_name: str = 'Sheet1'
    summary: list[str] = field(default_factory=list)


# =============================================================================
# Table builders
# =============================================================================

def build_registration_table(registrations: list[dict], questions: list[dict], title: str = 'Registrations') -> ExportTable:
    """
    One row per registration: index, registration date, then one cell per
    question in ascending sort_order.

    Multi-valued answers are joined with ", ". Missing, null and empty
    answers become an empty cell.
    """
    ordered_questions = sorted(questions, key=lambda q: q.get('sort_order') or 0)
    columns = ['#', 'Registration Date'] + [q['question_text'] for q in ordered_questions]

    rows = []
    for index, registration in enumerate(registrations, start=1):
        answers = parse_answers(registration.get('answers'))
        row = [index, format_datetime(registration.get('created_at'))]
        for question in ordered_questions:
            row.append(answer_display(answers.get(question['id']), EXPORT['empty_cell']))
        rows.append(row)

    return ExportTable(
        title=title,
        columns=columns,
        rows=rows,
        sheet_name='Registrations',
        summary=[f'Total Registrations: {len(rows)}'],
    )


def build_agent_rows(agents: list[dict], panchayaths: list[dict] | None = None) -> ExportTable:
    """
    One row per agent.

    Panchayath resolves from the agent's own panchayath name, then the
    lookup list, then "". Customer Count is only filled for pro agents.
    """
    panchayath_map = {str(p['id']): p['name'] for p in panchayaths or []}

    rows = []
    total_customers = 0
    for index, agent in enumerate(agents, start=1):
        is_pro = agent.get('role') == LEAF_AGENT_ROLE
        if is_pro:
            total_customers += agent.get('customer_count') or 0

        panchayath_id = agent.get('panchayath_id')
        panchayath_name = (
            agent.get('panchayath_name')
            or (panchayath_map.get(str(panchayath_id)) if panchayath_id else None)
            or ''
        )

        rows.append([
            index,
            agent.get('name') or '',
            agent.get('mobile') or '',
            ROLE_LABELS.get(agent.get('role'), agent.get('role') or ''),
            panchayath_name,
            agent.get('ward') or '',
            (agent.get('customer_count') or 0) if is_pro else '',
            'Active' if agent.get('is_active') else 'Inactive',
            format_date(agent.get('created_at')),
        ])

    return ExportTable(
        title='Pennyekart Agents Report',
        columns=list(AGENT_COLUMNS),
        rows=rows,
        sheet_name='Agents',
        summary=[f'Total Agents: {len(rows)}', f'Total Customers: {total_customers}'],
    )


# =============================================================================
# Filenames
# =============================================================================

def registration_export_filename(program_name: str, fmt: str = 'xlsx', today: date | None = None) -> str:
    safe_name = sanitize_filename(program_name, EXPORT['filename_max_length'])
    return f'{safe_name}_registrations_{date_stamp(today)}.{fmt}'


def agent_export_filename(fmt: str = 'xlsx', today: date | None = None) -> str:
    return f'Pennyekart_Agents_{date_stamp(today)}.{fmt}'


# =============================================================================
# Writers
# =============================================================================

def table_to_xlsx(table: ExportTable) -> bytes:
    """Render the table as an XLSX workbook with one sheet."""
    from openpyxl import Workbook
    from openpyxl.styles import Font
    from openpyxl.utils import get_column_letter

    wb = Workbook()
    ws = wb.active
    ws.title = table.sheet_name

    ws.append(table.columns)
    for cell in ws[1]:
        cell.font = Font(bold=True)

    for row in table.rows:
        ws.append(row)

    min_width = EXPORT['min_column_width']
    for col_index, header in enumerate(table.columns, start=1):
        ws.column_dimensions[get_column_letter(col_index)].width = max(len(str(header)), min_width)

    output = io.BytesIO()
    wb.save(output)
    output.seek(0)
    return output.getvalue()


def table_to_pdf(table: ExportTable) -> bytes:
    """Render the table as a landscape PDF."""
    from reportlab.lib import colors
    from reportlab.lib.pagesizes import A4, landscape
    from reportlab.lib.styles import getSampleStyleSheet
    from reportlab.platypus import Paragraph, SimpleDocTemplate, Spacer, Table, TableStyle

    output = io.BytesIO()
    doc = SimpleDocTemplate(output, pagesize=landscape(A4))
    elements = []

    styles = getSampleStyleSheet()
    elements.append(Paragraph(escape(table.title), styles['Heading1']))
    elements.append(Paragraph(f'Generated on {format_datetime(timezone.now())}', styles['Normal']))
    for line in table.summary:
        elements.append(Paragraph(escape(line), styles['Normal']))
    elements.append(Spacer(1, 12))

    if not table.rows:
        elements.append(Paragraph("No data available", styles['Normal']))
    else:
        max_len = EXPORT["pdf_cell_max_length"]
        table_data = [table.columns]
        for row in table.rows:
            table_data.append([str(value)[:max_len] for value in row])

        pdf_table = Table(table_data, repeatRows=1)
        pdf_table.setStyle(TableStyle([
            ('BACKGROUND', (0, 0), (-1, 0), colors.HexColor('#f3f4f6')),
            ('TEXTCOLOR', (0, 0), (-1, 0), colors.black),
            ('ALIGN', (0, 0), (-1, -1), 'LEFT'),
            ('FONTNAME', (0, 0), (-1, 0), 'Helvetica-Bold'),
            ('FONTSIZE', (0, 0), (-1, 0), 9),
            ('BOTTOMPADDING', (0, 0), (-1, 0), 8),
            ('FONTNAME', (0, 1), (-1, -1), 'Helvetica'),
            ('FONTSIZE', (0, 1), (-1, -1), 8),
            ('ROWBACKGROUNDS', (0, 1), (-1, -1), [colors.white, colors.HexColor('#f9fafb')]),
            ('GRID', (0, 0), (-1, -1), 0.5, colors.HexColor('#d1d5db')),
        ]))
        elements.append(pdf_table)

    doc.build(elements)
    output.seek(0)
    return output.getvalue()


HTML_STYLE = """
    body { font-family: Arial, sans-serif; margin: 20px; font-size: 12px; color: #333; }
    h1 { font-size: 18px; margin-bottom: 4px; }
    .meta { color: #666; margin-bottom: 16px; font-size: 11px; }
    .summary { display: flex; gap: 24px; margin-bottom: 16px; }
    .summary-item { font-weight: bold; }
    table { border-collapse: collapse; width: 100%; }
    th { background: #f3f4f6; text-align: left; padding: 6px 8px; border: 1px solid #d1d5db; font-size: 11px; white-space: nowrap; }
    td { padding: 5px 8px; border: 1px solid #e5e7eb; font-size: 11px; }
    tr:nth-child(even) { background: #f9fafb; }
    @media print { body { margin: 10px; } }
"""


def table_to_html(table: ExportTable) -> str:
    """Render the table as a standalone, print-ready HTML document."""
    header_cells = ''.join(f'<th>{escape(column)}</th>' for column in table.columns)
    body_rows = ''.join(
        '<tr>' + ''.join(f'<td>{escape(str(value))}</td>' for value in row) + '</tr>'
        for row in table.rows
    )
    summary = ''.join(f'<span class="summary-item">{escape(line)}</span>' for line in table.summary)

    return f"""<!DOCTYPE html>
<html>
<head>
  <meta charset="utf-8">
  <title>{escape(table.title)}</title>
  <style>{HTML_STYLE}</style>
</head>
<body onload="window.print()">
  <h1>{escape(table.title)}</h1>
  <div class="meta">Generated on {escape(format_datetime(timezone.now()))}</div>
  <div class="summary">{summary}</div>
  <table>
    <thead><tr>{header_cells}</tr></thead>
    <tbody>{body_rows}</tbody>
  </table>
</body>
</html>"""


def render_table(table: ExportTable, fmt: str) -> bytes:
    """Render a table in the requested format (xlsx, pdf or html)."""
    if fmt == 'xlsx':
        return table_to_xlsx(table)
    if fmt == 'pdf':
        return table_to_pdf(table)
    if fmt == 'html':
        return table_to_html(table).encode('utf-8')
    raise ValueError(f'Unsupported export format: {fmt}')
