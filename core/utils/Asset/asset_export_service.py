import csv
from io import BytesIO

import openpyxl
from django.http import HttpResponse
from django.utils import timezone
from openpyxl.styles import PatternFill, Font, Alignment
from reportlab.lib.pagesizes import A4, landscape
from reportlab.lib.units import cm
from reportlab.pdfgen import canvas

from AssetManagement.depreciation import calculate_book_value, calculate_depreciation

EXPORT_HEADERS = [
    "Code", "Name", "Category", "Department", "Unit", "Serial Number", "Status",
    "Purchase Date", "Purchase Value", "Residual Value", "Useful Life (years)",
    "Accumulated Depreciation", "Book Value", "Location", "Responsible"
]

EXPORT_ROW_LIMIT = 10000

EXPORT_FIELDS = [
    'id', 'code', 'name', 'serial_number', 'status',
    'purchase_date', 'purchase_value', 'residual_value', 'useful_life_years',
    'current_location', 'category__name', 'department__name', 'unit__name',
    'assigned_to__email', 'assigned_to__own_user_profile__full_name',
]


def to_export_value(val):
    """Convert a value to an export-friendly value"""
    if val is None:
        return "N/A"
    if hasattr(val, 'strftime'):
        return val.strftime('%Y-%m-%d %H:%M:%S') if hasattr(val, 'hour') else val.strftime('%Y-%m-%d')
    if not isinstance(val, (str, int, float, bool)):
        return str(val)
    return val


def build_asset_rows(assets_queryset, as_of=None):
    """
    One list per asset, in EXPORT_HEADERS order. Uses .values() so no model
    instances are built; depreciation comes from the shared calculator.
    """
    rows = []
    for asset in assets_queryset.values(*EXPORT_FIELDS)[:EXPORT_ROW_LIMIT]:
        depreciation = calculate_depreciation(
            asset['purchase_value'], asset['residual_value'],
            asset['useful_life_years'], asset['purchase_date'], as_of
        )
        book_value = calculate_book_value(
            asset['purchase_value'], asset['residual_value'],
            asset['useful_life_years'], asset['purchase_date'], as_of
        )
        responsible = asset['assigned_to__own_user_profile__full_name'] or asset['assigned_to__email']
        rows.append([
            to_export_value(asset['code']),
            to_export_value(asset['name']),
            to_export_value(asset['category__name']),
            to_export_value(asset['department__name']),
            to_export_value(asset['unit__name']),
            to_export_value(asset['serial_number']),
            to_export_value(asset['status']),
            to_export_value(asset['purchase_date']),
            to_export_value(asset['purchase_value']),
            to_export_value(asset['residual_value']),
            to_export_value(asset['useful_life_years']),
            to_export_value(depreciation),
            to_export_value(book_value),
            to_export_value(asset['current_location']),
            to_export_value(responsible),
        ])
    return rows


class AssetExportService:

    @staticmethod
    def filename(extension):
        return f"assets_{timezone.now().strftime('%Y%m%d_%H%M%S')}.{extension}"

    @staticmethod
    def generate_excel(assets_queryset):
        """
        Generate Excel file for assets
        """
        wb = openpyxl.Workbook()
        ws = wb.active
        ws.title = "Assets"

        header_fill = PatternFill(start_color="366092", end_color="366092", fill_type="solid")
        header_font = Font(bold=True, color="FFFFFF")

        for col, head in enumerate(EXPORT_HEADERS, 1):
            c = ws.cell(row=1, column=col, value=head)
            c.fill = header_fill
            c.font = header_font
            c.alignment = Alignment(horizontal="center")

        # Monetary columns stay strings ("1234.56") to keep exact cents
        for i, row in enumerate(build_asset_rows(assets_queryset), 2):
            for col, val in enumerate(row, 1):
                ws.cell(row=i, column=col).value = val

        # Auto width - first 100 rows are enough to size the columns
        for col in ws.columns:
            letter = col[0].column_letter
            max_len = max(len(str(cell.value)) for cell in col[:100])
            ws.column_dimensions[letter].width = min(max_len + 2, 50)

        output = BytesIO()
        wb.save(output)
        output.seek(0)

        response = HttpResponse(
            output.getvalue(),
            content_type="application/vnd.openxmlformats-officedocument.spreadsheetml.sheet"
        )
        response["Content-Disposition"] = f'attachment; filename="{AssetExportService.filename("xlsx")}"'
        return response

    @staticmethod
    def generate_csv(assets_queryset):
        response = HttpResponse(content_type='text/csv; charset=utf-8')
        response['Content-Disposition'] = f'attachment; filename="{AssetExportService.filename("csv")}"'

        writer = csv.writer(response)
        writer.writerow(EXPORT_HEADERS)
        for row in build_asset_rows(assets_queryset):
            writer.writerow(row)
        return response

    @staticmethod
    def generate_pdf(assets_queryset, title="Asset Report"):
        """
        Landscape A4, one line per asset, new page when the current one is full
        """
        buf = BytesIO()
        c = canvas.Canvas(buf, pagesize=landscape(A4))
        width, height = landscape(A4)

        def page_header(y):
            c.setFont("Helvetica-Bold", 14)
            c.drawString(1.5 * cm, y, title)
            c.setFont("Helvetica", 8)
            c.drawRightString(width - 1.5 * cm, y, timezone.now().strftime('%Y-%m-%d %H:%M'))
            y -= 0.8 * cm
            c.setFont("Helvetica-Bold", 8)
            c.drawString(1.5 * cm, y, "Code | Name | Category | Status | Purchase Date | Purchase Value | Book Value | Location")
            c.setFont("Helvetica", 8)
            return y - 0.6 * cm

        y = page_header(height - 1.5 * cm)
        rows = build_asset_rows(assets_queryset)
        for r in rows:
            line = f"{r[0]} | {r[1]} | {r[2]} | {r[6]} | {r[7]} | {r[8]} | {r[12]} | {r[13]}"
            c.drawString(1.5 * cm, y, line[:180])
            y -= 0.5 * cm
            if y < 1.5 * cm:
                c.showPage()
                y = page_header(height - 1.5 * cm)

        c.setFont("Helvetica-Bold", 9)
        c.drawString(1.5 * cm, max(y - 0.3 * cm, 1 * cm), f"Total assets: {len(rows)}")
        c.save()

        response = HttpResponse(buf.getvalue(), content_type='application/pdf')
        buf.close()
        response['Content-Disposition'] = f'attachment; filename="{AssetExportService.filename("pdf")}"'
        return response
