import csv
import io
from decimal import Decimal

import openpyxl
import pytest
from django.core.files.uploadedfile import SimpleUploadedFile

from AssetManagement.models import AssetAuditLog, AssetDocument

pytestmark = pytest.mark.django_db

PNG_SIGNATURE = b'\x89PNG\r\n\x1a\n'


def test_excel_export(admin_client, asset):
    response = admin_client.get('/api/assets/?export=excel')

    assert response.status_code == 200
    assert response['Content-Type'] == 'application/vnd.openxmlformats-officedocument.spreadsheetml.sheet'
    assert response['Content-Disposition'].startswith('attachment; filename="')

    sheet = openpyxl.load_workbook(io.BytesIO(response.content)).active
    rows = list(sheet.iter_rows(values_only=True))
    assert rows[0][0] == 'Code'
    assert rows[1][0] == asset.code
    assert rows[1][2] == 'TI'


def test_csv_export_respects_filters(admin_client, company, asset, make_asset):
    make_asset(company, name='Cadeira', status='inactive')

    response = admin_client.get('/api/assets/?export=csv&status=active')

    assert response.status_code == 200
    assert response['Content-Type'].startswith('text/csv')
    rows = list(csv.reader(io.StringIO(response.content.decode('utf-8'))))
    assert len(rows) == 2
    assert rows[1][1] == 'Notebook'
    assert rows[1][14] == 'N/A'


def test_pdf_export(admin_client, asset):
    response = admin_client.get('/api/assets/?export=pdf')

    assert response.status_code == 200
    assert response['Content-Type'] == 'application/pdf'
    assert response.content.startswith(b'%PDF')


def test_unknown_export_format(admin_client, asset):
    assert admin_client.get('/api/assets/?export=docx').status_code == 400


def test_qr_code_png(admin_client, asset):
    response = admin_client.get(f'/api/assets/{asset.id}/qrcode/')

    assert response.status_code == 200
    assert response['Content-Type'] == 'image/png'
    assert response.content.startswith(PNG_SIGNATURE)


@pytest.mark.parametrize('body', [
    lambda code: {'payload': f'ASSET:{code}'},
    lambda code: {'payload': f'asset:{code.lower()}'},
    lambda code: {'code': code},
])
def test_scan_resolves_asset(admin_client, asset, body):
    response = admin_client.post('/api/assets/scan/', body(asset.code), format='json')

    assert response.status_code == 200
    assert response.data['data']['id'] == asset.id


def test_scan_unknown_or_foreign_code(admin_client, other_company, make_asset):
    foreign = make_asset(other_company)

    assert admin_client.post('/api/assets/scan/', {'payload': f'ASSET:{foreign.code}'}, format='json').status_code == 404
    assert admin_client.post('/api/assets/scan/', {}, format='json').status_code == 400


def test_map_only_lists_located_assets(admin_client, company, make_asset):
    located = make_asset(
        company, name='Caminhão', location_type='gps',
        latitude=Decimal('-22.906847'), longitude=Decimal('-43.172897')
    )
    make_asset(company, name='Sem posição')
    make_asset(
        company, name='Vendido', status='disposed',
        latitude=Decimal('1.000000'), longitude=Decimal('1.000000')
    )

    response = admin_client.get('/api/assets/map/')

    assert response.status_code == 200
    assert [row['id'] for row in response.data['data']] == [located.id]


def test_tracking_search(admin_client, company, make_asset):
    tagged = make_asset(company, name='Gerador', location_type='rfid', rfid_id='RF-0099')
    make_asset(company, name='Compressor', current_location='Galpão 2')

    by_tag = admin_client.get('/api/assets/tracking/search/?q=rf-0099')
    by_place = admin_client.get('/api/assets/tracking/search/?q=galpão')

    assert [row['id'] for row in by_tag.data['data']] == [tagged.id]
    assert [row['name'] for row in by_place.data['data']] == ['Compressor']
    assert admin_client.get('/api/assets/tracking/search/').status_code == 400


def test_document_upload_list_and_delete(admin_client, asset):
    upload = SimpleUploadedFile('nota.pdf', b'%PDF-1.4 fake', content_type='application/pdf')

    created = admin_client.post(
        f'/api/assets/{asset.id}/documents/',
        {'file': upload, 'document_type': 'invoice'},
        format='multipart'
    )

    assert created.status_code == 201
    data = created.data['data']
    assert data['name'] == 'nota.pdf'
    assert data['file_size'] == len(b'%PDF-1.4 fake')
    assert data['mime_type'] == 'application/pdf'

    log = AssetAuditLog.objects.get(asset=asset, action='document_uploaded')
    assert log.new_data['document_type'] == 'invoice'

    listed = admin_client.get(f'/api/assets/{asset.id}/documents/?document_type=invoice')
    assert [row['id'] for row in listed.data['data']] == [data['id']]

    deleted = admin_client.delete(f"/api/assets/{asset.id}/documents/{data['id']}/")
    assert deleted.status_code == 200
    assert not AssetDocument.objects.exists()


def test_document_rejects_disallowed_type(admin_client, asset):
    upload = SimpleUploadedFile('script.sh', b'echo hi', content_type='text/x-sh')

    response = admin_client.post(f'/api/assets/{asset.id}/documents/', {'file': upload}, format='multipart')

    assert response.status_code == 400
    assert 'file' in response.data['data']


def test_document_rejects_oversized_file(admin_client, asset, settings):
    settings.ASSET_DOCUMENT_MAX_BYTES = 10
    upload = SimpleUploadedFile('foto.png', b'x' * 11, content_type='image/png')

    response = admin_client.post(f'/api/assets/{asset.id}/documents/', {'file': upload}, format='multipart')

    assert response.status_code == 400
