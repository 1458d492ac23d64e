import json
from decimal import Decimal
from unittest import mock

import pytest
import requests

from AIAssistant.exceptions import LLMServiceError
from AIAssistant.models import SavedReport
from AIAssistant.services import llm_client
from AIAssistant.services.reports import aggregate_report_data, pick_report_kind
from MaintenanceControl.models import AssetMaintenance
from .conftest import client_for, make_user

pytestmark = pytest.mark.django_db

POST_PATH = 'AIAssistant.services.llm_client.requests.post'


def completion(content, status_code=200):
    response = mock.Mock()
    response.status_code = status_code
    response.text = content
    response.json.return_value = {'choices': [{'message': {'content': content}}]}
    if status_code >= 400:
        response.raise_for_status.side_effect = requests.exceptions.HTTPError(response=response)
    else:
        response.raise_for_status.return_value = None
    return response


def test_client_sends_bearer_and_returns_content(settings):
    settings.OPENAI_API_URL = 'https://llm.example.test/v1/chat/completions'
    with mock.patch(POST_PATH, return_value=completion('olá')) as post:
        assert llm_client.chat_completion('sys', 'user', max_tokens=10) == 'olá'

    args, kwargs = post.call_args
    assert args[0] == 'https://llm.example.test/v1/chat/completions'
    assert kwargs['headers']['Authorization'] == 'Bearer test-key'
    assert kwargs['json']['messages'][0] == {'role': 'system', 'content': 'sys'}
    assert kwargs['json']['max_tokens'] == 10
    assert kwargs['timeout'] == settings.OPENAI_TIMEOUT


@pytest.mark.parametrize('side_effect', [
    requests.exceptions.ConnectionError('down'),
    requests.exceptions.Timeout('slow'),
])
def test_client_wraps_transport_errors(side_effect):
    with mock.patch(POST_PATH, side_effect=side_effect):
        with pytest.raises(LLMServiceError):
            llm_client.chat_completion('sys', 'user')


def test_client_wraps_http_and_body_errors():
    with mock.patch(POST_PATH, return_value=completion('nope', status_code=503)):
        with pytest.raises(LLMServiceError, match='503'):
            llm_client.chat_completion('sys', 'user')

    broken = completion('')
    broken.json.return_value = {'choices': []}
    with mock.patch(POST_PATH, return_value=broken):
        with pytest.raises(LLMServiceError):
            llm_client.chat_completion('sys', 'user')


def test_client_requires_api_key(settings):
    settings.OPENAI_API_KEY = ''
    with mock.patch(POST_PATH) as post:
        with pytest.raises(LLMServiceError):
            llm_client.chat_completion('sys', 'user')
    post.assert_not_called()


@pytest.mark.parametrize('content,expected', [
    ('{"a": 1}', {'a': 1}),
    ('```json\n{"a": 1}\n```', {'a': 1}),
    ('```\n{"a": 1}\n```', {'a': 1}),
    ('not json', None),
    ('[1, 2]', None),
    ('', None),
])
def test_parse_json_content(content, expected):
    assert llm_client.parse_json_content(content) == expected


def test_asset_analysis(admin_client):
    answer = {
        'categoria': 'TI', 'vidaUtil': 5, 'valorResidualPercentual': 10,
        'tipoManutencao': 'preventiva', 'intervaloManutencaoMeses': 12, 'justificativa': 'Notebook corporativo'
    }
    with mock.patch(POST_PATH, return_value=completion(json.dumps(answer))) as post:
        response = admin_client.post('/api/ai/asset-analysis/', {
            'assetName': 'Notebook Dell', 'description': 'i7, 16GB'
        }, format='json')

    assert response.status_code == 200
    assert response.data['data'] == answer
    prompt = post.call_args.kwargs['json']['messages'][1]['content']
    assert 'Notebook Dell' in prompt
    assert 'Descrição: i7, 16GB' in prompt


def test_asset_analysis_falls_back_on_unparseable_answer(admin_client):
    with mock.patch(POST_PATH, return_value=completion('Desculpe, não sei.')):
        response = admin_client.post('/api/ai/asset-analysis/', {'assetName': 'Coisa'}, format='json')

    assert response.status_code == 200
    assert response.data['data']['categoria'] == 'Geral'
    assert response.data['data']['vidaUtil'] == 5
    assert response.data['data']['valorResidualPercentual'] == 10


def test_asset_analysis_reports_unavailable_service(admin_client):
    with mock.patch(POST_PATH, side_effect=requests.exceptions.ConnectionError('down')):
        response = admin_client.post('/api/ai/asset-analysis/', {'assetName': 'Coisa'}, format='json')

    assert response.status_code == 502
    assert response.data['data'] is None


def test_asset_analysis_requires_name(admin_client):
    with mock.patch(POST_PATH) as post:
        response = admin_client.post('/api/ai/asset-analysis/', {'assetName': '  '}, format='json')

    assert response.status_code == 400
    post.assert_not_called()


def test_category_suggestion_uses_company_categories(admin_client, company):
    with mock.patch(POST_PATH, return_value=completion('{"categoria": "veículos", "vidaUtil": "8"}')) as post:
        response = admin_client.post('/api/ai/category-suggestion/', {'assetName': 'Caminhão Volvo'}, format='json')

    assert response.status_code == 200
    assert response.data['data']['categoria'] == 'Veículos'
    assert response.data['data']['vidaUtil'] == 8
    prompt = post.call_args.kwargs['json']['messages'][1]['content']
    assert 'Ferramentas, Maquinário, Mobiliário, TI, Veículos' in prompt


def test_category_suggestion_outside_list_falls_back(admin_client):
    with mock.patch(POST_PATH, return_value=completion('{"categoria": "Aeronaves", "vidaUtil": -3}')):
        response = admin_client.post('/api/ai/category-suggestion/', {
            'assetName': 'Drone', 'categories': ['Eletrônicos', 'Outros']
        }, format='json')

    assert response.data['data']['categoria'] == 'Eletrônicos'
    assert response.data['data']['vidaUtil'] == 5


def test_pick_report_kind():
    assert pick_report_kind('Valor por CATEGORIA') == 'category'
    assert pick_report_kind('custos de manutenção do ano') == 'maintenance'
    assert pick_report_kind('maintenance costs') == 'maintenance'
    assert pick_report_kind('ativos por situação') == 'status'


def test_aggregate_report_data(company, category, asset, make_asset):
    make_asset(company, purchase_value=Decimal('500.50'), status='inactive')
    make_asset(company, category=category, purchase_value=Decimal('1.25'), is_active=False)
    AssetMaintenance.objects.create(asset=asset, description='x', scheduled_date='2026-01-01', cost=Decimal('80'))
    AssetMaintenance.objects.create(
        asset=asset, description='y', scheduled_date='2026-01-02', cost=Decimal('20'), maintenance_type='corretiva'
    )

    by_category = {row['name']: row for row in aggregate_report_data(company, 'category')}
    assert by_category['TI'] == {'name': 'TI', 'value': '10000.00', 'total': 1}
    assert by_category['Sem categoria']['value'] == '500.50'

    by_status = {row['name']: row['total'] for row in aggregate_report_data(company, 'status')}
    assert by_status == {'active': 1, 'inactive': 1}

    by_type = {row['name']: row['value'] for row in aggregate_report_data(company, 'maintenance')}
    assert by_type == {'preventiva': '80.00', 'corretiva': '20.00'}


def test_report_generator_with_insights(admin_client, asset):
    answer = '{"title": "Ativos por Categoria", "insights": ["TI concentra o valor"]}'
    with mock.patch(POST_PATH, return_value=completion(answer)):
        response = admin_client.post('/api/ai/report-generator/', {'prompt': 'Valor por categoria'}, format='json')

    assert response.status_code == 200
    data = response.data['data']
    assert data['kind'] == 'category'
    assert data['title'] == 'Ativos por Categoria'
    assert data['insights'] == ['TI concentra o valor']
    assert data['data'] == [{'name': 'TI', 'value': '10000.00', 'total': 1}]


def test_report_generator_survives_llm_failure(admin_client, asset):
    with mock.patch(POST_PATH, side_effect=requests.exceptions.ConnectionError('down')):
        response = admin_client.post('/api/ai/report-generator/', {'prompt': 'situação dos ativos'}, format='json')

    assert response.status_code == 200
    assert response.data['data']['title'] == 'Relatório de Ativos'
    assert response.data['data']['insights'] == ['Dados processados com sucesso']
    assert response.data['data']['data'] == [{'name': 'active', 'value': '10000.00', 'total': 1}]


def test_saved_reports_belong_to_their_owner(admin_client, company, admin_user):
    created = admin_client.post('/api/ai/saved-reports/', {
        'name': 'Mensal', 'prompt': 'Valor por categoria', 'parameters': {'period': 'month'}
    }, format='json')
    assert created.status_code == 201
    report_id = created.data['data']['id']
    assert SavedReport.objects.get(id=report_id).user_id == admin_user.id

    colleague = client_for(make_user(company, 'colleague@acme.test'))
    assert colleague.get('/api/ai/saved-reports/').data['data'] == []
    assert colleague.get(f'/api/ai/saved-reports/{report_id}/').status_code == 404
    assert colleague.delete(f'/api/ai/saved-reports/{report_id}/').status_code == 404

    updated = admin_client.put(f'/api/ai/saved-reports/{report_id}/', {'name': 'Mensal v2'}, format='json')
    assert updated.data['data']['name'] == 'Mensal v2'

    assert admin_client.delete(f'/api/ai/saved-reports/{report_id}/').status_code == 200
    assert not SavedReport.objects.exists()


def test_saved_report_parameters_must_be_object(admin_client):
    response = admin_client.post('/api/ai/saved-reports/', {
        'name': 'Ruim', 'prompt': 'x', 'parameters': [1, 2]
    }, format='json')

    assert response.status_code == 400
    assert 'parameters' in response.data['data']
