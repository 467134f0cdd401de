import pytest
from fastapi.testclient import TestClient

from briefwriter.api.main import create_app
from briefwriter.core.errors import AccessDeniedError, ConflictError, NotFoundError
from briefwriter.models import AssignmentStatus

HEADERS = {'X-User-Id': 'user-1'}


@pytest.fixture
def client(service):
	return TestClient(create_app(service))


def test_service_runs_generation_in_background(service, registered):
	response = service.start_generation(registered, 'user-1')

	assert response == {'accepted': True, 'assignment_id': registered, 'status': 'GENERATING'}
	assignment = service.runner.wait(registered, timeout=30)
	assert assignment.status == AssignmentStatus.COMPLETED

	status = service.get_status(registered, 'user-1')
	assert status['status'] == 'COMPLETED'
	assert status['blocks_generated'] == 7
	assert status['has_plan'] is True
	assert status['tokens_used'] == assignment.total_tokens_used


def test_second_start_conflicts(service, registered):
	service.start_generation(registered, 'user-1')
	service.runner.wait(registered, timeout=30)

	with pytest.raises(ConflictError):
		service.start_generation(registered, 'user-1')


def test_ownership_enforced(service, registered):
	with pytest.raises(AccessDeniedError):
		service.get_status(registered, 'user-2')
	with pytest.raises(ConflictError):
		service.register_assignment(registered, 'user-2', {})


def test_unknown_assignment(service):
	with pytest.raises(NotFoundError):
		service.get_status('missing', 'user-1')


def test_regenerate_clears_content(service, registered):
	service.start_generation(registered, 'user-1')
	service.runner.wait(registered, timeout=30)

	assignment = service.regenerate(registered)

	assert assignment.status == AssignmentStatus.DRAFT
	assert service.get_content(registered, 'user-1') == {'plan': None, 'blocks': []}
	service.start_generation(registered, 'user-1')
	assert service.runner.wait(registered, timeout=30).status == AssignmentStatus.COMPLETED


def test_regenerate_recovers_orphaned_generation(service, registered):
	# GENERATING in storage with no run submitted in this process
	service.state_manager.begin(registered)

	assignment = service.regenerate(registered)

	assert assignment.status == AssignmentStatus.DRAFT
	service.start_generation(registered, 'user-1')
	assert service.runner.wait(registered, timeout=30).status == AssignmentStatus.COMPLETED


def test_regenerate_refuses_live_generation(service, registered, monkeypatch):
	service.state_manager.begin(registered)
	monkeypatch.setattr(service.runner, 'is_running', lambda assignment_id: True)

	with pytest.raises(ConflictError):
		service.regenerate(registered)
	assert service.state_manager.get(registered).status == AssignmentStatus.GENERATING


def test_api_register_generate_and_fetch(client, service, raw_brief):
	response = client.post('/api/assignments', json={'assignment_id': 'asg-0002', 'brief': raw_brief}, headers=HEADERS)
	assert response.status_code == 201
	assert response.json() == {'assignment_id': 'asg-0002', 'status': 'DRAFT'}

	response = client.post('/api/assignments/asg-0002/generate', headers=HEADERS)
	assert response.status_code == 202
	service.runner.wait('asg-0002', timeout=30)

	status = client.get('/api/assignments/asg-0002/status', headers=HEADERS).json()
	assert status['status'] == 'COMPLETED'

	content = client.get('/api/assignments/asg-0002/content', headers=HEADERS).json()
	assert [b['item_id'] for b in content['blocks']][0] == 'introduction'
	assert content['plan']['source'] == 'fallback'

	document = client.get('/api/assignments/asg-0002/document', headers=HEADERS)
	assert document.status_code == 200
	assert document.content[:2] == b'PK'


def test_api_error_mapping(client, registered):
	assert client.get('/api/assignments/missing/status', headers=HEADERS).status_code == 404

	forbidden = client.get(f'/api/assignments/{registered}/status', headers={'X-User-Id': 'user-2'})
	assert forbidden.status_code == 403
	assert forbidden.json()['error'] == 'AccessDeniedError'

	assert client.post(f'/api/assignments/{registered}/generate', headers=HEADERS).status_code == 202
	assert client.post(f'/api/assignments/{registered}/generate', headers=HEADERS).status_code == 409


def test_api_requires_user_header(client, registered):
	assert client.get(f'/api/assignments/{registered}/status').status_code == 422


def test_health(client):
	response = client.get('/api/health')

	assert response.status_code == 200
