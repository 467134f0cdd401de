from typing import Any

from fastapi import APIRouter, Depends, Header, Request, Response, status
from pydantic import BaseModel, Field

from briefwriter.core.service import GenerationService
from briefwriter.export.docx_renderer import DocxRenderer
from briefwriter.utils.logger import logger

generation_router = APIRouter()

DOCX_MEDIA_TYPE = 'application/vnd.openxmlformats-officedocument.wordprocessingml.document'


class RegisterAssignmentRequest(BaseModel):
	assignment_id: str = Field(min_length=1)
	brief: dict[str, Any]


def get_service(request: Request) -> GenerationService:
	service = request.app.state.service
	if service is None:
		from briefwriter.core.factory import create_generation_service

		service = create_generation_service()
		request.app.state.service = service
	return service


@generation_router.post('/assignments', status_code=status.HTTP_201_CREATED)
def register_assignment(
	body: RegisterAssignmentRequest,
	x_user_id: str = Header(...),
	service: GenerationService = Depends(get_service),
):
	assignment = service.register_assignment(body.assignment_id, x_user_id, body.brief)
	return {'assignment_id': assignment.assignment_id, 'status': assignment.status.value}


@generation_router.post('/assignments/{assignment_id}/generate', status_code=status.HTTP_202_ACCEPTED)
def start_generation(
	assignment_id: str,
	x_user_id: str = Header(...),
	service: GenerationService = Depends(get_service),
):
	logger.info(f'Generation requested for {assignment_id} by {x_user_id}')
	return service.start_generation(assignment_id, x_user_id)


@generation_router.get('/assignments/{assignment_id}/status')
def get_status(
	assignment_id: str,
	x_user_id: str = Header(...),
	service: GenerationService = Depends(get_service),
):
	return service.get_status(assignment_id, x_user_id)


@generation_router.get('/assignments/{assignment_id}/content')
def get_content(
	assignment_id: str,
	x_user_id: str = Header(...),
	service: GenerationService = Depends(get_service),
):
	return service.get_content(assignment_id, x_user_id)


@generation_router.get('/assignments/{assignment_id}/document')
def get_document(
	assignment_id: str,
	x_user_id: str = Header(...),
	service: GenerationService = Depends(get_service),
):
	document = service.get_document(assignment_id, x_user_id)
	return Response(
		content=DocxRenderer().render(document),
		media_type=DOCX_MEDIA_TYPE,
		headers={'Content-Disposition': f'attachment; filename="{assignment_id}.docx"'},
	)


@generation_router.post('/admin/assignments/{assignment_id}/regenerate')
def regenerate(assignment_id: str, service: GenerationService = Depends(get_service)):
	assignment = service.regenerate(assignment_id)
	return {'assignment_id': assignment.assignment_id, 'status': assignment.status.value}
