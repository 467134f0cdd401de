import logging
from dataclasses import asdict
from typing import Any

from briefwriter.core.errors import AccessDeniedError
from briefwriter.core.runner import GenerationRunner
from briefwriter.core.state_manager import StateManager
from briefwriter.export.assembler import assemble
from briefwriter.models import Assignment, Document
from briefwriter.storage.blocks import BlockStore
from briefwriter.storage.helpers import to_jsonable
from briefwriter.storage.plans import PlanStore
from briefwriter.storage.snapshot import FileSnapshotProvider

logger = logging.getLogger(__name__)


class GenerationService:
	def __init__(
		self,
		state_manager: StateManager,
		snapshot_provider: FileSnapshotProvider,
		plan_store: PlanStore,
		block_store: BlockStore,
		runner: GenerationRunner,
	):
		self.state_manager = state_manager
		self.snapshot_provider = snapshot_provider
		self.plan_store = plan_store
		self.block_store = block_store
		self.runner = runner

	def register_assignment(self, assignment_id: str, user_id: str, brief: dict[str, Any]) -> Assignment:
		assignment = self.state_manager.create(assignment_id, user_id)
		self.snapshot_provider.save_brief(assignment_id, brief)
		return assignment

	def start_generation(self, assignment_id: str, user_id: str) -> dict[str, Any]:
		self._owned(assignment_id, user_id)
		self.runner.submit(assignment_id)
		logger.info(f'Generation accepted for {assignment_id}')
		return {'accepted': True, 'assignment_id': assignment_id, 'status': 'GENERATING'}

	def get_status(self, assignment_id: str, user_id: str) -> dict[str, Any]:
		assignment = self._owned(assignment_id, user_id)
		status = {
			'assignment_id': assignment_id,
			'status': assignment.status.value,
			'tokens_used': assignment.total_tokens_used,
			'blocks_generated': self.block_store.count(assignment_id),
			'total_ai_calls': assignment.total_ai_calls,
			'duration_ms': assignment.duration_ms,
			'has_plan': self.plan_store.exists(assignment_id),
		}
		if assignment.error:
			status['error'] = assignment.error
		return status

	def get_content(self, assignment_id: str, user_id: str) -> dict[str, Any]:
		self._owned(assignment_id, user_id)
		plan = self.plan_store.load(assignment_id)
		blocks = self.block_store.list_blocks(assignment_id)
		return {
			'plan': to_jsonable(asdict(plan)) if plan else None,
			'blocks': [to_jsonable(asdict(block)) for block in blocks],
		}

	def get_document(self, assignment_id: str, user_id: str) -> Document:
		self._owned(assignment_id, user_id)
		title = ''
		if self.snapshot_provider.has_brief(assignment_id):
			title = self.snapshot_provider.get_snapshot(assignment_id).title
		return assemble(self.block_store.list_blocks(assignment_id), title=title)

	def regenerate(self, assignment_id: str) -> Assignment:
		"""Administrative reset: back to DRAFT with plan and blocks cleared.

		A GENERATING assignment with no live run in this process (left over from a
		crash or restart) can be reset; one with a live run raises ConflictError.
		"""
		assignment = self.state_manager.reset(assignment_id, orphaned=not self.runner.is_running(assignment_id))
		self.plan_store.delete(assignment_id)
		self.block_store.clear(assignment_id)
		logger.info(f'Assignment {assignment_id} reset for regeneration')
		return assignment

	def _owned(self, assignment_id: str, user_id: str) -> Assignment:
		assignment = self.state_manager.get(assignment_id)
		if assignment.user_id != user_id:
			raise AccessDeniedError(f'User {user_id} does not own assignment {assignment_id}')
		return assignment
