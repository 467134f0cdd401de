import logging
import threading
from datetime import UTC, datetime

from briefwriter.core.errors import ConflictError, NotFoundError
from briefwriter.models import TRANSITIONS, Assignment, AssignmentStatus
from briefwriter.storage.assignments import AssignmentStore

logger = logging.getLogger(__name__)


def _now() -> datetime:
	return datetime.now(UTC)


class StateManager:
	"""Owns every Assignment status change; all transitions go through one lock."""

	def __init__(self, store: AssignmentStore):
		self.store = store
		self._lock = threading.Lock()

	def create(self, assignment_id: str, user_id: str) -> Assignment:
		with self._lock:
			existing = self.store.load(assignment_id)
			if existing is not None:
				if existing.user_id != user_id:
					raise ConflictError(f'Assignment {assignment_id} already belongs to another user')
				return existing

			assignment = Assignment(assignment_id=assignment_id, user_id=user_id, created_at=_now().isoformat())
			self.store.save(assignment)
			logger.info(f'Assignment {assignment_id} created for {user_id}')
			return assignment

	def get(self, assignment_id: str) -> Assignment:
		assignment = self.store.load(assignment_id)
		if assignment is None:
			raise NotFoundError(f'Assignment {assignment_id} not found')
		return assignment

	def begin(self, assignment_id: str) -> Assignment:
		with self._lock:
			assignment = self.get(assignment_id)
			if assignment.status != AssignmentStatus.DRAFT:
				raise ConflictError(
					f'Assignment {assignment_id} is {assignment.status.value}; generation starts only from DRAFT'
				)

			self._transition(assignment, AssignmentStatus.GENERATING)
			assignment.started_at = _now().isoformat()
			assignment.completed_at = None
			assignment.duration_ms = None
			assignment.error = None
			self.store.save(assignment)
			return assignment

	def complete(
		self,
		assignment_id: str,
		total_tokens: int,
		planner_tokens: int,
		total_ai_calls: int,
		document_path: str | None = None,
	) -> Assignment:
		with self._lock:
			assignment = self.get(assignment_id)
			self._transition(assignment, AssignmentStatus.COMPLETED)
			assignment.total_tokens_used = total_tokens
			assignment.planner_tokens = planner_tokens
			assignment.total_ai_calls = total_ai_calls
			assignment.document_path = document_path
			self._stamp_finish(assignment)
			self.store.save(assignment)
			return assignment

	def fail(self, assignment_id: str, error: str) -> Assignment:
		with self._lock:
			assignment = self.get(assignment_id)
			self._transition(assignment, AssignmentStatus.FAILED)
			assignment.error = error
			self._stamp_finish(assignment)
			self.store.save(assignment)
			return assignment

	def reset(self, assignment_id: str, orphaned: bool = False) -> Assignment:
		"""Back to DRAFT. A GENERATING assignment is reset only when its run is known to be gone."""
		with self._lock:
			assignment = self.get(assignment_id)
			if assignment.status == AssignmentStatus.GENERATING and not orphaned:
				raise ConflictError(f'Assignment {assignment_id} is generating and cannot be reset')

			logger.warning(f'Resetting assignment {assignment_id} from {assignment.status.value} to DRAFT')
			reset = Assignment(
				assignment_id=assignment.assignment_id,
				user_id=assignment.user_id,
				created_at=assignment.created_at,
			)
			self.store.save(reset)
			return reset

	def _transition(self, assignment: Assignment, target: AssignmentStatus):
		if target not in TRANSITIONS[assignment.status]:
			raise ConflictError(
				f'Invalid transition for {assignment.assignment_id}: {assignment.status.value} -> {target.value}'
			)
		logger.info(f'Assignment {assignment.assignment_id}: {assignment.status.value} -> {target.value}')
		assignment.status = target

	def _stamp_finish(self, assignment: Assignment):
		finished = _now()
		assignment.completed_at = finished.isoformat()
		if assignment.started_at:
			started = datetime.fromisoformat(assignment.started_at)
			assignment.duration_ms = int((finished - started).total_seconds() * 1000)
