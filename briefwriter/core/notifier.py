import logging
from abc import ABC, abstractmethod

from briefwriter.models import Assignment

logger = logging.getLogger(__name__)


class Notifier(ABC):
	@abstractmethod
	def generation_started(self, assignment: Assignment) -> None:
		raise NotImplementedError

	@abstractmethod
	def generation_completed(self, assignment: Assignment) -> None:
		raise NotImplementedError

	@abstractmethod
	def generation_failed(self, assignment: Assignment, error: str) -> None:
		raise NotImplementedError


class LoggingNotifier(Notifier):
	def generation_started(self, assignment: Assignment) -> None:
		logger.info(f'[notify] Generation started: {assignment.assignment_id} (user {assignment.user_id})')

	def generation_completed(self, assignment: Assignment) -> None:
		logger.info(
			f'[notify] Generation completed: {assignment.assignment_id}, '
			f'{assignment.total_tokens_used} tokens in {assignment.duration_ms} ms'
		)

	def generation_failed(self, assignment: Assignment, error: str) -> None:
		logger.error(f'[notify] Generation failed: {assignment.assignment_id}: {error}')
