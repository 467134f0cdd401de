import logging
import threading
from concurrent.futures import Future, ThreadPoolExecutor

from briefwriter.core.orchestrator import Orchestrator
from briefwriter.models import Assignment

logger = logging.getLogger(__name__)


class GenerationRunner:
	"""Runs generations in a thread pool and keeps each run's Future observable."""

	def __init__(self, orchestrator: Orchestrator, max_workers: int = 4):
		self.orchestrator = orchestrator
		self.executor = ThreadPoolExecutor(max_workers=max_workers, thread_name_prefix='generation')
		self._futures: dict[str, Future] = {}
		self._lock = threading.Lock()

	def submit(self, assignment_id: str) -> Future:
		# The status guard runs in the caller so conflicts surface immediately
		self.orchestrator.start(assignment_id)

		try:
			future = self.executor.submit(self.orchestrator.execute, assignment_id)
		except RuntimeError as e:
			self.orchestrator.state_manager.fail(assignment_id, f'Could not schedule generation: {e}')
			raise

		with self._lock:
			self._futures[assignment_id] = future
		future.add_done_callback(lambda f: self._on_done(assignment_id, f))
		return future

	def _on_done(self, assignment_id: str, future: Future):
		if future.cancelled():
			logger.warning(f'Generation for {assignment_id} was cancelled')
			return

		error = future.exception()
		if error is not None:
			logger.error(f'Background generation for {assignment_id} ended with {type(error).__name__}: {error}')
		else:
			logger.info(f'Background generation for {assignment_id} finished')

	def get_future(self, assignment_id: str) -> Future | None:
		with self._lock:
			return self._futures.get(assignment_id)

	def is_running(self, assignment_id: str) -> bool:
		future = self.get_future(assignment_id)
		return future is not None and not future.done()

	def wait(self, assignment_id: str, timeout: float | None = None) -> Assignment:
		"""Block until the run finishes; re-raises the run's exception."""
		future = self.get_future(assignment_id)
		if future is None:
			raise KeyError(f'No generation submitted for {assignment_id}')
		return future.result(timeout=timeout)

	def shutdown(self, wait: bool = True):
		self.executor.shutdown(wait=wait)
