import logging
import time

from briefwriter.core.notifier import LoggingNotifier, Notifier
from briefwriter.core.state_manager import StateManager
from briefwriter.export.assembler import assemble
from briefwriter.export.docx_renderer import DocxRenderer
from briefwriter.models import Assignment
from briefwriter.modules.planning import OutlinePlanner
from briefwriter.modules.writing import ContentWriter, WritingJob
from briefwriter.storage.ledger import QuotaLedger
from briefwriter.storage.plans import PlanStore
from briefwriter.storage.snapshot import SnapshotProvider

logger = logging.getLogger(__name__)


class Orchestrator:
	def __init__(
		self,
		state_manager: StateManager,
		snapshot_provider: SnapshotProvider,
		planner: OutlinePlanner,
		writer: ContentWriter,
		plan_store: PlanStore,
		ledger: QuotaLedger,
		renderer: DocxRenderer,
		notifier: Notifier | None = None,
	):
		self.state_manager = state_manager
		self.snapshot_provider = snapshot_provider
		self.planner = planner
		self.writer = writer
		self.plan_store = plan_store
		self.ledger = ledger
		self.renderer = renderer
		self.notifier = notifier or LoggingNotifier()

	def run(self, assignment_id: str) -> Assignment:
		self.start(assignment_id)
		return self.execute(assignment_id)

	def start(self, assignment_id: str) -> Assignment:
		"""DRAFT -> GENERATING; raises ConflictError from any other state."""
		assignment = self.state_manager.begin(assignment_id)
		self._notify('generation_started', assignment)
		return assignment

	def execute(self, assignment_id: str) -> Assignment:
		assignment = self.state_manager.get(assignment_id)
		logger.info(f'=== Generating assignment {assignment_id} ===')
		start_time = time.time()

		try:
			snapshot = self.snapshot_provider.get_snapshot(assignment_id)

			plan = self.planner.plan(snapshot)
			self.plan_store.save(assignment_id, plan)
			logger.info(f'Plan saved ({plan.source}): {len(plan.items)} items')

			blocks = self.writer.write_all(WritingJob(assignment_id, snapshot, plan))

			total_tokens = plan.planner_tokens + sum(block.tokens_used for block in blocks)
			total_ai_calls = 1 + len(blocks) + sum(1 for block in blocks if block.table is not None)

			document = assemble(blocks, title=snapshot.title)
			output_path = self.renderer.export(document, assignment_id)

			try:
				self.ledger.debit(assignment.user_id, total_tokens, 'GENERATION', assignment_id)
			except Exception:
				output_path.unlink(missing_ok=True)
				raise

			assignment = self.state_manager.complete(
				assignment_id,
				total_tokens=total_tokens,
				planner_tokens=plan.planner_tokens,
				total_ai_calls=total_ai_calls,
				document_path=str(output_path),
			)
		except Exception as e:
			logger.error(f'Generation failed for {assignment_id}: {e}')
			failed = self.state_manager.fail(assignment_id, str(e) or e.__class__.__name__)
			self._notify('generation_failed', failed, failed.error)
			raise

		logger.info(f'Assignment {assignment_id} completed in {time.time() - start_time:.2f}s')
		logger.info(f'Tokens used: {total_tokens} (planner {plan.planner_tokens}), AI calls: {total_ai_calls}')
		self._notify('generation_completed', assignment)
		return assignment

	def _notify(self, event: str, *args):
		try:
			getattr(self.notifier, event)(*args)
		except Exception as e:
			logger.warning(f'Notifier {event} failed: {e}')
