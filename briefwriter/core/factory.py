import logging
from pathlib import Path

from briefwriter.config.settings import settings
from briefwriter.core.config_loader import ConfigLoader, get_config
from briefwriter.core.notifier import Notifier
from briefwriter.core.orchestrator import Orchestrator
from briefwriter.core.runner import GenerationRunner
from briefwriter.core.service import GenerationService
from briefwriter.core.state_manager import StateManager
from briefwriter.export.docx_renderer import DocxRenderer
from briefwriter.llm import CompletionAdapter, create_llm_client_from_config
from briefwriter.modules.augmentation import Augmenter
from briefwriter.modules.planning import OutlinePlanner
from briefwriter.modules.writing import ContentWriter
from briefwriter.storage import AssignmentStore, BlockStore, FileQuotaLedger, FileSnapshotProvider, PlanStore

logger = logging.getLogger(__name__)


def _resolve(path: str | None, default: Path) -> Path:
	if not path:
		return default
	candidate = Path(path)
	return candidate if candidate.is_absolute() else settings.BASE_DIR / candidate


def create_generation_service(
	config: ConfigLoader | None = None,
	llm_client: CompletionAdapter | None = None,
	notifier: Notifier | None = None,
) -> GenerationService:
	config = config or get_config()
	output_config = config.get_output_config()

	storage_path = _resolve(output_config.get('storage_dir'), settings.STORAGE_PATH)
	briefs_dir = _resolve(output_config.get('briefs_dir'), settings.BRIEFS_DIR)
	final_dir = _resolve(output_config.get('final_dir'), settings.OUTPUT_DIR)

	llm_client = llm_client or create_llm_client_from_config(config.get_llm_config())

	assignment_store = AssignmentStore(storage_path)
	plan_store = PlanStore(storage_path)
	block_store = BlockStore(storage_path)
	snapshot_provider = FileSnapshotProvider(briefs_dir)
	ledger = FileQuotaLedger(
		storage_path / 'ledger.json',
		default_balance=config.get_ledger_config().get('default_balance', 5000),
	)

	state_manager = StateManager(assignment_store)
	augmenter = Augmenter(llm_client, config.get_augmenter_config())
	orchestrator = Orchestrator(
		state_manager=state_manager,
		snapshot_provider=snapshot_provider,
		planner=OutlinePlanner(llm_client, config.get_planner_config()),
		writer=ContentWriter(llm_client, block_store, augmenter, config.get_writer_config()),
		plan_store=plan_store,
		ledger=ledger,
		renderer=DocxRenderer(final_dir),
		notifier=notifier,
	)
	runner = GenerationRunner(orchestrator, max_workers=config.get_runner_config().get('max_workers', 4))

	logger.info(f'Generation service ready (storage: {storage_path})')
	return GenerationService(state_manager, snapshot_provider, plan_store, block_store, runner)
