import copy
import json
from collections.abc import Callable

import pytest

from briefwriter.core.notifier import Notifier
from briefwriter.core.orchestrator import Orchestrator
from briefwriter.core.runner import GenerationRunner
from briefwriter.core.service import GenerationService
from briefwriter.core.state_manager import StateManager
from briefwriter.export.docx_renderer import DocxRenderer
from briefwriter.llm import CompletionAdapter, CompletionErr, CompletionOk, CompletionOptions, ErrorKind
from briefwriter.modules.augmentation import Augmenter
from briefwriter.modules.planning import OutlinePlanner
from briefwriter.modules.planning.prompts import PLANNER_SYSTEM_PROMPT
from briefwriter.modules.writing import ContentWriter
from briefwriter.parsers import BriefParser
from briefwriter.storage import AssignmentStore, BlockStore, FileQuotaLedger, FileSnapshotProvider, PlanStore

RAW_BRIEF = {
	'unitName': 'Programming',
	'unitCode': 'Unit 4',
	'level': 3,
	'scenario': 'You work for a software house building tools for a local charity.',
	'learningAims': [
		{'code': 'A', 'title': 'Examine the computational thinking skills'},
		{'code': 'B', 'title': 'Design a software solution'},
	],
	'assessmentCriteria': {
		'pass': [
			{'code': 'A.P1', 'description': 'Explain how computational thinking skills are applied'},
			{'code': 'B.P2', 'description': 'Produce a design for a program'},
		],
		'merit': [{'code': 'A.M1', 'description': 'Analyse how computational thinking is used'}],
		'distinction': [],
	},
	'targetGrade': 'PASS',
	'language': 'en',
	'options': {'includeTables': True, 'includeImages': True},
	'studentContext': {
		'profileSnapshot': {'fullName': 'Sam Lee', 'universityName': 'Northfield College'},
		'studentInputs': {
			'projectDescription': 'A volunteer rota planner',
			'toolsUsed': ['Python', 'SQLite'],
			'challengesFaced': 'Handling overlapping shifts',
		},
	},
}

TOKENS_PER_CALL = 30


@pytest.fixture
def raw_brief():
	return copy.deepcopy(RAW_BRIEF)


@pytest.fixture
def make_snapshot(raw_brief):
	def _make(grade: str = 'PASS', **overrides):
		data = copy.deepcopy(raw_brief)
		data['targetGrade'] = grade
		data.update(overrides)
		return BriefParser().parse(data)

	return _make


class ScriptedAdapter(CompletionAdapter):
	"""Deterministic stand-in for the completion service.

	Every call costs TOKENS_PER_CALL tokens (10 prompt + 20 completion).
	"""

	def __init__(self):
		self.calls: list[tuple[str, CompletionOptions]] = []
		self.planner_text = json.dumps({'error': 'INVALID_BRIEF_SNAPSHOT'})
		self.table_text = json.dumps(
			{
				'caption': 'Tools used in the project',
				'headers': ['Tool', 'Purpose', 'Evidence'],
				'rows': [['Python', 'Application logic', 'Source code'], ['SQLite', 'Storage', 'Schema']],
			}
		)
		self.references_text = json.dumps(
			{'references': [{'id': n, 'text': f'Author {n} (2023) Title {n}. Publisher.'} for n in range(1, 9)]}
		)
		self.fail_when: Callable[[str, CompletionOptions], bool] | None = None
		self.raise_when: Callable[[str, CompletionOptions], bool] | None = None

	def complete(self, prompt, options=None):
		options = options or CompletionOptions()
		self.calls.append((prompt, options))

		if self.fail_when is not None and self.fail_when(prompt, options):
			return CompletionErr(ErrorKind.TRANSPORT, 'upstream unavailable', 10, 0)
		if self.raise_when is not None and self.raise_when(prompt, options):
			raise TimeoutError('socket timed out')

		if options.system_prompt == PLANNER_SYSTEM_PROMPT:
			text = self.planner_text
		elif options.json_mode and 'Generate a TABLE' in prompt:
			text = self.table_text
		elif options.json_mode and 'REFERENCES' in prompt:
			text = self.references_text
		else:
			text = f'Generated paragraph for call {len(self.calls)}.\n\nSecond paragraph of call {len(self.calls)}.'

		return CompletionOk(text, 10, 20)


class RecordingNotifier(Notifier):
	def __init__(self):
		self.events: list[tuple[str, str]] = []

	def generation_started(self, assignment):
		self.events.append(('started', assignment.assignment_id))

	def generation_completed(self, assignment):
		self.events.append(('completed', assignment.assignment_id))

	def generation_failed(self, assignment, error):
		self.events.append(('failed', assignment.assignment_id))


@pytest.fixture
def adapter():
	return ScriptedAdapter()


@pytest.fixture
def notifier():
	return RecordingNotifier()


@pytest.fixture
def storage(tmp_path):
	storage_path = tmp_path / 'storage'
	return {
		'assignments': AssignmentStore(storage_path),
		'plans': PlanStore(storage_path),
		'blocks': BlockStore(storage_path),
		'briefs': FileSnapshotProvider(tmp_path / 'briefs'),
		'ledger': FileQuotaLedger(storage_path / 'ledger.json', default_balance=5000),
		'output_dir': tmp_path / 'outputs',
	}


@pytest.fixture
def writer(adapter, storage):
	return ContentWriter(adapter, storage['blocks'], Augmenter(adapter))


@pytest.fixture
def orchestrator(adapter, storage, writer, notifier):
	return Orchestrator(
		state_manager=StateManager(storage['assignments']),
		snapshot_provider=storage['briefs'],
		planner=OutlinePlanner(adapter),
		writer=writer,
		plan_store=storage['plans'],
		ledger=storage['ledger'],
		renderer=DocxRenderer(storage['output_dir']),
		notifier=notifier,
	)


@pytest.fixture
def service(orchestrator, storage):
	runner = GenerationRunner(orchestrator, max_workers=2)
	yield GenerationService(
		orchestrator.state_manager, storage['briefs'], storage['plans'], storage['blocks'], runner
	)
	runner.shutdown()


@pytest.fixture
def registered(service, raw_brief):
	service.register_assignment('asg-0001', 'user-1', raw_brief)
	return 'asg-0001'
