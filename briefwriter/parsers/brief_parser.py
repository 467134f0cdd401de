import json
import logging
import re
from pathlib import Path
from typing import Any

from briefwriter.core.errors import PlanningError
from briefwriter.models import BriefSnapshot, Criterion, Grade, LearningAim, StudentContext, Tier

logger = logging.getLogger(__name__)

CRITERION_PATTERN = re.compile(r'^\s*(?:([A-Z])\s*[.\-]?\s*)?([PMD]\d+)\s*[:.\-–]?\s*(.*)$', re.DOTALL)

TIER_BY_PREFIX = {'P': Tier.PASS, 'M': Tier.MERIT, 'D': Tier.DISTINCTION}

SUPPORTED_LANGUAGES = ('en', 'ru', 'uz', 'es')


def _pick(data: dict[str, Any], *keys: str, default: Any = None) -> Any:
	for key in keys:
		if key in data and data[key] is not None:
			return data[key]
	return default


class BriefParser:
	"""Normalizes raw brief documents into an immutable BriefSnapshot.

	Raw briefs arrive in camelCase or snake_case, with criteria given either
	as plain strings ("A.P1: Explain ...") or as objects. Every shape is
	resolved here so nothing downstream has to care.
	"""

	def parse_file(self, file_path: Path) -> BriefSnapshot:
		logger.info(f'Parsing brief file: {file_path}')

		with open(file_path, encoding='utf-8') as f:
			try:
				data = json.load(f)
			except json.JSONDecodeError as e:
				raise PlanningError(f'Brief file is not valid JSON: {file_path}') from e

		return self.parse(data)

	def parse(self, data: dict[str, Any]) -> BriefSnapshot:
		if not isinstance(data, dict):
			raise PlanningError('Brief must be a JSON object')

		aims_raw = _pick(data, 'learningAims', 'learning_aims', default=[])
		if not isinstance(aims_raw, list):
			raise PlanningError('learningAims must be a list')

		aims, aim_members = self._parse_aims(aims_raw)
		criteria = self._parse_criteria(
			_pick(data, 'assessmentCriteria', 'assessment_criteria', 'criteria', default={}), aims, aim_members
		)

		options = _pick(data, 'options', default={}) or {}

		snapshot = BriefSnapshot(
			unit_name=str(_pick(data, 'unitName', 'unit_name', default='')).strip(),
			unit_code=str(_pick(data, 'unitCode', 'unit_code', default='')).strip(),
			level=int(_pick(data, 'level', default=3)),
			scenario=str(_pick(data, 'scenario', 'vocationalScenario', default='')).strip(),
			learning_aims=aims,
			criteria=criteria,
			language=self._parse_language(_pick(data, 'language', default='en')),
			target_grade=self._parse_grade(_pick(data, 'targetGrade', 'target_grade', default='PASS')),
			include_tables=bool(
				_pick(options, 'includeTables', 'include_tables', default=_pick(data, 'include_tables', default=False))
			),
			include_images=bool(
				_pick(options, 'includeImages', 'include_images', default=_pick(data, 'include_images', default=False))
			),
			checklist_of_evidence=[
				str(item) for item in _pick(data, 'checklistOfEvidence', 'checklist_of_evidence', default=[])
			],
			sources=[str(item) for item in _pick(data, 'sources', default=[])],
			student=self._parse_student(_pick(data, 'studentContext', 'student_context', 'student')),
		)

		logger.info(f'Parsed brief: {snapshot.title}')
		logger.info(f'  Learning aims: {", ".join(a.code for a in aims)}')
		logger.info(f'  Criteria: {len(criteria)} (target grade {snapshot.target_grade.value})')

		return snapshot

	def _parse_aims(self, aims_raw: list[Any]) -> tuple[list[LearningAim], dict[str, set[str]]]:
		aims: list[LearningAim] = []
		members: dict[str, set[str]] = {}

		for index, raw in enumerate(aims_raw):
			if isinstance(raw, str):
				match = re.match(r'^\s*(?:Learning Aim\s+)?([A-Z])\s*[:.\-–]\s*(.+)$', raw)
				if match:
					code, title = match.group(1), match.group(2).strip()
				else:
					code, title = chr(ord('A') + index), raw.strip()
				raw = {}
			elif isinstance(raw, dict):
				code = str(_pick(raw, 'code', 'letter', 'id', default=chr(ord('A') + index))).strip().upper()
				title = str(_pick(raw, 'title', 'description', 'name', default='')).strip()
			else:
				raise PlanningError(f'Unsupported learning aim entry: {raw!r}')

			if any(aim.code == code for aim in aims):
				logger.warning(f'Duplicate learning aim {code} ignored')
				continue

			aims.append(LearningAim(code=code, title=title))
			listed = _pick(raw, 'criteria', 'coversCriteria', default=[]) or []
			members[code] = {self._bare_code(item) for item in listed if self._bare_code(item)}

		return aims, members

	def _parse_criteria(
		self, raw: Any, aims: list[LearningAim], aim_members: dict[str, set[str]]
	) -> list[Criterion]:
		entries: list[tuple[Any, Tier | None]] = []

		if isinstance(raw, dict):
			for tier in Tier:
				for item in raw.get(tier.value, []) or []:
					entries.append((item, tier))
		elif isinstance(raw, list):
			entries = [(item, None) for item in raw]
		else:
			raise PlanningError('assessmentCriteria must be an object keyed by tier or a list')

		criteria: list[Criterion] = []
		seen: set[str] = set()

		for item, tier in entries:
			criterion = self._parse_criterion(item, tier, aims, aim_members)
			if criterion.ref in seen:
				logger.warning(f'Duplicate criterion {criterion.ref} ignored')
				continue
			seen.add(criterion.ref)
			criteria.append(criterion)

		return criteria

	def _parse_criterion(
		self, item: Any, tier: Tier | None, aims: list[LearningAim], aim_members: dict[str, set[str]]
	) -> Criterion:
		explicit_aim = None

		if isinstance(item, str):
			match = CRITERION_PATTERN.match(item)
			if not match:
				raise PlanningError(f'Cannot read criterion: {item!r}')
			prefix, code, description = match.groups()
		elif isinstance(item, dict):
			raw_code = str(_pick(item, 'code', 'id', default='')).strip()
			match = CRITERION_PATTERN.match(raw_code)
			if not match:
				raise PlanningError(f'Cannot read criterion code: {raw_code!r}')
			prefix, code, _ = match.groups()
			description = str(_pick(item, 'description', 'text', 'title', default='')).strip()
			explicit_aim = _pick(item, 'aim', 'learningAim', 'learning_aim')
		else:
			raise PlanningError(f'Unsupported criterion entry: {item!r}')

		code = code.upper()
		inferred = TIER_BY_PREFIX[code[0]]
		if tier is None:
			tier = inferred
		elif tier != inferred:
			logger.warning(f'Criterion {code} listed under {tier.value} but code suggests {inferred.value}')

		aim_code = self._resolve_aim(code, explicit_aim or prefix, aims, aim_members)
		return Criterion(code=code, description=description.strip(), tier=tier, aim=aim_code)

	def _resolve_aim(
		self, code: str, hint: str | None, aims: list[LearningAim], aim_members: dict[str, set[str]]
	) -> str:
		if not aims:
			raise PlanningError('Brief has no learning aims')

		known = {aim.code for aim in aims}
		if hint:
			hint = str(hint).strip().upper()
			if hint in known:
				return hint
			logger.warning(f'Criterion {code} references unknown learning aim {hint}')

		for aim in aims:
			if code in aim_members.get(aim.code, set()):
				return aim.code

		logger.warning(f'Criterion {code} has no learning aim, assigning to {aims[0].code}')
		return aims[0].code

	@staticmethod
	def _bare_code(item: Any) -> str | None:
		if isinstance(item, dict):
			item = _pick(item, 'code', 'id', default='')
		match = CRITERION_PATTERN.match(str(item))
		return match.group(2).upper() if match else None

	@staticmethod
	def _parse_grade(raw: Any) -> Grade:
		try:
			return Grade(str(raw).strip().upper())
		except ValueError as e:
			raise PlanningError(f'Unknown target grade: {raw}') from e

	@staticmethod
	def _parse_language(raw: Any) -> str:
		language = str(raw or 'en').strip().lower()
		if language not in SUPPORTED_LANGUAGES:
			logger.warning(f'Unsupported language {language}, falling back to en')
			return 'en'
		return language

	@staticmethod
	def _parse_student(raw: Any) -> StudentContext | None:
		if not raw:
			return None
		if not isinstance(raw, dict):
			raise PlanningError('studentContext must be an object')

		profile = _pick(raw, 'profileSnapshot', 'profile', default={}) or {}
		inputs = _pick(raw, 'studentInputs', 'inputs', default={}) or {}
		return StudentContext(
			profile={str(k): str(v) for k, v in profile.items() if v is not None},
			inputs=dict(inputs),
		)
