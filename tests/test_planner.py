import json

import pytest

from briefwriter.core.errors import PlanningError
from briefwriter.llm import CompletionErr, ErrorKind
from briefwriter.models import ItemKind
from briefwriter.modules.planning import OutlinePlanner, build_fallback_plan, canonical_outline


def _model_outline(*criteria, tables=(), images=()):
	outline = [{'type': 'INTRODUCTION'}]
	current_aim = None
	for ref in criteria:
		aim, code = ref.split('.')
		if aim != current_aim:
			outline.append({'type': 'LEARNING_AIM', 'aim': aim})
			current_aim = aim
		outline.append({'type': 'CRITERION', 'aim': aim, 'criterion': code})
	outline += [{'type': 'CONCLUSION'}, {'type': 'REFERENCES'}]
	return json.dumps(
		{
			'outline': outline,
			'tables': [{'criterion': ref, 'title': f'Table for {ref}'} for ref in tables],
			'images': [{'criterion': ref, 'caption': f'Figure for {ref}'} for ref in images],
		}
	)


def test_pass_outline_excludes_merit(make_snapshot):
	items = canonical_outline(make_snapshot('PASS'))

	assert [i.item_id for i in items] == [
		'introduction',
		'aim_A',
		'criterion_A.P1',
		'aim_B',
		'criterion_B.P2',
		'conclusion',
		'references',
	]


def test_merit_outline_places_merit_after_pass(make_snapshot):
	ids = [i.item_id for i in canonical_outline(make_snapshot('MERIT'))]

	assert ids.index('criterion_A.M1') == ids.index('criterion_A.P1') + 1


def test_model_outline_accepted(adapter, make_snapshot):
	adapter.planner_text = _model_outline('A.P1', 'A.M1', 'B.P2', tables=['A.M1'], images=['P1'])
	snapshot = make_snapshot('MERIT')

	plan = OutlinePlanner(adapter).plan(snapshot)

	assert plan.source == 'model'
	assert plan.planner_tokens == 30
	assert [i.item_id for i in plan.items] == [i.item_id for i in canonical_outline(snapshot)]
	assert [t.criterion_ref for t in plan.tables] == ['A.M1']
	assert [(i.criterion_ref, i.sequence) for i in plan.images] == [('A.P1', 1)]


def test_model_outline_with_hidden_criterion_falls_back(adapter, make_snapshot):
	adapter.planner_text = _model_outline('A.P1', 'A.M1', 'B.P2')

	plan = OutlinePlanner(adapter).plan(make_snapshot('PASS'))

	assert plan.source == 'fallback'
	assert 'criterion_A.M1' not in [i.item_id for i in plan.items]


@pytest.mark.parametrize(
	'planner_text',
	[
		'',
		'ERROR: INVALID_BRIEF_SNAPSHOT',
		'{"error": "INVALID_BRIEF_SNAPSHOT"}',
		'not json at all',
		'{"outline": []}',
		json.dumps({'outline': [{'type': 'CRITERION', 'aim': 'A', 'criterion': 'P9'}]}),
	],
)
def test_unusable_output_falls_back(adapter, make_snapshot, planner_text):
	adapter.planner_text = planner_text

	plan = OutlinePlanner(adapter).plan(make_snapshot('PASS'))

	assert plan.source == 'fallback'
	assert plan.items[0].kind == ItemKind.INTRODUCTION
	assert plan.items[-1].kind == ItemKind.REFERENCES


def test_adapter_error_falls_back(adapter, make_snapshot):
	adapter.fail_when = lambda prompt, options: True

	plan = OutlinePlanner(adapter).plan(make_snapshot('PASS'))

	assert plan.source == 'fallback'
	assert plan.planner_tokens == 10


def test_requirement_for_unplanned_criterion_falls_back(adapter, make_snapshot):
	adapter.planner_text = _model_outline('A.P1', 'B.P2', tables=['A.M1'])

	plan = OutlinePlanner(adapter).plan(make_snapshot('PASS'))

	assert plan.source == 'fallback'


def test_fallback_prefers_merit_for_tables_and_pass_for_images(make_snapshot):
	plan = build_fallback_plan(make_snapshot('MERIT'), max_images=1)

	assert [t.criterion_ref for t in plan.tables] == ['A.M1']
	assert [i.criterion_ref for i in plan.images] == ['A.P1']


def test_fallback_table_uses_first_pass_criterion_without_merit(make_snapshot):
	plan = build_fallback_plan(make_snapshot('PASS'))

	assert [t.criterion_ref for t in plan.tables] == ['A.P1']
	assert [i.criterion_ref for i in plan.images] == ['A.P1', 'B.P2']


def test_requirements_respect_inclusion_flags(adapter, make_snapshot):
	adapter.planner_text = _model_outline('A.P1', 'A.M1', 'B.P2', tables=['A.M1'], images=['A.P1'])
	snapshot = make_snapshot('MERIT', options={'includeTables': False, 'includeImages': False})

	plan = OutlinePlanner(adapter).plan(snapshot)

	assert plan.tables == []
	assert plan.images == []
	assert build_fallback_plan(snapshot).tables == []


def test_image_count_capped(adapter, make_snapshot):
	adapter.planner_text = _model_outline('A.P1', 'A.M1', 'B.P2', images=['A.P1', 'A.M1', 'B.P2'])

	plan = OutlinePlanner(adapter, {'max_images': 2}).plan(make_snapshot('MERIT'))

	assert [i.sequence for i in plan.images] == [1, 2]


def test_aim_without_visible_criteria_is_skipped(make_snapshot, raw_brief):
	raw_brief['learningAims'].append({'code': 'C', 'title': 'Review the solution'})
	raw_brief['assessmentCriteria']['merit'].append({'code': 'C.M2', 'description': 'Review'})
	snapshot = make_snapshot('PASS', learningAims=raw_brief['learningAims'], assessmentCriteria=raw_brief['assessmentCriteria'])

	assert 'aim_C' not in [i.item_id for i in canonical_outline(snapshot)]


def test_invalid_snapshot_raises_before_calling_model(adapter, make_snapshot):
	snapshot = make_snapshot('PASS', assessmentCriteria={'pass': [], 'merit': [{'code': 'A.M1', 'description': 'x'}]})

	with pytest.raises(PlanningError):
		OutlinePlanner(adapter).plan(snapshot)
	assert adapter.calls == []


def test_error_result_type_is_used(adapter, make_snapshot):
	adapter.complete = lambda prompt, options=None: CompletionErr(ErrorKind.SENTINEL, 'INVALID_BRIEF_SNAPSHOT')

	assert OutlinePlanner(adapter).plan(make_snapshot('PASS')).source == 'fallback'
