import json

import pytest

from briefwriter.core.errors import PlanningError
from briefwriter.models import Grade, Tier
from briefwriter.parsers import BriefParser


def test_parse_object_criteria(raw_brief):
	snapshot = BriefParser().parse(raw_brief)

	assert snapshot.title == 'Programming (Unit 4)'
	assert [a.code for a in snapshot.learning_aims] == ['A', 'B']
	assert [c.ref for c in snapshot.criteria] == ['A.P1', 'B.P2', 'A.M1']
	assert snapshot.find_criterion('A.M1').tier == Tier.MERIT
	assert snapshot.target_grade == Grade.PASS
	assert snapshot.include_tables and snapshot.include_images
	assert snapshot.student.get_input('toolsUsed') == ['Python', 'SQLite']


def test_parse_string_criteria_and_snake_case():
	snapshot = BriefParser().parse(
		{
			'unit_name': 'Networks',
			'unit_code': 'Unit 9',
			'scenario': 'A small office network.',
			'learning_aims': ['A: Understand topologies', 'B: Plan a network'],
			'assessment_criteria': ['A.P1: Explain topologies', 'B.P2 - Plan a network', 'B.M1: Justify choices'],
			'target_grade': 'merit',
		}
	)

	assert [(c.ref, c.tier) for c in snapshot.criteria] == [
		('A.P1', Tier.PASS),
		('B.P2', Tier.PASS),
		('B.M1', Tier.MERIT),
	]
	assert snapshot.find_criterion('B.P2').description == 'Plan a network'
	assert snapshot.target_grade == Grade.MERIT
	assert snapshot.include_tables is False


def test_aim_resolved_from_aim_criteria_list():
	snapshot = BriefParser().parse(
		{
			'unitName': 'Data',
			'unitCode': 'Unit 2',
			'learningAims': [
				{'letter': 'A', 'description': 'Collect data', 'criteria': ['P1']},
				{'letter': 'B', 'description': 'Present data', 'criteria': ['P2', 'M1']},
			],
			'assessmentCriteria': {
				'pass': [{'code': 'P1', 'description': 'Collect'}, {'code': 'P2', 'description': 'Present'}],
				'merit': [{'code': 'M1', 'description': 'Compare'}],
			},
			'targetGrade': 'DISTINCTION',
		}
	)

	assert [c.ref for c in snapshot.criteria] == ['A.P1', 'B.P2', 'B.M1']
	assert snapshot.learning_aims[1].heading == 'Learning Aim B: Present data'


def test_duplicate_criterion_dropped(raw_brief):
	raw_brief['assessmentCriteria']['pass'].append({'code': 'A.P1', 'description': 'Duplicate'})

	snapshot = BriefParser().parse(raw_brief)

	assert [c.ref for c in snapshot.criteria].count('A.P1') == 1
	assert snapshot.find_criterion('A.P1').description.startswith('Explain')


def test_unknown_grade_rejected(raw_brief):
	raw_brief['targetGrade'] = 'GOLD'

	with pytest.raises(PlanningError):
		BriefParser().parse(raw_brief)


def test_unreadable_criterion_rejected(raw_brief):
	raw_brief['assessmentCriteria']['pass'].append('Explain everything')

	with pytest.raises(PlanningError):
		BriefParser().parse(raw_brief)


def test_unsupported_language_falls_back_to_english(raw_brief):
	raw_brief['language'] = 'fr'

	assert BriefParser().parse(raw_brief).language == 'en'


def test_parse_file(tmp_path, raw_brief):
	brief_file = tmp_path / 'brief.json'
	brief_file.write_text(json.dumps(raw_brief))

	assert BriefParser().parse_file(brief_file).unit_code == 'Unit 4'


def test_parse_file_invalid_json(tmp_path):
	brief_file = tmp_path / 'brief.json'
	brief_file.write_text('{not json')

	with pytest.raises(PlanningError):
		BriefParser().parse_file(brief_file)


def test_criteria_visibility_is_grade_monotonic(make_snapshot):
	visible = {grade: {c.ref for c in make_snapshot(grade).visible_criteria()} for grade in ('PASS', 'MERIT', 'DISTINCTION')}

	assert visible['PASS'] <= visible['MERIT'] <= visible['DISTINCTION']
	assert visible['PASS'] == {'A.P1', 'B.P2'}
	assert 'A.M1' in visible['MERIT']
