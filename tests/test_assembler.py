from briefwriter.export import assemble, split_paragraphs
from briefwriter.models import (
	ContentBlock,
	DocumentTable,
	Heading,
	ImagePlaceholder,
	ItemKind,
	Paragraph,
	Reference,
	ReferenceList,
	TableData,
)


def _blocks():
	table = TableData(caption='Comparison of approaches', headers=['Approach', 'Benefit'], rows=[['Loops', 'Simple']])
	return [
		ContentBlock(0, 'introduction', ItemKind.INTRODUCTION, 'Introduction', content='Intro one.\n\nIntro two.'),
		ContentBlock(1, 'aim_A', ItemKind.LEARNING_AIM, 'Learning Aim A: Examine skills', aim_code='A', content='Aim text.'),
		ContentBlock(
			2,
			'criterion_A.P1',
			ItemKind.CRITERION,
			'P1: Explain',
			aim_code='A',
			criterion_code='P1',
			content='P1 text.',
			image=ImagePlaceholder('Flowchart of the rota', 1),
		),
		ContentBlock(
			3,
			'criterion_A.M1',
			ItemKind.CRITERION,
			'M1: Analyse',
			aim_code='A',
			criterion_code='M1',
			content='M1 text.',
			table=table,
		),
		ContentBlock(4, 'conclusion', ItemKind.CONCLUSION, 'Conclusion', content='Done.'),
		ContentBlock(5, 'references', ItemKind.REFERENCES, 'References', references=[Reference('B', 2), Reference('A', 1)]),
	]


def test_assembly_is_idempotent():
	blocks = _blocks()

	assert assemble(blocks, 'Title') == assemble(list(reversed(blocks)), 'Title')


def test_heading_levels():
	document = assemble(_blocks())

	assert [(h.anchor, h.level) for h in document.headings()] == [
		('introduction', 1),
		('aim_A', 1),
		('criterion_A.P1', 2),
		('criterion_A.M1', 2),
		('conclusion', 1),
		('references', 1),
	]


def test_single_table_anchored_to_its_criterion():
	document = assemble(_blocks())

	[table] = document.tables()
	assert table.anchor == 'criterion_A.M1'
	assert table.label == 'Table 1. Comparison of approaches'
	index = document.nodes.index(table)
	assert document.nodes[index - 1] == Paragraph('M1 text.')
	assert document.figures()[0].label == 'Figure 1. Flowchart of the rota'


def test_references_last_and_sorted():
	blocks = _blocks()
	blocks[-1], blocks[-2] = blocks[-2], blocks[-1]

	document = assemble(blocks)

	assert isinstance(document.nodes[-1], ReferenceList)
	assert [r.text for r in document.nodes[-1].entries] == ['A', 'B']


def test_counters_run_across_document():
	blocks = _blocks()
	blocks[2] = ContentBlock(
		2,
		'criterion_A.P1',
		ItemKind.CRITERION,
		'P1: Explain',
		content='P1 text.',
		table=TableData('First', ['a', 'b'], [['1', '2']]),
	)

	document = assemble(blocks)

	assert [t.number for t in document.tables()] == [1, 2]
	assert document.table_count == 2


def test_legacy_nested_shape():
	document = assemble(
		{
			'introduction': 'Intro.',
			'sections': [
				{
					'heading': 'Learning Aim B: Design',
					'content': 'Aim content.',
					'criteria': [{'code': 'P2', 'description': 'Produce a design', 'content': 'Design text.'}],
					'tables': [{'caption': 'Design choices', 'headers': ['Choice', 'Reason'], 'rows': [['GUI', 'Usability']]}],
				}
			],
			'conclusion': 'End.',
			'references': [{'id': 2, 'text': 'Second'}, {'id': 1, 'text': 'First'}],
		},
		title='Legacy',
	)

	assert [h.anchor for h in document.headings()] == ['introduction', 'aim_B', 'criterion_B.P2', 'conclusion', 'references']
	assert document.tables()[0].anchor == 'criterion_B.P2'
	assert [r.text for r in document.nodes[-1].entries] == ['First', 'Second']


def test_split_paragraphs():
	assert split_paragraphs('One.\n\n  \nTwo.\n\nThree.') == ['One.', 'Two.', 'Three.']
	assert split_paragraphs('') == []


def test_empty_blocks_yield_empty_document():
	document = assemble([], 'Empty')

	assert document.nodes == []
	assert not any(isinstance(n, (Heading, DocumentTable)) for n in document.nodes)


def _legacy_design_content(introduction):
	return {
		'introduction': introduction,
		'sections': [
			{
				'heading': 'Learning Aim B: Design',
				'content': 'Aim content.',
				'criteria': [{'code': 'P2', 'description': 'Produce a design', 'content': 'Design text.'}],
				'tables': [{'caption': 'Design choices', 'headers': ['Choice', 'Reason'], 'rows': [['GUI', 'Usability']]}],
			}
		],
		'conclusion': 'End.',
		'references': [{'order': 2, 'text': 'Second'}, {'order': 1, 'text': 'First'}],
	}


def _flat_design_blocks(introduction):
	return [
		ContentBlock(0, 'introduction', ItemKind.INTRODUCTION, 'Introduction', content=introduction),
		ContentBlock(1, 'aim_B', ItemKind.LEARNING_AIM, 'Learning Aim B: Design', aim_code='B', content='Aim content.'),
		ContentBlock(
			2,
			'criterion_B.P2',
			ItemKind.CRITERION,
			'P2: Produce a design',
			aim_code='B',
			criterion_code='P2',
			content='Design text.',
			table=TableData('Design choices', ['Choice', 'Reason'], [['GUI', 'Usability']]),
		),
		ContentBlock(3, 'conclusion', ItemKind.CONCLUSION, 'Conclusion', content='End.'),
		ContentBlock(4, 'references', ItemKind.REFERENCES, 'References', references=[Reference('Second', 2), Reference('First', 1)]),
	]


def test_flat_and_legacy_shapes_assemble_equally():
	assert assemble(_flat_design_blocks('Intro.'), 'T') == assemble(_legacy_design_content('Intro.'), 'T')


def test_empty_introduction_keeps_heading_in_both_shapes():
	flat = assemble(_flat_design_blocks(''), 'T')
	legacy = assemble(_legacy_design_content(''), 'T')

	assert flat == legacy
	assert legacy.nodes[0] == Heading(text='Introduction', level=1, anchor='introduction')
	assert legacy.nodes[1] == Heading(text='Learning Aim B: Design', level=1, anchor='aim_B')
