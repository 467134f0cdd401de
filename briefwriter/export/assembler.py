import logging
import re
from collections.abc import Iterable
from typing import Any

from briefwriter.models import (
	ContentBlock,
	Document,
	DocumentNode,
	DocumentTable,
	Figure,
	Heading,
	ImagePlaceholder,
	ItemKind,
	Paragraph,
	Reference,
	ReferenceList,
	TableData,
)

logger = logging.getLogger(__name__)

PARAGRAPH_BREAK = re.compile(r'\n\s*\n')

TOP_LEVEL_KINDS = (ItemKind.INTRODUCTION, ItemKind.LEARNING_AIM, ItemKind.CONCLUSION, ItemKind.REFERENCES)


def split_paragraphs(text: str) -> list[str]:
	return [p.strip() for p in PARAGRAPH_BREAK.split(text or '') if p.strip()]


class _DocumentBuilder:
	def __init__(self):
		self.nodes: list[DocumentNode] = []
		self.table_count = 0
		self.figure_count = 0

	def heading(self, text: str, level: int, anchor: str):
		self.nodes.append(Heading(text=text, level=level, anchor=anchor))

	def paragraphs(self, text: str):
		self.nodes.extend(Paragraph(text=p) for p in split_paragraphs(text))

	def table(self, table: TableData, anchor: str):
		self.table_count += 1
		self.nodes.append(
			DocumentTable(
				number=self.table_count,
				caption=table.caption or 'Data table',
				headers=list(table.headers),
				rows=[list(row) for row in table.rows],
				anchor=anchor,
			)
		)

	def figure(self, image: ImagePlaceholder, anchor: str):
		self.figure_count += 1
		self.nodes.append(
			Figure(
				number=self.figure_count,
				caption=image.caption or image.description or 'Diagram',
				anchor=anchor,
				description=image.description,
			)
		)

	def references(self, entries: Iterable[Reference], anchor: str = 'references'):
		self.heading('References', 1, anchor)
		ordered = sorted(entries, key=lambda r: r.order)
		self.nodes.append(ReferenceList(entries=ordered))

	def build(self, title: str) -> Document:
		return Document(
			title=title,
			nodes=list(self.nodes),
			table_count=self.table_count,
			figure_count=self.figure_count,
		)


def assemble(source: list[ContentBlock] | dict[str, Any], title: str = '') -> Document:
	"""Build the document model from persisted blocks or a legacy nested content dict.

	Pure: the same input always yields an equal Document.
	"""
	if isinstance(source, dict):
		return _assemble_legacy(source, title)
	return _assemble_blocks(source, title)


def _assemble_blocks(blocks: list[ContentBlock], title: str) -> Document:
	builder = _DocumentBuilder()
	ordered = sorted(blocks, key=lambda b: b.block_order)
	references: list[ContentBlock] = []

	for block in ordered:
		if block.kind == ItemKind.REFERENCES:
			references.append(block)
			continue

		level = 1 if block.kind in TOP_LEVEL_KINDS else 2
		builder.heading(block.title, level, block.item_id)
		builder.paragraphs(block.content)

		if block.table is not None:
			builder.table(block.table, block.item_id)
		if block.image is not None:
			builder.figure(block.image, block.item_id)

	# References close the document whatever their position in the input
	for block in references:
		builder.references(block.references, block.item_id)

	logger.info(
		f'Assembled {len(ordered)} blocks: {builder.table_count} tables, {builder.figure_count} figures'
	)
	return builder.build(title)


def _assemble_legacy(content: dict[str, Any], title: str) -> Document:
	builder = _DocumentBuilder()

	# A present key is a block, even with empty text
	if 'introduction' in content:
		builder.heading('Introduction', 1, 'introduction')
		builder.paragraphs(content['introduction'] or '')

	for index, section in enumerate(content.get('sections') or []):
		heading = (section.get('heading') or '').strip()
		if not heading:
			continue

		aim_match = re.search(r'Learning Aim\s+([A-Z])', heading)
		aim_code = aim_match.group(1) if aim_match else chr(ord('A') + index)
		builder.heading(heading, 1, f'aim_{aim_code}')
		builder.paragraphs(section.get('content') or '')

		anchor = f'aim_{aim_code}'
		for criterion in section.get('criteria') or []:
			code = criterion.get('code', '').strip()
			description = (criterion.get('description') or '').strip()
			anchor = f'criterion_{aim_code}.{code}'
			builder.heading(f'{code}: {description}' if description else code, 2, anchor)
			builder.paragraphs(criterion.get('content') or '')

		# Section-level tables and images sit after the last criterion written
		for table in section.get('tables') or []:
			builder.table(
				TableData(caption=table.get('caption', ''), headers=table.get('headers', []), rows=table.get('rows', [])),
				anchor,
			)
		for sequence, image in enumerate(section.get('images') or [], start=1):
			builder.figure(
				ImagePlaceholder(
					caption=image.get('caption') or image.get('description') or '',
					sequence=image.get('figureNumber') or sequence,
					description=image.get('description') or '',
				),
				anchor,
			)

	if 'conclusion' in content:
		builder.heading('Conclusion', 1, 'conclusion')
		builder.paragraphs(content['conclusion'] or '')

	raw_references = content.get('references') or []
	if raw_references:
		builder.references(
			Reference(text=ref.get('text', ''), order=ref.get('order') or ref.get('id') or position)
			for position, ref in enumerate(raw_references, start=1)
		)

	return builder.build(title)
