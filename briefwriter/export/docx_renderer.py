import logging
from io import BytesIO
from pathlib import Path

from docx import Document as DocxDocument
from docx.enum.table import WD_TABLE_ALIGNMENT
from docx.enum.text import WD_ALIGN_PARAGRAPH
from docx.oxml import OxmlElement
from docx.oxml.ns import qn
from docx.shared import Inches, Pt, RGBColor

from briefwriter.models import (
	Document,
	DocumentTable,
	Figure,
	Heading,
	Paragraph,
	ReferenceList,
)

logger = logging.getLogger(__name__)

FONT_NAME = 'Times New Roman'
FONT_SIZE = Pt(14)
LINE_SPACING = 1.5
FIRST_LINE_INDENT = Inches(0.5)


def create_docx_renderer_from_config(config: dict) -> 'DocxRenderer':
	output_config = config.get('output', {})
	return DocxRenderer(output_config.get('final_dir', 'data/outputs'))


class DocxRenderer:
	def __init__(self, output_dir: str | Path = 'data/outputs'):
		self.output_dir = Path(output_dir)

	def render(self, document: Document) -> bytes:
		doc = DocxDocument()
		self._setup_document_style(doc)
		self._add_title_page(doc, document.title)

		for node in document.nodes:
			if isinstance(node, Heading):
				self._add_heading(doc, node)
			elif isinstance(node, Paragraph):
				self._add_body_paragraph(doc, node.text)
			elif isinstance(node, DocumentTable):
				self._add_table(doc, node)
			elif isinstance(node, Figure):
				self._add_figure(doc, node)
			elif isinstance(node, ReferenceList):
				self._add_references(doc, node)

		buffer = BytesIO()
		doc.save(buffer)
		logger.info(
			f'Rendered document: {len(document.headings())} headings, '
			f'{document.table_count} tables, {document.figure_count} figures'
		)
		return buffer.getvalue()

	def export(self, document: Document, file_name: str) -> Path:
		logger.info(f'Exporting document to Word: {file_name}')

		self.output_dir.mkdir(parents=True, exist_ok=True)
		output_path = self.output_dir / f'{file_name}.docx'
		output_path.write_bytes(self.render(document))

		logger.info(f'Document exported to: {output_path}')
		return output_path

	def _setup_document_style(self, doc):
		style = doc.styles['Normal']
		font = style.font
		font.name = FONT_NAME
		font.size = FONT_SIZE
		# Also applies to East Asian runs
		style.element.rPr.rFonts.set(qn('w:eastAsia'), FONT_NAME)

		paragraph_format = style.paragraph_format
		paragraph_format.line_spacing = LINE_SPACING
		paragraph_format.space_after = Pt(6)

		for name in ('Heading 1', 'Heading 2', 'Title'):
			heading_style = doc.styles[name]
			heading_style.font.name = FONT_NAME
			heading_style.font.bold = True
			heading_style.font.color.rgb = RGBColor(0, 0, 0)

		for section in doc.sections:
			section.top_margin = Inches(1)
			section.bottom_margin = Inches(1)
			section.left_margin = Inches(1)
			section.right_margin = Inches(1)

	def _add_title_page(self, doc, title: str):
		if title:
			title_para = doc.add_heading(title, 0)
			title_para.alignment = WD_ALIGN_PARAGRAPH.CENTER

		toc_heading = doc.add_paragraph('Table of Contents')
		toc_heading.alignment = WD_ALIGN_PARAGRAPH.CENTER
		for run in toc_heading.runs:
			run.bold = True

		self._add_toc_field(doc)
		doc.add_page_break()

	def _add_toc_field(self, doc):
		run = doc.add_paragraph().add_run()

		begin = OxmlElement('w:fldChar')
		begin.set(qn('w:fldCharType'), 'begin')

		instruction = OxmlElement('w:instrText')
		instruction.set(qn('xml:space'), 'preserve')
		instruction.text = 'TOC \\o "1-2" \\h \\z \\u'

		separate = OxmlElement('w:fldChar')
		separate.set(qn('w:fldCharType'), 'separate')

		placeholder = OxmlElement('w:t')
		placeholder.text = 'Right-click to update the table of contents.'

		end = OxmlElement('w:fldChar')
		end.set(qn('w:fldCharType'), 'end')

		for element in (begin, instruction, separate, placeholder, end):
			run._r.append(element)

	def _add_heading(self, doc, heading: Heading):
		para = doc.add_heading(heading.text, level=heading.level)
		para.alignment = WD_ALIGN_PARAGRAPH.CENTER if heading.level == 1 else WD_ALIGN_PARAGRAPH.LEFT

	def _add_body_paragraph(self, doc, text: str):
		para = doc.add_paragraph(text)
		para.alignment = WD_ALIGN_PARAGRAPH.JUSTIFY
		para.paragraph_format.first_line_indent = FIRST_LINE_INDENT
		para.paragraph_format.line_spacing = LINE_SPACING

	def _add_caption(self, doc, text: str):
		para = doc.add_paragraph()
		para.alignment = WD_ALIGN_PARAGRAPH.CENTER
		run = para.add_run(text)
		run.bold = True
		run.italic = True

	def _add_table(self, doc, table: DocumentTable):
		columns = max(len(table.headers), 1)
		docx_table = doc.add_table(rows=len(table.rows) + 1, cols=columns)
		docx_table.style = 'Table Grid'
		docx_table.alignment = WD_TABLE_ALIGNMENT.CENTER

		for i, header in enumerate(table.headers):
			cell = docx_table.rows[0].cells[i]
			cell.text = header
			for paragraph in cell.paragraphs:
				for run in paragraph.runs:
					run.bold = True

		for row_idx, row_data in enumerate(table.rows, start=1):
			for col_idx, cell_data in enumerate(row_data[:columns]):
				docx_table.rows[row_idx].cells[col_idx].text = cell_data

		self._add_caption(doc, table.label)

	def _add_figure(self, doc, figure: Figure):
		placeholder = doc.add_paragraph()
		placeholder.alignment = WD_ALIGN_PARAGRAPH.CENTER
		run = placeholder.add_run(f'[Image placeholder: {figure.description or figure.caption}]')
		run.italic = True

		self._add_caption(doc, figure.label)

	def _add_references(self, doc, references: ReferenceList):
		for number, reference in enumerate(references.entries, start=1):
			para = doc.add_paragraph(f'{number}. {reference.text}')
			para.alignment = WD_ALIGN_PARAGRAPH.LEFT
			para.paragraph_format.left_indent = Inches(0.25)
			para.paragraph_format.first_line_indent = Inches(-0.25)

		logger.info(f'Added {len(references.entries)} references')
