from briefwriter.export.assembler import assemble, split_paragraphs
from briefwriter.export.docx_renderer import DocxRenderer, create_docx_renderer_from_config

__all__ = ['DocxRenderer', 'assemble', 'create_docx_renderer_from_config', 'split_paragraphs']
