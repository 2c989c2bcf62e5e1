"""Service layer for docsan.

This module provides the core services:
- parse_document: HTML to BeautifulSoup tree
- assemble: the document assembly pipeline
- sanitize_html: whole-document comment-out of scripts and stylesheets
- DocumentService: parse + assemble + serialise with fixed settings
"""

from docsan.services.assembler import AssemblerConfig, PipelineSelectors, assemble
from docsan.services.document import DocumentService
from docsan.services.parser import parse_document
from docsan.services.sanitizer import sanitize_html, sanitize_tree

__all__ = [
    "AssemblerConfig",
    "DocumentService",
    "PipelineSelectors",
    "assemble",
    "parse_document",
    "sanitize_html",
    "sanitize_tree",
]
