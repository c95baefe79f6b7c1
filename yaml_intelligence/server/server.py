"""pygls language server answering completion and diagnostics requests."""

import logging
from typing import List, Optional

from lsprotocol import types as lsp
from pygls.server import LanguageServer

from ..automation.dispatcher import EditorContext, YamlIntelligence
from ..parsing.reparse import Position
from ..text.mapped_text import lines
from .lsp_adapter import document_kind, to_lsp_completion_list, to_lsp_diagnostics, uri_to_path

logger = logging.getLogger(__name__)


class YamlIntelligenceLanguageServer:
    """Language server serving YAML files and script cell options."""

    def __init__(self, intelligence: YamlIntelligence):
        self.server = LanguageServer("yaml-intelligence", "0.1.0")
        self.intelligence = intelligence

        # Register handlers
        self._register_handlers()

    def _register_handlers(self):
        """Register all LSP handlers."""

        @self.server.feature(lsp.TEXT_DOCUMENT_DID_OPEN)
        async def did_open(ls, params: lsp.DidOpenTextDocumentParams):
            await self.publish(params.text_document.uri, params.text_document.text)

        @self.server.feature(lsp.TEXT_DOCUMENT_DID_SAVE)
        async def did_save(ls, params: lsp.DidSaveTextDocumentParams):
            document = ls.workspace.get_text_document(params.text_document.uri)
            await self.publish(params.text_document.uri, document.source)

        @self.server.feature(lsp.TEXT_DOCUMENT_DID_CLOSE)
        def did_close(ls, params: lsp.DidCloseTextDocumentParams):
            ls.publish_diagnostics(params.text_document.uri, [])

        @self.server.feature(
            lsp.TEXT_DOCUMENT_COMPLETION,
            lsp.CompletionOptions(trigger_characters=[':', ' ', '-']),
        )
        async def completion(ls, params: lsp.CompletionParams) -> lsp.CompletionList:
            document = ls.workspace.get_text_document(params.text_document.uri)
            return await self.complete(params.text_document.uri, document.source, params.position)

    def start(self):
        """Start the language server."""
        self.server.start_io()

    def _context(self, uri: str, text: str, position: Optional[Position] = None) -> Optional[EditorContext]:
        path = uri_to_path(uri)
        kind = document_kind(path)
        if kind is None:
            return None
        filetype, language = kind
        return EditorContext(filetype=filetype, code=text, position=position, path=path, language=language)

    async def diagnostics(self, uri: str, text: str) -> List[lsp.Diagnostic]:
        context = self._context(uri, text)
        if context is None:
            return []
        return to_lsp_diagnostics(await self.intelligence.get_lint(context), text)

    async def publish(self, uri: str, text: str):
        diagnostics = await self.diagnostics(uri, text)
        logger.debug(f"Publishing {len(diagnostics)} diagnostics for {uri}")
        self.server.publish_diagnostics(uri, diagnostics)

    async def complete(self, uri: str, text: str, position: lsp.Position) -> lsp.CompletionList:
        context = self._context(uri, text, Position(position.line, position.character))
        if context is None:
            return to_lsp_completion_list(None)
        text_lines = lines(text)
        if position.line < len(text_lines):
            context.line = text_lines[position.line][:position.character]
        return to_lsp_completion_list(await self.intelligence.get_completions(context))
