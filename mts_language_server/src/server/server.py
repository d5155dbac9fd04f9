"""pygls language server exposing the workspace manager to editors.

Handlers stay thin: they pull text and positions out of protocol params,
call into WorkspaceManager and convert the result back. Requests that
answer the editor never let a core failure escape.
"""

from __future__ import annotations

import logging
import uuid
from typing import Dict, List, Optional

from lsprotocol import types as lsp
from pygls.server import LanguageServer

from mts_language_server import __version__
from mts_language_server.src.common.constants import (
    CONFIGURATION_SECTION,
    DEFAULT_SETTINGS,
    MTSSettings,
)
from mts_language_server.src.semantic.tokens import TOKEN_LEGEND, TOKEN_MODIFIERS
from mts_language_server.src.workspace.manager import WorkspaceManager

from .converters import (
    from_lsp_position,
    to_lsp_completion_item,
    to_lsp_diagnostics,
    to_lsp_hover,
)

logger = logging.getLogger(__name__)

SERVER_NAME = "mts-language-server"


class MTSLanguageServer(LanguageServer):
    """Language server for MapTool macro scripts."""

    def __init__(self, manager: Optional[WorkspaceManager] = None, **kwargs) -> None:
        super().__init__(SERVER_NAME, __version__, **kwargs)
        self.manager = manager if manager is not None else WorkspaceManager()
        self.global_settings: MTSSettings = DEFAULT_SETTINGS
        self.settings_cache: Dict[str, MTSSettings] = {}
        self.has_configuration_capability = False

    async def get_document_settings(self, uri: str) -> MTSSettings:
        """Settings for ``uri``, fetched from the client once and cached."""
        if not self.has_configuration_capability:
            return self.global_settings

        cached = self.settings_cache.get(uri)
        if cached is not None:
            return cached

        params = lsp.WorkspaceConfigurationParams(
            items=[lsp.ConfigurationItem(scope_uri=uri, section=CONFIGURATION_SECTION)]
        )
        try:
            result = await self.get_configuration_async(params)
        except Exception:
            logger.exception("Could not fetch settings for %s", uri)
            return self.global_settings

        settings = MTSSettings.from_dict(result[0] if result else None, self.global_settings)
        self.settings_cache[uri] = settings
        return settings

    async def validate(self, uri: str, text: str, language_id: str, version: Optional[int] = None) -> None:
        """Analyse a changed document and push its diagnostics."""
        settings = await self.get_document_settings(uri)
        artifacts = self.manager.update_document(uri, text, language_id, settings)
        diagnostics = to_lsp_diagnostics(artifacts.diagnostics) if artifacts is not None else []
        self.publish_diagnostics(uri, diagnostics, version=version)

    async def revalidate_all(self) -> None:
        """Recompute capped diagnostics of every open document."""
        for uri in self.manager.sessions.uris():
            settings = await self.get_document_settings(uri)
            artifacts = self.manager.revalidate(uri, settings)
            if artifacts is not None:
                self.publish_diagnostics(uri, to_lsp_diagnostics(artifacts.diagnostics))

    def close(self, uri: str) -> None:
        self.settings_cache.pop(uri, None)
        self.manager.close_document(uri)
        self.publish_diagnostics(uri, [])

    def hover_at(self, uri: str, position: lsp.Position) -> Optional[lsp.Hover]:
        try:
            settings = self.settings_cache.get(uri, self.global_settings)
            hover = self.manager.hover(uri, from_lsp_position(position), settings)
        except Exception:
            logger.exception("Hover failed for %s", uri)
            return None
        return to_lsp_hover(hover) if hover is not None else None

    def complete_at(self, line_text: str, position: lsp.Position) -> lsp.CompletionList:
        items: List[lsp.CompletionItem] = []
        try:
            candidates = self.manager.complete(line_text, from_lsp_position(position))
            items = [to_lsp_completion_item(candidate) for candidate in candidates]
        except Exception:
            logger.exception("Completion failed at %s", from_lsp_position(position))
            items = []
        return lsp.CompletionList(is_incomplete=False, items=items)

    def semantic_tokens(self, uri: str) -> lsp.SemanticTokens:
        artifacts = self.manager.sessions.get(uri)
        return lsp.SemanticTokens(data=list(artifacts.tokens) if artifacts is not None else [])


# -- Handlers -------------------------------------------------------------


def on_initialize(ls: MTSLanguageServer, params: lsp.InitializeParams) -> None:
    workspace = params.capabilities.workspace
    ls.has_configuration_capability = bool(workspace is not None and workspace.configuration)
    logger.info("Client configuration support: %s", ls.has_configuration_capability)


async def on_initialized(ls: MTSLanguageServer, params: lsp.InitializedParams) -> None:
    if not ls.has_configuration_capability:
        return
    registration = lsp.Registration(id=str(uuid.uuid4()), method=lsp.WORKSPACE_DID_CHANGE_CONFIGURATION)
    try:
        await ls.register_capability_async(lsp.RegistrationParams(registrations=[registration]))
    except Exception:
        logger.exception("Could not register for configuration changes")


async def on_did_open(ls: MTSLanguageServer, params: lsp.DidOpenTextDocumentParams) -> None:
    document = params.text_document
    await ls.validate(document.uri, document.text, document.language_id, document.version)


async def on_did_change(ls: MTSLanguageServer, params: lsp.DidChangeTextDocumentParams) -> None:
    # The workspace has already applied the incremental edits
    document = ls.workspace.get_text_document(params.text_document.uri)
    await ls.validate(document.uri, document.source, document.language_id, document.version)


def on_did_close(ls: MTSLanguageServer, params: lsp.DidCloseTextDocumentParams) -> None:
    ls.close(params.text_document.uri)


async def on_did_change_configuration(ls: MTSLanguageServer, params: lsp.DidChangeConfigurationParams) -> None:
    if ls.has_configuration_capability:
        ls.settings_cache.clear()
    else:
        section = params.settings.get(CONFIGURATION_SECTION) if isinstance(params.settings, dict) else None
        ls.global_settings = MTSSettings.from_dict(section)
    await ls.revalidate_all()


def on_hover(ls: MTSLanguageServer, params: lsp.HoverParams) -> Optional[lsp.Hover]:
    return ls.hover_at(params.text_document.uri, params.position)


def on_completion(ls: MTSLanguageServer, params: lsp.CompletionParams) -> lsp.CompletionList:
    try:
        document = ls.workspace.get_text_document(params.text_document.uri)
        lines = document.lines
        line_text = lines[params.position.line] if params.position.line < len(lines) else ""
    except Exception:
        logger.exception("No text for completion in %s", params.text_document.uri)
        return lsp.CompletionList(is_incomplete=False, items=[])
    return ls.complete_at(line_text.rstrip("\r\n"), params.position)


def on_semantic_tokens(ls: MTSLanguageServer, params: lsp.SemanticTokensParams) -> lsp.SemanticTokens:
    return ls.semantic_tokens(params.text_document.uri)


def create_server(manager: Optional[WorkspaceManager] = None) -> MTSLanguageServer:
    """Build a server with every feature registered."""
    server = MTSLanguageServer(manager)

    server.feature(lsp.INITIALIZE)(on_initialize)
    server.feature(lsp.INITIALIZED)(on_initialized)
    server.feature(lsp.TEXT_DOCUMENT_DID_OPEN)(on_did_open)
    server.feature(lsp.TEXT_DOCUMENT_DID_CHANGE)(on_did_change)
    server.feature(lsp.TEXT_DOCUMENT_DID_CLOSE)(on_did_close)
    server.feature(lsp.WORKSPACE_DID_CHANGE_CONFIGURATION)(on_did_change_configuration)
    server.feature(lsp.TEXT_DOCUMENT_HOVER)(on_hover)
    server.feature(lsp.TEXT_DOCUMENT_COMPLETION, lsp.CompletionOptions(resolve_provider=False))(on_completion)
    server.feature(
        lsp.TEXT_DOCUMENT_SEMANTIC_TOKENS_FULL,
        lsp.SemanticTokensLegend(token_types=TOKEN_LEGEND, token_modifiers=TOKEN_MODIFIERS),
    )(on_semantic_tokens)

    return server
