#!/usr/bin/env python3
"""
End-to-end tests for the MTS language server.
Drives a server through an editing session: open -> edit -> hover/complete -> close.
"""

import asyncio

import pytest
from lsprotocol import types as lsp

from mts_language_server.src.server import create_server
from mts_language_server.src.workspace import WorkspaceManager

LIBRARY = "file:///library.mts"
CALLER = "file:///caller.mts"

LIBRARY_SOURCE = """<!-- {"name": "heal", "description": "Heals the selected token.",
  "usages": [{"parameters": {"amount": {"type": "number", "description": "Hit points."}}}]} -->
[h: hp = 10]
[h: defineFunction("heal", "heal@lib:Library")]
"""


class TestEditingSession:
    """A two-document session run through the protocol handlers."""

    @pytest.fixture
    def published(self):
        return {}

    @pytest.fixture
    def server(self, published, monkeypatch):
        server = create_server(WorkspaceManager())

        def publish(uri, diagnostics=None, version=None, **kwargs):
            published[uri] = diagnostics

        monkeypatch.setattr(server, "publish_diagnostics", publish)
        return server

    def _open(self, server, uri, text):
        asyncio.run(server.validate(uri, text, "mts", 1))

    def _hover(self, server, uri, line, character):
        hover = server.hover_at(uri, lsp.Position(line=line, character=character))
        return hover.contents.value if hover is not None else None

    def test_session(self, server, published):
        self._open(server, LIBRARY, LIBRARY_SOURCE)
        self._open(server, CALLER, "[r: heal(hp)][r: abs()]")

        # Shared variable references span both documents
        assert self._hover(server, CALLER, 0, 10) == (
            "#### **hp**\n\nUser-defined variable, 2 references in 2 open documents."
        )

        # The library's inline documentation describes its function
        heal = self._hover(server, CALLER, 0, 5)
        assert heal.startswith("#### **heal**")
        assert "Heals the selected token." in heal
        assert "[Wiki]" not in heal

        # abs() takes exactly one argument
        messages = [diagnostic.message for diagnostic in published[CALLER]]
        assert any("abs" in message for message in messages)
        assert published[LIBRARY] == []

        labels = [item.label for item in server.complete_at("[r: he", lsp.Position(line=0, character=6)).items]
        assert "heal" in labels

        # Editing the caller supersedes its earlier symbols
        self._open(server, CALLER, "[h: mana = 3]")
        assert self._hover(server, LIBRARY, 2, 5) == (
            "#### **hp**\n\nUser-defined variable, 1 reference in 1 open document."
        )

        server.close(LIBRARY)
        assert published[LIBRARY] == []
        assert "hp" not in server.manager.index
        assert "heal" not in server.manager.udfs
        assert "mana" in server.manager.index

    def test_syntax_error_recovers(self, server, published):
        self._open(server, CALLER, "[h: x = ]")
        assert [d.source for d in published[CALLER]] == ["mts:syntax"]

        self._open(server, CALLER, "[h: x = 1]")
        assert published[CALLER] == []
