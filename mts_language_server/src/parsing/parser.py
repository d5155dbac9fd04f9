"""Parser entry point for MapTool macro scripts."""

from __future__ import annotations

import logging
from pathlib import Path
from typing import List, Optional, Tuple

from lark import Lark
from lark.exceptions import UnexpectedEOF, UnexpectedInput

from mts_language_server.src.ast import ASTNode, Macro, TextChunk
from .segments import Segment, SegmentKind, blank_prefix, line_and_column, split_segments
from .transformer import MTSTransformer

logger = logging.getLogger(__name__)


class MTSSyntaxError(SyntaxError):
    """Raised when macro text cannot be parsed.

    ``position`` is the 0-based code point offset of the failure, ``line``
    and ``column`` are 1-based.
    """

    def __init__(self, message: str, position: int, line: int, column: int, filename: str = "<string>"):
        super().__init__(message)
        self.message = message
        self.position = position
        self.line = line
        self.column = column
        self.filename = filename
        self.lineno = line

    def __str__(self) -> str:
        return f"Parse error in {self.filename} at {self.line}:{self.column}: {self.message}"


class MTSParser:
    """Main parser class for MapTool macro scripts."""

    def __init__(self, grammar_path: Optional[Path] = None):
        """Initialize parser with grammar file."""
        if grammar_path is None:
            grammar_path = Path(__file__).resolve().parent.parent.parent / "grammar" / "mts.lark"

        self.grammar_path = grammar_path
        self.parser = None
        self.transformer = MTSTransformer()
        self._load_grammar()

    def _load_grammar(self) -> None:
        """Load and compile the Lark grammar."""
        try:
            with open(self.grammar_path, "r", encoding="utf-8") as handle:
                grammar_text = handle.read()

            self.parser = Lark(
                grammar_text,
                parser="lalr",
                transformer=self.transformer,
                start="start",
                propagate_positions=False,
            )
        except FileNotFoundError as exc:
            raise FileNotFoundError(f"Grammar file not found: {self.grammar_path}") from exc

    def parse(self, source_code: str, filename: str = "<string>") -> Macro:
        """Parse macro text into a syntax tree.

        Args:
            source_code: The macro text to parse
            filename: Source name used in error messages and node annotations

        Returns:
            Macro node covering the whole text

        Raises:
            MTSSyntaxError: If the text has lexical or syntax errors
            RuntimeError: If parser is not initialized
        """
        if self.parser is None:
            raise RuntimeError("Parser not initialized")

        try:
            tree = self.parser.parse(source_code)
        except UnexpectedInput as exc:
            raise self._to_syntax_error(exc, source_code, filename) from exc

        if not isinstance(tree, Macro):
            raise RuntimeError(f"Expected Macro node, got {type(tree)}")

        self._attach_source_file(tree, filename)
        logger.debug("Parsed %s into %d top-level parts", filename, len(tree.bits))
        return tree

    def parse_tolerant(self, source_code: str, filename: str = "<string>") -> Tuple[Macro, List[MTSSyntaxError]]:
        """Parse macro text, keeping every top-level script that parses.

        Text that parses as a whole gives the same tree as ``parse`` and no
        errors. Otherwise each top-level script is parsed on its own and
        the ones that fail are left out of the tree.

        Returns:
            The recovered Macro and the syntax errors found, in text order
        """
        try:
            return self.parse(source_code, filename), []
        except MTSSyntaxError as exc:
            first_error = exc

        bits = []
        errors: List[MTSSyntaxError] = []
        for segment in split_segments(source_code):
            if segment.kind == SegmentKind.TEXT:
                bits.append(self._text_chunk(source_code, segment))
            elif segment.kind == SegmentKind.STRAY_BRACKET:
                line, column = line_and_column(source_code, segment.start)
                errors.append(
                    MTSSyntaxError("Unexpected ']' outside of a script", segment.start, line, column, filename)
                )
            else:
                try:
                    bits.extend(self._parse_segment(source_code, segment, filename))
                except MTSSyntaxError as exc:
                    errors.append(exc)

        if not errors:
            errors.append(first_error)

        macro = Macro(bits=bits, line=1, column=1)
        if bits:
            macro.start_pos = bits[0].start_pos
            macro.end_pos = bits[-1].end_pos
        self._attach_source_file(macro, filename)
        logger.debug("Recovered %d scripts of %s with %d syntax errors", len(bits), filename, len(errors))
        return macro, errors

    def _parse_segment(self, source_code: str, segment: Segment, filename: str) -> List[ASTNode]:
        """Parse one script in place; the blanked prefix keeps offsets absolute."""
        masked = blank_prefix(source_code, segment.start) + source_code[segment.start : segment.end]
        macro = self.parse(masked, filename)
        return [bit for bit in macro.bits if bit.start_pos >= segment.start]

    @staticmethod
    def _text_chunk(source_code: str, segment: Segment) -> TextChunk:
        line, column = line_and_column(source_code, segment.start)
        chunk = TextChunk(source_code[segment.start : segment.end], line, column)
        chunk.start_pos = segment.start
        chunk.end_pos = segment.end
        return chunk

    def parse_file(self, file_path: Path) -> Macro:
        """Parse a macro file into a syntax tree."""
        try:
            with open(file_path, "r", encoding="utf-8") as handle:
                source_code = handle.read()
            return self.parse(source_code, str(file_path))
        except FileNotFoundError as exc:
            raise FileNotFoundError(f"Source file not found: {file_path}") from exc

    @staticmethod
    def _to_syntax_error(exc: UnexpectedInput, source_code: str, filename: str) -> MTSSyntaxError:
        position = getattr(exc, "pos_in_stream", None)
        if isinstance(exc, UnexpectedEOF) or position is None or position < 0:
            position = len(source_code)
            line, column = line_and_column(source_code, position)
        else:
            line = exc.line
            column = exc.column

        if isinstance(exc, UnexpectedEOF):
            message = "Unexpected end of input"
        else:
            message = str(exc).strip().splitlines()[0]
        return MTSSyntaxError(message, position, line, column, filename)

    def _attach_source_file(self, node: ASTNode, filename: str) -> None:
        """Recursively annotate syntax tree nodes with their originating filename."""
        if not isinstance(node, ASTNode):
            return

        if filename:
            node.source_file = filename

        for attr in vars(node).values():
            if isinstance(attr, ASTNode):
                self._attach_source_file(attr, filename)
            elif isinstance(attr, list):
                for item in attr:
                    if isinstance(item, ASTNode):
                        self._attach_source_file(item, filename)
