"""Documentation embedded in macro text for user-defined functions.

A macro that implements a UDF may describe itself with a JSON object,
usually inside an HTML comment at the top of the macro:

    <!-- {"name": "heal", "description": "Heals a token.",
          "usages": [{"parameters": {"amount": {"type": "number"}}}]} -->

Parsing is best effort: a missing or broken object never raises, the
caller gets an InlineDocumentation whose status says what happened.
"""

from __future__ import annotations

import json
import logging
import re
from dataclasses import dataclass
from enum import Enum
from typing import Optional

from .registry import FunctionDefinition

logger = logging.getLogger(__name__)

HTML_COMMENT_RE = re.compile(r"<!--(.*?)-->", re.DOTALL)
# Inside a comment the object may span lines; elsewhere it must fit on one
COMMENT_OBJECT_RE = re.compile(r"\{.*\}", re.DOTALL)
LINE_OBJECT_RE = re.compile(r"\{.*\}")


class DocStatus(Enum):
    ABSENT = "absent"
    MALFORMED = "malformed"
    FOUND = "found"


@dataclass(frozen=True)
class InlineDocumentation:
    """Outcome of looking for inline documentation."""

    status: DocStatus
    definition: Optional[FunctionDefinition] = None
    error: Optional[str] = None

    @property
    def found(self) -> bool:
        return self.status == DocStatus.FOUND


NO_DOCUMENTATION = InlineDocumentation(DocStatus.ABSENT)


def extract_documentation(text: str, name: Optional[str] = None) -> InlineDocumentation:
    """Find and parse the first JSON object in ``text``.

    Args:
        text: Macro text to search
        name: Name to use when the object does not carry one

    Returns:
        InlineDocumentation with status ABSENT, MALFORMED or FOUND
    """
    text = text or ""
    comment = HTML_COMMENT_RE.search(text)
    if comment is not None:
        match = COMMENT_OBJECT_RE.search(comment.group(1))
    else:
        match = LINE_OBJECT_RE.search(text)
    if match is None:
        return NO_DOCUMENTATION

    try:
        record = json.loads(match.group(0))
        if not isinstance(record, dict):
            raise TypeError(f"expected an object, got {type(record).__name__}")
        if name and not record.get("name"):
            record["name"] = name
        definition = FunctionDefinition.from_record(record, normalize=False)
    except (ValueError, TypeError, AttributeError) as exc:
        logger.debug("Ignoring malformed inline documentation: %s", exc)
        return InlineDocumentation(DocStatus.MALFORMED, error=str(exc))

    return InlineDocumentation(DocStatus.FOUND, definition=definition)
