"""ADRULE — Compiled Expression Models.

The compilers emit tokens rather than text so one compilation can feed both
plain-text output and styled rendering. Each token knows what it is (metric,
operator, connector...) and the exact text it contributes.
"""

from enum import Enum
from typing import List, Optional

from pydantic import BaseModel


class TokenKind(str, Enum):
    HEADING = "heading"
    METRIC = "metric"
    OPERATOR = "operator"
    VALUE = "value"
    CONNECTOR = "connector"  # Between conditions inside a group
    GROUP_OPEN = "group_open"
    GROUP_CLOSE = "group_close"
    GROUP_CONNECTOR = "group_connector"  # Between groups
    ACTION = "action"
    PAYLOAD = "payload"
    FALLBACK = "fallback"


# Tokens that hug their neighbour instead of being space-separated
_NO_SPACE_AFTER = {TokenKind.GROUP_OPEN}
_NO_SPACE_BEFORE = {TokenKind.GROUP_CLOSE}


class Token(BaseModel):
    kind: TokenKind
    text: str

    model_config = {"frozen": True}


class ExpressionLine(BaseModel):
    """One rendered line: a group of conditions, a group connector or an action."""

    tokens: List[Token]

    model_config = {"frozen": True}

    @property
    def text(self) -> str:
        parts: List[str] = []
        previous: Optional[Token] = None
        for token in self.tokens:
            if (
                previous is not None
                and previous.kind not in _NO_SPACE_AFTER
                and token.kind not in _NO_SPACE_BEFORE
            ):
                parts.append(" ")
            parts.append(token.text)
            previous = token
        return "".join(parts)


class CompiledClause(BaseModel):
    """A JIKA or MAKA clause.

    ``fallback`` is set instead of ``lines`` when there is nothing to show;
    ``inline_fallback`` puts it on the heading's line.
    """

    heading: str
    lines: List[ExpressionLine] = []
    line_separator: str = "\n"
    fallback: Optional[str] = None
    inline_fallback: bool = False

    model_config = {"frozen": True}

    @property
    def is_empty(self) -> bool:
        return self.fallback is not None

    def tokens(self) -> List[Token]:
        """Flat token stream, heading first."""
        stream = [Token(kind=TokenKind.HEADING, text=self.heading)]
        if self.fallback is not None:
            stream.append(Token(kind=TokenKind.FALLBACK, text=self.fallback))
            return stream
        for line in self.lines:
            stream.extend(line.tokens)
        return stream


class RuleSummary(BaseModel):
    """Both clauses plus their plain-text renderings."""

    conditions: CompiledClause
    actions: CompiledClause
    conditions_text: str
    actions_text: str
    text: str
