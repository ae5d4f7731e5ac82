"""
Tweaksmith line tokenizer.

Classifies one line of PowerShell-ish script text into token spans for
highlighting. A single regex alternation is scanned left to right; the
alternatives are ordered by precedence, and anything between matches is
emitted as a ``text`` token, so concatenating the values of ``tokenize(line)``
always reproduces ``line`` exactly.

Lines are tokenized independently. A string literal that spans several lines
is highlighted line by line, not as one string.

Known limitation: the command-name pattern (``word-word``) also matches
subtraction between bare words such as ``a-b``.
"""
from __future__ import annotations

import re
from dataclasses import dataclass
from enum import Enum
from typing import Dict, List, Pattern

_LINE_BREAK = re.compile(r"\r\n|\r|\n")


class TokenType(str, Enum):
    """Token classes produced by the tokenizer."""
    COMMENT = "comment"
    STRING = "string"
    VARIABLE = "variable"
    CMDLET = "cmdlet"
    NUMBER = "number"
    KEYWORD = "keyword"
    BOOLEAN = "boolean"
    OPERATOR = "operator"
    PUNCT = "punct"
    TEXT = "text"


@dataclass(frozen=True)
class Token:
    """A classified substring of one line."""
    type: TokenType
    value: str


KEYWORDS = (
    "function", "if", "else", "elseif", "foreach", "for", "while", "do",
    "until", "switch", "param", "return", "begin", "process", "end",
    "break", "continue", "throw", "try", "catch", "finally", "trap",
    "class", "using",
)

# Precedence follows alternative order; groups hold no nested captures so
# ``match.lastgroup`` names the alternative that matched.
TOKEN_PATTERN: Pattern = re.compile(
    r"(?P<comment>#[\s\S]*)"
    r"|(?P<single_string>'[^']*')"
    r'|(?P<double_string>"(?:[^"\\]|\\.)*")'
    r"|(?P<variable>\$[A-Za-z_][\w:\-]*)"
    r"|(?P<cmdlet>[A-Za-z]+-[A-Za-z0-9]+)"
    r"|(?P<number>\b\d+(?:\.\d+)?\b)"
    r"|\b(?P<keyword>" + "|".join(KEYWORDS) + r")\b"
    r"|(?P<boolean>\b(?:true|false)\b)"
    r"|(?P<operator>[+\-*/=<>!%]+)"
    r"|(?P<punct>[\[\]{}();,:.])"
)

_GROUP_TYPES: Dict[str, TokenType] = {
    "comment": TokenType.COMMENT,
    "single_string": TokenType.STRING,
    "double_string": TokenType.STRING,
    "variable": TokenType.VARIABLE,
    "cmdlet": TokenType.CMDLET,
    "number": TokenType.NUMBER,
    "keyword": TokenType.KEYWORD,
    "boolean": TokenType.BOOLEAN,
    "operator": TokenType.OPERATOR,
    "punct": TokenType.PUNCT,
}


def tokenize(line: str) -> List[Token]:
    """Split ``line`` into classified tokens. Never raises; lossless."""
    tokens: List[Token] = []
    last = 0
    for match in TOKEN_PATTERN.finditer(line):
        start = match.start()
        if start > last:
            tokens.append(Token(TokenType.TEXT, line[last:start]))
        tokens.append(Token(_GROUP_TYPES.get(match.lastgroup, TokenType.TEXT), match.group()))
        last = match.end()
    if last < len(line):
        tokens.append(Token(TokenType.TEXT, line[last:]))
    return tokens


def split_lines(code: str) -> List[str]:
    """Split text into logical lines on any line-ending convention.

    Empty text is a single empty line, matching what an editor displays.
    """
    if not code:
        return [""]
    return _LINE_BREAK.split(code)


@dataclass(frozen=True)
class HighlightResult:
    """Logical lines and the token row for each of them."""
    lines: List[str]
    rows: List[List[Token]]

    @property
    def line_count(self) -> int:
        return len(self.lines)


def highlight_code(code: str) -> HighlightResult:
    """Tokenize every logical line of ``code``."""
    lines = split_lines(code)
    return HighlightResult(lines=lines, rows=[tokenize(line) for line in lines])


# Rich style per token type for span-painting renderers
TOKEN_STYLES: Dict[TokenType, str] = {
    TokenType.COMMENT: "green",
    TokenType.STRING: "yellow",
    TokenType.VARIABLE: "cyan",
    TokenType.CMDLET: "bold medium_purple1",
    TokenType.NUMBER: "orange1",
    TokenType.KEYWORD: "bold indian_red1",
    TokenType.BOOLEAN: "bold slate_blue1",
    TokenType.OPERATOR: "",
    TokenType.PUNCT: "",
    TokenType.TEXT: "",
}


def token_style(token_type: TokenType) -> str:
    """Style string for ``token_type`` (empty means default foreground)."""
    return TOKEN_STYLES.get(token_type, "")
