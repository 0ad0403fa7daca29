# Copyright 2025 Multikernel Technologies, Inc.
#
# Licensed under the Apache License, Version 2.0 (the "License");
# you may not use this file except in compliance with the License.
# You may obtain a copy of the License at
#
#     http://www.apache.org/licenses/LICENSE-2.0
#
# Unless required by applicable law or agreed to in writing, software
# distributed under the License is distributed on an "AS IS" BASIS,
# WITHOUT WARRANTIES OR CONDITIONS OF ANY KIND, either express or implied.
# See the License for the specific language governing permissions and
# limitations under the License.

"""
Tokenizer and depth-tracking node walker for brace-delimited tree sources.

This is deliberately not a device tree parser. It understands just enough of
the DTS/ITS surface syntax (nodes, labels, references, string-valued
properties, comments and preprocessor lines) to report node identities and
string properties as a flat stream of events.
"""

from dataclasses import dataclass
from enum import Enum
from typing import Iterable, Iterator, List, Optional, Tuple

from ..exceptions import ParseError, TokenizeError


class TokenKind(Enum):
    """Kinds of lexical tokens."""
    WORD = "word"
    STRING = "string"
    LBRACE = "{"
    RBRACE = "}"
    SEMI = ";"
    EQUALS = "="
    COMMA = ","
    OTHER = "other"


_PUNCTUATION = {
    '{': TokenKind.LBRACE,
    '}': TokenKind.RBRACE,
    ';': TokenKind.SEMI,
    '=': TokenKind.EQUALS,
    ',': TokenKind.COMMA,
}

_DELIMITERS = set('{};=,<>[]()"') | set(' \t\r\n\f\v')

PREPROCESSOR_DIRECTIVES = frozenset({
    '#include', '#define', '#undef', '#if', '#ifdef', '#ifndef',
    '#elif', '#else', '#endif', '#pragma', '#error', '#line',
})


@dataclass(frozen=True)
class Token:
    """A lexical token with its source line."""
    kind: TokenKind
    value: str
    line: int
    first_on_line: bool = False


class EventKind(Enum):
    """Kinds of events produced by the node walker."""
    OPEN = "open"
    CLOSE = "close"
    PROPERTY = "property"


@dataclass(frozen=True)
class NodeEvent:
    """
    A flat walker event.

    For OPEN and CLOSE events ``depth`` is the number of enclosing nodes
    (0 for a top-level node). For PROPERTY events it is the number of nodes
    open at the assignment, so a property of a node opened at depth d has
    depth d + 1.
    """
    kind: EventKind
    name: str
    depth: int
    line: int
    label: Optional[str] = None
    values: Tuple[str, ...] = ()
    first_on_line: bool = False
    is_reference: bool = False


def tokenize(text: str) -> Iterator[Token]:
    """Split source text into tokens, dropping whitespace and comments."""
    pos = 0
    line = 1
    line_has_token = False
    length = len(text)

    while pos < length:
        char = text[pos]

        if char == '\n':
            line += 1
            line_has_token = False
            pos += 1
            continue

        if char.isspace():
            pos += 1
            continue

        if text.startswith('//', pos):
            end = text.find('\n', pos)
            pos = length if end < 0 else end
            continue

        if text.startswith('/*', pos):
            end = text.find('*/', pos + 2)
            if end < 0:
                raise TokenizeError("unterminated block comment", line)
            line += text.count('\n', pos, end)
            pos = end + 2
            continue

        if char == '#' and not line_has_token:
            word_end = pos
            while word_end < length and text[word_end] not in _DELIMITERS:
                word_end += 1
            if text[pos:word_end] in PREPROCESSOR_DIRECTIVES:
                # Skip the directive, honouring backslash continuations
                while pos < length and text[pos] != '\n':
                    if text.startswith('\\\n', pos):
                        line += 1
                        pos += 2
                        continue
                    pos += 1
                continue

        if char == '"':
            start_line = line
            pos += 1
            start = pos
            while pos < length and text[pos] != '"':
                if text[pos] == '\\':
                    pos += 1
                elif text[pos] == '\n':
                    line += 1
                pos += 1
            if pos >= length:
                raise TokenizeError("unterminated string", start_line)
            yield Token(TokenKind.STRING, text[start:pos], start_line, not line_has_token)
            line_has_token = True
            pos += 1
            continue

        if char in _PUNCTUATION:
            yield Token(_PUNCTUATION[char], char, line, not line_has_token)
            line_has_token = True
            pos += 1
            continue

        if char in _DELIMITERS:
            yield Token(TokenKind.OTHER, char, line, not line_has_token)
            line_has_token = True
            pos += 1
            continue

        start = pos
        while (pos < length and text[pos] not in _DELIMITERS
               and not text.startswith('//', pos) and not text.startswith('/*', pos)):
            pos += 1
        yield Token(TokenKind.WORD, text[start:pos], line, not line_has_token)
        line_has_token = True


def split_label(word: str) -> Tuple[Optional[str], str]:
    """
    Split ``label:name`` into its label and node name.

    A bare ``name:`` is returned as the name with its colon stripped.
    """
    stripped = word.rstrip(':')
    if ':' in stripped:
        label, _, name = stripped.rpartition(':')
        return label or None, name
    return None, stripped


def _open_event(header: List[Token], depth: int, brace: Token) -> NodeEvent:
    """Build an OPEN event from the tokens preceding an opening brace."""
    words = [tok for tok in header if tok.kind == TokenKind.WORD]
    if not header or header[-1].kind != TokenKind.WORD:
        return NodeEvent(EventKind.OPEN, "", depth, brace.line,
                         first_on_line=brace.first_on_line)

    name_token = header[-1]
    label, name = split_label(name_token.value)
    for tok in words[:-1]:
        if tok.value.endswith(':'):
            label = tok.value.rstrip(':')

    return NodeEvent(
        EventKind.OPEN,
        name,
        depth,
        name_token.line,
        label=label,
        first_on_line=name_token.first_on_line,
        is_reference=header[0].value.startswith('&'),
    )


def _property_event(statement: List[Token], depth: int) -> Optional[NodeEvent]:
    """Build a PROPERTY event from the tokens of a ``;``-terminated statement."""
    if not statement:
        return None

    equals = next((i for i, tok in enumerate(statement) if tok.kind == TokenKind.EQUALS), None)
    if equals is None:
        name_token = statement[-1]
        if name_token.kind != TokenKind.WORD:
            return None
        return NodeEvent(EventKind.PROPERTY, name_token.value, depth, name_token.line)

    names = [tok for tok in statement[:equals] if tok.kind == TokenKind.WORD]
    if not names:
        return None

    # A second assignment starting its own line means the ';' was dropped
    rest = statement[equals + 1:]
    for tok, following in zip(rest, rest[1:]):
        if tok.kind == TokenKind.WORD and tok.first_on_line and following.kind == TokenKind.EQUALS:
            raise ParseError(f"missing ';' before property '{tok.value}'", tok.line)

    values = tuple(tok.value for tok in statement[equals + 1:] if tok.kind == TokenKind.STRING)
    return NodeEvent(EventKind.PROPERTY, names[-1].value, depth, names[-1].line, values=values)


def walk_nodes(tokens: Iterable[Token]) -> Iterator[NodeEvent]:
    """
    Walk a token stream, yielding node and property events in source order.

    Raises:
        ParseError: On a closing brace without an open node, on an
            assignment missing its terminating ';', or when the input ends
            with nodes still open.
    """
    stack: List[NodeEvent] = []
    statement: List[Token] = []

    for token in tokens:
        if token.kind == TokenKind.LBRACE:
            event = _open_event(statement, len(stack), token)
            statement = []
            stack.append(event)
            yield event
        elif token.kind == TokenKind.RBRACE:
            if not stack:
                raise ParseError("closing brace without matching opening brace", token.line)
            prop = _property_event(statement, len(stack))
            if prop is not None:
                yield prop
            statement = []
            opened = stack.pop()
            yield NodeEvent(EventKind.CLOSE, opened.name, len(stack), token.line,
                            label=opened.label, is_reference=opened.is_reference)
        elif token.kind == TokenKind.SEMI:
            prop = _property_event(statement, len(stack))
            if prop is not None:
                yield prop
            statement = []
        else:
            statement.append(token)

    if stack:
        opened = stack[-1]
        raise ParseError(f"node '{opened.name}' is never closed", opened.line)


def parse_events(text: str) -> List[NodeEvent]:
    """Tokenize and walk source text in one go."""
    return list(walk_nodes(tokenize(text)))
