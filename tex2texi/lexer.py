import logging
from enum import Enum
from typing import Dict, Iterator, List, Optional, Tuple

from .errors import UnbalancedDelimiterError
from .tokens import Token, TokenKind

logger = logging.getLogger(__name__)

ESCAPE = '\\'

# Characters that end a run of plain text
SPECIAL_CHARS = frozenset('$%&@\\{}~')

# ASCII whitespace skipped between directive arguments
WHITESPACE = frozenset(' \t\n\r\f\v')


class LexerMode(Enum):
    """Lexer mode enumeration."""
    NORMAL = 0   # Normal text processing
    LITERAL = 1  # Inside a codeblock, ~ is plain text
    TABLE = 2    # Inside a tabular environment, & breaks columns


# Environment name -> mode entered by \begin; \end returns to NORMAL.
# There is no mode stack, the last transition wins.
MODE_ENVIRONMENTS: Dict[str, LexerMode] = {
    'codeblock': LexerMode.LITERAL,
    'tokentable': LexerMode.TABLE,
    'floattable': LexerMode.TABLE,
}


class SourceCursor:
    """Character cursor over a source string with line tracking and rewind."""

    def __init__(self, text: str) -> None:
        """
        Initialize the cursor at the start of text.

        Args:
            text: The complete source text
        """
        self.text: str = text
        self.pos: int = 0
        self.line: int = 1

    @property
    def at_end(self) -> bool:
        """True once every character has been consumed."""
        return self.pos >= len(self.text)

    def peek(self) -> Optional[str]:
        """Return the next character without consuming it."""
        if self.pos < len(self.text):
            return self.text[self.pos]
        return None

    def advance(self) -> str:
        """Consume and return the next character."""
        char = self.text[self.pos]
        self.pos += 1
        if char == '\n':
            self.line += 1
        return char

    def mark(self) -> Tuple[int, int]:
        """Remember the current (position, line) pair."""
        return (self.pos, self.line)

    def reset(self, mark: Tuple[int, int]) -> None:
        """Rewind to a pair returned by mark()."""
        self.pos, self.line = mark

    def span(self, start: int) -> str:
        """Return the text consumed since position start."""
        return self.text[start:self.pos]


class Tokenizer:
    """Modal tokenizer that turns dialect source into tokens one at a time."""

    def __init__(self, source: str, path: str = '') -> None:
        """
        Initialize the tokenizer.

        Args:
            source: The complete source text
            path: Source path, used in error positions only
        """
        self.cursor = SourceCursor(source)
        self.path: str = path
        self.mode: LexerMode = LexerMode.NORMAL

    def __iter__(self) -> Iterator[Token]:
        """Yield tokens until the end of input, excluding the EOF token."""
        while True:
            token = self.next_token()
            if token.kind == TokenKind.EOF:
                return
            yield token

    def next_token(self) -> Token:
        """
        Lex the next token.

        Returns:
            The next token, or an EOF token once the input is exhausted

        Raises:
            UnbalancedDelimiterError: A directive argument is never closed
        """
        cursor = self.cursor
        if cursor.at_end:
            return Token(TokenKind.EOF, line=cursor.line)

        start = cursor.pos
        char = cursor.advance()

        if char in ('{', '}', '@'):
            token = self._make(TokenKind.LITERAL, char, start)
        elif char == ESCAPE:
            token = self._lex_escape(start)
        elif char == '$':
            token = self._lex_equation(start)
        elif char == '%':
            token = self._lex_comment(start)
        elif char == '&' and self.mode == LexerMode.TABLE:
            token = self._make(TokenKind.UNBREAKABLE_SPACE, char, start)
        elif char == '~' and self.mode != LexerMode.LITERAL:
            token = self._make(TokenKind.UNBREAKABLE_SPACE, char, start)
        else:
            token = self._lex_text(start)

        logger.debug("%r", token)
        return token

    def _make(self, kind: TokenKind, text: str, start: int, **args) -> Token:
        """Build a token whose raw span runs from start to the cursor."""
        return Token(kind, text, self.cursor.line, raw=self.cursor.span(start), **args)

    def _lex_escape(self, start: int) -> Token:
        """Handle the character(s) following an escape character."""
        cursor = self.cursor
        if cursor.at_end:
            return self._make(TokenKind.TEXT, ESCAPE, start)

        char = cursor.advance()
        if char == ESCAPE:
            # Forced line break
            return self._make(TokenKind.TEXT, '\n', start)
        if char in ('{', '}'):
            return self._make(TokenKind.LITERAL, char, start)

        name = [char]
        if _is_name_char(char):
            while not cursor.at_end and _is_name_char(cursor.peek()):
                name.append(cursor.advance())
        directive = ''.join(name)

        bracket_arg: Optional[str] = None
        brace_args: List[str] = []

        if cursor.peek() == '[':
            bracket_arg = self._scan_balanced('[', ']')
        if cursor.peek() == '|':
            brace_args.append(self._scan_balanced('|', '|'))

        # \pnum takes no arguments; the space after it belongs to the text
        if directive != 'pnum':
            mark = cursor.mark()
            self._skip_whitespace()
            while cursor.peek() == '{':
                brace_args.append(self._scan_balanced('{', '}'))
                mark = cursor.mark()
                self._skip_whitespace()
            cursor.reset(mark)

        token = self._make(TokenKind.DIRECTIVE, directive, start,
                           bracket_arg=bracket_arg, brace_args=brace_args)
        self._update_mode(token)
        return token

    def _lex_equation(self, start: int) -> Token:
        """Handle inline math; equations never span lines."""
        cursor = self.cursor
        payload = []
        while not cursor.at_end and cursor.peek() not in ('$', '\n'):
            payload.append(cursor.advance())
        if cursor.peek() == '$':
            cursor.advance()
        return self._make(TokenKind.EQUATION, ''.join(payload), start)

    def _lex_comment(self, start: int) -> Token:
        """Handle a comment through the end of its line."""
        cursor = self.cursor
        while not cursor.at_end:
            if cursor.advance() == '\n':
                break
        return self._make(TokenKind.COMMENT, cursor.span(start), start)

    def _lex_text(self, start: int) -> Token:
        """Accumulate plain text up to the next special character."""
        cursor = self.cursor
        while not cursor.at_end and cursor.peek() not in SPECIAL_CHARS:
            cursor.advance()
        return self._make(TokenKind.TEXT, cursor.span(start), start)

    def _skip_whitespace(self) -> None:
        """Consume ASCII whitespace, including newlines."""
        cursor = self.cursor
        while not cursor.at_end and cursor.peek() in WHITESPACE:
            cursor.advance()

    def _scan_balanced(self, open_delim: str, close_delim: str) -> str:
        """
        Scan a balanced argument starting at an opening delimiter.

        Escaped characters are copied with their escape and never count
        towards the nesting depth.

        Args:
            open_delim: Opening delimiter, under the cursor
            close_delim: Closing delimiter

        Returns:
            The argument text without its outer delimiters

        Raises:
            UnbalancedDelimiterError: Input ends before the argument closes
        """
        cursor = self.cursor
        position = (self.path, cursor.line)
        cursor.advance()

        depth = 1
        buffer: List[str] = []
        while True:
            if cursor.at_end:
                raise UnbalancedDelimiterError(open_delim, close_delim, position)
            char = cursor.advance()

            if char == ESCAPE:
                buffer.append(char)
                if cursor.at_end:
                    raise UnbalancedDelimiterError(open_delim, close_delim, position)
                buffer.append(cursor.advance())
                continue

            # Close is checked first so that |...| terminates
            if char == close_delim:
                depth -= 1
                if depth == 0:
                    return ''.join(buffer)
            elif char == open_delim:
                depth += 1
            buffer.append(char)

    def _update_mode(self, token: Token) -> None:
        """Switch mode on begin/end of a recognized environment."""
        if token.text not in ('begin', 'end'):
            return
        mode = MODE_ENVIRONMENTS.get(token.first_arg)
        if mode is None:
            return
        self.mode = mode if token.text == 'begin' else LexerMode.NORMAL


def _is_name_char(char: str) -> bool:
    """Directive names are ASCII letters, digits and underscores."""
    return (char.isascii() and char.isalnum()) or char == '_'


def tokenize(source: str, path: str = '') -> List[Token]:
    """
    Convert dialect source to a list of tokens, ending with EOF.

    Args:
        source: The source text to tokenize
        path: Source path for error positions

    Returns:
        List of tokens
    """
    tokenizer = Tokenizer(source, path)
    tokens = list(tokenizer)
    tokens.append(tokenizer.next_token())
    return tokens
