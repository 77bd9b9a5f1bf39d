from enum import Enum
from typing import Any, Iterable, Optional


class TokenKind(Enum):
    """Enumeration of token kinds produced by the tokenizer."""

    DIRECTIVE = 1          # \name[bracket]{brace}...
    EQUATION = 2           # $...$
    COMMENT = 3            # % to end of line
    TEXT = 4               # Plain text
    LITERAL = 5            # { } @ and \{ \}
    UNBREAKABLE_SPACE = 6  # ~, or & inside a table

    EOF = 101              # End of input


class Token:
    """Represents a lexical token of the source dialect."""

    __slots__ = ('kind', 'text', 'bracket_arg', 'brace_args', 'line', 'raw')

    def __init__(
        self,
        kind: TokenKind,
        text: str = '',
        line: int = 1,
        bracket_arg: Optional[str] = None,
        brace_args: Iterable[str] = (),
        raw: str = ''
    ) -> None:
        """
        Initialize a token.

        Args:
            kind: Kind of the token
            text: Directive name, literal character or text payload
            line: Line on which the token finished lexing
            bracket_arg: Balanced [...] argument, directives only
            brace_args: Balanced {...} and |...| arguments in source order
            raw: Exact source span consumed by the token
        """
        object.__setattr__(self, 'kind', kind)
        object.__setattr__(self, 'text', text)
        object.__setattr__(self, 'line', line)
        object.__setattr__(self, 'bracket_arg', bracket_arg)
        object.__setattr__(self, 'brace_args', tuple(brace_args))
        object.__setattr__(self, 'raw', raw)

    def __setattr__(self, name: str, value: Any) -> None:
        raise AttributeError(f"Token is immutable, cannot set '{name}'")

    @property
    def first_arg(self) -> str:
        """First brace argument, or an empty string when there is none."""
        return self.brace_args[0] if self.brace_args else ''

    def __repr__(self) -> str:
        """Return a string representation of the token."""
        if self.kind == TokenKind.DIRECTIVE:
            bracket = f"[{self.bracket_arg}]" if self.bracket_arg is not None else ''
            braces = ''.join(f"{{{arg}}}" for arg in self.brace_args)
            return f"Token(DIRECTIVE, '{self.text}{bracket}{braces}', line {self.line})"
        return f"Token({self.kind.name}, {self.text!r}, line {self.line})"

    def __eq__(self, other: Any) -> bool:
        """
        Compare tokens for equality, ignoring the consumed source span.

        Args:
            other: Another object to compare with

        Returns:
            True if tokens are equal, False otherwise
        """
        if not isinstance(other, Token):
            return False
        return (self.kind == other.kind and
                self.text == other.text and
                self.bracket_arg == other.bracket_arg and
                self.brace_args == other.brace_args and
                self.line == other.line)

    def __hash__(self) -> int:
        return hash((self.kind, self.text, self.bracket_arg, self.brace_args, self.line))
