import io
import logging
import os
from typing import Callable, Dict, Optional, TextIO, Tuple

from .lexer import Tokenizer
from .registry import DiagnosticsRegistry
from .tokens import Token, TokenKind

logger = logging.getLogger(__name__)

INCLUDE_EXTENSION = '.tex'

# \include{xref} names the cross-reference index, which is not inlined
XREF_INCLUDE = 'xref'

SECTION_LEVELS: Dict[str, str] = {
    'rSec0': 'chapter',
    'rSec1': 'section',
    'rSec2': 'subsection',
    'rSec3': 'subsubsection',
    'rSec4': 'subsubheading',
}

# Inline directives whose argument is wrapped as-is, without conversion
INLINE_WRAPPERS: Dict[str, str] = {
    'emph': 'emph',
    'tcode': 'code',
    'grammarterm': 'code',
    'term': 'samp',
    'ref': 'ref',
}

# Environment name -> (opening markup, closing markup)
ENVIRONMENTS: Dict[str, Tuple[str, str]] = {
    'document': ('', ''),
    'itemize': ('@itemize @bullet', '@end itemize'),
    'enumerate': ('@enumerate', '@end enumerate'),
    'codeblock': ('@example', '@end example'),
    'ncsimplebnf': ('@smallexample', '@end smallexample'),
    'ncbnftab': ('@smallexample', '@end smallexample'),
    'tokentable': ('@multitable @columnfractions .25 .25 .25 .25\n@item',
                   '@end multitable'),
    'floattable': ('@float Table\n@multitable @columnfractions .5 .5\n@item',
                   '@end multitable\n@end float'),
}

FIXED_OUTPUT: Dict[str, str] = {
    'documentclass': '\\input texinfo  @c -*-texinfo-*-',
    'item': '@item',
    'enterexample': '[@emph{Example:}',
    'exitexample': '---@emph{end example}]',
    'enternote': '[@emph{Note:}',
    'exitnote': '---@emph{end note}]',
    'br': '@*',
}

# Declarations that are recognized but have no Texinfo counterpart
IGNORED = frozenset([
    'usepackage', 'input', 'makeindex', 'chapterstyle',
    'pagestyle', 'frontmatter', 'hyphenation',
])

TIE = '@tie{}'
COLUMN_BREAK = '\n@tab '


class TexinfoConverter:
    """Translates a dialect token stream into Texinfo markup."""

    def __init__(
        self,
        diagnostics: Optional[DiagnosticsRegistry] = None,
        include_dir: str = ''
    ) -> None:
        """
        Initialize the converter.

        Args:
            diagnostics: Registry shared by every converter of the run
            include_dir: Directory \\include arguments are resolved against
        """
        self.diagnostics = diagnostics if diagnostics is not None else DiagnosticsRegistry()
        self.include_dir = include_dir
        self.pnum = 1
        self.path = ''
        self.output: Optional[TextIO] = None

        self.rules: Dict[str, Callable[[Token], None]] = {}
        self._register_rules()

    def _register_rules(self) -> None:
        """Register emission rules for directives."""
        for name in SECTION_LEVELS:
            self.rules[name] = self.emit_section
        for name in INLINE_WRAPPERS:
            self.rules[name] = self.emit_inline
        for name in FIXED_OUTPUT:
            self.rules[name] = self.emit_fixed
        for name in IGNORED:
            self.rules[name] = self.emit_nothing
        self.rules['pnum'] = self.emit_pnum
        self.rules['footnote'] = self.emit_footnote
        self.rules['terminal'] = self.emit_terminal
        self.rules['include'] = self.emit_include
        self.rules['begin'] = self.emit_environment
        self.rules['end'] = self.emit_environment
        self.rules['indextext'] = self.emit_index
        self.rules['index'] = self.emit_index
        self.rules['opt'] = self.emit_opt

    def convert(self, source: TextIO, output: TextIO, path: str = '') -> None:
        """
        Drain a fresh tokenizer over source, writing Texinfo to output.

        Args:
            source: Readable text stream of dialect markup
            output: Writable text stream receiving Texinfo
            path: Source path used in diagnostics

        Raises:
            UnbalancedDelimiterError: The source contains an unclosed argument
        """
        self.path = path
        self.output = output
        self.pnum = 1

        for token in Tokenizer(source.read(), path):
            self.emit_token(token)

    def emit_token(self, token: Token) -> None:
        """Write the translation of a single token."""
        if token.kind == TokenKind.TEXT:
            self.write(token.text)
        elif token.kind == TokenKind.EQUATION:
            self.write(token.raw)
        elif token.kind == TokenKind.LITERAL:
            self.write('@' + token.text)
        elif token.kind == TokenKind.UNBREAKABLE_SPACE:
            self.write(COLUMN_BREAK if token.text == '&' else TIE)
        elif token.kind == TokenKind.COMMENT:
            self.write('\n')
        elif token.kind == TokenKind.DIRECTIVE:
            self.emit_directive(token)

    def emit_directive(self, token: Token) -> None:
        """Dispatch a directive to its rule, or report it as unrecognized."""
        rule = self.rules.get(token.text)
        if rule is None:
            self.diagnostics.report_unrecognized(self.path, token.line, token.text)
            return
        rule(token)

    def write(self, text: str) -> None:
        """Append text to the current output stream."""
        self.output.write(text)

    def convert_argument(self, text: str) -> str:
        """Run a fresh converter over a directive argument."""
        nested = TexinfoConverter(self.diagnostics, self.include_dir)
        buffer = io.StringIO()
        nested.convert(io.StringIO(text), buffer, self.path)
        return buffer.getvalue()

    def emit_section(self, token: Token) -> None:
        """
        Emit a node, a heading and an optional anchor, then reset pnum.

        Heading commands take the rest of their line as the title, so the
        converted title is folded onto one line and the line is ended.
        """
        level = SECTION_LEVELS[token.text]
        title = ' '.join(self.convert_argument(token.first_arg).split())
        self.write('@node\n')
        self.write(f'@{level} {title}\n')
        if token.bracket_arg is not None:
            self.write(f'@anchor{{{token.bracket_arg}}}')
        self.pnum = 1

    def emit_pnum(self, token: Token) -> None:
        """Emit the paragraph number and advance it."""
        self.write(f'{self.pnum}.')
        self.pnum += 1

    def emit_inline(self, token: Token) -> None:
        """Wrap the argument, unconverted, in its Texinfo command."""
        self.write(f'@{INLINE_WRAPPERS[token.text]}{{{token.first_arg}}}')

    def emit_fixed(self, token: Token) -> None:
        """Emit the argument-independent markup of the directive."""
        self.write(FIXED_OUTPUT[token.text])

    def emit_nothing(self, token: Token) -> None:
        """Recognized declaration without a Texinfo counterpart."""

    def emit_footnote(self, token: Token) -> None:
        """Emit a footnote around the converted argument."""
        self.write(f'@footnote{{{self.convert_argument(token.first_arg)}}}')

    def emit_terminal(self, token: Token) -> None:
        """Emit the converted argument directly."""
        self.write(self.convert_argument(token.first_arg))

    def emit_index(self, token: Token) -> None:
        """Emit a concept index entry for the argument."""
        self.write(f'@cindex {token.first_arg}')

    def emit_opt(self, token: Token) -> None:
        """Mark the argument as optional with a subscript."""
        self.write(f'{token.first_arg}@sub{{opt}}')

    def emit_environment(self, token: Token) -> None:
        """
        Emit the opening or closing markup of an environment.

        Args:
            token: A begin or end directive whose first argument names
                the environment
        """
        name = token.first_arg
        markers = ENVIRONMENTS.get(name)
        if markers is None:
            self.diagnostics.report_unrecognized(self.path, token.line, token.text, name)
            return
        self.write(markers[0] if token.text == 'begin' else markers[1])

    def emit_include(self, token: Token) -> None:
        """Inline the converted contents of an included file."""
        name = token.first_arg
        if name == XREF_INCLUDE:
            return

        include_path = os.path.join(self.include_dir, name + INCLUDE_EXTENSION)
        try:
            with open(include_path, encoding='utf-8') as source:
                text = source.read()
        except (OSError, UnicodeDecodeError) as exc:
            logger.error("%s:%d: Error: cannot include '%s': %s",
                         self.path, token.line, include_path, exc)
            return

        nested = TexinfoConverter(self.diagnostics, self.include_dir)
        nested.convert(io.StringIO(text), self.output, include_path)


def convert(
    source: TextIO,
    output: TextIO,
    path: str = '',
    diagnostics: Optional[DiagnosticsRegistry] = None,
    include_dir: str = ''
) -> None:
    """
    Convert a dialect stream to Texinfo.

    Args:
        source: Readable text stream of dialect markup
        output: Writable text stream receiving Texinfo
        path: Source path used in diagnostics
        diagnostics: Registry shared across the run; a new one if omitted
        include_dir: Directory \\include arguments are resolved against
    """
    TexinfoConverter(diagnostics, include_dir).convert(source, output, path)


def convert_string(
    text: str,
    path: str = '',
    diagnostics: Optional[DiagnosticsRegistry] = None,
    include_dir: str = ''
) -> str:
    """Convert dialect text and return the Texinfo output."""
    output = io.StringIO()
    convert(io.StringIO(text), output, path, diagnostics, include_dir)
    return output.getvalue()
