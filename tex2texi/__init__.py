__version__ = '0.1.0'

from .converter import TexinfoConverter, convert, convert_string
from .errors import ConversionError, UnbalancedDelimiterError
from .lexer import LexerMode, Tokenizer, tokenize
from .registry import DiagnosticsRegistry
from .tokens import Token, TokenKind

__all__ = [
    'ConversionError',
    'DiagnosticsRegistry',
    'LexerMode',
    'TexinfoConverter',
    'Token',
    'TokenKind',
    'Tokenizer',
    'UnbalancedDelimiterError',
    'convert',
    'convert_string',
    'tokenize',
]
