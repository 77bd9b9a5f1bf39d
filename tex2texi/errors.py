from typing import Optional, Tuple


class ConversionError(Exception):
    """Base class for conversion errors."""

    def __init__(self, message: str, position: Optional[Tuple[str, int]] = None) -> None:
        """
        Initialize a conversion error.

        Args:
            message: Error message
            position: (path, line) position where error occurred
        """
        super().__init__(message)
        self.position: Optional[Tuple[str, int]] = position
        self.message: str = message

    def __str__(self) -> str:
        """Format the error message with position if available."""
        if self.position:
            path, line = self.position
            return f"{path or '<input>'}:{line}: {self.message}"
        return self.message


class UnbalancedDelimiterError(ConversionError):
    """Error raised when a delimited argument is never closed."""

    def __init__(
        self,
        open_delim: str,
        close_delim: str,
        position: Tuple[str, int]
    ) -> None:
        """
        Initialize an unbalanced delimiter error.

        Args:
            open_delim: Opening delimiter of the argument
            close_delim: Closing delimiter that was never found
            position: (path, line) where the argument was opened
        """
        message = f"Unterminated '{open_delim}...{close_delim}' argument"
        super().__init__(message, position)
        self.open_delim: str = open_delim
        self.close_delim: str = close_delim
