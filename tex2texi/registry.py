import logging
from typing import Optional, Set

logger = logging.getLogger(__name__)


class DiagnosticsRegistry:
    """Deduplicating sink for unrecognized-command warnings.

    One instance lives for a whole run and is handed to every converter,
    nested ones included, so each (command, argument) pair is reported once.
    """

    def __init__(self) -> None:
        """Initialize an empty registry."""
        self.seen: Set[str] = set()

    def report_unrecognized(
        self,
        path: str,
        line: int,
        name: str,
        argument: Optional[str] = None
    ) -> bool:
        """
        Report an unrecognized directive unless it was already reported.

        Args:
            path: Source path the directive was found in
            line: Line the directive finished on
            name: Directive name
            argument: Distinguishing argument (environment name for begin/end)

        Returns:
            True if a warning was emitted, False if it was a duplicate
        """
        key = name + (argument or '')
        if key in self.seen:
            return False
        self.seen.add(key)

        command = f"\\{name}{{{argument}}}" if argument is not None else f"\\{name}"
        logger.warning("%s:%d: Warning: Unrecognized command '%s'", path, line, command)
        return True

    def __contains__(self, key: object) -> bool:
        return key in self.seen

    def __len__(self) -> int:
        return len(self.seen)
