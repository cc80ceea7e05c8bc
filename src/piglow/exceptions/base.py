"""Base exception class for PiGlow.

Everything the library raises on purpose derives from PiGlowError, so a
caller driving the board can catch bad LED values, a missing I2C bus, a
crashed controller and a broken config file with one ``except`` clause.
Each error carries two texts: a short one for the CLI and a detailed one
for the log file.
"""

from typing import Optional


class PiGlowError(Exception):
    """
    Base exception for all PiGlow errors.

    Attributes:
        user_message: Short message shown by the CLI
        technical_message: Detailed message written to the log
        recoverable: False when the controller that raised it is gone
        recovery_hint: What to check or change, if known
    """

    def __init__(
        self,
        user_message: str,
        *,
        technical_message: Optional[str] = None,
        recoverable: bool = False,
        recovery_hint: Optional[str] = None,
    ):
        super().__init__(user_message)
        self.user_message = user_message
        self.technical_message = technical_message or user_message
        self.recoverable = recoverable
        self.recovery_hint = recovery_hint

    def __str__(self) -> str:
        return self.user_message

    def get_full_message(self) -> str:
        """Message plus the recovery hint, as printed by the CLI."""
        if not self.recovery_hint:
            return self.user_message
        return f"{self.user_message}\n\nSuggestion: {self.recovery_hint}"
