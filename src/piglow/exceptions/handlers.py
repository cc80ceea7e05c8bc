"""
Centralized error handling utilities.

Each layer translates errors to be more useful at the next level up:

```
┌─────────────────────────────────────────┐
│  USER LAYER (CLI)                       │
│  - Formats error.user_message           │
│  - Shows error.recovery_hint            │
└─────────────────────────────────────────┘
                  ↑  PiGlowError
┌─────────────────────────────────────────┐
│  LIBRARY LAYER (controller, codec)      │
│  - Converts low-level exceptions        │
│  - Adds context and recovery hints      │
└─────────────────────────────────────────┘
                  ↑  OSError, ValidationError
┌─────────────────────────────────────────┐
│  LOW LEVEL (smbus2, file I/O, pydantic) │
└─────────────────────────────────────────┘
```

## Quick Reference

| Scenario | Use This |
|----------|----------|
| Opening the bus failed | `raise wrap_transport_error(e, bus=1) from e` |
| Writing to the bus failed | `raise wrap_transport_error(e, bus=1, address=0x54, data=b"...") from e` |
| Config file failed validation | `raise wrap_pydantic_error(e, str(path)) from e` |
"""

import errno
from typing import Optional

from .base import PiGlowError
from .config import ConfigFileInvalidError, ConfigValidationError
from .transport import (
    BusNotFoundError,
    TransportError,
    TransportOpenError,
    TransportWriteError,
)


def wrap_transport_error(
    error: Exception,
    bus: Optional[int] = None,
    address: Optional[int] = None,
    data: Optional[bytes] = None,
) -> TransportError:
    """
    Convert low-level I2C errors to PiGlow exceptions.

    When ``address`` is given the error is treated as a failed write,
    otherwise as a failure to open the bus.

    Args:
        error: The original exception from the I2C library or OS
        bus: The I2C bus number involved
        address: Device address of a failed write
        data: Bytes of a failed write

    Returns:
        A TransportError with appropriate type and message
    """
    if isinstance(error, TransportError):
        return error

    error_msg = str(error)

    if address is not None:
        return TransportWriteError(bus, address, data or b"", error_msg)

    if isinstance(error, FileNotFoundError) or getattr(error, "errno", None) == errno.ENOENT:
        return BusNotFoundError(bus, original_error=error_msg)

    return TransportOpenError(bus, original_error=error_msg)

def wrap_pydantic_error(error: Exception, file_path: str) -> PiGlowError:
    """
    Convert Pydantic validation errors to PiGlow exceptions.

    Args:
        error: The Pydantic ValidationError
        file_path: Path to the config file that failed validation

    Returns:
        A ConfigurationError with appropriate type and message
    """
    from pydantic import ValidationError

    error_msg = str(error)

    # Format: "Invalid JSON: <actual error> [type=json_invalid, ..."
    if "Invalid JSON" in error_msg or "json_invalid" in error_msg:
        if "Invalid JSON:" in error_msg:
            parse_error = error_msg.split("Invalid JSON:")[1].split("[type=")[0].strip()
        else:
            parse_error = error_msg

        return ConfigFileInvalidError(file_path, parse_error)

    if isinstance(error, ValidationError):
        errors = error.errors()
        if len(errors) == 1:
            first_error = errors[0]
            field = ".".join(str(loc) for loc in first_error.get('loc', ('unknown',)))
            return ConfigValidationError(
                field=field,
                value=first_error.get('input', None),
                error_msg=first_error.get('msg', 'validation failed'),
                file_path=file_path
            )
        if errors:
            error_lines = []
            for err in errors:
                field = ".".join(str(loc) for loc in err.get('loc', ('unknown',)))
                error_lines.append(f"  - {field}: {err.get('msg', 'validation failed')}")

            return ConfigValidationError(
                field="multiple fields",
                value=None,
                error_msg=f"{len(errors)} validation errors:\n" + "\n".join(error_lines),
                file_path=file_path
            )

    return ConfigValidationError(
        field="unknown",
        value=None,
        error_msg=error_msg,
        file_path=file_path
    )

def format_error_for_display(error: Exception) -> tuple[str, Optional[str]]:
    """
    Format an exception for user display.

    Args:
        error: The exception to format

    Returns:
        Tuple of (user_message, recovery_hint or None)
    """
    if isinstance(error, PiGlowError):
        return error.user_message, error.recovery_hint

    error_type = type(error).__name__
    return f"{error_type}: {error}", None
