"""
Custom exception hierarchy for PiGlow.

## Exception Hierarchy

```
PiGlowError (base)
├── EncodingError
│   └── GammaInputError
├── TransportError
│   ├── TransportOpenError
│   │   └── BusNotFoundError
│   └── TransportWriteError
├── ControllerError
│   ├── ControllerNotRunningError
│   ├── ControllerTimeoutError
│   ├── ControllerCrashedError
│   ├── ControllerAlreadyRegisteredError
│   └── ControllerNotFoundError
└── ConfigurationError
    ├── ConfigFileInvalidError
    └── ConfigValidationError
```

All custom exceptions inherit from `PiGlowError`, which provides:

- `user_message`: Human-friendly message for display to users
- `technical_message`: Detailed message for logging
- `recoverable`: Whether the error can be recovered from
- `recovery_hint`: Optional suggestion for how to fix the issue

### Example: Malformed LED values

```python
from piglow.exceptions import EncodingError

try:
    controller.set_power([255] * 17)
except EncodingError as e:
    print(e.get_full_message())

# User sees: "Invalid power values: expected 18 values, got 17"
# Suggestion: "Pass 18 integers in 0..255, or an 18-byte buffer"
```

Encoding errors are raised before anything is queued, so nothing reaches
the bus. Transport write errors are fatal to the controller that hit them;
callers blocked in `wait()`/`stop()` see `ControllerCrashedError`.
"""

from .base import PiGlowError
from .config import ConfigFileInvalidError, ConfigurationError, ConfigValidationError
from .controller import (
    ControllerAlreadyRegisteredError,
    ControllerCrashedError,
    ControllerError,
    ControllerNotFoundError,
    ControllerNotRunningError,
    ControllerTimeoutError,
)
from .encoding import EncodingError, GammaInputError
from .handlers import (
    format_error_for_display,
    wrap_pydantic_error,
    wrap_transport_error,
)
from .transport import (
    BusNotFoundError,
    TransportError,
    TransportOpenError,
    TransportWriteError,
)

__all__ = [
    # Transport
    "BusNotFoundError",
    # Config
    "ConfigFileInvalidError",
    "ConfigValidationError",
    "ConfigurationError",
    # Controller
    "ControllerAlreadyRegisteredError",
    "ControllerCrashedError",
    "ControllerError",
    "ControllerNotFoundError",
    "ControllerNotRunningError",
    "ControllerTimeoutError",
    # Encoding
    "EncodingError",
    # Handlers
    "GammaInputError",
    # Base
    "PiGlowError",
    "TransportError",
    "TransportOpenError",
    "TransportWriteError",
    "format_error_for_display",
    "wrap_pydantic_error",
    "wrap_transport_error",
]
