"""
Custom exception hierarchy for pedalhmi.

## Exception Hierarchy

```
PedalHmiError (base)
├── ProtocolError
│   ├── UnknownCommandError
│   └── CommandArgumentError
├── ConnectionLimitError
│   └── FrameTooLargeError
├── ServerBindError
├── ConfigurationError
│   ├── ConfigFileInvalidError
│   └── ConfigValidationError
└── MetadataError
    └── BundleParseError
```

Only `ServerBindError` is fatal. Everything else is recovered where it is
raised: protocol errors become a failure acknowledgement, connection limit
errors drop the offending session, configuration errors on the plugin cache
document mean a cold cache, metadata errors fall back to derived labels.

See `pedalhmi.exceptions.handlers` for utilities to handle these exceptions systematically.
"""

from .base import PedalHmiError
from .config import ConfigFileInvalidError, ConfigurationError, ConfigValidationError
from .handlers import (
    ErrorCollector,
    ErrorContext,
    collect_errors,
    format_error_for_display,
    handle_errors,
    wrap_pydantic_error,
)
from .metadata import BundleParseError, MetadataError
from .protocol import (
    CommandArgumentError,
    ConnectionLimitError,
    FrameTooLargeError,
    ProtocolError,
    ServerBindError,
    UnknownCommandError,
)

__all__ = [
    # Base
    "PedalHmiError",
    # Protocol
    "CommandArgumentError",
    "ConnectionLimitError",
    "FrameTooLargeError",
    "ProtocolError",
    "ServerBindError",
    "UnknownCommandError",
    # Config
    "ConfigFileInvalidError",
    "ConfigValidationError",
    "ConfigurationError",
    # Metadata
    "BundleParseError",
    "MetadataError",
    # Handlers
    "ErrorCollector",
    "ErrorContext",
    "collect_errors",
    "format_error_for_display",
    "handle_errors",
    "wrap_pydantic_error",
]
