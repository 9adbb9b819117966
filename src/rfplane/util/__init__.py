# -*- coding: utf-8 -*-
"""
Utility functions and constants for rfplane.

- Logging configuration and management (loguru sinks)
- Network and logging defaults shared by the RPC client and the CLI

Examples
--------
Logging to the terminal while driving a radio from a script:
```python
from rfplane.util import start_client_log
start_client_log(log_to_file=False, log_to_stdout=True, log_level="TRACE")
```

See Also
--------
rfplane.util.logging : Logging configuration
rfplane.util.defaults : Default constants
"""

from .defaults import (
    DEFAULT_HOST_ADDR,
    DEFAULT_LOGLEVEL,
    DEFAULT_PORT,
    DEFAULT_RETRIES,
    DEFAULT_TIMEOUT,
    SINGLE_LINE_ERR_LOG,
    TEST_LOGLEVEL,
)
from .logging import (
    clear_log,
    format_error_response,
    log_default_path_client,
    shutdown_client_log,
    start_client_log,
)

__all__ = [
    "DEFAULT_HOST_ADDR",
    "DEFAULT_LOGLEVEL",
    "DEFAULT_PORT",
    "DEFAULT_RETRIES",
    "DEFAULT_TIMEOUT",
    "SINGLE_LINE_ERR_LOG",
    "TEST_LOGLEVEL",
    "clear_log",
    "format_error_response",
    "log_default_path_client",
    "shutdown_client_log",
    "start_client_log",
]
