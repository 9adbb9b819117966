# -*- coding: utf-8 -*-

# remote hardware service
DEFAULT_HOST_ADDR = "127.0.0.1"
DEFAULT_PORT = 49601
DEFAULT_RETRIES = 3  # resends of an unanswered RPC request before giving up
DEFAULT_TIMEOUT = 5  # seconds per RPC reply

DEFAULT_LOGLEVEL = "INFO"
TEST_LOGLEVEL = "TRACE"
SINGLE_LINE_ERR_LOG = False  # reformat tracebacks into a single line for CommsError
