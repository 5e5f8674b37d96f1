from __future__ import annotations

APP_NAME = "Plain Trim Checker"
ORG_NAME = "PlainTrimChecker"
PROGRAM_TITLE = "Check Files for Plain Trimmed Text"

# Sentinel encoding names shown in the GUI and accepted by the CLI
LOCAL_ENCODING = "(local default)"
RAW_ENCODING = "(raw data bytes)"

SUFFIX_DEFAULT = " .java  .html  .txt  .xml "
SUFFIX_DELIMITERS = " +,:;|"

TEXT_BOTH = "plain trimmed text"
TEXT_PLAIN = "plain text"
TEXT_TRIM = "trimmed text"

EXIT_SUCCESS = 0
EXIT_FAILURE = 1
EXIT_UNKNOWN = 2

READ_BLOCK_SIZE = 64 * 1024
STATUS_INTERVAL_MS = 1000

FONT_SIZES = ["10", "12", "14", "16", "18", "20", "24", "30"]
DEFAULT_FONT_SIZE = 12
