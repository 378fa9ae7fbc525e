"""
Central configuration for ignore file processing
"""

# Name used in error messages and as the logger namespace of the stream stage
PLUGIN_NAME = "ignore-filter"

# Rule file looked for in every directory when none is configured
DEFAULT_IGNORE_FILENAME = ".ignore"

# Number of records the stream stage checks at once
DEFAULT_CONCURRENCY = 64

# Encoding of rule files
RULE_FILE_ENCODING = "utf-8"

# Undecodable bytes become U+FFFD instead of failing the read
RULE_FILE_ERRORS = "replace"
