"""
# Paste-Transform: constants.py

Licensed under "MIT No Attribution" (MIT-0), see LICENSE.

Constants.
"""

GENERIC_ERROR_EXIT_CODE = 1
COMMAND_LINE_ERROR_EXIT_CODE = 2
VERBOSE_MODE_DIVIDER_SYMBOL_COUNT = 48

CURRENT_FORMAT_VERSION = 300
DEFAULT_SETTINGS_FILE_NAME = 'pastetransform.json'

PATTERN_ID_PREFIX = 'p'
REPLACER_ID_PREFIX = 'r'
LINK_ID_PREFIX = 'l'

PLAIN_TEXT_CONTENT_TYPE = 'text/plain'

# Substituted for missing or wrongly typed per-link fields in legacy (or hand-edited) blobs
LEGACY_DEFAULT_FROM_FIELD = {
    'enabled': True,
    'comment': '',
}

# Substituted for missing or wrongly typed top-level settings
SETTINGS_DEFAULT_FROM_KEY = {
    'active': True,
    'debugMode': False,
}

# Rules seeded into a configuration that has never been saved
DEFAULT_PATTERN_TEXTS = [
    r'^https://github.com/[^/]+/([^/]+)/issues/(\d+)$',
    r'^https://github.com/[^/]+/([^/]+)/pull/(\d+)$',
    r'^https://github.com/[^/]+/([^/]+)$',
    r'^https://\w+.wikipedia.org/wiki/([^\s]+)$',
]
DEFAULT_REPLACER_TEXTS = [
    '[🐈‍⬛🔨 $1#$2]($&)',
    '[🐈‍⬛🛠︎ $1#$2]($&)',
    '[🐈‍⬛ $1]($&)',
    '[📖 $1]($&)',
]
