"""
# Paste-Transform: cli.py

Licensed under "MIT No Attribution" (MIT-0), see LICENSE.

Command-line interface.
"""

import argparse
import json
import sys
from typing import Any, Optional

from pastetransform._version import __version__
from pastetransform.authorities import TransformAuthority
from pastetransform.compilation import LINK_STATUS_OK, LinkDiagnosis, diagnose_links
from pastetransform.constants import COMMAND_LINE_ERROR_EXIT_CODE, DEFAULT_SETTINGS_FILE_NAME, GENERIC_ERROR_EXIT_CODE

DESCRIPTION = '''
    Transform text with Paste-Transform rules (first matching rule wins).
'''
TEXT_HELP = '''
    text to be transformed (each argument separately);
    if none is given, standard input is transformed as a whole
'''
SETTINGS_HELP = f'''
    name of JSON settings file (default `{DEFAULT_SETTINGS_FILE_NAME}`;
    if the file does not exist, the built-in rules are used)
'''
MIGRATE_MODE_HELP = '''
    write the migrated settings back to the settings file
'''
CHECK_MODE_HELP = '''
    report, for every link, whether it compiles to a rule (and if not, why not)
'''
VERBOSE_MODE_HELP = '''
    run in verbose (debug) mode (prints every transformation applied)
'''


def parse_command_line_arguments(arguments: Optional[list[str]] = None) -> argparse.Namespace:
    argument_parser = argparse.ArgumentParser(description=DESCRIPTION)
    argument_parser.add_argument(
        '-v', '--version',
        action='version',
        version=f'{argument_parser.prog} version {__version__}',
    )
    argument_parser.add_argument(
        '-s', '--settings',
        dest='settings_file_name',
        default=DEFAULT_SETTINGS_FILE_NAME,
        help=SETTINGS_HELP,
        metavar='settings.json',
    )
    argument_parser.add_argument(
        '-m', '--migrate',
        dest='migrate_mode_enabled',
        action='store_true',
        help=MIGRATE_MODE_HELP,
    )
    argument_parser.add_argument(
        '-c', '--check',
        dest='check_mode_enabled',
        action='store_true',
        help=CHECK_MODE_HELP,
    )
    argument_parser.add_argument(
        '-x', '--verbose',
        dest='verbose_mode_enabled',
        action='store_true',
        help=VERBOSE_MODE_HELP,
    )
    argument_parser.add_argument(
        'texts',
        default=[],
        help=TEXT_HELP,
        metavar='text',
        nargs='*',
    )

    return argument_parser.parse_args(arguments)


def remove_trailing_newline(string: str) -> str:
    if string.endswith('\n'):
        return string[:-1]

    return string


def load_settings_file(settings_file_name: str) -> Optional[Any]:
    """
    Load the last-saved settings blob, or `None` if never saved.
    """
    try:
        with open(settings_file_name, 'r', encoding='utf-8') as settings_file:
            return json.load(settings_file)
    except FileNotFoundError:
        return None
    except json.JSONDecodeError as json_decode_error:
        print(f'error: settings file `{settings_file_name}` is not valid JSON: {json_decode_error}', file=sys.stderr)
        sys.exit(GENERIC_ERROR_EXIT_CODE)
    except (IOError, UnicodeDecodeError):
        print(f'error: cannot read from `{settings_file_name}`', file=sys.stderr)
        sys.exit(GENERIC_ERROR_EXIT_CODE)


def save_settings_file(settings_file_name: str, blob: dict[str, Any]):
    try:
        with open(settings_file_name, 'w', encoding='utf-8') as settings_file:
            json.dump(blob, settings_file, ensure_ascii=False, indent=2)
            settings_file.write('\n')
        print(f'success: wrote to `{settings_file_name}`', file=sys.stderr)
    except IOError:
        print(f'error: cannot write to `{settings_file_name}`', file=sys.stderr)
        sys.exit(GENERIC_ERROR_EXIT_CODE)


def format_link_diagnosis_line(authority: 'TransformAuthority', link_diagnosis: 'LinkDiagnosis') -> str:
    link = link_diagnosis.link
    collections = authority.collections
    pattern_text_from_id = {pattern.id_: pattern.text for pattern in collections.patterns}
    replacer_text_from_id = {replacer.id_: replacer.text for replacer in collections.replacers}

    pattern_text = pattern_text_from_id.get(link.pattern_id, '?')
    replacer_text = replacer_text_from_id.get(link.replacer_id, '?')
    line = f'{link_diagnosis.status}: #{link.id_} /{pattern_text}/ --> "{replacer_text}"'

    if link_diagnosis.error_message is not None:
        line += f' ({link_diagnosis.error_message})'
    if link.comment:
        line += f'  # {link.comment}'

    return line


def check_links(authority: 'TransformAuthority') -> bool:
    """
    Print a diagnosis line per link; return whether every enabled link compiles.
    """
    all_enabled_links_compile = True
    for link_diagnosis in diagnose_links(authority.collections):
        print(format_link_diagnosis_line(authority, link_diagnosis))
        if link_diagnosis.link.enabled and link_diagnosis.status != LINK_STATUS_OK:
            all_enabled_links_compile = False

    return all_enabled_links_compile


def main(arguments: Optional[list[str]] = None):
    parsed_arguments = parse_command_line_arguments(arguments)
    settings_file_name = parsed_arguments.settings_file_name
    migrate_mode_enabled = parsed_arguments.migrate_mode_enabled
    check_mode_enabled = parsed_arguments.check_mode_enabled
    verbose_mode_enabled = parsed_arguments.verbose_mode_enabled
    texts = parsed_arguments.texts

    if check_mode_enabled and len(texts) > 0:
        print('error: option -c (or --check) cannot be used with positional argument', file=sys.stderr)
        sys.exit(COMMAND_LINE_ERROR_EXIT_CODE)

    raw_blob = load_settings_file(settings_file_name)
    authority = TransformAuthority.from_blob(raw_blob)

    if migrate_mode_enabled:
        save_settings_file(settings_file_name, authority.to_blob())

    if verbose_mode_enabled:
        authority.debug_mode = True

    if check_mode_enabled:
        if not check_links(authority):
            sys.exit(GENERIC_ERROR_EXIT_CODE)
        return

    if migrate_mode_enabled and len(texts) == 0:
        return

    if len(texts) == 0:
        texts = [remove_trailing_newline(sys.stdin.read())]

    for text in texts:
        print(authority.transform(text))


if __name__ == '__main__':
    main()
