"""
# Paste-Transform: templates.py

Licensed under "MIT No Attribution" (MIT-0), see LICENSE.

Replacer template expansion.

A replacer template is copied verbatim once per match, except for the following placeholders:
- `$$` inserts a literal `$`;
- `$&` inserts the whole match;
- `` $` `` inserts the portion of the string before the match;
- `$'` inserts the portion of the string after the match;
- `$«n»` or `$«nn»` inserts capture group «n» (or «nn»),
  or the empty string if that group did not participate in the match;
- `$<«name»>` inserts the named capture group «name».

A two-digit reference `$«nn»` is taken only if the pattern has group «nn»;
otherwise the reference is the single digit `$«n»` followed by a literal digit.
References to groups the pattern does not have (including `$0`) are left literal,
as is a `$<«name»>` for which the pattern has no such named group.
"""

import re
from typing import Callable, NamedTuple, Union

from pastetransform.utilities import none_to_empty_string

PLACEHOLDER_PATTERN_COMPILED = re.compile(
    pattern=r'''
        [$]
        (?:
            (?P<dollar> [$] )
                |
            (?P<whole_match> [&] )
                |
            (?P<before_match> [`] )
                |
            (?P<after_match> ['] )
                |
            (?P<group_digits> [0-9]{1,2} )
                |
            < (?P<group_name> [^>]* ) >
        )
    ''',
    flags=re.ASCII | re.VERBOSE,
)


class GroupReference(NamedTuple):
    group: Union[int, str]


class SpecialReference(NamedTuple):
    kind: str


TemplatePart = Union[str, GroupReference, SpecialReference]


def resolve_group_digits(group_digits: str, group_count: int) -> tuple[list['TemplatePart'], bool]:
    """
    Resolve the digits following `$` against the number of capture groups.

    Returns the parts to emit, and whether a group reference was resolved.
    """
    if len(group_digits) == 2:
        two_digit_group = int(group_digits)
        if 1 <= two_digit_group <= group_count:
            return [GroupReference(two_digit_group)], True

    one_digit_group = int(group_digits[0])
    if 1 <= one_digit_group <= group_count:
        return [GroupReference(one_digit_group), group_digits[1:]], True

    return [], False


def parse_template(template: str, group_count: int, group_names: set[str]) -> list['TemplatePart']:
    parts: list['TemplatePart'] = []
    literal_start = 0

    for placeholder_match in PLACEHOLDER_PATTERN_COMPILED.finditer(template):
        if placeholder_match.group('dollar') is not None:
            placeholder_parts = ['$']
        elif placeholder_match.group('whole_match') is not None:
            placeholder_parts = [SpecialReference('WHOLE_MATCH')]
        elif placeholder_match.group('before_match') is not None:
            placeholder_parts = [SpecialReference('BEFORE_MATCH')]
        elif placeholder_match.group('after_match') is not None:
            placeholder_parts = [SpecialReference('AFTER_MATCH')]
        elif placeholder_match.group('group_digits') is not None:
            placeholder_parts, is_resolved = resolve_group_digits(placeholder_match.group('group_digits'), group_count)
            if not is_resolved:
                continue
        else:
            group_name = placeholder_match.group('group_name')
            if group_name not in group_names:
                continue
            placeholder_parts = [GroupReference(group_name)]

        parts.append(template[literal_start:placeholder_match.start()])
        parts.extend(placeholder_parts)
        literal_start = placeholder_match.end()

    parts.append(template[literal_start:])

    return [part for part in parts if part != '']


def expand_parts(parts: list['TemplatePart'], match: re.Match) -> str:
    pieces = []
    for part in parts:
        if isinstance(part, GroupReference):
            pieces.append(none_to_empty_string(match.group(part.group)))
        elif isinstance(part, SpecialReference):
            if part.kind == 'WHOLE_MATCH':
                pieces.append(match.group())
            elif part.kind == 'BEFORE_MATCH':
                pieces.append(match.string[:match.start()])
            else:
                pieces.append(match.string[match.end():])
        else:
            pieces.append(part)

    return ''.join(pieces)


def build_substitute_function(template: str, pattern_compiled: re.Pattern) -> Callable[[re.Match], str]:
    """
    Build a substitute function (for `re.sub`) expanding `template` against matches of `pattern_compiled`.

    The template is parsed once, here, rather than per match.
    """
    parts = parse_template(template, pattern_compiled.groups, set(pattern_compiled.groupindex))

    def substitute_function(match: re.Match) -> str:
        return expand_parts(parts, match)

    return substitute_function


def expand_template(template: str, match: re.Match) -> str:
    return build_substitute_function(template, match.re)(match)
