"""
# Paste-Transform: compilation.py

Licensed under "MIT No Attribution" (MIT-0), see LICENSE.

Compilation of links into executable rules.

Links are compiled in stored order, which is the order of precedence.
A link is excluded (never fatally) if it is disabled, if either endpoint fails to resolve,
or if its pattern fails to compile as a regular expression.
"""

import re
from typing import Any, Callable, NamedTuple, Optional

from pastetransform.entities import EntityCollections, Link
from pastetransform.templates import build_substitute_function

LINK_STATUS_OK = 'OK'
LINK_STATUS_DISABLED = 'DISABLED'
LINK_STATUS_DANGLING = 'DANGLING'
LINK_STATUS_INVALID_PATTERN = 'INVALID_PATTERN'


class CompiledRule(NamedTuple):
    link_id: str
    pattern_compiled: re.Pattern
    replacer_template: str
    substitute_function: Callable[[re.Match], str]


class LinkDiagnosis(NamedTuple):
    link: 'Link'
    status: str
    error_message: Optional[str] = None


class PatternCompilation(NamedTuple):
    pattern_compiled: Optional[re.Pattern]
    error_message: Optional[str]


def compile_pattern(pattern_text: str) -> 'PatternCompilation':
    """
    Compile a pattern, reporting (rather than raising) failure.

    Besides `re.error`, pathological patterns can overflow the compiler,
    e.g. deeply nested groups (`RecursionError`) or huge repeat counts (`OverflowError`).
    """
    try:
        return PatternCompilation(re.compile(pattern_text), None)
    except (re.error, RecursionError, OverflowError) as exception:
        return PatternCompilation(None, str(exception))


def diagnose_links(collections: 'EntityCollections') -> list['LinkDiagnosis']:
    """
    Report, for every link in order, whether it compiles to a rule, and if not, why not.
    """
    pattern_text_from_id = {pattern.id_: pattern.text for pattern in collections.patterns}
    replacer_ids = {replacer.id_ for replacer in collections.replacers}

    diagnoses = []
    for link in collections.links:
        if not link.enabled:
            diagnoses.append(LinkDiagnosis(link, LINK_STATUS_DISABLED))
            continue

        if link.pattern_id not in pattern_text_from_id or link.replacer_id not in replacer_ids:
            diagnoses.append(LinkDiagnosis(link, LINK_STATUS_DANGLING))
            continue

        pattern_compilation = compile_pattern(pattern_text_from_id[link.pattern_id])
        if pattern_compilation.pattern_compiled is None:
            diagnoses.append(LinkDiagnosis(link, LINK_STATUS_INVALID_PATTERN, pattern_compilation.error_message))
            continue

        diagnoses.append(LinkDiagnosis(link, LINK_STATUS_OK))

    return diagnoses


def compile_rules(collections: 'EntityCollections') -> list['CompiledRule']:
    pattern_text_from_id = {pattern.id_: pattern.text for pattern in collections.patterns}
    replacer_text_from_id = {replacer.id_: replacer.text for replacer in collections.replacers}

    rules = []
    for link in collections.links:
        if not link.enabled:
            continue

        try:
            pattern_text = pattern_text_from_id[link.pattern_id]
            replacer_text = replacer_text_from_id[link.replacer_id]
        except KeyError:
            continue

        pattern_compiled = compile_pattern(pattern_text).pattern_compiled
        if pattern_compiled is None:
            continue

        substitute_function = build_substitute_function(replacer_text, pattern_compiled)
        rules.append(CompiledRule(link.id_, pattern_compiled, replacer_text, substitute_function))

    return rules


def compile_blob(blob: dict[str, Any]) -> list['CompiledRule']:
    """
    Compile the rules of a current-generation settings blob.
    """
    return compile_rules(EntityCollections.from_blob(blob))
