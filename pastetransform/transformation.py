"""
# Paste-Transform: transformation.py

Licensed under "MIT No Attribution" (MIT-0), see LICENSE.

First-match-wins transformation.

Only the first rule (in order) whose pattern matches anywhere in the string is applied,
but it is applied to all of its matches.
"""

from typing import Iterable, Optional

from pastetransform.compilation import CompiledRule


def find_winning_rule(rules: Iterable['CompiledRule'], string: str) -> Optional['CompiledRule']:
    for rule in rules:
        if rule.pattern_compiled.search(string) is not None:
            return rule

    return None


def transform(rules: Iterable['CompiledRule'], string: Optional[str]) -> str:
    if not string:
        return ''

    rule = find_winning_rule(rules, string)
    if rule is None:
        return string

    return rule.pattern_compiled.sub(rule.substitute_function, string)
