"""
# Paste-Transform: authorities.py

Licensed under "MIT No Attribution" (MIT-0), see LICENSE.

The higher power that governs a transformation session.
"""

from typing import Any, Iterable, NamedTuple, Optional

from pastetransform.compilation import CompiledRule, compile_rules
from pastetransform.constants import CURRENT_FORMAT_VERSION, PLAIN_TEXT_CONTENT_TYPE, VERBOSE_MODE_DIVIDER_SYMBOL_COUNT
from pastetransform.entities import EntityCollections
from pastetransform.identifiers import IdentifierGenerator
from pastetransform.migrations import load_and_migrate
from pastetransform.transformation import find_winning_rule, transform


class PasteDecision(NamedTuple):
    replacement: Optional[str]
    suppress_default: bool


NO_CHANGE_DECISION = PasteDecision(replacement=None, suppress_default=False)


class TransformAuthority:
    """
    Object governing a transformation session.

    Owns the entity collections, the global `active` and `debug_mode` flags,
    and the compiled rules, which are recompiled lazily after any structural edit
    (tracked via the collections' revision).

    The global `active` flag is honoured by `handle_paste`, not by `transform`.
    """
    _collections: 'EntityCollections'
    _active: bool
    _debug_mode: bool
    _rules: list['CompiledRule']
    _rules_revision: Optional[int]

    def __init__(self, collections: 'EntityCollections', active: bool = True, debug_mode: bool = False):
        self._collections = collections
        self._active = active
        self._debug_mode = debug_mode
        self._rules = []
        self._rules_revision = None

    @classmethod
    def from_blob(cls, raw_blob: Any,
                  identifier_generator: Optional['IdentifierGenerator'] = None) -> 'TransformAuthority':
        """
        Load a session from the last-saved settings blob (`None` if never saved), migrating as necessary.
        """
        blob = load_and_migrate(raw_blob, identifier_generator)
        collections = EntityCollections.from_blob(blob, identifier_generator)

        return cls(collections, active=blob['active'], debug_mode=blob['debugMode'])

    def to_blob(self) -> dict[str, Any]:
        """
        Serialise the session into a settings blob to be persisted, pruning dangling links.
        """
        self._collections.prune_dangling_links()

        return {
            **self._collections.to_blob(),
            'formatVersion': CURRENT_FORMAT_VERSION,
            'active': self._active,
            'debugMode': self._debug_mode,
        }

    @property
    def collections(self) -> 'EntityCollections':
        return self._collections

    @property
    def active(self) -> bool:
        return self._active

    @active.setter
    def active(self, value: bool):
        self._active = value

    @property
    def debug_mode(self) -> bool:
        return self._debug_mode

    @debug_mode.setter
    def debug_mode(self, value: bool):
        self._debug_mode = value

    def toggle_active(self) -> bool:
        self._active = not self._active
        self.print_debug(f'Transformation {"activated" if self._active else "deactivated"}')

        return self._active

    @property
    def rules(self) -> list['CompiledRule']:
        revision = self._collections.revision
        if self._rules_revision != revision:
            self._rules = compile_rules(self._collections)
            self._rules_revision = revision

            if self._debug_mode:
                rule_ids = [f'#{rule.link_id}' for rule in self._rules]
                print(f'Rule queue: {rule_ids}\n')

        return self._rules

    def print_debug(self, message: str):
        if self._debug_mode:
            print(message)

    def print_transformation(self, string_before: str, string_after: str, rules: Iterable['CompiledRule']):
        winning_rule = find_winning_rule(rules, string_before)
        if winning_rule is None:
            rule_indicator = ' (no rule matched)'
        else:
            rule_indicator = f' by #{winning_rule.link_id}'

        print('<' * VERBOSE_MODE_DIVIDER_SYMBOL_COUNT + ' BEFORE')
        print(string_before)
        print('=' * VERBOSE_MODE_DIVIDER_SYMBOL_COUNT + rule_indicator)
        print(string_after)
        print('>' * VERBOSE_MODE_DIVIDER_SYMBOL_COUNT + ' AFTER')
        print()

    def transform(self, string: Optional[str]) -> str:
        rules = self.rules
        result = transform(rules, string)

        if self._debug_mode and string:
            self.print_transformation(string, result, rules)

        return result

    def handle_paste(self, content_types: Optional[Iterable[str]], plain_text: Optional[str],
                     default_prevented: bool = False) -> 'PasteDecision':
        """
        Decide what to do with a paste.

        Only a paste consisting of plain text alone is considered,
        and only if the session is active and no other handler has already dealt with the paste.
        If transformation changes the text, the replacement is returned along with a request to
        suppress default paste handling; otherwise the paste is left alone.
        """
        if not self._active:
            self.print_debug('Paste left alone because transformation is deactivated.')
            return NO_CHANGE_DECISION

        if default_prevented:
            self.print_debug('Paste left alone because default handling was already prevented.')
            return NO_CHANGE_DECISION

        content_types = list(content_types) if content_types is not None else None
        self.print_debug(f'Clipboard content types: {content_types}')
        if content_types != [PLAIN_TEXT_CONTENT_TYPE]:
            return NO_CHANGE_DECISION

        if not plain_text:
            return NO_CHANGE_DECISION

        result = self.transform(plain_text)
        self.print_debug(f'Replaced {plain_text!r} -> {result!r}')

        if result == plain_text:
            return NO_CHANGE_DECISION

        return PasteDecision(replacement=result, suppress_default=True)
