"""
# Paste-Transform: migrations.py

Licensed under "MIT No Attribution" (MIT-0), see LICENSE.

Migration of persisted settings to the current (link graph) shape.

Three generations of settings blob are recognised:
````
FLAT_ARRAYS     {patterns: str[], replacers: str[]}
FLAGGED_ARRAYS  {patterns: str[], replacers: str[], enabled: bool[], comments: str[], settingsFormatVersion: int}
LINK_GRAPH      {patterns: {id, text}[], replacers: {id, text}[],
                 links: {id, patternId, replacerId, enabled, comment}[],
                 formatVersion: int, active: bool, debugMode: bool}
````
Each generation has its own migration function (see `MIGRATION_FROM_GENERATION`),
and every migration returns a fresh LINK_GRAPH blob, never mutating its input.
Migration never raises: malformed data is recovered on a best-effort basis,
using the defaults in `LEGACY_DEFAULT_FROM_FIELD` and `SETTINGS_DEFAULT_FROM_KEY`.

In the legacy generations, pattern «i» is paired with replacer «i»,
so only the first `min(len(patterns), len(replacers))` pairs become links;
the longer tail is kept, but left unlinked.
"""

import copy
from typing import Any, Callable, Optional

from pastetransform.constants import (
    CURRENT_FORMAT_VERSION,
    DEFAULT_PATTERN_TEXTS,
    DEFAULT_REPLACER_TEXTS,
    LEGACY_DEFAULT_FROM_FIELD,
    LINK_ID_PREFIX,
    PATTERN_ID_PREFIX,
    REPLACER_ID_PREFIX,
    SETTINGS_DEFAULT_FROM_KEY,
)
from pastetransform.identifiers import IdentifierGenerator, RandomIdentifierGenerator
from pastetransform.utilities import coerce_to_text, coerce_with_default, is_record

GENERATION_FLAT_ARRAYS = 'FLAT_ARRAYS'
GENERATION_FLAGGED_ARRAYS = 'FLAGGED_ARRAYS'
GENERATION_LINK_GRAPH = 'LINK_GRAPH'


def as_list(value: Any) -> list:
    if isinstance(value, (list, tuple)):
        return list(value)

    return []


def classify_generation(blob: Any) -> str:
    """
    Classify a settings blob by the shape actually present (the version tag is not trusted).
    """
    if not isinstance(blob, dict):
        return GENERATION_FLAT_ARRAYS

    patterns = as_list(blob.get('patterns'))
    if len(patterns) > 0 and is_record(patterns[0]) and isinstance(blob.get('links'), list):
        return GENERATION_LINK_GRAPH

    if 'enabled' in blob or 'comments' in blob:
        return GENERATION_FLAGGED_ARRAYS

    return GENERATION_FLAT_ARRAYS


def is_usable_id(id_: Any, taken: set[str]) -> bool:
    return isinstance(id_, str) and id_ != '' and id_ not in taken


def normalise_records(entries: list, prefix: str, identifier_generator: 'IdentifierGenerator') -> list[dict[str, str]]:
    """
    Normalise pattern (or replacer) entries to `{id, text}` records, preserving order.

    Records keep their id unless it is missing, malformed, or already taken by an earlier record;
    raw entries (legacy strings, or anything else) are wrapped with a fresh id.
    """
    records = []
    taken: set[str] = set()
    pending_indices = []

    for entry in entries:
        id_ = entry.get('id') if isinstance(entry, dict) else None
        if is_usable_id(id_, taken):
            taken.add(id_)
        else:
            id_ = None
            pending_indices.append(len(records))
        records.append({'id': id_, 'text': coerce_to_text(entry)})

    # Fresh ids are assigned last, so that they cannot steal an id kept by a later record
    for index in pending_indices:
        id_ = identifier_generator.generate(prefix, taken)
        taken.add(id_)
        records[index]['id'] = id_

    return records


def synthesise_index_aligned_links(patterns: list[dict[str, str]], replacers: list[dict[str, str]],
                                   enabled_flags: list, comments: list,
                                   identifier_generator: 'IdentifierGenerator') -> list[dict[str, Any]]:
    """
    Synthesise one link per index-aligned (pattern, replacer) pair.

    Enabled flags and comments are taken by index where present and well typed,
    otherwise from `LEGACY_DEFAULT_FROM_FIELD`.
    """
    links = []
    taken: set[str] = set()
    seen_pairs: set[tuple[str, str]] = set()

    for index in range(min(len(patterns), len(replacers))):
        pattern_id = patterns[index]['id']
        replacer_id = replacers[index]['id']
        if (pattern_id, replacer_id) in seen_pairs:
            continue
        seen_pairs.add((pattern_id, replacer_id))

        enabled = LEGACY_DEFAULT_FROM_FIELD['enabled']
        if index < len(enabled_flags):
            enabled = coerce_with_default(enabled_flags[index], enabled)

        comment = LEGACY_DEFAULT_FROM_FIELD['comment']
        if index < len(comments):
            comment = coerce_with_default(comments[index], comment)

        id_ = identifier_generator.generate(LINK_ID_PREFIX, taken)
        taken.add(id_)
        links.append({
            'id': id_,
            'patternId': pattern_id,
            'replacerId': replacer_id,
            'enabled': enabled,
            'comment': comment,
        })

    return links


def normalise_links(entries: list, patterns: list[dict[str, str]], replacers: list[dict[str, str]],
                    identifier_generator: 'IdentifierGenerator') -> list[dict[str, Any]]:
    """
    Normalise link entries, dropping dangling links and repeated (pattern, replacer) pairs.
    """
    pattern_ids = {pattern['id'] for pattern in patterns}
    replacer_ids = {replacer['id'] for replacer in replacers}

    links = []
    taken: set[str] = set()
    seen_pairs: set[tuple[str, str]] = set()
    pending_indices = []

    for entry in entries:
        if not isinstance(entry, dict):
            continue

        pattern_id = entry.get('patternId')
        replacer_id = entry.get('replacerId')
        if not isinstance(pattern_id, str) or not isinstance(replacer_id, str):
            continue
        if pattern_id not in pattern_ids or replacer_id not in replacer_ids:
            continue
        if (pattern_id, replacer_id) in seen_pairs:
            continue
        seen_pairs.add((pattern_id, replacer_id))

        id_ = entry.get('id')
        if is_usable_id(id_, taken):
            taken.add(id_)
        else:
            id_ = None
            pending_indices.append(len(links))

        links.append({
            'id': id_,
            'patternId': pattern_id,
            'replacerId': replacer_id,
            'enabled': coerce_with_default(entry.get('enabled'), LEGACY_DEFAULT_FROM_FIELD['enabled']),
            'comment': coerce_with_default(entry.get('comment'), LEGACY_DEFAULT_FROM_FIELD['comment']),
        })

    for index in pending_indices:
        id_ = identifier_generator.generate(LINK_ID_PREFIX, taken)
        taken.add(id_)
        links[index]['id'] = id_

    return links


def build_current_blob(blob: dict[str, Any], patterns: list[dict[str, str]], replacers: list[dict[str, str]],
                       links: list[dict[str, Any]]) -> dict[str, Any]:
    return {
        'patterns': patterns,
        'replacers': replacers,
        'links': links,
        'formatVersion': CURRENT_FORMAT_VERSION,
        'active': coerce_with_default(blob.get('active'), SETTINGS_DEFAULT_FROM_KEY['active']),
        'debugMode': coerce_with_default(blob.get('debugMode'), SETTINGS_DEFAULT_FROM_KEY['debugMode']),
    }


def migrate_index_aligned(blob: dict[str, Any], identifier_generator: 'IdentifierGenerator') -> dict[str, Any]:
    """
    Migrate a FLAT_ARRAYS or FLAGGED_ARRAYS blob (the former simply lacks flags and comments).
    """
    patterns = normalise_records(as_list(blob.get('patterns')), PATTERN_ID_PREFIX, identifier_generator)
    replacers = normalise_records(as_list(blob.get('replacers')), REPLACER_ID_PREFIX, identifier_generator)
    links = synthesise_index_aligned_links(
        patterns,
        replacers,
        enabled_flags=as_list(blob.get('enabled')),
        comments=as_list(blob.get('comments')),
        identifier_generator=identifier_generator,
    )

    return build_current_blob(blob, patterns, replacers, links)


def migrate_link_graph(blob: dict[str, Any], identifier_generator: 'IdentifierGenerator') -> dict[str, Any]:
    patterns = normalise_records(as_list(blob.get('patterns')), PATTERN_ID_PREFIX, identifier_generator)
    replacers = normalise_records(as_list(blob.get('replacers')), REPLACER_ID_PREFIX, identifier_generator)
    links = normalise_links(as_list(blob.get('links')), patterns, replacers, identifier_generator)

    return build_current_blob(blob, patterns, replacers, links)


MIGRATION_FROM_GENERATION: dict[str, Callable[[dict[str, Any], 'IdentifierGenerator'], dict[str, Any]]] = {
    GENERATION_FLAT_ARRAYS: migrate_index_aligned,
    GENERATION_FLAGGED_ARRAYS: migrate_index_aligned,
    GENERATION_LINK_GRAPH: migrate_link_graph,
}


def migrate(blob: Any, identifier_generator: Optional['IdentifierGenerator'] = None) -> dict[str, Any]:
    """
    Migrate a settings blob of any generation to a fresh, internally consistent LINK_GRAPH blob.

    Idempotent: migrating an already migrated blob returns an equal blob.
    """
    if identifier_generator is None:
        identifier_generator = RandomIdentifierGenerator()

    generation = classify_generation(blob)
    if not isinstance(blob, dict):
        blob = {}

    return MIGRATION_FROM_GENERATION[generation](copy.deepcopy(blob), identifier_generator)


def ensure_default_links(blob: dict[str, Any],
                         identifier_generator: Optional['IdentifierGenerator'] = None) -> dict[str, Any]:
    """
    Synthesise index-aligned links for a migrated blob that has patterns and replacers but no links at all.

    Covers freshly seeded configurations; a no-op for any blob that already has a link.
    """
    blob = copy.deepcopy(blob)
    if blob.get('links') or not blob.get('patterns') or not blob.get('replacers'):
        return blob

    if identifier_generator is None:
        identifier_generator = RandomIdentifierGenerator()

    blob['links'] = synthesise_index_aligned_links(
        blob['patterns'],
        blob['replacers'],
        enabled_flags=[],
        comments=[],
        identifier_generator=identifier_generator,
    )

    return blob


def build_default_raw_blob() -> dict[str, Any]:
    return {
        'patterns': list(DEFAULT_PATTERN_TEXTS),
        'replacers': list(DEFAULT_REPLACER_TEXTS),
        **SETTINGS_DEFAULT_FROM_KEY,
    }


def load_and_migrate(raw_blob: Any, identifier_generator: Optional['IdentifierGenerator'] = None) -> dict[str, Any]:
    """
    Turn the last-saved settings blob (or `None` if never saved) into a current settings blob.

    Top-level keys absent from the saved blob are taken from the defaults (which seed the built-in rules).
    """
    if identifier_generator is None:
        identifier_generator = RandomIdentifierGenerator()

    default_raw_blob = build_default_raw_blob()
    if isinstance(raw_blob, dict):
        raw_blob = {**default_raw_blob, **raw_blob}
    else:
        raw_blob = default_raw_blob

    blob = migrate(raw_blob, identifier_generator)

    return ensure_default_links(blob, identifier_generator)
