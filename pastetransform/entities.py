"""
# Paste-Transform: entities.py

Licensed under "MIT No Attribution" (MIT-0), see LICENSE.

Patterns, replacers, and the links joining them.

Patterns and replacers are bare reusable fragments;
a link joins one pattern to one replacer and is the only entity carrying enablement and a comment.
Links form a bipartite graph, with at most one link per (pattern, replacer) pair.
"""

from typing import Any, NamedTuple, Optional

from pastetransform.constants import LEGACY_DEFAULT_FROM_FIELD, LINK_ID_PREFIX, PATTERN_ID_PREFIX, REPLACER_ID_PREFIX
from pastetransform.exceptions import UnrecognisedIdException
from pastetransform.identifiers import IdentifierGenerator, RandomIdentifierGenerator
from pastetransform.utilities import coerce_to_text, coerce_with_default, none_to_empty_string


class Pattern(NamedTuple):
    id_: str
    text: str

    def to_record(self) -> dict[str, Any]:
        return {'id': self.id_, 'text': self.text}


class Replacer(NamedTuple):
    id_: str
    text: str

    def to_record(self) -> dict[str, Any]:
        return {'id': self.id_, 'text': self.text}


class Link(NamedTuple):
    id_: str
    pattern_id: str
    replacer_id: str
    enabled: bool = True
    comment: str = ''

    def to_record(self) -> dict[str, Any]:
        return {
            'id': self.id_,
            'patternId': self.pattern_id,
            'replacerId': self.replacer_id,
            'enabled': self.enabled,
            'comment': self.comment,
        }


class EntityCollections:
    """
    Object owning the ordered collections of patterns, replacers, and links.

    Every structural edit (anything that can change the compiled rules) increments `revision`,
    so that holders of compiled rules know to recompile.
    Editing a link's comment is not structural.
    """
    _patterns: list['Pattern']
    _replacers: list['Replacer']
    _links: list['Link']
    _identifier_generator: 'IdentifierGenerator'
    _revision: int

    def __init__(self, identifier_generator: Optional['IdentifierGenerator'] = None):
        self._patterns = []
        self._replacers = []
        self._links = []
        if identifier_generator is None:
            identifier_generator = RandomIdentifierGenerator()
        self._identifier_generator = identifier_generator
        self._revision = 0

    @property
    def patterns(self) -> tuple['Pattern', ...]:
        return tuple(self._patterns)

    @property
    def replacers(self) -> tuple['Replacer', ...]:
        return tuple(self._replacers)

    @property
    def links(self) -> tuple['Link', ...]:
        return tuple(self._links)

    @property
    def revision(self) -> int:
        return self._revision

    def _bump_revision(self):
        self._revision += 1

    @staticmethod
    def _index_of(entities: list, id_: str) -> int:
        for index, entity in enumerate(entities):
            if entity.id_ == id_:
                return index

        raise UnrecognisedIdException(id_)

    def get_pattern(self, id_: str) -> 'Pattern':
        return self._patterns[EntityCollections._index_of(self._patterns, id_)]

    def get_replacer(self, id_: str) -> 'Replacer':
        return self._replacers[EntityCollections._index_of(self._replacers, id_)]

    def get_link(self, id_: str) -> 'Link':
        return self._links[EntityCollections._index_of(self._links, id_)]

    def find_link(self, pattern_id: str, replacer_id: str) -> Optional['Link']:
        for link in self._links:
            if link.pattern_id == pattern_id and link.replacer_id == replacer_id:
                return link

        return None

    def add_pattern(self, text: str) -> 'Pattern':
        taken = {pattern.id_ for pattern in self._patterns}
        pattern = Pattern(self._identifier_generator.generate(PATTERN_ID_PREFIX, taken), text)
        self._patterns.append(pattern)
        self._bump_revision()

        return pattern

    def add_replacer(self, text: str) -> 'Replacer':
        taken = {replacer.id_ for replacer in self._replacers}
        replacer = Replacer(self._identifier_generator.generate(REPLACER_ID_PREFIX, taken), text)
        self._replacers.append(replacer)
        self._bump_revision()

        return replacer

    def edit_pattern(self, id_: str, text: str) -> 'Pattern':
        index = EntityCollections._index_of(self._patterns, id_)
        pattern = self._patterns[index]._replace(text=text)
        self._patterns[index] = pattern
        self._bump_revision()

        return pattern

    def edit_replacer(self, id_: str, text: str) -> 'Replacer':
        index = EntityCollections._index_of(self._replacers, id_)
        replacer = self._replacers[index]._replace(text=text)
        self._replacers[index] = replacer
        self._bump_revision()

        return replacer

    def remove_pattern(self, id_: str) -> list['Link']:
        """
        Remove a pattern, along with every link referencing it (returned).
        """
        del self._patterns[EntityCollections._index_of(self._patterns, id_)]
        removed_links = [link for link in self._links if link.pattern_id == id_]
        self._links = [link for link in self._links if link.pattern_id != id_]
        self._bump_revision()

        return removed_links

    def remove_replacer(self, id_: str) -> list['Link']:
        """
        Remove a replacer, along with every link referencing it (returned).
        """
        del self._replacers[EntityCollections._index_of(self._replacers, id_)]
        removed_links = [link for link in self._links if link.replacer_id == id_]
        self._links = [link for link in self._links if link.replacer_id != id_]
        self._bump_revision()

        return removed_links

    def add_link(self, pattern_id: str, replacer_id: str, enabled: bool = True, comment: str = '') -> Optional['Link']:
        """
        Join a pattern to a replacer.

        Returns `None` (leaving the links untouched) if the pair is already joined.
        """
        EntityCollections._index_of(self._patterns, pattern_id)
        EntityCollections._index_of(self._replacers, replacer_id)

        if self.find_link(pattern_id, replacer_id) is not None:
            return None

        taken = {link.id_ for link in self._links}
        link = Link(
            id_=self._identifier_generator.generate(LINK_ID_PREFIX, taken),
            pattern_id=pattern_id,
            replacer_id=replacer_id,
            enabled=enabled,
            comment=none_to_empty_string(comment),
        )
        self._links.append(link)
        self._bump_revision()

        return link

    def remove_link(self, id_: str) -> 'Link':
        link = self._links.pop(EntityCollections._index_of(self._links, id_))
        self._bump_revision()

        return link

    def set_link_enabled(self, id_: str, enabled: bool) -> 'Link':
        index = EntityCollections._index_of(self._links, id_)
        link = self._links[index]._replace(enabled=enabled)
        self._links[index] = link
        self._bump_revision()

        return link

    def set_link_comment(self, id_: str, comment: Optional[str]) -> 'Link':
        index = EntityCollections._index_of(self._links, id_)
        link = self._links[index]._replace(comment=none_to_empty_string(comment))
        self._links[index] = link

        return link

    def move_link(self, id_: str, new_index: int) -> 'Link':
        """
        Move a link to a new position, thereby changing its precedence.

        Out-of-range positions are clamped.
        """
        link = self._links.pop(EntityCollections._index_of(self._links, id_))
        new_index = max(0, min(new_index, len(self._links)))
        self._links.insert(new_index, link)
        self._bump_revision()

        return link

    def compute_dangling_links(self) -> list['Link']:
        pattern_ids = {pattern.id_ for pattern in self._patterns}
        replacer_ids = {replacer.id_ for replacer in self._replacers}

        return [
            link
            for link in self._links
            if link.pattern_id not in pattern_ids or link.replacer_id not in replacer_ids
        ]

    def prune_dangling_links(self) -> int:
        dangling_link_ids = {link.id_ for link in self.compute_dangling_links()}
        if not dangling_link_ids:
            return 0

        self._links = [link for link in self._links if link.id_ not in dangling_link_ids]
        self._bump_revision()

        return len(dangling_link_ids)

    @classmethod
    def from_blob(cls, blob: dict[str, Any],
                  identifier_generator: Optional['IdentifierGenerator'] = None) -> 'EntityCollections':
        """
        Build collections from a current-generation settings blob (see `migrations.migrate`).

        Entries which are not records are ignored.
        """
        collections = cls(identifier_generator)

        for record in blob.get('patterns') or []:
            if isinstance(record, dict):
                collections._patterns.append(Pattern(str(record.get('id')), coerce_to_text(record.get('text'))))

        for record in blob.get('replacers') or []:
            if isinstance(record, dict):
                collections._replacers.append(Replacer(str(record.get('id')), coerce_to_text(record.get('text'))))

        for record in blob.get('links') or []:
            if isinstance(record, dict):
                collections._links.append(
                    Link(
                        id_=str(record.get('id')),
                        pattern_id=str(record.get('patternId')),
                        replacer_id=str(record.get('replacerId')),
                        enabled=coerce_with_default(record.get('enabled'), LEGACY_DEFAULT_FROM_FIELD['enabled']),
                        comment=coerce_with_default(record.get('comment'), LEGACY_DEFAULT_FROM_FIELD['comment']),
                    )
                )

        return collections

    def to_blob(self) -> dict[str, list[dict[str, Any]]]:
        return {
            'patterns': [pattern.to_record() for pattern in self._patterns],
            'replacers': [replacer.to_record() for replacer in self._replacers],
            'links': [link.to_record() for link in self._links],
        }
