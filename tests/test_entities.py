"""
# Paste-Transform: test_entities.py

Licensed under "MIT No Attribution" (MIT-0), see LICENSE.

Perform unit testing for `entities.py`.
"""

import unittest

from pastetransform.entities import EntityCollections, Link, Pattern, Replacer
from pastetransform.exceptions import UnrecognisedIdException
from pastetransform.identifiers import SequentialIdentifierGenerator


def build_collections() -> EntityCollections:
    collections = EntityCollections(SequentialIdentifierGenerator())
    collections.add_pattern('a')  # p-1
    collections.add_pattern('b')  # p-2
    collections.add_replacer('X')  # r-3
    collections.add_replacer('Y')  # r-4
    collections.add_link('p-1', 'r-3')  # l-5
    collections.add_link('p-2', 'r-4', enabled=False, comment='off')  # l-6

    return collections


class TestEntityCollections(unittest.TestCase):
    def test_add(self):
        collections = build_collections()

        self.assertEqual(collections.patterns, (Pattern('p-1', 'a'), Pattern('p-2', 'b')))
        self.assertEqual(collections.replacers, (Replacer('r-3', 'X'), Replacer('r-4', 'Y')))
        self.assertEqual(
            collections.links,
            (
                Link('l-5', 'p-1', 'r-3', enabled=True, comment=''),
                Link('l-6', 'p-2', 'r-4', enabled=False, comment='off'),
            ),
        )

    def test_get(self):
        collections = build_collections()

        self.assertEqual(collections.get_pattern('p-2'), Pattern('p-2', 'b'))
        self.assertEqual(collections.get_replacer('r-3'), Replacer('r-3', 'X'))
        self.assertEqual(collections.get_link('l-5').replacer_id, 'r-3')
        self.assertEqual(collections.find_link('p-2', 'r-4').id_, 'l-6')
        self.assertIsNone(collections.find_link('p-2', 'r-3'))

        with self.assertRaises(UnrecognisedIdException) as context:
            collections.get_pattern('p-404')
        self.assertEqual(context.exception.unrecognised_id, 'p-404')

    def test_add_link_rejects_duplicate_pair(self):
        collections = build_collections()
        links_before = collections.links
        revision_before = collections.revision

        self.assertIsNone(collections.add_link('p-1', 'r-3'))
        self.assertIsNone(collections.add_link('p-1', 'r-3', enabled=False, comment='again'))
        self.assertEqual(collections.links, links_before)
        self.assertEqual(collections.revision, revision_before)

    def test_add_link_allows_reuse(self):
        collections = build_collections()

        self.assertIsNotNone(collections.add_link('p-1', 'r-4'))
        self.assertIsNotNone(collections.add_link('p-2', 'r-3'))
        self.assertEqual(len(collections.links), 4)

    def test_add_link_rejects_unknown_endpoint(self):
        collections = build_collections()

        with self.assertRaises(UnrecognisedIdException):
            collections.add_link('p-404', 'r-3')
        with self.assertRaises(UnrecognisedIdException):
            collections.add_link('p-1', 'r-404')
        self.assertEqual(len(collections.links), 2)

    def test_edit(self):
        collections = build_collections()

        collections.edit_pattern('p-1', 'aa')
        collections.edit_replacer('r-4', 'YY')
        self.assertEqual(collections.get_pattern('p-1').text, 'aa')
        self.assertEqual(collections.get_replacer('r-4').text, 'YY')

        with self.assertRaises(UnrecognisedIdException):
            collections.edit_pattern('p-404', 'x')

    def test_remove_pattern_cascades(self):
        collections = build_collections()
        collections.add_link('p-1', 'r-4')  # l-7

        removed_links = collections.remove_pattern('p-1')

        self.assertEqual([link.id_ for link in removed_links], ['l-5', 'l-7'])
        self.assertEqual([pattern.id_ for pattern in collections.patterns], ['p-2'])
        self.assertEqual([link.id_ for link in collections.links], ['l-6'])

    def test_remove_replacer_cascades(self):
        collections = build_collections()

        removed_links = collections.remove_replacer('r-4')

        self.assertEqual([link.id_ for link in removed_links], ['l-6'])
        self.assertEqual([link.id_ for link in collections.links], ['l-5'])

    def test_remove_link(self):
        collections = build_collections()

        self.assertEqual(collections.remove_link('l-5').id_, 'l-5')
        self.assertEqual([link.id_ for link in collections.links], ['l-6'])
        self.assertEqual(len(collections.patterns), 2)

        with self.assertRaises(UnrecognisedIdException):
            collections.remove_link('l-5')

    def test_set_link_fields(self):
        collections = build_collections()

        self.assertTrue(collections.set_link_enabled('l-6', True).enabled)
        self.assertEqual(collections.set_link_comment('l-5', 'note').comment, 'note')
        self.assertEqual(collections.set_link_comment('l-5', None).comment, '')

    def test_revision(self):
        collections = EntityCollections(SequentialIdentifierGenerator())
        self.assertEqual(collections.revision, 0)

        pattern = collections.add_pattern('a')
        replacer = collections.add_replacer('X')
        link = collections.add_link(pattern.id_, replacer.id_)
        self.assertEqual(collections.revision, 3)

        collections.set_link_comment(link.id_, 'not structural')
        self.assertEqual(collections.revision, 3)

        collections.set_link_enabled(link.id_, False)
        self.assertEqual(collections.revision, 4)

        collections.edit_pattern(pattern.id_, 'b')
        self.assertEqual(collections.revision, 5)

    def test_move_link(self):
        collections = build_collections()
        collections.add_link('p-1', 'r-4')  # l-7

        collections.move_link('l-7', 0)
        self.assertEqual([link.id_ for link in collections.links], ['l-7', 'l-5', 'l-6'])

        collections.move_link('l-7', 99)
        self.assertEqual([link.id_ for link in collections.links], ['l-5', 'l-6', 'l-7'])

        collections.move_link('l-6', -5)
        self.assertEqual([link.id_ for link in collections.links], ['l-6', 'l-5', 'l-7'])

    def test_prune_dangling_links(self):
        collections = EntityCollections.from_blob({
            'patterns': [{'id': 'p', 'text': 'a'}],
            'replacers': [{'id': 'r', 'text': 'X'}],
            'links': [
                {'id': 'l-1', 'patternId': 'p', 'replacerId': 'r', 'enabled': True, 'comment': ''},
                {'id': 'l-2', 'patternId': 'gone', 'replacerId': 'r', 'enabled': True, 'comment': ''},
                {'id': 'l-3', 'patternId': 'p', 'replacerId': 'gone', 'enabled': True, 'comment': ''},
            ],
        })

        self.assertEqual([link.id_ for link in collections.compute_dangling_links()], ['l-2', 'l-3'])
        self.assertEqual(collections.prune_dangling_links(), 2)
        self.assertEqual([link.id_ for link in collections.links], ['l-1'])
        self.assertEqual(collections.prune_dangling_links(), 0)

    def test_from_blob_and_to_blob(self):
        blob = {
            'patterns': [{'id': 'p', 'text': 'a'}],
            'replacers': [{'id': 'r', 'text': 'X'}],
            'links': [{'id': 'l', 'patternId': 'p', 'replacerId': 'r', 'enabled': False, 'comment': 'c'}],
        }
        collections = EntityCollections.from_blob(blob)

        self.assertEqual(collections.links, (Link('l', 'p', 'r', enabled=False, comment='c'),))
        self.assertEqual(collections.to_blob(), blob)

    def test_from_blob_defaults(self):
        collections = EntityCollections.from_blob({
            'patterns': [{'id': 'p', 'text': 'a'}, 'not a record'],
            'replacers': [{'id': 'r', 'text': 'X'}],
            'links': [{'id': 'l', 'patternId': 'p', 'replacerId': 'r'}],
        })

        self.assertEqual(len(collections.patterns), 1)
        self.assertEqual(collections.links, (Link('l', 'p', 'r', enabled=True, comment=''),))


if __name__ == '__main__':
    unittest.main()
