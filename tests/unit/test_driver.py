from unittest import TestCase
from nftregistry.db.driver import InMemDriver, CacheDriver, LedgerDriver


class TestInMemDriver(TestCase):
    def setUp(self):
        self.d = InMemDriver()

    def test_get_set(self):
        self.d.set('b', 'a')
        self.assertEqual(self.d.get('b'), 'a')

    def test_get_missing_is_none(self):
        self.assertIsNone(self.d.get('nope'))

    def test_set_none_deletes(self):
        self.d.set('b', 'a')
        self.d.set('b', None)

        self.assertIsNone(self.d.get('b'))
        self.assertEqual(self.d.keys(), [])

    def test_delete(self):
        self.d.set('b', 'a')
        self.d.delete('b')

        self.assertIsNone(self.d.get('b'))

    def test_delete_missing_is_noop(self):
        self.d.delete('b')

    def test_iter_prefix_sorted(self):
        for k in ['b3', 'a1', 'b1', 'b2']:
            self.d.set(k, 1)

        self.assertEqual(self.d.iter('b'), ['b1', 'b2', 'b3'])
        self.assertEqual(self.d.iter('b', length=2), ['b1', 'b2'])

    def test_getitem_raises_key_error(self):
        with self.assertRaises(KeyError):
            self.d['missing']

    def test_setitem_getitem(self):
        self.d['x'] = 5
        self.assertEqual(self.d['x'], 5)

    def test_flush(self):
        self.d.set('a', 1)
        self.d.flush()

        self.assertEqual(self.d.keys(), [])


class TestCacheDriver(TestCase):
    def setUp(self):
        self.backing = InMemDriver()
        self.c = CacheDriver(driver=self.backing)

    def test_set_is_pending_until_commit(self):
        self.c.set('a', 1)

        self.assertEqual(self.c.get('a'), 1)
        self.assertIsNone(self.backing.get('a'))

        self.c.commit()

        self.assertEqual(self.backing.get('a'), 1)
        self.assertEqual(self.c.pending_writes, {})

    def test_rollback_discards_pending(self):
        self.c.set('a', 1)
        self.c.commit()

        self.c.set('a', 2)
        self.c.set('b', 3)
        self.c.rollback()

        self.assertEqual(self.c.get('a'), 1)
        self.assertIsNone(self.c.get('b'))

    def test_pending_delete_shadows_stored_value(self):
        self.c.set('a', 1)
        self.c.commit()

        self.c.delete('a')

        self.assertIsNone(self.c.get('a'))
        self.assertEqual(self.backing.get('a'), 1)

        self.c.commit()

        self.assertIsNone(self.backing.get('a'))

    def test_clear_pending_state_after_delete_restores(self):
        self.c.set('a', 1)
        self.c.commit()

        self.c.delete('a')
        self.c.clear_pending_state()

        self.assertEqual(self.c.get('a'), 1)

    def test_reads_fall_through_to_backing_driver(self):
        self.backing.set('a', 'stored')

        self.assertEqual(self.c.get('a'), 'stored')


class TestLedgerDriver(TestCase):
    def setUp(self):
        self.d = LedgerDriver()

    def test_make_key(self):
        self.assertEqual(self.d.make_key('registry', 'owners'), 'registry.owners')
        self.assertEqual(self.d.make_key('registry', 'operators', ['bob', 'sara']), 'registry.operators:bob:sara')

    def test_get_set_var(self):
        self.d.set_var('registry', 'owners', [1], value='bob')

        self.assertEqual(self.d.get_var('registry', 'owners', [1]), 'bob')
        self.assertEqual(self.d.get('registry.owners:1'), 'bob')

    def test_items_merge_layers(self):
        self.d.set('registry.owners:1', 'bob')
        self.d.set('registry.owners:2', 'jane')
        self.d.commit()

        self.d.set('registry.owners:3', 'sara')
        self.d.delete('registry.owners:1')

        self.assertEqual(self.d.items('registry.owners:'), {
            'registry.owners:2': 'jane',
            'registry.owners:3': 'sara',
        })

    def test_keys_and_values(self):
        self.d.set('registry.balances:bob', 1)
        self.d.set('registry.balances:jane', 2)

        self.assertEqual(self.d.keys('registry.balances:'), ['registry.balances:bob', 'registry.balances:jane'])
        self.assertEqual(self.d.values('registry.balances:'), [1, 2])

    def test_meta(self):
        self.assertFalse(self.d.is_constructed('registry'))

        self.d.set_meta('registry', '__name__', 'MissUniversePh')

        self.assertEqual(self.d.get_meta('registry', '__name__'), 'MissUniversePh')
        self.assertFalse(self.d.is_constructed('registry'))

        self.d.set_meta('registry', '__minter__', 'owner')

        self.assertTrue(self.d.is_constructed('registry'))

    def test_flush_clears_everything(self):
        self.d.set('a.b', 1)
        self.d.commit()
        self.d.set('a.c', 2)

        self.d.flush()

        self.assertIsNone(self.d.get('a.b'))
        self.assertIsNone(self.d.get('a.c'))
        self.assertEqual(self.d.keys(), [])
