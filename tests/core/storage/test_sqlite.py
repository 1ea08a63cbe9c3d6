import time
import unittest

from orion.clients import Callvote, Client
from orion.storage.common import QueryBuilder
from orion.storage.sqlite import SqliteStorage
from tests import OrionTestCase
from tests.fake import FakeConsole


class Test_QueryBuilder(unittest.TestCase):

    def setUp(self):
        self.qb = QueryBuilder("?")

    def test_fieldStr(self):
        self.assertEqual("*", self.qb.fieldStr("*"))
        self.assertEqual("`name`", self.qb.fieldStr("name"))
        self.assertEqual("`id`, `name`", self.qb.fieldStr(("id", "name")))
        self.assertRaises(TypeError, self.qb.fieldStr, 5)

    def test_WhereClause(self):
        self.assertEqual(("`id` = ?", [1]), self.qb.WhereClause({"id": 1}))
        self.assertEqual(("`auth` IS NULL", []), self.qb.WhereClause({"auth": None}))
        self.assertEqual(("`id` IN (?, ?) AND `name` = ?", [1, 2, "Fenix"]),
                         self.qb.WhereClause({"id": (1, 2), "name": "Fenix"}))

    def test_SelectQuery(self):
        self.assertEqual(("SELECT * FROM `clients` WHERE `guid` = ? LIMIT 1", ["ABC"]),
                         self.qb.SelectQuery("*", "clients", {"guid": "ABC"}, None, 1))
        self.assertEqual(("SELECT * FROM `groups` ORDER BY `level`", []),
                         self.qb.SelectQuery("*", "groups", None, "`level`"))

    def test_UpdateQuery(self):
        self.assertEqual(("UPDATE `clients` SET `name` = %s, `ip` = %s WHERE `id` = %s", ["Fenix", "1.2.3.4", 3]),
                         QueryBuilder("%s").UpdateQuery({"name": "Fenix", "ip": "1.2.3.4"}, "clients", {"id": 3}))

    def test_InsertQuery(self):
        self.assertEqual(("INSERT INTO `callvotes` (`type`, `data`) VALUES (?, ?)", ["map", "ut4_casa"]),
                         self.qb.InsertQuery({"type": "map", "data": "ut4_casa"}, "callvotes"))


class Test_SqliteStorage(OrionTestCase):

    def setUp(self):
        OrionTestCase.setUp(self)
        self.console = FakeConsole()
        self.storage = self.console.storage

    def tearDown(self):
        self.storage.shutdown()
        OrionTestCase.tearDown(self)

    def test_instance(self):
        self.assertIsInstance(self.storage, SqliteStorage)
        self.assertTrue(self.storage.status())

    def test_getTables(self):
        tables = self.storage.getTables()
        for name in ('groups', 'clients', 'callvotes'):
            self.assertIn(name, tables)

    def test_getGroups(self):
        groups = self.storage.getGroups()
        self.assertListEqual(['guest', 'user', 'reg', 'mod', 'admin', 'fulladmin', 'senioradmin', 'superadmin'],
                             [g.keyword for g in groups])
        self.assertListEqual([0, 1, 2, 20, 40, 60, 80, 100], [g.level for g in groups])

    def test_getGroup(self):
        self.assertEqual(20, self.storage.getGroup(keyword='mod').level)
        self.assertEqual('admin', self.storage.getGroup(level=40).keyword)
        self.assertIsNone(self.storage.getGroup(keyword='owner'))
        self.assertRaises(ValueError, self.storage.getGroup)

    def test_setClient_insert(self):
        client = Client(ip='10.0.0.1', guid='abcdef', name='^1Fenix', group=self.storage.getGroup(keyword='user'))
        client.connections = 1
        client.time_add = client.time_edit = 1500000000
        self.assertEqual(1, self.storage.setClient(client))
        self.assertEqual(1, client.id)
        stored = self.storage.getClientById(1)
        self.assertEqual('ABCDEF', stored.guid)
        self.assertEqual('Fenix', stored.name)
        self.assertEqual('10.0.0.1', stored.ip)
        self.assertEqual(1, stored.connections)
        self.assertEqual(1500000000, stored.time_add)
        self.assertEqual('user', stored.group.keyword)
        self.assertIsNone(stored.auth)

    def test_setClient_update(self):
        client = Client(ip='10.0.0.1', guid='ABCDEF', name='Fenix')
        self.storage.setClient(client)
        client.name = 'Mathias'
        client.auth = 'MATHIAS'
        client.connections = 4
        self.assertEqual(client.id, self.storage.setClient(client))
        stored = self.storage.getClientByGuid('abcdef')
        self.assertEqual(client.id, stored.id)
        self.assertEqual('Mathias', stored.name)
        self.assertEqual(4, stored.connections)
        self.assertIsNone(stored.group)

    def test_getClientByAuth(self):
        self.storage.setClient(Client(guid='ABCDEF', name='Fenix', auth='fenix'))
        self.assertEqual('ABCDEF', self.storage.getClientByAuth('FeNiX').guid)
        self.assertIsNone(self.storage.getClientByAuth('mathias'))

    def test_getClient_missing(self):
        self.assertIsNone(self.storage.getClientById(42))
        self.assertIsNone(self.storage.getClientByGuid('ABCDEF'))

    def test_setCallvote(self):
        client = Client(guid='ABCDEF', name='Fenix')
        self.storage.setClient(client)
        callvote = Callvote(client, 'map', 'ut4_casa')
        callvote_id = self.storage.setCallvote(callvote)
        self.assertEqual(1, callvote_id)
        with self.storage.query("SELECT * FROM `callvotes` WHERE `id` = ?", (callvote_id,)) as cursor:
            row = cursor.getRow()
        self.assertEqual(client.id, row['client_id'])
        self.assertEqual('map', row['type'])
        self.assertEqual('ut4_casa', row['data'])
        self.assertEqual(1, row['yes'])
        self.assertEqual(0, row['no'])
        self.assertAlmostEqual(time.time(), row['time_add'], delta=5)

    def test_truncateTable(self):
        self.storage.setClient(Client(guid='ABCDEF', name='Fenix'))
        self.storage.truncateTable('clients')
        self.assertIsNone(self.storage.getClientByGuid('ABCDEF'))
        # autoincrement restarts
        self.assertEqual(1, self.storage.setClient(Client(guid='FEDCBA', name='Mathias')))

    def test_truncateTable_unknown(self):
        self.assertRaises(KeyError, self.storage.truncateTable, 'penalties')

    def test_getQueriesFromFile(self):
        lines = ["# comment\n", "SELECT 1;\n", "-- other comment\n", "SELECT\n", "2;\n", "\n"]
        self.assertListEqual(["SELECT 1", "SELECT 2"], SqliteStorage.getQueriesFromFile(lines))


if __name__ == '__main__':
    unittest.main()
