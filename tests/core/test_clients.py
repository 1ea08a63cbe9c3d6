import time
import unittest

from mockito import verify, when

from orion.clients import Callvote, Client, Clients, Group, Groups
from tests import OrionTestCase
from tests.fake import FakeConsole


class Test_Client(unittest.TestCase):

    def test_normalization(self):
        client = Client(guid='abcdef', name='^1Fe^7nix', auth='FeNiX')
        self.assertEqual('ABCDEF', client.guid)
        self.assertEqual('Fenix', client.name)
        self.assertEqual('fenix', client.auth)

    def test_empty_values(self):
        client = Client(guid='', auth='')
        self.assertIsNone(client.guid)
        self.assertIsNone(client.auth)
        self.assertIsNone(client.name)

    def test_level(self):
        client = Client()
        self.assertEqual(0, client.level)
        client.group = Group(id=4, name='Moderator', keyword='mod', level=20)
        self.assertEqual(20, client.level)

    def test_vars_not_shared(self):
        a, b = Client(), Client()
        a.vars['lockedTeam'] = 'red'
        self.assertDictEqual({}, b.vars)


class Test_Callvote(unittest.TestCase):

    def test_defaults(self):
        callvote = Callvote(Client(), 'cyclemap', '')
        self.assertIsNone(callvote.data)
        self.assertEqual(1, callvote.yes)
        self.assertEqual(0, callvote.no)


class Test_Groups(OrionTestCase):

    def setUp(self):
        OrionTestCase.setUp(self)
        self.console = FakeConsole()
        self.groups = Groups(self.console)

    def test_getByKeyword(self):
        self.assertEqual(0, self.groups.getByKeyword('guest').level)
        self.assertIsNone(self.groups.getByKeyword('owner'))

    def test_getByLevel(self):
        self.assertEqual('superadmin', self.groups.getByLevel(100).keyword)
        self.assertIsNone(self.groups.getByLevel(99))

    def test_loaded_once(self):
        self.groups.getAll()
        when(self.console.storage).getGroups().thenReturn([])
        self.assertEqual(8, len(self.groups.getAll()))
        verify(self.console.storage, times=0).getGroups()


class Test_Clients(OrionTestCase):

    def setUp(self):
        OrionTestCase.setUp(self)
        self.console = FakeConsole()
        self.clients = Clients(self.console)
        self.fenix = Client(guid='AAAAAA', name='Fenix', slot=0)
        self.mathias = Client(guid='BBBBBB', name='Mathias', auth='mathias', slot=3)
        self.clients.add(self.fenix)
        self.clients.add(self.mathias)

    def test_getBySlot(self):
        self.assertIs(self.fenix, self.clients.getBySlot(0))
        self.assertIs(self.mathias, self.clients.getBySlot('3'))
        self.assertIsNone(self.clients.getBySlot(1))

    def test_removeBySlot(self):
        self.assertIs(self.fenix, self.clients.removeBySlot('0'))
        self.assertIsNone(self.fenix.slot)
        self.assertIsNone(self.clients.getBySlot(0))
        self.assertIsNone(self.clients.removeBySlot(0))

    def test_add_moves_client(self):
        self.fenix.slot = 5
        self.clients.add(self.fenix)
        self.assertIs(self.fenix, self.clients.getBySlot(5))
        self.assertIsNone(self.clients.getBySlot(0))
        self.assertListEqual([3, 5], [c.slot for c in self.clients.getList()])

    def test_getList(self):
        self.clients.add(Client(guid='CCCCCC', name='Zero', slot=1))
        self.assertListEqual([0, 1, 3], [c.slot for c in self.clients.getList()])

    def test_getByName(self):
        self.assertListEqual([self.fenix], self.clients.getByName('^1fEn'))
        self.assertListEqual([self.fenix, self.mathias], self.clients.getByName('i'))
        self.assertListEqual([], self.clients.getByName('courgette'))

    def test_getByMagic(self):
        self.assertListEqual([self.mathias], self.clients.getByMagic(' 3 '))
        self.assertListEqual([], self.clients.getByMagic('5'))
        self.assertListEqual([self.mathias], self.clients.getByMagic('math'))

    def test_getByGuid_connected(self):
        self.assertIs(self.fenix, self.clients.getByGuid('aaaaaa'))

    def test_getByGuid_storage(self):
        stored = Client(guid='DDDDDD', name='Courgette')
        self.console.storage.setClient(stored)
        found = self.clients.getByGuid('dddddd')
        self.assertEqual(stored.id, found.id)
        self.assertIsNone(self.clients.getByGuid('EEEEEE'))

    def test_getByAuth(self):
        self.assertIs(self.mathias, self.clients.getByAuth('MATHIAS'))
        self.assertIsNone(self.clients.getByAuth('fenix'))

    def test_save(self):
        self.clients.save(self.fenix)
        self.assertIsNotNone(self.fenix.id)
        self.assertAlmostEqual(time.time(), self.fenix.time_add, delta=5)
        self.assertEqual(self.fenix.time_add, self.fenix.time_edit)
        self.assertEqual('Fenix', self.console.storage.getClientById(self.fenix.id).name)

    def test_save_keeps_time_add(self):
        self.fenix.time_add = 1000
        self.clients.save(self.fenix)
        self.assertEqual(1000, self.fenix.time_add)
        self.assertGreater(self.fenix.time_edit, 1000)

    def test_save_bot(self):
        bot = Client(guid='BOT_5', name='Chicken', slot=5, bot=True)
        when(self.console.storage).setClient(bot).thenReturn(1)
        self.clients.save(bot)
        verify(self.console.storage, times=0).setClient(bot)
        self.assertIsNone(bot.id)
        self.assertIsNone(bot.time_edit)


if __name__ == '__main__':
    unittest.main()
