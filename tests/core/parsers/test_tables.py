import unittest

from orion.exceptions import CodeNotFound
from orion.parsers import getVariant, urt41, urt42
from orion.parsers.tables import CodeTable, TeamTable
from orion.urt import Gametype, Item, Mod, Team


class Test_CodeTable(unittest.TestCase):

    def setUp(self):
        self.table = CodeTable('modByKillCode', {16: Mod.SPAS, 10: Mod.CHANGE_TEAM})

    def test_lookup(self):
        self.assertIs(Mod.SPAS, self.table.lookup(16))

    def test_lookup_missing(self):
        try:
            self.table.lookup(99)
        except CodeNotFound as e:
            self.assertEqual('modByKillCode', e.table)
            self.assertEqual(99, e.code)
        else:
            self.fail("expecting CodeNotFound")

    def test_read_only(self):
        with self.assertRaises(TypeError):
            self.table._mapping[17] = Mod.UMP45

    def test_container(self):
        self.assertIn(16, self.table)
        self.assertNotIn('16', self.table)
        self.assertEqual(2, len(self.table))
        self.assertSetEqual({16, 10}, set(self.table))

    def test_TeamTable(self):
        table = TeamTable({Gametype.FFA: [Team.FREE, Team.SPECTATOR]})
        self.assertTupleEqual((Team.FREE, Team.SPECTATOR), table.lookup(Gametype.FFA))


class VariantTablesMixin:
    variant = None

    def test_every_gametype_has_teams(self):
        for gametype in self.variant.tables.gametype.values():
            self.assertIn(gametype, self.variant.tables.teamsByGametype)

    def test_team_codes(self):
        self.assertListEqual([Team.FREE, Team.RED, Team.BLUE, Team.SPECTATOR],
                             [self.variant.tables.teamByCode.lookup(x) for x in range(4)])

    def test_team_names(self):
        for name in ('FREE', 'RED', 'BLUE', 'SPECTATOR', 'F', 'R', 'B', 'S', 'SPEC'):
            self.assertIsInstance(self.variant.tables.teamByName.lookup(name), Team)

    def test_kill_codes(self):
        kill = self.variant.tables.modByKillCode
        for code, mod in ((1, Mod.WATER), (6, Mod.FALLING), (7, Mod.SUICIDE), (10, Mod.CHANGE_TEAM), (16, Mod.SPAS)):
            self.assertIs(mod, kill.lookup(code))

    def test_flags(self):
        items = self.variant.tables.itemByName
        self.assertIs(Item.CTF_RED_FLAG, items.lookup('team_CTF_redflag'))
        self.assertIs(Item.CTF_BLUE_FLAG, items.lookup('team_CTF_blueflag'))

    def test_line_format_names_unique(self):
        names = [name for name, _ in self.variant.lineFormats]
        self.assertEqual(len(names), len(set(names)))

    def test_getVariant(self):
        self.assertIs(self.variant, getVariant(self.variant.name))


class Test_urt41_tables(VariantTablesMixin, unittest.TestCase):
    variant = urt41.variant

    def test_no_urt42_codes(self):
        self.assertRaises(CodeNotFound, self.variant.tables.gametype.lookup, 9)
        self.assertRaises(CodeNotFound, self.variant.tables.itemByName.lookup, 'ut_weapon_glock')
        self.assertIs(Mod.HEGRENADE, self.variant.tables.modByKillCode.lookup(25))
        self.assertIs(Mod.NEGEV, self.variant.tables.modByKillCode.lookup(35))


class Test_urt42_tables(VariantTablesMixin, unittest.TestCase):
    variant = urt42.variant

    def test_renumbered_codes(self):
        self.assertIs(Gametype.JUMP, self.variant.tables.gametype.lookup(9))
        self.assertIs(Gametype.LMS, self.variant.tables.gametype.lookup(1))
        self.assertIs(Mod.NUKED, self.variant.tables.modByKillCode.lookup(35))
        self.assertIs(Mod.GLOCK, self.variant.tables.modByHitCode.lookup(20))
        self.assertIs(Item.GLOCK, self.variant.tables.itemByName.lookup('ut_weapon_glock'))


class Test_getVariant(unittest.TestCase):

    def test_unknown(self):
        self.assertRaises(ImportError, getVariant, 'quake3')

    def test_module_without_variant(self):
        self.assertRaises(ImportError, getVariant, 'tables')


if __name__ == '__main__':
    unittest.main()
