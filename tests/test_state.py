import unittest
import threading

# Add the project root to the path
import sys
import os
sys.path.insert(0, os.path.join(os.path.dirname(__file__), '..'))

from matchsheet.models import FormationType, SheetState, Substitute
from matchsheet.state import (
    SheetStore, default_state, update_lineup, add_substitute, remove_substitute,
    update_substitute, update_staff, select_formation, update_metadata, set_notes,
    next_substitute_number
)


def _bench(*numbers):
    return tuple(Substitute(number=n, name=f"Player {n}") for n in numbers)


class TestDefaultState(unittest.TestCase):
    def test_default_sheet(self):
        """The application starts with a full 4-4-2 sheet"""
        state = default_state()
        self.assertEqual(state.formation, FormationType.F_4_4_2)
        self.assertEqual(len(state.lineup), 11)
        self.assertEqual([s.number for s in state.substitutes], ['12', '13', '14', '15', '16', '17', '18'])
        self.assertEqual([m.role for m in state.staff], ['DT', 'AC', 'PF'])
        self.assertEqual(state.metadata.opponent, 'Libertad de Sunchales')
        self.assertEqual(state.metadata.date, '2023-10-12')
        self.assertEqual(state.notes, '')

    def test_numbers_keep_leading_zeros(self):
        """Jersey numbers are text"""
        self.assertEqual(default_state().lineup[0].number, '01')


class TestSubstitutes(unittest.TestCase):
    def test_add_after_highest_number(self):
        """12, 13, 14 -> 15"""
        state = SheetState(substitutes=_bench('12', '13', '14'))
        state = add_substitute(state)
        self.assertEqual(state.substitutes[-1].number, '15')
        self.assertEqual(state.substitutes[-1].name, 'Nuevo Jugador')

    def test_add_to_empty_bench(self):
        """Empty bench starts at 12"""
        state = add_substitute(SheetState())
        self.assertEqual([s.number for s in state.substitutes], ['12'])

    def test_add_uses_maximum_not_last(self):
        """Order of the bench does not matter"""
        self.assertEqual(next_substitute_number(_bench('20', '13')), '21')

    def test_add_ignores_non_numeric_numbers(self):
        """Numbers without digits are skipped"""
        self.assertEqual(next_substitute_number(_bench('GK', '16')), '17')
        self.assertEqual(next_substitute_number(_bench('GK')), '12')

    def test_remove_keeps_order(self):
        """Removing index 1 from [A, B, C] gives [A, C]"""
        state = SheetState(substitutes=_bench('A', 'B', 'C'))
        state = remove_substitute(state, 1)
        self.assertEqual([s.number for s in state.substitutes], ['A', 'C'])

    def test_remove_out_of_range(self):
        with self.assertRaises(IndexError):
            remove_substitute(SheetState(substitutes=_bench('12')), 3)

    def test_update_substitute(self):
        state = update_substitute(SheetState(substitutes=_bench('12', '13')), 1, 'name', 'F. Hansen')
        self.assertEqual(state.substitutes[1].name, 'F. Hansen')
        self.assertEqual(state.substitutes[0].name, 'Player 12')


class TestEdits(unittest.TestCase):
    def setUp(self):
        self.state = default_state()

    def test_update_lineup_returns_new_snapshot(self):
        """Edits never change the snapshot they were applied to"""
        edited = update_lineup(self.state, 0, 'name', 'Nahuel Guzmán')
        self.assertEqual(edited.lineup[0].name, 'Nahuel Guzmán')
        self.assertEqual(self.state.lineup[0].name, 'Gonzalo González')
        self.assertEqual(edited.lineup[0].coords, self.state.lineup[0].coords)

    def test_update_lineup_number(self):
        edited = update_lineup(self.state, 3, 'number', '023')
        self.assertEqual(edited.lineup[3].number, '023')

    def test_update_lineup_rejects_other_fields(self):
        with self.assertRaises(ValueError):
            update_lineup(self.state, 0, 'pos', 'DEL')

    def test_update_lineup_out_of_range(self):
        with self.assertRaises(IndexError):
            update_lineup(self.state, 11, 'name', 'Nobody')
        with self.assertRaises(IndexError):
            update_lineup(self.state, -1, 'name', 'Nobody')

    def test_update_staff(self):
        edited = update_staff(self.state, 2, 'Carlos Díaz')
        self.assertEqual(edited.staff[2].name, 'Carlos Díaz')
        self.assertEqual(edited.staff[2].role, 'PF')

    def test_select_formation(self):
        edited = select_formation(self.state, '3-5-2')
        self.assertEqual(edited.formation, FormationType.F_3_5_2)
        self.assertEqual(edited.lineup, self.state.lineup)

    def test_select_unknown_formation(self):
        with self.assertRaises(ValueError):
            select_formation(self.state, '2-3-5')

    def test_update_metadata(self):
        edited = update_metadata(self.state, opponent='Sunchales FC', date='2024-05-01')
        self.assertEqual(edited.metadata.opponent, 'Sunchales FC')
        self.assertEqual(edited.metadata.date, '2024-05-01')
        self.assertEqual(edited.metadata.venue, 'Estadio Principal')

    def test_update_metadata_unknown_field(self):
        with self.assertRaises(ValueError):
            update_metadata(self.state, referee='Someone')

    def test_set_notes(self):
        self.assertEqual(set_notes(self.state, 'Presión alta').notes, 'Presión alta')

    def test_snapshot_is_frozen(self):
        with self.assertRaises(Exception):
            self.state.notes = 'changed'


class TestSheetStore(unittest.TestCase):
    def test_apply_replaces_snapshot(self):
        store = SheetStore()
        before = store.get()
        after = store.apply(add_substitute)
        self.assertIs(store.get(), after)
        self.assertEqual(len(after.substitutes), len(before.substitutes) + 1)

    def test_failed_operation_keeps_snapshot(self):
        store = SheetStore()
        before = store.get()
        with self.assertRaises(IndexError):
            store.apply(remove_substitute, 99)
        self.assertIs(store.get(), before)

    def test_concurrent_adds(self):
        """Concurrent appends are all kept"""
        store = SheetStore(SheetState())
        threads = [threading.Thread(target=store.apply, args=(add_substitute,)) for _ in range(20)]
        for t in threads:
            t.start()
        for t in threads:
            t.join()
        numbers = [int(s.number) for s in store.get().substitutes]
        self.assertEqual(numbers, list(range(12, 32)))

    def test_reset(self):
        store = SheetStore(SheetState())
        self.assertEqual(len(store.reset().lineup), 11)


if __name__ == '__main__':
    unittest.main()
