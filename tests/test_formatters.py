import unittest

# Add the project root to the path
import sys
import os
sys.path.insert(0, os.path.join(os.path.dirname(__file__), '..'))

from matchsheet.formatters import format_match_date, surname, export_filename


class TestFormatters(unittest.TestCase):
    def test_format_match_date(self):
        """ISO dates are shown as dd mmm yyyy in Spanish"""
        self.assertEqual(format_match_date('2024-05-01'), '01 may 2024')
        self.assertEqual(format_match_date('2023-10-12'), '12 oct 2023')
        self.assertEqual(format_match_date('2023-01-31T18:00:00'), '31 ene 2023')

    def test_format_match_date_invalid(self):
        """Invalid input is returned as-is"""
        self.assertEqual(format_match_date('invalid date'), 'invalid date')
        self.assertEqual(format_match_date(''), '')

    def test_surname(self):
        self.assertEqual(surname('Gonzalo González'), 'González')
        self.assertEqual(surname('A. Ruffinetti'), 'Ruffinetti')
        self.assertEqual(surname('Pelé'), 'Pelé')
        self.assertEqual(surname('   '), '')

    def test_export_filename(self):
        """Opponent and date are interpolated verbatim"""
        self.assertEqual(export_filename('Sunchales FC', '2024-05-01', 'png'),
                         'planilla-Sunchales FC-2024-05-01.png')
        self.assertEqual(export_filename('A/B', '', 'pdf'), 'planilla-A/B-.pdf')


if __name__ == '__main__':
    unittest.main()
