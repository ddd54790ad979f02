import unittest
import io
from unittest import mock

# Add the project root to the path
import sys
import os
sys.path.insert(0, os.path.join(os.path.dirname(__file__), '..'))

from PIL import Image
from reportlab import rl_config

from matchsheet.assets import AssetError, AssetResolver
from matchsheet.exporter import EncodeError, encode_pdf, export_pdf, export_png, run_export
from matchsheet.rasterizer import CaptureError
from matchsheet.state import default_state, update_metadata


def _failing_loader():
    raise AssetError("cross-origin image")


class TestExporter(unittest.TestCase):
    def setUp(self):
        """Sheet against Sunchales FC, no emblem configured"""
        self.state = update_metadata(default_state(), opponent='Sunchales FC', date='2024-05-01')
        self.assets = AssetResolver()

    def test_png_filename(self):
        """PNG export is named after opponent and date"""
        artifact = export_png(self.state, self.assets)
        self.assertEqual(artifact.filename, 'planilla-Sunchales FC-2024-05-01.png')
        self.assertEqual(artifact.mimetype, 'image/png')

    def test_png_content(self):
        """Scale 2 RGBA bitmap with opaque white background"""
        artifact = export_png(self.state, self.assets)
        self.assertTrue(artifact.content.startswith(b'\x89PNG'))
        image = Image.open(io.BytesIO(artifact.content))
        self.assertEqual(image.size, (1588, 2246))
        self.assertEqual((artifact.width_px, artifact.height_px), (1588, 2246))
        self.assertEqual(image.mode, 'RGBA')
        self.assertEqual(image.getpixel((10, 1000)), (255, 255, 255, 255))

    def test_pdf_export(self):
        """Single A4 page from a scale 3 capture"""
        artifact = export_pdf(self.state, self.assets)
        self.assertEqual(artifact.filename, 'planilla-Sunchales FC-2024-05-01.pdf')
        self.assertEqual(artifact.mimetype, 'application/pdf')
        self.assertEqual((artifact.width_px, artifact.height_px), (2382, 3369))
        self.assertTrue(artifact.content.startswith(b'%PDF'))
        self.assertIn(b'/Count 1', artifact.content)
        self.assertIn(b'/Subtype /Image', artifact.content)

    def test_pdf_image_covers_page(self):
        """The bitmap is placed at the origin and scaled to the full A4 page"""
        bitmap = Image.new('RGBA', (794, 1123), (255, 255, 255, 255))
        with mock.patch.object(rl_config, 'pageCompression', 0):
            content = encode_pdf(bitmap)
        self.assertIn(b'/MediaBox [ 0 0 595.2756 841.8898 ]', content)
        self.assertIn(b'595.2756 0 0 841.8898 0 0 cm', content)

    def test_encode_pdf_small_bitmap(self):
        """Any bitmap is stretched onto the page"""
        content = encode_pdf(Image.new('RGBA', (10, 14), (255, 255, 255, 255)))
        self.assertTrue(content.startswith(b'%PDF'))

    def test_filename_not_sanitised(self):
        state = update_metadata(self.state, opponent='Rival/Sub 20')
        artifact = export_png(state, self.assets, pixel_scale=1)
        self.assertEqual(artifact.filename, 'planilla-Rival/Sub 20-2024-05-01.png')

    def test_capture_failure_raises(self):
        assets = AssetResolver({'emblem': _failing_loader})
        with self.assertRaises(CaptureError):
            export_png(self.state, assets)


class TestRunExport(unittest.TestCase):
    def setUp(self):
        self.state = update_metadata(default_state(), opponent='Sunchales FC', date='2024-05-01')

    def test_png(self):
        artifact = run_export('png', self.state, AssetResolver())
        self.assertEqual(artifact.filename, 'planilla-Sunchales FC-2024-05-01.png')

    def test_capture_failure_returns_nothing(self):
        """A failing capture is logged and produces no file"""
        assets = AssetResolver({'emblem': _failing_loader})
        for kind in ('png', 'pdf'):
            with self.subTest(kind=kind):
                with self.assertLogs('matchsheet.exporter', level='ERROR'):
                    self.assertIsNone(run_export(kind, self.state, assets))

    def test_encode_failure_returns_nothing(self):
        with mock.patch('matchsheet.exporter.encode_png', side_effect=EncodeError('disk full')):
            with self.assertLogs('matchsheet.exporter', level='ERROR'):
                self.assertIsNone(run_export('png', self.state, AssetResolver()))

    def test_pdf_never_encoded_after_failed_capture(self):
        """Encoding only starts once capture has succeeded"""
        assets = AssetResolver({'emblem': _failing_loader})
        with mock.patch('matchsheet.exporter.encode_pdf') as encode:
            with self.assertLogs('matchsheet.exporter', level='ERROR'):
                run_export('pdf', self.state, assets)
        encode.assert_not_called()

    def test_unknown_kind(self):
        with self.assertRaises(ValueError):
            run_export('gif', self.state, AssetResolver())

    def test_exports_are_independent(self):
        """Two exports of the same snapshot give identical files"""
        first = run_export('png', self.state, AssetResolver())
        second = run_export('png', self.state, AssetResolver())
        self.assertEqual(first.content, second.content)


if __name__ == '__main__':
    unittest.main()
