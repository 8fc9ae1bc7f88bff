import json
import os
import tempfile
import unittest
import xml.etree.ElementTree as ET

from stl2views import (
    VIEW_NAMES, FormatError, ProcessingError, SVGExporter, convert_stl_file,
    process_stl
)
from stl2views.core import main
from stl2views.layout import SheetLayout
from stl_samples import CUBE_ASCII, CUBE_BINARY

SVG_NS = "{http://www.w3.org/2000/svg}"


class TestProcessSTL(unittest.TestCase):
    def test_cube(self):
        result = process_stl(CUBE_ASCII)
        self.assertTrue(result.success)
        self.assertTrue(result.model_id)
        self.assertEqual([v.name for v in result.views], list(VIEW_NAMES))

    def test_model_ids_differ(self):
        self.assertNotEqual(process_stl(CUBE_BINARY).model_id,
                            process_stl(CUBE_BINARY).model_id)

    def test_to_dict_is_json_ready(self):
        data = json.loads(json.dumps(process_stl(CUBE_ASCII, max_workers=2).to_dict()))
        self.assertEqual(set(data), {'success', 'modelId', 'views'})
        self.assertEqual(len(data['views']), 6)
        self.assertEqual(set(data['views'][0]), {'name', 'lines', 'bbox'})

    def test_failure_is_wrapped(self):
        with self.assertRaises(ProcessingError) as ctx:
            process_stl(b"invalid stl content")
        message = str(ctx.exception)
        self.assertTrue(message.startswith("processing failed: STL parsing failed: "))
        self.assertIsInstance(ctx.exception.__cause__, FormatError)


class TestSheetLayout(unittest.TestCase):
    def setUp(self):
        self.layout = SheetLayout(300.0, 200.0, margin=10.0, caption_height=0.0)

    def test_cells(self):
        self.assertEqual(self.layout.cell(0), (10.0, 10.0, 80.0, 80.0))
        self.assertEqual(self.layout.cell(4), (110.0, 110.0, 80.0, 80.0))

    def test_fit_flips_and_centres(self):
        transform = SheetLayout.fit((-1.0, -1.0, 1.0, 1.0), (10.0, 10.0, 80.0, 80.0))
        self.assertEqual(transform.apply((-1.0, 1.0)), (10.0, 10.0))
        self.assertEqual(transform.apply((1.0, -1.0)), (90.0, 90.0))
        self.assertEqual(transform.apply((0.0, 0.0)), (50.0, 50.0))

    def test_fit_keeps_aspect(self):
        transform = SheetLayout.fit((0.0, 0.0, 2.0, 1.0), (0.0, 0.0, 100.0, 100.0))
        self.assertEqual(transform.scale, 50.0)
        self.assertEqual(transform.apply((0.0, 0.5)), (0.0, 50.0))

    def test_grid_too_small(self):
        with self.assertRaises(ValueError):
            SheetLayout(100.0, 100.0, columns=2, rows=2)


class TestFiles(unittest.TestCase):
    def setUp(self):
        self.temp_dir = tempfile.mkdtemp()
        self.stl_path = os.path.join(self.temp_dir, "cube.stl")
        self.json_path = os.path.join(self.temp_dir, "cube.json")
        self.svg_path = os.path.join(self.temp_dir, "cube.svg")
        with open(self.stl_path, 'wb') as fh:
            fh.write(CUBE_BINARY)

    def tearDown(self):
        for file in os.listdir(self.temp_dir):
            os.remove(os.path.join(self.temp_dir, file))
        os.rmdir(self.temp_dir)

    def test_svg_export(self):
        views = process_stl(CUBE_ASCII).views
        SVGExporter(11.0, 8.5, self.svg_path).export_views(views)

        root = ET.parse(self.svg_path).getroot()
        groups = root.findall(f".//{SVG_NS}g")
        self.assertEqual([g.get('id') for g in groups], [f"view-{n}" for n in VIEW_NAMES])
        self.assertEqual(len(root.findall(f".//{SVG_NS}line")), 24)
        texts = [t.text for t in root.findall(f".//{SVG_NS}text")]
        self.assertEqual(texts[0], "Front (−Z)")

    def test_repeated_export_rewrites_sheet(self):
        views = process_stl(CUBE_ASCII).views
        exporter = SVGExporter(11.0, 8.5, self.svg_path)
        exporter.export_views(views)
        exporter.export_views(views)

        root = ET.parse(self.svg_path).getroot()
        ids = [g.get('id') for g in root.findall(f".//{SVG_NS}g")]
        self.assertEqual(ids, [f"view-{n}" for n in VIEW_NAMES])
        self.assertEqual(len(root.findall(f".//{SVG_NS}line")), 24)

    def test_convert_stl_file(self):
        result = convert_stl_file(self.stl_path, self.json_path, self.svg_path)

        with open(self.json_path, encoding='utf-8') as fh:
            data = json.load(fh)
        self.assertEqual(data['modelId'], result.model_id)
        self.assertEqual([v['name'] for v in data['views']], list(VIEW_NAMES))
        self.assertTrue(os.path.exists(self.svg_path))

    def test_main(self):
        self.assertEqual(main([self.stl_path, '--json', self.json_path, '--workers', '2']), 0)
        self.assertTrue(os.path.exists(self.json_path))

    def test_main_reports_failure(self):
        with open(self.stl_path, 'wb') as fh:
            fh.write(b"not an stl file")
        self.assertEqual(main([self.stl_path, '--json', self.json_path]), 1)
        self.assertFalse(os.path.exists(self.json_path))

if __name__ == '__main__':
    unittest.main()
