import sys
import unittest
from pathlib import Path

sys.path.insert(0, str(Path(__file__).resolve().parents[1] / "src"))

from nbbridge.cells import (
    join_source,
    model_cell_to_stored_cell,
    prune_cell,
    split_source,
    stored_cell_to_model,
    stored_cells_to_model,
)
from nbbridge.model import CODE, MARKUP, CellModel


class TestSource(unittest.TestCase):
    def test_split_keeps_newlines(self):
        self.assertEqual(split_source("a\nb\n"), ["a\n", "b\n"])
        self.assertEqual(split_source("a\n\nb"), ["a\n", "\n", "b"])
        self.assertEqual(split_source("a"), ["a"])
        self.assertEqual(split_source(""), [])

    def test_join_accepts_lists(self):
        self.assertEqual(join_source(["a\n", "b"]), "a\nb")
        self.assertEqual(join_source(None), "")


class TestStoredToModel(unittest.TestCase):
    def test_code_cell(self):
        cell = stored_cell_to_model(
            {
                "cell_type": "code",
                "execution_count": 7,
                "id": "abc",
                "metadata": {"tags": ["t"]},
                "outputs": [{"output_type": "stream", "name": "stdout", "text": ["x"]}],
                "source": ["a = 1\n", "a"],
            },
            "python",
        )
        self.assertEqual(cell.kind, CODE)
        self.assertEqual(cell.source, "a = 1\na")
        self.assertEqual(cell.execution_count, 7)
        self.assertEqual(cell.id, "abc")
        self.assertEqual(cell.metadata, {"tags": ["t"]})
        self.assertEqual(len(cell.outputs), 1)

    def test_markdown_and_raw(self):
        md = stored_cell_to_model(
            {"cell_type": "markdown", "metadata": {}, "source": "*x*", "attachments": {"a.png": {}}},
            "python",
        )
        self.assertEqual((md.kind, md.language), (MARKUP, "markdown"))
        self.assertEqual(md.attachments, {"a.png": {}})
        raw = stored_cell_to_model({"cell_type": "raw", "metadata": {}, "source": "r"}, "python")
        self.assertEqual((raw.kind, raw.language, raw.cell_type), (CODE, "raw", "raw"))

    def test_missing_fields_are_defaulted(self):
        cell = stored_cell_to_model({}, "r")
        self.assertEqual(cell.cell_type, "code")
        self.assertEqual(cell.language, "r")
        self.assertEqual(cell.source, "")
        self.assertEqual(cell.outputs, [])

    def test_document_skips_non_object_cells(self):
        model = stored_cells_to_model(
            {"metadata": {"a": 1}, "nbformat": 4},
            [{"cell_type": "code", "source": ""}, "junk", None],
            "python",
            {},
        )
        self.assertEqual(len(model.cells), 1)
        self.assertEqual(model.metadata, {"metadata": {"a": 1}, "nbformat": 4})


class TestModelToStored(unittest.TestCase):
    def test_code_cell_keeps_language_id_current(self):
        cell = CellModel(
            kind=CODE,
            source="select 1",
            language="kusto",
            metadata={"vscode": {"languageId": "sql"}},
            id="c1",
        )
        stored = model_cell_to_stored_cell(cell)
        self.assertEqual(stored["metadata"]["vscode"]["languageId"], "kusto")
        self.assertEqual(stored["id"], "c1")
        self.assertEqual(stored["outputs"], [])
        self.assertIsNone(stored["execution_count"])
        # The model itself is left untouched
        self.assertEqual(cell.metadata["vscode"]["languageId"], "sql")

    def test_raw_cell(self):
        cell = CellModel(kind=CODE, source="r", language="raw", cell_type="raw")
        self.assertEqual(
            dict(model_cell_to_stored_cell(cell)),
            {"cell_type": "raw", "metadata": {}, "source": "r"},
        )

    def test_markdown_attachments(self):
        cell = CellModel(
            kind=MARKUP,
            source="![img](attachment:a.png)",
            language="markdown",
            cell_type="markdown",
            attachments={"a.png": {"image/png": "AAAA"}},
        )
        stored = model_cell_to_stored_cell(cell)
        self.assertEqual(stored["attachments"], {"a.png": {"image/png": "AAAA"}})
        self.assertNotIn("outputs", stored)


class TestCellRoundTrip(unittest.TestCase):
    def test_raw_attachments_survive(self):
        stored = {
            "attachments": {"a.png": {"image/png": "AAAA"}},
            "cell_type": "raw",
            "metadata": {},
            "source": "r",
        }
        cell = stored_cell_to_model(stored, "python")
        self.assertEqual(cell.attachments, {"a.png": {"image/png": "AAAA"}})
        back = prune_cell(model_cell_to_stored_cell(cell))
        self.assertEqual(back["attachments"], {"a.png": {"image/png": "AAAA"}})
        self.assertEqual(back["source"], ["r"])

    def test_changed_language_is_written(self):
        cell = stored_cell_to_model(
            {"cell_type": "code", "execution_count": None, "metadata": {}, "outputs": [], "source": "1"},
            "python",
        )
        self.assertEqual(cell.default_language, "python")
        cell.language = "sql"
        stored = model_cell_to_stored_cell(cell)
        self.assertEqual(stored["metadata"]["vscode"], {"languageId": "sql"})
        self.assertEqual(stored_cell_to_model(stored, "python").language, "sql")

    def test_default_language_adds_no_metadata(self):
        cell = stored_cell_to_model(
            {"cell_type": "code", "execution_count": None, "metadata": {}, "outputs": [], "source": "1"},
            "python",
        )
        self.assertEqual(model_cell_to_stored_cell(cell)["metadata"], {})


class TestPrune(unittest.TestCase):
    def test_non_code_cells_lose_execution_fields(self):
        pruned = prune_cell(
            {"cell_type": "markdown", "metadata": {}, "source": "x", "outputs": [], "execution_count": 1}
        )
        self.assertNotIn("outputs", pruned)
        self.assertNotIn("execution_count", pruned)
        self.assertEqual(pruned["source"], ["x"])

    def test_code_cell_without_outputs_gets_empty_list(self):
        pruned = prune_cell({"cell_type": "code", "metadata": {}, "source": "", "execution_count": None})
        self.assertEqual(pruned["outputs"], [])
        self.assertEqual(pruned["source"], [])

    def test_error_and_display_outputs(self):
        pruned = prune_cell(
            {
                "cell_type": "code",
                "source": "",
                "outputs": [
                    {"output_type": "error", "ename": "E", "evalue": "v", "traceback": [], "extra": 1},
                    {"output_type": "display_data", "data": {}, "metadata": {}, "execution_count": 2},
                ],
            }
        )
        self.assertEqual(
            pruned["outputs"],
            [
                {"output_type": "error", "ename": "E", "evalue": "v", "traceback": []},
                {"output_type": "display_data", "data": {}, "metadata": {}},
            ],
        )


if __name__ == "__main__":  # pragma: no cover
    unittest.main()
