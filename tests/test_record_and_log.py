import tempfile
import unittest
from pathlib import Path

from resistor_qc.bands import BandSet
from resistor_qc.errors import InvalidMeasurement, InvalidSelection, RecordFormatError, StoreNotFoundError
from resistor_qc.logging_utils import (
    STORE_FIELDS,
    BatchLog,
    append_record,
    check_store,
    filter_by_supplier,
    read_records,
    select_store,
)
from resistor_qc.record import FIELD_NAMES, BatchRecord, assemble, evaluate_batch


def _record(company="Farnell", date="07062020", **overrides):
    fields = dict(
        company=company,
        date=date,
        failure_rate=10.0,
        nominal_value=1000.0,
        tolerance=0.05,
        mean_resistance=1010.0,
        std_deviation=30.0,
        variance=900.0,
    )
    fields.update(overrides)
    return BatchRecord(**fields)


class BatchRecordTests(unittest.TestCase):
    def test_assemble_maps_arguments_to_fields(self):
        record = assemble("DigiKey", "01012021", 4700.0, 0.01, 4690.0, 12.5, 156.25, 20.0)
        self.assertEqual(
            BatchRecord("DigiKey", "01012021", 20.0, 4700.0, 0.01, 4690.0, 12.5, 156.25),
            record,
        )

    def test_field_order_matches_log_layout(self):
        self.assertEqual(
            (
                "company",
                "date",
                "failure_rate",
                "nominal_value",
                "tolerance",
                "mean_resistance",
                "std_deviation",
                "variance",
            ),
            FIELD_NAMES,
        )

    def test_evaluate_batch_scenario(self):
        bands = BandSet.from_indices(4, [1, 0, 4, 1])
        record = evaluate_batch("Farnell", "07062020", bands, [1000.0] * 9 + [1100.0])
        self.assertEqual(_record(), record)

    def test_evaluate_batch_rejects_short_sample(self):
        bands = BandSet.from_indices(4, [1, 0, 4, 1])
        with self.assertRaises(InvalidMeasurement):
            evaluate_batch("Farnell", "07062020", bands, [1000.0] * 9)

    def test_from_row_rejects_bad_number(self):
        row = _record().to_row()
        row["variance"] = "lots"
        with self.assertRaises(RecordFormatError):
            BatchRecord.from_row(row)

    def test_from_row_rejects_missing_field(self):
        row = _record().to_row()
        del row["tolerance"]
        with self.assertRaises(RecordFormatError):
            BatchRecord.from_row(row)


class BatchLogTests(unittest.TestCase):
    def setUp(self):
        self._tmp = tempfile.TemporaryDirectory()
        self.dir = Path(self._tmp.name)

    def tearDown(self):
        self._tmp.cleanup()

    def test_append_then_read_reproduces_every_field(self):
        path = self.dir / "batches.csv"
        records = [
            _record(),
            _record(
                company="Rapid Electronics",
                date="29022020",
                failure_rate=33.333,
                nominal_value=0.1 + 0.2,
                tolerance=0.0025,
                mean_resistance=1 / 3,
                std_deviation=2 ** 0.5,
                variance=1e-12,
            ),
            _record(company='Odd, "quoted" name'),
        ]
        for r in records:
            append_record(path, r)
        self.assertEqual(records, list(read_records(path)))

    def test_header_written_once(self):
        path = self.dir / "nested" / "log.csv"
        with BatchLog(path) as log:
            log.append(_record())
        with BatchLog(path) as log:
            log.append(_record(company="DigiKey"))
        lines = path.read_text(encoding="utf-8").splitlines()
        self.assertEqual(3, len(lines))
        self.assertEqual(",".join(STORE_FIELDS), lines[0])
        self.assertTrue(lines[1].endswith(",population"))

    def test_append_requires_context_manager(self):
        with self.assertRaises(RuntimeError):
            BatchLog(self.dir / "x.csv").append(_record())

    def test_filter_by_supplier(self):
        path = self.dir / "batches.csv"
        for company in ("Farnell", "DigiKey", "Farnell", "RSComponents"):
            append_record(path, _record(company=company))
        farnell = list(filter_by_supplier(read_records(path), "Farnell"))
        self.assertEqual(2, len(farnell))
        self.assertTrue(all(r.company == "Farnell" for r in farnell))
        self.assertEqual([], list(filter_by_supplier(read_records(path), "Mouser")))

    def test_unexpected_header_rejected(self):
        path = self.dir / "legacy.csv"
        path.write_text("Farnell\n07062020\n10.0\n", encoding="utf-8")
        with self.assertRaises(RecordFormatError):
            list(read_records(path))

    def test_malformed_row_reports_line(self):
        path = self.dir / "batches.csv"
        append_record(path, _record())
        with path.open("a", encoding="utf-8") as f:
            f.write("Farnell,07062020,ten,1000.0,0.05,1010.0,30.0,900.0,population\n")
        with self.assertRaises(RecordFormatError) as ctx:
            list(read_records(path))
        self.assertIn(":3:", str(ctx.exception))

    def test_empty_file_has_no_records(self):
        path = self.dir / "empty.csv"
        path.touch()
        self.assertEqual([], list(read_records(path)))

    def test_missing_file_raises(self):
        with self.assertRaises(StoreNotFoundError):
            list(read_records(self.dir / "nope.csv"))

    def test_append_to_foreign_layout_leaves_file_untouched(self):
        path = self.dir / "march.csv"
        original = "Farnell\n07062020\n10.000000\n"
        path.write_text(original, encoding="utf-8")
        with self.assertRaises(RecordFormatError):
            append_record(path, _record())
        self.assertEqual(original, path.read_text(encoding="utf-8"))

    def test_append_to_eight_column_header_rejected(self):
        path = self.dir / "march.csv"
        original = ",".join(FIELD_NAMES) + "\n"
        path.write_text(original, encoding="utf-8")
        with self.assertRaises(RecordFormatError):
            check_store(path)
        with self.assertRaises(RecordFormatError):
            append_record(path, _record())
        self.assertEqual(original, path.read_text(encoding="utf-8"))

    def test_formulas_are_not_mixed_in_one_log(self):
        path = self.dir / "march.csv"
        append_record(path, _record(), formula="legacy")
        before = path.read_bytes()
        with self.assertRaises(RecordFormatError):
            append_record(path, _record())
        self.assertEqual(before, path.read_bytes())
        append_record(path, _record(company="DigiKey"), formula="legacy")
        self.assertEqual(2, len(list(read_records(path))))

    def test_check_store_accepts_missing_and_empty_files(self):
        check_store(self.dir / "absent.csv")
        (self.dir / "empty.csv").touch()
        check_store(self.dir / "empty.csv", "legacy")


class SelectStoreTests(unittest.TestCase):
    def setUp(self):
        self._tmp = tempfile.TemporaryDirectory()
        self.dir = Path(self._tmp.name)

    def tearDown(self):
        self._tmp.cleanup()

    def test_appends_extension(self):
        path = select_store("march", self.dir, must_exist=False)
        self.assertEqual(self.dir / "march.csv", path)
        self.assertEqual(path, select_store("march.csv", self.dir, must_exist=False))

    def test_missing_store_raises_when_required(self):
        with self.assertRaises(StoreNotFoundError):
            select_store("march", self.dir)

    def test_existing_store_resolves(self):
        (self.dir / "march.csv").touch()
        self.assertEqual(self.dir / "march.csv", select_store("march", self.dir))

    def test_rejects_paths_and_empty_names(self):
        for name in ("", "  ", "../escape", "sub/log", "..", "a\\b"):
            with self.assertRaises(InvalidSelection, msg=name):
                select_store(name, self.dir, must_exist=False)
