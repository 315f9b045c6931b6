"""Unit tests for core/aggregator.py — counts, rankings, parent grouping."""

from core.aggregator import count_by, get_parent, parent_names, summarize, top_n
from core.models import Assembly, Dataset, Drive, ManufacturerEntry


def _drives(*manufacturers: str) -> tuple[Drive, ...]:
    return tuple(Drive(drive_sn=f"D{i}", drive_manufacturer=m) for i, m in enumerate(manufacturers))


class TestCountBy:
    def test_values_are_trimmed(self):
        counts = count_by(_drives("WD", " WD ", "WD\t"), "drive_manufacturer")
        assert counts == {"WD": 3}

    def test_empty_strings_are_counted(self):
        counts = count_by(_drives("", "WD", "  "), "drive_manufacturer")
        assert counts == {"": 2, "WD": 1}

    def test_first_seen_order(self):
        counts = count_by(_drives("B", "A", "B", "C"), "drive_manufacturer")
        assert list(counts) == ["B", "A", "C"]

    def test_empty_collection(self):
        assert count_by((), "built_by") == {}


class TestTopN:
    def test_builder_example(self):
        assemblies = tuple(Assembly(serial_number=f"S{i}", built_by="ACME") for i in range(3))
        assemblies += (Assembly(serial_number="S9", built_by="Globex"),)
        assert top_n(count_by(assemblies, "built_by"), 1) == [("ACME", 3)]

    def test_ties_keep_insertion_order(self):
        counts = {"b": 2, "a": 2, "c": 5, "d": 2}
        assert top_n(counts, 4) == [("c", 5), ("b", 2), ("a", 2), ("d", 2)]

    def test_n_larger_than_mapping(self):
        assert top_n({"x": 1}, 15) == [("x", 1)]


class TestGetParent:
    def test_variant_rolls_up_to_reference(self):
        assert get_parent("Seagate-OEM", {"Seagate", "WD"}) == "Seagate"

    def test_unrelated_name_is_its_own_parent(self):
        assert get_parent("WD", {"Seagate"}) == "WD"

    def test_reference_is_its_own_parent(self):
        assert get_parent("Seagate", {"Seagate"}) == "Seagate"

    def test_longest_prefix_wins(self):
        refs = ["Sea", "Seagate", "Seagate Ex"]
        assert get_parent("Seagate Exos", refs) == "Seagate Ex"
        assert get_parent("Seagate Exos", list(reversed(refs))) == "Seagate Ex"

    def test_empty_reference_is_ignored(self):
        assert get_parent("WD", {""}) == "WD"

    def test_prefix_match_is_case_sensitive(self):
        assert get_parent("seagate-oem", {"Seagate"}) == "seagate-oem"


class TestParentNames:
    def test_maps_every_manufacturer(self):
        counts = {"Seagate": 5, "WD": 3, "Seagate-OEM": 1}
        assert parent_names(counts) == {"Seagate": "Seagate", "WD": "WD", "Seagate-OEM": "Seagate"}

    def test_only_top_references_become_parents(self):
        counts = {"Seagate": 5, "WD": 3, "Seagate-OEM": 1}
        assert parent_names(counts, reference_size=1)["Seagate-OEM"] == "Seagate"
        assert parent_names({"WD": 5, "Seagate": 3, "Seagate-OEM": 1}, reference_size=1)["Seagate-OEM"] == "Seagate-OEM"


class TestSummarize:
    def test_unique_counts(self, sample_dataset):
        summary = summarize(sample_dataset)
        assert summary.unique_manufacturers == 3  # Seagate, Seagate-OEM, WD
        assert summary.unique_builders == 2  # ACME, Globex
        assert summary.unique_enclosures == 3  # SN100, SN300, LOOSE9

    def test_top_lists_carry_counts_and_parents(self, sample_dataset):
        summary = summarize(sample_dataset)
        assert summary.top_builders == (("ACME", 2), ("Globex", 1))
        assert summary.top_manufacturers == (
            ManufacturerEntry(name="WD", count=2, parent="WD"),
            ManufacturerEntry(name="Seagate", count=1, parent="Seagate"),
            ManufacturerEntry(name="Seagate-OEM", count=1, parent="Seagate"),
        )
        assert summary.reference_names == ("WD", "Seagate", "Seagate-OEM")

    def test_top_is_capped(self):
        drives = _drives(*[f"M{i}" for i in range(20)])
        summary = summarize(Dataset(drives=drives), top=15)
        assert len(summary.top_manufacturers) == 15
        assert summary.unique_manufacturers == 20

    def test_rows_pair_lists_positionally(self, sample_dataset):
        rows = summarize(sample_dataset).rows()
        assert len(rows) == 3
        assert rows[0][0].name == "WD" and rows[0][1] == ("ACME", 2)
        assert rows[2][0].name == "Seagate-OEM" and rows[2][1] is None

    def test_empty_dataset(self):
        summary = summarize(Dataset())
        assert summary.unique_manufacturers == 0
        assert summary.unique_enclosures == 0
        assert summary.rows() == []
