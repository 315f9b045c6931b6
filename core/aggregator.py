"""
aggregator.py -- Startup summary: frequency counts, rankings, and parent
manufacturer grouping.

All functions are pure. summarize() is called once after loading and its
result is passed explicitly to the formatter; nothing here is cached at
module level.
"""

from collections.abc import Iterable, Mapping, Sequence

from .models import Assembly, Dataset, Drive, ManufacturerEntry, Summary

DEFAULT_TOP_N = 15
DEFAULT_REFERENCE_SIZE = 10


def count_by(records: Iterable, field: str) -> dict[str, int]:
    """Count trimmed values of field. Keys keep first-seen order; "" counts too."""
    counts: dict[str, int] = {}
    for record in records:
        value = str(getattr(record, field)).strip()
        counts[value] = counts.get(value, 0) + 1
    return counts


def top_n(counts: Mapping[str, int], n: int) -> list[tuple[str, int]]:
    """Return the n highest counts. Ties keep the mapping's insertion order."""
    ranked = sorted(counts.items(), key=lambda item: item[1], reverse=True)
    return ranked[:n]


def get_parent(name: str, references: Iterable[str]) -> str:
    """Return the reference name that name extends, or name itself.

    A reference is a candidate when name starts with it but is not equal to
    it. With several candidates the longest one wins.
    """
    best = ""
    for ref in references:
        if ref and name != ref and name.startswith(ref) and len(ref) > len(best):
            best = ref
    return best or name


def parent_names(counts: Mapping[str, int], reference_size: int = DEFAULT_REFERENCE_SIZE) -> dict[str, str]:
    """Map every counted manufacturer to its parent name."""
    references = [name for name, _ in top_n(counts, reference_size)]
    return {name: get_parent(name, references) for name in counts}


def _manufacturer_counts(drives: Sequence[Drive]) -> dict[str, int]:
    return count_by(drives, "drive_manufacturer")


def _builder_counts(assemblies: Sequence[Assembly]) -> dict[str, int]:
    return count_by(assemblies, "built_by")


def summarize(
    dataset: Dataset,
    top: int = DEFAULT_TOP_N,
    reference_size: int = DEFAULT_REFERENCE_SIZE,
) -> Summary:
    manufacturers = _manufacturer_counts(dataset.drives)
    builders = _builder_counts(dataset.assemblies)
    parents = parent_names(manufacturers, reference_size)
    references = tuple(name for name, _ in top_n(manufacturers, reference_size))

    top_manufacturers = tuple(
        ManufacturerEntry(name=name, count=count, parent=parents[name]) for name, count in top_n(manufacturers, top)
    )

    return Summary(
        unique_manufacturers=len(manufacturers),
        unique_builders=len(builders),
        unique_enclosures=len({d.enclosure_sn for d in dataset.drives}),
        top_manufacturers=top_manufacturers,
        top_builders=tuple(top_n(builders, top)),
        reference_names=references,
        parents=parents,
    )
