"""View builder subpackage exports."""

from mangashelf.views.builder import (
    ViewBuilder,
    build_view,
    build_year_index,
    find_first_index_for_year,
    with_years,
)
from mangashelf.views.sorting import SortSpec, apply_sort, parse_sort, sort_mangas

__all__ = [
    "SortSpec",
    "parse_sort",
    "apply_sort",
    "sort_mangas",
    "ViewBuilder",
    "build_view",
    "build_year_index",
    "find_first_index_for_year",
    "with_years",
]
