from __future__ import annotations

from typing import Iterable, Protocol, Sequence

from .model import BoxStyle, ContentLayer, PageLayout


class PageRenderer(Protocol):
    """Backend that turns composed pages into an output document."""

    def begin_page(self, page: PageLayout) -> None: ...

    def define_columns(self, relative_widths: Sequence[float]) -> None: ...

    def place_cell(
        self,
        row: int,
        col: int,
        rowspan: int,
        colspan: int,
        box: BoxStyle,
        layers: Sequence[ContentLayer],
    ) -> None: ...

    def end_page(self) -> None: ...

    def close(self) -> None: ...


def render_pages(pages: Iterable[PageLayout], renderer: PageRenderer) -> int:
    count = 0
    for page in pages:
        renderer.begin_page(page)
        renderer.define_columns(page.column_widths)
        for unit in page.units:
            renderer.place_cell(
                unit.grid_row,
                unit.grid_col,
                unit.rowspan,
                unit.colspan,
                unit.box,
                unit.layers,
            )
        renderer.end_page()
        count += 1
    renderer.close()
    return count
