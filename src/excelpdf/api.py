from __future__ import annotations

from pathlib import Path
from typing import Iterable, Mapping

from loguru import logger

from .layout.compositor import compose_pages
from .layout.overlay import ImageSource, OverlayStore
from .layout.scope import resolve_targets
from .model import ConvertOptions, PageLayout, PrintScope, WorkbookDoc
from .reader.workbook import OpenpyxlWorkbookReader
from .render_html import HtmlPageRenderer
from .render_pdf import PdfPageRenderer
from .renderer import render_pages


def load_workbook(path: str | Path, options: ConvertOptions | None = None) -> WorkbookDoc:
    opts = options or ConvertOptions()
    reader = OpenpyxlWorkbookReader(path, opts)
    return reader.parse()


def layout_workbook(
    path: str | Path,
    *,
    scopes: Iterable[str | PrintScope] | None = None,
    values: Mapping[str, object] | None = None,
    images: Mapping[str, ImageSource] | None = None,
    options: ConvertOptions | None = None,
    log=None,
) -> list[PageLayout]:
    opts = options or ConvertOptions()
    sink = log or logger
    overlay = OverlayStore.from_mappings(values, images, sink)
    workbook = load_workbook(path, opts)
    targets = resolve_targets(workbook, scopes, sink)
    return compose_pages(workbook, targets, overlay, opts, sink)


def convert_xlsx_to_pdf(
    path: str | Path,
    output: str | Path,
    *,
    scopes: Iterable[str | PrintScope] | None = None,
    values: Mapping[str, object] | None = None,
    images: Mapping[str, ImageSource] | None = None,
    options: ConvertOptions | None = None,
    log=None,
) -> Path:
    opts = options or ConvertOptions()
    sink = log or logger
    pages = layout_workbook(path, scopes=scopes, values=values, images=images, options=opts, log=sink)

    output_path = Path(output)
    output_path.parent.mkdir(parents=True, exist_ok=True)
    renderer = PdfPageRenderer(output_path, opts)
    render_pages(pages, renderer)
    sink.info(
        "Wrote {} ({} layout page(s), {} PDF page(s))",
        output_path,
        len(pages),
        renderer.physical_pages,
    )
    return output_path


def convert_xlsx_to_html(
    path: str | Path,
    *,
    scopes: Iterable[str | PrintScope] | None = None,
    values: Mapping[str, object] | None = None,
    images: Mapping[str, ImageSource] | None = None,
    options: ConvertOptions | None = None,
    log=None,
) -> str:
    pages = layout_workbook(path, scopes=scopes, values=values, images=images, options=options, log=log)
    renderer = HtmlPageRenderer(title=Path(path).name)
    render_pages(pages, renderer)
    return renderer.html
