from __future__ import annotations

import base64
from html import escape as html_escape
from typing import Sequence

from .model import BoxStyle, ContentLayer, ImageLayer, PageLayout, TextLayer

IMAGE_MIME = {
    "jpg": "image/jpeg",
    "jpeg": "image/jpeg",
    "png": "image/png",
    "gif": "image/gif",
    "bmp": "image/bmp",
    "tiff": "image/tiff",
    "emf": "image/emf",
    "wmf": "image/wmf",
}


class HtmlPageRenderer:
    def __init__(self, title: str = "Workbook") -> None:
        self.title = title
        self._sections: list[str] = []
        self._page: PageLayout | None = None
        self._widths: list[float] = []
        self._cells: dict[tuple[int, int], str] = {}
        self._covered: set[tuple[int, int]] = set()
        self._html: str | None = None

    @property
    def html(self) -> str:
        if self._html is None:
            raise RuntimeError("close() must be called before reading the document")
        return self._html

    def begin_page(self, page: PageLayout) -> None:
        self._page = page
        self._widths = []
        self._cells = {}
        self._covered = set()

    def define_columns(self, relative_widths: Sequence[float]) -> None:
        page = self._require_page()
        total = sum(relative_widths)
        if total <= 0:
            self._widths = [page.printable_width / max(1, len(relative_widths))] * len(relative_widths)
        else:
            self._widths = [w / total * page.printable_width for w in relative_widths]

    def place_cell(
        self,
        row: int,
        col: int,
        rowspan: int,
        colspan: int,
        box: BoxStyle,
        layers: Sequence[ContentLayer],
    ) -> None:
        self._require_page()
        for rr in range(row, row + rowspan):
            for cc in range(col, col + colspan):
                if (rr, cc) != (row, col):
                    self._covered.add((rr, cc))

        attrs: list[str] = []
        if rowspan > 1:
            attrs.append(f'rowspan="{rowspan}"')
        if colspan > 1:
            attrs.append(f'colspan="{colspan}"')
        classes = ["sv-cell"]
        if not layers:
            classes.append("sv-empty")
        attrs.append(f'class="{" ".join(classes)}"')
        style_css = _box_css(box)
        text = next((layer for layer in layers if isinstance(layer, TextLayer)), None)
        if text is not None:
            style_css = (
                f"{style_css} text-align: {text.orientation.h_align}; vertical-align: {text.orientation.v_align};"
            ).strip()
        if style_css:
            attrs.append(f'style="{html_escape(style_css)}"')

        content = "".join(_layer_html(layer) for layer in layers)
        self._cells[(row, col)] = f"<td {' '.join(attrs)}>{content}</td>"

    def end_page(self) -> None:
        page = self._require_page()
        out: list[str] = []
        out.append('<section class="sheet">')
        out.append(f"<h2>{html_escape(page.sheet_name)} <code>{html_escape(page.bound.ref)}</code></h2>")
        out.append(f'<div class="sv-wrap" style="background:#{html_escape(page.page_color)}">')
        out.append('<table class="sv-grid">')
        out.append("<colgroup>")
        for width in self._widths:
            out.append(f'<col style="width:{width:.1f}pt">')
        out.append("</colgroup>")
        out.append("<tbody>")
        for row, height in enumerate(page.row_heights):
            out.append(f'<tr style="height:{height:.1f}pt">')
            for col in range(len(self._widths)):
                if (row, col) in self._covered:
                    continue
                out.append(self._cells.get((row, col), '<td class="sv-cell sv-empty"></td>'))
            out.append("</tr>")
        out.append("</tbody>")
        out.append("</table>")
        out.append("</div>")
        out.append("</section>")
        self._sections.append("\n".join(out))
        self._page = None

    def close(self) -> None:
        parts: list[str] = []
        parts.append("<!doctype html>")
        parts.append('<html lang="en">')
        parts.append("<head>")
        parts.append('<meta charset="utf-8">')
        parts.append(f"<title>{html_escape(self.title)}</title>")
        parts.append(_html_css())
        parts.append("</head>")
        parts.append("<body>")
        parts.append('<main class="page">')
        parts.append(f"<h1>{html_escape(self.title)}</h1>")
        if not self._sections:
            parts.append('<p class="empty">No renderable page.</p>')
        parts.extend(self._sections)
        parts.append("</main>")
        parts.append("</body>")
        parts.append("</html>")
        self._html = "\n".join(parts) + "\n"

    def _require_page(self) -> PageLayout:
        if self._page is None:
            raise RuntimeError("begin_page() must be called first")
        return self._page


def _box_css(box: BoxStyle) -> str:
    parts: list[str] = []
    for side in ("top", "bottom", "left", "right"):
        width = getattr(box.borders, side)
        if width > 0:
            parts.append(f"border-{side}: {width:g}pt solid #000000;")
    if box.fill:
        parts.append(f"background-color: #{box.fill};")
    return " ".join(parts)


def _layer_html(layer: ContentLayer) -> str:
    if isinstance(layer, ImageLayer):
        mime = IMAGE_MIME.get(layer.format, f"image/{layer.format}")
        payload = base64.b64encode(layer.data).decode("ascii")
        return (
            f'<img class="sv-pic" src="data:{mime};base64,{payload}" '
            f'style="max-width:{layer.max_width:.1f}pt;max-height:{layer.max_height:.1f}pt" alt="">'
        )
    if isinstance(layer, TextLayer):
        return _text_html(layer)
    raise TypeError(f"Unknown content layer: {type(layer).__name__}")


def _text_html(layer: TextLayer) -> str:
    orient = layer.orientation
    font = layer.font
    css: list[str] = [
        f"font-family: '{font.family}';",
        f"font-size: {font.size:g}pt;",
        f"color: #{layer.color};",
        f"text-align: {orient.h_align};",
    ]
    if font.bold:
        css.append("font-weight: 700;")
    if font.italic:
        css.append("font-style: italic;")
    if font.underline:
        css.append("text-decoration: underline;")
    if orient.padding_left:
        css.append(f"padding-left: {orient.padding_left:g}pt;")
    css.append("white-space: pre-wrap;" if orient.wrap else "white-space: pre;")
    if orient.rotation:
        css.append(f"transform: rotate({orient.rotation:g}deg);")

    classes = ["sv-text"]
    if orient.sideways:
        classes.append("sv-sideways")
    return f'<div class="{" ".join(classes)}" style="{html_escape(" ".join(css))}">{html_escape(layer.text)}</div>'


def _html_css() -> str:
    return """<style>
:root {
  --line: #d0d7de;
  --text: #111827;
}
* { box-sizing: border-box; }
body { margin: 0; background: #fff; color: var(--text); font: 14px/1.5 -apple-system, BlinkMacSystemFont, 'Segoe UI', sans-serif; }
.page { max-width: 99vw; margin: 0 auto; padding: 18px 14px 80px; }
h1 { margin: 0 0 12px; font-size: 24px; }
h2 { margin: 28px 0 10px; font-size: 18px; }
.empty { color: #6b7280; font-style: italic; }
.sv-wrap { border: 1px solid var(--line); border-radius: 8px; overflow: auto; padding: 8px; }
.sv-grid { border-collapse: collapse; table-layout: fixed; }
.sv-grid td { padding: 0 2px; overflow: hidden; position: relative; vertical-align: middle; }
.sv-text { display: block; }
.sv-sideways { display: inline-block; }
.sv-pic { display: block; margin: auto; object-fit: contain; }
</style>"""
