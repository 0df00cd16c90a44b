from .api import convert_xlsx_to_html, convert_xlsx_to_pdf, layout_workbook, load_workbook
from .config import load_options
from .errors import (
    CellAddressError,
    ExcelPdfError,
    ScopeParseError,
    UnsupportedWorkbookError,
    WorkbookNotFoundError,
)
from .logger import setup_logger
from .model import ConvertOptions, PageLayout, RenderableUnit, WorkbookDoc

__all__ = [
    "CellAddressError",
    "ConvertOptions",
    "ExcelPdfError",
    "PageLayout",
    "RenderableUnit",
    "ScopeParseError",
    "UnsupportedWorkbookError",
    "WorkbookDoc",
    "WorkbookNotFoundError",
    "convert_xlsx_to_html",
    "convert_xlsx_to_pdf",
    "layout_workbook",
    "load_options",
    "load_workbook",
    "setup_logger",
]
