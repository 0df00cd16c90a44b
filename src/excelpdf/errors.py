from __future__ import annotations


class ExcelPdfError(Exception):
    pass


class CellAddressError(ExcelPdfError, ValueError):
    pass


class ScopeParseError(CellAddressError):
    pass


class WorkbookNotFoundError(ExcelPdfError, FileNotFoundError):
    pass


class UnsupportedWorkbookError(ExcelPdfError):
    pass
