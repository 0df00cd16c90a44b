from .colors import ColorPalette
from .workbook import OpenpyxlWorkbookReader

__all__ = ["ColorPalette", "OpenpyxlWorkbookReader"]
