"""Style cache - translate xlrd XF records into shared xlwt styles.

Source cells reference styles by XF index into the workbook's style table. The
cache converts each distinct XF index (and each distinct font index) once, so
every destination cell with the same source style shares one ``xlwt.XFStyle``.

A cache belongs to exactly one destination workbook. Never reuse one across
outputs.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

import xlwt

if TYPE_CHECKING:
    from xlrd.book import Book
    from xlrd.formatting import XF

GENERAL_FORMAT = "General"


class StyleCache:
    """Per-destination map from source XF/font index to xlwt objects.

    Parameters
    ----------
    book : xlrd.book.Book
        Source workbook opened with ``formatting_info=True``.
    """

    def __init__(self, book: Book) -> None:
        self.book = book
        self._styles: dict[int, xlwt.XFStyle] = {}
        self._fonts: dict[int, xlwt.Font] = {}

    def __len__(self) -> int:
        return len(self._styles)

    @property
    def font_count(self) -> int:
        """Number of distinct destination fonts created so far."""
        return len(self._fonts)

    def style_for(self, xf_index: int) -> xlwt.XFStyle:
        """Return the shared destination style for a source XF index."""
        style = self._styles.get(xf_index)
        if style is None:
            style = self._build_style(xf_index)
            self._styles[xf_index] = style
        return style

    def font_for(self, font_index: int) -> xlwt.Font:
        """Return the shared destination font for a source font index."""
        font = self._fonts.get(font_index)
        if font is None:
            font = self._build_font(font_index)
            self._fonts[font_index] = font
        return font

    def _build_style(self, xf_index: int) -> xlwt.XFStyle:
        style = xlwt.XFStyle()
        if not 0 <= xf_index < len(self.book.xf_list):
            return style

        xf = self.book.xf_list[xf_index]
        style.font = self.font_for(xf.font_index)
        style.num_format_str = self._format_string(xf)
        _copy_alignment(xf, style.alignment)
        _copy_borders(xf, style.borders)
        _copy_pattern(xf, style.pattern)
        return style

    def _build_font(self, font_index: int) -> xlwt.Font:
        font = xlwt.Font()
        if not 0 <= font_index < len(self.book.font_list):
            return font

        src = self.book.font_list[font_index]
        font.name = src.name
        font.height = src.height
        font.bold = bool(src.bold) or src.weight >= 700
        font.italic = bool(src.italic)
        font.underline = src.underline_type
        font.struck_out = bool(src.struck_out)
        font.colour_index = src.colour_index
        font.escapement = src.escapement
        font.family = src.family
        font.charset = src.character_set
        return font

    def _format_string(self, xf: XF) -> str:
        fmt = self.book.format_map.get(xf.format_key)
        if fmt is None or not fmt.format_str:
            return GENERAL_FORMAT
        return fmt.format_str


def _copy_alignment(xf: XF, alignment: xlwt.Alignment) -> None:
    src = xf.alignment
    alignment.horz = src.hor_align
    alignment.vert = src.vert_align
    alignment.wrap = src.text_wrapped
    alignment.rota = src.rotation
    alignment.inde = src.indent_level
    alignment.shri = src.shrink_to_fit


def _copy_borders(xf: XF, borders: xlwt.Borders) -> None:
    src = xf.border
    borders.left = src.left_line_style
    borders.right = src.right_line_style
    borders.top = src.top_line_style
    borders.bottom = src.bottom_line_style
    borders.left_colour = src.left_colour_index
    borders.right_colour = src.right_colour_index
    borders.top_colour = src.top_colour_index
    borders.bottom_colour = src.bottom_colour_index


def _copy_pattern(xf: XF, pattern: xlwt.Pattern) -> None:
    src = xf.background
    pattern.pattern = src.fill_pattern
    pattern.pattern_fore_colour = src.pattern_colour_index
    pattern.pattern_back_colour = src.background_colour_index
