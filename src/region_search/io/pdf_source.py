from __future__ import annotations

from pathlib import Path

import fitz  # PyMuPDF

from region_search.core.geometry import PageGeometry, TextToken
from region_search.core.text_source import token_in_band


class PdfTextSource:
    """
    ``TextSource`` over a PDF opened with PyMuPDF.

    Every character is one token, read from ``page.get_text("rawdict")`` in
    block/line/span order, so a character offset in the page text is also
    the token index. Natural text bounds are the vertical envelope of the
    non-blank characters on the page.
    """

    def __init__(self, path: str | Path) -> None:
        self.path = Path(path)
        self._doc = fitz.open(str(self.path))
        self._chars: dict[int, list[TextToken]] = {}

    def __enter__(self) -> PdfTextSource:
        return self

    def __exit__(self, *exc_info: object) -> None:
        self.close()

    def close(self) -> None:
        self._doc.close()

    def page_count(self) -> int:
        return self._doc.page_count

    def _load_page(self, page: int) -> fitz.Page:
        if not 1 <= page <= self._doc.page_count:
            raise ValueError(f"page must be in 1..{self._doc.page_count}, got {page}.")
        return self._doc.load_page(page - 1)

    def _page_chars(self, page: int) -> list[TextToken]:
        cached = self._chars.get(page)
        if cached is not None:
            return cached
        raw = self._load_page(page).get_text("rawdict")
        chars: list[TextToken] = []
        for block in raw.get("blocks", []):
            for line in block.get("lines", []):
                for span in line.get("spans", []):
                    for ch in span.get("chars", []):
                        x0, y0, _x1, y1 = ch["bbox"]
                        chars.append(
                            TextToken(
                                text=ch["c"],
                                x=float(x0),
                                y=float(y0),
                                height=float(y1) - float(y0),
                            )
                        )
        self._chars[page] = chars
        return chars

    def page_geometry(self, page: int) -> PageGeometry:
        rect = self._load_page(page).rect
        width = float(rect.width)
        height = float(rect.height)
        visible = [t for t in self._page_chars(page) if t.text.strip()]
        if not visible:
            return PageGeometry(width=width, height=height, natural_text_top=0.0, natural_text_bottom=height)
        return PageGeometry(
            width=width,
            height=height,
            natural_text_top=min(t.y for t in visible),
            natural_text_bottom=max(t.y + t.height for t in visible),
        )

    def tokens_in_band(self, page: int, top: float, bottom: float) -> list[TextToken]:
        return [t for t in self._page_chars(page) if token_in_band(t, top, bottom)]
