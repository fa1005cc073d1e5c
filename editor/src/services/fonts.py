"""Google Fonts lookup for text-bearing layers."""

import logging
from typing import Iterable, List
from urllib.parse import quote

from constants import GOOGLE_FONTS, GOOGLE_FONTS_URL, GOOGLE_FONT_WEIGHTS, SYSTEM_FONTS


class GoogleFontsService:
    """Decides which font families need a Google Fonts stylesheet

    The editor calls ensure_loaded() whenever a layer starts using a
    family; the compiler only asks for the stylesheet URL.
    """

    def __init__(self, catalog: Iterable[str] = GOOGLE_FONTS):
        self._logger = logging.getLogger('GoogleFonts')
        self._catalog = set(catalog)
        self._loaded: List[str] = []

    @property
    def loaded_families(self) -> List[str]:
        return list(self._loaded)

    def filter_families(self, families: Iterable[str]) -> List[str]:
        """Catalog families only, system fonts dropped, first occurrence kept"""
        result = []
        for family in families:
            if not family or family in SYSTEM_FONTS or family not in self._catalog:
                continue
            if family not in result:
                result.append(family)
        return result

    def stylesheet_url(self, families: Iterable[str]) -> str:
        """css2 URL for the given families, or '' if none need loading"""
        wanted = self.filter_families(families)
        if not wanted:
            return ''
        params = '&'.join(
            f"family={quote(family, safe='')}:wght@{GOOGLE_FONT_WEIGHTS}" for family in wanted
        )
        return f"{GOOGLE_FONTS_URL}?{params}&display=swap"

    def ensure_loaded(self, families: Iterable[str]) -> str:
        """Record families as in use and return the stylesheet covering all of them"""
        for family in self.filter_families(families):
            if family not in self._loaded:
                self._loaded.append(family)
                self._logger.debug(f"Loading font family: {family}")
        return self.stylesheet_url(self._loaded)
