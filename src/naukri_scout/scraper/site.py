"""Naukri.com routing and timing constants."""

from __future__ import annotations

import re
from typing import Optional
from urllib.parse import quote

from ..config import ExperienceRange

ORIGIN = "https://www.naukri.com"
LOGIN_URL = f"{ORIGIN}/nlogin/login"

NAVIGATION_TIMEOUT_MS = 30000
CONTENT_TIMEOUT_MS = 10000
LOGIN_FORM_TIMEOUT_MS = 10000
LOGIN_MARKER_TIMEOUT_MS = 10000

# Characters JavaScript's encodeURIComponent leaves alone besides [A-Za-z0-9_.~-].
_URI_COMPONENT_SAFE = "!*'()"


def encode_component(value: str) -> str:
    """Percent-encode ``value`` the way the site's own links are encoded."""
    return quote(value, safe=_URI_COMPONENT_SAFE)


def keyword_slug(keyword: str) -> str:
    """``"Node JS Developer"`` -> ``"node-js-developer"`` (percent-encoded)."""
    return encode_component(re.sub(r"\s+", "-", keyword.lower()))


def build_search_url(keyword: str, page: int = 1, experience: Optional[ExperienceRange] = None) -> str:
    """Build the results URL for ``keyword``.

    Page 1 is ``/{slug}-jobs``; later pages are ``/{slug}-jobs-{page}``.
    Experience bounds are passed as ``niyoMinExp``/``niyoMaxExp``.
    """
    path = f"{ORIGIN}/{keyword_slug(keyword)}-jobs"
    if page > 1:
        path = f"{path}-{page}"
    url = f"{path}?k={encode_component(keyword)}"
    if experience is not None:
        if experience.min is not None:
            url += f"&niyoMinExp={experience.min}"
        if experience.max is not None:
            url += f"&niyoMaxExp={experience.max}"
    return url
