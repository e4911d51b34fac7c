"""
Style Overrides
===============

CSS fragments injected into every rendered page, in order.
"""

from typing import List

# White page, dark text: defeats inherited themes that would print
# white-on-white or otherwise invisible text.
VISIBILITY_OVERRIDE_CSS = """
html, body {
  background: #ffffff !important;
}
body, body * {
  color: #111111 !important;
  -webkit-print-color-adjust: exact !important;
  print-color-adjust: exact !important;
}
"""

# Fallback for documents whose custom web fonts fail to load.
SYSTEM_FONTS_CSS = """
body, p, span, div, li, td, th, a, label,
h1, h2, h3, h4, h5, h6, blockquote, figcaption {
  font-family: Arial, Helvetica, "Liberation Sans", "DejaVu Sans", sans-serif !important;
}
"""


def get_style_fragments(force_system_fonts: bool = False) -> List[str]:
    """Return the style fragments to inject, in application order."""
    fragments = [VISIBILITY_OVERRIDE_CSS]
    if force_system_fonts:
        fragments.append(SYSTEM_FONTS_CSS)
    return fragments
