"""Post-processing applied to the assembled markup.

Order: ThemeProcessor, FontProcessor, SocialStyler, then (optionally)
clean_html.
"""

from inkpress.postprocess.cleanup import clean_html
from inkpress.postprocess.font import FontProcessor
from inkpress.postprocess.social import SocialStyler, wrap_captions
from inkpress.postprocess.theme import ThemeProcessor

__all__ = ["FontProcessor", "SocialStyler", "ThemeProcessor", "clean_html", "wrap_captions"]
