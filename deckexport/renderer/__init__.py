"""Element renderers - turn slide elements into each target's native form.

One renderer per export target:
- Office document: text boxes, pictures and rectangles via python-pptx
- Web slideshow: absolutely positioned HTML fragments
- Raster: drawing onto an off-screen Pillow surface
"""

from deckexport.renderer.base import IMAGE_PLACEHOLDER_TEXT, RenderContext, SlideRenderer
from deckexport.renderer.html_renderer import HtmlFragment, HtmlRenderer, HtmlSection
from deckexport.renderer.raster_renderer import RasterRenderer, RasterSurface
from deckexport.renderer.shape_renderer import ShapeRenderer
from deckexport.renderer.style_renderer import StyleRenderer
from deckexport.renderer.text_renderer import TextRenderer

__all__ = [
    "IMAGE_PLACEHOLDER_TEXT",
    "HtmlFragment",
    "HtmlRenderer",
    "HtmlSection",
    "RasterRenderer",
    "RasterSurface",
    "RenderContext",
    "ShapeRenderer",
    "SlideRenderer",
    "StyleRenderer",
    "TextRenderer",
]
