"""
html_writer.py — Static web slideshow export.

Produces one self-contained HTML document that loads reveal.js from a CDN,
with one <section> per slide and a Reveal.initialize() block whose fields
are copied verbatim from the presentation settings.
"""

import asyncio
import logging
from typing import Any, Optional

from jinja2 import Environment, PackageLoader
from pydantic.alias_generators import to_camel

from deckexport.dsl.schema import CANVAS_HEIGHT_PX, CANVAS_WIDTH_PX, Presentation, PresentationSettings
from deckexport.engine.assembler import SlideAssembler
from deckexport.engine.style_mapper import map_reveal_theme
from deckexport.errors import ExportReport
from deckexport.renderer.html_renderer import HtmlRenderer
from deckexport.writers.base import DocumentWriter, ExportArtifact, ExportFile

logger = logging.getLogger(__name__)

# Settings copied into Reveal.initialize(), in output order
REVEAL_CONFIG_FIELDS = (
    "controls",
    "progress",
    "center",
    "touch",
    "loop",
    "rtl",
    "shuffle",
    "fragments",
    "embedded",
    "help",
    "show_notes",
    "auto_slide",
    "auto_slide_stoppable",
    "mouse_wheel",
    "hide_address_bar",
    "preview_links",
    "transition",
    "hash",
    "respond_to_hash_changes",
    "jump_to_slide",
    "history",
)


def reveal_config(settings: PresentationSettings) -> dict[str, Any]:
    """Script-library configuration for ``settings``.

    The recognised settings keep their values and take their camelCase
    names; the canvas size is appended so pixel offsets map 1:1.
    """
    dumped = settings.model_dump(by_alias=True)
    config = {to_camel(name): dumped[to_camel(name)] for name in REVEAL_CONFIG_FIELDS}
    config["width"] = CANVAS_WIDTH_PX
    config["height"] = CANVAS_HEIGHT_PX
    config["margin"] = 0
    return config


def create_environment() -> Environment:
    env = Environment(
        loader=PackageLoader("deckexport", "templates"),
        autoescape=True,
        trim_blocks=False,
        lstrip_blocks=False,
    )
    env.policies["json.dumps_kwargs"] = {"sort_keys": False, "indent": 2}
    return env


class HtmlWriter(DocumentWriter):
    """Generates reveal.js slideshow documents."""

    target_name = "html"
    extension = "html"
    media_type = "text/html"
    template_name = "reveal.html.j2"

    def __init__(self, *args, inline_local_images: bool = True, **kwargs):
        super().__init__(*args, **kwargs)
        self.inline_local_images = inline_local_images
        self.env = create_environment()

    @property
    def reveal_base(self) -> str:
        return f"{self.settings.reveal_cdn.rstrip('/')}/{self.settings.reveal_version}"

    def render(
        self,
        presentation: Presentation,
        report: ExportReport,
        cancel_event: Optional[asyncio.Event] = None,
    ) -> str:
        """Render the whole document to a string."""
        renderer = HtmlRenderer(self.make_resolver(), inline_local_images=self.inline_local_images)
        assembler = SlideAssembler(report)
        settings = presentation.settings

        sections = []
        for index, slide in enumerate(presentation.slides):
            self.check_cancelled(cancel_event)
            sections.append(assembler.assemble(slide, settings, renderer, index))

        logger.debug(f"Rendered {len(sections)} sections with theme '{settings.theme}'")
        template = self.env.get_template(self.template_name)
        return template.render(
            title=settings.title or self.settings.default_title,
            author=settings.author or self.settings.default_author,
            theme=map_reveal_theme(settings.theme),
            reveal_base=self.reveal_base,
            canvas_width=CANVAS_WIDTH_PX,
            canvas_height=CANVAS_HEIGHT_PX,
            sections=sections,
            config=reveal_config(settings),
        )

    async def _export(
        self,
        presentation: Presentation,
        filename: str,
        report: ExportReport,
        cancel_event: Optional[asyncio.Event],
    ) -> ExportArtifact:
        html = await asyncio.to_thread(self.render, presentation, report, cancel_event)
        data = html.encode("utf-8")
        return ExportArtifact(
            filename=filename,
            media_type=self.media_type,
            files=[ExportFile(filename, data)],
            report=report,
            slide_count=len(presentation.slides),
        )
