"""High-level PPTX generation from presentation snapshots."""

import asyncio
import logging
from datetime import datetime
from io import BytesIO
from typing import Optional

from lxml import etree
from pptx import Presentation as PptxPresentation
from pptx.opc.constants import CONTENT_TYPE as CT
from pptx.opc.constants import RELATIONSHIP_TYPE as RT
from pptx.opc.package import Part
from pptx.opc.packuri import PackURI

from deckexport.dsl.schema import Presentation
from deckexport.engine.assembler import SlideAssembler
from deckexport.engine.units import OFFICE_SLIDE, inches_to_emu
from deckexport.errors import ExportReport
from deckexport.renderer.shape_renderer import ShapeRenderer
from deckexport.writers.base import DocumentWriter, ExportArtifact, ExportFile

logger = logging.getLogger(__name__)

APP_PROPS_PARTNAME = "/docProps/app.xml"
EP_NS = "http://schemas.openxmlformats.org/officeDocument/2006/extended-properties"
VT_NS = "http://schemas.openxmlformats.org/officeDocument/2006/docPropsVTypes"


def _parse_timestamp(value: str) -> Optional[datetime]:
    try:
        return datetime.fromisoformat(value.replace("Z", "+00:00"))
    except (ValueError, AttributeError):
        return None


def set_company(prs: PptxPresentation, company: str) -> None:
    """Write the Company field of the extended (app) properties part.

    python-pptx only exposes core properties, so the part is edited as XML,
    and created if the template has none.
    """
    package = prs.part.package
    app_part = next(
        (p for p in package.iter_parts() if str(p.partname) == APP_PROPS_PARTNAME),
        None,
    )

    if app_part is not None:
        root = etree.fromstring(app_part.blob)
    else:
        root = etree.Element(f"{{{EP_NS}}}Properties", nsmap={None: EP_NS, "vt": VT_NS})

    company_el = root.find(f"{{{EP_NS}}}Company")
    if company_el is None:
        company_el = etree.SubElement(root, f"{{{EP_NS}}}Company")
    company_el.text = company

    blob = etree.tostring(root, xml_declaration=True, encoding="UTF-8", standalone=True)
    if app_part is not None:
        app_part._blob = blob
    else:
        app_part = Part(
            PackURI(APP_PROPS_PARTNAME),
            CT.OFC_EXTENDED_PROPERTIES,
            package=package,
            blob=blob,
        )
        package.relate_to(app_part, RT.EXTENDED_PROPERTIES)


def read_company(prs: PptxPresentation) -> Optional[str]:
    """Company field of the extended properties, if present."""
    for part in prs.part.package.iter_parts():
        if str(part.partname) == APP_PROPS_PARTNAME:
            company = etree.fromstring(part.blob).find(f"{{{EP_NS}}}Company")
            return company.text if company is not None else None
    return None


class PptxWriter(DocumentWriter):
    """Generates editable PPTX files."""

    target_name = "pptx"
    extension = "pptx"
    media_type = "application/vnd.openxmlformats-officedocument.presentationml.presentation"

    def create_presentation(self, presentation: Presentation) -> PptxPresentation:
        """Create an empty 16:9 deck with document metadata.

        Args:
            presentation: Source snapshot (settings and timestamps).

        Returns:
            New python-pptx Presentation object.
        """
        prs = PptxPresentation()
        prs.slide_width = inches_to_emu(OFFICE_SLIDE.width)
        prs.slide_height = inches_to_emu(OFFICE_SLIDE.height)

        settings = presentation.settings
        props = prs.core_properties
        props.author = settings.author or self.settings.default_author
        props.title = settings.title or self.settings.default_title
        props.subject = self.settings.subject
        props.last_modified_by = props.author

        created = _parse_timestamp(presentation.created_at)
        if created is not None:
            props.created = created
        modified = _parse_timestamp(presentation.updated_at)
        if modified is not None:
            props.modified = modified

        set_company(prs, self.settings.company)
        return prs

    def build(
        self,
        presentation: Presentation,
        report: ExportReport,
        cancel_event: Optional[asyncio.Event] = None,
    ) -> PptxPresentation:
        """Render every slide into a new python-pptx presentation."""
        prs = self.create_presentation(presentation)
        renderer = ShapeRenderer(prs, self.make_resolver())
        assembler = SlideAssembler(report)

        for index, slide in enumerate(presentation.slides):
            self.check_cancelled(cancel_event)
            assembler.assemble(slide, presentation.settings, renderer, index)

        return prs

    async def _export(
        self,
        presentation: Presentation,
        filename: str,
        report: ExportReport,
        cancel_event: Optional[asyncio.Event],
    ) -> ExportArtifact:
        # Remote images are fetched with a blocking client; keep it off the loop
        prs = await asyncio.to_thread(self.build, presentation, report, cancel_event)
        data = await asyncio.to_thread(self._serialize, prs)
        return ExportArtifact(
            filename=filename,
            media_type=self.media_type,
            files=[ExportFile(filename, data)],
            report=report,
            slide_count=len(prs.slides),
        )

    @staticmethod
    def _serialize(prs: PptxPresentation) -> bytes:
        buffer = BytesIO()
        prs.save(buffer)
        return buffer.getvalue()
