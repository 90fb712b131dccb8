# barangay/domain/template_service.py
import asyncio
import logging
import time
import uuid
from concurrent.futures import ThreadPoolExecutor
from typing import Any, Dict, Optional

from sqlalchemy.ext.asyncio import AsyncSession

from barangay.config.settings import settings
from barangay.domain.errors import NotFoundError
from barangay.domain.layout import LayoutEditor, starter_layout
from barangay.domain.substitution import substitute
from barangay.infrastructure.cloudinary.upload_file import upload_certificate
from barangay.infrastructure.database import repository
from barangay.infrastructure.database.models import Certificate, DocumentTemplate, Resident
from barangay.infrastructure.render.page_renderer import encode_png, render_layout, save_png

logger = logging.getLogger(__name__)
if not logger.handlers:
    handler = logging.StreamHandler()
    formatter = logging.Formatter('%(asctime)s [%(levelname)s] %(message)s', '%Y-%m-%d %H:%M:%S')
    handler.setFormatter(formatter)
    logger.addHandler(handler)
    logger.setLevel(logging.INFO)
    logger.propagate = False


def resident_record(resident: Resident) -> Dict[str, Any]:
    """Wire-shaped view of a resident, as consumed by placeholder substitution."""
    return {
        "id": resident.id,
        "firstName": resident.first_name,
        "lastName": resident.last_name,
        "birthDate": resident.birth_date,
        "purok": resident.purok,
        "houseNumber": resident.house_number,
        "phoneNumber": resident.phone_number,
        "civilStatus": resident.civil_status,
        "isIndigent": resident.is_indigent,
        "isSeniorCitizen": resident.is_senior_citizen,
    }


class TemplateService:
    def __init__(self, executor: ThreadPoolExecutor):
        self.executor = executor

    async def get_template(self, session: AsyncSession, template_id: int) -> DocumentTemplate:
        template = await repository.get_or_none(session, DocumentTemplate, template_id)
        if template is None:
            raise NotFoundError("Template", template_id)
        return template

    async def get_resident(self, session: AsyncSession, resident_id: int) -> Resident:
        resident = await repository.get_or_none(session, Resident, resident_id)
        if resident is None:
            raise NotFoundError("Resident", resident_id)
        return resident

    async def create_template(self, session: AsyncSession, name: str, layout: Optional[LayoutEditor]) -> DocumentTemplate:
        layout = layout if layout is not None else starter_layout()
        template = await repository.save(session, DocumentTemplate(name=name, layout_settings=layout.to_settings()))
        logger.info(f"Template {template.id} '{name}' created with {len(layout)} fields.")
        return template

    async def replace_template(self, session: AsyncSession, template_id: int, name: str, layout: LayoutEditor) -> DocumentTemplate:
        # Whole-document replace, last write wins
        template = await self.get_template(session, template_id)
        template.name = name
        template.layout_settings = layout.to_settings()
        template = await repository.save(session, template)
        logger.info(f"Template {template_id} replaced ({len(layout)} fields).")
        return template

    async def delete_template(self, session: AsyncSession, template_id: int) -> None:
        template = await self.get_template(session, template_id)
        await repository.delete(session, template)
        logger.info(f"Template {template_id} deleted.")

    async def preview(self, session: AsyncSession, template_id: int, resident_id: int, now=None) -> Dict[str, Any]:
        template = await self.get_template(session, template_id)
        resident = await self.get_resident(session, resident_id)
        return substitute(template.layout_settings, resident_record(resident), now=now)

    async def render_print(self, session: AsyncSession, template_id: int, resident_id: int) -> bytes:
        final_layout = await self.preview(session, template_id, resident_id)
        loop = asyncio.get_running_loop()
        return await loop.run_in_executor(self.executor, self._render_png, final_layout)

    def _render_png(self, final_layout: Dict[str, Any]) -> bytes:
        img = render_layout(final_layout)
        try:
            return encode_png(img)
        finally:
            img.close()

    def _render_and_store(self, final_layout: Dict[str, Any], public_id: str, resident_id: int) -> str:
        start_time = time.perf_counter()
        img = render_layout(final_layout)
        try:
            if settings.cloudinary_enabled:
                url = upload_certificate(img, public_id, resident_id=resident_id)
            else:
                url = save_png(img, settings.CERTIFICATES_DIR, public_id)
        finally:
            img.close()
        logger.info(f"Certificate {public_id}: render & store finished in {time.perf_counter() - start_time:.2f}s.")
        return url

    async def generate_certificate(self, session: AsyncSession, template_id: int, resident_id: int) -> Certificate:
        template = await self.get_template(session, template_id)
        resident = await self.get_resident(session, resident_id)
        logger.info(f"=== START certificate: template {template_id}, resident {resident_id} ===")

        final_layout = substitute(template.layout_settings, resident_record(resident))
        public_id = f"certificate_{template.id}_{resident.id}_{uuid.uuid4().hex[:8]}"

        loop = asyncio.get_running_loop()
        file_url = await loop.run_in_executor(self.executor, self._render_and_store, final_layout, public_id, resident.id)

        certificate = await repository.save(session, Certificate(
            template_id=template.id,
            resident_id=resident.id,
            template_name=template.name,
            layout=final_layout,
            file_url=file_url,
        ))
        logger.info(f"=== COMPLETED certificate {certificate.id} -> {file_url} ===")
        return certificate

    async def get_certificate(self, session: AsyncSession, certificate_id: int) -> Certificate:
        certificate = await repository.get_or_none(session, Certificate, certificate_id)
        if certificate is None:
            raise NotFoundError("Certificate", certificate_id)
        return certificate
