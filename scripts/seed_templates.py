"""
Seed the default companies and their certificate templates.
Run: python -m scripts.seed_templates [templates_dir]

Expects template1.png and template2.png in templates_dir (default: ./assets/templates).
Companies that already have a template are skipped.
"""
import sys
import os

# Add parent directory to path
sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

import logging
from pathlib import Path
from typing import Dict

from sqlalchemy.orm import Session

from certportal.db.init_db import init_db
from certportal.db.models.company import Company
from certportal.db.models.template import Template
from certportal.db.session import SessionLocal
from certportal.services.pdf_converter import image_mime_type
from certportal.services.template_service import to_data_url

logging.basicConfig(level=logging.INFO)
logger = logging.getLogger(__name__)

DEFAULT_TEMPLATES: Dict[str, str] = {
    "NighaTech Global": "template1.png",
    "AddWise Tech Innovations": "template2.png",
}


def seed_templates(db: Session, templates_dir: Path, defaults: Dict[str, str] = DEFAULT_TEMPLATES) -> int:
    """Create missing companies and attach their default template. Returns the number of templates added."""
    added = 0
    for company_name, filename in defaults.items():
        company = db.query(Company).filter(Company.name == company_name).first()
        if not company:
            company = Company(name=company_name)
            db.add(company)
            db.flush()
            logger.info(f"Created company: {company_name} (ID: {company.id})")

        if db.query(Template).filter(Template.company_id == company.id).first():
            logger.info(f"Template already present for {company_name}, skipping")
            continue

        image_path = templates_dir / filename
        if not image_path.is_file():
            logger.warning(f"Template image not found: {image_path}")
            continue

        content = image_path.read_bytes()
        mime = image_mime_type(content)
        if mime is None:
            logger.warning(f"Not a supported image, skipping: {image_path}")
            continue

        db.add(Template(template=to_data_url(content, mime), company_id=company.id))
        added += 1
        logger.info(f"Seeded template {filename} for {company_name}")

    db.commit()
    return added


if __name__ == "__main__":
    templates_dir = Path(sys.argv[1]) if len(sys.argv) > 1 else Path("assets/templates")

    init_db()
    db = SessionLocal()
    try:
        count = seed_templates(db, templates_dir)
        print(f"\n[SUCCESS] Seeded {count} template(s)")
    except Exception as e:
        db.rollback()
        logger.error(f"Template seeding failed: {e}", exc_info=True)
        sys.exit(1)
    finally:
        db.close()
