"""Seed data: approved categories with their skills, and admin promotion."""

import logging
from collections.abc import Iterable

from sqlalchemy import func
from sqlalchemy.orm import Session

from marketplace.models.category import Category
from marketplace.models.enums import CategoryStatus, UserRole
from marketplace.models.user import User
from marketplace.services.category_service import FALLBACK_CATEGORY, slugify
from marketplace.services.skills import add_category_skills

logger = logging.getLogger(__name__)

SEED_CATEGORIES: dict[str, list[str]] = {
    "Electricidad": [
        "Instalación eléctrica",
        "Cableado",
        "Iluminación",
        "Tableros eléctricos",
        "Reparación de cortocircuitos",
    ],
    "Albañilería": [
        "Construcción de muros",
        "Enchapado",
        "Estucado",
        "Fundiciones",
        "Remodelaciones",
    ],
    "Plomería": [
        "Instalación de tuberías",
        "Reparación de fugas",
        "Destape de cañerías",
        "Calentadores",
        "Mantenimiento de baños",
    ],
    "Carpintería": [
        "Muebles a medida",
        "Puertas y ventanas",
        "Closets",
        "Cocinas integrales",
        "Reparaciones en madera",
    ],
    "Pintura": [
        "Pintura interior",
        "Pintura exterior",
        "Estucado y pintura",
        "Pintura decorativa",
        "Impermeabilización",
    ],
    "Preparación de Comidas": [
        "Cocina colombiana",
        "Repostería",
        "Cocina internacional",
        "Catering",
        "Comida saludable",
    ],
    "Limpieza": [
        "Limpieza residencial",
        "Limpieza de oficinas",
        "Limpieza profunda",
        "Lavado de tapicería",
        "Post-obra",
    ],
    "Jardinería": [
        "Mantenimiento de jardines",
        "Poda de árboles",
        "Diseño de jardines",
        "Sistema de riego",
        "Césped",
    ],
    "Transporte y Mudanzas": [
        "Mudanzas locales",
        "Transporte de carga",
        "Embalaje",
        "Montaje de muebles",
        "Acarreos",
    ],
    "Reparación de Electrodomésticos": [
        "Lavadoras",
        "Neveras",
        "Aires acondicionados",
        "Estufas",
        "Hornos",
    ],
    "Mecánica Automotriz": [
        "Mantenimiento preventivo",
        "Frenos",
        "Motor",
        "Suspensión",
        "Electricidad automotriz",
    ],
    "Asesorías": ["Legal", "Contable", "Financiera", "Empresarial", "Consultoría IT"],
    "Desarrollo Web": [
        "JavaScript",
        "TypeScript",
        "React",
        "Next.js",
        "Node.js",
        "Python",
        "WordPress",
    ],
    "Diseño Gráfico": [
        "Figma",
        "Photoshop",
        "Illustrator",
        "Branding",
        "Diseño de logos",
        "UI/UX",
    ],
    "Marketing Digital": [
        "SEO",
        "Redes sociales",
        "Google Ads",
        "Email marketing",
        "Creación de contenido",
    ],
    FALLBACK_CATEGORY: [],
}


def seed_categories(db: Session) -> int:
    """Insert missing seed categories and their skills. Returns categories created."""
    created = 0
    for name, skills in SEED_CATEGORIES.items():
        slug = slugify(name)
        category = db.query(Category).filter(Category.slug == slug).first()
        if category is None:
            category = Category(name=name, slug=slug, status=CategoryStatus.APPROVED.value)
            db.add(category)
            db.flush()
            created += 1
        add_category_skills(db, category.id, skills)
    db.commit()
    logger.info(f"Seeded categories: {created} created, {len(SEED_CATEGORIES) - created} present")
    return created


def promote_admins(db: Session, emails: Iterable[str]) -> int:
    """Give the admin role to existing users with these emails (any case)."""
    lowered = [email.lower() for email in emails]
    if not lowered:
        return 0
    promoted = (
        db.query(User)
        .filter(func.lower(User.email).in_(lowered))
        .update({User.role: UserRole.ADMIN.value}, synchronize_session=False)
    )
    db.commit()
    logger.info(f"Admin roles set for: {', '.join(lowered)}")
    return promoted
