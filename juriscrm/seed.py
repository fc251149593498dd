"""
Demo data for a fresh store: one admin user, five jurisdictions, five
professionals, three hearings (today / tomorrow) and the matching reminders.
"""

import logging
from datetime import timedelta

from .models import HearingType
from .store import Storage

logger = logging.getLogger(__name__)

DEMO_JURISDICTIONS = [
    {"name": "Foro Central Civil", "state": "SP", "city": "São Paulo", "address": "Praça João Mendes, s/n"},
    {"name": "Foro Regional Criminal", "state": "RJ", "city": "Rio de Janeiro", "address": "Av. Erasmo Braga, 115"},
    {"name": "Vara Trabalhista", "state": "MG", "city": "Belo Horizonte", "address": "Av. Augusto de Lima, 1234"},
    {"name": "Vara Federal", "state": "DF", "city": "Brasília", "address": "SAUS Quadra 2, Bloco G"},
    {"name": "Vara Cível", "state": "RS", "city": "Porto Alegre", "address": "Rua Manoelito de Ornellas, 50"},
]

DEMO_PROFESSIONALS = [
    {"name": "Dr. Carlos Mendes", "email": "carlos@juriscrm.com", "phone": "11987654321",
     "type": "lawyer", "specialization": "Civil", "jurisdictions": ["SP", "RJ"]},
    {"name": "Dra. Mariana Costa", "email": "mariana@juriscrm.com", "phone": "21987654321",
     "type": "lawyer", "specialization": "Criminal", "jurisdictions": ["RJ", "SP"]},
    {"name": "Dr. Rafael Almeida", "email": "rafael@juriscrm.com", "phone": "31987654321",
     "type": "lawyer", "specialization": "Labor", "jurisdictions": ["MG", "SP"]},
    {"name": "Dra. Patrícia Lima", "email": "patricia@juriscrm.com", "phone": "61987654321",
     "type": "court_official", "specialization": "Civil", "jurisdictions": ["DF", "SP"]},
    {"name": "Dr. Eduardo Santos", "email": "eduardo@juriscrm.com", "phone": "51987654321",
     "type": "court_official", "specialization": "Criminal", "jurisdictions": ["RS", "RJ"]},
]


def seed_demo_data(storage: Storage) -> None:
    """Populate an empty store. Does nothing if any jurisdiction already exists."""
    if storage.jurisdictions.list():
        logger.info("Store already has data, skipping demo seed")
        return

    storage.users.create({
        "username": "admin",
        "password": "admin",
        "name": "Admin",
        "email": "admin@juriscrm.com",
        "role": "admin",
    })

    jurisdictions = [storage.jurisdictions.create(j) for j in DEMO_JURISDICTIONS]
    professionals = [storage.professionals.create(p) for p in DEMO_PROFESSIONALS]

    today = storage.today()
    tomorrow = today + timedelta(days=1)

    civil = storage.hearings.create({
        "process_number": "2023.0123.4567",
        "jurisdiction_id": jurisdictions[0].id,
        "date": today,
        "time": "14:30",
        "type": HearingType.INSTRUCTION.value,
        "area": "Civil",
        "professional_id": professionals[0].id,
        "status": "assigned",
    })
    storage.hearings.create({
        "process_number": "2023.7654.3210",
        "jurisdiction_id": jurisdictions[1].id,
        "date": tomorrow,
        "time": "10:00",
        "type": HearingType.CONCILIATION.value,
        "area": "Criminal",
        "professional_id": professionals[1].id,
        "status": "assigned",
    })
    labor = storage.hearings.create({
        "process_number": "2023.9876.5432",
        "jurisdiction_id": jurisdictions[2].id,
        "date": tomorrow,
        "time": "09:15",
        "type": HearingType.JUDGMENT.value,
        "area": "Labor",
        "status": "pending",
    })

    storage.tasks.create({
        "title": "Upload de Ata Pendente",
        "description": "Proc. 2023.0001.2345 - Audiência realizada em 10/06",
        "type": "upload_minutes",
        "related_id": civil.id,
    })
    storage.tasks.create({
        "title": "Designar Advogado",
        "description": "Proc. 2023.9876.5432 - Audiência em 14/06",
        "type": "assign_professional",
        "related_id": labor.id,
    })
    storage.tasks.create({
        "title": "Pagamento Pendente",
        "description": "Dr. Rafael Almeida - 3 audiências concluídas",
        "type": "payment",
        "related_id": professionals[2].id,
    })

    logger.info("Demo data loaded")
