"""
Demo datasets loaded at start-up.

Everything goes through the public store operations, so seeded state obeys
the same rules as user edits.
"""

import logging

from app.crm.models import (
    Account,
    Contact,
    ExperimentalClass,
    GlobalTask,
    Lead,
    LeadStage,
    OpportunityCard,
    OpportunityStage,
    ProductGroup,
    ProductItem,
    Proposal,
    ProposalStatus,
    RelatedObjectType,
    Student,
)
from app.crm.store import CrmStore

logger = logging.getLogger(__name__)


ACCOUNTS = [
    Account(id="acc-1", name="Família Almeida", type="Individual", cpf_cnpj="123.456.789-00",
            main_contact_id="con-1", phone="+55 11 98888-1111", email="almeida@example.com",
            manager="Carla", owner="Carla"),
    Account(id="acc-2", name="Colégio Horizonte", type="Company", cpf_cnpj="12.345.678/0001-90",
            main_contact_id="con-2", phone="+55 21 3333-2222", email="contato@horizonte.example",
            manager="Rafael", owner="Rafael"),
]

CONTACTS = [
    Contact(id="con-1", name="Marina Almeida", account_id="acc-1", phone="+55 11 98888-1111",
            email="marina@example.com", cpf="123.456.789-00", country="Brasil", role="Mother"),
    Contact(id="con-2", name="Paulo Santos", account_id="acc-2", phone="+55 21 99999-2222",
            email="paulo@horizonte.example", cpf="987.654.321-00", country="Brasil", role="Coordinator"),
]

STUDENTS = [
    Student(id="stu-1", first_name="Lucas", last_name="Almeida", date_of_birth="2010-04-12",
            school_year="9º ano", school="Colégio Horizonte", guardian_contact_ids=["con-1"]),
]

# (stage, card), inserted in order
OPPORTUNITIES = [
    (OpportunityStage.NEW_OPPORTUNITY, OpportunityCard(
        id="opp-1", name="Lucas Almeida - Matemática", amount=1800.0,
        sales_type="New", type="Tutoring", account_id="acc-1", contact_id="con-1")),
    (OpportunityStage.TRIAL_CLASS, OpportunityCard(
        id="opp-2", name="Colégio Horizonte - Reforço", amount=12500.0,
        sales_type="New", type="Group", account_id="acc-2",
        experimental_classes=[ExperimentalClass(
            id="cls-1", date="2026-10-20", time="14:00",
            discipline="Física", student_name="Turma 2B")])),
    (OpportunityStage.NEGOTIATION, OpportunityCard(
        id="opp-3", name="Família Almeida - Química", amount=950.0,
        sales_type="Upsell", type="Tutoring", account_id="acc-1")),
]

PROPOSALS = [
    Proposal(id="prp-1", opportunity_id="opp-2", title="Reforço semestral", display_id="PR-0001",
             status=ProposalStatus.SENT, value=12500.0, date="2026-10-01",
             products=[ProductGroup(id="pg-1", name="Pacote 40h", quantity="1", price=12500.0,
                                    items=[ProductItem(id="pi-1", label="Física", quantity="20"),
                                           ProductItem(id="pi-2", label="Química", quantity="20")])]),
    Proposal(id="prp-2", opportunity_id="opp-3", title="Química intensivo", display_id="PR-0002",
             status=ProposalStatus.DRAFT, value=950.0, date="2026-10-05"),
]

TASKS = [
    GlobalTask(id="tsk-1", title="Confirmar aula experimental", due_date="2026-10-19",
               assignee="Rafael", related_object_type=RelatedObjectType.OPPORTUNITY,
               related_object_id="opp-2", created_at="2026-10-10"),
    GlobalTask(id="tsk-2", title="Enviar contrato", due_date="2026-10-22",
               assignee="Carla", related_object_type=RelatedObjectType.ACCOUNT,
               related_object_id="acc-1", created_at="2026-10-12"),
]

LEADS = [
    (LeadStage.NEW_LEAD, Lead(id="lead-1", name="Beatriz Costa", email="bia@example.com",
                              phone="+55 11 97777-0000", source="Site/Form")),
    (LeadStage.FIRST_CONTACT, Lead(id="lead-2", name="Escola Aurora", email="aurora@example.com",
                                   source="Referral", company="Escola Aurora")),
]


def seed_demo_data(store: CrmStore) -> None:
    """Load the fixed initial datasets into an empty store"""
    for contact in CONTACTS:
        store.add_contact(contact)
    for account in ACCOUNTS:
        store.add_account(account)
    for student in STUDENTS:
        store.add_student(student)

    for stage, card in OPPORTUNITIES:
        store.add_opportunity(card)
        if stage != OpportunityStage.NEW_OPPORTUNITY:
            store.move_opportunity(card.id, OpportunityStage.NEW_OPPORTUNITY.value, stage.value)

    for proposal in PROPOSALS:
        store.add_proposal(proposal)
    for task in TASKS:
        store.add_task(task)
    for stage, lead in LEADS:
        store.add_lead(lead, stage.value)

    logger.info(
        f"Seeded demo data: {len(OPPORTUNITIES)} opportunities, "
        f"{len(PROPOSALS)} proposals, {len(TASKS)} tasks, {len(LEADS)} leads"
    )
