from __future__ import annotations

from app.crm.models import Account, Contact, GlobalTask, OpportunityCard, RelatedObjectType


def test_add_account_inserts_at_head(store):
    store.add_account(Account(id="a1", name="First"))
    store.add_account(Account(id="a2", name="Second"))
    assert [a.id for a in store.get_accounts()] == ["a2", "a1"]


def test_update_and_delete_account_match_by_id(store):
    store.add_account(Account(id="a1", name="First"))

    store.update_account(Account(id="a1", name="Renamed", cpf_cnpj="12.345.678/0001-90"))
    assert store.get_account_by_id("a1").name == "Renamed"
    assert store.update_account(Account(id="ghost", name="x")) is None

    assert store.delete_account("a1") is True
    assert store.get_accounts() == []
    assert store.delete_account("a1") is False


def test_toggle_task_completion_round_trip(store):
    store.add_task(GlobalTask(id="t1", title="Call back"))

    done = store.toggle_task_completion("t1")
    assert done.is_completed is True
    assert done.completed_at is not None

    reopened = store.toggle_task_completion("t1")
    assert reopened.is_completed is False
    assert reopened.completed_at is None

    assert store.toggle_task_completion("ghost") is None


def test_task_related_name_is_resolved_by_id(store):
    store.add_account(Account(id="a1", name="Família Almeida"))
    store.add_task(GlobalTask(
        id="t1", title="Send contract",
        related_object_type=RelatedObjectType.ACCOUNT,
        related_object_id="a1",
        related_object_name="stale",
    ))

    assert store.get_task_by_id("t1").related_object_name == "Família Almeida"

    store.update_account(Account(id="a1", name="Almeida Family"))
    assert store.get_task_by_id("t1").related_object_name == "Almeida Family"


def test_task_relation_to_opportunity_and_contact(store):
    store.add_opportunity(OpportunityCard(id="o1", name="Lucas - Matemática"))
    store.add_contact(Contact(id="c1", name="Paulo Santos"))
    store.add_task(GlobalTask(id="t1", title="Trial class",
                              related_object_type="opportunity", related_object_id="o1"))
    store.add_task(GlobalTask(id="t2", title="Call",
                              related_object_type="contact", related_object_id="c1"))

    names = {t.id: t.related_object_name for t in store.get_tasks()}
    assert names == {"t1": "Lucas - Matemática", "t2": "Paulo Santos"}
    assert [t.id for t in store.get_tasks_by_related("opportunity", "o1")] == ["t1"]


def test_update_and_delete_task(store):
    store.add_task(GlobalTask(id="t1", title="Call back"))
    task = store.get_task_by_id("t1")
    task.assignee = "Carla"
    store.update_task(task)

    assert store.get_task_by_id("t1").assignee == "Carla"
    assert store.delete_task("t1") is True
    assert store.get_tasks() == []


def test_relinked_task_does_not_keep_previous_name(store):
    store.add_account(Account(id="a1", name="Almeida"))
    store.add_task(GlobalTask(id="t1", title="Send contract",
                              related_object_type="account", related_object_id="a1"))
    assert store.get_task_by_id("t1").related_object_name == "Almeida"

    task = store.get_task_by_id("t1")
    task.related_object_type = RelatedObjectType.LEAD
    task.related_object_id = "lead-missing"
    store.update_task(task)

    relinked = store.get_task_by_id("t1")
    assert relinked.related_object_name != "Almeida"
    assert relinked.related_object_name == ""


def test_tasks_by_related_with_unknown_type_is_empty(store):
    store.add_task(GlobalTask(id="t1", title="Call back"))
    assert store.get_tasks_by_related("invoice", "t1") == []
