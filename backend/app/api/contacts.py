"""
Contacts & Students API Endpoints
"""

from typing import Any, Dict, List, Optional

from fastapi import APIRouter, Depends, HTTPException
from pydantic import BaseModel

from app.crm.models import Contact, Student
from app.crm.store import CrmStore, get_store

router = APIRouter()
students_router = APIRouter()


# === Request Models ===

class ContactCreate(BaseModel):
    id: str = ""
    name: str
    account_id: Optional[str] = None
    phone: str = ""
    email: str = ""
    cpf: str = ""
    country: str = ""
    role: Optional[str] = None


class ContactUpdate(BaseModel):
    name: Optional[str] = None
    account_id: Optional[str] = None
    phone: Optional[str] = None
    email: Optional[str] = None
    cpf: Optional[str] = None
    country: Optional[str] = None
    role: Optional[str] = None


class StudentCreate(BaseModel):
    id: str = ""
    first_name: str
    last_name: str = ""
    date_of_birth: Optional[str] = None
    school_year: str = ""
    school: str = ""
    email: str = ""
    guardian_contact_ids: List[str] = []


class StudentUpdate(BaseModel):
    first_name: Optional[str] = None
    last_name: Optional[str] = None
    date_of_birth: Optional[str] = None
    school_year: Optional[str] = None
    school: Optional[str] = None
    email: Optional[str] = None
    guardian_contact_ids: Optional[List[str]] = None


# === Contacts ===

@router.get("", response_model=List[Dict[str, Any]])
async def list_contacts(store: CrmStore = Depends(get_store)):
    return [c.to_dict() for c in store.get_contacts()]


@router.post("", response_model=Dict[str, Any])
async def create_contact(request: ContactCreate, store: CrmStore = Depends(get_store)):
    return store.add_contact(Contact(**request.model_dump())).to_dict()


@router.get("/{contact_id}", response_model=Dict[str, Any])
async def get_contact(contact_id: str, store: CrmStore = Depends(get_store)):
    contact = store.get_contact_by_id(contact_id)
    if not contact:
        raise HTTPException(status_code=404, detail="Contact not found")
    return contact.to_dict()


@router.put("/{contact_id}", response_model=Dict[str, Any])
async def update_contact(
    contact_id: str,
    request: ContactUpdate,
    store: CrmStore = Depends(get_store),
):
    contact = store.get_contact_by_id(contact_id)
    if not contact:
        raise HTTPException(status_code=404, detail="Contact not found")
    for key, value in request.model_dump(exclude_unset=True).items():
        setattr(contact, key, value)
    return store.update_contact(contact).to_dict()


@router.delete("/{contact_id}")
async def delete_contact(contact_id: str, store: CrmStore = Depends(get_store)):
    if not store.delete_contact(contact_id):
        raise HTTPException(status_code=404, detail="Contact not found")
    return {"message": f"Contact {contact_id} deleted"}


# === Students ===

@students_router.get("", response_model=List[Dict[str, Any]])
async def list_students(store: CrmStore = Depends(get_store)):
    return [s.to_dict() for s in store.get_students()]


@students_router.post("", response_model=Dict[str, Any])
async def create_student(request: StudentCreate, store: CrmStore = Depends(get_store)):
    return store.add_student(Student(**request.model_dump())).to_dict()


@students_router.get("/{student_id}", response_model=Dict[str, Any])
async def get_student(student_id: str, store: CrmStore = Depends(get_store)):
    student = store.get_student_by_id(student_id)
    if not student:
        raise HTTPException(status_code=404, detail="Student not found")
    return student.to_dict()


@students_router.put("/{student_id}", response_model=Dict[str, Any])
async def update_student(
    student_id: str,
    request: StudentUpdate,
    store: CrmStore = Depends(get_store),
):
    student = store.get_student_by_id(student_id)
    if not student:
        raise HTTPException(status_code=404, detail="Student not found")
    for key, value in request.model_dump(exclude_unset=True).items():
        setattr(student, key, value)
    return store.update_student(student).to_dict()


@students_router.delete("/{student_id}")
async def delete_student(student_id: str, store: CrmStore = Depends(get_store)):
    if not store.delete_student(student_id):
        raise HTTPException(status_code=404, detail="Student not found")
    return {"message": f"Student {student_id} deleted"}
