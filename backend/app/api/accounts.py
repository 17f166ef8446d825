"""
Accounts API Endpoints
"""

from typing import Any, Dict, List, Optional

from fastapi import APIRouter, Depends, HTTPException
from pydantic import BaseModel

from app.crm.models import Account
from app.crm.store import CrmStore, get_store

router = APIRouter()


class AccountCreate(BaseModel):
    id: str = ""
    name: str
    type: str = ""
    cpf_cnpj: str = ""
    main_contact_id: Optional[str] = None
    phone: str = ""
    email: str = ""
    manager: str = ""
    owner: str = ""


class AccountUpdate(BaseModel):
    name: Optional[str] = None
    type: Optional[str] = None
    cpf_cnpj: Optional[str] = None
    main_contact_id: Optional[str] = None
    phone: Optional[str] = None
    email: Optional[str] = None
    manager: Optional[str] = None
    owner: Optional[str] = None


@router.get("", response_model=List[Dict[str, Any]])
async def list_accounts(store: CrmStore = Depends(get_store)):
    return [a.to_dict() for a in store.get_accounts()]


@router.post("", response_model=Dict[str, Any])
async def create_account(request: AccountCreate, store: CrmStore = Depends(get_store)):
    return store.add_account(Account(**request.model_dump())).to_dict()


@router.get("/{account_id}", response_model=Dict[str, Any])
async def get_account(account_id: str, store: CrmStore = Depends(get_store)):
    account = store.get_account_by_id(account_id)
    if not account:
        raise HTTPException(status_code=404, detail="Account not found")
    return account.to_dict()


@router.put("/{account_id}", response_model=Dict[str, Any])
async def update_account(
    account_id: str,
    request: AccountUpdate,
    store: CrmStore = Depends(get_store),
):
    account = store.get_account_by_id(account_id)
    if not account:
        raise HTTPException(status_code=404, detail="Account not found")
    for key, value in request.model_dump(exclude_unset=True).items():
        setattr(account, key, value)
    return store.update_account(account).to_dict()


@router.delete("/{account_id}")
async def delete_account(account_id: str, store: CrmStore = Depends(get_store)):
    if not store.delete_account(account_id):
        raise HTTPException(status_code=404, detail="Account not found")
    return {"message": f"Account {account_id} deleted"}


@router.get("/{account_id}/tasks", response_model=List[Dict[str, Any]])
async def list_account_tasks(account_id: str, store: CrmStore = Depends(get_store)):
    return [t.to_dict() for t in store.get_tasks_by_related("account", account_id)]
