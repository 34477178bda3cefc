"""/api/contacts - owner-scoped contact routes."""

from uuid import UUID

from fastapi import APIRouter, Query, Request
from fastapi.responses import JSONResponse

from api.base import success_response, request_id_of
from core.models import Contact, ContactCreate, ContactUpdate
from core.query import ContactFilter
from core.services.contact_service import ContactService


def _dump(contact: Contact) -> dict:
    return contact.model_dump(mode="json")


def create_contacts_router(contact_service: ContactService) -> APIRouter:
    """Create contacts router with injected service.

    Routes rely on AuthMiddleware for the identity context and on
    api.errors for turning domain errors into responses.
    """
    router = APIRouter(tags=["contacts"])

    def respond(request: Request, data, status_code: int = 200):
        body = success_response(data, request_id_of(request)).model_dump(mode="json")
        if status_code == 200:
            return body
        return JSONResponse(status_code=status_code, content=body)

    @router.get("/contacts")
    async def list_contacts(
        request: Request,
        search: str | None = Query(None, max_length=255),
        sort: str | None = Query(None),
    ):
        contacts = contact_service.list_all(ContactFilter(search=search, sort=sort))
        return respond(request, [_dump(c) for c in contacts])

    # Must be registered before /contacts/{contact_id}
    @router.get("/contacts/trash")
    async def list_trash(request: Request):
        return respond(request, [_dump(c) for c in contact_service.list_trash()])

    @router.get("/contacts/{contact_id}")
    async def get_contact(request: Request, contact_id: UUID):
        return respond(request, _dump(contact_service.get_by_id(contact_id)))

    @router.post("/contacts")
    async def create_contact(request: Request, body: ContactCreate):
        return respond(request, _dump(contact_service.create(body)), status_code=201)

    @router.put("/contacts/{contact_id}")
    async def update_contact(request: Request, contact_id: UUID, body: ContactUpdate):
        return respond(request, _dump(contact_service.update(contact_id, body)))

    @router.put("/contacts/{contact_id}/favorite")
    async def toggle_favorite(request: Request, contact_id: UUID):
        return respond(request, _dump(contact_service.toggle_favorite(contact_id)))

    @router.delete("/contacts/{contact_id}")
    async def soft_delete_contact(request: Request, contact_id: UUID):
        contact = contact_service.soft_delete(contact_id)
        return respond(request, {"message": "Contact moved to trash", "contact": _dump(contact)})

    @router.put("/contacts/{contact_id}/restore")
    async def restore_contact(request: Request, contact_id: UUID):
        contact = contact_service.restore(contact_id)
        return respond(request, {"message": "Contact restored", "contact": _dump(contact)})

    @router.delete("/contacts/{contact_id}/permanent")
    async def purge_contact(request: Request, contact_id: UUID):
        contact = contact_service.purge(contact_id)
        return respond(request, {"message": "Contact permanently deleted", "contact": _dump(contact)})

    return router
