"""Reads a user body from multipart, urlencoded or JSON requests."""

from fastapi import Request
from pydantic import BaseModel
from starlette.datastructures import UploadFile

from .errors import BadRequestError
from .schemas import PhotoUpload, UserFields

TEXT_FIELDS = ("nombre", "email", "telefono")
PHOTO_FIELD = "foto"


class UserForm(BaseModel):
    fields: UserFields
    photo: PhotoUpload | None = None


def _text(value) -> str | None:
    if value is None or isinstance(value, str):
        return value
    return str(value)


async def read_user_form(request: Request) -> UserForm:
    """FastAPI dependency: the text fields plus the photo, fully buffered."""
    content_type = request.headers.get("content-type", "")

    if content_type.startswith("application/json"):
        try:
            body = await request.json()
        except ValueError as exc:
            raise BadRequestError(f"Invalid JSON body: {exc}", cause=exc) from exc
        if not isinstance(body, dict):
            raise BadRequestError("JSON body must be an object")
        return UserForm(
            fields=UserFields(**{name: _text(body.get(name)) for name in TEXT_FIELDS})
        )

    form = await request.form()
    # A file sent under a text field's name is ignored rather than stringified.
    fields = UserFields(
        **{
            name: form.get(name) if isinstance(form.get(name), str) else None
            for name in TEXT_FIELDS
        }
    )

    photo = None
    upload = form.get(PHOTO_FIELD)
    if isinstance(upload, UploadFile) and upload.filename:
        try:
            photo = PhotoUpload(
                data=await upload.read(),
                filename=upload.filename,
                content_type=upload.content_type,
            )
        finally:
            await upload.close()

    return UserForm(fields=fields, photo=photo)
