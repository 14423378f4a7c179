"""Value types passed between the request surface, coordinator and store."""

from typing import Literal

from pydantic import BaseModel


class UserFields(BaseModel):
    """Text columns of a user row.

    Missing values stay ``None`` and reach the store as NULL; the table's
    NOT NULL constraints are the only validation applied.
    """

    nombre: str | None = None
    email: str | None = None
    telefono: str | None = None


class WithPhoto(BaseModel):
    """Update that overwrites every text column and the photo URL."""

    kind: Literal["with_photo"] = "with_photo"
    fields: UserFields
    foto: str


class WithoutPhoto(BaseModel):
    """Update that overwrites the text columns and never touches the photo."""

    kind: Literal["without_photo"] = "without_photo"
    fields: UserFields


UserUpdate = WithPhoto | WithoutPhoto


class CreateResult(BaseModel):
    id: int
    foto: str | None = None


class UpdateResult(BaseModel):
    photo_replaced: bool


class PhotoUpload(BaseModel):
    """A photo received in full from the client, held in memory."""

    data: bytes
    filename: str | None = None
    content_type: str | None = None
