"""Sequences the optional photo upload and the row write for one request.

Every create and update runs as ``upload (if a photo came in) -> store
write``. The store is only called once the image host has confirmed the
photo and returned its URL; an upload failure ends the request before the
store is touched.

There is no compensation across the two calls. If the store write fails
after a successful upload, or a user is deleted, the image stays on the host
with nothing referencing it. Those orphans are logged, not removed.
"""

import logging
from collections.abc import Sequence

from .errors import StoreError
from .media import MediaUploader
from .models import Usuario
from .schemas import (
    CreateResult,
    PhotoUpload,
    UpdateResult,
    UserFields,
    UserUpdate,
    WithPhoto,
    WithoutPhoto,
)
from .store import UserStore

logger = logging.getLogger(__name__)


class UserWriteCoordinator:
    def __init__(self, store: UserStore, uploader: MediaUploader):
        self.store = store
        self.uploader = uploader

    async def list_users(self) -> Sequence[Usuario]:
        return await self.store.list_all()

    async def _upload(self, photo: PhotoUpload) -> str:
        return await self.uploader.upload(
            photo.data, filename=photo.filename, content_type=photo.content_type
        )

    async def create(
        self, fields: UserFields, photo: PhotoUpload | None = None
    ) -> CreateResult:
        foto_url = await self._upload(photo) if photo is not None else None

        try:
            new_id = await self.store.insert(fields, foto_url)
        except StoreError:
            if foto_url is not None:
                logger.warning("Insert failed after upload; %s is now orphaned", foto_url)
            raise

        return CreateResult(id=new_id, foto=foto_url)

    async def update(
        self, user_id: int, fields: UserFields, photo: PhotoUpload | None = None
    ) -> UpdateResult:
        change: UserUpdate
        if photo is not None:
            change = WithPhoto(fields=fields, foto=await self._upload(photo))
        else:
            change = WithoutPhoto(fields=fields)

        try:
            affected = await self.store.update_by_id(user_id, change)
        except StoreError:
            if isinstance(change, WithPhoto):
                logger.warning(
                    "Update of user %s failed after upload; %s is now orphaned",
                    user_id,
                    change.foto,
                )
            raise

        if affected == 0:
            logger.info("Update matched no row for user %s", user_id)
        return UpdateResult(photo_replaced=isinstance(change, WithPhoto))

    async def delete(self, user_id: int) -> None:
        # The row's photo, if any, is left on the image host.
        affected = await self.store.delete_by_id(user_id)
        if affected == 0:
            logger.info("Delete matched no row for user %s", user_id)
