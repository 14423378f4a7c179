from fastapi import APIRouter, Depends

from ..coordinator import UserWriteCoordinator
from ..deps import get_coordinator
from ..forms import UserForm, read_user_form

router = APIRouter(tags=["usuarios"])


@router.get("/usuarios")
async def list_usuarios(
    coordinator: UserWriteCoordinator = Depends(get_coordinator),
):
    usuarios = await coordinator.list_users()
    return [u.to_dict() for u in usuarios]


@router.post("/usuarios")
async def create_usuario(
    form: UserForm = Depends(read_user_form),
    coordinator: UserWriteCoordinator = Depends(get_coordinator),
):
    """Create a user, uploading the ``foto`` file first when one is attached."""
    result = await coordinator.create(form.fields, form.photo)
    if result.foto is None:
        return {"mensaje": "Usuario agregado sin foto", "id": result.id}
    return {"mensaje": "Usuario agregado", "id": result.id, "foto": result.foto}


@router.put("/usuarios/{user_id}")
async def update_usuario(
    user_id: int,
    form: UserForm = Depends(read_user_form),
    coordinator: UserWriteCoordinator = Depends(get_coordinator),
):
    """Overwrite the text fields; the photo only changes when a file is sent."""
    result = await coordinator.update(user_id, form.fields, form.photo)
    if result.photo_replaced:
        return {"mensaje": "Usuario actualizado"}
    return {"mensaje": "Usuario actualizado sin modificar la foto"}


@router.delete("/usuarios/{user_id}")
async def delete_usuario(
    user_id: int,
    coordinator: UserWriteCoordinator = Depends(get_coordinator),
):
    # Same reply whether or not the row existed.
    await coordinator.delete(user_id)
    return {"mensaje": "Usuario eliminado"}
