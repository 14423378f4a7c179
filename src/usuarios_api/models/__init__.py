from .base import Base
from .usuario import Usuario

__all__ = ["Base", "Usuario"]
