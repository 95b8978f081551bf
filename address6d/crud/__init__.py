from address6d.crud.base import CRUDBase
from .address import address

__all__ = ["CRUDBase", "address"]
