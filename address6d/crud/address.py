from typing import Optional
from sqlalchemy.orm import Session
from sqlalchemy.exc import IntegrityError
from address6d.crud.base import CRUDBase
from address6d.core.exceptions import ConflictError
from address6d.models.address import Address


class CRUDAddress(CRUDBase[Address]):
    """
    CRUD operations for Address model.

    Mobile number and location code are both unique; lookups by either are
    the only reads registration needs.
    """

    def get_by_mobile(self, db: Session, mobile: str) -> Optional[Address]:
        return self.get_by(db, "mobile", mobile)

    def get_by_code(self, db: Session, code: str) -> Optional[Address]:
        return self.get_by(db, "code", code)

    def create(
        self,
        db: Session,
        *,
        name: str,
        mobile: str,
        code: str,
        latitude: float,
        longitude: float,
        firebase_uid: str,
        sublocality: Optional[str] = None,
        locality: Optional[str] = None
    ) -> Address:
        """
        Insert a new address.

        The pre-checks done by callers are not atomic with the insert, so a
        concurrent registration can still hit the unique constraints here.

        Raises:
            ConflictError: If the mobile number or code is already stored
        """
        db_obj = Address(
            name=name,
            mobile=mobile,
            code=code,
            latitude=latitude,
            longitude=longitude,
            sublocality=sublocality,
            locality=locality,
            firebase_uid=firebase_uid
        )
        db.add(db_obj)

        try:
            db.commit()
        except IntegrityError as e:
            db.rollback()
            message = str(e.orig).lower()
            if "mobile" in message:
                raise ConflictError("mobile", mobile)
            if "code" in message:
                raise ConflictError("code", code)
            raise

        db.refresh(db_obj)
        return db_obj


address = CRUDAddress(Address)
