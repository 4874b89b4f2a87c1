from typing import List

from sqlalchemy import or_
from sqlalchemy.orm import Session

from saknak.database.models.property_model import Property
from saknak.database.models.user_model import User
from saknak.enums.property_type import PropertyStatus
from saknak.enums.user_type import UserType
from saknak.schemas.property_schema import PropertyCreate, PropertyFilter, PropertyUpdate
from saknak.services.base_service import BaseService
from saknak.services.exceptions import ConflictError, PermissionDeniedError


class PropertyService(BaseService[Property]):
    label = "Property"

    def __init__(self):
        super().__init__(Property)

    def create_for_owner(self, db: Session, owner: User, property_in: PropertyCreate) -> Property:
        if owner.user_type != UserType.OWNER.value:
            raise PermissionDeniedError("Only property owners can list properties.")

        property_obj = Property(**property_in.model_dump(mode="json"), owner_id=owner.id)
        return self.create(db, property_obj)

    def validate_property_owner(self, db: Session, property_id: int, user_id: int) -> Property:
        """Validate property exists and user is the owner"""
        property_obj = self.get_or_404(db, property_id)
        if property_obj.owner_id != user_id:
            raise PermissionDeniedError("You are not authorized to access this property.")
        return property_obj

    def update_for_owner(
        self, db: Session, property_id: int, owner: User, property_in: PropertyUpdate
    ) -> Property:
        property_obj = self.validate_property_owner(db, property_id, owner.id)
        return self.update(db, property_obj, property_in)

    def delete_for_owner(self, db: Session, property_id: int, owner: User) -> None:
        property_obj = self.validate_property_owner(db, property_id, owner.id)
        if property_obj.booking_requests:
            raise ConflictError(
                "Property has booking requests; mark it unavailable instead of deleting it."
            )
        self.delete(db, property_obj)

    def get_owner_properties(self, db: Session, owner_id: int) -> List[Property]:
        return (
            db.query(Property)
            .filter(Property.owner_id == owner_id)
            .order_by(Property.created_at.desc(), Property.id.desc())
            .all()
        )

    def search(self, db: Session, filters: PropertyFilter) -> List[Property]:
        query = db.query(Property).filter(Property.status == PropertyStatus.AVAILABLE.value)

        if filters.search:
            pattern = f"%{filters.search}%"
            query = query.filter(
                or_(
                    Property.title.ilike(pattern),
                    Property.address.ilike(pattern),
                    Property.description.ilike(pattern),
                )
            )

        if filters.rental_type and filters.rental_type != "all":
            query = query.filter(Property.rental_type == filters.rental_type)

        if filters.min_price is not None:
            query = query.filter(Property.price >= filters.min_price)

        if filters.max_price is not None:
            query = query.filter(Property.price <= filters.max_price)

        if filters.furnished is not None:
            query = query.filter(Property.furnished == filters.furnished)

        return query.order_by(Property.created_at.desc(), Property.id.desc()).all()
