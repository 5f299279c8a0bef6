"""
Customer aggregate.

A customer owns its contact value objects, an active flag and an opaque
preference map. New customers come from :meth:`Customer.create`, which
records ``CustomerCreated``; the constructor is the reconstruction path
used by repositories and runs the same invariants without recording.
"""

from datetime import datetime
from typing import Any

from ordertrack.aggregates.base import EventRecorder, identity_equality, parse_timestamp, utcnow
from ordertrack.events.base import DomainEvent
from ordertrack.events.customer import CustomerCreated, CustomerDeactivated
from ordertrack.exceptions import BusinessRuleViolation, ValidationError
from ordertrack.types import AttributeMap, ensure_attribute_map
from ordertrack.values.contact import Address, PhoneNumber
from ordertrack.values.email import EmailAddress
from ordertrack.values.identifiers import CustomerId

MAX_NAME_LENGTH = 200
DEFAULT_DEACTIVATION_REASON = "Manual deactivation"


@identity_equality()
class Customer:
    """
    Customer aggregate root.

    Invariants (checked on every construction, including reconstruction
    from storage):
    - name is non-empty after trimming (rule ``CustomerNameRequired``)
    - name is at most 200 characters (rule ``CustomerNameLength``)

    Deactivation is terminal: there is no operation to reactivate.

    Example:
        >>> customer = Customer.create(
        ...     CustomerId.new(), "Ada Lovelace", EmailAddress("ada@example.com")
        ... )
        >>> customer.deactivate()
        >>> [e.event_type for e in customer.drain_events()]
        ['CustomerCreated', 'CustomerDeactivated']
    """

    def __init__(
        self,
        id: CustomerId,
        name: str,
        email: EmailAddress,
        address: Address | None = None,
        phone_number: PhoneNumber | None = None,
        is_active: bool = True,
        preferences: AttributeMap | None = None,
        created_at: datetime | None = None,
        updated_at: datetime | None = None,
    ) -> None:
        now = utcnow()
        self._id = id
        self._name = self._validated_name(name)
        self._email = email
        self._address = address
        self._phone_number = phone_number
        self._is_active = is_active
        self._preferences = ensure_attribute_map(preferences, "preferences")
        self._created_at = created_at or now
        self._updated_at = updated_at or self._created_at
        self._events = EventRecorder()

    @classmethod
    def create(
        cls,
        id: CustomerId,
        name: str,
        email: EmailAddress,
        address: Address | None = None,
        phone_number: PhoneNumber | None = None,
        preferences: AttributeMap | None = None,
    ) -> "Customer":
        """
        Create a new active customer and record ``CustomerCreated``.

        Raises:
            BusinessRuleViolation: If the name is blank or too long
            ValidationError: If preferences are not serializable data
        """
        customer = cls(
            id,
            name,
            email,
            address=address,
            phone_number=phone_number,
            is_active=True,
            preferences=preferences,
        )
        customer._events.record(
            CustomerCreated(
                aggregate_id=id.value,
                customer_id=id.value,
                customer_name=customer.name,
                customer_email=email.value,
            )
        )
        return customer

    @staticmethod
    def _validated_name(name: Any) -> str:
        trimmed = name.strip() if isinstance(name, str) else ""
        if not trimmed:
            raise BusinessRuleViolation("Customer name cannot be empty", "CustomerNameRequired")
        if len(trimmed) > MAX_NAME_LENGTH:
            raise BusinessRuleViolation(
                f"Customer name cannot exceed {MAX_NAME_LENGTH} characters",
                "CustomerNameLength",
            )
        return trimmed

    @property
    def id(self) -> CustomerId:
        return self._id

    @property
    def name(self) -> str:
        return self._name

    @property
    def email(self) -> EmailAddress:
        return self._email

    @property
    def address(self) -> Address | None:
        return self._address

    @property
    def phone_number(self) -> PhoneNumber | None:
        return self._phone_number

    @property
    def is_active(self) -> bool:
        return self._is_active

    @property
    def preferences(self) -> AttributeMap:
        """A copy of the preference map; mutating it does not affect the customer."""
        return ensure_attribute_map(self._preferences, "preferences")

    @property
    def created_at(self) -> datetime:
        return self._created_at

    @property
    def updated_at(self) -> datetime:
        return self._updated_at

    def deactivate(self, reason: str = DEFAULT_DEACTIVATION_REASON) -> None:
        """
        Deactivate the customer and record ``CustomerDeactivated``.

        Raises:
            BusinessRuleViolation: If the customer is already inactive
        """
        if not self._is_active:
            raise BusinessRuleViolation(
                "Customer is already deactivated", "CustomerAlreadyDeactivated"
            )
        self._is_active = False
        self._touch()
        self._events.record(
            CustomerDeactivated(
                aggregate_id=self._id.value,
                customer_id=self._id.value,
                reason=reason or DEFAULT_DEACTIVATION_REASON,
            )
        )

    def update_address(self, address: Address) -> None:
        if address is None:
            raise ValidationError("address", "Address cannot be None")
        self._address = address
        self._touch()

    def update_phone_number(self, phone_number: PhoneNumber) -> None:
        if phone_number is None:
            raise ValidationError("phone_number", "Phone number cannot be None")
        self._phone_number = phone_number
        self._touch()

    def update_preferences(self, preferences: AttributeMap) -> None:
        """Replace the preference map wholesale."""
        if preferences is None:
            raise ValidationError("preferences", "Preferences cannot be None")
        self._preferences = ensure_attribute_map(preferences, "preferences")
        self._touch()

    def _touch(self) -> None:
        self._updated_at = utcnow()

    @property
    def pending_events(self) -> tuple[DomainEvent, ...]:
        return self._events.pending_events

    @property
    def has_pending_events(self) -> bool:
        return self._events.has_pending_events

    def drain_events(self) -> list[DomainEvent]:
        """Hand over every pending event, oldest first, and clear them."""
        return self._events.drain_events()

    def to_dict(self) -> dict[str, Any]:
        """Serialize to a JSON-compatible dictionary. Pending events are not included."""
        return {
            "id": str(self._id),
            "name": self._name,
            "email": self._email.value,
            "address": self._address.to_dict() if self._address else None,
            "phone_number": self._phone_number.to_dict() if self._phone_number else None,
            "is_active": self._is_active,
            "preferences": self.preferences,
            "created_at": self._created_at.isoformat(),
            "updated_at": self._updated_at.isoformat(),
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "Customer":
        """
        Rebuild a customer from :meth:`to_dict` output.

        Every value type and invariant is re-validated; no event is recorded.
        """
        address = data.get("address")
        phone = data.get("phone_number")
        return cls(
            CustomerId(data["id"]),
            data["name"],
            EmailAddress(data["email"]),
            address=Address.from_dict(address) if address else None,
            phone_number=PhoneNumber.from_dict(phone) if phone else None,
            is_active=bool(data.get("is_active", True)),
            preferences=data.get("preferences"),
            created_at=parse_timestamp(data.get("created_at")),
            updated_at=parse_timestamp(data.get("updated_at")),
        )

    def __repr__(self) -> str:
        return (
            f"Customer(id={self._id}, name={self._name!r}, "
            f"email={self._email.value!r}, is_active={self._is_active})"
        )


__all__ = [
    "Customer",
    "DEFAULT_DEACTIVATION_REASON",
    "MAX_NAME_LENGTH",
]
