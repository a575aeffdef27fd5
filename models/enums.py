import enum


class _ParsableEnum(str, enum.Enum):
    """Enum stored by name and exposed to clients in lower case."""

    @classmethod
    def parse(cls, value):
        if isinstance(value, cls):
            return value
        if not isinstance(value, str):
            raise ValueError(f"Invalid {cls.__name__}: {value!r}")
        key = value.strip().upper().replace(" ", "_")
        try:
            return cls[key]
        except KeyError:
            raise ValueError(f"Invalid {cls.__name__}: {value!r}") from None

    @property
    def external(self) -> str:
        return self.value.lower()


class Role(_ParsableEnum):
    CUSTOMER = "CUSTOMER"
    VENDOR = "VENDOR"
    ADMIN = "ADMIN"
    REGIONAL_ADMIN = "REGIONAL_ADMIN"


# Roles an admin may hand out through the role-change endpoint
ASSIGNABLE_ROLES = (Role.CUSTOMER, Role.VENDOR, Role.ADMIN)
# Roles a regional admin may see and manage inside its district
REGIONAL_MANAGED_ROLES = (Role.CUSTOMER, Role.VENDOR)


class OrderStatus(_ParsableEnum):
    PENDING = "PENDING"
    PROCESSING = "PROCESSING"
    SHIPPED = "SHIPPED"
    DELIVERED = "DELIVERED"
    CANCELLED = "CANCELLED"
