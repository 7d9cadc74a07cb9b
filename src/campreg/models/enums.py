"""Closed domain enumerations.

Values are the literal labels used on the wire and in storage.
"""

from enum import Enum


class CampType(str, Enum):
    """The two camp programmes."""

    NEST = "Η Φωλιά του Παιδιού"
    PARADISE = "Ο Παράδεισος του Παιδιού"


class CampPeriod(str, Enum):
    """Camp sessions; D and E run for the Nest programme only."""

    A = "A' (16/6 - 30/6)"
    B = "B' (17/7 - 15/7)"
    C = "Γ' (16/7 - 30/7)"
    D = "Δ' (31/7 - 14/8) Μόνο για την Φωλιά"
    E = "E' (17/8 - 31/8) Μόνο για την Φωλιά"


NEST_ONLY_PERIODS: frozenset[CampPeriod] = frozenset({CampPeriod.D, CampPeriod.E})


class VisitorType(str, Enum):
    RETURNING = "Παλιός κατασκηνωτής"
    NEW = "Νέος κατασκηνωτής"


class Beneficiary(str, Enum):
    MOTHER = "Μητέρα"
    FATHER = "Πατέρας"


class PhoneType(str, Enum):
    MOBILE = "mobile"
    LANDLINE = "landline"


class RoleName(str, Enum):
    """Roles seeded at startup."""

    ADMIN = "ADMIN"
    READER = "READER"


def is_period_offered(camp_type: CampType, camp_period: CampPeriod) -> bool:
    """Return whether ``camp_period`` runs for ``camp_type``."""
    if camp_type is CampType.PARADISE:
        return camp_period not in NEST_ONLY_PERIODS
    return True
