"""Sidebar navigation and which roles see each entry."""
from dataclasses import dataclass
from typing import FrozenSet, List, Optional

from skyfront.domain.entities.user import UserRole

ALL_ROLES = frozenset(UserRole)
STAFF_ROLES = frozenset({UserRole.OPERATOR, UserRole.ADMINISTRATOR})
ADMIN_ROLES = frozenset({UserRole.ADMINISTRATOR})


@dataclass(frozen=True)
class NavigationItem:
    title: str
    href: str
    endpoint: str
    roles: FrozenSet[UserRole]

    def visible_to(self, role: Optional[UserRole]) -> bool:
        return role is not None and role in self.roles


NAVIGATION_ITEMS = (
    NavigationItem("Search Flights", "/search", "customer.search", ALL_ROLES),
    NavigationItem("My Bookings", "/my-bookings", "customer.my_bookings", ALL_ROLES),
    NavigationItem("Dashboard", "/dashboard", "management.dashboard", STAFF_ROLES),
    NavigationItem("Flights", "/manage/flights", "management.flights", STAFF_ROLES),
    NavigationItem("Bookings", "/manage/bookings", "management.bookings", STAFF_ROLES),
    NavigationItem("Airports", "/manage/airports", "management.airports", STAFF_ROLES),
    NavigationItem("Airplanes", "/manage/airplanes", "management.airplanes", STAFF_ROLES),
    NavigationItem("Reports", "/reports", "management.reports", STAFF_ROLES),
    NavigationItem("Users", "/manage/users", "admin.users", ADMIN_ROLES),
)


def visible_items(role: Optional[UserRole]) -> List[NavigationItem]:
    """Entries the given role may open, in sidebar order."""
    return [item for item in NAVIGATION_ITEMS if item.visible_to(role)]


def is_active(item_href: str, path: str) -> bool:
    """An entry is highlighted on its own page and on any page below it."""
    if item_href == "/":
        return path == "/"
    return path == item_href or path.startswith(item_href.rstrip("/") + "/")
