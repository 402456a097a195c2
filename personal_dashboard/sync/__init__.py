"""Cache refresh coordination."""

from personal_dashboard.sync.coordinator import STATE_FIELDS, RefreshCoordinator
from personal_dashboard.sync.freshness import DEFAULT_TTLS, needs_refresh
from personal_dashboard.sync.state import DashboardState, ObservableState, StateListener

__all__ = [
    "DEFAULT_TTLS",
    "STATE_FIELDS",
    "DashboardState",
    "ObservableState",
    "RefreshCoordinator",
    "StateListener",
    "needs_refresh",
]
