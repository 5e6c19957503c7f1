"""Authentication context model for the dashboard owner."""

from dataclasses import dataclass, field


@dataclass
class DashboardOwnerContext:
    """Claims of the authenticated dashboard owner."""

    user_id: str
    email: str = ""
    role: str = "authenticated"
    claims: dict = field(default_factory=dict)

    def __post_init__(self):
        if not self.user_id:
            raise ValueError("User id is required in authentication context")
