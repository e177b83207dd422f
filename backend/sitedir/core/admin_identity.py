"""Admin Identity — the verified caller of an admin mutation."""

from dataclasses import dataclass


@dataclass(frozen=True)
class AdminIdentity:
    """Verified admin: stable uid, optional email, and the credential it presented."""
    uid: str
    email: str | None
    id_token: str

    @property
    def actor(self) -> str:
        """Value recorded in createdBy/updatedBy."""
        return self.email or self.uid
