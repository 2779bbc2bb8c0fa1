from dataclasses import dataclass


@dataclass(frozen=True)
class Session:
    """Immutable snapshot of who is signed in, handed to code that needs it."""
    user_id: int
    email: str
    display_name: str

    @classmethod
    def from_user(cls, user):
        return cls(user_id=user.pk, email=user.email, display_name=user.public_name)

