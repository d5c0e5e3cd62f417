from userhub.models.user import User

__all__ = ["User"]
