from fastapi import Request

from mtgorganizer.services.organizer import Organizer


def get_organizer(request: Request) -> Organizer:
    """
    Dependency that provides the process-wide Organizer.

    The instance is created in the application lifespan. Tests override
    this dependency with their own Organizer.
    """
    organizer: Organizer = request.app.state.organizer
    return organizer
