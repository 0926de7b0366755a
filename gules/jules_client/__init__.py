"""Modular Jules client components (session, resources, activity endpoints)."""

from .activities import ActivitiesAPI  # noqa: F401
from .base import auth_headers, resolve_api_key  # noqa: F401
from .client import JulesClient  # noqa: F401
from .resources import ResourceAPI  # noqa: F401
from .session import create_default_session, get_default_session  # noqa: F401
