"""API operations expressed as request/response state machines."""

from wikiapi_core.actions.base import API_PATH, Action, ActionState, ListingAction
from wikiapi_core.actions.envelope import HttpActionEnvelope
from wikiapi_core.actions.listing import AllPageTitles
from wikiapi_core.actions.login import Login, LoginResult
from wikiapi_core.actions.meta import GetVersion, SiteInfo

__all__ = [
    "API_PATH",
    "Action",
    "ActionState",
    "AllPageTitles",
    "GetVersion",
    "HttpActionEnvelope",
    "ListingAction",
    "Login",
    "LoginResult",
    "SiteInfo",
]
