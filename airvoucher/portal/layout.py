"""Role-gated portal layout: title, navigation and sign-out."""
from __future__ import annotations

import logging
from types import TracebackType

from airvoucher.models import UserRole
from airvoucher.portal.client import PortalAPIError, PortalClient
from airvoucher.portal.session import SessionContext, SessionRecord
from airvoucher.schemas.retailer import NavItem
from airvoucher.services.navigation import navigation_for, portal_title, resolve_redirect

logger = logging.getLogger(__name__)


class PortalLayout:
    """Chrome shared by the admin, retailer and agent portals.

    The layout subscribes to the session context on construction and must be
    closed (or used as a context manager) so the subscription is released.
    """

    def __init__(
        self,
        context: SessionContext,
        client: PortalClient,
        *,
        role: UserRole | str,
        pathname: str,
    ) -> None:
        self._context = context
        self._client = client
        self.role = UserRole(role)
        self.pathname = pathname
        self.session: SessionRecord | None = context.current
        self.retailer_name: str | None = None
        self._subscription = context.subscribe(self._on_session_change)
        if self.session is not None:
            self._load_retailer_name()

    def _on_session_change(self, session: SessionRecord | None) -> None:
        self.session = session
        self.retailer_name = None
        if session is not None:
            self._load_retailer_name()

    def _load_retailer_name(self) -> None:
        if self.role is not UserRole.RETAILER or self.session is None:
            return
        if self.session.role is not UserRole.RETAILER:
            return
        try:
            self.retailer_name = self._client.fetch_my_retailer()["name"]
        except PortalAPIError as exc:
            logger.warning("could not load retailer name: %s", exc.message)
            self.retailer_name = None

    @property
    def title(self) -> str:
        return portal_title(self.role, self.retailer_name)

    @property
    def nav_items(self) -> list[NavItem]:
        return [
            NavItem(name=link.name, href=link.href, icon=link.icon, active=link.href == self.pathname)
            for link in navigation_for(self.role)
        ]

    @property
    def user_initial(self) -> str:
        if self.session is None or not self.session.email:
            return "U"
        return self.session.email[0].upper()

    @property
    def redirect(self) -> str | None:
        current_role = self.session.role if self.session is not None else None
        return resolve_redirect(current_role, self.role)

    def sign_out(self) -> str:
        self._client.sign_out()
        return "/"

    def close(self) -> None:
        self._subscription.unsubscribe()

    def __enter__(self) -> PortalLayout:
        return self

    def __exit__(
        self,
        exc_type: type[BaseException] | None,
        exc: BaseException | None,
        traceback: TracebackType | None,
    ) -> None:
        self.close()


__all__ = ["PortalLayout"]
