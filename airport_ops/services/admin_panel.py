"""
Admin authentication, capability checks and the audit log.

A session exists only between a successful ``authenticate`` and ``logout``.
Privileged callers ask ``require`` for the capability they need before they
touch any state; a refused request changes nothing and adds no audit entry.
"""

import hashlib
import hmac
import logging
from dataclasses import dataclass
from datetime import datetime
from typing import Dict, Iterable, List, Optional, Tuple
from uuid import NAMESPACE_URL, UUID, uuid5

from ..errors import AuthenticationError, PermissionDeniedError
from ..models.admin import AdminActionModel, AdminUserModel, PricingRuleModel
from ..models.enums import AdminLevel
from ..utils.helpers import utc_now
from .pricing_engine import PricingEngine

logger = logging.getLogger(__name__)

# username, password, full name, level
DEFAULT_ACCOUNTS = [
    ("admin", "admin123", "System Administrator", AdminLevel.SUPER_ADMIN),
    ("flight_mgr", "flight123", "Flight Operations Manager", AdminLevel.FLIGHT_MANAGER),
    ("aircraft_mgr", "aircraft123", "Fleet Manager", AdminLevel.AIRCRAFT_MANAGER),
    ("finance_mgr", "finance123", "Revenue Manager", AdminLevel.FINANCE_MANAGER),
    ("viewer", "viewer123", "Operations Viewer", AdminLevel.VIEWER),
]

CAPABILITIES = ("manage_flights", "manage_aircraft", "manage_pricing", "view_reports")

ACCOUNT_NAMESPACE = uuid5(NAMESPACE_URL, "airport-ops:admin")


def hash_password(password: str) -> str:
    return hashlib.sha256(password.encode("utf-8")).hexdigest()


@dataclass
class AdminSession:
    """The authenticated admin and when the session started."""
    user: AdminUserModel
    started_at: datetime


class AdminPanel:
    """Account registry, the current session and the append-only audit log."""

    def __init__(self, pricing_engine: PricingEngine, seed_default_accounts: bool = True):
        self.pricing_engine = pricing_engine
        self._accounts: Dict[str, Tuple[AdminUserModel, str]] = {}
        self._audit_log: List[AdminActionModel] = []
        self.session: Optional[AdminSession] = None

        if seed_default_accounts:
            for username, password, full_name, level in DEFAULT_ACCOUNTS:
                self.register_account(username, password, full_name, level)

    # Accounts and sessions

    def register_account(
        self,
        username: str,
        password: str,
        full_name: str,
        level: AdminLevel,
        email: str = "",
    ) -> AdminUserModel:
        # Stable per username; persisted audit entries refer to it
        user = AdminUserModel(
            id=uuid5(ACCOUNT_NAMESPACE, username),
            username=username,
            full_name=full_name,
            email=email,
            level=level,
        )
        self._accounts[username] = (user, hash_password(password))
        return user

    def get_account(self, username: str) -> Optional[AdminUserModel]:
        entry = self._accounts.get(username)
        return entry[0] if entry else None

    @property
    def current_admin(self) -> Optional[AdminUserModel]:
        return self.session.user if self.session else None

    @property
    def is_authenticated(self) -> bool:
        return self.session is not None

    def authenticate(
        self, username: str, password: str, now: Optional[datetime] = None
    ) -> AdminUserModel:
        now = now or utc_now()
        entry = self._accounts.get(username)
        if entry is None or not hmac.compare_digest(entry[1], hash_password(password)):
            logger.warning(f"Failed admin login for '{username}'")
            raise AuthenticationError("Invalid username or password")

        user = entry[0]
        if not user.is_active:
            logger.warning(f"Login attempt for deactivated admin '{username}'")
            raise AuthenticationError(f"Admin account '{username}' is deactivated")

        user.login(now)
        self.session = AdminSession(user=user, started_at=now)
        self.log_action("LOGIN", f"Admin {username} logged in", now=now)
        logger.info(f"Admin {username} logged in ({user.level_display()})")
        return user

    def logout(self, now: Optional[datetime] = None) -> None:
        if self.session is None:
            logger.debug("Logout requested without an active session")
            return
        username = self.session.user.username
        self.log_action("LOGOUT", f"Admin {username} logged out", now=now)
        self.session = None
        logger.info(f"Admin {username} logged out")

    def require(self, capability: str) -> AdminUserModel:
        """Return the session's admin if it holds ``capability``, else raise."""
        if capability not in CAPABILITIES:
            raise ValueError(f"Unknown capability: {capability}")
        if self.session is None:
            logger.warning(f"Rejected '{capability}' request without an admin session")
            raise PermissionDeniedError("Admin authentication required")

        user = self.session.user
        if not getattr(user, f"can_{capability}")():
            logger.warning(f"Admin {user.username} ({user.level_display()}) lacks '{capability}'")
            raise PermissionDeniedError(
                f"{user.level_display()} is not allowed to {capability.replace('_', ' ')}"
            )
        return user

    # Audit log

    def log_action(
        self,
        action_type: str,
        description: str,
        affected_entity_id: Optional[UUID] = None,
        old_value: Optional[str] = None,
        new_value: Optional[str] = None,
        now: Optional[datetime] = None,
    ) -> AdminActionModel:
        if self.session is None:
            raise PermissionDeniedError("Admin authentication required")
        action = AdminActionModel(
            admin_id=self.session.user.id,
            action_type=action_type,
            description=description,
            timestamp=now or utc_now(),
            affected_entity_id=affected_entity_id,
            old_value=old_value,
            new_value=new_value,
        )
        self._audit_log.append(action)
        return action

    def restore_audit_log(self, entries: Iterable[AdminActionModel]) -> None:
        """Replace the log with previously persisted entries, oldest first."""
        self._audit_log = list(entries)

    @property
    def audit_log(self) -> Tuple[AdminActionModel, ...]:
        return tuple(self._audit_log)

    def recent_actions(self, limit: int = 10) -> List[AdminActionModel]:
        """Newest entries first."""
        return list(reversed(self._audit_log))[:limit]

    # Pricing rules

    def add_pricing_rule(
        self,
        rule_name: str,
        multiplier: float,
        route_pattern: Optional[str] = None,
        time_period: Optional[Tuple[int, int]] = None,
    ) -> PricingRuleModel:
        user = self.require("manage_pricing")
        rule = PricingRuleModel(
            rule_name=rule_name,
            route_pattern=route_pattern,
            time_period=time_period,
            multiplier=multiplier,
            created_by=user.id,
        )
        self.pricing_engine.add_rule(rule)
        self.log_action(
            "ADD_PRICING_RULE",
            f"Added pricing rule: {rule_name}",
            affected_entity_id=rule.id,
            new_value=f"{multiplier}",
        )
        logger.info(f"Pricing rule '{rule_name}' (x{multiplier}) added by {user.username}")
        return rule

    def set_pricing_rule_active(self, rule_id: UUID, is_active: bool) -> PricingRuleModel:
        user = self.require("manage_pricing")
        previous, rule = self.pricing_engine.set_active(rule_id, is_active)
        self.log_action(
            "TOGGLE_PRICING_RULE",
            f"{'Enabled' if is_active else 'Disabled'} pricing rule: {rule.rule_name}",
            affected_entity_id=rule.id,
            old_value=str(previous),
            new_value=str(is_active),
        )
        logger.info(f"Pricing rule '{rule.rule_name}' active={is_active} ({user.username})")
        return rule

    def remove_pricing_rule(self, rule_id: UUID) -> PricingRuleModel:
        user = self.require("manage_pricing")
        rule = self.pricing_engine.remove_rule(rule_id)
        self.log_action(
            "REMOVE_PRICING_RULE",
            f"Removed pricing rule: {rule.rule_name}",
            affected_entity_id=rule.id,
            old_value=f"{rule.multiplier}",
        )
        logger.info(f"Pricing rule '{rule.rule_name}' removed by {user.username}")
        return rule
