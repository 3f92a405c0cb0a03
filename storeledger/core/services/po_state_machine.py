"""
Purchase order state machine.

One table of transition rules drives every status change: which
statuses a transition is legal from, where it leads, which role may
trigger it, which milestone it stamps and what the audit log calls it.
Use cases authorize the actor, apply the transition to the loaded
aggregate, then persist the order and the returned audit entry in the
same unit of work.

    DRAFT -> QUOTATION_REQUESTED -> QUOTATION_SUBMITTED
          <-> QUOTATION_REVISION_REQUESTED
          -> QUOTATION_APPROVED | QUOTATION_REJECTED
    DRAFT -> SENT -> SHIPPED -> RECEIVED | REJECTED
    QUOTATION_APPROVED -> SHIPPED
    partial receipts -> PARTIAL -> RECEIVED
    early statuses -> CANCELLED, settled statuses -> CLOSED
"""

from dataclasses import dataclass
from datetime import datetime
from enum import Enum

from storeledger.core.clock import utc_now
from storeledger.core.entities.actor import Actor
from storeledger.core.entities.enums import AuditAction, PurchaseOrderStatus, UserRole
from storeledger.core.entities.purchase_order import AuditLogEntry, PurchaseOrder
from storeledger.core.exceptions import ForbiddenError, InvalidTransitionError

S = PurchaseOrderStatus


class Transition(str, Enum):
    """Operations that move a purchase order between statuses."""

    REQUEST_QUOTATION = "request_quotation"
    SUBMIT_QUOTATION = "submit_quotation"
    REQUEST_REVISION = "request_revision"
    APPROVE_QUOTATION = "approve_quotation"
    REJECT_QUOTATION = "reject_quotation"
    SEND = "send"
    SHIP = "ship"
    CONFIRM_RECEIVED = "confirm_received"
    CONFIRM_REJECTED = "confirm_rejected"
    PARTIAL_RECEIVE = "partial_receive"
    CANCEL = "cancel"
    CLOSE = "close"


@dataclass(frozen=True)
class TransitionRule:
    """Preconditions and effects of one transition."""

    transition: Transition
    allowed_from: frozenset[PurchaseOrderStatus]
    role: UserRole
    target: PurchaseOrderStatus | None  # None: computed from receipts
    action: AuditAction | None  # None: computed from receipts
    stamp: str | None = None  # milestone timestamp attribute


_CANCELLABLE = frozenset(
    {
        S.DRAFT,
        S.QUOTATION_REQUESTED,
        S.QUOTATION_SUBMITTED,
        S.QUOTATION_REVISION_REQUESTED,
        S.QUOTATION_APPROVED,
        S.QUOTATION_REJECTED,
        S.SENT,
    }
)

_CLOSABLE = frozenset({S.PARTIAL, S.RECEIVED, S.REJECTED, S.QUOTATION_REJECTED})

TERMINAL_STATUSES = frozenset({S.CANCELLED, S.CLOSED})

TRANSITION_RULES: dict[Transition, TransitionRule] = {
    rule.transition: rule
    for rule in (
        TransitionRule(
            Transition.REQUEST_QUOTATION,
            frozenset({S.DRAFT}),
            UserRole.STORE_OWNER,
            S.QUOTATION_REQUESTED,
            AuditAction.QUOTATION_REQUESTED,
            "quotation_requested_at",
        ),
        TransitionRule(
            Transition.SUBMIT_QUOTATION,
            frozenset({S.QUOTATION_REQUESTED, S.QUOTATION_REVISION_REQUESTED}),
            UserRole.SUPPLIER,
            S.QUOTATION_SUBMITTED,
            AuditAction.QUOTATION_SUBMITTED,
            "quotation_submitted_at",
        ),
        TransitionRule(
            Transition.REQUEST_REVISION,
            frozenset({S.QUOTATION_SUBMITTED, S.QUOTATION_REVISION_REQUESTED}),
            UserRole.STORE_OWNER,
            S.QUOTATION_REVISION_REQUESTED,
            AuditAction.QUOTATION_REVISION_REQUESTED,
        ),
        TransitionRule(
            Transition.APPROVE_QUOTATION,
            frozenset({S.QUOTATION_SUBMITTED}),
            UserRole.STORE_OWNER,
            S.QUOTATION_APPROVED,
            AuditAction.QUOTATION_APPROVED,
            "quotation_approved_at",
        ),
        TransitionRule(
            Transition.REJECT_QUOTATION,
            frozenset({S.QUOTATION_SUBMITTED}),
            UserRole.STORE_OWNER,
            S.QUOTATION_REJECTED,
            AuditAction.QUOTATION_REJECTED,
            "quotation_rejected_at",
        ),
        TransitionRule(
            Transition.SEND,
            frozenset({S.DRAFT}),
            UserRole.STORE_OWNER,
            S.SENT,
            AuditAction.SENT,
            "placed_at",
        ),
        TransitionRule(
            Transition.SHIP,
            frozenset({S.SENT, S.QUOTATION_APPROVED}),
            UserRole.SUPPLIER,
            S.SHIPPED,
            AuditAction.SHIPPED,
        ),
        TransitionRule(
            Transition.CONFIRM_RECEIVED,
            frozenset({S.SHIPPED}),
            UserRole.STORE_OWNER,
            S.RECEIVED,
            AuditAction.RECEIVED,
        ),
        TransitionRule(
            Transition.CONFIRM_REJECTED,
            frozenset({S.SHIPPED}),
            UserRole.STORE_OWNER,
            S.REJECTED,
            AuditAction.REJECTED,
        ),
        TransitionRule(
            Transition.PARTIAL_RECEIVE,
            frozenset(s for s in S if s not in TERMINAL_STATUSES),
            UserRole.STORE_OWNER,
            None,
            None,
        ),
        TransitionRule(
            Transition.CANCEL,
            _CANCELLABLE,
            UserRole.STORE_OWNER,
            S.CANCELLED,
            AuditAction.CANCELLED,
        ),
        TransitionRule(
            Transition.CLOSE,
            _CLOSABLE,
            UserRole.STORE_OWNER,
            S.CLOSED,
            AuditAction.CLOSED,
        ),
    )
}


def receipt_status(po: PurchaseOrder) -> PurchaseOrderStatus:
    """Status implied by the items' received quantities.

    RECEIVED when every line is complete, PARTIAL when anything at all
    has been received, otherwise the current status.
    """
    if po.is_fully_received:
        return S.RECEIVED
    if po.has_receipts:
        return S.PARTIAL
    return po.status


class PurchaseOrderStateMachine:
    """Validates and applies purchase order transitions."""

    def __init__(self, rules: dict[Transition, TransitionRule] | None = None) -> None:
        self._rules = rules or TRANSITION_RULES

    def rule(self, transition: Transition) -> TransitionRule:
        return self._rules[transition]

    def can_apply(self, status: PurchaseOrderStatus, transition: Transition) -> bool:
        return status in self._rules[transition].allowed_from

    def available_transitions(self, status: PurchaseOrderStatus) -> list[Transition]:
        """Transitions legal from a status, in declaration order."""
        return [t for t, rule in self._rules.items() if status in rule.allowed_from]

    def authorize(self, actor: Actor, transition: Transition) -> None:
        """Raise ForbiddenError unless the actor's role may trigger the transition."""
        rule = self._rules[transition]
        if rule.role == UserRole.STORE_OWNER and actor.is_store_owner:
            return
        if rule.role == UserRole.SUPPLIER and actor.is_supplier:
            return
        raise ForbiddenError(transition.value, actor.role.value)

    def check(self, po: PurchaseOrder, transition: Transition) -> TransitionRule:
        """Raise InvalidTransitionError if the order's status forbids the transition."""
        rule = self._rules[transition]
        if po.status not in rule.allowed_from:
            raise InvalidTransitionError(
                transition.value,
                po.status.value,
                allowed_from=[s.value for s in rule.allowed_from],
                po_id=po.id,
            )
        return rule

    def apply(
        self,
        po: PurchaseOrder,
        transition: Transition,
        actor: Actor,
        notes: str | None = None,
        now: datetime | None = None,
    ) -> AuditLogEntry | None:
        """
        Move the order to the transition's target status in place.

        For partial receipts the target is derived from the items, which
        the caller must already have updated.

        Returns:
            The audit entry to persist, or None when the status did not
            change (a receipt of zero units).
        """
        rule = self.check(po, transition)
        now = now or utc_now()
        previous = po.status

        if rule.target is None:
            target = receipt_status(po)
            action = (
                AuditAction.RECEIVED if target == S.RECEIVED else AuditAction.PARTIALLY_RECEIVED
            )
        else:
            target = rule.target
            action = rule.action

        if target == previous and rule.target is None:
            return None

        po.status = target
        if rule.stamp is not None:
            setattr(po, rule.stamp, now)
        po.updated_at = now

        return AuditLogEntry(
            po_id=po.id,
            user_id=actor.user_id,
            action=action,
            previous_status=previous,
            new_status=target,
            notes=notes,
            created_at=now,
        )
