"""Dispute tracking — фильтрация, сортировка, статистика и переходы статусов.

Переходы:
- OPEN → UNDER_REVIEW / ESCALATED / RESOLVED / CLOSED
- UNDER_REVIEW → RESOLVED / ESCALATED / CLOSED
- ESCALATED → UNDER_REVIEW / RESOLVED
- RESOLVED → CLOSED
- CLOSED — терминальный
"""

from dataclasses import dataclass
from enum import Enum
from typing import Iterable, List, Optional

from src.core.domain.dispute import (
    PRIORITY_RANK,
    Dispute,
    DisputeMessage,
    DisputeResolution,
    DisputeStatus,
    ResolutionDecision,
)
from src.core.log import get_logger
from src.core.math.numerical_safeguards import EPS_MONEY, is_close

logger = get_logger("disputes")


DISPUTE_TRANSITIONS: dict[DisputeStatus, frozenset[DisputeStatus]] = {
    DisputeStatus.OPEN: frozenset(
        {
            DisputeStatus.UNDER_REVIEW,
            DisputeStatus.ESCALATED,
            DisputeStatus.RESOLVED,
            DisputeStatus.CLOSED,
        }
    ),
    DisputeStatus.UNDER_REVIEW: frozenset(
        {DisputeStatus.RESOLVED, DisputeStatus.ESCALATED, DisputeStatus.CLOSED}
    ),
    DisputeStatus.ESCALATED: frozenset({DisputeStatus.UNDER_REVIEW, DisputeStatus.RESOLVED}),
    DisputeStatus.RESOLVED: frozenset({DisputeStatus.CLOSED}),
    DisputeStatus.CLOSED: frozenset(),
}


class DisputeTransitionError(Exception):
    """Недопустимое изменение статуса спора."""
    pass


class DisputeSortKey(str, Enum):
    """Ключ сортировки (всегда по убыванию)."""

    CREATED = "created"
    UPDATED = "updated"
    PRIORITY = "priority"
    AMOUNT = "amount"


@dataclass(frozen=True)
class DisputeStats:
    """Количество споров по статусам."""

    total: int
    open: int
    under_review: int
    resolved: int
    closed: int
    escalated: int


# =============================================================================
# QUERIES
# =============================================================================


def filter_disputes(
    disputes: Iterable[Dispute], status: Optional[DisputeStatus] = None
) -> List[Dispute]:
    """Споры с заданным статусом; None — все."""
    return [d for d in disputes if status is None or d.status == status]


def sort_disputes(
    disputes: Iterable[Dispute], key: DisputeSortKey = DisputeSortKey.UPDATED
) -> List[Dispute]:
    """Сортировка по убыванию ключа. Стабильная: равные сохраняют порядок."""
    sort_keys = {
        DisputeSortKey.CREATED: lambda d: d.created_at_ms,
        DisputeSortKey.UPDATED: lambda d: d.updated_at_ms,
        DisputeSortKey.PRIORITY: lambda d: PRIORITY_RANK[d.priority],
        DisputeSortKey.AMOUNT: lambda d: d.amount,
    }
    if key not in sort_keys:
        raise ValueError(f"Unknown sort key: {key}")

    return sorted(disputes, key=sort_keys[key], reverse=True)


def dispute_stats(disputes: Iterable[Dispute]) -> DisputeStats:
    """Статистика по статусам."""
    items = list(disputes)

    def count(status: DisputeStatus) -> int:
        return sum(1 for d in items if d.status == status)

    return DisputeStats(
        total=len(items),
        open=count(DisputeStatus.OPEN),
        under_review=count(DisputeStatus.UNDER_REVIEW),
        resolved=count(DisputeStatus.RESOLVED),
        closed=count(DisputeStatus.CLOSED),
        escalated=count(DisputeStatus.ESCALATED),
    )


# =============================================================================
# MUTATIONS (новый экземпляр)
# =============================================================================


def update_status(
    dispute: Dispute,
    new_status: DisputeStatus,
    now_ms: int,
    assigned_to: Optional[str] = None,
) -> Dispute:
    """
    Смена статуса с проверкой допустимости перехода.

    RESOLVED выставляется только через resolve_dispute().

    Raises:
        DisputeTransitionError: Переход недопустим
    """
    if new_status == DisputeStatus.RESOLVED:
        raise DisputeTransitionError("Use resolve_dispute() to resolve a dispute")

    _check_transition(dispute, new_status)

    update: dict = {"status": new_status, "updated_at_ms": now_ms}
    if assigned_to is not None:
        update["assigned_to"] = assigned_to

    logger.info(
        f"Dispute {dispute.dispute_id}: {dispute.status.value} → {new_status.value}"
    )
    return dispute.model_copy(update=update)


def escalate_dispute(dispute: Dispute, now_ms: int) -> Dispute:
    """Эскалация спора."""
    return update_status(dispute, DisputeStatus.ESCALATED, now_ms)


def resolve_dispute(dispute: Dispute, resolution: DisputeResolution) -> Dispute:
    """
    Закрытие спора решением.

    Raises:
        DisputeTransitionError: Переход недопустим
        ValueError: Сумма возврата некорректна для решения
    """
    _check_transition(dispute, DisputeStatus.RESOLVED)

    if resolution.decision == ResolutionDecision.PARTIAL_REFUND:
        if resolution.amount is None:
            raise ValueError("partial_refund requires a refund amount")
        # Float-превышение в пределах EPS_MONEY считается полным возвратом
        if resolution.amount > dispute.amount and not is_close(
            resolution.amount, dispute.amount, abs_tol=EPS_MONEY
        ):
            raise ValueError(
                f"Refund {resolution.amount:.2f} exceeds dispute amount {dispute.amount:.2f}"
            )

    logger.info(
        f"Dispute {dispute.dispute_id} resolved: {resolution.decision.value} "
        f"by {resolution.resolved_by}"
    )
    return dispute.model_copy(
        update={
            "status": DisputeStatus.RESOLVED,
            "resolution": resolution,
            "updated_at_ms": resolution.resolved_at_ms,
        }
    )


def add_message(dispute: Dispute, message: DisputeMessage) -> Dispute:
    """Добавление сообщения в тред (не в закрытый спор)."""
    if dispute.status == DisputeStatus.CLOSED:
        raise DisputeTransitionError(f"Dispute {dispute.dispute_id} is closed")

    return dispute.model_copy(
        update={
            "messages": dispute.messages + (message,),
            "updated_at_ms": max(dispute.updated_at_ms, message.timestamp_ms),
        }
    )


def _check_transition(dispute: Dispute, new_status: DisputeStatus) -> None:
    if new_status not in DISPUTE_TRANSITIONS[dispute.status]:
        raise DisputeTransitionError(
            f"Dispute {dispute.dispute_id}: cannot move from "
            f"{dispute.status.value} to {new_status.value}"
        )
