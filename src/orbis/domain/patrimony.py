"""Patrimony (protected savings) domain service."""

import uuid
from datetime import date, datetime, UTC
from decimal import Decimal
from typing import Sequence

from orbis.database.base import Database
from orbis.domain.entities import GoalProgress, PatrimonyTransaction, PatrimonyType
from orbis.domain.errors import (
    NotFoundError,
    ValidationError,
    non_positive_amount,
    patrimony_not_found,
)

DEFAULT_GOAL_AMOUNT = Decimal("20000")


def calculate_total(movements: Sequence[PatrimonyTransaction]) -> Decimal:
    """Deposits minus withdrawals. May be negative; nothing is clamped."""
    total = Decimal("0")
    for movement in movements:
        if movement.type == PatrimonyType.DEPOSIT:
            total += movement.amount
        elif movement.type == PatrimonyType.WITHDRAW:
            total -= movement.amount
    return total


def goal_progress(
    current_amount: Decimal, goal_amount: Decimal = DEFAULT_GOAL_AMOUNT
) -> GoalProgress:
    """Progress towards a patrimony goal, capped at 100%."""
    if goal_amount <= 0:
        raise ValidationError(non_positive_amount(goal_amount))
    return GoalProgress(
        percentage=min(current_amount / goal_amount * 100, Decimal("100")),
        goal_amount=goal_amount,
        remaining=max(goal_amount - current_amount, Decimal("0")),
    )


class PatrimonyService:
    """Service for recording patrimony movements."""

    def __init__(self, db: Database):
        """Initialize patrimony service.

        Args:
            db: Database instance
        """
        self.db = db

    def add_movement(
        self,
        amount: Decimal,
        movement_type: PatrimonyType,
        date: date,
        description: str | None = None,
    ) -> PatrimonyTransaction:
        """Record a deposit or withdrawal.

        Withdrawals larger than the current total are accepted.

        Raises:
            ValidationError: If amount is not positive
        """
        if amount <= 0:
            raise ValidationError(non_positive_amount(amount))
        movement = PatrimonyTransaction(
            id=str(uuid.uuid4()),
            amount=amount,
            type=movement_type,
            date=date,
            created_at=datetime.now(UTC),
            description=description,
        )
        self.db.add_patrimony(movement)
        return movement

    def delete_movement(self, patrimony_id: str) -> None:
        """Delete a movement.

        Raises:
            NotFoundError: If it doesn't exist
        """
        if not any(m.id == patrimony_id for m in self.db.list_patrimony()):
            raise NotFoundError(patrimony_not_found(patrimony_id))
        self.db.delete_patrimony(patrimony_id)

    def list_movements(self) -> list[PatrimonyTransaction]:
        """List all movements, oldest first."""
        return self.db.list_patrimony()

    def get_total(self) -> Decimal:
        """Current patrimony total."""
        return calculate_total(self.db.list_patrimony())
