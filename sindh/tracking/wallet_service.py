"""Worker wallet: earnings from paid work and withdrawals."""
import logging
from dataclasses import dataclass, field

from sqlalchemy import select
from sqlalchemy.orm import Session

from sindh.exceptions import InsufficientBalanceError, ValidationError, WorkerNotFoundError
from sindh.persistence.models import Application, WalletTransaction, Worker

logger = logging.getLogger(__name__)

WITHDRAWAL_METHODS = ["bank_transfer", "upi"]


@dataclass
class WalletSummary:
    """Balance, totals and ledger entries (newest first) for one worker."""

    balance: float
    total_earned: float
    total_withdrawn: float
    transactions: list[WalletTransaction] = field(default_factory=list)


class WalletService:
    """Service for crediting payments to workers and paying them out."""

    def __init__(self, session: Session):
        """
        Initialize wallet service.

        Args:
            session: Database session
        """
        self.session = session

    def credit_earning(self, application: Application) -> WalletTransaction:
        """
        Add an application's payment to the worker's balance.

        Stages the ledger entry without committing; the caller commits it
        together with the payment itself.
        """
        worker = application.worker
        entry = WalletTransaction(
            worker_id=worker.id,
            application_id=application.id,
            type="earning",
            amount=application.payment_amount,
            description=f"Payment for: {application.job.title}",
            status="completed",
        )
        worker.balance = (worker.balance or 0.0) + application.payment_amount
        self.session.add(entry)
        return entry

    def withdraw(
        self,
        worker_id: str,
        amount: float,
        method: str = "bank_transfer",
    ) -> WalletTransaction:
        """
        Request a payout from the worker's balance.

        The balance is reduced immediately; the payout itself stays
        "pending" until settled outside Sindh.

        Raises:
            WorkerNotFoundError: If the worker does not exist
            ValidationError: If the amount or method is invalid
            InsufficientBalanceError: If the amount exceeds the balance
        """
        if amount is None or amount <= 0:
            raise ValidationError("amount", "Withdrawal amount must be positive")
        if method not in WITHDRAWAL_METHODS:
            raise ValidationError(
                "method", f"Invalid method: {method}. Must be one of {WITHDRAWAL_METHODS}"
            )

        worker = self._get_worker(worker_id)
        balance = worker.balance or 0.0
        if amount > balance:
            raise InsufficientBalanceError(amount, balance)

        entry = WalletTransaction(
            worker_id=worker.id,
            type="withdrawal",
            amount=amount,
            description=f"Withdrawal to {method.replace('_', ' ')}",
            method=method,
            status="pending",
        )
        worker.balance = balance - amount
        self.session.add(entry)
        self.session.commit()
        self.session.refresh(entry)

        logger.info("Worker %s withdrew %.2f via %s", worker.id, amount, method)
        return entry

    def get_wallet(self, worker_id: str) -> WalletSummary:
        """Current balance with lifetime totals and the full ledger."""
        worker = self._get_worker(worker_id)

        stmt = (
            select(WalletTransaction)
            .where(WalletTransaction.worker_id == worker.id)
            .order_by(WalletTransaction.created_at.desc(), WalletTransaction.id)
        )
        transactions = list(self.session.execute(stmt).scalars().all())

        return WalletSummary(
            balance=worker.balance or 0.0,
            total_earned=sum(t.amount for t in transactions if t.type == "earning"),
            total_withdrawn=sum(t.amount for t in transactions if t.type == "withdrawal"),
            transactions=transactions,
        )

    def _get_worker(self, worker_id: str) -> Worker:
        worker = self.session.get(Worker, worker_id)
        if worker is None:
            raise WorkerNotFoundError(worker_id)
        return worker
