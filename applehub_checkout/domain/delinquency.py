"""Delinquency report - overdue installments grouped by customer"""

from datetime import date
from typing import Dict, List

from applehub_checkout.domain.models import DelinquencyReport, DelinquentCustomer, OverdueInstallment

MISSING = "N/A"


def build_delinquency_report(installments: List[OverdueInstallment], today: date) -> DelinquencyReport:
    """
    Aggregate overdue pending installments per customer.

    - Only installments due strictly before today count as late
    - total_pending and late_installments accumulate per customer
    - days_late is the age of the oldest late installment, whose due date
      and value are reported alongside it
    - Customers are sorted by days_late, most late first
    """
    late = sorted(
        (inst for inst in installments if inst.due_date < today),
        key=lambda inst: inst.due_date,
    )

    by_user: Dict[str, DelinquentCustomer] = {}
    for inst in late:
        customer = by_user.get(inst.user_id)
        if customer is None:
            customer = DelinquentCustomer(
                user_id=inst.user_id,
                customer_name=inst.customer_name or MISSING,
                cpf=inst.cpf or MISSING,
                phone=inst.phone or MISSING,
                total_pending=0.0,
                late_installments=0,
                days_late=0,
                oldest_due_date=None,
                oldest_amount=0.0,
            )
            by_user[inst.user_id] = customer

        customer.total_pending += inst.amount
        customer.late_installments += 1

        days_late = (today - inst.due_date).days
        if days_late > customer.days_late:
            customer.days_late = days_late
            customer.oldest_due_date = inst.due_date
            customer.oldest_amount = inst.amount

    customers = sorted(by_user.values(), key=lambda c: c.days_late, reverse=True)

    return DelinquencyReport(
        customers=customers,
        total_customers=len(customers),
        total_pending=sum(c.total_pending for c in customers),
        late_installments=sum(c.late_installments for c in customers),
    )
