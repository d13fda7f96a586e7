"""GET /v1/admin/delinquency - overdue installments by customer"""

from datetime import datetime
from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from applehub_checkout.api.dependencies import get_now
from applehub_checkout.api.v1.schemas import DelinquencyReportResponse, DelinquentCustomerSchema
from applehub_checkout.config import settings
from applehub_checkout.domain.delinquency import build_delinquency_report
from applehub_checkout.infrastructure.database.repositories import TransactionRepository
from applehub_checkout.infrastructure.database.session import get_db
from applehub_checkout.utils.date_utils import local_date

router = APIRouter()


@router.get("/admin/delinquency", response_model=DelinquencyReportResponse)
def get_delinquency_report(db: Session = Depends(get_db), now: datetime = Depends(get_now)):
    """
    Customers with pending installments past their due date.

    Returns:
        Customers sorted by days late, with pending totals
    """
    today = local_date(now, settings.timezone)
    report = build_delinquency_report(TransactionRepository(db).list_overdue(today), today)

    return DelinquencyReportResponse(
        total_customers=report.total_customers,
        total_pending=round(report.total_pending, 2),
        late_installments=report.late_installments,
        customers=[
            DelinquentCustomerSchema(
                user_id=c.user_id,
                customer_name=c.customer_name,
                cpf=c.cpf,
                phone=c.phone,
                total_pending=round(c.total_pending, 2),
                late_installments=c.late_installments,
                days_late=c.days_late,
                oldest_due_date=c.oldest_due_date,
                oldest_amount=round(c.oldest_amount, 2),
            )
            for c in report.customers
        ],
    )
