"""GET/PUT /v1/settings/installments - financing configuration"""

from dataclasses import asdict
from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from applehub_checkout.api.v1.schemas import InstallmentSettingsSchema
from applehub_checkout.domain.models import InstallmentSettings
from applehub_checkout.infrastructure.database.repositories import SettingsRepository
from applehub_checkout.infrastructure.database.session import get_db

router = APIRouter()


@router.get("/settings/installments", response_model=InstallmentSettingsSchema)
def get_installment_settings(db: Session = Depends(get_db)):
    """Current financing settings (defaults until an admin saves them)"""
    return InstallmentSettingsSchema(**asdict(SettingsRepository(db).get_installment_settings()))


@router.put("/settings/installments", response_model=InstallmentSettingsSchema)
def save_installment_settings(request_body: InstallmentSettingsSchema, db: Session = Depends(get_db)):
    saved = SettingsRepository(db).save_installment_settings(InstallmentSettings(**request_body.model_dump()))
    db.commit()
    return InstallmentSettingsSchema(**asdict(saved))
