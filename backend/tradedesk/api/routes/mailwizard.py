"""Mailwizard Routes — templates, campaigns and the on-demand dispatch pass."""

import logging

from fastapi import APIRouter, Depends, Request
from sqlalchemy.ext.asyncio import AsyncSession

from tradedesk.api.auth import require_permission
from tradedesk.api.crud_router import CrudResource, build_crud_router, operation
from tradedesk.core.domain_types import CampaignStatus, values
from tradedesk.core.endpoint_metadata import EndpointMetadata, register_endpoint, update_responses
from tradedesk.core.permissions import Principal
from tradedesk.infrastructure.database import get_db
from tradedesk.infrastructure.mail import MailSender, get_mail_sender
from tradedesk.schemas.mailwizard import (
    CampaignCreate, CampaignUpdate, TemplateCreate, TemplateUpdate,
)
from tradedesk.services import mailwizard, records

logger = logging.getLogger(__name__)

PREFIX = "/api/admin/ext/mailwizard"

PROCESS_CAMPAIGNS = register_endpoint(EndpointMetadata(
    summary="Run one campaign dispatch pass",
    operation_id="processMailwizardCampaigns",
    tags=("mailwizard",),
    permission="edit.mailwizard.campaign",
    log_module="mailwizard",
    log_title="Process campaigns",
    responses=update_responses("Campaign"),
))

custom = APIRouter(prefix=f"{PREFIX}/campaign", tags=["mailwizard"])


@custom.post("/process", **PROCESS_CAMPAIGNS.route_kwargs())
async def process_campaigns(
    request: Request,
    principal: Principal = Depends(require_permission(PROCESS_CAMPAIGNS.permission)),
    db: AsyncSession = Depends(get_db),
    sender: MailSender = Depends(get_mail_sender),
):
    async with operation(PROCESS_CAMPAIGNS, principal, request):
        report = await mailwizard.process_campaigns(db, sender)
    return {"message": "Campaigns processed successfully", **report.to_dict()}


async def _create_campaign(db, principal, body: CampaignCreate) -> dict:
    return await records.store_record(db, "mailwizardCampaign", body.to_record())


async def _update_campaign(db, principal, record_id, body: CampaignUpdate) -> dict:
    return await records.update_record(db, "mailwizardCampaign", record_id, body.to_record())


TEMPLATES = CrudResource(
    model="mailwizardTemplate",
    permission="mailwizard.template",
    name="MailwizardTemplate",
    tag="mailwizard",
    log_module="mailwizard",
    create_schema=TemplateCreate,
    update_schema=TemplateUpdate,
    operations=frozenset({"list", "get", "create", "update", "delete", "bulk_delete", "restore"}),
    searchable=("name",),
)

CAMPAIGNS = CrudResource(
    model="mailwizardCampaign",
    permission="mailwizard.campaign",
    name="MailwizardCampaign",
    tag="mailwizard",
    log_module="mailwizard",
    create_schema=CampaignCreate,
    update_schema=CampaignUpdate,
    searchable=("name", "subject"),
    includes=("template",),
    statuses=values(CampaignStatus),
    create_handler=_create_campaign,
    update_handler=_update_campaign,
)

router = APIRouter()
router.include_router(custom)
router.include_router(build_crud_router(f"{PREFIX}/template", TEMPLATES))
router.include_router(build_crud_router(f"{PREFIX}/campaign", CAMPAIGNS))
