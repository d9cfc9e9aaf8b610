"""Mailwizard Service — one dispatch pass over ACTIVE email campaigns.

Invariants:
    - Each ACTIVE campaign sends at most `speed` PENDING targets per pass
    - A target ends SENT or FAILED; targets are persisted after every campaign
    - A campaign with no PENDING target left is COMPLETED
    - Malformed targets skip that campaign only

Design Decisions:
    - Triggered by the admin endpoint or by run_dispatch() from a scheduler
      (`tradedesk-mailwizard` console script); the pass itself has no timer
"""

import asyncio
import logging
from dataclasses import dataclass, field

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from tradedesk.config import get_settings
from tradedesk.core.api_context import log_step, log_warn
from tradedesk.core.domain_types import CampaignStatus, TargetStatus
from tradedesk.core.mailwizard_dispatch import dump_targets, is_complete, parse_targets, select_batch
from tradedesk.db.session import create_session_factory
from tradedesk.infrastructure.mail import MailSender, build_mail_sender
from tradedesk.infrastructure.observability import setup_logging
from tradedesk.models.mailwizard import MailwizardCampaign

logger = logging.getLogger(__name__)


@dataclass
class DispatchReport:
    campaigns: int = 0
    sent: int = 0
    failed: int = 0
    completed: list[str] = field(default_factory=list)
    skipped: list[str] = field(default_factory=list)

    def to_dict(self) -> dict:
        return {
            "campaigns": self.campaigns,
            "sent": self.sent,
            "failed": self.failed,
            "completed": self.completed,
            "skipped": self.skipped,
        }


async def _send_batch(
    sender: MailSender, campaign: MailwizardCampaign, targets: list[dict], report: DispatchReport,
) -> None:
    html = campaign.template.content if campaign.template else ""
    for index in select_batch(targets, campaign.speed):
        target = targets[index]
        try:
            await sender.send(target["email"], campaign.subject, html)
            target["status"] = TargetStatus.SENT.value
            report.sent += 1
        except Exception as e:
            logger.error(f"Campaign {campaign.id}: sending to {target.get('email')} failed: {e}")
            target["status"] = TargetStatus.FAILED.value
            report.failed += 1


async def process_campaigns(db: AsyncSession, sender: MailSender) -> DispatchReport:
    result = await db.execute(
        select(MailwizardCampaign).where(
            MailwizardCampaign.status == CampaignStatus.ACTIVE.value,
            MailwizardCampaign.deleted_at.is_(None),
        ),
    )
    campaigns = result.scalars().all()
    report = DispatchReport(campaigns=len(campaigns))
    log_step(f"Found {len(campaigns)} active campaigns")

    for campaign in campaigns:
        try:
            targets = parse_targets(campaign.targets)
        except ValueError as e:
            log_warn(f"Campaign {campaign.id} skipped: {e}")
            report.skipped.append(str(campaign.id))
            continue
        if not targets:
            report.skipped.append(str(campaign.id))
            continue

        await _send_batch(sender, campaign, targets, report)
        campaign.targets = dump_targets(targets)
        if is_complete(targets):
            campaign.status = CampaignStatus.COMPLETED.value
            report.completed.append(str(campaign.id))
            log_step(f"Campaign {campaign.id} completed")
        await db.commit()

    logger.info(
        f"Mailwizard pass: {report.sent} sent, {report.failed} failed, "
        f"{len(report.completed)} campaigns completed",
    )
    return report


async def run_dispatch() -> DispatchReport:
    """One pass outside the web app, with its own session."""
    settings = get_settings()
    session_factory = create_session_factory(settings.database_url)
    async with session_factory() as db:
        return await process_campaigns(db, build_mail_sender(settings))


def main() -> None:
    settings = get_settings()
    setup_logging(settings.log_level, settings.log_format)
    report = asyncio.run(run_dispatch())
    logger.info(f"Dispatch finished: {report.to_dict()}")


if __name__ == "__main__":
    main()
