"""Mailwizard Campaigns — dispatch passes against stored campaigns and the HTTP surface.

Invariants:
    - Only ACTIVE campaigns send; at most `speed` targets per pass
    - Sender failures mark the target FAILED and never abort the pass
    - Malformed targets skip one campaign only
    - A campaign with no PENDING targets left becomes COMPLETED
"""

import json

import pytest

from tradedesk.infrastructure.mail import LoggingMailSender
from tradedesk.models.mailwizard import MailwizardCampaign, MailwizardTemplate
from tradedesk.services.mailwizard import process_campaigns


class FlakySender(LoggingMailSender):
    def __init__(self, bad: set[str]):
        super().__init__()
        self.bad = bad

    async def send(self, to, subject, html):
        if to in self.bad:
            raise ConnectionError("smtp refused")
        await super().send(to, subject, html)


def _targets(*emails: str) -> str:
    return json.dumps([{"email": e, "status": "PENDING"} for e in emails])


@pytest.fixture
async def template(test_db):
    row = MailwizardTemplate(name="Welcome", content="<p>Hello</p>")
    test_db.add(row)
    await test_db.commit()
    return row


async def _campaign(test_db, template, **fields) -> MailwizardCampaign:
    fields.setdefault("name", "Launch")
    fields.setdefault("subject", "We are live")
    fields.setdefault("status", "ACTIVE")
    row = MailwizardCampaign(template_id=template.id, template=template, **fields)
    test_db.add(row)
    await test_db.commit()
    return row


# ─── Dispatch pass ───────────────────────────────────────────────

async def test_speed_caps_sends_per_pass(test_db, template):
    campaign = await _campaign(
        test_db, template, speed=2, targets=_targets("a@x.io", "b@x.io", "c@x.io"),
    )
    sender = LoggingMailSender()

    report = await process_campaigns(test_db, sender)

    assert report.sent == 2
    assert [m[0] for m in sender.sent] == ["a@x.io", "b@x.io"]
    assert sender.sent[0][1:] == ("We are live", "<p>Hello</p>")
    statuses = [t["status"] for t in json.loads(campaign.targets)]
    assert statuses == ["SENT", "SENT", "PENDING"]
    assert campaign.status == "ACTIVE"


async def test_second_pass_completes_campaign(test_db, template):
    campaign = await _campaign(test_db, template, speed=2, targets=_targets("a@x.io", "b@x.io", "c@x.io"))
    sender = LoggingMailSender()

    await process_campaigns(test_db, sender)
    report = await process_campaigns(test_db, sender)

    assert report.completed == [str(campaign.id)]
    assert campaign.status == "COMPLETED"
    assert len(sender.sent) == 3


async def test_failed_target_does_not_abort(test_db, template):
    campaign = await _campaign(test_db, template, speed=5, targets=_targets("a@x.io", "bad@x.io"))

    report = await process_campaigns(test_db, FlakySender({"bad@x.io"}))

    assert (report.sent, report.failed) == (1, 1)
    statuses = {t["email"]: t["status"] for t in json.loads(campaign.targets)}
    assert statuses == {"a@x.io": "SENT", "bad@x.io": "FAILED"}
    assert campaign.status == "COMPLETED"


async def test_malformed_targets_skip_one_campaign(test_db, template):
    broken = await _campaign(test_db, template, name="Broken", targets="{not json")
    healthy = await _campaign(test_db, template, name="Healthy", targets=_targets("a@x.io"))
    sender = LoggingMailSender()

    report = await process_campaigns(test_db, sender)

    assert report.skipped == [str(broken.id)]
    assert report.sent == 1
    assert broken.targets == "{not json"
    assert healthy.status == "COMPLETED"


async def test_inactive_campaigns_ignored(test_db, template):
    await _campaign(test_db, template, status="PAUSED", targets=_targets("a@x.io"))
    sender = LoggingMailSender()

    report = await process_campaigns(test_db, sender)

    assert report.campaigns == 0
    assert sender.sent == []


# ─── HTTP ────────────────────────────────────────────────────────

async def test_process_endpoint(client, test_db, template, mail_sender):
    await _campaign(test_db, template, targets=_targets("a@x.io"))

    res = await client.post("/api/admin/ext/mailwizard/campaign/process")

    assert res.status_code == 200
    body = res.json()
    assert body["message"] == "Campaigns processed successfully"
    assert (body["campaigns"], body["sent"], body["failed"]) == (1, 1, 0)
    assert len(body["completed"]) == 1
    assert [m[0] for m in mail_sender.sent] == ["a@x.io"]


async def test_create_campaign_stores_targets(client, template):
    res = await client.post("/api/admin/ext/mailwizard/campaign", json={
        "name": "Launch", "subject": "Hi", "template_id": str(template.id),
        "targets": [{"email": "a@x.io"}, {"email": "b@x.io", "status": "SENT"}],
    })

    assert res.status_code == 200
    stored = json.loads(res.json()["record"]["targets"])
    assert [t["status"] for t in stored] == ["PENDING", "SENT"]


async def test_create_campaign_duplicate_targets(client, template):
    res = await client.post("/api/admin/ext/mailwizard/campaign", json={
        "name": "Launch", "subject": "Hi", "template_id": str(template.id),
        "targets": [{"email": "a@x.io"}, {"email": "A@x.io"}],
    })

    assert res.status_code == 400
    assert res.json()["error"]["code"] == "VALIDATION_ERROR"
