"""Admin Notifications — fan-out to admins by permission."""

from sqlalchemy import select

from tradedesk.models.system import Notification
from tradedesk.models.user import Permission, Role
from tradedesk.services.notifications import create_admin_notification


async def test_notifies_permission_holders_and_super_admins(test_db, admin_user, make_user):
    viewer_role = Role(name="Affiliate Viewer", permissions=[Permission(name="view.affiliate.reward")])
    other_role = Role(name="Support", permissions=[Permission(name="view.faq")])
    test_db.add_all([viewer_role, other_role])
    await test_db.commit()
    viewer = await make_user("viewer@tradedesk.io", role=viewer_role)
    await make_user("support@tradedesk.io", role=other_role)
    await make_user("plain@tradedesk.io")

    created = await create_admin_notification(
        test_db, "view.affiliate.reward", "MLM Reward Processed", "A reward was processed",
        link="/admin/affiliate/reward",
    )
    await test_db.commit()

    assert {n.user_id for n in created} == {admin_user.id, viewer.id}
    rows = (await test_db.execute(select(Notification))).scalars().all()
    assert len(rows) == 2
    assert all(r.link == "/admin/affiliate/reward" and r.type == "system" for r in rows)


async def test_no_matching_admins(test_db, make_user):
    await make_user("plain@tradedesk.io")
    created = await create_admin_notification(test_db, "view.affiliate.reward", "T", "M")
    assert created == []
