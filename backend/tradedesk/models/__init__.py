"""ORM Models — SQLAlchemy declarative models for all admin domains.

Invariants:
    - All models inherit from Base (db/base.py)

Design Decisions:
    - One file per domain (CRM, finance, affiliate, ...) for locality
    - All models imported here so SQLAlchemy resolves string-based relationship()
      references before any query runs
"""

from tradedesk.models.user import User, Role, Permission, UserBlock  # noqa: F401
from tradedesk.models.finance import Wallet, Transaction  # noqa: F401
from tradedesk.models.affiliate import (  # noqa: F401
    MlmReferral, MlmBinaryNode, MlmUnilevelNode, MlmReferralCondition, MlmReferralReward,
)
from tradedesk.models.ecommerce import (  # noqa: F401
    EcommerceCategory, EcommerceProduct, EcommerceOrder, EcommerceOrderItem,
    EcommerceDiscount, EcommerceUserDiscount,
)
from tradedesk.models.forex import ForexAccount, ForexPlan, ForexInvestment  # noqa: F401
from tradedesk.models.ico import (  # noqa: F401
    IcoTokenOffering, IcoTokenOfferingPhase, IcoTeamMember, IcoRoadmapItem,
    IcoTransaction, IcoAdminActivity,
)
from tradedesk.models.mailwizard import MailwizardTemplate, MailwizardCampaign  # noqa: F401
from tradedesk.models.content import BlogCategory, BlogTag, BlogPost, Faq  # noqa: F401
from tradedesk.models.staking import (  # noqa: F401
    StakingPool, StakingPosition, StakingEarningRecord, StakingAdminEarning, StakingAdminActivity,
    StakingExternalPoolPerformance,
)
from tradedesk.models.system import Setting, Notification  # noqa: F401
