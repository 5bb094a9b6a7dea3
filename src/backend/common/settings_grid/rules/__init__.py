from .budget_pacing import CampaignBudgetPacing
from .impressions_floor import CampaignImpressionsFloor

__all__ = [
    "CampaignBudgetPacing",
    "CampaignImpressionsFloor",
]
