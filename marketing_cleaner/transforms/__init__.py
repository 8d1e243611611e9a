"""Per-dataset cleaners turning staging text into typed clean tables."""

from .base import BaseCleaner
from .email_campaigns import EmailCampaignCleaner
from .paid_ads import PaidAdsCleaner
from .social_organic import SocialOrganicCleaner
from .customer_transactions import CustomerTransactionCleaner
from .customer_master import CustomerMasterCleaner

CLEANERS = {
    "email_campaigns": EmailCampaignCleaner,
    "paid_ads": PaidAdsCleaner,
    "social_media_organic": SocialOrganicCleaner,
    "customer_transactions": CustomerTransactionCleaner,
    "customer_master": CustomerMasterCleaner,
}


def output_schema(dataset: str):
    """Column names and dtypes of a dataset's clean table."""
    return CLEANERS[dataset]().get_output_schema


__all__ = [
    "BaseCleaner",
    "EmailCampaignCleaner",
    "PaidAdsCleaner",
    "SocialOrganicCleaner",
    "CustomerTransactionCleaner",
    "CustomerMasterCleaner",
    "CLEANERS",
    "output_schema",
]
