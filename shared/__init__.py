from .config import Settings
from .errors import (
    SiteError, ValidationError, InvalidEmailError, ConfigurationError,
    UpstreamError, BotDetected,
)
from .models import (
    LeadSubmission, ContactSubmission, MortgageRequest, MortgageResult,
    MortgageRate, PropertyDetails, VisitorGeo,
)
from .hubspot import HubSpotClient
from .ninjas import ApiNinjasClient
from .contacts import UpsertOutcome, upsert_contact
