"""Fixed values for the PBS data API and the single tool exposed over it."""

PBS_API_BASE_URL = "https://data-api.health.gov.au/pbs/api/v3"

# Public key for unregistered users of the PBS data API
DEFAULT_SUBSCRIPTION_KEY = "2384af7c667342ceb5a736fe29f1dc6b"

DEFAULT_TIMEOUT_MS = 30_000

SUBSCRIPTION_KEY_HEADER = "Subscription-Key"

RATE_LIMIT_HEADERS = {
    "limit": "x-rate-limit-limit",
    "remaining": "x-rate-limit-remaining",
    "reset": "x-rate-limit-reset",
}

PBS_API_TOOL_NAME = "pbs_api"
PBS_API_TOOL_DESCRIPTION = (
    "Access the Australian Pharmaceutical Benefits Scheme (PBS) API to retrieve "
    "information about medicines, pricing, and availability."
)

PBS_API_ENDPOINTS = (
    "/",
    "/amt-items",
    "/atc-codes",
    "/container-organisation-relationships",
    "/containers",
    "/copayments",
    "/criteria",
    "/criteria-parameter-relationships",
    "/dispensing-rules",
    "/extemporaneous-ingredients",
    "/extemporaneous-preparations",
    "/extemporaneous-prep-sfp-relationships",
    "/extemporaneous-tariffs",
    "/fees",
    "/indications",
    "/item-atc-relationships",
    "/item-dispensing-rule-relationships",
    "/item-organisation-relationships",
    "/item-overview",
    "/item-prescribing-text-relationships",
    "/item-pricing-events",
    "/item-restriction-relationships",
    "/items",
    "/markup-bands",
    "/organisations",
    "/parameters",
    "/prescribers",
    "/prescribing-texts",
    "/program-dispensing-rules",
    "/programs",
    "/restriction-prescribing-text-relationships",
    "/restrictions",
    "/schedules",
    "/standard-formula-preparations",
    "/summary-of-changes",
)
