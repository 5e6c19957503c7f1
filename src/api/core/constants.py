API_VERSION_HEADER = "X-KeyHub-Version"

# API Key Configuration
LIVE_API_KEY_PREFIX = "pk_live_"
DEV_API_KEY_PREFIX = "pk_dev_"
PRODUCTION_NAME_MARKER = "prod"
API_KEY_SUFFIX_LENGTH = 32
API_KEY_SUFFIX_ALPHABET = "abcdefghijklmnopqrstuvwxyz0123456789"
KEY_GENERATION_MAX_ATTEMPTS = 3

# Masking for dashboard display
MASK_VISIBLE_PREFIX_LENGTH = 8
MASK_MAX_STARS = 24

# Field limits
MAX_KEY_NAME_LENGTH = 255

# JWT Configuration
JWT_ALGORITHM = "HS256"
JWT_AUDIENCE = "authenticated"

# Throttling for the public key endpoints (per client IP)
PUBLIC_RATE_LIMIT = 60  # requests per window
PUBLIC_RATE_LIMIT_WINDOW_SECONDS = 60  # 1 minute

# Summarizer
GITHUB_URL_PATTERN = r"^https://github\.com/[\w\-._]+/[\w\-._]+"
PLACEHOLDER_SUMMARY = (
    "This is a placeholder summary. Actual GitHub summarization logic "
    "would be implemented here."
)


class RateLimitKeys:
    """Typed rate limiting cache key generators."""

    @staticmethod
    def public_ip(ip_address: str) -> str:
        """Generate rate limit key for IP-based key probing requests."""
        return f"rate_limit:public:ip:{ip_address}"
