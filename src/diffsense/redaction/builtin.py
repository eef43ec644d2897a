"""Built-in redaction patterns, in application order.

Order matters where matches overlap: ``stripe-key`` runs before ``api-key``
so ``api_key: "sk_live_..."`` keeps its key name and loses only the value.
"""

from diffsense.redaction.models import RedactionPattern

# --- API keys ---

STRIPE_KEY = RedactionPattern(
    name="stripe-key",
    pattern=r"sk_(?:live|test)_\w{24,}",
    description="Stripe secret keys (sk_live_ / sk_test_).",
)

API_KEY = RedactionPattern(
    name="api-key",
    pattern=r"""['"]?api[_-]?key['"]?\s*[:=]\s*['"][\w\-]{20,}['"]?""",
    ignore_case=True,
    description="Generic api_key assignments.",
)

OPENAI_KEY = RedactionPattern(
    name="openai-key",
    pattern=r"\bsk-[\w\-]{20,}",
    description="OpenAI-style secret keys (sk-...).",
)

AWS_KEY = RedactionPattern(
    name="aws-key",
    pattern=r"AKIA[0-9A-Z]{16}",
    description="AWS access key IDs.",
)

# --- Tokens ---

BEARER_TOKEN = RedactionPattern(
    name="bearer-token",
    pattern=r"\bbearer\s+[\w\-.~+/]{8,}=*",
    ignore_case=True,
    description="HTTP bearer credentials.",
)

GENERIC_SECRET = RedactionPattern(
    name="generic-secret",
    pattern=r"""['"]?secret['"]?\s*[:=]\s*['"][\w\-]{8,}['"]?""",
    ignore_case=True,
    description="secret = '...' assignments.",
)

PASSWORD = RedactionPattern(
    name="password",
    pattern=r"""['"]?password['"]?\s*[:=]\s*['"][\w\-@!#$%^&*()+=]{6,}['"]?""",
    ignore_case=True,
    description="password = '...' assignments.",
)

TOKEN = RedactionPattern(
    name="token",
    pattern=r"""['"]?token['"]?\s*[:=]\s*['"][\w\-]{20,}['"]?""",
    ignore_case=True,
    description="token = '...' assignments.",
)

JWT = RedactionPattern(
    name="jwt",
    pattern=r"eyJ[\w\-]+\.eyJ[\w\-]+\.[\w\-]+",
    description="JSON Web Tokens.",
)

# --- Keys ---

PRIVATE_KEY = RedactionPattern(
    name="private-key",
    pattern=r"-----BEGIN (?:RSA |EC |OPENSSH )?PRIVATE KEY-----",
    description="PEM private key headers (RSA, EC, OpenSSH).",
)

SSH_KEY = RedactionPattern(
    name="ssh-key",
    pattern=r"ssh-(?:rsa|dss|dsa|ed25519)\s+[A-Za-z0-9+/]{100,}={0,3}",
    description="SSH public key blobs.",
)

# --- Connection strings ---

DB_CONNECTION = RedactionPattern(
    name="db-connection",
    pattern=r"""(?:mongodb(?:\+srv)?|mysql|postgresql|postgres)://[^\s'"]+:[^\s'"]+@[^\s'"]+""",
    ignore_case=True,
    description="Database URLs with embedded user:password.",
)

# --- Platform tokens ---

OAUTH = RedactionPattern(
    name="oauth",
    pattern=r"""['"]?access_token['"]?\s*[:=]\s*['"][\w\-.]+['"]?""",
    ignore_case=True,
    description="OAuth access_token assignments.",
)

GITHUB_TOKEN = RedactionPattern(
    name="github-token",
    pattern=r"gh[pousr]_[A-Za-z0-9]{36,}",
    description="GitHub personal access tokens.",
)

GITLAB_TOKEN = RedactionPattern(
    name="gitlab-token",
    pattern=r"glpat-[\w\-]{20,}",
    description="GitLab personal access tokens.",
)

SLACK_TOKEN = RedactionPattern(
    name="slack-token",
    pattern=r"xox[baprs]-[0-9]+-[0-9]+-[a-zA-Z0-9]+",
    description="Slack bot/user tokens.",
)

CREDENTIALS = RedactionPattern(
    name="credentials",
    pattern=r"""['"]?credentials?['"]?\s*[:=]\s*\{[^}]{10,}\}""",
    ignore_case=True,
    description="Inline credentials objects.",
)

BUILTIN_PATTERNS = (
    STRIPE_KEY,
    API_KEY,
    OPENAI_KEY,
    AWS_KEY,
    BEARER_TOKEN,
    GENERIC_SECRET,
    PASSWORD,
    TOKEN,
    JWT,
    PRIVATE_KEY,
    SSH_KEY,
    DB_CONNECTION,
    OAUTH,
    GITHUB_TOKEN,
    GITLAB_TOKEN,
    SLACK_TOKEN,
    CREDENTIALS,
)
