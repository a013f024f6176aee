import yaml
import os
from functools import lru_cache
from typing import List, Optional, Dict, Any
from pydantic import BaseModel, Field


class AuthConfig(BaseModel):
    """Shared-secret JWT settings used by every service."""
    jwt_secret: str = "supersecretkey"
    algorithm: str = "HS256"
    token_lifetime_hours: int = 24


class DatabaseConfig(BaseModel):
    url: str = "sqlite:///./talentmatch.db"


class ServicesConfig(BaseModel):
    """Base URLs and listen ports of the peer services."""
    user_service_url: str = "http://localhost:4001"
    job_service_url: str = "http://localhost:4002"
    resume_service_url: str = "http://localhost:4003"
    match_service_url: str = "http://localhost:4004"
    candidate_service_url: str = "http://localhost:4007"

    gateway_port: int = 4000
    user_service_port: int = 4001
    match_service_port: int = 4004


class RouteConfig(BaseModel):
    """One gateway route: requests under `prefix` go to `backend`."""
    prefix: str
    backend: str  # key into ServicesConfig, e.g. "resume_service_url"
    auth_required: bool = False


def _default_routes() -> List[RouteConfig]:
    return [
        RouteConfig(prefix="/users", backend="user_service_url", auth_required=False),
        RouteConfig(prefix="/resumes", backend="resume_service_url", auth_required=True),
        RouteConfig(prefix="/candidates", backend="candidate_service_url", auth_required=True),
        RouteConfig(prefix="/matches", backend="match_service_url", auth_required=True),
        RouteConfig(prefix="/jobs", backend="job_service_url", auth_required=False),
    ]


class GatewayConfig(BaseModel):
    routes: List[RouteConfig] = Field(default_factory=_default_routes)
    rate_limit: str = "100/15 minutes"  # fixed window, per client IP
    upstream_timeout_seconds: float = 30.0


class MatchingConfig(BaseModel):
    """Defaults and resource bounds for the auto-match workflow."""
    default_min_score_threshold: float = 0.6
    default_max_matches: int = 10
    job_fetch_limit: int = 100
    max_workers: int = 10
    request_timeout_seconds: float = 15.0
    service_token_ttl_hours: int = 23


class LlmConfig(BaseModel):
    model: str = "gpt-4o-mini"
    temperature: float = 0.2  # low: reproducible scores
    max_tokens: int = 2000
    timeout_seconds: float = 60.0
    max_retries: int = 3

    api_key: Optional[str] = None
    base_url: Optional[str] = None

    # Azure OpenAI deployment (used when endpoint is set)
    azure_endpoint: Optional[str] = None
    azure_deployment: Optional[str] = None
    azure_api_version: Optional[str] = "2024-02-15-preview"


class AppConfig(BaseModel):
    auth: AuthConfig = Field(default_factory=AuthConfig)
    database: DatabaseConfig = Field(default_factory=DatabaseConfig)
    services: ServicesConfig = Field(default_factory=ServicesConfig)
    gateway: GatewayConfig = Field(default_factory=GatewayConfig)
    matching: MatchingConfig = Field(default_factory=MatchingConfig)
    llm: LlmConfig = Field(default_factory=LlmConfig)

    def service_url(self, key: str) -> str:
        """Resolve a ServicesConfig attribute name to its base URL."""
        if not hasattr(self.services, key):
            raise ValueError(f"Unknown service '{key}' in gateway route table")
        return getattr(self.services, key)


# env var -> (section, field, cast)
_ENV_OVERRIDES: Dict[str, tuple] = {
    "JWT_SECRET": ("auth", "jwt_secret", str),
    "DATABASE_URL": ("database", "url", str),
    "USER_SERVICE_URL": ("services", "user_service_url", str),
    "JOB_SERVICE_URL": ("services", "job_service_url", str),
    "RESUME_SERVICE_URL": ("services", "resume_service_url", str),
    "MATCH_SERVICE_URL": ("services", "match_service_url", str),
    "CANDIDATE_SERVICE_URL": ("services", "candidate_service_url", str),
    "GATEWAY_PORT": ("services", "gateway_port", int),
    "USER_SERVICE_PORT": ("services", "user_service_port", int),
    "MATCH_SERVICE_PORT": ("services", "match_service_port", int),
    "RATE_LIMIT": ("gateway", "rate_limit", str),
    "OPENAI_API_KEY": ("llm", "api_key", str),
    "OPENAI_BASE_URL": ("llm", "base_url", str),
    "AZURE_OPENAI_API_KEY": ("llm", "api_key", str),
    "AZURE_OPENAI_ENDPOINT": ("llm", "azure_endpoint", str),
    "AZURE_OPENAI_DEPLOYMENT_NAME": ("llm", "azure_deployment", str),
    "AZURE_OPENAI_API_VERSION": ("llm", "azure_api_version", str),
    "AZURE_OPENAI_MODEL": ("llm", "model", str),
}


def _apply_env_overrides(data: Dict[str, Any], environ=None) -> Dict[str, Any]:
    environ = os.environ if environ is None else environ
    for env_name, (section, field, cast) in _ENV_OVERRIDES.items():
        value = environ.get(env_name)
        if not value:
            continue
        if data.get(section) is None:
            data[section] = {}
        data[section][field] = cast(value)
    return data


def load_config(config_path: str = "config.yaml", environ=None) -> AppConfig:
    """Load config.yaml (if present) and apply environment overrides."""
    if not os.path.exists(config_path):
        base_dir = os.path.dirname(os.path.abspath(__file__))
        config_path = os.path.join(base_dir, "..", "config.yaml")

    data: Dict[str, Any] = {}
    if os.path.exists(config_path):
        with open(config_path, "r") as f:
            data = yaml.safe_load(f) or {}

    data = _apply_env_overrides(data, environ)
    return AppConfig(**data)


@lru_cache()
def get_config() -> AppConfig:
    """Process-wide configuration, loaded once."""
    return load_config(os.environ.get("TALENTMATCH_CONFIG", "config.yaml"))
