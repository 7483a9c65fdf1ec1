import os
from dataclasses import dataclass, field
from typing import Dict, Mapping, Optional

from .models import AgentRole
from .pricing import DEFAULT_MODELS, PRICING, ModelPricing


@dataclass(frozen=True)
class Settings:
    api_key: Optional[str] = None
    gcp_project_id: Optional[str] = None
    gcp_region: str = "us-central1"
    models: Dict[AgentRole, str] = field(default_factory=lambda: dict(DEFAULT_MODELS))
    pricing: Mapping[str, ModelPricing] = field(default_factory=lambda: dict(PRICING))
    slack_webhook_url: Optional[str] = None
    reports_dir: str = "reports"

    @property
    def use_vertex(self) -> bool:
        return bool(self.gcp_project_id)

    def model_for(self, role: AgentRole) -> str:
        return self.models.get(role) or DEFAULT_MODELS[role]

    @staticmethod
    def from_env(env: Optional[Mapping[str, str]] = None) -> "Settings":
        env = os.environ if env is None else env

        api_key = (env.get("GEMINI_API_KEY") or env.get("API_KEY") or "").strip()
        project_id = env.get("GCP_PROJECT_ID", "").strip()
        region = env.get("GCP_REGION", "").strip() or "us-central1"
        if not api_key and not project_id:
            raise ValueError("Missing env: GEMINI_API_KEY (or GCP_PROJECT_ID for Vertex AI)")

        # GEMINI_MODEL overrides every stage, <ROLE>_MODEL overrides one stage
        global_model = env.get("GEMINI_MODEL", "").strip()
        models: Dict[AgentRole, str] = {}
        for role, default in DEFAULT_MODELS.items():
            per_role = env.get(f"{role.value}_MODEL", "").strip()
            models[role] = per_role or global_model or default

        webhook = env.get("SLACK_WEBHOOK_URL", "").strip()

        return Settings(
            api_key=api_key or None,
            gcp_project_id=project_id or None,
            gcp_region=region,
            models=models,
            slack_webhook_url=webhook or None,
            reports_dir=env.get("REPORTS_DIR", "").strip() or "reports",
        )
