from pydantic import BaseModel
import os
import logging
from pathlib import Path
from typing import List, Optional, Tuple

from .errors import ConfigError

logger = logging.getLogger(__name__)

# Load .env file if it exists (before reading os.getenv)
_env_path = Path(__file__).resolve().parent.parent / ".env"
if _env_path.exists():
    with open(_env_path) as f:
        for line in f:
            line = line.strip()
            if line and not line.startswith("#") and "=" in line:
                key, _, value = line.partition("=")
                key = key.strip()
                value = value.strip().strip('"').strip("'")
                # Only set if not already in environment (env vars take precedence)
                if key not in os.environ:
                    os.environ[key] = value


def _default_script_runner() -> str:
    return "powershell.exe" if os.name == "nt" else "pwsh"


def _split_prefixes(val: str) -> Tuple[str, ...]:
    return tuple(p.strip() for p in val.split(",") if p.strip())


class Settings(BaseModel):
    # Jira CLI
    jira_cli_path: str = os.getenv("JIRA_CLI_PATH", "jira")
    jira_config_file: str = os.getenv("JIRA_CONFIG_FILE", "")

    # Jira REST (basic auth); checked at first use, not at import
    jira_base_url: str = os.getenv("JIRA_BASE_URL", "").rstrip("/")
    jira_username: str = os.getenv("JIRA_USERNAME", "")
    jira_api_token: str = os.getenv("JIRA_API_TOKEN", "")

    # Reporting scripts, resolved against project_root
    project_root: str = os.getenv("PROJECT_ROOT", os.getcwd())
    script_runner: str = os.getenv("JIRA_SCRIPT_RUNNER", _default_script_runner())
    bug_report_script: str = os.getenv("JIRA_BUG_REPORT_SCRIPT", "Local/get-jira-bugs.ps1")
    recent_issues_script: str = os.getenv("JIRA_RECENT_ISSUES_SCRIPT", "Local/get-all-issues.ps1")

    # Dispatch limits
    call_timeout_ms: int = int(os.getenv("GATEWAY_CALL_TIMEOUT_MS", "60000"))
    max_output_bytes: int = int(os.getenv("GATEWAY_MAX_OUTPUT_BYTES", str(10 * 1024 * 1024)))
    max_concurrency: int = int(os.getenv("GATEWAY_MAX_CONCURRENCY", "8"))
    stderr_allow_prefixes: Tuple[str, ...] = _split_prefixes(os.getenv("GATEWAY_STDERR_ALLOW", "INF"))

    log_level: str = os.getenv("LOG_LEVEL", "INFO")

    def resolve_path(self, path: str) -> Path:
        """Resolve a possibly relative path against the project root."""
        p = Path(path)
        return p if p.is_absolute() else Path(self.project_root) / p

    def cli_config_file(self) -> Optional[str]:
        """jira-cli config file to export as JIRA_CONFIG_FILE, if any."""
        if self.jira_config_file:
            return str(self.resolve_path(self.jira_config_file))
        default = Path(self.project_root) / ".jira-config.yml"
        return str(default) if default.exists() else None

    def missing_rest_settings(self) -> List[str]:
        missing = []
        if not self.jira_base_url:
            missing.append("JIRA_BASE_URL")
        if not self.jira_username:
            missing.append("JIRA_USERNAME")
        if not self.jira_api_token:
            missing.append("JIRA_API_TOKEN")
        return missing

    def require_rest(self) -> None:
        """Raise ConfigError if the REST credentials are incomplete."""
        missing = self.missing_rest_settings()
        if missing:
            raise ConfigError(f"{', '.join(missing)} not set")


settings = Settings()

# Log config for debugging (never the token itself)
_token_hint = "***" + settings.jira_api_token[-4:] if len(settings.jira_api_token) > 4 else "EMPTY"
logger.info(f"Config: jira CLI → {settings.jira_cli_path}, project root {settings.project_root}")
logger.info(f"Config: REST → {settings.jira_base_url or 'UNSET'} as {settings.jira_username or 'UNSET'} (token={_token_hint})")
