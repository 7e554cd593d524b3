import os
import yaml
from mongodb_datasource.core.domain.settings import RuntimeSettings

def load_settings(path: str | None = None) -> RuntimeSettings:
    """
    Load runtime settings from a YAML file.
    Environment variables take precedence over the file.

    Args:
        path: Path to the YAML file. Defaults to MONGODB_DATASOURCE_CONFIG env var or "datasource.yaml".
    """
    if path is None:
        path = os.getenv("MONGODB_DATASOURCE_CONFIG", "datasource.yaml")

    config_data = {}

    if os.path.exists(path):
        try:
            with open(path, "r") as f:
                config_data = yaml.safe_load(f) or {}
        except Exception as e:
            raise RuntimeError(f"Failed to load configuration from {path}: {e}")

    if not isinstance(config_data, dict):
        raise RuntimeError(f"Failed to load configuration from {path}: expected a mapping")

    datasource = config_data["datasource"] = config_data.get("datasource") or {}
    json_data = datasource["jsonData"] = datasource.pop("jsonData", None) or datasource.pop("json_data", None) or {}

    if os.getenv("DATASOURCE_HOST_URL"):
        config_data["host_url"] = os.getenv("DATASOURCE_HOST_URL")

    if os.getenv("DATASOURCE_URL"):
        datasource["url"] = os.getenv("DATASOURCE_URL")

    if os.getenv("DATASOURCE_VARIANT"):
        datasource["variant"] = os.getenv("DATASOURCE_VARIANT")

    if os.getenv("MONGODB_URL"):
        json_data["mongodb_url"] = os.getenv("MONGODB_URL")

    if os.getenv("MONGODB_DB"):
        json_data["mongodb_db"] = os.getenv("MONGODB_DB")

    return RuntimeSettings(**config_data)
