import os


def _env_flag(name: str, default: bool = False) -> bool:
    value = os.getenv(name)
    if value is None:
        return default
    return value.strip().lower() in {"1", "true", "yes", "on"}


class Settings:
    def __init__(self):
        self.app_name = "Customer CRM"
        self.api_version = "1.0.0"
        self.environment = os.getenv("CRM_ENVIRONMENT", "development")
        self.store_backend = os.getenv("CRM_STORE_BACKEND", "sql").strip().lower()
        self.database_url = os.getenv("CRM_DATABASE_URL", "sqlite:///./crm.db")
        self.table_name = os.getenv("CRM_TABLE_NAME", "crm-table")
        self.index_name = os.getenv("CRM_INDEX_NAME", "gsi1")
        self.aws_region = os.getenv("AWS_REGION", "eu-west-1")
        self.dynamodb_endpoint = os.getenv("CRM_DYNAMODB_ENDPOINT") or None
        self.bucket_name = os.getenv("CRM_BUCKET_NAME", "crm-attachments")
        self.s3_endpoint = os.getenv("CRM_S3_ENDPOINT") or None
        self.presign_expiry_seconds = int(os.getenv("CRM_PRESIGN_EXPIRY", "300"))
        self.verify_attachments = _env_flag("CRM_VERIFY_ATTACHMENTS")
        self.log_level = os.getenv("CRM_LOG_LEVEL", "INFO").upper()
        self.cors_origins = [o.strip() for o in os.getenv("CRM_CORS_ORIGINS", "*").split(",") if o.strip()]


_settings_instance = None


def get_settings():
    """Return a singleton Settings instance."""
    global _settings_instance
    if _settings_instance is None:
        _settings_instance = Settings()
    return _settings_instance
