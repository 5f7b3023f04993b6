from pydantic_settings import BaseSettings, SettingsConfigDict
from pydantic import Field
from typing import Optional

class Settings(BaseSettings):
    model_config = SettingsConfigDict(
        case_sensitive = False, # Make environment variable names case-insensitive
        env_file = ".env", # Load environment variables from .env file, if available
        extra = "ignore", # Ignore any extra fields not defined in the model
    )

    # All env vars should be declared manually, never assume automatic behavior
    app_env: str = Field(validation_alias="APP_ENV", pattern=r'^(development|production)$', default="development")
    roster_admin_key: Optional[str] = Field(default=None, validation_alias="ROSTER_ADMIN_KEY")
    log_level: str = Field(validation_alias="LOG_LEVEL", default="INFO")

    # Database Connection String, PostgreSQL in deployment
    # NOTE: SQLite is only meant for local runs, uniqueness on reg_no is still enforced
    database_url: str = Field(validation_alias="DATABASE_URL", default="sqlite:///./roster.db")

    # Roster ingestion tuning
    upload_batch_size: int = Field(validation_alias="UPLOAD_BATCH_SIZE", default=100, gt=0)
    parse_error_limit: int = Field(validation_alias="PARSE_ERROR_LIMIT", default=10, gt=0)

settings = Settings()

# Column layouts for roster uploads
# Parse-only headers are matched exactly (case and spacing sensitive)
NAMES_REQUIRED_COLUMNS = ["Full Name", "Registration Number"]
STUDENTS_REQUIRED_COLUMNS = ["full_name", "reg_no", "department_id", "batch_id", "campus_id"]
STUDENTS_OPTIONAL_COLUMNS = ["email", "phone"]
# Name-resolving upload, department and batch are given by name
BULK_UPLOAD_REQUIRED_COLUMNS = ["Full Name", "Registration Number", "Department Name", "Batch Name"]
BULK_UPLOAD_OPTIONAL_COLUMNS = ["Email", "Phone"]

# Field caps, mirror the students table
FULL_NAME_MAX_LENGTH = 255
REG_NO_MAX_LENGTH = 50
