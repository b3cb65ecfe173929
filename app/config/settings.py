from pydantic import Field
from pydantic_settings import BaseSettings
from typing import List, Optional

class Settings(BaseSettings):
    # App Info
    app_name: str = "POS Sales API"
    version: str = "1.0.0"
    debug: bool = False
    log_level: str = "INFO"
    
    # Database
    database_url: str = "sqlite:///./pos.db"
    db_isolation_level: Optional[str] = None
    create_tables_on_startup: bool = False
    
    # CORS
    allowed_origins: List[str] = ["http://localhost:3000"]
    
    # Sales
    sale_commit_timeout: float = Field(
        default=30.0,
        gt=0,
        description="Maximum seconds a sale commit transaction may stay open"
    )
    receipt_prefix: str = Field(default="SAL", description="Prefix for generated receipt numbers")
    
    # Server
    host: str = "0.0.0.0"
    port: int = 8000
    
    class Config:
        env_file = ".env"
        case_sensitive = False

settings = Settings()
