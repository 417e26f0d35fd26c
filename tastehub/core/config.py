import os

# Database Configuration
# Uses default credentials for local Docker Compose setup
DB_URL = os.getenv("DATABASE_URL", "postgres://user:password@db:5432/tastehub_db")

# Application Metadata
PROJECT_NAME = os.getenv("PROJECT_NAME", "TasteHub Marketplace Server")
VERSION = os.getenv("VERSION", "1.0.0")

# Admin pool resolution
ADMIN_ROLE = os.getenv("ADMIN_ROLE", "admin")
FALLBACK_ADMIN_EMAIL = os.getenv("FALLBACK_ADMIN_EMAIL", "admin@tastehub.com")

# Chat
SEND_MESSAGE_ATTEMPTS = int(os.getenv("SEND_MESSAGE_ATTEMPTS", 3)) # Retries when a concurrent send collides on a unique key

# Error responses carry the original store error text when enabled
EXPOSE_ERROR_DETAILS = os.getenv("EXPOSE_ERROR_DETAILS", "true").lower() in ("1", "true", "yes")
