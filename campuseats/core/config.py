import os
from decimal import Decimal

# Database Configuration
# SQLite file by default; point DATABASE_URL at Postgres in deployment
DB_URL = os.getenv("DATABASE_URL", "sqlite://db.sqlite3")

# Application Metadata
PROJECT_NAME = "CampusEats"
VERSION = "1.0.0"
LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO").upper()

# Order lifecycle
DELIVERY_PAYOUT = Decimal(os.getenv("DELIVERY_PAYOUT", "50")) # Flat amount credited per delivered order

# Catalog
DEFAULT_OUTLET_RATING = float(os.getenv("DEFAULT_OUTLET_RATING", 4.0)) # Static rating for new outlets

# Notification feed
NOTIFICATION_FEED_LIMIT = int(os.getenv("NOTIFICATION_FEED_LIMIT", 20)) # Newest N notifications per fetch

# Mobile verification
OTP_TTL_SECONDS = int(os.getenv("OTP_TTL_SECONDS", 300))
