import os
from datetime import timedelta
from decimal import Decimal
from dotenv import load_dotenv

load_dotenv()

class Config:
    """Base configuration shared across all environments."""
    SECRET_KEY = os.environ.get('SECRET_KEY', 'dev-secret-key-change-in-production')

    # Document store holding cart entries and orders
    STORE_API_URL = os.environ.get('STORE_API_URL', 'http://localhost:5000/api')
    STORE_TIMEOUT = float(os.environ.get('STORE_TIMEOUT', '10'))

    # Pricing / checkout policy
    TAX_RATE = Decimal('0.05')   # 5% GST, flat across the menu
    PAYMENT_METHOD_LABEL = 'Cash on Counter or UPI or Credit/Debit Card'

    # The guest token never expires; keep the cookie for a year
    SESSION_ID_KEY = 'sessionId'
    PERMANENT_SESSION_LIFETIME = timedelta(days=365)

    # Flash messages disappear after this many seconds
    FLASH_DISMISS_SECONDS = 3

class DevelopmentConfig(Config):
    """Development environment configuration."""
    DEBUG = True

class ProductionConfig(Config):
    """Production environment configuration."""
    DEBUG = False

    # Ensure SECRET_KEY is set
    SECRET_KEY = os.environ.get('SECRET_KEY')

    # Session Cookie Security
    SESSION_COOKIE_SECURE = True
    SESSION_COOKIE_HTTPONLY = True
    SESSION_COOKIE_SAMESITE = 'Lax'


class TestingConfig(Config):
    """Testing environment configuration."""
    TESTING = True
    SECRET_KEY = 'testing-secret'
    STORE_API_URL = 'http://store.invalid/api'
    STORE_TIMEOUT = 1
    SESSION_COOKIE_SECURE = False

config = {
    'development': DevelopmentConfig,
    'production': ProductionConfig,
    'testing': TestingConfig,
    'default': DevelopmentConfig
}
