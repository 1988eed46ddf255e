import os
from dotenv import load_dotenv

load_dotenv()


class Config:
    SECRET_KEY = os.environ.get('SECRET_KEY') or 'dev-secret-key-change-in-production'
    DATABASE_URL = os.environ.get('DATABASE_URL') or 'sqlite:///credcheck.db'
    SQLALCHEMY_DATABASE_URI = DATABASE_URL

    # API Keys
    SENDGRID_API_KEY = os.environ.get('SENDGRID_API_KEY')
    SENDGRID_FROM_EMAIL = os.environ.get('SENDGRID_FROM_EMAIL', 'noreply@credcheck.io')

    # Application Settings
    APP_URL = os.environ.get('APP_URL', 'http://localhost:5000')
    CORS_ORIGINS = os.environ.get('CORS_ORIGINS', '*').split(',')
    NOTIFICATION_LIST_LIMIT = int(os.environ.get('NOTIFICATION_LIST_LIMIT', '50'))

    # Token Settings
    ACCESS_TOKEN_EXPIRE_MINUTES = 60 * 24  # 24 hours

    # Package prices (in dollars)
    PACKAGE_PRICES = {
        'basic': 29,
        'standard': 49,
        'comprehensive': 79
    }
    DEFAULT_PACKAGE_PRICE = 49

    # Credentials issued on completion
    DEFAULT_CREDENTIAL_EXPIRY_MONTHS = int(os.environ.get('DEFAULT_CREDENTIAL_EXPIRY_MONTHS', '12'))
    MAX_CREDENTIAL_EXPIRY_MONTHS = 1200
    MAX_SHARE_EXPIRY_DAYS = 3650
    ISSUER_DID = 'did:credcheck:platform'
    ISSUER_NAME = 'CredCheck Platform'

    # Logging
    LOG_FILE = os.environ.get('LOG_FILE', 'logs/credcheck.log')
    LOG_LEVEL = os.environ.get('LOG_LEVEL', 'INFO')


class DevelopmentConfig(Config):
    DEBUG = True
    TESTING = False


class TestingConfig(Config):
    DEBUG = True
    TESTING = True


class ProductionConfig(Config):
    DEBUG = False
    TESTING = False


config = {
    'development': DevelopmentConfig,
    'testing': TestingConfig,
    'production': ProductionConfig,
    'default': DevelopmentConfig
}
