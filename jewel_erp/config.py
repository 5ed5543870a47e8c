import os

DB_URL = os.getenv("DB_URL", "sqlite:///./jewel_erp.db")
PDF_DIR = os.getenv("PDF_DIR", "generated")
LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO")
APP_TITLE = os.getenv("APP_TITLE", "Jewel ERP - Sales, Purchase & GST")
