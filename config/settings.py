"""
Configuration Settings for the Chronicler Client

This module centralizes all configuration settings for the client,
including environment variables, API endpoints, and application constants.
"""

import os
from pathlib import Path
from dotenv import load_dotenv

# Determine the application root directory
APP_ROOT = Path(__file__).resolve().parent.parent

# Load environment variables from .env file
load_dotenv(dotenv_path=os.path.join(APP_ROOT, '.env'))

# =============================================================================
# Remote API Settings
# =============================================================================

API_BASE_URL = os.getenv("CHRONICLER_API_URL", "http://localhost:3000/api/")
HTTP_TIMEOUT = float(os.getenv("CHRONICLER_HTTP_TIMEOUT", "15"))   # Seconds per request
USER_AGENT = "GrandChroniclerClient/1.0"
REQUEST_HEADERS = {
    'User-Agent': USER_AGENT,
    'Accept': 'application/json',
}

# =============================================================================
# Session Settings
# =============================================================================

SESSION_FILE = os.getenv("CHRONICLER_SESSION_FILE", os.path.join(APP_ROOT, "user_session.txt"))
NO_SESSION_USER_ID = -1              # Sentinel meaning "logged out"

# =============================================================================
# Listing Settings
# =============================================================================

ARTICLES_PAGE_SIZE = 20              # Page size expected from GET articles
LOAD_MORE_THRESHOLD = 4              # Prefetch when this close to the end of the list

# =============================================================================
# User-facing Messages
# =============================================================================

MESSAGES = {
    "no_connection": "No internet connection",
    "unexpected": "Unexpected error",
    "session_expired": "Session expired, please log in again",
    "load_articles_failed": "Failed to load articles",
    "search_failed": "Failed to search articles",
    "load_detail_failed": "Failed to load the article",
    "save_article_failed": "Failed to save article",
    "invalid_status": "Unknown article status",
    "delete_article_failed": "Failed to delete article",
    "article_deleted": "Article deleted",
    "title_required": "Title is required",
    "publish_requirements": "Category and content are required to publish",
    "category_required": "Category is required to publish",
    "content_required": "Content is required to publish",
    "login_fields_required": "Email and password must not be empty",
    "login_bad_credentials": "Incorrect email or password",
    "login_not_found": "Account not found",
    "login_failed": "Login failed",
    "register_fields_required": "Full name, email and password are required",
    "register_failed": "Registration failed",
    "profile_fields_required": "Name and email must not be empty",
    "load_profile_failed": "Failed to load profile",
    "update_profile_failed": "Failed to update profile",
    "delete_account_failed": "Failed to delete account",
}
