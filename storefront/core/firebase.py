"""Firebase configuration and initialization"""

import json
import logging
from typing import Optional

import firebase_admin
from firebase_admin import credentials, firestore_async

from storefront.core.config import settings

logger = logging.getLogger(__name__)

# Initialized lazily by initialize_firebase()
firebase_app: Optional[firebase_admin.App] = None

def initialize_firebase() -> firebase_admin.App:
    """Initialize Firebase Admin SDK"""
    global firebase_app

    if firebase_app:
        return firebase_app

    # Try to load credentials from environment variable
    if settings.FIREBASE_CREDENTIALS_JSON:
        cred_dict = json.loads(settings.FIREBASE_CREDENTIALS_JSON)
        cred = credentials.Certificate(cred_dict)
    # Or from file path
    elif settings.FIREBASE_CREDENTIALS_PATH:
        cred = credentials.Certificate(settings.FIREBASE_CREDENTIALS_PATH)
    else:
        raise ValueError("Firebase credentials not configured")

    firebase_app = firebase_admin.initialize_app(cred)
    logger.info("Firebase Admin SDK initialized successfully")
    return firebase_app

def get_firestore_client():
    """Async Firestore client bound to the initialized app"""
    return firestore_async.client(app=initialize_firebase())
