from __future__ import annotations

import os
import tempfile

import django


os.environ.setdefault("DJANGO_SECRET_KEY", "test-secret")
os.environ.setdefault("DJANGO_SETTINGS_MODULE", "backend.settings")
os.environ.setdefault("ECOTRACK_FAVORITES_DIR", tempfile.mkdtemp(prefix="ecotrack-favorites-"))

django.setup()
