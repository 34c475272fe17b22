# services/exam-service/src/apps/core/tests/test_config.py
"""
Settings Module Tests
"""

import importlib
import os
from unittest.mock import patch

from django.test import SimpleTestCase

from config.settings import base, production


class SettingsModuleTest(SimpleTestCase):
    """Tests for the environment settings modules."""

    def test_production_keeps_default_storage(self):
        """Test production defines both storage aliases."""
        self.assertIn('default', production.STORAGES)
        self.assertEqual(
            production.STORAGES['staticfiles']['BACKEND'],
            'whitenoise.storage.CompressedManifestStaticFilesStorage'
        )

    def test_selection_seed_unset_outside_tests(self):
        """Test the selection seed is not taken from the environment."""
        with patch.dict(os.environ, {'EXAM_SELECTION_SEED': '7'}):
            reloaded = importlib.reload(base)

        self.assertIsNone(reloaded.EXAM_GENERATION['SELECTION_SEED'])
        self.assertIsNone(production.EXAM_GENERATION['SELECTION_SEED'])
