from __future__ import annotations
import os

DRUPAL_REPO_URL = os.environ.get("DRUPALCI_DRUPAL_REPO", "http://git.drupal.org/project/drupal.git")
DRUPAL_BRANCH = os.environ.get("DRUPALCI_DRUPAL_BRANCH", "7.x")
DRUPAL_TAG = os.environ.get("DRUPALCI_DRUPAL_TAG", "tags/7.37")
CODER_PROJECT = os.environ.get("DRUPALCI_CODER_PROJECT", "coder-7.x-2.5")

DRUSH = os.environ.get("DRUPALCI_DRUSH", "drush")
GIT = os.environ.get("DRUPALCI_GIT", "git")

# Keep this much external tool output on a failure
OUTPUT_TAIL = int(os.environ.get("DRUPALCI_OUTPUT_TAIL", "4000"))
